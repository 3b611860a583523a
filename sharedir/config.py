# SPDX-License-Identifier: MPL-2.0
#
# sharedir: share a directory safely over HTTP
# Copyright (C) 2019-2025 Aleksa Sarai <cyphar@cyphar.com>
# Copyright (C) 2019-2025 SUSE LLC
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# File: sharedir/config.py
#
# Process-wide settings. A ShareConfig is built once at startup and handed to
# the application factory; it is never mutated afterwards.

import os
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 2022
ASSETS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "assets")


@dataclass(frozen=True)
class ShareConfig:
    root: str
    recursive: bool = False
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    assets_dir: str = ASSETS_DIR
    # Symlink-resolved root, used when re-checking the target of a link.
    real_root: str = field(default="", compare=False)

    def __post_init__(self):
        if not os.path.isabs(self.root):
            raise ValueError(f"root must be an absolute path: {self.root!r}")
        # "/data/" and "/data" must be the same root, or the root itself would
        # fail the containment check.
        object.__setattr__(self, "root", os.path.normpath(self.root))
        if not self.real_root:
            object.__setattr__(self, "real_root", os.path.realpath(self.root))

    @classmethod
    def from_directory(
        cls,
        directory: Optional[str] = None,
        *,
        recursive: bool = False,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        assets_dir: str = ASSETS_DIR,
    ) -> "ShareConfig":
        if directory is None:
            directory = os.getcwd()
        # Converting to an absolute path once makes every later containment
        # check a plain comparison against this value.
        root = os.path.abspath(os.path.expanduser(directory))
        if not os.path.isdir(root):
            raise NotADirectoryError(f"not a directory: {root}")
        return cls(
            root=root,
            recursive=recursive,
            host=host,
            port=port,
            assets_dir=assets_dir,
        )

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"
