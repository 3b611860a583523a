# SPDX-License-Identifier: MPL-2.0
#
# sharedir: share a directory safely over HTTP
# Copyright (C) 2019-2025 Aleksa Sarai <cyphar@cyphar.com>
# Copyright (C) 2019-2025 SUSE LLC
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# File: sharedir/policy.py
#
# Decides whether a resolved path may be served in the configured mode.

import enum
import os
import stat

from .errors import Unauthorized
from .paths import ResolvedPath


class FileKind(enum.Enum):
    FILE = "regular file"
    DIRECTORY = "directory"
    OTHER = "other"


def file_kind(st: os.stat_result) -> FileKind:
    return {
        stat.S_IFREG: FileKind.FILE,
        stat.S_IFDIR: FileKind.DIRECTORY,
    }.get(stat.S_IFMT(st.st_mode), FileKind.OTHER)


def is_allowed(resolved: ResolvedPath, kind: FileKind, root: str, recursive: bool) -> bool:
    """
    Return whether resolved (of the given kind) may be served.

    In recursive mode anything under the root is allowed. Otherwise only the
    root directory itself and the regular files directly inside it are.
    FIFOs, sockets and device nodes are never allowed.
    """
    if kind is FileKind.OTHER:
        return False
    if recursive:
        return True
    if kind is FileKind.DIRECTORY:
        return resolved.absolute == root
    return os.path.dirname(resolved.absolute) == root


def check_access(resolved: ResolvedPath, kind: FileKind, root: str, recursive: bool) -> None:
    if not is_allowed(resolved, kind, root, recursive):
        mode = "recursive" if recursive else "flat"
        raise Unauthorized(f"{kind.value} {resolved.relative!r} not shared in {mode} mode")
