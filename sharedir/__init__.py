# SPDX-License-Identifier: MPL-2.0
#
# sharedir: share a directory safely over HTTP
# Copyright (C) 2019-2025 Aleksa Sarai <cyphar@cyphar.com>
# Copyright (C) 2019-2025 SUSE LLC
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# File: sharedir/__init__.py
#
# Share the content of a directory over HTTP, without ever serving anything
# from outside of it.

from .app import create_app
from .config import ShareConfig
from .errors import InternalError, InvalidPath, NotFound, ShareError, Unauthorized
from .paths import ResolvedPath, is_contained, resolve_path
from .policy import FileKind, is_allowed

__all__ = [
    "create_app",
    "ShareConfig",
    "ShareError",
    "InvalidPath",
    "Unauthorized",
    "NotFound",
    "InternalError",
    "ResolvedPath",
    "resolve_path",
    "is_contained",
    "FileKind",
    "is_allowed",
]
