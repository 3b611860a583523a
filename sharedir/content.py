# SPDX-License-Identifier: MPL-2.0
#
# sharedir: share a directory safely over HTTP
# Copyright (C) 2019-2025 Aleksa Sarai <cyphar@cyphar.com>
# Copyright (C) 2019-2025 SUSE LLC
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# File: sharedir/content.py
#
# Reading files and enumerating directories that the access policy allowed.

import mimetypes
import os
import posixpath
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Union
from urllib.parse import quote

import pathrs

from .errors import InternalError
from .paths import ResolvedPath

DEFAULT_MIMETYPE = "application/octet-stream"
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def guess_mimetype(path: str) -> str:
    """
    Guess the media type of path from its extension, assuming binary data
    when the extension is unknown.

    Only the final extension is looked at. Extensions that merely name a
    content encoding (".gz", ".bz2", ...) have no media type of their own, so
    they are also served as binary data.
    """
    ext = posixpath.splitext(path)[1]
    if ext:
        mimetype, encoding = mimetypes.guess_type("file" + ext.lower(), strict=False)
        if mimetype is not None and encoding is None:
            return mimetype
    return DEFAULT_MIMETYPE


def read_file(path: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise InternalError(f"read file: {e}") from e


def read_handle(handle) -> bytes:
    try:
        with handle.reopen("rb") as f:
            return f.read()
    except (OSError, pathrs.PathrsError) as e:
        raise InternalError(f"read file: {e}") from e


def entry_href(relative: str, name: str) -> str:
    if relative:
        name = posixpath.join(relative, name)
    return "/" + quote(name)


@dataclass(frozen=True)
class DirectoryEntry:
    name: str
    is_dir: bool
    # None for directories.
    size: Optional[int]
    mtime: datetime
    href: str

    @property
    def modified(self) -> str:
        return self.mtime.strftime(TIME_FORMAT)


def _entry_stat(dentry: os.DirEntry) -> os.stat_result:
    try:
        return dentry.stat()
    except OSError:
        # Dangling symlink: describe the link itself.
        return dentry.stat(follow_symlinks=False)


def list_directory(
    resolved: ResolvedPath, path: Optional[Union[str, int]] = None
) -> List[DirectoryEntry]:
    """
    Enumerate the immediate children of the directory at resolved.

    path is what is actually scanned, a path or an open directory fd
    (defaults to resolved.absolute). The links are built from
    resolved.relative. Entries come back in whatever order the filesystem
    yields them.
    """
    if path is None:
        path = resolved.absolute

    entries = []
    try:
        with os.scandir(path) as s:
            for dentry in s:
                st = _entry_stat(dentry)
                is_dir = dentry.is_dir()
                entries.append(
                    DirectoryEntry(
                        name=dentry.name,
                        is_dir=is_dir,
                        size=None if is_dir else st.st_size,
                        mtime=datetime.fromtimestamp(st.st_mtime),
                        href=entry_href(resolved.relative, dentry.name),
                    )
                )
    except OSError as e:
        raise InternalError(f"read dir: {e}") from e
    return entries


def parent_href(resolved: ResolvedPath) -> Optional[str]:
    if resolved.is_root:
        return None
    parent = posixpath.dirname(resolved.relative)
    return "/" + quote(parent)


def list_handle(resolved: ResolvedPath, handle) -> List[DirectoryEntry]:
    try:
        with handle.reopen_raw(os.O_RDONLY | os.O_DIRECTORY) as dirf:
            return list_directory(resolved, dirf.fileno())
    except (OSError, pathrs.PathrsError) as e:
        raise InternalError(f"read dir: {e}") from e
