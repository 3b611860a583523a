# SPDX-License-Identifier: MPL-2.0
#
# sharedir: share a directory safely over HTTP
# Copyright (C) 2019-2025 Aleksa Sarai <cyphar@cyphar.com>
# Copyright (C) 2019-2025 SUSE LLC
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# File: sharedir/paths.py
#
# Turning an untrusted request path into a path inside the shared root.
#
# Resolution is first lexical: the decoded request path is joined onto the
# root and normalised, and the result must lie inside the root on a path
# component boundary. check_symlinks() then follows any links and re-checks
# the final target against the real root. Finally open_handle() resolves the
# path again through a pathrs.Root, which cannot leave the root even if the
# tree is being modified concurrently, and everything after that works on
# the returned handle.

import errno
import html
import os
import re
from dataclasses import dataclass
from urllib.parse import unquote

import pathrs

from .errors import InvalidPath, NotFound, Unauthorized

# A "%" that does not start a two digit hex escape.
BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass(frozen=True)
class ResolvedPath:
    # Absolute filesystem path. This must never be shown to a client.
    absolute: str
    # Path relative to the root, "/"-separated, "" for the root itself.
    relative: str

    @property
    def is_root(self) -> bool:
        return self.relative == ""


def root_prefix(root: str) -> str:
    # "/" already ends with a separator, adding another would make the
    # filesystem root contain nothing at all.
    if root.endswith(os.sep):
        return root
    return root + os.sep


def is_contained(candidate: str, root: str) -> bool:
    """
    Return whether candidate is root itself or lies below it.

    The comparison is done on whole path components, so that a root of
    "/data" accepts "/data/x" but neither "/data-secret" nor "/data2/x".
    """
    return candidate == root or candidate.startswith(root_prefix(root))


def decode_path(raw: str) -> str:
    """
    Decode the raw request target into a root-relative path string.

    Any query string is dropped, then a single leading "/" is stripped. HTML
    entities (numeric ones such as "&#46;" included) are unescaped before
    the percent-escapes are decoded. Percent-decoding is strict: a "%" not
    followed by two hex digits, or escapes that do not form valid UTF-8,
    raise InvalidPath.
    """
    raw = raw.split("?", 1)[0]
    if raw.startswith("/"):
        raw = raw[1:]
    raw = html.unescape(raw)
    if BAD_ESCAPE.search(raw):
        raise InvalidPath(f"malformed escape in {raw!r}")
    try:
        decoded = unquote(raw, errors="strict")
    except UnicodeDecodeError as e:
        raise InvalidPath(f"undecodable escape in {raw!r}") from e
    if "\x00" in decoded:
        raise InvalidPath(f"NUL byte in {raw!r}")
    return decoded


def resolve_path(raw: str, root: str) -> ResolvedPath:
    """
    Resolve a raw request path against root.

    Raises InvalidPath if the path cannot be decoded or normalised, and
    Unauthorized if the normalised path escapes the root.
    """
    decoded = decode_path(raw)

    # A decoded "/etc/passwd" is still taken relative to the root, the way
    # filepath.Join-style joining works, rather than replacing it.
    try:
        absolute = os.path.abspath(os.path.join(root, decoded.lstrip("/")))
    except ValueError as e:
        raise InvalidPath(f"cannot resolve {decoded!r}: {e}") from e

    if not is_contained(absolute, root):
        raise Unauthorized(f"{decoded!r} resolves outside the root")

    relative = ""
    if absolute != root:
        relative = absolute[len(root_prefix(root)) :]
        if os.sep != "/":
            relative = relative.replace(os.sep, "/")
    return ResolvedPath(absolute=absolute, relative=relative)


def check_symlinks(resolved: ResolvedPath, real_root: str) -> str:
    """
    Follow any symbolic links in resolved and return the final target.

    Links are allowed as long as the target is still inside the (symlink
    resolved) root. A link pointing anywhere else is Unauthorized, the same
    as a lexical escape.
    """
    target = os.path.realpath(resolved.absolute)
    if not is_contained(target, real_root):
        raise Unauthorized(f"{resolved.relative!r} links outside the root")
    return target


def open_handle(root: pathrs.Root, resolved: ResolvedPath):
    """
    Resolve resolved through the long-lived root handle and return the
    resulting pathrs handle.

    The stat, the read and the listing all go through this handle, so the
    inode that passed the checks is the one that gets served even if the
    tree is changed underneath us.
    """
    try:
        return root.resolve("/" + resolved.relative)
    except pathrs.PathrsError as e:
        error = {
            # Resolution tried to step outside the root.
            errno.EXDEV: Unauthorized,
        }.get(e.errno, NotFound)
        raise error(f"resolve {resolved.relative!r}: {e.message}") from e
