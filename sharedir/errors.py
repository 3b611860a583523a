# SPDX-License-Identifier: MPL-2.0
#
# sharedir: share a directory safely over HTTP
# Copyright (C) 2019-2025 Aleksa Sarai <cyphar@cyphar.com>
# Copyright (C) 2019-2025 SUSE LLC
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# File: sharedir/errors.py
#
# Failure kinds of the request pipeline. Each kind knows the HTTP status and
# the short public message it is answered with; the optional detail is only
# ever written to the log.

from typing import Optional


class ShareError(Exception):
    status_code: int = 500
    message: str = "server error"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.message)
        self.detail = detail

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class InvalidPath(ShareError):
    """The request path is malformed or cannot be decoded."""

    status_code = 400
    message = "invalid path"


class Unauthorized(ShareError):
    """The path resolves outside the root or the access policy denies it."""

    status_code = 401
    message = "unauthorized"


class NotFound(ShareError):
    status_code = 404
    message = "not found"


class InternalError(ShareError):
    """Reading or rendering failed after the request was authorized."""

    status_code = 500
    message = "server error"
