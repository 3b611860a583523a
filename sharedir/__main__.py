# SPDX-License-Identifier: MPL-2.0
#
# sharedir: share a directory safely over HTTP
# Copyright (C) 2019-2025 Aleksa Sarai <cyphar@cyphar.com>
# Copyright (C) 2019-2025 SUSE LLC
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# File: sharedir/__main__.py

from .cli import run

if __name__ == "__main__":
    run()
