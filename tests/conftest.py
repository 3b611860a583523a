# SPDX-License-Identifier: MPL-2.0
#
# sharedir: share a directory safely over HTTP
# Copyright (C) 2019-2025 Aleksa Sarai <cyphar@cyphar.com>
# Copyright (C) 2019-2025 SUSE LLC
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

import os

import pytest

from sharedir import ShareConfig, create_app

A_TXT = b"contents of a\n"
B_TXT = b"contents of b\n"
C_TXT = b"contents of c\n"
SECRET = b"do not serve me\n"


@pytest.fixture
def share_root(tmp_path):
    """
    Build a shared directory next to a sibling whose name shares its prefix:

        share/a.txt
        share/page.html
        share/blob.unknownext
        share/with space.txt
        share/sub/b.txt
        share/sub/deeper/c.txt
        share-secret/secret.txt
    """
    root = tmp_path / "share"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "a.txt").write_bytes(A_TXT)
    (root / "page.html").write_text("<p>hello</p>")
    (root / "blob.unknownext").write_bytes(b"\x00\x01\x02")
    (root / "with space.txt").write_bytes(b"spaced\n")
    (root / "sub" / "b.txt").write_bytes(B_TXT)
    (root / "sub" / "deeper" / "c.txt").write_bytes(C_TXT)

    sibling = tmp_path / "share-secret"
    sibling.mkdir()
    (sibling / "secret.txt").write_bytes(SECRET)
    return str(root)


def make_client(root, recursive, **kwargs):
    app = create_app(ShareConfig.from_directory(root, recursive=recursive, **kwargs))
    app.testing = True
    return app.test_client()


@pytest.fixture
def flat_client(share_root):
    return make_client(share_root, recursive=False)


@pytest.fixture
def recursive_client(share_root):
    return make_client(share_root, recursive=True)


@pytest.fixture
def outside_file(share_root):
    return os.path.join(os.path.dirname(share_root), "share-secret", "secret.txt")


@pytest.fixture
def client_factory():
    return make_client
