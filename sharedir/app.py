# SPDX-License-Identifier: MPL-2.0
#
# sharedir: share a directory safely over HTTP
# Copyright (C) 2019-2025 Aleksa Sarai <cyphar@cyphar.com>
# Copyright (C) 2019-2025 SUSE LLC
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# File: sharedir/app.py
#
# The Flask application serving a ShareConfig. Every request goes through the
# same pipeline: resolve the request path inside the root, follow and
# re-check symlinks, open the target through the pathrs root handle, stat it,
# apply the access policy, then either send the file or render a listing, all
# through that one handle. Any failure along the way is raised as a
# ShareError and answered with a short plain-text message.

import os
from urllib.parse import quote, urlsplit

import flask
import jinja2
import pathrs
from flask import current_app, request
from werkzeug.exceptions import HTTPException

from .config import ShareConfig
from .content import guess_mimetype, list_handle, parent_href, read_file, read_handle
from .errors import InternalError, InvalidPath, NotFound, ShareError
from .paths import ResolvedPath, check_symlinks, open_handle, resolve_path
from .policy import FileKind, check_access, file_kind

ICON_NAME = "sharedir.ico"
LISTING_TEMPLATE = "listing.html"


def raw_request_path() -> str:
    """
    Return the request target as the client sent it, before any decoding.

    WSGI servers that expose the raw target (RAW_URI, REQUEST_URI) hand it
    over as latin-1 decoded bytes. Without one, the already-decoded path is
    quoted again so that it is decoded exactly once by the resolver. The
    characters of HTML entities are left alone so they still get unescaped.
    """
    environ = request.environ
    raw = environ.get("RAW_URI") or environ.get("REQUEST_URI")
    if raw is None:
        return quote(request.path, safe="/&;#")
    try:
        raw = raw.encode("latin-1").decode("utf-8")
    except UnicodeError as e:
        raise InvalidPath(f"request target is not UTF-8: {e}") from e
    if not raw.startswith("/"):
        # Absolute-form target ("http://host/path").
        raw = urlsplit(raw).path or "/"
    return raw


def plain_response(message: str, status: int, headers=None) -> flask.Response:
    return flask.Response(message, status=status, headers=headers, mimetype="text/plain")


def log_request():
    current_app.logger.info(
        "%s: %s - %s", request.method, request.remote_addr, request.full_path.rstrip("?")
    )


def file_response(data: bytes, name: str) -> flask.Response:
    # The media type is fixed when the response is built, before any of
    # the body is written out.
    response = flask.Response(data, mimetype=guess_mimetype(name))
    current_app.logger.debug("     served %d bytes", len(data))
    return response


def serve_dir(resolved: ResolvedPath, handle, recursive: bool) -> flask.Response:
    entries = list_handle(resolved, handle)
    try:
        body = flask.render_template(
            LISTING_TEMPLATE,
            dirname="/" + resolved.relative,
            entries=entries,
            parent=parent_href(resolved),
            recursive=recursive,
        )
    except jinja2.TemplateError as e:
        raise InternalError(f"render template: {e}") from e
    return flask.Response(body, mimetype="text/html")


def create_app(config: ShareConfig) -> flask.Flask:
    # No built-in static route: the only thing served from outside the root
    # is the icon below.
    app = flask.Flask(__name__, static_folder=None)
    app.config["SHAREDIR"] = config
    # Let the resolver see "//" exactly as sent instead of redirecting.
    app.url_map.merge_slashes = False

    # Open a root handle. This is long-lived.
    root = pathrs.Root(config.root)

    @app.route("/~favicon.ico")
    def favicon():
        log_request()
        data = read_file(os.path.join(config.assets_dir, ICON_NAME))
        return file_response(data, ICON_NAME)

    @app.route("/", defaults={"subpath": ""})
    @app.route("/<path:subpath>")
    def serve(subpath):
        log_request()

        resolved = resolve_path(raw_request_path(), config.root)
        check_symlinks(resolved, config.real_root)

        with open_handle(root, resolved) as handle:
            try:
                st = os.fstat(handle.fileno())
            except OSError as e:
                raise NotFound(f"stat target: {e.strerror}") from e

            kind = file_kind(st)
            check_access(resolved, kind, config.root, config.recursive)

            if kind is FileKind.DIRECTORY:
                return serve_dir(resolved, handle, config.recursive)
            return file_response(read_handle(handle), resolved.relative)

    @app.errorhandler(ShareError)
    def share_error(e: ShareError):
        if e.status_code >= 500:
            current_app.logger.error(
                "     %s %s - %s", request.method, request.path, e, exc_info=e
            )
        else:
            current_app.logger.info("     %s %s - %s", request.method, request.path, e)
        return plain_response(e.message, e.status_code)

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        current_app.logger.info("     %s %s - %s", request.method, request.path, e.name)
        headers = [(k, v) for k, v in e.get_headers() if k.lower() != "content-type"]
        return plain_response(e.name.lower(), e.code or 500, headers)

    @app.errorhandler(Exception)
    def unexpected_error(e: Exception):
        # One bad request must not take the server down with it.
        current_app.logger.exception(
            "     %s %s - unexpected error", request.method, request.path
        )
        return plain_response(InternalError.message, InternalError.status_code)

    return app
