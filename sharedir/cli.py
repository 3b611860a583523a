# SPDX-License-Identifier: MPL-2.0
#
# sharedir: share a directory safely over HTTP
# Copyright (C) 2019-2025 Aleksa Sarai <cyphar@cyphar.com>
# Copyright (C) 2019-2025 SUSE LLC
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# File: sharedir/cli.py
#
# Command-line entry point: parse the arguments, build the configuration and
# run the threaded development server from Flask.

import argparse
import logging
import sys
from typing import Tuple

from .app import create_app
from .config import DEFAULT_HOST, DEFAULT_PORT, ShareConfig

logger = logging.getLogger("sharedir")

DESCRIPTION = "Quickly and safely share the content of a directory over HTTP."
DEFAULT_ADDRESS = f":{DEFAULT_PORT}"


def parse_address(address: str) -> Tuple[str, int]:
    """
    Parse a bind address of the form HOST:PORT, :PORT or PORT.

    An empty host means all interfaces. IPv6 hosts may be written in
    brackets ("[::1]:2022").
    """
    host, sep, port = address.rpartition(":")
    if not sep:
        host, port = "", address
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port_num = int(port)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port in address {address!r}")
    if not 0 <= port_num <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range in address {address!r}")
    return host or DEFAULT_HOST, port_num


def parse_args(
    args: Tuple[str, ...],
) -> Tuple[argparse.ArgumentParser, argparse.Namespace]:
    parser = argparse.ArgumentParser(prog="sharedir", description=DESCRIPTION)
    parser.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        help="recursive mode (also share subdirectories)",
    )
    parser.add_argument(
        "-a",
        "--address",
        metavar="ADDR",
        type=parse_address,
        default=parse_address(DEFAULT_ADDRESS),
        help=f"start HTTP server on this address (default: {DEFAULT_ADDRESS!r})",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="also log debug messages"
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=None,
        help="directory to share (default: current directory)",
    )
    return parser, parser.parse_args(args)


def main(*argv: str) -> int:
    parser, args = parse_args(argv)
    if args.directory == "help":
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(message)s",
    )

    host, port = args.address
    try:
        config = ShareConfig.from_directory(
            args.directory, recursive=args.recursive, host=host, port=port
        )
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if config.recursive:
        logger.info("sharing directory [%s] recursively", config.root)
    else:
        logger.info("sharing directory [%s]", config.root)

    app = create_app(config)
    logger.info("serving at %s", config.address)
    app.run(host=config.host, port=config.port, threaded=True)
    return 0


def run():
    sys.exit(main(*sys.argv[1:]))
