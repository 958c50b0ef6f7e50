# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Command-line front end for zipper."""

import argparse
import logging
import shutil
import sys
from dataclasses import replace

from . import __version__
from .config import LOG_LEVELS, ZipperConfig
from .exceptions import ZipperError
from .factory import create_manager
from .session import Session

logger = logging.getLogger(__name__)

LOG_FORMAT = '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'

EXIT_OK = 0
EXIT_DIFFERENT = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="copilot-zipper",
        description="Fetch a local directory, an HTTP archive or a git repository as a zip file",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-t",
        "--type",
        default="",
        help="Handler to use (git, http or local); auto-detected when omitted",
    )
    parser.add_argument(
        "-k",
        "--insecure",
        action="store_true",
        help="Ignore certificate validation",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default: ZIPPER_LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    zip_parser = subparsers.add_parser("zip", aliases=["z"], help="Create a zip from a source")
    zip_parser.add_argument("source", help="Source path or URL")
    zip_parser.add_argument(
        "-o",
        "--output",
        default="content.zip",
        help="Where to write the zip file (- writes to stdout)",
    )
    zip_parser.set_defaults(func=cmd_zip)

    sha1_parser = subparsers.add_parser("sha1", aliases=["s"], help="Print the fingerprint of a source")
    sha1_parser.add_argument("source", help="Source path or URL")
    sha1_parser.set_defaults(func=cmd_sha1)

    diff_parser = subparsers.add_parser(
        "diff", help="Check if a source differs from a fingerprint stored from the sha1 command"
    )
    diff_parser.add_argument("source", help="Source path or URL")
    diff_parser.add_argument("stored_sha1", help="Fingerprint printed by an earlier sha1 command")
    diff_parser.set_defaults(func=cmd_diff)

    return parser


def cmd_zip(session: Session, args: argparse.Namespace) -> int:
    with session.zip() as archive:
        if args.output == "-":
            shutil.copyfileobj(archive, sys.stdout.buffer)
            sys.stdout.buffer.flush()
            return EXIT_OK
        with open(args.output, "wb") as f:
            shutil.copyfileobj(archive, f)
    print(f"Downloaded and zipped at {args.output}")
    return EXIT_OK


def cmd_sha1(session: Session, args: argparse.Namespace) -> int:
    sys.stdout.write(session.sha1())
    sys.stdout.flush()
    return EXIT_OK


def cmd_diff(session: Session, args: argparse.Namespace) -> int:
    changed, _, error = session.is_diff(args.stored_sha1)
    if error is not None:
        logger.error(f"Could not compare {args.source}: {error}")
        return EXIT_ERROR
    if changed:
        print("file from source is different")
        return EXIT_DIFFERENT
    print("no change from source")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Returns:
        0 on success or no change, 1 when ``diff`` finds a change, 2 on error
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = ZipperConfig.from_env()
    except ZipperError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    config = replace(
        config,
        insecure=config.insecure or args.insecure,
        log_level=args.log_level or config.log_level,
    )

    logging.basicConfig(level=config.log_level, format=LOG_FORMAT, stream=sys.stderr)

    try:
        manager = create_manager(config)
        session = manager.create_session(args.source, args.type)
        return args.func(session, args)
    except (ZipperError, OSError) as e:
        logger.error(str(e))
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
