#!/usr/bin/env python3
"""
Recovery Tree Tool - CLI Entry Point
====================================

Usage:
    python -m restore_tree -c filelist.txt ./recovered
    python -m restore_tree --verify filelist.txt ./recovered
"""

import argparse
import sys
from pathlib import Path

from . import __version__
from .listing import ParsedListing, load_listing
from .reconcile import DirectoryCreationError, run_create, verify_tree
from .utils import configure_logging, console, print_error, print_header, print_report_table

EPILOG = """\
Modes:
  -c, --create    Create directory structure from the listing
  -v, --verify    Verify recovered files against the listing

Examples:
  restore-tree -c filelist.txt ./recovered
  restore-tree --verify filelist.txt ./recovered
"""


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser whose usage errors end the process with status 1."""

    def error(self, message):
        print_error(message)
        console.print()
        self.print_help()
        self.exit(1)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="restore-tree",
        description="Recreate or verify a directory tree from a DMDE file listing",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("-c", "--create", dest="mode", action="store_const", const="create",
                      help="Create the listed directories under the target directory")
    mode.add_argument("-v", "--verify", dest="mode", action="store_const", const="verify",
                      help="Verify the target directory against the listing")
    parser.add_argument("listing", type=Path, help="Path to the DMDE file listing")
    parser.add_argument("target", type=Path,
                        help="Directory to create the structure in / verify against")
    parser.add_argument("--debug", action="store_true",
                        help="Show diagnostic log messages")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _load(path: Path) -> ParsedListing | None:
    try:
        return load_listing(path)
    except OSError as e:
        print_error(f"Could not read listing {path}: {e}")
        return None


def cmd_create(args) -> int:
    """Create command - build the listed directory tree."""
    listing = _load(args.listing)
    if listing is None:
        return 1

    print_header("CREATE MODE", f"Listing: {args.listing}\nTarget: {args.target}")
    try:
        report = run_create(listing, args.target)
    except DirectoryCreationError as e:
        print_error(str(e))
        return 1

    print_report_table(report)
    return report.status.exit_code


def cmd_verify(args) -> int:
    """Verify command - compare the target tree with the listing."""
    listing = _load(args.listing)
    if listing is None:
        return 1

    print_header("VERIFY MODE", f"Listing: {args.listing}\nTarget: {args.target}")
    report = verify_tree(listing, args.target)
    return report.status.exit_code


COMMANDS = {
    "create": cmd_create,
    "verify": cmd_verify,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.debug)

    try:
        return COMMANDS[args.mode](args)
    except KeyboardInterrupt:
        print("\n[ABORT] Operation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
