"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --repo-root flag selecting the project holding ``.ibiblio/config``."""
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Project root holding .ibiblio/config (default: current directory)",
    )


def add_resolver_flags(parser: argparse.ArgumentParser) -> None:
    """Add flags configuring the resolver layout, root and pattern.

    Args:
        parser: ArgumentParser to add the flags to
    """
    parser.add_argument(
        "--m2",
        action="store_true",
        dest="m2compatible",
        help="Use the Maven2 repository layout",
    )
    parser.add_argument(
        "--no-poms",
        action="store_false",
        dest="usepoms",
        help="Do not look up POM descriptors in the Maven2 layout",
    )
    parser.add_argument("--root", help="Repository root URL")
    parser.add_argument("--pattern", help="Artifact pattern relative to the root")


def add_module_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("organisation", help="Organisation (e.g., org.example)")
    parser.add_argument("module", help="Module name")
    parser.add_argument("revision", help="Revision")


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    add_json_flag(parser)
    add_repo_root_flag(parser)
    add_resolver_flags(parser)


__all__ = [
    "add_json_flag",
    "add_repo_root_flag",
    "add_resolver_flags",
    "add_module_args",
    "add_standard_flags",
]
