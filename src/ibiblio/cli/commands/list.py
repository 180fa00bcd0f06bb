"""
ibiblio list command.

SUMMARY: List organisations, modules or revisions in the repository
"""
from __future__ import annotations

import argparse

from ibiblio.cli import OutputFormatter, add_standard_flags, build_resolver

SUMMARY = "List organisations, modules or revisions in the repository"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument("token", choices=["organisations", "modules", "revisions"], help="What to list")
    parser.add_argument("organisation", nargs="?", help="Organisation (modules, revisions)")
    parser.add_argument("module", nargs="?", help="Module (revisions)")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """List repository entries."""
    from ibiblio.core.resolver import ModuleEntry, OrganisationEntry

    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        resolver = build_resolver(args)
        if args.token == "organisations":
            values = [o.organisation for o in resolver.list_organisations()]
        elif args.token == "modules":
            if not args.organisation:
                raise ValueError("listing modules requires an organisation")
            values = [m.module for m in resolver.list_modules(OrganisationEntry(args.organisation))]
        else:
            if not (args.organisation and args.module):
                raise ValueError("listing revisions requires an organisation and a module")
            module = ModuleEntry(OrganisationEntry(args.organisation), args.module)
            values = [r.revision for r in resolver.list_revisions(module)]

        if formatter.json_mode:
            formatter.json_output({"token": args.token, "values": values})
        else:
            if not values:
                formatter.text(f"No {args.token} found.")
            for value in values:
                formatter.text(value)
        return 0

    except Exception as e:
        formatter.error(e, error_code="list_error")
        return 1
