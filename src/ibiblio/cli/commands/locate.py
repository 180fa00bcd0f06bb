"""
ibiblio locate command.

SUMMARY: Show candidate URLs for a module artifact
"""
from __future__ import annotations

import argparse

from ibiblio.cli import OutputFormatter, add_module_args, add_standard_flags, build_resolver

SUMMARY = "Show candidate URLs for a module artifact"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_module_args(parser)
    parser.add_argument("--artifact", help="Artifact name (default: module)")
    parser.add_argument("--type", dest="artifact_type", default="jar", help="Artifact type (default: jar)")
    parser.add_argument("--ext", help="Artifact extension (default: type)")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Probe the repository and report which candidates exist",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Print the descriptor and artifact URLs a lookup would try."""
    from ibiblio.core.resolver import Artifact, DependencyDescriptor, ModuleRevisionId, ResolveData

    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        resolver = build_resolver(args)
        mrid = ModuleRevisionId(args.organisation, args.module, args.revision)
        artifact = Artifact(
            mrid,
            args.artifact or args.module,
            args.artifact_type,
            args.ext or args.artifact_type,
        )
        candidates = resolver.describe_candidates(artifact)

        found: dict[str, str | None] = {}
        if args.check:
            descriptor = resolver.find_descriptor_ref(DependencyDescriptor(mrid), ResolveData(resolver.settings))
            located = resolver.find_artifact_ref(artifact)
            found = {
                "descriptor": descriptor.url if descriptor else None,
                "artifact": located.url if located else None,
            }

        if formatter.json_mode:
            data = {
                "module": str(mrid),
                "layout": resolver.layout.value,
                "candidates": candidates,
            }
            if args.check:
                data["found"] = found
            formatter.json_output(data)
        else:
            formatter.text(f"{mrid} ({resolver.layout.value} layout)")
            for kind in ("descriptor", "artifact"):
                for url in candidates[kind]:
                    formatter.text_kv(kind, url)
            if args.check:
                for kind, url in found.items():
                    formatter.text_kv(f"{kind} found", url or "no")

        return 0

    except Exception as e:
        formatter.error(e, error_code="locate_error")
        return 1
