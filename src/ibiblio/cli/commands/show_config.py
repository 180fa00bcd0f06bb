"""
ibiblio show-config command.

SUMMARY: Show the effective resolver configuration
"""
from __future__ import annotations

import argparse

from ibiblio.cli import OutputFormatter, add_standard_flags, build_resolver

SUMMARY = "Show the effective resolver configuration"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Show root, pattern, layout and settings variables."""
    from ibiblio.core.utils.redaction import redact_url_credentials

    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        resolver = build_resolver(args)
        patterns = resolver.get_artifact_patterns()
        variables = getattr(resolver.settings, "variables", None)
        data = {
            "type": resolver.get_type_name(),
            "root": redact_url_credentials(resolver.root) if resolver.root else None,
            "pattern": resolver.pattern,
            "layout": resolver.layout.value,
            "usepoms": resolver.use_poms,
            "artifact_patterns": [redact_url_credentials(p) for p in patterns],
            "descriptor_patterns": [redact_url_credentials(p) for p in resolver.get_descriptor_patterns()],
            "variables": (
                {k: redact_url_credentials(v) for k, v in variables().items()} if callable(variables) else {}
            ),
        }

        if formatter.json_mode:
            formatter.json_output(data)
        else:
            for key in ("type", "root", "pattern", "layout", "usepoms"):
                formatter.text_kv(key, data[key], prefix="")
            for pattern in data["artifact_patterns"]:
                formatter.text_kv("artifact pattern", pattern, prefix="")
            for pattern in data["descriptor_patterns"]:
                formatter.text_kv("descriptor pattern", pattern, prefix="")
            for name, value in sorted(data["variables"].items()):
                formatter.text_kv(name, value)
        return 0

    except Exception as e:
        formatter.error(e, error_code="show_config_error")
        return 1
