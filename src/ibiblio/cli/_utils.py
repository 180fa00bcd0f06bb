"""Shared CLI utilities."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ibiblio.core.resolver import IBiblioResolver


def get_repo_root(args: argparse.Namespace) -> Path:
    """Get project root from args, defaulting to the current directory."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).resolve()
    return Path.cwd()


def build_resolver(args: argparse.Namespace) -> "IBiblioResolver":
    """Create a resolver configured from the standard resolver flags."""
    from ibiblio.core.resolver import IBiblioResolver, RepositorySettings

    settings = RepositorySettings(repo_root=get_repo_root(args))
    config: dict[str, Any] = {
        "m2compatible": getattr(args, "m2compatible", False),
        "usepoms": getattr(args, "usepoms", True),
        "root": getattr(args, "root", None),
        "pattern": getattr(args, "pattern", None),
    }
    return IBiblioResolver.from_config(config, settings=settings)


__all__ = ["get_repo_root", "build_resolver"]
