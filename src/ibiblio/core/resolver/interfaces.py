"""Collaborator protocols consumed by the resolver."""
from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from ibiblio.core.resolver.models import Artifact, ModuleRevisionId, ResourceInfo


@runtime_checkable
class SettingsStore(Protocol):
    """Shared variable store holding repository defaults."""

    def get_variable(self, name: str) -> str | None:
        """Return the value of ``name`` or None when unset."""
        ...

    def load_default_repository_config(self, for_publish: bool) -> None:
        """Install the default repository variables (idempotent)."""
        ...


@runtime_checkable
class NotFoundLogger(Protocol):
    """Receives diagnostics about descriptors that could not be located."""

    def log_not_found(self, mrid: ModuleRevisionId, artifact: Artifact) -> None:
        ...


@runtime_checkable
class Transport(Protocol):
    """Low-level access to repository resources addressed by URL."""

    def probe(self, url: str) -> ResourceInfo | None:
        """Return resource metadata, or None if the resource does not exist."""
        ...

    def fetch(self, url: str, dest: Path) -> int:
        """Copy the resource to ``dest`` and return the number of bytes written."""
        ...

    def list_dir(self, url: str) -> list[str] | None:
        """Return entry names under a directory URL, or None if not listable.

        Directory entries end with ``/``.
        """
        ...


__all__ = ["SettingsStore", "NotFoundLogger", "Transport"]
