"""Resolver data models.

Provides immutable dataclasses for module coordinates, artifacts and the
results handed back to the dependency-resolution engine.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ibiblio.core.resolver.interfaces import SettingsStore


class LayoutMode(str, Enum):
    """Repository path convention."""

    LEGACY = "legacy"
    MAVEN2 = "maven2"


@dataclass(frozen=True, slots=True)
class ModuleRevisionId:
    """Identifies one revision of a module.

    Attributes:
        organisation: Organisation (group) name, dotted or path form
        module: Module name
        revision: Revision string
    """

    organisation: str
    module: str
    revision: str

    def __str__(self) -> str:
        return f"{self.organisation}#{self.module};{self.revision}"

    @classmethod
    def parse(cls, text: str) -> ModuleRevisionId:
        """Parse ``org:module:revision`` (or ``org#module;revision``).

        Raises:
            ValueError: If the text does not have three non-empty parts
        """
        raw = text.strip()
        if "#" in raw and ";" in raw:
            org, rest = raw.split("#", 1)
            module, revision = rest.split(";", 1)
            parts = [org, module, revision]
        else:
            parts = raw.split(":")
        if len(parts) != 3 or not all(p.strip() for p in parts):
            raise ValueError(f"Invalid module revision id: {text!r}")
        return cls(*(p.strip() for p in parts))


@dataclass(frozen=True, slots=True)
class Artifact:
    """A file published for a module revision.

    Attributes:
        module_revision_id: Owning module revision
        name: Artifact name (usually the module name)
        type: Artifact type (``jar``, ``pom``, ``source`` ...)
        ext: File extension
        publication_date: Optional publication date hint
    """

    module_revision_id: ModuleRevisionId
    name: str
    type: str
    ext: str
    publication_date: datetime | None = None

    @classmethod
    def new_pom(cls, mrid: ModuleRevisionId, date: datetime | None = None) -> Artifact:
        """Create the descriptor artifact (``<module>.pom``) for a revision."""
        return cls(mrid, mrid.module, "pom", "pom", date)

    @classmethod
    def new_default(cls, mrid: ModuleRevisionId, date: datetime | None = None) -> Artifact:
        """Create the main ``jar`` artifact for a revision."""
        return cls(mrid, mrid.module, "jar", "jar", date)

    def with_module_revision_id(self, mrid: ModuleRevisionId) -> Artifact:
        return Artifact(mrid, self.name, self.type, self.ext, self.publication_date)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "organisation": self.module_revision_id.organisation,
            "module": self.module_revision_id.module,
            "revision": self.module_revision_id.revision,
            "artifact": self.name,
            "type": self.type,
            "ext": self.ext,
        }


@dataclass(frozen=True, slots=True)
class ResourceInfo:
    """What a transport learned about a remote resource."""

    url: str
    size: int | None = None
    last_modified: datetime | None = None


@dataclass(frozen=True, slots=True)
class ResolvedResource:
    """A located, fetchable resource.

    Attributes:
        url: Concrete URL of the resource
        revision: Revision the resource was resolved for
        size: Size in bytes if known
        last_modified: Last modification time if known
    """

    url: str
    revision: str
    size: int | None = None
    last_modified: datetime | None = None


@dataclass(frozen=True, slots=True)
class DependencyDescriptor:
    """A dependency declared by some module on ``dependency_revision_id``."""

    dependency_revision_id: ModuleRevisionId


@dataclass(frozen=True, slots=True)
class ResolveData:
    """Per-resolution context supplied by the resolution engine.

    Attributes:
        settings: Shared variable store, or None when unavailable
        date: Resolve "as of" this date; newer resources are ignored
    """

    settings: SettingsStore | None = None
    date: datetime | None = None


@dataclass(frozen=True, slots=True)
class ResolvedModuleRevision:
    """Outcome of a successful dependency lookup.

    ``descriptor`` is None when no POM was found and the module was
    resolved from its main artifact alone.
    """

    resolver_name: str
    module_revision_id: ModuleRevisionId
    descriptor: ResolvedResource | None
    artifact: ResolvedResource | None

    @property
    def is_default(self) -> bool:
        return self.descriptor is None


@dataclass(frozen=True, slots=True)
class OrganisationEntry:
    organisation: str


@dataclass(frozen=True, slots=True)
class ModuleEntry:
    organisation_entry: OrganisationEntry
    module: str

    @property
    def organisation(self) -> str:
        return self.organisation_entry.organisation


@dataclass(frozen=True, slots=True)
class RevisionEntry:
    module_entry: ModuleEntry
    revision: str


class DownloadStatus(str, Enum):
    """Per-artifact download outcome."""

    SUCCESSFUL = "successful"
    NO = "no"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ArtifactDownloadReport:
    """Result of downloading a single artifact.

    Attributes:
        artifact: Requested artifact
        status: SUCCESSFUL, NO (already cached) or FAILED
        local_file: Local path of the artifact when available
        size: Bytes written by this download
        error: Failure reason when status is FAILED
    """

    artifact: Artifact
    status: DownloadStatus
    local_file: Path | None = None
    size: int = 0
    error: str | None = None


@dataclass(slots=True)
class DownloadReport:
    """Aggregated result of a download request."""

    reports: list[ArtifactDownloadReport] = field(default_factory=list)

    def add(self, report: ArtifactDownloadReport) -> None:
        self.reports.append(report)

    def get_report(self, artifact: Artifact) -> ArtifactDownloadReport | None:
        for report in self.reports:
            if report.artifact == artifact:
                return report
        return None

    @property
    def failed(self) -> list[ArtifactDownloadReport]:
        return [r for r in self.reports if r.status is DownloadStatus.FAILED]

    @property
    def successful(self) -> bool:
        return not self.failed


__all__ = [
    "LayoutMode",
    "ModuleRevisionId",
    "Artifact",
    "ResourceInfo",
    "ResolvedResource",
    "DependencyDescriptor",
    "ResolveData",
    "ResolvedModuleRevision",
    "OrganisationEntry",
    "ModuleEntry",
    "RevisionEntry",
    "DownloadStatus",
    "ArtifactDownloadReport",
    "DownloadReport",
]
