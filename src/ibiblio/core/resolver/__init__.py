"""Maven-style repository resolver subsystem.

Key components:
- IBiblioResolver: choose root/pattern, lazily pull defaults, locate POMs and artifacts
- UrlResolver: substitute patterns, probe, download and list via a Transport
- RepositorySettings: shared variable store backed by bundled and project YAML
- UrlTransport: urllib transport for http(s):// and file:// repositories
"""
from __future__ import annotations

from ibiblio.core.resolver.exceptions import (
    InvalidArgumentError,
    ResolverError,
    SettingsError,
    TransportError,
    UnsupportedOperationError,
)
from ibiblio.core.resolver.ibiblio import (
    DEFAULT_PATTERN,
    DEFAULT_ROOT,
    M2_PATTERN,
    M2_ROOT,
    PATTERN_VARIABLE,
    ROOT_VARIABLE,
    IBiblioResolver,
)
from ibiblio.core.resolver.m2 import to_maven2
from ibiblio.core.resolver.models import (
    Artifact,
    ArtifactDownloadReport,
    DependencyDescriptor,
    DownloadReport,
    DownloadStatus,
    LayoutMode,
    ModuleEntry,
    ModuleRevisionId,
    OrganisationEntry,
    ResolveData,
    ResolvedModuleRevision,
    ResolvedResource,
    RevisionEntry,
)
from ibiblio.core.resolver.settings import RepositorySettings
from ibiblio.core.resolver.transport import UrlTransport
from ibiblio.core.resolver.url_resolver import UrlResolver

__all__ = [
    # Resolvers
    "IBiblioResolver",
    "UrlResolver",
    "RepositorySettings",
    "UrlTransport",
    "to_maven2",
    # Constants
    "DEFAULT_PATTERN",
    "DEFAULT_ROOT",
    "M2_PATTERN",
    "M2_ROOT",
    "PATTERN_VARIABLE",
    "ROOT_VARIABLE",
    # Models
    "Artifact",
    "ArtifactDownloadReport",
    "DependencyDescriptor",
    "DownloadReport",
    "DownloadStatus",
    "LayoutMode",
    "ModuleEntry",
    "ModuleRevisionId",
    "OrganisationEntry",
    "ResolveData",
    "ResolvedModuleRevision",
    "ResolvedResource",
    "RevisionEntry",
    # Exceptions
    "ResolverError",
    "InvalidArgumentError",
    "UnsupportedOperationError",
    "SettingsError",
    "TransportError",
]
