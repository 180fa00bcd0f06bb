"""Resolver for the ibiblio Maven repository and similar mirrors.

The resolver decides which root and pattern to use and when to pull
defaults from the shared settings store; the actual URL substitution,
probing and fetching is delegated to a :class:`UrlResolver`.

Defaults are pulled lazily: until a root and a pattern are known, every
public operation first asks the settings store for
``ivy.ibiblio.default.artifact.root`` and
``ivy.ibiblio.default.artifact.pattern``. Without a settings store the
values stay unset and lookups simply find nothing.
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Mapping

from ibiblio.core.resolver import patterns as pat
from ibiblio.core.resolver.diagnostics import LoggingNotFoundLogger
from ibiblio.core.resolver.exceptions import InvalidArgumentError, UnsupportedOperationError
from ibiblio.core.resolver.interfaces import NotFoundLogger, SettingsStore, Transport
from ibiblio.core.resolver.m2 import artifact_to_maven2, to_maven2
from ibiblio.core.resolver.models import (
    Artifact,
    DependencyDescriptor,
    DownloadReport,
    LayoutMode,
    ModuleEntry,
    ModuleRevisionId,
    OrganisationEntry,
    ResolveData,
    ResolvedModuleRevision,
    ResolvedResource,
    RevisionEntry,
)
from ibiblio.core.resolver.url_resolver import UrlResolver
from ibiblio.core.utils.redaction import redact_url_credentials

logger = logging.getLogger(__name__)

DEFAULT_PATTERN = "[module]/[type]s/[artifact]-[revision].[ext]"
DEFAULT_ROOT = "http://www.ibiblio.org/maven/"
M2_ROOT = "http://www.ibiblio.org/maven2/"
M2_PATTERN = "[organisation]/[module]/[revision]/[artifact]-[revision].[ext]"

ROOT_VARIABLE = "ivy.ibiblio.default.artifact.root"
PATTERN_VARIABLE = "ivy.ibiblio.default.artifact.pattern"

TYPE_NAME = "ibiblio"


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _normalize_root(root: str | None) -> str | None:
    if root is None or root.endswith("/"):
        return root
    return root + "/"


class IBiblioResolver:
    """Read-only resolver for Maven-style HTTP repositories.

    Supports the legacy ibiblio layout (``[module]/[type]s/...``) and the
    Maven2 layout, where descriptors (POMs) are looked up next to the
    artifacts when ``use_poms`` is enabled.
    """

    def __init__(
        self,
        name: str = TYPE_NAME,
        *,
        settings: SettingsStore | None = None,
        delegate: UrlResolver | None = None,
        transport: Transport | None = None,
        not_found_logger: NotFoundLogger | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            name: Resolver name
            settings: Shared settings store used for lazy defaults
            delegate: URL resolver doing the substitution and fetching
            transport: Transport for a delegate created here
            not_found_logger: Receiver of descriptor-not-found diagnostics
        """
        self.name = name
        self.settings = settings
        self.delegate = delegate or UrlResolver(name, transport=transport)
        self.not_found_logger: NotFoundLogger = not_found_logger or LoggingNotFoundLogger(name)
        self._root: str | None = None
        self._pattern: str | None = None
        self._layout = LayoutMode.LEGACY
        self._use_poms = True
        self._lock = threading.RLock()

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        *,
        settings: SettingsStore | None = None,
        **kwargs: Any,
    ) -> IBiblioResolver:
        """Build a resolver from a configuration mapping.

        Recognised keys: ``name``, ``m2compatible``, ``usepoms``, ``root``,
        ``pattern``. The layout is applied first so an explicit root or
        pattern overrides the Maven2 defaults.
        """
        resolver = cls(str(config.get("name") or TYPE_NAME), settings=settings, **kwargs)
        if "m2compatible" in config:
            resolver.set_m2compatible(_as_bool(config["m2compatible"]))
        if "usepoms" in config:
            resolver.set_use_poms(_as_bool(config["usepoms"]))
        if config.get("root") is not None:
            resolver.set_root(str(config["root"]))
        if config.get("pattern") is not None:
            resolver.set_pattern(str(config["pattern"]))
        return resolver

    def get_type_name(self) -> str:
        return TYPE_NAME

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def root(self) -> str | None:
        return self._root

    @property
    def pattern(self) -> str | None:
        return self._pattern

    @property
    def layout(self) -> LayoutMode:
        return self._layout

    @property
    def is_m2compatible(self) -> bool:
        return self._layout is LayoutMode.MAVEN2

    @property
    def use_poms(self) -> bool:
        return self._use_poms

    @property
    def whole_pattern(self) -> str:
        return f"{self._root or ''}{self._pattern or ''}"

    def _descriptor_lookup_enabled(self) -> bool:
        return self.is_m2compatible and self._use_poms

    def ensure_configured(self, settings: SettingsStore | None) -> None:
        """Pull missing root and pattern defaults from ``settings``.

        No-op when ``settings`` is None or both values are already set.
        """
        if settings is None or (self._root is not None and self._pattern is not None):
            return
        with self._lock:
            if self._root is None:
                root = settings.get_variable(ROOT_VARIABLE)
                if root is None:
                    settings.load_default_repository_config(True)
                    root = settings.get_variable(ROOT_VARIABLE)
                self._root = _normalize_root(root)
                if self._root is None:
                    logger.debug("%s: no default root", self.name)
                else:
                    logger.debug("%s: default root %s", self.name, redact_url_credentials(self._root))
            if self._pattern is None:
                pattern = settings.get_variable(PATTERN_VARIABLE)
                if pattern is None:
                    settings.load_default_repository_config(False)
                    pattern = settings.get_variable(PATTERN_VARIABLE)
                self._pattern = pattern
                if pattern is None:
                    logger.debug("%s: no default pattern", self.name)
                else:
                    logger.debug("%s: default pattern %s", self.name, pattern)
            self._update_whole_pattern()

    def set_root(self, root: str | None) -> None:
        """Set the repository root URL.

        A trailing ``/`` is appended when missing.

        Raises:
            InvalidArgumentError: If ``root`` is None or empty
        """
        if not root:
            raise InvalidArgumentError("root must not be empty", context={"resolver": self.name})
        with self._lock:
            self._root = _normalize_root(root)
            self.ensure_configured(self.settings)
            self._update_whole_pattern()

    def set_pattern(self, pattern: str | None) -> None:
        """Set the artifact pattern, relative to the root.

        Raises:
            InvalidArgumentError: If ``pattern`` is None
        """
        if pattern is None:
            raise InvalidArgumentError("pattern must not be None", context={"resolver": self.name})
        with self._lock:
            self._pattern = pattern
            self.ensure_configured(self.settings)
            self._update_whole_pattern()

    def set_m2compatible(self, m2compatible: bool) -> None:
        self.set_layout(LayoutMode.MAVEN2 if m2compatible else LayoutMode.LEGACY)

    def set_layout(self, layout: LayoutMode) -> None:
        """Switch the repository layout.

        Switching to Maven2 replaces root and pattern with the Maven2
        defaults, discarding explicit values. Switching back to legacy keeps
        the current root and pattern.
        """
        with self._lock:
            self._layout = layout
            self.delegate.m2compatible = layout is LayoutMode.MAVEN2
            if layout is LayoutMode.MAVEN2:
                self._root = M2_ROOT
                self._pattern = M2_PATTERN
            self._update_whole_pattern()

    def set_use_poms(self, use_poms: bool) -> None:
        with self._lock:
            self._use_poms = use_poms
            self._update_whole_pattern()

    def _update_whole_pattern(self) -> None:
        # Until both root and pattern are known there is nothing to look up.
        if self._root is None or self._pattern is None:
            self.delegate.set_descriptor_patterns([])
            self.delegate.set_artifact_patterns([])
            return
        whole = self.whole_pattern
        self.delegate.set_descriptor_patterns([whole] if self._descriptor_lookup_enabled() else [])
        self.delegate.set_artifact_patterns([whole])

    def get_artifact_patterns(self) -> list[str]:
        self.ensure_configured(self.settings)
        return self.delegate.get_artifact_patterns()

    def get_descriptor_patterns(self) -> list[str]:
        return self.delegate.get_descriptor_patterns()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_descriptor_ref(
        self, dependency: DependencyDescriptor, data: ResolveData
    ) -> ResolvedResource | None:
        """Locate the POM of a dependency.

        Returns None unless the layout is Maven2 and POM lookup is enabled.
        """
        if not self._descriptor_lookup_enabled():
            return None
        mrid = to_maven2(dependency.dependency_revision_id)
        return self.delegate.find_resource_using_patterns(
            mrid,
            self.delegate.get_descriptor_patterns(),
            Artifact.new_pom(mrid, data.date),
            data.date,
        )

    def log_descriptor_not_found(self, mrid: ModuleRevisionId) -> None:
        if self._descriptor_lookup_enabled():
            self.not_found_logger.log_not_found(mrid, Artifact.new_pom(mrid))

    def find_artifact_ref(self, artifact: Artifact, date: datetime | None = None) -> ResolvedResource | None:
        self.ensure_configured(self.settings)
        return self.delegate.find_artifact_ref(artifact, date)

    def get_dependency(
        self, dependency: DependencyDescriptor, data: ResolveData
    ) -> ResolvedModuleRevision | None:
        """Resolve a dependency to its descriptor and main artifact.

        Without a descriptor the module is resolved from its ``jar`` alone;
        None is returned when neither can be found.
        """
        self.ensure_configured(data.settings)
        mrid = dependency.dependency_revision_id
        descriptor = self.find_descriptor_ref(dependency, data)
        if descriptor is None:
            self.log_descriptor_not_found(mrid)
        artifact = self.find_artifact_ref(Artifact.new_default(mrid, data.date), data.date)
        if descriptor is None and artifact is None:
            logger.info("%s: module not found: %s", self.name, mrid)
            return None
        return ResolvedModuleRevision(self.name, mrid, descriptor, artifact)

    def exists(self, artifact: Artifact) -> bool:
        self.ensure_configured(self.settings)
        return self.delegate.exists(artifact, self.find_artifact_ref)

    def download(
        self,
        artifacts: Iterable[Artifact],
        cache_dir: Path,
        use_origin: bool = False,
        settings: SettingsStore | None = None,
    ) -> DownloadReport:
        self.ensure_configured(settings or self.settings)
        return self.delegate.download(artifacts, cache_dir, use_origin, self.find_artifact_ref)

    def describe_candidates(self, artifact: Artifact) -> dict[str, list[str]]:
        """Return the URLs a lookup of ``artifact`` would try, without probing."""
        self.ensure_configured(self.settings)
        located = artifact_to_maven2(artifact) if self.is_m2compatible else artifact
        mrid = located.module_revision_id
        pom = Artifact.new_pom(mrid)
        return {
            "descriptor": [pat.substitute(p, pom) for p in self.delegate.get_descriptor_patterns()],
            "artifact": [pat.substitute(p, located) for p in self.delegate.get_artifact_patterns()],
        }

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_token_values(self, token: str, other_values: Mapping[str, str]) -> list[str]:
        """List values of ``token``.

        Organisations are never listed, and modules only in the Maven2
        layout.
        """
        if token == pat.ORGANISATION_KEY:
            return []
        if token == pat.MODULE_KEY and not self.is_m2compatible:
            return []
        self.ensure_configured(self.settings)
        return self.delegate.list_token_values(token, other_values)

    def list_organisations(self) -> list[OrganisationEntry]:
        return []

    def list_modules(self, org: OrganisationEntry) -> list[ModuleEntry]:
        if self.is_m2compatible:
            self.ensure_configured(self.settings)
            return self.delegate.list_modules(org)
        return []

    def list_revisions(self, module: ModuleEntry) -> list[RevisionEntry]:
        self.ensure_configured(self.settings)
        return self.delegate.list_revisions(module)

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    def publish(self, artifact: Artifact, source: Path, overwrite: bool = False) -> None:
        raise UnsupportedOperationError(
            f"publish not supported by {type(self).__name__}",
            context={"resolver": self.name},
        )


__all__ = [
    "IBiblioResolver",
    "DEFAULT_PATTERN",
    "DEFAULT_ROOT",
    "M2_ROOT",
    "M2_PATTERN",
    "ROOT_VARIABLE",
    "PATTERN_VARIABLE",
    "TYPE_NAME",
]
