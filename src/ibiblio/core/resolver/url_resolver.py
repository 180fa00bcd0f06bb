"""Generic pattern-based URL resolver.

Turns artifacts into concrete URLs by substituting them into the active
pattern lists, probes the candidates through a :class:`Transport`, and
implements downloading and token listing on top of that.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional, Sequence

from ibiblio.core.resolver import patterns as pat
from ibiblio.core.resolver.exceptions import TransportError
from ibiblio.core.resolver.interfaces import Transport
from ibiblio.core.resolver.m2 import artifact_to_maven2
from ibiblio.core.resolver.models import (
    Artifact,
    ArtifactDownloadReport,
    DownloadReport,
    DownloadStatus,
    ModuleEntry,
    ModuleRevisionId,
    OrganisationEntry,
    ResolvedResource,
    RevisionEntry,
)
from ibiblio.core.resolver.transport import UrlTransport, local_path_for
from ibiblio.core.utils.redaction import redact_url_credentials

logger = logging.getLogger(__name__)

# Cache layout keeps the organisation in its original (dotted) form.
CACHE_PATTERN = "[organisation]/[module]/[revision]/[artifact]-[revision].[ext]"

ArtifactFinder = Callable[[Artifact, Optional[datetime]], Optional[ResolvedResource]]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UrlResolver:
    """Locate and fetch resources using ordered URL patterns.

    The resolver holds two pattern lists: descriptor patterns (for POM-like
    metadata) and artifact patterns. Owners push new lists whenever their
    configuration changes.
    """

    def __init__(self, name: str = "url", *, transport: Transport | None = None) -> None:
        """Initialize resolver.

        Args:
            name: Resolver name used in diagnostics and reports
            transport: Transport used to probe, fetch and list URLs
        """
        self.name = name
        self.transport: Transport = transport or UrlTransport()
        self.m2compatible = False
        self._artifact_patterns: list[str] = []
        self._descriptor_patterns: list[str] = []

    # ------------------------------------------------------------------
    # Patterns
    # ------------------------------------------------------------------

    def set_artifact_patterns(self, patterns: Iterable[str]) -> None:
        self._artifact_patterns = list(patterns)

    def get_artifact_patterns(self) -> list[str]:
        return list(self._artifact_patterns)

    def set_descriptor_patterns(self, patterns: Iterable[str]) -> None:
        self._descriptor_patterns = list(patterns)

    def get_descriptor_patterns(self) -> list[str]:
        return list(self._descriptor_patterns)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_resource_using_patterns(
        self,
        mrid: ModuleRevisionId,
        patterns: Sequence[str],
        artifact: Artifact,
        date: datetime | None = None,
    ) -> ResolvedResource | None:
        """Return the first candidate URL that exists.

        Args:
            mrid: Revision id substituted into the patterns
            patterns: Candidate patterns, tried in order
            artifact: Artifact supplying name, type and ext
            date: Ignore resources modified after this date

        Returns:
            The resolved resource, or None when no candidate exists
        """
        for pattern in patterns:
            url = pat.substitute(pattern, artifact, mrid)
            missing = pat.unresolved_tokens(url)
            if missing:
                logger.debug("%s: skipping %s, unresolved tokens %s", self.name, pattern, missing)
                continue
            info = self.transport.probe(url)
            if info is None:
                logger.debug("%s: tried %s", self.name, redact_url_credentials(url))
                continue
            if date is not None and info.last_modified is not None:
                if _as_utc(info.last_modified) > _as_utc(date):
                    logger.debug(
                        "%s: ignoring %s, modified %s after %s",
                        self.name,
                        redact_url_credentials(url),
                        info.last_modified.isoformat(),
                        date.isoformat(),
                    )
                    continue
            return ResolvedResource(
                url=url,
                revision=mrid.revision,
                size=info.size,
                last_modified=info.last_modified,
            )
        return None

    def find_artifact_ref(self, artifact: Artifact, date: datetime | None = None) -> ResolvedResource | None:
        if self.m2compatible:
            artifact = artifact_to_maven2(artifact)
        return self.find_resource_using_patterns(
            artifact.module_revision_id, self._artifact_patterns, artifact, date
        )

    def exists(self, artifact: Artifact, find_ref: ArtifactFinder | None = None) -> bool:
        finder = find_ref or self.find_artifact_ref
        return finder(artifact, None) is not None

    # ------------------------------------------------------------------
    # Download
    # ------------------------------------------------------------------

    def download(
        self,
        artifacts: Iterable[Artifact],
        cache_dir: Path,
        use_origin: bool = False,
        find_ref: ArtifactFinder | None = None,
    ) -> DownloadReport:
        """Download artifacts into ``cache_dir``.

        Artifacts already cached are reported with status NO. With
        ``use_origin``, artifacts served from ``file://`` URLs are used in
        place instead of being copied.

        Args:
            artifacts: Artifacts to download
            cache_dir: Cache root directory
            use_origin: Reference local origin files instead of copying them
            find_ref: Locator used to find each artifact

        Returns:
            Download report with one entry per artifact
        """
        finder = find_ref or self.find_artifact_ref
        report = DownloadReport()
        for artifact in artifacts:
            report.add(self._download_one(artifact, cache_dir, use_origin, finder))
        return report

    def _download_one(
        self,
        artifact: Artifact,
        cache_dir: Path,
        use_origin: bool,
        finder: ArtifactFinder,
    ) -> ArtifactDownloadReport:
        cached = cache_dir / pat.substitute(CACHE_PATTERN, artifact)
        if cached.exists():
            return ArtifactDownloadReport(artifact, DownloadStatus.NO, local_file=cached)

        ref = finder(artifact, None)
        if ref is None:
            logger.info("%s: artifact not found: %s", self.name, pat.substitute(CACHE_PATTERN, artifact))
            return ArtifactDownloadReport(artifact, DownloadStatus.FAILED, error="artifact not found")

        origin = local_path_for(ref.url) if use_origin else None
        if origin is not None:
            return ArtifactDownloadReport(artifact, DownloadStatus.SUCCESSFUL, local_file=origin)

        try:
            size = self.transport.fetch(ref.url, cached)
        except TransportError as exc:
            logger.warning("%s: download failed: %s", self.name, exc)
            return ArtifactDownloadReport(artifact, DownloadStatus.FAILED, error=str(exc))
        logger.debug("%s: downloaded %s (%d bytes)", self.name, redact_url_credentials(ref.url), size)
        return ArtifactDownloadReport(artifact, DownloadStatus.SUCCESSFUL, local_file=cached, size=size)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_token_values(self, token: str, other_values: Mapping[str, str]) -> list[str]:
        """List the values ``token`` takes in the repository.

        Only the path segment holding ``token`` is listed, so every token
        before it must be known from ``other_values``.
        """
        values = dict(other_values)
        org = values.get(pat.ORGANISATION_KEY)
        if self.m2compatible and org:
            values[pat.ORGANISATION_KEY] = org.replace(".", "/")

        found: set[str] = set()
        for pattern in self._artifact_patterns:
            split = pat.split_at_token(pattern, token)
            if split is None:
                continue
            prefix, segment = split
            # Segments followed by more path can only match directories.
            wants_dir = len(pattern) > len(prefix) + len(segment)
            prefix_url = pat.substitute_tokens(prefix, values)
            if pat.unresolved_tokens(prefix_url):
                continue
            entries = self.transport.list_dir(prefix_url)
            if entries is None:
                continue
            regex = pat.segment_regex(segment, token, values)
            for entry in entries:
                if wants_dir and not entry.endswith("/"):
                    continue
                value = pat.match_token_value(regex, token, entry.rstrip("/"))
                if value:
                    found.add(value)
        return sorted(found)

    def list_organisations(self) -> list[OrganisationEntry]:
        return [OrganisationEntry(o) for o in self.list_token_values(pat.ORGANISATION_KEY, {})]

    def list_modules(self, org: OrganisationEntry) -> list[ModuleEntry]:
        names = self.list_token_values(pat.MODULE_KEY, {pat.ORGANISATION_KEY: org.organisation})
        return [ModuleEntry(org, name) for name in names]

    def list_revisions(self, module: ModuleEntry) -> list[RevisionEntry]:
        revisions = self.list_token_values(
            pat.REVISION_KEY,
            {pat.ORGANISATION_KEY: module.organisation, pat.MODULE_KEY: module.module},
        )
        return [RevisionEntry(module, rev) for rev in revisions]


__all__ = ["UrlResolver", "CACHE_PATTERN", "ArtifactFinder"]
