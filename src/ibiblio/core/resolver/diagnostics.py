"""Not-found diagnostics."""
from __future__ import annotations

import logging

from ibiblio.core.resolver.models import Artifact, ModuleRevisionId

logger = logging.getLogger(__name__)


class LoggingNotFoundLogger:
    """Report missing descriptors through the standard logging system."""

    def __init__(self, resolver_name: str, *, level: int = logging.INFO) -> None:
        self.resolver_name = resolver_name
        self.level = level

    def log_not_found(self, mrid: ModuleRevisionId, artifact: Artifact) -> None:
        logger.log(
            self.level,
            "%s: no %s found for %s (%s-%s.%s)",
            self.resolver_name,
            artifact.type,
            mrid,
            artifact.name,
            mrid.revision,
            artifact.ext,
        )


__all__ = ["LoggingNotFoundLogger"]
