"""Maven2 coordinate conversion."""
from __future__ import annotations

from dataclasses import replace

from ibiblio.core.resolver.models import Artifact, ModuleRevisionId


def to_maven2(mrid: ModuleRevisionId) -> ModuleRevisionId:
    """Return ``mrid`` with its organisation in Maven2 path form.

    Example:
        >>> to_maven2(ModuleRevisionId("org.example", "lib", "1.0")).organisation
        'org/example'
    """
    if "." not in mrid.organisation:
        return mrid
    return replace(mrid, organisation=mrid.organisation.replace(".", "/"))


def artifact_to_maven2(artifact: Artifact) -> Artifact:
    """Return ``artifact`` attached to the Maven2 form of its revision id."""
    converted = to_maven2(artifact.module_revision_id)
    if converted is artifact.module_revision_id:
        return artifact
    return artifact.with_module_revision_id(converted)


__all__ = ["to_maven2", "artifact_to_maven2"]
