"""Pattern token substitution.

Patterns are templates such as::

    [organisation]/[module]/[revision]/[artifact]-[revision](-[classifier]).[ext]

Tokens are written ``[name]``. A parenthesised section is optional: it is
dropped when any token inside it has no value, and kept (without the
parentheses) otherwise. Tokens without a value outside optional sections
are left untouched so callers can detect them.
"""
from __future__ import annotations

import re
from typing import Mapping

from ibiblio.core.resolver.models import Artifact, ModuleRevisionId

ORGANISATION_KEY = "organisation"
MODULE_KEY = "module"
REVISION_KEY = "revision"
ARTIFACT_KEY = "artifact"
TYPE_KEY = "type"
EXT_KEY = "ext"

_TOKEN_RE = re.compile(r"\[([A-Za-z0-9_.-]+)\]")
_OPTIONAL_RE = re.compile(r"\(([^()]*)\)")


def tokens_for(mrid: ModuleRevisionId, artifact: Artifact | None = None) -> dict[str, str]:
    """Build the token mapping for a module revision and optional artifact."""
    tokens = {
        ORGANISATION_KEY: mrid.organisation,
        MODULE_KEY: mrid.module,
        REVISION_KEY: mrid.revision,
    }
    if artifact is not None:
        tokens[ARTIFACT_KEY] = artifact.name
        tokens[TYPE_KEY] = artifact.type
        tokens[EXT_KEY] = artifact.ext
    return tokens


def substitute_tokens(pattern: str, tokens: Mapping[str, str | None]) -> str:
    """Replace ``[token]`` placeholders in ``pattern`` with ``tokens`` values."""

    def _token(match: re.Match[str]) -> str:
        value = tokens.get(match.group(1))
        return match.group(0) if value is None else str(value)

    def _optional(match: re.Match[str]) -> str:
        inner = match.group(1)
        names = _TOKEN_RE.findall(inner)
        if not names:
            return match.group(0)
        if any(not tokens.get(name) for name in names):
            return ""
        return _TOKEN_RE.sub(_token, inner)

    return _TOKEN_RE.sub(_token, _OPTIONAL_RE.sub(_optional, pattern))


def substitute(pattern: str, artifact: Artifact, mrid: ModuleRevisionId | None = None) -> str:
    """Substitute an artifact into a pattern.

    Args:
        pattern: Pattern with ``[token]`` placeholders
        artifact: Artifact supplying name, type and ext
        mrid: Revision id to use instead of the artifact's own

    Returns:
        The concrete path or URL
    """
    return substitute_tokens(pattern, tokens_for(mrid or artifact.module_revision_id, artifact))


def unresolved_tokens(text: str) -> list[str]:
    """Return token names still present in ``text``."""
    return _TOKEN_RE.findall(text)


def split_at_token(pattern: str, token: str) -> tuple[str, str] | None:
    """Split a pattern around the path segment holding ``token``.

    Returns:
        ``(prefix, segment)`` where prefix ends with ``/`` (or is empty), or
        None when the token does not appear in the pattern
    """
    marker = f"[{token}]"
    index = pattern.find(marker)
    if index < 0:
        return None
    start = pattern.rfind("/", 0, index) + 1
    end = pattern.find("/", index)
    segment = pattern[start:] if end < 0 else pattern[start:end]
    return pattern[:start], segment


def segment_regex(segment: str, token: str, tokens: Mapping[str, str | None]) -> re.Pattern[str]:
    """Compile a regex matching directory entries for one pattern segment.

    The listed ``token`` becomes a capture group; tokens with known values
    must match literally and unknown tokens match anything. Optional
    sections are not matched.
    """
    segment = _OPTIONAL_RE.sub(
        lambda m: "" if _TOKEN_RE.search(m.group(1)) else m.group(0), segment
    )
    parts: list[str] = []
    pos = 0
    captured = False
    for match in _TOKEN_RE.finditer(segment):
        parts.append(re.escape(segment[pos:match.start()]))
        name = match.group(1)
        value = tokens.get(name)
        if name == token and not captured:
            parts.append(f"(?P<{_group_name(token)}>[^/]+?)")
            captured = True
        elif name == token:
            parts.append(f"(?P={_group_name(token)})")
        elif value:
            parts.append(re.escape(value))
        else:
            parts.append("[^/]*?")
        pos = match.end()
    parts.append(re.escape(segment[pos:]))
    return re.compile("^" + "".join(parts) + "$")


def _group_name(token: str) -> str:
    return "value_" + re.sub(r"[^A-Za-z0-9_]", "_", token)


def match_token_value(regex: re.Pattern[str], token: str, entry: str) -> str | None:
    """Return the value of ``token`` in a directory entry, if it matches."""
    m = regex.match(entry)
    if m is None:
        return None
    return m.group(_group_name(token))


__all__ = [
    "ORGANISATION_KEY",
    "MODULE_KEY",
    "REVISION_KEY",
    "ARTIFACT_KEY",
    "TYPE_KEY",
    "EXT_KEY",
    "tokens_for",
    "substitute_tokens",
    "substitute",
    "unresolved_tokens",
    "split_at_token",
    "segment_regex",
    "match_token_value",
]
