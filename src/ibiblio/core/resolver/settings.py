"""Shared repository variable store.

Default repository variables are layered from (highest to lowest priority):

1. Environment variables: ``IBIBLIO_<NAME>`` where ``<NAME>`` is the
   variable name upper-cased with ``.`` replaced by ``_``
2. Variables set explicitly with :meth:`RepositorySettings.set_variable`
3. Project config: ``<repo_root>/.ibiblio/config/repositories.yaml``
4. Bundled defaults: ``ibiblio.data/config/repositories.yaml``

Layers 3 and 4 are only read by :meth:`load_default_repository_config`,
which the resolver calls lazily the first time a default is missing.
"""
from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Any, Mapping

import jsonschema
import yaml

from ibiblio.core.resolver.exceptions import SettingsError
from ibiblio.core.utils.merge import deep_merge
from ibiblio.data import get_data_path, read_yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "IBIBLIO_"
CONFIG_FILENAME = "repositories.yaml"
SCHEMA_FILENAME = "repositories.schema.yaml"


def env_key(name: str) -> str:
    """Return the environment variable overriding ``name``."""
    return ENV_PREFIX + name.upper().replace(".", "_").replace("-", "_")


class RepositorySettings:
    """Variable store backing the resolver's lazy defaults.

    Thread-safe: variables may be read while another thread loads defaults.
    """

    def __init__(
        self,
        repo_root: Path | None = None,
        variables: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize settings.

        Args:
            repo_root: Project root holding an optional ``.ibiblio/config``
            variables: Initial variables, taking precedence over YAML defaults
        """
        self.repo_root = repo_root
        self._variables: dict[str, str] = dict(variables or {})
        self._loaded: set[bool] = set()
        self._lock = threading.RLock()

    @property
    def project_config_path(self) -> Path | None:
        if self.repo_root is None:
            return None
        return self.repo_root / ".ibiblio" / "config" / CONFIG_FILENAME

    def get_variable(self, name: str) -> str | None:
        override = os.environ.get(env_key(name))
        if override:
            return override
        with self._lock:
            return self._variables.get(name)

    def set_variable(self, name: str, value: str) -> None:
        with self._lock:
            self._variables[name] = value

    def variables(self) -> dict[str, str]:
        """Return a snapshot of all variables with environment overrides applied."""
        with self._lock:
            names = list(self._variables)
        return {name: self.get_variable(name) or "" for name in names}

    def load_default_repository_config(self, for_publish: bool) -> None:
        """Install default repository variables that are not already set.

        Idempotent per ``for_publish`` flag. The ``resolve`` section is always
        installed; the ``publish`` section only when ``for_publish`` is true.

        Raises:
            SettingsError: If a settings file is malformed or fails validation
        """
        with self._lock:
            if for_publish in self._loaded:
                return
            document = self._load_document()
            sections = document.get("repositories") or {}
            defaults: dict[str, Any] = dict(sections.get("resolve") or {})
            if for_publish:
                defaults.update(sections.get("publish") or {})
            installed = []
            for name, value in defaults.items():
                if name not in self._variables:
                    self._variables[name] = str(value)
                    installed.append(name)
            self._loaded.add(for_publish)
        logger.debug(
            "Loaded default repository config (publish=%s): %s",
            for_publish,
            ", ".join(sorted(installed)) or "nothing new",
        )

    def _load_document(self) -> dict[str, Any]:
        document = read_yaml("config", CONFIG_FILENAME)
        project_path = self.project_config_path
        if project_path is not None and project_path.exists():
            document = deep_merge(document, self._read_project_yaml(project_path))
        self._validate(document)
        return document

    def _read_project_yaml(self, path: Path) -> dict[str, Any]:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise SettingsError(
                f"Cannot read repository settings {path}: {exc}",
                context={"path": str(path)},
            ) from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SettingsError(
                f"Repository settings {path} must be a mapping",
                context={"path": str(path)},
            )
        return data

    def _validate(self, document: dict[str, Any]) -> None:
        schema = yaml.safe_load(get_data_path("schemas", SCHEMA_FILENAME).read_text(encoding="utf-8"))
        validator = jsonschema.Draft202012Validator(schema)
        errors = sorted(validator.iter_errors(document), key=lambda e: list(e.path))
        if errors:
            first = errors[0]
            location = "/".join(str(p) for p in first.path) or "<root>"
            raise SettingsError(
                f"Invalid repository settings at {location}: {first.message}",
                context={"errors": [e.message for e in errors]},
            )


__all__ = ["RepositorySettings", "env_key", "ENV_PREFIX"]
