"""Tests for the repository variable store."""
from __future__ import annotations

from pathlib import Path

import pytest

ROOT_VAR = "ivy.ibiblio.default.artifact.root"
PATTERN_VAR = "ivy.ibiblio.default.artifact.pattern"


def write_project_config(repo_root: Path, content: str) -> Path:
    path = repo_root / ".ibiblio" / "config" / "repositories.yaml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    from ibiblio.core.resolver.settings import env_key

    for name in (ROOT_VAR, PATTERN_VAR):
        monkeypatch.delenv(env_key(name), raising=False)


class TestDefaults:
    def test_variables_unset_until_loaded(self, tmp_path) -> None:
        from ibiblio.core.resolver.settings import RepositorySettings

        settings = RepositorySettings(repo_root=tmp_path)

        assert settings.get_variable(ROOT_VAR) is None

    def test_bundled_defaults(self, tmp_path) -> None:
        from ibiblio.core.resolver.settings import RepositorySettings

        settings = RepositorySettings(repo_root=tmp_path)
        settings.load_default_repository_config(False)

        assert settings.get_variable(ROOT_VAR) == "http://www.ibiblio.org/maven/"
        assert settings.get_variable(PATTERN_VAR) == "[module]/[type]s/[artifact]-[revision].[ext]"

    def test_no_repo_root_uses_bundled_defaults(self) -> None:
        from ibiblio.core.resolver.settings import RepositorySettings

        settings = RepositorySettings()
        settings.load_default_repository_config(True)

        assert settings.project_config_path is None
        assert settings.get_variable(ROOT_VAR) == "http://www.ibiblio.org/maven/"

    def test_project_config_overrides_bundled(self, tmp_path) -> None:
        from ibiblio.core.resolver.settings import RepositorySettings

        write_project_config(
            tmp_path,
            "repositories:\n  resolve:\n    ivy.ibiblio.default.artifact.root: https://mirror.example/maven/\n",
        )
        settings = RepositorySettings(repo_root=tmp_path)
        settings.load_default_repository_config(False)

        assert settings.get_variable(ROOT_VAR) == "https://mirror.example/maven/"
        assert settings.get_variable(PATTERN_VAR) == "[module]/[type]s/[artifact]-[revision].[ext]"

    def test_explicit_variables_win_over_defaults(self, tmp_path) -> None:
        from ibiblio.core.resolver.settings import RepositorySettings

        settings = RepositorySettings(repo_root=tmp_path, variables={ROOT_VAR: "http://explicit/"})
        settings.load_default_repository_config(False)

        assert settings.get_variable(ROOT_VAR) == "http://explicit/"

    def test_environment_overrides_everything(self, tmp_path, monkeypatch) -> None:
        from ibiblio.core.resolver.settings import RepositorySettings, env_key

        monkeypatch.setenv(env_key(ROOT_VAR), "http://from-env/")
        settings = RepositorySettings(repo_root=tmp_path, variables={ROOT_VAR: "http://explicit/"})

        assert env_key(ROOT_VAR) == "IBIBLIO_IVY_IBIBLIO_DEFAULT_ARTIFACT_ROOT"
        assert settings.get_variable(ROOT_VAR) == "http://from-env/"
        assert settings.variables()[ROOT_VAR] == "http://from-env/"

    def test_publish_section_only_for_publish(self, tmp_path) -> None:
        from ibiblio.core.resolver.settings import RepositorySettings

        write_project_config(
            tmp_path,
            "repositories:\n  publish:\n    ivy.ibiblio.publish.root: http://publish.example/\n",
        )

        settings = RepositorySettings(repo_root=tmp_path)
        settings.load_default_repository_config(False)
        assert settings.get_variable("ivy.ibiblio.publish.root") is None

        settings.load_default_repository_config(True)
        assert settings.get_variable("ivy.ibiblio.publish.root") == "http://publish.example/"

    def test_load_is_idempotent(self, tmp_path) -> None:
        from ibiblio.core.resolver.settings import RepositorySettings

        settings = RepositorySettings(repo_root=tmp_path)
        settings.load_default_repository_config(False)
        settings.set_variable(ROOT_VAR, "http://changed/")

        settings.load_default_repository_config(False)

        assert settings.get_variable(ROOT_VAR) == "http://changed/"


class TestInvalidConfig:
    def test_unparseable_yaml(self, tmp_path) -> None:
        from ibiblio.core.resolver.exceptions import SettingsError
        from ibiblio.core.resolver.settings import RepositorySettings

        path = write_project_config(tmp_path, "repositories: [unclosed\n")

        with pytest.raises(SettingsError) as excinfo:
            RepositorySettings(repo_root=tmp_path).load_default_repository_config(False)

        assert excinfo.value.context["path"] == str(path)

    def test_non_mapping_document(self, tmp_path) -> None:
        from ibiblio.core.resolver.exceptions import SettingsError
        from ibiblio.core.resolver.settings import RepositorySettings

        write_project_config(tmp_path, "- just\n- a list\n")

        with pytest.raises(SettingsError, match="must be a mapping"):
            RepositorySettings(repo_root=tmp_path).load_default_repository_config(False)

    def test_schema_violation(self, tmp_path) -> None:
        from ibiblio.core.resolver.exceptions import SettingsError
        from ibiblio.core.resolver.settings import RepositorySettings

        write_project_config(tmp_path, "repositories:\n  resolve:\n    some.var: [1, 2]\n")

        with pytest.raises(SettingsError) as excinfo:
            RepositorySettings(repo_root=tmp_path).load_default_repository_config(False)

        assert "repositories/resolve/some.var" in str(excinfo.value)
        assert excinfo.value.to_json_error()["code"] == "SettingsError"

    def test_unknown_section_rejected(self, tmp_path) -> None:
        from ibiblio.core.resolver.exceptions import SettingsError
        from ibiblio.core.resolver.settings import RepositorySettings

        write_project_config(tmp_path, "repositories:\n  mirror:\n    a: b\n")

        with pytest.raises(SettingsError):
            RepositorySettings(repo_root=tmp_path).load_default_repository_config(False)

    def test_empty_project_file_is_ignored(self, tmp_path) -> None:
        from ibiblio.core.resolver.settings import RepositorySettings

        write_project_config(tmp_path, "")
        settings = RepositorySettings(repo_root=tmp_path)
        settings.load_default_repository_config(False)

        assert settings.get_variable(ROOT_VAR) == "http://www.ibiblio.org/maven/"


class TestResolverIntegration:
    def test_resolver_pulls_bundled_defaults(self, tmp_path) -> None:
        from helpers.fakes import FakeTransport

        from ibiblio.core.resolver.ibiblio import DEFAULT_PATTERN, DEFAULT_ROOT, IBiblioResolver
        from ibiblio.core.resolver.settings import RepositorySettings

        resolver = IBiblioResolver(settings=RepositorySettings(repo_root=tmp_path), transport=FakeTransport())

        assert resolver.get_artifact_patterns() == [DEFAULT_ROOT + DEFAULT_PATTERN]

    def test_resolver_follows_environment(self, tmp_path, monkeypatch) -> None:
        from helpers.fakes import FakeTransport

        from ibiblio.core.resolver.ibiblio import IBiblioResolver
        from ibiblio.core.resolver.settings import RepositorySettings, env_key

        monkeypatch.setenv(env_key(ROOT_VAR), "http://env.example/repo/")
        monkeypatch.setenv(env_key(PATTERN_VAR), "[module]/[artifact]-[revision].[ext]")
        resolver = IBiblioResolver(settings=RepositorySettings(repo_root=tmp_path), transport=FakeTransport())

        assert resolver.get_artifact_patterns() == ["http://env.example/repo/[module]/[artifact]-[revision].[ext]"]

    def test_satisfies_settings_store_protocol(self, tmp_path) -> None:
        from ibiblio.core.resolver.interfaces import SettingsStore
        from ibiblio.core.resolver.settings import RepositorySettings

        assert isinstance(RepositorySettings(repo_root=tmp_path), SettingsStore)

    def test_resolver_normalizes_environment_root(self, tmp_path, monkeypatch) -> None:
        from helpers.fakes import FakeTransport

        from ibiblio.core.resolver.ibiblio import DEFAULT_PATTERN, IBiblioResolver
        from ibiblio.core.resolver.settings import RepositorySettings, env_key

        monkeypatch.setenv(env_key(ROOT_VAR), "http://mirror.example/maven")
        resolver = IBiblioResolver(settings=RepositorySettings(repo_root=tmp_path), transport=FakeTransport())

        assert resolver.get_artifact_patterns() == ["http://mirror.example/maven/" + DEFAULT_PATTERN]

    def test_resolver_normalizes_project_root(self, tmp_path) -> None:
        from helpers.fakes import FakeTransport

        from ibiblio.core.resolver.ibiblio import IBiblioResolver
        from ibiblio.core.resolver.settings import RepositorySettings

        write_project_config(
            tmp_path,
            "repositories:\n  resolve:\n    ivy.ibiblio.default.artifact.root: https://mirror.example/maven\n",
        )
        resolver = IBiblioResolver(settings=RepositorySettings(repo_root=tmp_path), transport=FakeTransport())

        assert resolver.get_artifact_patterns()[0].startswith("https://mirror.example/maven/[module]/")
