"""End-to-end tests for the ibiblio command line."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

M2 = "http://www.ibiblio.org/maven2/"


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    from ibiblio.core.resolver.settings import env_key

    for name in ("ivy.ibiblio.default.artifact.root", "ivy.ibiblio.default.artifact.pattern"):
        monkeypatch.delenv(env_key(name), raising=False)


@pytest.fixture
def file_repo(tmp_path: Path) -> Path:
    root = tmp_path / "repo"
    for rev in ("1.0", "2.0"):
        d = root / "org" / "example" / "lib" / rev
        d.mkdir(parents=True)
        (d / f"lib-{rev}.jar").write_bytes(b"jar")
    (root / "org" / "example" / "lib" / "1.0" / "lib-1.0.pom").write_text("<project/>", encoding="utf-8")
    return root


def run_json(capsys, argv: list[str]) -> dict:
    from ibiblio.cli._dispatcher import main

    code = main(argv)
    out = capsys.readouterr().out
    assert code == 0, out
    return json.loads(out)


class TestDispatcher:
    def test_commands_are_discovered(self) -> None:
        from ibiblio.cli._dispatcher import discover_commands

        assert {"list", "locate", "show_config"} <= set(discover_commands())

    def test_no_command_prints_help(self, capsys) -> None:
        from ibiblio.cli._dispatcher import main

        assert main([]) == 0
        assert "locate" in capsys.readouterr().out

    def test_version(self, capsys) -> None:
        from ibiblio import __version__
        from ibiblio.cli._dispatcher import main

        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])

        assert excinfo.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestLocate:
    def test_maven2_candidates(self, capsys, tmp_path) -> None:
        data = run_json(capsys, ["locate", "org.example", "lib", "1.0", "--m2", "--json", "--repo-root", str(tmp_path)])

        assert data["module"] == "org.example#lib;1.0"
        assert data["layout"] == "maven2"
        assert data["candidates"] == {
            "descriptor": [M2 + "org/example/lib/1.0/lib-1.0.pom"],
            "artifact": [M2 + "org/example/lib/1.0/lib-1.0.jar"],
        }
        assert "found" not in data

    def test_legacy_candidates_use_bundled_defaults(self, capsys, tmp_path) -> None:
        data = run_json(capsys, ["locate", "commons-lang", "commons-lang", "2.6", "--json", "--repo-root", str(tmp_path)])

        assert data["candidates"] == {
            "descriptor": [],
            "artifact": ["http://www.ibiblio.org/maven/commons-lang/jars/commons-lang-2.6.jar"],
        }

    def test_check_against_file_repository(self, capsys, file_repo, tmp_path) -> None:
        root = file_repo.as_uri()

        data = run_json(
            capsys,
            ["locate", "org.example", "lib", "1.0", "--m2", "--root", root, "--check", "--json",
             "--repo-root", str(tmp_path)],
        )

        assert data["found"] == {
            "descriptor": root + "/org/example/lib/1.0/lib-1.0.pom",
            "artifact": root + "/org/example/lib/1.0/lib-1.0.jar",
        }

    def test_revision_is_required(self, capsys) -> None:
        from ibiblio.cli._dispatcher import main

        with pytest.raises(SystemExit) as excinfo:
            main(["locate", "org.example", "lib"])

        assert excinfo.value.code == 2
        assert "revision" in capsys.readouterr().err

    def test_text_output(self, capsys, tmp_path) -> None:
        from ibiblio.cli._dispatcher import main

        assert main(["locate", "org.example", "lib", "1.0", "--m2", "--no-poms", "--repo-root", str(tmp_path)]) == 0

        out = capsys.readouterr().out
        assert "org.example#lib;1.0 (maven2 layout)" in out
        assert "artifact: " + M2 + "org/example/lib/1.0/lib-1.0.jar" in out
        assert "descriptor:" not in out


class TestList:
    def test_revisions(self, capsys, file_repo, tmp_path) -> None:
        data = run_json(
            capsys,
            ["list", "revisions", "org.example", "lib", "--m2", "--root", file_repo.as_uri(), "--json",
             "--repo-root", str(tmp_path)],
        )

        assert data == {"token": "revisions", "values": ["1.0", "2.0"]}

    def test_organisations_are_never_listed(self, capsys, file_repo, tmp_path) -> None:
        data = run_json(
            capsys,
            ["list", "organisations", "--m2", "--root", file_repo.as_uri(), "--json", "--repo-root", str(tmp_path)],
        )

        assert data["values"] == []

    def test_modules_without_organisation_is_an_error(self, capsys, tmp_path) -> None:
        from ibiblio.cli._dispatcher import main

        assert main(["list", "modules", "--m2", "--json", "--repo-root", str(tmp_path)]) == 1

        err = json.loads(capsys.readouterr().err)
        assert err["error"] == "list_error"
        assert "requires an organisation" in err["message"]


class TestShowConfig:
    def test_project_config_is_applied(self, capsys, tmp_path) -> None:
        config = tmp_path / ".ibiblio" / "config" / "repositories.yaml"
        config.parent.mkdir(parents=True)
        config.write_text(
            "repositories:\n  resolve:\n    ivy.ibiblio.default.artifact.root: https://u:p@mirror.example/maven/\n",
            encoding="utf-8",
        )

        data = run_json(capsys, ["show-config", "--json", "--repo-root", str(tmp_path)])

        assert data["type"] == "ibiblio"
        assert data["root"] == "https://mirror.example/maven/"
        assert data["layout"] == "legacy"
        assert data["artifact_patterns"] == [
            "https://mirror.example/maven/[module]/[type]s/[artifact]-[revision].[ext]"
        ]
        assert data["descriptor_patterns"] == []
        assert data["variables"]["ivy.ibiblio.default.artifact.pattern"] == "[module]/[type]s/[artifact]-[revision].[ext]"
        assert data["variables"]["ivy.ibiblio.default.artifact.root"] == "https://mirror.example/maven/"

    def test_invalid_project_config_reports_error(self, capsys, tmp_path) -> None:
        config = tmp_path / ".ibiblio" / "config" / "repositories.yaml"
        config.parent.mkdir(parents=True)
        config.write_text("repositories:\n  resolve:\n    x: [1]\n", encoding="utf-8")

        from ibiblio.cli._dispatcher import main

        assert main(["show-config", "--json", "--repo-root", str(tmp_path)]) == 1

        err = json.loads(capsys.readouterr().err)
        assert err["error"] == "show_config_error"
        assert err["details"]["code"] == "SettingsError"
