"""Tests for the command-line interface."""

import json

import pytest

from unithereum_codegen import cli
from unithereum_codegen.codegen.core.process import ProcessResult

from .conftest import FakeRunner


@pytest.fixture
def fake_subprocess(monkeypatch):
    runner = FakeRunner()
    monkeypatch.setattr(
        "unithereum_codegen.codegen.core.generator.SubprocessRunner", lambda: runner
    )
    return runner


@pytest.fixture
def configured_project(project, dotnet):
    (project / "codegen.config.json").write_text(
        json.dumps({"dotnetPath": str(dotnet), "namespacePrefix": "Game.Contracts"})
    )
    contracts = project / "Assets" / "Contracts"
    contracts.mkdir()
    (contracts / "Token.abi").write_text("[]")
    return project


def test_sanitize_command(capsys):
    assert cli.main(["sanitize", "123 My Game"]) == 0
    assert capsys.readouterr().out.strip() == "_123_My_Game"


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 1
    assert "usage" in capsys.readouterr().out


def test_config_command(configured_project, capsys):
    assert cli.main(["--project", str(configured_project), "config"]) == 0
    out = capsys.readouterr().out
    assert "Game.Contracts" in out
    assert "namespacePrefix" in out


def test_invalid_config_exits_with_error(project, capsys):
    (project / "codegen.config.json").write_text(json.dumps({"outputDir": "/abs"}))
    assert cli.main(["--project", str(project), "--dotnet", "/nonexistent/dotnet", "config"]) == 1
    assert "dotnetPath" in capsys.readouterr().out


def test_missing_project(tmp_path, capsys):
    assert cli.main(["--project", str(tmp_path / "missing"), "config"]) == 1


def test_generate_command(configured_project, fake_subprocess):
    abi = configured_project / "Assets" / "Contracts" / "Token.abi"

    assert cli.main(["--project", str(configured_project), "generate", str(abi)]) == 0

    assert len(fake_subprocess.calls) == 2
    assert "-abi" in fake_subprocess.calls[1]["args"]
    out = configured_project / "Assets" / "ContractServices"
    assert (out / "Game.Contracts.asmdef").is_file()


def test_generate_failure(configured_project, monkeypatch, capsys):
    runner = FakeRunner(returncodes=[0, 2], stderr="boom")
    monkeypatch.setattr(
        "unithereum_codegen.codegen.core.generator.SubprocessRunner", lambda: runner
    )
    abi = configured_project / "Assets" / "Contracts" / "Token.abi"

    assert cli.main(["--project", str(configured_project), "generate", str(abi)]) == 1
    assert "boom" in capsys.readouterr().out


def test_generate_rejects_other_files(configured_project, fake_subprocess):
    other = configured_project / "Assets" / "notes.txt"
    other.write_text("")
    assert cli.main(["--project", str(configured_project), "generate", str(other)]) == 1
    assert fake_subprocess.calls == []


def test_changed_command(configured_project, fake_subprocess, capsys):
    contracts = configured_project / "Assets" / "Contracts"
    (contracts / "notes.txt").write_text("")

    code = cli.main(
        [
            "--project",
            str(configured_project),
            "changed",
            str(contracts / "Token.abi"),
            str(contracts / "notes.txt"),
        ]
    )

    assert code == 0
    assert len(fake_subprocess.calls) == 2
    assert "Generated 1 contract(s)" in capsys.readouterr().out


def test_regenerate_all_with_yes(configured_project, fake_subprocess):
    stale = configured_project / "Assets" / "ContractServices" / "Old.cs"
    stale.parent.mkdir()
    stale.write_text("")

    assert cli.main(["--project", str(configured_project), "regenerate-all", "--yes"]) == 0

    assert not stale.exists()
    assert len(fake_subprocess.calls) == 2


def test_regenerate_all_cancelled(configured_project, fake_subprocess, monkeypatch):
    monkeypatch.setattr(cli.Confirm, "ask", lambda *args, **kwargs: False)
    stale = configured_project / "Assets" / "ContractServices" / "Old.cs"
    stale.parent.mkdir()
    stale.write_text("")

    assert cli.main(["--project", str(configured_project), "regenerate-all"]) == 1

    assert stale.exists()
    assert fake_subprocess.calls == []


def test_non_utf8_config_exits_with_error(project, capsys):
    (project / "codegen.config.json").write_bytes(b"\xff{}")
    assert cli.main(["--project", str(project), "config"]) == 1
    assert "UTF-8" in capsys.readouterr().out
