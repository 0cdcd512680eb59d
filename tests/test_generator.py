"""Tests for the generator invoker."""

import json

import pytest

from unithereum_codegen.codegen.core.config import Config, ProjectLayout
from unithereum_codegen.codegen.core.errors import (
    GenerationError,
    GenerationStage,
    ProcessTimeoutError,
)
from unithereum_codegen.codegen.core.generator import (
    GENERATOR_TOOL_NAME,
    TOOL_DIRECTORY,
    GeneratorInvoker,
    InvocationState,
    build_generate_command,
    build_restore_command,
    ensure_support_files,
)

from .conftest import FakeRunner


@pytest.fixture
def config(dotnet):
    return Config(dotnet_path=str(dotnet), namespace_prefix="App.Contracts", output_dir="Out")


@pytest.fixture
def abi(project):
    path = project / "Assets" / "Contracts" / "Token.abi"
    path.parent.mkdir()
    path.write_text("[]")
    return path


def make_invoker(config, project, runner, **kwargs):
    return GeneratorInvoker(config, ProjectLayout(project), runner=runner, **kwargs)


def test_end_to_end_without_bin(config, project, abi, dotnet):
    runner = FakeRunner()
    imported = []
    invoker = make_invoker(config, project, runner, on_imported=imported.append)

    result = invoker.generate(abi)

    out = project / "Assets" / "Out"
    assert len(runner.calls) == 2
    assert runner.calls[0]["args"] == [str(dotnet), "tool", "restore"]

    args = runner.calls[1]["args"]
    assert args[:7] == [str(dotnet), "tool", "run", GENERATOR_TOOL_NAME, "--", "generate", "from-abi"]
    assert args.count("-abi") == 1
    assert "-bin" not in args
    assert args[args.index("-o") + 1] == str(out)
    assert args[args.index("-ns") + 1] == "App.Contracts"
    assert args[args.index("-abi") + 1] == str(abi)

    assert json.loads((out / "App.Contracts.asmdef").read_text()) == {"name": "App.Contracts"}
    assert (out / "csc.rsp").read_text() == "-warn:0"

    assert result.state == InvocationState.IMPORTED
    assert invoker.state == InvocationState.IMPORTED
    assert result.output_dir == out
    assert imported == [out]


def test_bin_path_is_passed(config, project, abi):
    runner = FakeRunner()
    bin_path = abi.with_suffix(".bin")
    bin_path.write_text("6080")

    make_invoker(config, project, runner).generate(abi, bin_path)

    args = runner.calls[1]["args"]
    assert args[-2:] == ["-bin", str(bin_path)]


def test_steps_run_in_tool_directory(config, project, abi):
    runner = FakeRunner()
    make_invoker(config, project, runner, timeout=12.5).generate(abi)

    assert [call["cwd"] for call in runner.calls] == [TOOL_DIRECTORY, TOOL_DIRECTORY]
    assert [call["timeout"] for call in runner.calls] == [12.5, 12.5]
    assert (TOOL_DIRECTORY / ".config" / "dotnet-tools.json").is_file()


def test_restore_failure_stops_generation(config, project, abi):
    runner = FakeRunner(returncodes=[1], stderr="restore broke")
    invoker = make_invoker(config, project, runner)

    with pytest.raises(GenerationError) as excinfo:
        invoker.generate(abi)

    assert len(runner.calls) == 1
    assert excinfo.value.stage == GenerationStage.RESTORE
    assert excinfo.value.stderr == "restore broke"
    assert "restore broke" in str(excinfo.value)
    assert invoker.state == InvocationState.RESTORE_FAILED
    assert not (project / "Assets" / "Out").exists()


def test_generate_failure(config, project, abi):
    runner = FakeRunner(returncodes=[0, 3], stderr="bad abi")
    invoker = make_invoker(config, project, runner)

    with pytest.raises(GenerationError) as excinfo:
        invoker.generate(abi)

    assert len(runner.calls) == 2
    assert excinfo.value.stage == GenerationStage.GENERATE
    assert excinfo.value.returncode == 3
    assert invoker.state == InvocationState.GENERATE_FAILED


def test_import_not_triggered_on_failure(config, project, abi):
    imported = []
    invoker = make_invoker(
        config, project, FakeRunner(returncodes=[0, 1]), on_imported=imported.append
    )
    with pytest.raises(GenerationError):
        invoker.generate(abi)
    assert imported == []


def test_timeout_surfaces_as_generation_error(config, project, abi):
    class HangingRunner(FakeRunner):
        def run(self, args, cwd=None, timeout=None):
            super().run(args, cwd, timeout)
            raise ProcessTimeoutError(list(args), timeout)

    invoker = make_invoker(config, project, HangingRunner(), timeout=1)

    with pytest.raises(GenerationError) as excinfo:
        invoker.generate(abi)

    assert excinfo.value.stage == GenerationStage.RESTORE
    assert "timed out" in str(excinfo.value)


def test_missing_executable_surfaces_as_generation_error(config, project, abi):
    class MissingRunner(FakeRunner):
        def run(self, args, cwd=None, timeout=None):
            raise FileNotFoundError(2, "No such file", args[0])

    with pytest.raises(GenerationError):
        make_invoker(config, project, MissingRunner()).generate(abi)


def test_skipped_without_dotnet(project, abi):
    runner = FakeRunner()
    config = Config(dotnet_path=None, namespace_prefix="App.Contracts")
    invoker = make_invoker(config, project, runner)

    result = invoker.generate(abi)

    assert result.skipped
    assert runner.calls == []
    assert not (project / "Assets" / "ContractServices").exists()


def test_existing_support_files_are_kept(config, project, abi):
    out = project / "Assets" / "Out"
    out.mkdir()
    (out / "App.Contracts.asmdef").write_text('{"name": "Custom", "references": []}')
    (out / "csc.rsp").write_text("-nowarn:CS0618")

    result = make_invoker(config, project, FakeRunner()).generate(abi)

    assert (out / "App.Contracts.asmdef").read_text() == '{"name": "Custom", "references": []}'
    assert (out / "csc.rsp").read_text() == "-nowarn:CS0618"
    assert result.created_files == []


def test_rerun_does_not_alter_support_files(config, project, abi):
    invoker = make_invoker(config, project, FakeRunner())
    invoker.generate(abi)
    out = project / "Assets" / "Out"
    before = {p.name: p.read_text() for p in out.iterdir()}

    second = invoker.generate(abi)

    assert {p.name: p.read_text() for p in out.iterdir()} == before
    assert second.created_files == []


def test_ensure_support_files_creates_directory(tmp_path):
    out = tmp_path / "deep" / "Out"
    created = ensure_support_files(out, "Game.@class")

    assert sorted(p.name for p in created) == ["Game.@class.asmdef", "csc.rsp"]
    assert json.loads((out / "Game.@class.asmdef").read_text())["name"] == "Game.@class"


def test_build_commands():
    assert build_restore_command("dotnet") == ["dotnet", "tool", "restore"]
    args = build_generate_command("dotnet", "Out", "A.B", "x.abi", "x.bin")
    assert args[-6:] == ["-ns", "A.B", "-abi", "x.abi", "-bin", "x.bin"]


def test_unwritable_output_dir_fails_generate_stage(config, project, abi):
    # A file where the output directory should be
    (project / "Assets" / "Out").write_text("")
    runner = FakeRunner()
    invoker = make_invoker(config, project, runner)

    with pytest.raises(GenerationError) as excinfo:
        invoker.generate(abi)

    assert excinfo.value.stage == GenerationStage.GENERATE
    assert invoker.state == InvocationState.GENERATE_FAILED
    # Only restore ran
    assert len(runner.calls) == 1
