"""Pytest configuration for unithereum-codegen tests."""

from pathlib import Path

import pytest

from unithereum_codegen.codegen.core.process import ProcessResult, ProcessRunner


class FakeRunner(ProcessRunner):
    """Records commands and replays scripted exit codes."""

    def __init__(self, returncodes=None, stderr="", stdout=""):
        self.calls = []
        self.returncodes = list(returncodes or [])
        self.stderr = stderr
        self.stdout = stdout

    def run(self, args, cwd=None, timeout=None):
        self.calls.append({"args": list(args), "cwd": cwd, "timeout": timeout})
        code = self.returncodes.pop(0) if self.returncodes else 0
        return ProcessResult(
            args=list(args),
            cwd=str(cwd) if cwd is not None else None,
            returncode=code,
            stdout=self.stdout,
            stderr=self.stderr if code else "",
        )


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def project(tmp_path) -> Path:
    """Minimal Unity project layout."""
    root = tmp_path / "MyGame"
    (root / "Assets").mkdir(parents=True)
    return root


@pytest.fixture
def dotnet(tmp_path) -> Path:
    """Placeholder dotnet executable."""
    path = tmp_path / "bin" / "dotnet"
    path.parent.mkdir()
    path.write_text("#!/bin/sh\n")
    return path
