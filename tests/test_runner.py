from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

import corg.runner as runner_module
from corg.exceptions import ScriptRunError
from corg.runner import build_command, build_program, run_script


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_build_command_local_and_remote():
    assert build_command("bash") == ["bash", "-s"]
    assert build_command("zsh", "web-1") == ["ssh", "web-1", "zsh", "-s"]


def test_build_program_prepends_helper(tmp_path: Path):
    script = _write(tmp_path / "deploy.sh", "build\n")
    helper = _write(tmp_path / "utils" / "corg-logger.sh", "corg_info() { :; }\n")

    assert build_program(script, helper) == "corg_info() { :; }\n\nbuild\n\n"


def test_build_program_without_helper(tmp_path: Path):
    script = _write(tmp_path / "deploy.sh", "build")

    assert build_program(script, tmp_path / "missing.sh") == "build\n"
    assert build_program(script) == "build\n"


def test_run_script_pipes_program_to_shell(tmp_path: Path, monkeypatch):
    script = _write(tmp_path / "deploy.sh", "build")
    calls = []

    def fake_run(command, **kwargs):
        calls.append((command, kwargs))
        return subprocess.CompletedProcess(command, 3)

    monkeypatch.setattr(runner_module.subprocess, "run", fake_run)

    status = run_script(script, host="web-1", shell="sh")

    assert status == 3
    command, kwargs = calls[0]
    assert command == ["ssh", "web-1", "sh", "-s"]
    assert kwargs["input"] == "build\n"
    assert kwargs["text"] is True


def test_run_script_reports_missing_shell(tmp_path: Path, monkeypatch):
    script = _write(tmp_path / "deploy.sh", "build")

    def fake_run(command, **kwargs):
        raise FileNotFoundError(2, "No such file or directory")

    monkeypatch.setattr(runner_module.subprocess, "run", fake_run)

    with pytest.raises(ScriptRunError, match="Unable to run no-such-shell -s"):
        run_script(script, shell="no-such-shell")
