"""Execution of generated scripts, locally or on a remote host over ssh."""

from __future__ import annotations

import subprocess
from pathlib import Path

from .exceptions import ScriptRunError
from .filesystem import safe_read


def build_program(script: Path, helper: Path | None = None) -> str:
    """Concatenate the helper library and a generated script into one program.

    Generated scripts call ``corg_debug`` and friends without sourcing them, so
    the helpers are placed first when available.

    Args:
        script: Generated script.
        helper: Helper library written next to the scripts; skipped when None
            or missing.

    Returns:
        str: Program text ready to be piped into a shell.

    Raises:
        IOError: If a file cannot be read.
    """
    parts = []
    if helper is not None and helper.is_file():
        with safe_read(helper) as handle:
            parts.append(handle.read())
    with safe_read(script) as handle:
        parts.append(handle.read())
    return "\n".join(parts) + "\n"


def build_command(shell: str, host: str | None = None) -> list[str]:
    """Return the command that reads a program from stdin.

    Examples:
        build_command("bash")  # ["bash", "-s"]
        build_command("bash", "web-1")  # ["ssh", "web-1", "bash", "-s"]
    """
    command = [shell, "-s"]
    if host:
        command = ["ssh", host, *command]
    return command


def run_script(
    script: Path, helper: Path | None = None, host: str | None = None, shell: str = "bash"
) -> int:
    """Run a generated script and return its exit status.

    The program is piped to the shell's standard input, so the same call
    works for a local shell and for one reached through ``ssh``. Output is
    not captured.

    Args:
        script: Generated script to run.
        helper: Helper library to prepend.
        host: Remote host; runs locally when None.
        shell: Shell used to interpret the program.

    Returns:
        int: Exit status of the shell (or of ssh for remote runs).

    Raises:
        ScriptRunError: If the shell or ssh executable cannot be started.
        IOError: If the script or helper cannot be read.

    Examples:
        run_script(Path("scripts/deploy.sh"), Path("scripts/utils/corg-logger.sh"))
    """
    program = build_program(script, helper)
    command = build_command(shell, host)
    try:
        result = subprocess.run(command, input=program, text=True, check=False)
    except OSError as error:
        raise ScriptRunError(command, str(error)) from error
    return result.returncode
