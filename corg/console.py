"""Colored, leveled console messages for the command line."""

from __future__ import annotations

import click

from .config import LOG_LEVELS

LEVEL_COLORS = {
    "debug": "blue",
    "info": "cyan",
    "success": "green",
    "warning": "yellow",
    "error": "red",
    "trace": (255, 165, 0),
    "announce": "magenta",
}


class Clog:
    """Write ``[level] message`` lines to the terminal.

    Messages below `level` are dropped. Errors are written to stderr, all
    other levels to stdout unless `err` is set.

    Args:
        level: Minimum level to print, one of `LOG_LEVELS`.
        err: Send every level to stderr.

    Examples:
        clog = Clog("info")
        clog.success("Wrote file to scripts/deploy.sh")
    """

    def __init__(self, level: str = "info", err: bool = False):
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {level}")
        self.level = level
        self.err = err

    def should_log(self, level: str) -> bool:
        if level not in LOG_LEVELS:
            return True
        return LOG_LEVELS.index(level) >= LOG_LEVELS.index(self.level)

    def write_log(self, level: str, message: str) -> None:
        if not self.should_log(level):
            return
        tag = click.style(level, fg=LEVEL_COLORS[level], bold=True)
        bracket_open = click.style("[", bold=True)
        bracket_close = click.style("]", bold=True)
        to_stderr = self.err or level == "error"
        click.echo(f"{bracket_open}{tag}{bracket_close} {message}", err=to_stderr)

    def debug(self, message: str) -> None:
        self.write_log("debug", message)

    def info(self, message: str) -> None:
        self.write_log("info", message)

    def success(self, message: str) -> None:
        self.write_log("success", message)

    def warning(self, message: str) -> None:
        self.write_log("warning", message)

    def error(self, message: str) -> None:
        self.write_log("error", message)

    def trace(self, message: str) -> None:
        self.write_log("trace", message)

    def announce(self, message: str) -> None:
        self.write_log("announce", message)
