"""
Converts Markdown runbooks into executable shell scripts and runs them.
Each level-2 heading becomes a shell function; the script calls them in order.
"""

from __future__ import annotations

from pathlib import Path

import click

from .config import ConfigError, CorgConfig, build_config
from .console import Clog
from .constants import DOCUMENT_EXTENSIONS, SCRIPT_EXTENSION
from .exceptions import DocumentNotFoundError, ScriptRunError
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    find_documents,
    get_max_file_size,
    resolve_file,
    script_path_for,
    write_helper,
    write_script,
)
from .parser import ParseFileError, parse_file
from .runner import run_script
from .transpiler import push_shell

__all__ = ["cli"]


def _load_config(ctx: click.Context, **overrides: object) -> CorgConfig:
    try:
        return build_config(Path.cwd(), log_level=ctx.obj.get("log_level"), **overrides)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error


def _suffixes(default: tuple[str, ...], extension: str) -> tuple[str, ...]:
    return tuple(dict.fromkeys((*default, f".{extension.lower()}")))


@click.group()
@click.version_option()
@click.option("--verbose", "log_level", flag_value="debug", help="Show debug messages")
@click.option("--quiet", "log_level", flag_value="error", help="Only show errors")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None = None):
    """Read and execute shell scripts from notes written in Markdown."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level or None


@cli.command()
@click.argument("document")
@click.option("--output-dir", help="Directory receiving the generated script")
@click.option(
    "--unique-names/--no-unique-names",
    default=None,
    help="Number repeated function names instead of redefining them",
)
@click.option("--no-helper", is_flag=True, help="Do not write the shell logging helpers")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the script instead of writing it")
@click.pass_context
def convert(
    ctx: click.Context,
    document: str,
    output_dir: str | None = None,
    unique_names: bool | None = None,
    no_helper: bool = False,
    to_stdout: bool = False,
):
    """
    Convert a Markdown document into an executable shell script.

    DOCUMENT is a path, or a document name looked up below the current
    directory (e.g. `deploy` finds `runbooks/deploy.md`).

    Raises:
        click.BadParameter: If the configuration is invalid or DOCUMENT cannot
            be resolved to a Markdown file.
        click.ClickException: If the document is too large, cannot be parsed,
            or the script cannot be written.

    Examples:
        corg convert runbooks/deploy.md --output-dir build/scripts
    """
    config = _load_config(
        ctx,
        output_dir=output_dir,
        unique_function_names=unique_names,
        write_helper=False if no_helper else None,
    )
    # Keep stdout clean when the script itself goes there
    clog = Clog(config.log_level, err=to_stdout)
    base_dir = Path.cwd().resolve()

    try:
        filepath = resolve_file(
            document,
            config.document_extension,
            base_dir,
            _suffixes(DOCUMENT_EXTENSIONS, config.document_extension),
        )
    except (DocumentNotFoundError, ValueError) as error:
        raise click.BadParameter(str(error), param_hint="DOCUMENT") from error

    clog.info(f"Converting {filepath}")

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
        enforce_file_size(collect_file_stat(filepath), max_file_size, filepath)
    except (ValueError, IOError) as error:
        raise click.ClickException(str(error)) from error

    try:
        events = parse_file(filepath)
    except ParseFileError as error:
        raise click.ClickException(str(error)) from error

    script = push_shell(events, config)
    clog.debug(f"Generated {len(script)} characters from {len(events)} events")

    if to_stdout:
        click.echo(script, nl=False)
        return

    output_path = base_dir / config.output_dir
    script_path = script_path_for(filepath, output_path)
    try:
        write_script(script_path, script)
    except IOError as error:
        clog.error(f"Failed to write file to {script_path}")
        raise click.ClickException(str(error)) from error
    clog.success(f"Wrote file to {script_path}")

    if config.write_helper:
        helper_path = output_path / config.helper_path
        clog.info(f"Writing logger util to file: {helper_path}")
        try:
            write_helper(helper_path)
        except IOError as error:
            raise click.ClickException(str(error)) from error


@cli.command()
@click.argument("script")
@click.option("--host", help="Run on this host over ssh instead of locally")
@click.option("--shell", help="Shell that interprets the script")
@click.pass_context
def run(ctx: click.Context, script: str, host: str | None = None, shell: str | None = None):
    """
    Run a generated script locally or on a remote host.

    SCRIPT is a path, or a script name looked up below the current directory.
    The logging helpers next to the script are sent along with it. The command
    exits with the script's exit status.

    Examples:
        corg run scripts/deploy.sh --host web-1
    """
    config = _load_config(ctx, shell=shell)
    clog = Clog(config.log_level)
    base_dir = Path.cwd().resolve()

    try:
        script_path = resolve_file(
            script,
            config.script_extension,
            base_dir,
            _suffixes((SCRIPT_EXTENSION,), config.script_extension),
        )
    except (DocumentNotFoundError, ValueError) as error:
        raise click.BadParameter(str(error), param_hint="SCRIPT") from error

    clog.announce(f"Running {script_path}" + (f" on {host}" if host else ""))
    helper_path = script_path.parent / config.helper_path
    try:
        status = run_script(script_path, helper_path, host=host, shell=config.shell)
    except (ScriptRunError, IOError) as error:
        raise click.ClickException(str(error)) from error

    if status != 0:
        clog.error(f"{script_path.name} exited with status {status}")
        ctx.exit(status)
    clog.success(f"{script_path.name} finished")


@cli.command(name="list")
@click.option("--scripts", is_flag=True, help="List generated scripts instead of documents")
@click.pass_context
def list_files(ctx: click.Context, scripts: bool = False):
    """List Markdown documents (or generated scripts) below the current directory."""
    config = _load_config(ctx)
    base_dir = Path.cwd().resolve()
    extension = config.script_extension if scripts else config.document_extension

    for path in find_documents(extension, base_dir):
        click.echo(str(path.relative_to(base_dir)))


if __name__ == "__main__":
    cli()
