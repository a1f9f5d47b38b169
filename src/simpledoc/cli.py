"""Root CLI group for simpledoc with global flags and command registration."""

from __future__ import annotations

import click

from simpledoc import __version__
from simpledoc.commands import register_commands
from simpledoc.commands._base import SimpleDocGroup
from simpledoc.commands._context import AppContext
from simpledoc.config.settings import SimpleDocSettings
from simpledoc.errors import SimpleDocError


@click.group(
    cls=SimpleDocGroup,
    invoke_without_command=True,
    examples="""\
  simpledoc check
  simpledoc migrate --dry-run
  simpledoc --json migrate --yes
  simpledoc -c ci/simpledoc.json check""",
)
@click.version_option(version=__version__, prog_name="simpledoc")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--no-interact", is_flag=True, help="Non-interactive mode (no prompts).")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    no_interact: bool,
    config_path: str | None,
) -> None:
    """simpledoc — keep a repository's docs dated, named, and fronted."""
    try:
        settings = SimpleDocSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
            no_interact=no_interact,
        )
    except SimpleDocError as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.obj = AppContext(settings, command=ctx.invoked_subcommand)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
