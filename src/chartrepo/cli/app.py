"""Main CLI application for chartrepo."""

from typing import Optional

import click
import rich_click as rich_click

from ..config_paths import ENV_HOME, Home
from ..logging import configure_logging
from .utils import resolve_format, resolve_log_level

# Configure rich-click
rich_click.rich_click.USE_RICH_MARKUP = True
rich_click.rich_click.USE_MARKDOWN = True
rich_click.rich_click.SHOW_ARGUMENTS = True
rich_click.rich_click.GROUP_ARGUMENTS_OPTIONS = True


@click.group(invoke_without_command=True)
@click.option(
    "--home",
    type=click.Path(file_okay=False),
    envvar=ENV_HOME,
    help="Location of the chartrepo home directory. Takes precedence over the platform default.",
)
@click.option(
    "--format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    help="Output format. Defaults to 'table' for TTY, 'json' for non-TTY.",
)
@click.option("--verbose", "-v", count=True, help="Increase verbosity (can be used multiple times).")
@click.option("--quiet", "-q", count=True, help="Decrease verbosity (can be used multiple times).")
@click.option("--debug", is_flag=True, help="Enable debug-level logging.")
@click.option("--no-color", is_flag=True, help="Disable color output.")
@click.option("--version", is_flag=True, is_eager=True, help="Print version information.")
@click.pass_context
def app(
    ctx: click.Context,
    home: Optional[str] = None,
    format: Optional[str] = None,
    verbose: int = 0,
    quiet: int = 0,
    debug: bool = False,
    no_color: bool = False,
    version: bool = False,
) -> None:
    """chartrepo - register chart repositories and cache their indexes.

    Repositories are recorded in `repository/repositories.yaml` under the home
    directory, and each repository's index is cached in `repository/cache/`.

    Examples:
      # Register a repository
      chartrepo repo add stable https://charts.example.com

      # Register with basic auth, prompting for the password
      chartrepo repo add private https://charts.internal --username alice

      # Show registered repositories
      chartrepo repo list
    """
    if version:
        try:
            from .. import __version__

            library_version = __version__
        except ImportError:
            library_version = "unknown"

        click.echo(f"chartrepo version: {library_version}")
        ctx.exit()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()

    log_level = resolve_log_level(verbose, quiet, debug)
    configure_logging(log_level)

    # Store global options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj.update(
        {
            "home": Home(home),
            "format": resolve_format(format),
            "format_explicit": format is not None,
            "verbose": verbose,
            "quiet": quiet,
            "debug": debug,
            "no_color": no_color,
            "log_level": log_level,
        }
    )


# Import and register subcommands (at module top is preferred, but we place
# here after context is built to avoid circular import issues in runtime.)
from .commands import repo  # noqa: E402

app.add_command(repo.repo)


if __name__ == "__main__":
    app()
