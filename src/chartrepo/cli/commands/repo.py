"""Repository management commands for the chartrepo CLI."""

from typing import Any, Dict, List, Optional

import click

from ...credentials import read_password
from ...errors import ChartRepoError, InvalidIndexError
from ...index import IndexFile
from ...repo_add import add_repository, list_repositories, remove_repository
from ...repo_file import RepositoryEntry
from ..formatters import (
    create_console,
    format_entry_json,
    format_json,
    format_repositories_json,
    format_repositories_table,
)
from ..utils import ExitCode, handle_error


def _cached_chart_count(entry: RepositoryEntry) -> Optional[int]:
    if not entry.cache:
        return None
    try:
        return IndexFile.load_file(entry.cache).chart_count
    except (OSError, InvalidIndexError):
        return None


@click.group()
def repo() -> None:
    """Add, list and remove chart repositories."""
    pass


@repo.command("add")
@click.argument("name")
@click.argument("url")
@click.option("--username", default="", help="Chart repository username.")
@click.option("--password", default="", help="Chart repository password.")
@click.option("--no-update", is_flag=True, help="Raise error if repo is already registered.")
@click.option("--cert-file", default="", help="Identify HTTPS client using this SSL certificate file.")
@click.option("--key-file", default="", help="Identify HTTPS client using this SSL key file.")
@click.option("--ca-file", default="", help="Verify certificates of HTTPS-enabled servers using this CA bundle.")
@click.pass_context
def add(
    ctx: click.Context,
    name: str,
    url: str,
    username: str = "",
    password: str = "",
    no_update: bool = False,
    cert_file: str = "",
    key_file: str = "",
    ca_file: str = "",
) -> None:
    """Add a chart repository.

    The repository index is downloaded and validated before the repository is
    recorded. If --username is given without --password, the password is read
    from the terminal.

    Examples:
      chartrepo repo add stable https://charts.example.com
    """
    try:
        result = add_repository(
            name,
            url,
            home=ctx.obj["home"],
            username=username,
            password=password,
            cert_file=cert_file,
            key_file=key_file,
            ca_file=ca_file,
            no_update=no_update,
            password_reader=read_password,
        )
    except ChartRepoError as e:
        handle_error(e)
        return

    message = f'"{name}" has been added to your repositories'
    if ctx.obj["format"] == "json":
        format_json(
            {
                "message": message,
                "repository": format_entry_json(result.entry),
                "replaced": result.replaced,
                "charts": result.chart_count,
            }
        )
    else:
        click.echo(message)


@repo.command("list")
@click.pass_context
def list_(ctx: click.Context) -> None:
    """List registered chart repositories."""
    try:
        entries = list_repositories(ctx.obj["home"])
    except ChartRepoError as e:
        handle_error(e)
        return

    if not entries:
        handle_error(ChartRepoError("no repositories to show"), ExitCode.GENERIC_ERROR)
        return

    rows: List[Dict[str, Any]] = [{"entry": entry, "charts": _cached_chart_count(entry)} for entry in entries]
    if ctx.obj["format"] == "json":
        format_json(format_repositories_json(rows))
    else:
        console = create_console(no_color=ctx.obj["no_color"])
        format_repositories_table(rows, console)


@repo.command("remove")
@click.argument("name")
@click.pass_context
def remove(ctx: click.Context, name: str) -> None:
    """Remove a chart repository and its cached index."""
    try:
        entry = remove_repository(name, ctx.obj["home"])
    except ChartRepoError as e:
        handle_error(e)
        return

    message = f'"{name}" has been removed from your repositories'
    if ctx.obj["format"] == "json":
        format_json({"message": message, "repository": format_entry_json(entry)})
    else:
        click.echo(message)
