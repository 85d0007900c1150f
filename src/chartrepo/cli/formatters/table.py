"""Rich table formatter for CLI output."""

import sys
from typing import Any, Dict, List, Optional, TextIO

from rich.console import Console
from rich.table import Table


def create_console(output: Optional[TextIO] = None, no_color: bool = False) -> Console:
    """Create a Rich console instance.

    Args:
        output: Output stream (defaults to stdout)
        no_color: Disable color output

    Returns:
        Console instance
    """
    if output is None:
        output = sys.stdout

    # Let Rich use the actual terminal width to avoid truncating headers
    return Console(file=output, no_color=no_color)


def format_repositories_table(rows: List[Dict[str, Any]], console: Optional[Console] = None) -> None:
    """Format registered repositories as a Rich table.

    Args:
        rows: Rows with ``entry`` and ``charts`` keys, in registry order
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("NAME", style="cyan", no_wrap=True)
    table.add_column("URL", overflow="fold")
    table.add_column("CHARTS", justify="right", no_wrap=True)

    for row in rows:
        entry = row["entry"]
        charts = row["charts"]
        table.add_row(entry.name, entry.url, "-" if charts is None else str(charts))

    console.print(table)
