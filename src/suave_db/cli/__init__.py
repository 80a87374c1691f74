"""Console script for suave_db."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv
from loguru import logger
from rich.console import Console

app = typer.Typer(
    name="suave-db",
    help="Suave DB CLI - inspect record mappings and generated SQL",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log mapping and SQL activity")
    ] = False,
    env_file: Annotated[
        Optional[Path],
        typer.Option("--env-file", help="Environment file with SUAVE_DB_* settings"),
    ] = None,
) -> None:
    """Configure logging and environment for every command."""
    if env_file is not None:
        if not env_file.exists():
            console.print(f"[bold red]Error: Environment file not found: {env_file}[/bold red]")
            raise typer.Exit(1)
        load_dotenv(env_file, override=True, interpolate=True)
    else:
        load_dotenv()

    if verbose:
        logger.remove()
        logger.add(sys.stderr, level="DEBUG")
        logger.enable("suave_db")


# Import subcommands
from suave_db.cli.commands import describe_command, sql_command

# Register subcommands
app.command(name="describe")(describe_command)
app.command(name="sql")(sql_command)


if __name__ == "__main__":
    app()
