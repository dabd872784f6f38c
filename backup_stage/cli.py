"""CLI for the backup stage.

Reads file paths from stdin, backs them up, records the backup and echoes
stdin to stdout for the next stage.
"""

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from . import pipeline
from .config import load_config
from .errors import StageError
from .reader import read_input

app = typer.Typer(
    help="Back up pipeline output files to object storage and record them in MongoDB"
)
console = Console(stderr=True)


@app.command()
def backup(
    env_file: Optional[Path] = typer.Option(
        None, "--env-file", "-e", help="Load environment variables from this .env file"
    ),
):
    """Back up the files listed on stdin and pass stdin through to stdout."""
    try:
        config = load_config(env_file)
        raw, paths = read_input(sys.stdin.buffer)
        pipeline.run(config, paths)
    except StageError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    # Act as a proxy stage: forward exactly what came in
    sys.stdout.buffer.write(raw)
    sys.stdout.buffer.flush()


if __name__ == "__main__":
    app()
