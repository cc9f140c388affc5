"""Main CLI entry point for mongo-sanitizer.

Provides commands for:
- sanitize: Replace operator characters in a JSON file
- check: Report operator characters in JSON files
"""

from __future__ import annotations

try:
    import typer
except ImportError as e:
    raise ImportError("CLI dependencies not installed. Install with: pip install mongo-sanitizer[cli]") from e

from mongo_sanitizer.cli.check import check
from mongo_sanitizer.cli.sanitize import sanitize

app = typer.Typer(
    name="mongo-sanitizer",
    help="Sanitize JSON documents against query-operator injection.",
    no_args_is_help=True,
)

app.command()(sanitize)
app.command()(check)


def version_callback(value: bool) -> None:
    """Print version and exit.

    Args:
        value: True if --version flag was provided
    """
    if value:
        from mongo_sanitizer import __version__

        typer.echo(f"mongo-sanitizer {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    r"""Sanitize JSON documents against query-operator injection.

    \b
    Examples:
        mongo-sanitizer sanitize body.json
        mongo-sanitizer sanitize body.json --output clean.json --allow-dots
        mongo-sanitizer check body.json query.json
    """


if __name__ == "__main__":
    app()
