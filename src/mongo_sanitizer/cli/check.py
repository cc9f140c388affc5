"""Check command for mongo-sanitizer CLI."""

from __future__ import annotations

import json
import zlib
from pathlib import Path
from typing import Annotated

import typer

from mongo_sanitizer.cli.sanitize import resolve_options
from mongo_sanitizer.patterns import OptionsLoadError


def check(
    input_files: Annotated[
        list[Path],
        typer.Argument(help="JSON files to check (.json or .json.gz)"),
    ],
    allow_dots: Annotated[
        bool,
        typer.Option("--allow-dots", help="Only report '$'"),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Options JSON file"),
    ] = None,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", help="Max nesting depth (default: 100, 0=unlimited)"),
    ] = None,
) -> None:
    """Report query-operator characters in JSON files.

    Lists every key and string value containing '$' (and '.', unless
    dots are allowed). Exits with code 1 if anything is found.

    Args:
        input_files: JSON files to check
        allow_dots: Only report '$'
        config: Options JSON file (allow_dots and max_depth are used)
        max_depth: Maximum nesting depth (default: 100, 0=unlimited)

    Example:
        mongo-sanitizer check body.json
        mongo-sanitizer check fixtures/*.json --allow-dots
    """
    from mongo_sanitizer.sanitization import SanitizeDepthError
    from mongo_sanitizer.validation import validate_json_file

    if max_depth is not None and max_depth < 0:
        typer.echo(f"Error: max-depth must be >= 0, got {max_depth}", err=True)
        raise typer.Exit(1)

    try:
        options = resolve_options(config, None, allow_dots, False, max_depth)
    except OptionsLoadError as e:
        typer.echo(f"Error: Failed to load options: {e}", err=True)
        raise typer.Exit(1) from None

    for file_path in input_files:
        if not file_path.exists():
            typer.echo(f"Error: File not found: {file_path}", err=True)
            raise typer.Exit(1)

    total_findings = 0
    failed_files = 0

    for file_path in input_files:
        try:
            findings = validate_json_file(
                file_path,
                allow_dots=options["allow_dots"],
                max_depth=options["max_depth"],
            )
        except json.JSONDecodeError as e:
            typer.echo(f"Error: Invalid JSON in {file_path}: {e.msg} at line {e.lineno}", err=True)
            failed_files += 1
            continue
        except UnicodeDecodeError as e:
            typer.echo(f"Error: {file_path} is not valid UTF-8: {e.reason} at byte {e.start}", err=True)
            failed_files += 1
            continue
        except SanitizeDepthError as e:
            typer.echo(f"Error: {file_path} nested too deeply (limit {e.max_depth})", err=True)
            failed_files += 1
            continue
        except (OSError, EOFError, zlib.error) as e:
            # Unreadable files and corrupt or truncated .gz archives
            typer.echo(f"Error: Could not read {file_path}: {e}", err=True)
            failed_files += 1
            continue

        if findings:
            typer.echo(f"\n{file_path}:")
            for finding in findings:
                typer.echo(f"  [{finding.kind.upper()}] {finding.location}")
                typer.echo(f"     {finding.kind}: {finding.value}")
                typer.echo(f"     Reason: {finding.reason}")
            total_findings += len(findings)
        else:
            typer.echo(f"[OK] {file_path}: Clean")

    typer.echo(f"\nSummary: {total_findings} findings in {len(input_files)} files")

    if total_findings > 0 or failed_files > 0:
        raise typer.Exit(1)
