"""Sanitize command for mongo-sanitizer CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import typer

from mongo_sanitizer.patterns import DEFAULT_REPLACEMENT, OptionsLoadError, Policy, load_options

# Nesting limit applied when neither --max-depth nor the config sets one
DEFAULT_CLI_MAX_DEPTH = 100


def resolve_options(
    config: Path | None,
    replace_with: str | None,
    allow_dots: bool,
    dry_run: bool,
    max_depth: int | None,
) -> dict[str, Any]:
    """Merge command-line flags over an optional options file.

    Args:
        config: Options JSON file, or None
        replace_with: --replace-with value, or None if not given
        allow_dots: --allow-dots flag
        dry_run: --dry-run flag
        max_depth: --max-depth value (0=unlimited), or None if not given

    Returns:
        Dict with replace_with, allow_dots, dry_run and max_depth keys

    Raises:
        OptionsLoadError: If the options file cannot be loaded
    """
    options = load_options(config) if config else {}

    if replace_with is not None:
        options["replace_with"] = replace_with
    # Flags only switch options on; config values are validated by Policy
    if allow_dots:
        options["allow_dots"] = True
    if dry_run:
        options["dry_run"] = True

    if max_depth is not None:
        options["max_depth"] = max_depth
    else:
        options.setdefault("max_depth", DEFAULT_CLI_MAX_DEPTH)
    if options["max_depth"] == 0:
        options["max_depth"] = None

    policy = Policy.from_options(
        replace_with=options.get("replace_with", DEFAULT_REPLACEMENT),
        dry_run=options.get("dry_run", False),
        allow_dots=options.get("allow_dots", False),
        max_depth=options["max_depth"],
    )
    return {
        "replace_with": policy.replacement,
        "allow_dots": policy.allow_dots,
        "dry_run": policy.dry_run,
        "max_depth": policy.max_depth,
    }


def sanitize(
    input_file: Annotated[
        Path,
        typer.Argument(help="JSON file to sanitize"),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output filename (default: input.sanitized.json)"),
    ] = None,
    replace_with: Annotated[
        str | None,
        typer.Option("--replace-with", "-r", help="Replacement for '$' and '.' (default: _)"),
    ] = None,
    allow_dots: Annotated[
        bool,
        typer.Option("--allow-dots", help="Leave '.' untouched, only replace '$'"),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Report only, write an unmodified copy"),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Options JSON file"),
    ] = None,
    max_size: Annotated[
        int | None,
        typer.Option("--max-size", help="Max file size in MB (default: 100, 0=unlimited)"),
    ] = 100,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", help="Max nesting depth (default: 100, 0=unlimited)"),
    ] = None,
) -> None:
    """Replace query-operator characters in a JSON file.

    Every key and string value containing '$' (and '.', unless
    --allow-dots is given) is rewritten. The input file is never modified.

    Args:
        input_file: JSON file to sanitize
        output: Output filename (default: input.sanitized.json)
        replace_with: Replacement string (default: _)
        allow_dots: Only replace '$'
        dry_run: Detect without rewriting
        config: Options JSON file; flags given on the command line win
        max_size: Maximum file size in MB (default: 100, 0=unlimited)
        max_depth: Maximum nesting depth (default: 100, 0=unlimited)

    Example:
        mongo-sanitizer sanitize body.json
        mongo-sanitizer sanitize body.json --output clean.json
        mongo-sanitizer sanitize body.json --allow-dots --replace-with -
        mongo-sanitizer sanitize body.json --config options.json
        mongo-sanitizer sanitize big.json --max-size 0  # No size limit
    """
    from mongo_sanitizer.sanitization import (
        InputSizeError,
        SanitizeDepthError,
        sanitize_json_file,
    )

    if not input_file.exists():
        typer.echo(f"Error: File not found: {input_file}", err=True)
        raise typer.Exit(1)

    if max_size is not None and max_size < 0:
        typer.echo(f"Error: max-size must be >= 0, got {max_size}", err=True)
        raise typer.Exit(1)

    if max_depth is not None and max_depth < 0:
        typer.echo(f"Error: max-depth must be >= 0, got {max_depth}", err=True)
        raise typer.Exit(1)

    # Convert max_size from MB to bytes (0 = unlimited)
    max_size_bytes: int | None = None
    if max_size is not None and max_size > 0:
        max_size_bytes = max_size * 1024 * 1024

    try:
        options = resolve_options(config, replace_with, allow_dots, dry_run, max_depth)
    except OptionsLoadError as e:
        typer.echo(f"Error: Failed to load options: {e}", err=True)
        raise typer.Exit(1) from None

    typer.echo(f"Sanitizing {input_file}...")
    if options["allow_dots"]:
        typer.echo("  Replacing '$' only (dots allowed)")
    else:
        typer.echo("  Replacing '$' and '.'")

    try:
        result_path, modified = sanitize_json_file(
            input_file,
            output,
            max_size=max_size_bytes,
            **options,
        )
    except InputSizeError as e:
        size_mb = e.size / 1024 / 1024
        limit_mb = e.max_size / 1024 / 1024
        typer.echo(f"Error: File too large ({size_mb:.1f} MB > {limit_mb:.1f} MB limit)", err=True)
        typer.echo("  Use --max-size to increase limit or --max-size 0 to disable", err=True)
        raise typer.Exit(1) from None
    except SanitizeDepthError as e:
        typer.echo(f"Error: Input nested too deeply (limit {e.max_depth})", err=True)
        typer.echo("  Use --max-depth to increase limit or --max-depth 0 to disable", err=True)
        raise typer.Exit(1) from None
    except FileNotFoundError as e:
        typer.echo(f"Error: File not found: {e.filename}", err=True)
        raise typer.Exit(1) from None
    except PermissionError as e:
        typer.echo(f"Error: Permission denied: {e.filename}", err=True)
        raise typer.Exit(1) from None
    except json.JSONDecodeError as e:
        typer.echo(f"Error: Invalid JSON in input file: {e.msg} at line {e.lineno}", err=True)
        raise typer.Exit(1) from None
    except UnicodeDecodeError as e:
        typer.echo(f"Error: Input file is not valid UTF-8: {e.reason} at byte {e.start}", err=True)
        raise typer.Exit(1) from None
    except OSError as e:
        typer.echo(f"Error: I/O error: {e}", err=True)
        raise typer.Exit(1) from None

    typer.echo(f"  Sanitized: {result_path}")
    if not modified:
        typer.echo("  No forbidden characters found")
    elif options["dry_run"]:
        typer.echo("  Forbidden characters found (dry run, output left unchanged)")
    else:
        typer.echo("  Forbidden characters replaced")
