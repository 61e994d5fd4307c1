"""
Extracts utility class names from source files, or minifies a CSS file.
"""

from __future__ import annotations

import json
from pathlib import Path

import click
from .accumulator import ClassAccumulator, extract_files
from .config import ConfigError, apply_overrides, build_config, validate_config
from .constants import CSS_EXTENSIONS
from .exceptions import ExtractFileError
from .filesystem import get_max_input_bytes, get_max_matches, read_text, resolve_source_path
from .normalizer import minify_css

__all__ = ["cli"]


@click.group()
@click.version_option(package_name="class-extractor")
def cli():
    """Extract utility class names and minify generated CSS."""


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print classes as a JSON array")
@click.option("--workers", type=click.IntRange(min=1), default=1, help="Worker processes")
@click.option("--max-matches", type=int, help="Maximum unique classes per file")
@click.option("--max-input-bytes", type=int, help="Maximum bytes scanned per file")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
def scan(
    paths: tuple[str, ...],
    as_json: bool = False,
    workers: int = 1,
    max_matches: int | None = None,
    max_input_bytes: int | None = None,
):
    """
    Print the classes referenced by one or more source files.

    Args:
        paths: Source files to scan.
        as_json: Print a JSON array instead of one class per line.
        workers: Number of worker processes.
        max_matches: Override for the per-file class limit.
        max_input_bytes: Override for the per-file byte limit.

    Raises:
        click.BadParameter: If a path or configuration value is invalid.
        click.ClickException: If a file cannot be read or decoded.

    Examples:
        class-extractor scan index.html src/App.tsx --json
    """
    base_dir = Path.cwd().resolve()
    filepaths: list[Path] = []
    for raw_path in paths:
        try:
            filepaths.append(resolve_source_path(raw_path, base_dir))
        except ValueError as error:
            raise click.BadParameter(str(error)) from error

    try:
        config = build_config(base_dir)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        environment = {
            "max_input_bytes": get_max_input_bytes(default=config.max_input_bytes),
            "max_matches": get_max_matches(default=config.max_matches),
        }
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    config = apply_overrides(config, **environment)
    config = apply_overrides(config, max_matches=max_matches, max_input_bytes=max_input_bytes)
    try:
        validate_config(config)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        results = extract_files(filepaths, config, max_workers=workers)
    except ExtractFileError as error:
        raise click.ClickException(str(error)) from error

    session = ClassAccumulator()
    for filepath in filepaths:
        result = results[filepath]
        if result.truncated:
            click.echo(
                f"Warning: {filepath} exceeds the maximum of {config.max_input_bytes} bytes; "
                "only the beginning of the file was scanned",
                err=True,
            )
        session.merge(result.classes)

    if as_json:
        click.echo(json.dumps(session.classes))
    else:
        for name in session.classes:
            click.echo(name)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def minify(path: str):
    """
    Print a CSS file with comments and redundant whitespace removed.

    Examples:
        class-extractor minify dist/app.css > dist/app.min.css
    """
    base_dir = Path.cwd().resolve()
    try:
        filepath = resolve_source_path(path, base_dir, CSS_EXTENSIONS)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_input_bytes = get_max_input_bytes()
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        css = read_text(filepath, max_input_bytes)
    except UnicodeDecodeError as error:
        raise click.ClickException(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except IOError as error:
        raise click.ClickException(f"{filepath}: {error}") from error

    click.echo(minify_css(css))


if __name__ == "__main__":
    cli()
