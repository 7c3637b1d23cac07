"""Helpers shared by the CLI commands."""

from __future__ import annotations

from pathlib import Path

import typer

from openings.application.config import (
    ConfigError,
    OpeningConfiguration,
    load_config,
    template_folder,
)


def display_load_error(error: ConfigError) -> None:
    """Display a configuration or scene loading error on stderr."""
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            message = detail.get("message", "Unknown error")
            typer.echo(f"    Line {line}, Column {column}: {message}", err=True)
    elif error.error_type == "validation":
        for detail in error.details:
            path = detail.get("path", "unknown")
            message = detail.get("message", "Unknown error")
            typer.echo(f"  {path}: {message}", err=True)
            value = detail.get("value")
            if value is not None:
                typer.echo(f"    Value: {value!r}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)


def load_cli_config(config_file: Path | None) -> OpeningConfiguration:
    """Load ``config_file``, or the defaults when none is given.

    Exits with code 1 after printing the error when loading fails.
    """
    if config_file is None:
        return OpeningConfiguration()
    try:
        return load_config(config_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)


def resolve_template_folder(
    config: OpeningConfiguration,
    config_file: Path | None,
    templates_dir: Path | None,
) -> Path | None:
    """Pick the template folder for a command.

    ``--templates`` wins; otherwise a folder set explicitly in the
    configuration file, resolved against the file's directory. ``None``
    selects the bundled templates.
    """
    if templates_dir is not None:
        return templates_dir
    if config_file is not None and "folder" in config.templates.model_fields_set:
        return template_folder(config, config_file.parent)
    return None
