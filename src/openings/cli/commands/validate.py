"""Validate command for checking settings configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from openings.application.config import ConfigError, load_config
from openings.cli.commands.common import display_load_error


def validate_command(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON configuration file to validate"),
    ],
) -> None:
    """Validate an opening box configuration file.

    Checks the configuration file for JSON syntax errors and schema
    validation errors (unknown fields, negative lengths, unsupported
    versions).

    Exit codes:
        0 - Configuration is valid
        1 - Configuration has errors (cannot be used)

    Example:
        openings validate openings.json
    """
    typer.echo(f"Validating {config_file}...")
    typer.echo()

    try:
        config = load_config(config_file)
    except ConfigError as e:
        display_load_error(e)
        typer.echo()
        typer.echo("Validation failed.", err=True)
        raise typer.Exit(code=1)

    settings = config.settings
    typer.echo(f"  Rounding granularity: {settings.rounding_granularity:g} mm")
    typer.echo(f"  Minimum clearance:    {settings.minimum_clearance:g} mm")
    typer.echo(f"  Protrusion:           {settings.protrusion:g} mm")
    round_pipe = _yes_no(settings.use_round_box_for_round_pipe)
    round_duct = _yes_no(settings.use_round_box_for_round_duct)
    typer.echo(f"  Round pipe boxes:     {round_pipe}")
    typer.echo(f"  Round duct boxes:     {round_duct}")
    if config.model_unit is not None:
        typer.echo(f"  Model unit:           {config.model_unit.value}")
    typer.echo()
    typer.echo("Validation passed. Configuration is valid.")


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"
