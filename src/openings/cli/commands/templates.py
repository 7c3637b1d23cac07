"""Templates command listing the box templates a batch expects."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from openings.cli.commands.common import load_cli_config, resolve_template_folder
from openings.domain.value_objects import HostType, SectionShape
from openings.infrastructure import (
    DirectoryTemplateCatalog,
    InMemoryDocument,
    bundled_template_folder,
)


def templates_command(
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to JSON configuration file"),
    ] = None,
    templates_dir: Annotated[
        Path | None,
        typer.Option("--templates", "-t", help="Folder holding box templates"),
    ] = None,
) -> None:
    """List the template expected for every host type and box shape.

    Exits with code 1 when any expected template file is missing.

    Example:
        openings templates --templates ./families
    """
    config = load_cli_config(config_file)
    folder = resolve_template_folder(config, config_file, templates_dir)
    templates = config.templates
    catalog = DirectoryTemplateCatalog(
        folder=folder or bundled_template_folder(),
        document=InMemoryDocument(),
        family_names={
            (host_type, shape): templates.family_name(host_type, shape)
            for host_type in HostType
            for shape in SectionShape
        },
        extension=templates.extension,
    )

    typer.echo(f"Template folder: {catalog.folder}")
    typer.echo()
    expected = catalog.expected_templates()
    for template in expected:
        status = "ok" if template.exists else "MISSING"
        typer.echo(
            f"  {template.host_type.value:<6} {template.shape.value:<12} "
            f"{template.name:<32} {status}"
        )

    missing = [template for template in expected if not template.exists]
    if missing:
        typer.echo()
        typer.echo(f"{len(missing)} template(s) missing.", err=True)
        raise typer.Exit(code=1)
