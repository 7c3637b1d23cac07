"""Typer CLI for opening box placement."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

from openings.application import ServiceFactory
from openings.application.config import merge_config_with_cli
from openings.cli.commands import templates_command, validate_command
from openings.cli.commands.common import (
    display_load_error,
    load_cli_config,
    resolve_template_folder,
)
from openings.infrastructure import SceneError, SceneSchema, load_scene, save_scene
from openings.logging_config import setup_logging

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="openings",
    help="Place opening boxes where pipes, ducts and trays cross walls and floors.",
)

# Register standalone commands
app.command(name="validate")(validate_command)
app.command(name="templates")(templates_command)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log progress to stderr"),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Write a DEBUG trace log to this file"),
    ] = None,
) -> None:
    """Opening box placement for federated building models."""
    setup_logging(
        level=logging.DEBUG if verbose else logging.WARNING,
        log_file=str(log_file) if log_file else None,
    )


def _load_scene_or_exit(scene_file: Path) -> SceneSchema:
    try:
        return load_scene(scene_file)
    except SceneError as e:
        display_load_error(e)
        raise typer.Exit(code=1)


@app.command()
def place(
    scene_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON scene file"),
    ],
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to JSON configuration file"),
    ] = None,
    templates_dir: Annotated[
        Path | None,
        typer.Option("--templates", "-t", help="Folder holding box templates"),
    ] = None,
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the scene with placed boxes here"),
    ] = None,
    stl_file: Annotated[
        Path | None,
        typer.Option("--stl", help="Export the placed boxes to an STL file"),
    ] = None,
    rounding: Annotated[
        float | None,
        typer.Option("--rounding", help="Round box sizes up to this multiple (mm)"),
    ] = None,
    clearance: Annotated[
        float | None,
        typer.Option("--clearance", help="Gap on each side of the run (mm)"),
    ] = None,
    protrusion: Annotated[
        float | None,
        typer.Option("--protrusion", help="Box protrusion past each host face (mm)"),
    ] = None,
    round_pipe: Annotated[
        bool | None,
        typer.Option(
            "--round-pipe/--square-pipe", help="Round boxes for round pipes"
        ),
    ] = None,
    round_duct: Annotated[
        bool | None,
        typer.Option(
            "--round-duct/--square-duct", help="Round boxes for round ducts"
        ),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Place without asking for confirmation"),
    ] = False,
) -> None:
    """Find clashes in a scene and place one opening box per clash.

    Example:
        openings place model.json --output placed.json --stl boxes.stl
    """
    config = merge_config_with_cli(
        load_cli_config(config_file),
        rounding_granularity=rounding,
        minimum_clearance=clearance,
        protrusion=protrusion,
        use_round_box_for_round_pipe=round_pipe,
        use_round_box_for_round_duct=round_duct,
    )
    scene = _load_scene_or_exit(scene_file)
    factory = ServiceFactory(
        scene=scene,
        config=config,
        template_folder=resolve_template_folder(config, config_file, templates_dir),
    )

    def confirm(count: int) -> bool:
        return typer.confirm(
            f"Place opening boxes for {count} intersection(s)?", default=True
        )

    command = factory.create_place_command()
    plan = command.prepare(factory.create_request(), confirm=None if yes else confirm)
    with factory.create_dispatcher() as dispatcher:
        outcome = dispatcher.submit(command, plan).result()

    typer.echo(factory.get_batch_summary_formatter().format(outcome))
    duplicate_report = factory.get_duplicate_report_formatter().format(outcome)
    if duplicate_report:
        typer.echo()
        typer.echo(duplicate_report)

    if outcome.cancelled:
        return
    if not outcome.success:
        raise typer.Exit(code=1)

    if output_file is not None:
        save_scene(factory.get_document(), scene, output_file)
        typer.echo(f"\nScene written to: {output_file}")
    if stl_file is not None:
        count = factory.get_stl_exporter().export_to_file(outcome.results, stl_file)
        typer.echo(f"STL with {count} box(es) written to: {stl_file}")


@app.command()
def scan(
    scene_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON scene file"),
    ],
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to JSON configuration file"),
    ] = None,
) -> None:
    """List clashes and the box each would receive, without placing anything."""
    config = load_cli_config(config_file)
    scene = _load_scene_or_exit(scene_file)
    factory = ServiceFactory(scene=scene, config=config)
    request = factory.create_request()
    report = factory.create_scan_command().execute(
        request.run_elements,
        request.wall_elements,
        request.floor_elements,
        request.settings,
    )
    typer.echo(factory.get_intersection_table_formatter().format(report))


if __name__ == "__main__":
    app()
