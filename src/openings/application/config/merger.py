"""Configuration merging utilities for CLI override support.

This module merges CLI arguments with configuration file values, following
the precedence: CLI args > config values > defaults.

Only non-None CLI arguments override configuration values. Fields the
configuration left unset stay unset in the merged result.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from openings.application.config.schema import (
    OpeningConfiguration,
    PlacementSettingsConfig,
    TemplateCatalogConfig,
)


def merge_config_with_cli(
    config: OpeningConfiguration,
    *,
    rounding_granularity: float | None = None,
    minimum_clearance: float | None = None,
    protrusion: float | None = None,
    use_round_box_for_round_pipe: bool | None = None,
    use_round_box_for_round_duct: bool | None = None,
    template_folder: str | Path | None = None,
) -> OpeningConfiguration:
    """Merge CLI arguments with configuration values.

    Args:
        config: The base configuration.
        rounding_granularity: Override for settings.rounding_granularity (mm).
        minimum_clearance: Override for settings.minimum_clearance (mm).
        protrusion: Override for settings.protrusion (mm).
        use_round_box_for_round_pipe: Override for the pipe round preference.
        use_round_box_for_round_duct: Override for the duct round preference.
        template_folder: Override for templates.folder.

    Returns:
        A new, re-validated OpeningConfiguration.

    Example:
        >>> merged = merge_config_with_cli(config, protrusion=50.0)
        >>> merged.settings.protrusion
        50.0
    """
    settings_data = _apply_overrides(
        config.settings.model_dump(exclude_unset=True),
        rounding_granularity=rounding_granularity,
        minimum_clearance=minimum_clearance,
        protrusion=protrusion,
        use_round_box_for_round_pipe=use_round_box_for_round_pipe,
        use_round_box_for_round_duct=use_round_box_for_round_duct,
    )
    templates_data = _apply_overrides(
        config.templates.model_dump(exclude_unset=True),
        folder=str(template_folder) if template_folder is not None else None,
    )
    return OpeningConfiguration(
        schema_version=config.schema_version,
        model_unit=config.model_unit,
        settings=PlacementSettingsConfig.model_validate(settings_data),
        templates=TemplateCatalogConfig.model_validate(templates_data),
        parameters=config.parameters.model_copy(deep=True),
        filters=config.filters.model_copy(deep=True),
    )


def _apply_overrides(data: dict[str, Any], **overrides: Any) -> dict[str, Any]:
    for key, value in overrides.items():
        if value is not None:
            data[key] = value
    return data
