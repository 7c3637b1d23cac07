"""Adapters from configuration models to domain objects.

This is the only place millimeter settings are converted to the model unit.
"""

from __future__ import annotations

from pathlib import Path

from openings.application.config.schema import (
    ElementFilterConfig,
    OpeningConfiguration,
    ParameterBindingConfig,
)
from openings.contracts.dtos import ElementFilter
from openings.domain.value_objects import (
    BoxParameterBindings,
    LengthUnit,
    ParameterBinding,
    PlacementSettings,
)


def config_to_settings(
    config: OpeningConfiguration, unit: LengthUnit | None = None
) -> PlacementSettings:
    """Build batch settings in the model unit.

    Args:
        config: Validated configuration.
        unit: Unit of the target model, used when the configuration does
            not pin one. Millimeters when neither is given.

    Returns:
        Immutable settings with every length in the model unit.
    """
    model_unit = config.model_unit or unit or LengthUnit.MILLIMETER
    settings = config.settings
    return PlacementSettings.from_millimeters(
        rounding_granularity=settings.rounding_granularity,
        minimum_clearance=settings.minimum_clearance,
        protrusion=settings.protrusion,
        use_round_box_for_round_pipe=settings.use_round_box_for_round_pipe,
        use_round_box_for_round_duct=settings.use_round_box_for_round_duct,
        unit=model_unit,
    )


def _binding(config: ParameterBindingConfig) -> ParameterBinding:
    return ParameterBinding(name=config.name, identifier=config.identifier)


def config_to_bindings(config: OpeningConfiguration) -> BoxParameterBindings:
    parameters = config.parameters
    return BoxParameterBindings(
        width=_binding(parameters.width),
        wall_secondary=_binding(parameters.wall_secondary),
        floor_secondary=_binding(parameters.floor_secondary),
        wall_thickness=_binding(parameters.wall_thickness),
        floor_thickness=_binding(parameters.floor_thickness),
        protrusion_1=_binding(parameters.protrusion_1),
        protrusion_2=_binding(parameters.protrusion_2),
        identity_tag=_binding(parameters.identity_tag),
    )


def _filter(config: ElementFilterConfig) -> ElementFilter:
    return ElementFilter.of(config.type_names, config.parameter_values)


def config_to_filters(
    config: OpeningConfiguration,
) -> tuple[ElementFilter, ElementFilter]:
    """Return the run filter and the host filter."""
    return _filter(config.filters.runs), _filter(config.filters.hosts)


def template_folder(config: OpeningConfiguration, base_dir: Path | None = None) -> Path:
    """Resolve the template folder, relative to ``base_dir`` when not absolute."""
    folder = Path(config.templates.folder).expanduser()
    if folder.is_absolute() or base_dir is None:
        return folder
    return base_dir / folder
