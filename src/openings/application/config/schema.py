"""Pydantic configuration schema models for opening box placement.

This module defines the configuration schema for JSON-based settings files.
It uses Pydantic v2 for validation and serialization. All lengths in the
configuration are millimeters; they are converted to the model unit once,
in :mod:`openings.application.config.adapter`.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from openings.domain.value_objects import (
    BoxParameterBindings,
    HostType,
    LengthUnit,
    ParameterBinding,
    SectionShape,
)

# Supported schema versions for configuration files
# Version 1.0: Initial schema with settings, templates and parameter bindings
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})

_DEFAULT_BINDINGS = BoxParameterBindings()


class PlacementSettingsConfig(BaseModel):
    """Sizing settings, in millimeters.

    Attributes:
        rounding_granularity: Box sizes are rounded up to multiples of this
            value; 0 disables rounding.
        minimum_clearance: Gap between run and box on each side.
        protrusion: How far the box sticks out of each host face.
        use_round_box_for_round_pipe: Round pipes get round boxes.
        use_round_box_for_round_duct: Round ducts get round boxes.
    """

    model_config = ConfigDict(extra="forbid")

    rounding_granularity: float = Field(default=50.0, ge=0)
    minimum_clearance: float = Field(default=30.0, ge=0)
    protrusion: float = Field(default=100.0, ge=0)
    use_round_box_for_round_pipe: bool = True
    use_round_box_for_round_duct: bool = False


class TemplateCatalogConfig(BaseModel):
    """Where box templates live and what they are called.

    Attributes:
        folder: Directory holding the template files. Relative paths are
            resolved against the configuration file's directory.
        wall_rectangular: Template name for rectangular wall boxes.
        wall_round: Template name for round wall boxes.
        floor_rectangular: Template name for rectangular floor boxes.
        floor_round: Template name for round floor boxes.
        extension: File extension of template files.
    """

    model_config = ConfigDict(extra="forbid")

    folder: str = "templates"
    wall_rectangular: str = "OpeningBox_Wall_Rectangular"
    wall_round: str = "OpeningBox_Wall_Round"
    floor_rectangular: str = "OpeningBox_Floor_Rectangular"
    floor_round: str = "OpeningBox_Floor_Round"
    extension: str = Field(default=".json", pattern=r"^\.[A-Za-z0-9]+$")

    def family_name(self, host_type: HostType, shape: SectionShape) -> str:
        """Template name for a host type and effective shape."""
        if host_type is HostType.WALL:
            if shape is SectionShape.ROUND:
                return self.wall_round
            return self.wall_rectangular
        if shape is SectionShape.ROUND:
            return self.floor_round
        return self.floor_rectangular


class ParameterBindingConfig(BaseModel):
    """One template parameter: display name plus optional stable identifier."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    identifier: str | None = None

    @classmethod
    def from_binding(cls, binding: ParameterBinding) -> ParameterBindingConfig:
        return cls(name=binding.name, identifier=binding.identifier)


def _default(attribute: str):
    return lambda: ParameterBindingConfig.from_binding(
        getattr(_DEFAULT_BINDINGS, attribute)
    )


class ParameterBindingsConfig(BaseModel):
    """Parameter bindings of the box templates.

    Defaults match the shared parameters of the bundled templates.
    """

    model_config = ConfigDict(extra="forbid")

    width: ParameterBindingConfig = Field(default_factory=_default("width"))
    wall_secondary: ParameterBindingConfig = Field(
        default_factory=_default("wall_secondary")
    )
    floor_secondary: ParameterBindingConfig = Field(
        default_factory=_default("floor_secondary")
    )
    wall_thickness: ParameterBindingConfig = Field(
        default_factory=_default("wall_thickness")
    )
    floor_thickness: ParameterBindingConfig = Field(
        default_factory=_default("floor_thickness")
    )
    protrusion_1: ParameterBindingConfig = Field(
        default_factory=_default("protrusion_1")
    )
    protrusion_2: ParameterBindingConfig = Field(
        default_factory=_default("protrusion_2")
    )
    identity_tag: ParameterBindingConfig = Field(
        default_factory=_default("identity_tag")
    )


class ElementFilterConfig(BaseModel):
    """Type name and parameter value filter for one element group.

    Attributes:
        type_names: Accepted type names; any type when empty.
        parameter_values: Accepted text values per parameter name.
    """

    model_config = ConfigDict(extra="forbid")

    type_names: list[str] = Field(default_factory=list)
    parameter_values: dict[str, list[str]] = Field(default_factory=dict)


class FiltersConfig(BaseModel):
    """Filters for runs and for host walls and floors."""

    model_config = ConfigDict(extra="forbid")

    runs: ElementFilterConfig = Field(default_factory=ElementFilterConfig)
    hosts: ElementFilterConfig = Field(default_factory=ElementFilterConfig)


class OpeningConfiguration(BaseModel):
    """Root configuration model for opening box placement.

    Attributes:
        schema_version: Version string in format "major.minor" (e.g., "1.0")
        model_unit: Length unit of the target model; when omitted the unit
            declared by the scene is used.
        settings: Sizing settings in millimeters.
        templates: Template catalog location and names.
        parameters: Template parameter bindings.
        filters: Element filters applied when collecting a batch.

    Example:
        >>> config = OpeningConfiguration(
        ...     schema_version="1.0",
        ...     settings=PlacementSettingsConfig(rounding_granularity=25.0),
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default="1.0", pattern=r"^\d+\.\d+$")
    model_unit: LengthUnit | None = None
    settings: PlacementSettingsConfig = Field(default_factory=PlacementSettingsConfig)
    templates: TemplateCatalogConfig = Field(default_factory=TemplateCatalogConfig)
    parameters: ParameterBindingsConfig = Field(
        default_factory=ParameterBindingsConfig
    )
    filters: FiltersConfig = Field(default_factory=FiltersConfig)

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Accept supported versions and newer minors of a supported major."""
        if v in SUPPORTED_VERSIONS:
            return v
        major = v.split(".")[0]
        supported_majors = {version.split(".")[0] for version in SUPPORTED_VERSIONS}
        if major in supported_majors:
            return v
        raise ValueError(
            f"Unsupported schema version: {v}. "
            f"Supported versions: {', '.join(sorted(SUPPORTED_VERSIONS))}"
        )
