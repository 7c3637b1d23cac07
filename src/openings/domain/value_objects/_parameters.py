"""Parameter bindings for opening box templates."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ._elements import HostType


class BoxParameter(str, Enum):
    """Logical parameters written onto every placed box."""

    WIDTH = "width"
    SECONDARY = "secondary"
    WALL_THICKNESS = "wall_thickness"
    FLOOR_THICKNESS = "floor_thickness"
    PROTRUSION_1 = "protrusion_1"
    PROTRUSION_2 = "protrusion_2"
    IDENTITY_TAG = "identity_tag"


@dataclass(frozen=True)
class ParameterBinding:
    """Where a logical parameter lives on the template.

    ``identifier`` is a stable id (a shared-parameter GUID in most
    templates); ``name`` is the fallback looked up when the id is missing.
    """

    name: str
    identifier: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Parameter binding requires a name")


@dataclass(frozen=True)
class BoxParameterBindings:
    """Full set of parameter bindings for opening box templates.

    Wall and floor templates share the secondary-dimension identifier but
    name it differently ("Height" on walls, "Length" on floors).
    """

    width: ParameterBinding = field(
        default_factory=lambda: ParameterBinding(
            "Width", "6f459bf2-cf72-4223-9ee8-78e8252046a0"
        )
    )
    wall_secondary: ParameterBinding = field(
        default_factory=lambda: ParameterBinding(
            "Height", "60bf9b18-17f9-4b8f-b214-fc13bc7b357f"
        )
    )
    floor_secondary: ParameterBinding = field(
        default_factory=lambda: ParameterBinding(
            "Length", "60bf9b18-17f9-4b8f-b214-fc13bc7b357f"
        )
    )
    wall_thickness: ParameterBinding = field(
        default_factory=lambda: ParameterBinding(
            "Wall Thickness", "6df7db81-c1d3-48f5-97a1-cd35960d9f1c"
        )
    )
    floor_thickness: ParameterBinding = field(
        default_factory=lambda: ParameterBinding(
            "Slab Thickness", "6b790a90-bd86-4366-84ee-8a6e60af2288"
        )
    )
    protrusion_1: ParameterBinding = field(
        default_factory=lambda: ParameterBinding(
            "Additional Thickness 1", "ed4c28e9-f16d-49e8-bb98-7be58cdc2893"
        )
    )
    protrusion_2: ParameterBinding = field(
        default_factory=lambda: ParameterBinding(
            "Additional Thickness 2", "1362f685-6d3d-4b3c-8a6d-51c59e1fd44b"
        )
    )
    identity_tag: ParameterBinding = field(
        default_factory=lambda: ParameterBinding("Comments")
    )

    def binding_for(
        self, parameter: BoxParameter, host_type: HostType
    ) -> ParameterBinding:
        """Return the binding of ``parameter`` on a ``host_type`` template."""
        if parameter is BoxParameter.WIDTH:
            return self.width
        if parameter is BoxParameter.SECONDARY:
            return (
                self.wall_secondary
                if host_type is HostType.WALL
                else self.floor_secondary
            )
        if parameter is BoxParameter.WALL_THICKNESS:
            return self.wall_thickness
        if parameter is BoxParameter.FLOOR_THICKNESS:
            return self.floor_thickness
        if parameter is BoxParameter.PROTRUSION_1:
            return self.protrusion_1
        if parameter is BoxParameter.PROTRUSION_2:
            return self.protrusion_2
        return self.identity_tag

    def thickness_for(self, host_type: HostType) -> ParameterBinding:
        if host_type is HostType.WALL:
            return self.wall_thickness
        return self.floor_thickness
