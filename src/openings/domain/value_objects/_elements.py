"""Element descriptors, categories and run cross sections."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from ._geometry import Transform


class ElementCategory(str, Enum):
    """Source-model categories the engine knows how to read."""

    PIPES = "pipes"
    FLEX_PIPES = "flex_pipes"
    DUCTS = "ducts"
    FLEX_DUCTS = "flex_ducts"
    CABLE_TRAYS = "cable_trays"
    CONDUITS = "conduits"
    WALLS = "walls"
    FLOORS = "floors"


class RunCategory(str, Enum):
    """Kind of run element penetrating a host."""

    PIPE = "pipe"
    DUCT = "duct"
    TRAY = "tray"
    UNKNOWN = "unknown"


class HostType(str, Enum):
    """Kind of enclosing element a run passes through."""

    WALL = "wall"
    FLOOR = "floor"


class SectionShape(str, Enum):
    """Cross-section shape of a run, and of the box template derived from it."""

    ROUND = "round"
    RECTANGULAR = "rectangular"


class DimensionParameter(str, Enum):
    """Well-known authored dimension parameters read from source elements."""

    PIPE_DIAMETER = "pipe_diameter"
    CURVE_DIAMETER = "curve_diameter"
    CURVE_WIDTH = "curve_width"
    CURVE_HEIGHT = "curve_height"
    CABLE_TRAY_WIDTH = "cable_tray_width"
    CABLE_TRAY_HEIGHT = "cable_tray_height"
    WALL_WIDTH = "wall_width"


RUN_ELEMENT_CATEGORIES: tuple[ElementCategory, ...] = (
    ElementCategory.PIPES,
    ElementCategory.DUCTS,
    ElementCategory.CABLE_TRAYS,
    ElementCategory.CONDUITS,
    ElementCategory.FLEX_PIPES,
    ElementCategory.FLEX_DUCTS,
)

_RUN_CATEGORY_BY_ELEMENT_CATEGORY: dict[ElementCategory, RunCategory] = {
    ElementCategory.PIPES: RunCategory.PIPE,
    ElementCategory.FLEX_PIPES: RunCategory.PIPE,
    ElementCategory.DUCTS: RunCategory.DUCT,
    ElementCategory.FLEX_DUCTS: RunCategory.DUCT,
    ElementCategory.CABLE_TRAYS: RunCategory.TRAY,
    ElementCategory.CONDUITS: RunCategory.TRAY,
}


def run_category_for(category: ElementCategory | str | None) -> RunCategory:
    """Map a source category to the run category used for template lookup."""
    if category is None:
        return RunCategory.UNKNOWN
    try:
        element_category = ElementCategory(category)
    except ValueError:
        return RunCategory.UNKNOWN
    return _RUN_CATEGORY_BY_ELEMENT_CATEGORY.get(element_category, RunCategory.UNKNOWN)


@dataclass(frozen=True)
class RoundSection:
    """Round run cross section."""

    diameter: float

    def __post_init__(self) -> None:
        if self.diameter < 0:
            raise ValueError("Diameter cannot be negative")

    @property
    def shape(self) -> SectionShape:
        return SectionShape.ROUND


@dataclass(frozen=True)
class RectangularSection:
    """Rectangular run cross section (width across, height up)."""

    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("Section dimensions cannot be negative")

    @property
    def shape(self) -> SectionShape:
        return SectionShape.RECTANGULAR


CrossSection = Union[RoundSection, RectangularSection]


@dataclass(frozen=True)
class ElementDescriptor:
    """Reference to a source-model element and its transform into working space.

    Attributes:
        model_id: Identifier of the (linked) sub-model holding the element.
        element_id: Identifier of the element inside its sub-model.
        transform: Rigid transform from the sub-model into working space.
        element: Opaque handle understood by the model and kernel adapters.
    """

    model_id: str
    element_id: str
    transform: Transform = field(default_factory=Transform.identity)
    element: Any = field(default=None, compare=False, repr=False)

    @property
    def identity(self) -> str:
        return f"{self.model_id}:{self.element_id}"


@dataclass(frozen=True)
class RunDescriptor(ElementDescriptor):
    """Run element (pipe, duct, tray) with its category and cross section."""

    category: RunCategory = RunCategory.UNKNOWN
    cross_section: CrossSection = field(
        default_factory=lambda: RectangularSection(width=0.0, height=0.0)
    )

    @classmethod
    def from_element(
        cls,
        descriptor: ElementDescriptor,
        category: RunCategory,
        cross_section: CrossSection,
    ) -> RunDescriptor:
        return cls(
            model_id=descriptor.model_id,
            element_id=descriptor.element_id,
            transform=descriptor.transform,
            element=descriptor.element,
            category=category,
            cross_section=cross_section,
        )

    @property
    def section_shape(self) -> SectionShape:
        return self.cross_section.shape


@dataclass(frozen=True)
class HostDescriptor(ElementDescriptor):
    """Wall or floor element a run may pass through."""

    host_type: HostType = HostType.WALL

    @classmethod
    def from_element(
        cls, descriptor: ElementDescriptor, host_type: HostType
    ) -> HostDescriptor:
        return cls(
            model_id=descriptor.model_id,
            element_id=descriptor.element_id,
            transform=descriptor.transform,
            element=descriptor.element,
            host_type=host_type,
        )


@dataclass(frozen=True)
class LinkedModel:
    """A source sub-model and its placement in working space."""

    model_id: str
    name: str
    transform: Transform = field(default_factory=Transform.identity)
    is_loaded: bool = True
