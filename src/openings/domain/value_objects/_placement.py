"""Clash records, box sizing, settings and placement results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from ._elements import (
    CrossSection,
    HostDescriptor,
    HostType,
    RunCategory,
    RunDescriptor,
    SectionShape,
)
from ._geometry import Vec3

# 1e-4 cubic feet, the overlap volume below which a clash is surface contact.
DEFAULT_VOLUME_EPSILON_MM3 = 1e-4 * 304.8**3


class LengthUnit(str, Enum):
    """Linear unit of a model's working space."""

    MILLIMETER = "mm"
    CENTIMETER = "cm"
    METER = "m"
    FOOT = "ft"
    INCH = "in"

    @property
    def millimeters(self) -> float:
        """Length of one unit in millimeters."""
        return _MILLIMETERS_PER_UNIT[self]

    def from_millimeters(self, value: float) -> float:
        return value / self.millimeters

    def to_millimeters(self, value: float) -> float:
        return value * self.millimeters


_MILLIMETERS_PER_UNIT: dict[LengthUnit, float] = {
    LengthUnit.MILLIMETER: 1.0,
    LengthUnit.CENTIMETER: 10.0,
    LengthUnit.METER: 1000.0,
    LengthUnit.FOOT: 304.8,
    LengthUnit.INCH: 25.4,
}


@dataclass(frozen=True)
class PlacementSettings:
    """Sizing settings for one placement batch, in the model's length unit.

    Use :meth:`from_millimeters` to build settings from user-facing values;
    that is the only place millimeters are converted.

    Attributes:
        rounding_granularity: Box sizes are rounded up to multiples of this
            value (no rounding when <= 0).
        minimum_clearance: Gap kept on each side of the run.
        protrusion: How far the box sticks out of each host face.
        use_round_box_for_round_pipe: Round pipes get round box templates.
        use_round_box_for_round_duct: Round ducts get round box templates.
        volume_epsilon: Overlap volumes at or below this are not clashes.
    """

    rounding_granularity: float
    minimum_clearance: float
    protrusion: float
    use_round_box_for_round_pipe: bool = True
    use_round_box_for_round_duct: bool = False
    volume_epsilon: float = DEFAULT_VOLUME_EPSILON_MM3
    unit: LengthUnit = LengthUnit.MILLIMETER

    def __post_init__(self) -> None:
        if self.minimum_clearance < 0:
            raise ValueError("Minimum clearance cannot be negative")
        if self.protrusion < 0:
            raise ValueError("Protrusion cannot be negative")
        if self.volume_epsilon < 0:
            raise ValueError("Volume epsilon cannot be negative")

    @classmethod
    def from_millimeters(
        cls,
        rounding_granularity: float = 50.0,
        minimum_clearance: float = 30.0,
        protrusion: float = 100.0,
        use_round_box_for_round_pipe: bool = True,
        use_round_box_for_round_duct: bool = False,
        unit: LengthUnit = LengthUnit.MILLIMETER,
    ) -> PlacementSettings:
        """Build settings from millimeter values for a model in ``unit``."""
        return cls(
            rounding_granularity=unit.from_millimeters(rounding_granularity),
            minimum_clearance=unit.from_millimeters(minimum_clearance),
            protrusion=unit.from_millimeters(protrusion),
            use_round_box_for_round_pipe=use_round_box_for_round_pipe,
            use_round_box_for_round_duct=use_round_box_for_round_duct,
            volume_epsilon=DEFAULT_VOLUME_EPSILON_MM3 / unit.millimeters**3,
            unit=unit,
        )

    def prefers_round_box(self, category: RunCategory) -> bool:
        """Whether round runs of ``category`` get a round box template."""
        if category is RunCategory.PIPE:
            return self.use_round_box_for_round_pipe
        if category is RunCategory.DUCT:
            return self.use_round_box_for_round_duct
        return False


@dataclass(frozen=True)
class IntersectionRecord:
    """One clash between a run and a host element, in working space."""

    run: RunDescriptor
    host: HostDescriptor
    centroid: Vec3
    host_normal: Vec3
    run_direction: Vec3
    host_thickness: float

    def __post_init__(self) -> None:
        if not self.host_normal.is_unit():
            raise ValueError("Host normal must be a unit vector")
        if not self.run_direction.is_unit():
            raise ValueError("Run direction must be a unit vector")
        if self.host_thickness < 0:
            raise ValueError("Host thickness cannot be negative")

    @property
    def host_type(self) -> HostType:
        return self.host.host_type

    @property
    def run_category(self) -> RunCategory:
        return self.run.category

    @property
    def cross_section(self) -> CrossSection:
        return self.run.cross_section

    @property
    def section_shape(self) -> SectionShape:
        return self.run.section_shape

    @property
    def identity_tag(self) -> str:
        """Tag persisted on the box to recognise the same run/host pair later."""
        return f"{self.run.identity}|{self.host.identity}"


@dataclass(frozen=True)
class BoxSpec:
    """Computed size of an opening box.

    ``thickness`` is derived, so it always equals
    ``host_thickness + 2 * protrusion``.
    """

    width: float
    height: float
    host_thickness: float
    protrusion: float
    diameter: float | None = None

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("Box dimensions cannot be negative")
        if self.diameter is not None and self.diameter < 0:
            raise ValueError("Box diameter cannot be negative")

    @property
    def thickness(self) -> float:
        return self.host_thickness + 2 * self.protrusion

    @property
    def is_round(self) -> bool:
        return self.diameter is not None

    @property
    def stacking_height(self) -> float:
        """Size along the box's local up axis for wall boxes."""
        return self.diameter if self.diameter is not None else self.height


@dataclass(frozen=True)
class AppliedRotation:
    """A rotation the orientation solver applied to an instance.

    Attributes:
        step: Which refinement produced it (e.g. "wall_facing").
        confidence: "exact" for rotations derived from model vectors,
            "heuristic" for the axis-swap correction and "low" for the
            vertical-run fallback without a connector frame.
    """

    origin: Vec3
    axis: Vec3
    angle: float
    step: str
    confidence: Literal["exact", "heuristic", "low"] = "exact"


@dataclass
class PlacementResult:
    """Outcome of placing one opening box."""

    record: IntersectionRecord
    spec: BoxSpec | None = None
    anchor: Vec3 | None = None
    rotations: list[AppliedRotation] = field(default_factory=list)
    instance: Any = None
    instance_id: str | None = None
    failed_parameters: list[str] = field(default_factory=list)
    error: str | None = None
    duplicate_of: list[str] = field(default_factory=list)

    @property
    def created(self) -> bool:
        """Whether an instance exists in the target, even if a later step failed."""
        return self.instance is not None

    @property
    def succeeded(self) -> bool:
        return self.instance is not None and self.error is None

    @property
    def is_duplicate(self) -> bool:
        return bool(self.duplicate_of)
