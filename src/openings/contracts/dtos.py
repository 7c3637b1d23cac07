"""Shared Data Transfer Objects for cross-layer communication.

This module contains DTOs exchanged between the domain services, the
application layer and the infrastructure adapters: kernel results, path
curves, element filters and the batch request, plan and outcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Sequence

from openings.domain.value_objects import (
    BoxSpec,
    ElementDescriptor,
    IntersectionRecord,
    PlacementResult,
    PlacementSettings,
    Vec3,
)

if TYPE_CHECKING:
    from openings.domain.services import ScanStats


@dataclass(frozen=True)
class GeometryResult:
    """Result of a kernel Boolean operation.

    Attributes:
        ok: Whether the kernel evaluated the operation.
        solid: The resulting solid, ``None`` when the solids do not overlap.
        error: Kernel error text when ``ok`` is False.
    """

    ok: bool
    solid: Any = None
    error: str | None = None

    @classmethod
    def success(cls, solid: Any) -> GeometryResult:
        return cls(ok=True, solid=solid)

    @classmethod
    def empty(cls) -> GeometryResult:
        return cls(ok=True, solid=None)

    @classmethod
    def failure(cls, error: str) -> GeometryResult:
        return cls(ok=False, error=error)


@dataclass(frozen=True)
class PathCurve:
    """Straight path of a run or wall in the element's own coordinates."""

    start: Vec3
    end: Vec3

    @property
    def direction(self) -> Vec3:
        """Unnormalized end-minus-start vector."""
        return self.end - self.start


@dataclass
class ScanReport:
    """Clashes found by a read-only scan, with the box each would get.

    Attributes:
        records: Detected clashes in scan order.
        specs: Computed box size per record.
        stats: Scan counters.
    """

    records: list[IntersectionRecord] = field(default_factory=list)
    specs: list[BoxSpec] = field(default_factory=list)
    stats: ScanStats | None = None


@dataclass
class BatchRequest:
    """Input of one placement batch.

    Attributes:
        run_elements: Candidate pipes, ducts and trays.
        wall_elements: Candidate walls.
        floor_elements: Candidate floor slabs.
        settings: Sizing settings, already in the model unit.
        name: Label of the mutation session.
    """

    run_elements: Sequence[ElementDescriptor]
    wall_elements: Sequence[ElementDescriptor]
    floor_elements: Sequence[ElementDescriptor]
    settings: PlacementSettings
    name: str = "Place opening boxes"


@dataclass
class BatchOutcome:
    """Terminal result of one placement batch.

    Attributes:
        created_count: Number of box instances actually created.
        duplicate_identities: Identity tags matching boxes that existed
            before the batch.
        error_message: Message when the batch failed or found nothing.
        success: Whether the batch ran to completion.
        cancelled: The user declined before any mutation.
        intersections_found: Number of clashes detected.
        failed_count: Records that could not be placed.
        results: Per-record placement results.
    """

    created_count: int = 0
    duplicate_identities: list[str] = field(default_factory=list)
    error_message: str | None = None
    success: bool = True
    cancelled: bool = False
    intersections_found: int = 0
    failed_count: int = 0
    results: list[PlacementResult] = field(default_factory=list)

    @classmethod
    def failed(cls, message: str) -> BatchOutcome:
        return cls(success=False, error_message=message)

    @classmethod
    def cancelled_by_user(cls) -> BatchOutcome:
        return cls(success=False, cancelled=True)

    @property
    def has_duplicates(self) -> bool:
        return bool(self.duplicate_identities)


@dataclass
class PlacementPlan:
    """A batch whose clashes were found and confirmed outside the mutation thread.

    Attributes:
        request: The batch the plan was built from.
        records: Clashes to place boxes for, in scan order.
        outcome: Terminal outcome when the batch ends before placement
            (rejected target, nothing to place, or cancelled).
    """

    request: BatchRequest
    records: list[IntersectionRecord] = field(default_factory=list)
    outcome: BatchOutcome | None = None

    @property
    def ready(self) -> bool:
        """Whether the plan still has boxes to place."""
        return self.outcome is None


@dataclass(frozen=True)
class ElementFilter:
    """Narrows collected elements by type name and parameter values.

    An empty filter lets every element through. Parameter values are
    compared as text; an element lacking a filtered parameter is dropped.

    Attributes:
        type_names: Accepted type names; any type when empty.
        parameter_values: Accepted values per parameter name.
    """

    type_names: frozenset[str] = frozenset()
    parameter_values: Mapping[str, frozenset[str]] = field(default_factory=dict)

    @classmethod
    def of(
        cls,
        type_names: Iterable[str] = (),
        parameter_values: Mapping[str, Iterable[str]] | None = None,
    ) -> ElementFilter:
        return cls(
            type_names=frozenset(type_names),
            parameter_values={
                name: frozenset(values)
                for name, values in (parameter_values or {}).items()
            },
        )

    @property
    def is_empty(self) -> bool:
        return not self.type_names and not self.parameter_values
