"""Clash detection between run elements and wall/floor hosts.

Every run is tested against every wall and then every floor. A pair is a
clash when any of its transformed solids overlap with a volume above the
configured epsilon; touching faces are not clashes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence

from ..exceptions import (
    BooleanOperationFailure,
    DegenerateIntersection,
    GeometryExtractionFailure,
)
from ..value_objects import (
    X_AXIS,
    Z_AXIS,
    CrossSection,
    DimensionParameter,
    ElementDescriptor,
    HostDescriptor,
    HostType,
    IntersectionRecord,
    RectangularSection,
    RoundSection,
    RunDescriptor,
    Vec3,
    run_category_for,
)

if TYPE_CHECKING:
    from openings.contracts.protocols import (
        GeometryKernelProtocol,
        ModelQueryProtocol,
    )

logger = logging.getLogger(__name__)

__all__ = [
    "IntersectionFinder",
    "ScanStats",
]


@dataclass
class ScanStats:
    """Counters collected during one scan.

    Attributes:
        pairs_tested: Run/host pairs whose solids were compared.
        boolean_failures: Solid pairs the kernel could not intersect.
        degenerate_overlaps: Overlaps rejected as surface contact.
        skipped_elements: Elements without usable solids.
        records_found: Clashes emitted.
    """

    pairs_tested: int = 0
    boolean_failures: int = 0
    degenerate_overlaps: int = 0
    skipped_elements: int = 0
    records_found: int = 0


class IntersectionFinder:
    """Pairs runs against hosts and emits one record per true clash.

    Host solids are extracted at most once per scan. A new scan (a new call
    to :meth:`find`) starts with an empty memo and fresh counters.

    Attributes:
        kernel: Geometry kernel used for solids and Boolean intersection.
        model: Source model used to read categories, parameters and curves.
        volume_epsilon: Overlap volumes at or below this are ignored.
        stats: Counters of the most recent scan.
    """

    def __init__(
        self,
        kernel: GeometryKernelProtocol,
        model: ModelQueryProtocol,
        volume_epsilon: float,
    ) -> None:
        self.kernel = kernel
        self.model = model
        self.volume_epsilon = volume_epsilon
        self.stats = ScanStats()
        self._host_solids: dict[str, list[Any]] = {}

    def find(
        self,
        runs: Sequence[ElementDescriptor],
        walls: Sequence[ElementDescriptor],
        floors: Sequence[ElementDescriptor],
    ) -> list[IntersectionRecord]:
        """Find all run/host clashes.

        Args:
            runs: Run element descriptors.
            walls: Wall descriptors.
            floors: Floor descriptors.

        Returns:
            Records in run-major order, walls before floors for each run.
        """
        self.stats = ScanStats()
        self._host_solids = {}
        hosts = [
            HostDescriptor.from_element(wall, HostType.WALL) for wall in walls
        ] + [HostDescriptor.from_element(floor, HostType.FLOOR) for floor in floors]

        records: list[IntersectionRecord] = []
        for run_element in runs:
            run_solids = self._extract_solids(run_element)
            if not run_solids:
                continue
            run = self._describe_run(run_element)
            run_direction = self._run_direction(run)
            for host in hosts:
                host_solids = self._host_solids_for(host)
                if not host_solids:
                    continue
                self.stats.pairs_tested += 1
                overlap = self._first_overlap(run_solids, host_solids, run, host)
                if overlap is None:
                    continue
                records.append(
                    IntersectionRecord(
                        run=run,
                        host=host,
                        centroid=self.kernel.centroid(overlap),
                        host_normal=self._host_normal(host),
                        run_direction=run_direction,
                        host_thickness=self._host_thickness(host),
                    )
                )

        self.stats.records_found = len(records)
        logger.info(
            f"Scan found {len(records)} intersection(s) in "
            f"{self.stats.pairs_tested} run/host pair(s)"
        )
        return records

    def _extract_solids(self, element: ElementDescriptor) -> list[Any]:
        try:
            solids = self.kernel.transformed_solids(element.element, element.transform)
        except GeometryExtractionFailure as exc:
            logger.debug(f"Skipping {element.identity}: {exc}")
            solids = []
        if not solids:
            self.stats.skipped_elements += 1
        return list(solids)

    def _host_solids_for(self, host: HostDescriptor) -> list[Any]:
        if host.identity not in self._host_solids:
            self._host_solids[host.identity] = self._extract_solids(host)
        return self._host_solids[host.identity]

    def _first_overlap(
        self,
        run_solids: list[Any],
        host_solids: list[Any],
        run: RunDescriptor,
        host: HostDescriptor,
    ) -> Any | None:
        """Return the first overlap solid above epsilon, or None."""
        for run_solid in run_solids:
            for host_solid in host_solids:
                try:
                    result = self.kernel.intersect(run_solid, host_solid)
                    if not result.ok:
                        raise BooleanOperationFailure(result.error or "unknown error")
                    if result.solid is None:
                        continue
                    self._check_volume(self.kernel.volume(result.solid))
                except BooleanOperationFailure as exc:
                    self.stats.boolean_failures += 1
                    logger.debug(
                        f"Boolean failure for {run.identity} x {host.identity}: {exc}"
                    )
                    continue
                except DegenerateIntersection as exc:
                    self.stats.degenerate_overlaps += 1
                    logger.debug(f"{run.identity} x {host.identity}: {exc}")
                    continue
                return result.solid
        return None

    def _check_volume(self, volume: float) -> None:
        if volume <= self.volume_epsilon:
            raise DegenerateIntersection(volume, self.volume_epsilon)

    def _describe_run(self, element: ElementDescriptor) -> RunDescriptor:
        category = run_category_for(self.model.category(element.element))
        return RunDescriptor.from_element(
            element, category, self._cross_section(element.element)
        )

    def _cross_section(self, element: Any) -> CrossSection:
        """Round when a diameter is authored, else rectangular.

        Cable tray width/height take precedence over generic curve
        width/height.
        """
        diameter = self.model.read_length(element, DimensionParameter.PIPE_DIAMETER)
        if diameter is None:
            diameter = self.model.read_length(
                element, DimensionParameter.CURVE_DIAMETER
            )
        if diameter is not None:
            return RoundSection(diameter=diameter)

        width = self._first_length(
            element,
            DimensionParameter.CABLE_TRAY_WIDTH,
            DimensionParameter.CURVE_WIDTH,
        )
        height = self._first_length(
            element,
            DimensionParameter.CABLE_TRAY_HEIGHT,
            DimensionParameter.CURVE_HEIGHT,
        )
        return RectangularSection(width=width, height=height)

    def _first_length(self, element: Any, *parameters: DimensionParameter) -> float:
        for parameter in parameters:
            value = self.model.read_length(element, parameter)
            if value is not None:
                return value
        return 0.0

    def _run_direction(self, run: RunDescriptor) -> Vec3:
        curve = self.model.path_curve(run.element)
        if curve is None or curve.direction.is_zero():
            return X_AXIS
        return run.transform.of_vector(curve.direction.normalized()).normalized()

    def _host_normal(self, host: HostDescriptor) -> Vec3:
        if host.host_type is HostType.FLOOR:
            return Z_AXIS
        curve = self.model.path_curve(host.element)
        if curve is None or curve.direction.is_zero():
            return Z_AXIS
        direction = curve.direction.normalized()
        normal = Vec3(-direction.y, direction.x, 0.0)
        if normal.is_zero():
            return Z_AXIS
        return host.transform.of_vector(normal.normalized()).normalized()

    def _host_thickness(self, host: HostDescriptor) -> float:
        if host.host_type is HostType.WALL:
            width = self.model.read_length(host.element, DimensionParameter.WALL_WIDTH)
            return width if width is not None else 0.0
        return float(sum(self.model.layer_widths(host.element)))
