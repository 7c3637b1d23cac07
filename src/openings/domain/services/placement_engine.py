"""Placement of opening boxes for a list of clashes.

The engine sizes, positions, instantiates, parameterizes and orients one box
per clash. A failure on one clash is logged and recorded on its result; the
remaining clashes are still placed. Mutation sessions and input validation
are the caller's concern (see ``openings.application.commands``).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable

from ..exceptions import MissingTemplate
from ..value_objects import (
    BoxParameterBindings,
    IntersectionRecord,
    PlacementResult,
    PlacementSettings,
)
from .dimension_calculator import DimensionCalculator
from .duplicates import DuplicateIndex
from .orientation_solver import OrientationSolver
from .parameter_writer import ParameterWriter
from .placement_positioner import PlacementPositioner
from .template_resolver import TemplateResolver

if TYPE_CHECKING:
    from openings.contracts.protocols import (
        GeometryKernelProtocol,
        TargetModelProtocol,
        TemplateCatalogProtocol,
    )

logger = logging.getLogger(__name__)

__all__ = ["PlacementEngine"]


class PlacementEngine:
    """Places one opening box per clash for a single batch.

    The template memo and duplicate snapshot live on the engine, so create a
    new engine for every batch.

    Attributes:
        target: Target model receiving the boxes.
        settings: Sizing settings for this batch.
        resolver: Batch-scoped template resolver.
        duplicates: Snapshot of boxes present before the batch, taken on the
            first call to :meth:`place_all`.
    """

    def __init__(
        self,
        target: TargetModelProtocol,
        kernel: GeometryKernelProtocol,
        catalog: TemplateCatalogProtocol,
        settings: PlacementSettings,
        bindings: BoxParameterBindings | None = None,
    ) -> None:
        self.target = target
        self.settings = settings
        self.bindings = bindings or BoxParameterBindings()
        self.calculator = DimensionCalculator(settings)
        self.positioner = PlacementPositioner()
        self.resolver = TemplateResolver(catalog, settings)
        self.writer = ParameterWriter(target, self.bindings)
        self.solver = OrientationSolver(target, kernel, self.positioner)
        self.duplicates: DuplicateIndex | None = None

    def place_all(self, records: Iterable[IntersectionRecord]) -> list[PlacementResult]:
        """Place a box for every clash and flag duplicates.

        Args:
            records: Clashes to mark.

        Returns:
            One result per record, in record order.
        """
        if self.duplicates is None:
            self.duplicates = DuplicateIndex.snapshot(self.target, self.bindings)

        results = [self.place(record) for record in records]
        duplicate_tags = self.duplicates.mark(results)

        created = sum(1 for result in results if result.created)
        failed = sum(1 for result in results if result.error is not None)
        logger.info(
            f"Placed {created} of {len(results)} opening box(es); "
            f"{failed} failed, {len(duplicate_tags)} duplicate(s)"
        )
        return results

    def place(self, record: IntersectionRecord) -> PlacementResult:
        """Place one box. Never raises; failures land on the result."""
        result = PlacementResult(record=record)
        try:
            self._place_into(result)
        except MissingTemplate as exc:
            result.error = str(exc)
            logger.warning(f"{record.identity_tag}: {exc}")
        except Exception as exc:
            result.error = str(exc) or type(exc).__name__
            logger.warning(
                f"Failed to place opening box for {record.identity_tag}: {exc}",
                exc_info=True,
            )
        return result

    def _place_into(self, result: PlacementResult) -> None:
        record = result.record
        template: Any = self.resolver.resolve(record)
        spec = self.calculator.calculate(record)
        anchor = self.positioner.anchor_for(record, spec)
        result.spec = spec
        result.anchor = anchor

        instance = self.target.create_instance(template, anchor)
        result.instance = instance
        result.instance_id = self.target.instance_id(instance)

        # Parameter changes can reshape the instance, so they settle first.
        result.failed_parameters = self.writer.write(instance, record, spec)

        outcome = self.solver.orient(instance, record, spec, anchor)
        result.rotations = outcome.rotations
        result.anchor = outcome.anchor
