"""Application commands (use cases) for opening box placement."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Sequence

from openings.contracts.dtos import (
    BatchOutcome,
    BatchRequest,
    ElementFilter,
    PlacementPlan,
    ScanReport,
)
from openings.domain.exceptions import InvalidInput, UserCancelled
from openings.domain.services import (
    DimensionCalculator,
    IntersectionFinder,
    PlacementEngine,
)
from openings.domain.value_objects import (
    RUN_ELEMENT_CATEGORIES,
    BoxParameterBindings,
    ElementCategory,
    ElementDescriptor,
    PlacementSettings,
)

if TYPE_CHECKING:
    from openings.contracts.protocols import (
        GeometryKernelProtocol,
        ModelQueryProtocol,
        TargetModelProtocol,
        TemplateCatalogProtocol,
    )

logger = logging.getLogger(__name__)

NO_RUN_ELEMENTS_MESSAGE = "No valid run elements selected"
NO_INTERSECTIONS_MESSAGE = "No intersections found"

# Called with the number of clashes found; returning False cancels the batch.
ConfirmHook = Callable[[int], bool]


def filter_elements(
    model: ModelQueryProtocol,
    descriptors: Sequence[ElementDescriptor],
    element_filter: ElementFilter | None,
) -> list[ElementDescriptor]:
    """Keep the descriptors whose type name and parameters pass the filter."""
    if element_filter is None or element_filter.is_empty:
        return list(descriptors)

    def passes(descriptor: ElementDescriptor) -> bool:
        element = descriptor.element
        if element_filter.type_names:
            if model.type_name(element) not in element_filter.type_names:
                return False
        for name, accepted in element_filter.parameter_values.items():
            value = model.parameter_text(element, name)
            if value is None or value not in accepted:
                return False
        return True

    kept = [descriptor for descriptor in descriptors if passes(descriptor)]
    logger.debug(f"Element filter kept {len(kept)} of {len(descriptors)}")
    return kept


def collect_request(
    model: ModelQueryProtocol,
    settings: PlacementSettings,
    run_model_ids: Sequence[str] | None = None,
    host_model_ids: Sequence[str] | None = None,
    run_filter: ElementFilter | None = None,
    host_filter: ElementFilter | None = None,
) -> BatchRequest:
    """Build a batch request from every run, wall and floor in the model.

    Args:
        model: Source model to collect from.
        settings: Settings for the batch.
        run_model_ids: Sub-models to take runs from (all when None).
        host_model_ids: Sub-models to take walls and floors from (all when
            None).
        run_filter: Type name and parameter filter applied to runs.
        host_filter: Type name and parameter filter applied to walls and
            floors.

    Returns:
        A request covering the selected sub-models.
    """
    runs = model.collect(RUN_ELEMENT_CATEGORIES, run_model_ids)
    walls = model.collect([ElementCategory.WALLS], host_model_ids)
    floors = model.collect([ElementCategory.FLOORS], host_model_ids)
    return BatchRequest(
        run_elements=filter_elements(model, runs, run_filter),
        wall_elements=filter_elements(model, walls, host_filter),
        floor_elements=filter_elements(model, floors, host_filter),
        settings=settings,
    )


class ScanIntersectionsCommand:
    """Command to list clashes and their box sizes without touching the target."""

    def __init__(
        self, kernel: GeometryKernelProtocol, model: ModelQueryProtocol
    ) -> None:
        self.kernel = kernel
        self.model = model

    def execute(
        self,
        runs: Sequence[ElementDescriptor],
        walls: Sequence[ElementDescriptor],
        floors: Sequence[ElementDescriptor],
        settings: PlacementSettings,
    ) -> ScanReport:
        finder = IntersectionFinder(self.kernel, self.model, settings.volume_epsilon)
        records = finder.find(runs, walls, floors)
        calculator = DimensionCalculator(settings)
        return ScanReport(
            records=records,
            specs=[calculator.calculate(record) for record in records],
            stats=finder.stats,
        )


class PlaceOpeningBoxesCommand:
    """Command to run one placement batch in two steps.

    ``prepare`` validates the target, finds clashes and asks for
    confirmation in the caller's thread. ``execute`` places the prepared
    records inside a single mutation session and is what the dispatcher
    runs on the mutation thread. Per-record failures are absorbed by the
    engine; only input validation stops a batch before it mutates anything.

    Example:
        ```python
        plan = command.prepare(request, confirm=ask_user)
        with MutationDispatcher() as dispatcher:
            outcome = dispatcher.submit(command, plan).result()
        ```
    """

    def __init__(
        self,
        kernel: GeometryKernelProtocol,
        model: ModelQueryProtocol,
        target: TargetModelProtocol,
        catalog: TemplateCatalogProtocol,
        bindings: BoxParameterBindings | None = None,
    ) -> None:
        self.kernel = kernel
        self.model = model
        self.target = target
        self.catalog = catalog
        self.bindings = bindings or BoxParameterBindings()

    def prepare(
        self, request: BatchRequest, confirm: ConfirmHook | None = None
    ) -> PlacementPlan:
        """Find the clashes to place and confirm the batch.

        Runs in the caller's context and never mutates the target.

        Args:
            request: Elements to pair and the settings to size boxes with.
            confirm: Asked with the clash count; False cancels the batch.

        Returns:
            A plan that is either ready to execute or carries the terminal
            outcome. Never raises.
        """
        try:
            return self._prepare(request, confirm)
        except Exception as exc:
            return PlacementPlan(request=request, outcome=_terminal_outcome(exc))

    def execute(self, plan: PlacementPlan) -> BatchOutcome:
        """Place the boxes of a prepared plan.

        Args:
            plan: Result of :meth:`prepare`.

        Returns:
            The batch outcome. Never raises.
        """
        if plan.outcome is not None:
            return plan.outcome
        try:
            return self._place(plan)
        except Exception as exc:
            return _terminal_outcome(exc)

    def run(
        self, request: BatchRequest, confirm: ConfirmHook | None = None
    ) -> BatchOutcome:
        """Prepare and execute a batch in the current thread."""
        return self.execute(self.prepare(request, confirm))

    def validate_target(self) -> None:
        """Check the target can receive boxes.

        Raises:
            InvalidInput: If there is no active document, it is read-only, or
                it is itself a template document.
        """
        if not self.target.is_active:
            raise InvalidInput("No active document")
        if self.target.is_read_only:
            raise InvalidInput("The active document is read-only")
        if self.target.is_template_document:
            raise InvalidInput("Opening boxes cannot be placed in a template document")

    def _prepare(
        self, request: BatchRequest, confirm: ConfirmHook | None
    ) -> PlacementPlan:
        self.validate_target()
        if not request.run_elements:
            outcome = BatchOutcome(error_message=NO_RUN_ELEMENTS_MESSAGE)
            return PlacementPlan(request=request, outcome=outcome)

        report = ScanIntersectionsCommand(self.kernel, self.model).execute(
            request.run_elements,
            request.wall_elements,
            request.floor_elements,
            request.settings,
        )
        if not report.records:
            outcome = BatchOutcome(error_message=NO_INTERSECTIONS_MESSAGE)
            return PlacementPlan(request=request, outcome=outcome)

        if confirm is not None and not confirm(len(report.records)):
            raise UserCancelled()
        return PlacementPlan(request=request, records=report.records)

    def _place(self, plan: PlacementPlan) -> BatchOutcome:
        # The document may have changed state since the plan was confirmed.
        self.validate_target()
        request = plan.request
        engine = PlacementEngine(
            self.target, self.kernel, self.catalog, request.settings, self.bindings
        )
        with self.target.mutation_session(request.name):
            results = engine.place_all(plan.records)

        duplicates = [r.record.identity_tag for r in results if r.is_duplicate]
        return BatchOutcome(
            created_count=sum(1 for r in results if r.created),
            duplicate_identities=duplicates,
            intersections_found=len(plan.records),
            failed_count=sum(1 for r in results if r.error is not None),
            results=results,
        )


def _terminal_outcome(exc: Exception) -> BatchOutcome:
    """Map an error that stopped a batch to its outcome."""
    if isinstance(exc, InvalidInput):
        logger.warning(f"Batch rejected: {exc}")
        return BatchOutcome.failed(str(exc))
    if isinstance(exc, UserCancelled):
        logger.info("Batch cancelled by user")
        return BatchOutcome.cancelled_by_user()
    logger.error(f"Batch failed: {exc}", exc_info=exc)
    return BatchOutcome.failed(str(exc) or type(exc).__name__)
