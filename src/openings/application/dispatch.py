"""Dispatch of placement batches onto the model-mutation thread.

All model mutation happens on one dedicated worker thread. Callers get a
future for the terminal :class:`BatchOutcome` and may register a one-shot
callback. Batches arrive already confirmed, so nothing waits on the user
inside the mutation context.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Callable

from openings.contracts.dtos import BatchOutcome, PlacementPlan

if TYPE_CHECKING:
    from openings.application.commands import PlaceOpeningBoxesCommand

logger = logging.getLogger(__name__)

MUTATION_THREAD_NAME = "model-mutation"

OutcomeCallback = Callable[[BatchOutcome], None]


class MutationDispatcher:
    """Runs placement commands on a single model-mutation worker.

    Example:
        ```python
        with MutationDispatcher() as dispatcher:
            plan = command.prepare(request, confirm=ask_user)
            future = dispatcher.submit(command, plan, on_done=show_summary)
            outcome = future.result()
        ```
    """

    def __init__(self, executor: ThreadPoolExecutor | None = None) -> None:
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=MUTATION_THREAD_NAME
        )

    def submit(
        self,
        command: PlaceOpeningBoxesCommand,
        plan: PlacementPlan,
        on_done: OutcomeCallback | None = None,
    ) -> Future[BatchOutcome]:
        """Queue one batch on the mutation thread.

        Args:
            command: Placement command bound to the target model.
            plan: Batch prepared and confirmed in the caller's thread.
            on_done: Called exactly once with the terminal outcome.

        Returns:
            Future resolving to the batch outcome.
        """
        future = self._executor.submit(self._run, command, plan)
        if on_done is not None:
            future.add_done_callback(_once(on_done))
        return future

    def shutdown(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> MutationDispatcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    @staticmethod
    def _run(command: PlaceOpeningBoxesCommand, plan: PlacementPlan) -> BatchOutcome:
        thread_name = threading.current_thread().name
        logger.debug(f"Running batch '{plan.request.name}' on {thread_name}")
        return command.execute(plan)


def _once(callback: OutcomeCallback) -> Callable[[Future[BatchOutcome]], None]:
    """Adapt an outcome callback to a future callback that fires once."""
    fired = threading.Event()

    def deliver(future: Future[BatchOutcome]) -> None:
        if fired.is_set():
            return
        fired.set()
        try:
            outcome = future.result()
        except Exception as exc:
            logger.error(f"Batch raised outside the command: {exc}", exc_info=True)
            outcome = BatchOutcome.failed(str(exc) or type(exc).__name__)
        callback(outcome)

    return deliver
