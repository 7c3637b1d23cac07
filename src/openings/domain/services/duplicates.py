"""Duplicate bookkeeping against boxes placed by earlier batches."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from ..value_objects import BoxParameterBindings, PlacementResult

if TYPE_CHECKING:
    from openings.contracts.protocols import TargetModelProtocol

logger = logging.getLogger(__name__)

__all__ = ["DuplicateIndex"]


class DuplicateIndex:
    """Identity tags of box instances that existed before a batch.

    Build the index before placing anything so boxes created by the current
    batch never match themselves. Matches are reported only; nothing is
    deleted or skipped.
    """

    def __init__(self, existing: dict[str, list[str]] | None = None) -> None:
        self._existing: dict[str, list[str]] = dict(existing or {})

    @classmethod
    def snapshot(
        cls,
        target: TargetModelProtocol,
        bindings: BoxParameterBindings | None = None,
    ) -> DuplicateIndex:
        """Read identity tags from every box instance in the target."""
        tag_name = (bindings or BoxParameterBindings()).identity_tag.name
        existing: dict[str, list[str]] = defaultdict(list)
        for instance in target.iter_box_instances():
            tag = target.get_parameter(instance, tag_name)
            if tag:
                existing[str(tag)].append(target.instance_id(instance))
        logger.debug(f"Indexed {len(existing)} existing box identity tag(s)")
        return cls(existing)

    def __len__(self) -> int:
        return len(self._existing)

    def __contains__(self, tag: object) -> bool:
        return tag in self._existing

    def matches(self, tag: str) -> list[str]:
        """Ids of pre-existing boxes carrying ``tag``."""
        return list(self._existing.get(tag, []))

    def mark(self, results: list[PlacementResult]) -> list[str]:
        """Flag results whose identity tag matches an existing box.

        Returns:
            Identity tags of the flagged results, in result order.
        """
        duplicates = []
        for result in results:
            tag = result.record.identity_tag
            matches = self.matches(tag)
            if matches:
                result.duplicate_of = matches
                duplicates.append(tag)
        return duplicates
