"""Batch-scoped template lookup with memoized catalog access."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..exceptions import MissingTemplate
from ..value_objects import (
    HostType,
    IntersectionRecord,
    PlacementSettings,
    RunCategory,
    SectionShape,
)

if TYPE_CHECKING:
    from openings.contracts.protocols import TemplateCatalogProtocol

logger = logging.getLogger(__name__)

__all__ = [
    "TemplateKey",
    "TemplateResolver",
    "effective_shape",
]

TemplateKey = tuple[HostType, SectionShape, RunCategory]


def effective_shape(
    shape: SectionShape, category: RunCategory, settings: PlacementSettings
) -> SectionShape:
    """Shape of the box template used for a run.

    Round runs get a round box only when the category's round preference is
    enabled; trays and unknown runs always get rectangular boxes.
    """
    if shape is SectionShape.ROUND and settings.prefers_round_box(category):
        return SectionShape.ROUND
    return SectionShape.RECTANGULAR


class TemplateResolver:
    """Resolves and loads box templates for one placement batch.

    Each (host type, effective shape, run category) key is resolved once, and
    each template path is loaded and activated at most once. Create a new
    resolver per batch.

    Attributes:
        catalog: Template catalog collaborator.
        settings: Settings of the current batch.
        load_count: Number of catalog loads performed.
    """

    def __init__(
        self, catalog: TemplateCatalogProtocol, settings: PlacementSettings
    ) -> None:
        self.catalog = catalog
        self.settings = settings
        self.load_count = 0
        self._by_key: dict[TemplateKey, Any] = {}
        self._by_path: dict[str, Any] = {}

    def key_for(self, record: IntersectionRecord) -> TemplateKey:
        shape = effective_shape(
            record.section_shape, record.run_category, self.settings
        )
        return (record.host_type, shape, record.run_category)

    def resolve(self, record: IntersectionRecord) -> Any:
        """Return the activated template handle for a clash.

        Raises:
            MissingTemplate: If the catalog has no template for the key.
        """
        return self.resolve_key(*self.key_for(record))

    def resolve_key(
        self, host_type: HostType, shape: SectionShape, category: RunCategory
    ) -> Any:
        key = (host_type, shape, category)
        if key in self._by_key:
            return self._by_key[key]

        path = self.catalog.resolve(host_type, shape, category)
        if path is None:
            raise MissingTemplate(host_type, shape, category)

        if path not in self._by_path:
            handle = self.catalog.load_or_get(path)
            if handle is None:
                raise MissingTemplate(host_type, shape, category, path)
            self.catalog.activate(handle)
            self.load_count += 1
            self._by_path[path] = handle
            logger.debug(f"Loaded template {path}")

        self._by_key[key] = self._by_path[path]
        return self._by_key[key]
