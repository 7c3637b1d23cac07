"""Application layer - use cases and orchestration."""

from .commands import (
    NO_INTERSECTIONS_MESSAGE,
    NO_RUN_ELEMENTS_MESSAGE,
    PlaceOpeningBoxesCommand,
    ScanIntersectionsCommand,
    collect_request,
)
from .dispatch import MutationDispatcher
from .factory import ServiceFactory

__all__ = [
    "MutationDispatcher",
    "NO_INTERSECTIONS_MESSAGE",
    "NO_RUN_ELEMENTS_MESSAGE",
    "PlaceOpeningBoxesCommand",
    "ScanIntersectionsCommand",
    "ServiceFactory",
    "collect_request",
]
