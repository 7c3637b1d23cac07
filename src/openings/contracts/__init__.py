"""Contracts module - protocols and shared DTOs for cross-layer communication.

This module provides:
- Protocol definitions for the geometry kernel, source model, target model
  and template catalog collaborators
- Shared DTOs used by the domain services, application and infrastructure

Example:
    ```python
    from openings.contracts import BatchRequest, GeometryKernelProtocol

    def scan(kernel: GeometryKernelProtocol) -> None:
        ...
    ```
"""

# DTOs
from .dtos import (
    BatchOutcome as BatchOutcome,
    BatchRequest as BatchRequest,
    ElementFilter as ElementFilter,
    GeometryResult as GeometryResult,
    PathCurve as PathCurve,
    PlacementPlan as PlacementPlan,
    ScanReport as ScanReport,
)

# Collaborator protocols
from .protocols import (
    GeometryKernelProtocol as GeometryKernelProtocol,
    ModelQueryProtocol as ModelQueryProtocol,
    TargetModelProtocol as TargetModelProtocol,
    TemplateCatalogProtocol as TemplateCatalogProtocol,
)

__all__ = [
    "BatchOutcome",
    "BatchRequest",
    "ElementFilter",
    "GeometryKernelProtocol",
    "GeometryResult",
    "ModelQueryProtocol",
    "PathCurve",
    "PlacementPlan",
    "ScanReport",
    "TargetModelProtocol",
    "TemplateCatalogProtocol",
]
