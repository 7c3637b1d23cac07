"""Domain layer - clash detection and placement geometry."""

from .exceptions import (
    BooleanOperationFailure,
    DegenerateIntersection,
    GeometryExtractionFailure,
    InvalidInput,
    MissingTemplate,
    OpeningsError,
    OrientationDataUnavailable,
    ParameterWriteFailure,
    UserCancelled,
)
from .services import (
    DimensionCalculator,
    DuplicateIndex,
    IntersectionFinder,
    OrientationSolver,
    PlacementEngine,
    PlacementPositioner,
    ScanStats,
    TemplateResolver,
    ceil_to_multiple,
)
from .value_objects import (
    BoxSpec,
    ElementDescriptor,
    HostType,
    IntersectionRecord,
    PlacementResult,
    PlacementSettings,
    RunCategory,
    SectionShape,
    Vec3,
)

__all__ = [
    "BooleanOperationFailure",
    "BoxSpec",
    "DegenerateIntersection",
    "DimensionCalculator",
    "DuplicateIndex",
    "ElementDescriptor",
    "GeometryExtractionFailure",
    "HostType",
    "IntersectionFinder",
    "IntersectionRecord",
    "InvalidInput",
    "MissingTemplate",
    "OpeningsError",
    "OrientationDataUnavailable",
    "OrientationSolver",
    "ParameterWriteFailure",
    "PlacementEngine",
    "PlacementPositioner",
    "PlacementResult",
    "PlacementSettings",
    "RunCategory",
    "ScanStats",
    "SectionShape",
    "TemplateResolver",
    "UserCancelled",
    "Vec3",
    "ceil_to_multiple",
]
