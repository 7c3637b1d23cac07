"""Value objects for the opening placement domain.

This module provides immutable data types used throughout the placement
engine. All classes are re-exported from sub-modules for convenience.
"""

from __future__ import annotations

# Vectors, transforms and local frames
from ._geometry import (
    ORIGIN,
    X_AXIS,
    Y_AXIS,
    Z_AXIS,
    ZERO_TOLERANCE,
    Frame,
    Transform,
    Vec3,
)

# Source elements and run cross sections
from ._elements import (
    RUN_ELEMENT_CATEGORIES,
    CrossSection,
    DimensionParameter,
    ElementCategory,
    ElementDescriptor,
    HostDescriptor,
    HostType,
    LinkedModel,
    RectangularSection,
    RoundSection,
    RunCategory,
    RunDescriptor,
    SectionShape,
    run_category_for,
)

# Clash records, sizing and results
from ._placement import (
    DEFAULT_VOLUME_EPSILON_MM3,
    AppliedRotation,
    BoxSpec,
    IntersectionRecord,
    LengthUnit,
    PlacementResult,
    PlacementSettings,
)

# Box template parameter bindings
from ._parameters import (
    BoxParameter,
    BoxParameterBindings,
    ParameterBinding,
)

__all__ = [
    "AppliedRotation",
    "BoxParameter",
    "BoxParameterBindings",
    "BoxSpec",
    "CrossSection",
    "DEFAULT_VOLUME_EPSILON_MM3",
    "DimensionParameter",
    "ElementCategory",
    "ElementDescriptor",
    "Frame",
    "HostDescriptor",
    "HostType",
    "IntersectionRecord",
    "LengthUnit",
    "LinkedModel",
    "ORIGIN",
    "ParameterBinding",
    "PlacementResult",
    "PlacementSettings",
    "RUN_ELEMENT_CATEGORIES",
    "RectangularSection",
    "RoundSection",
    "RunCategory",
    "RunDescriptor",
    "SectionShape",
    "Transform",
    "Vec3",
    "X_AXIS",
    "Y_AXIS",
    "Z_AXIS",
    "ZERO_TOLERANCE",
    "run_category_for",
]
