"""Domain services for clash detection and opening box placement.

This package provides:
- Clash detection between runs and wall/floor hosts
- Box sizing, anchor positioning and orientation
- Template resolution, parameter write-back and duplicate bookkeeping
- The placement engine tying them together for one batch
"""

from .dimension_calculator import DimensionCalculator, ceil_to_multiple
from .duplicates import DuplicateIndex
from .intersection_finder import IntersectionFinder, ScanStats
from .orientation_solver import OrientationOutcome, OrientationSolver
from .parameter_writer import ParameterWriter
from .placement_engine import PlacementEngine
from .placement_positioner import PlacementPositioner
from .template_resolver import TemplateKey, TemplateResolver, effective_shape

__all__ = [
    "DimensionCalculator",
    "DuplicateIndex",
    "IntersectionFinder",
    "OrientationOutcome",
    "OrientationSolver",
    "ParameterWriter",
    "PlacementEngine",
    "PlacementPositioner",
    "ScanStats",
    "TemplateKey",
    "TemplateResolver",
    "ceil_to_multiple",
    "effective_shape",
]
