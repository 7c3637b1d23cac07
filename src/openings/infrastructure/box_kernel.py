"""Axis-aligned box geometry kernel built on numpy.

Solids are axis-aligned boxes in working space. A local box transformed by a
rotation is re-bounded, so rotated elements are represented by their
working-space bounding box. This is exact for the rectangular and
quarter-turn layouts the reference scenes use.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import product
from typing import Any

import numpy as np

from openings.contracts.dtos import GeometryResult
from openings.domain.exceptions import GeometryExtractionFailure
from openings.domain.value_objects import Frame, RunDescriptor, Transform, Vec3
from openings.infrastructure.scene import SceneElement, frame_from_schema

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class AabbSolid:
    """Axis-aligned box given by its lower and upper corners."""

    lower: np.ndarray
    upper: np.ndarray

    @property
    def size(self) -> np.ndarray:
        return self.upper - self.lower

    @property
    def volume(self) -> float:
        return float(np.prod(np.clip(self.size, 0.0, None)))


def transform_matrix(transform: Transform) -> tuple[np.ndarray, np.ndarray]:
    """Rotation matrix (basis vectors as columns) and translation vector."""
    rotation = np.column_stack(
        [
            transform.basis_x.as_tuple(),
            transform.basis_y.as_tuple(),
            transform.basis_z.as_tuple(),
        ]
    )
    return rotation, np.array(transform.origin.as_tuple())


def bound_corners(
    lower: Any, upper: Any, transform: Transform
) -> tuple[np.ndarray, np.ndarray]:
    """Transform the eight corners of a local box and bound them again."""
    bounds = np.stack([np.asarray(lower, dtype=float), np.asarray(upper, dtype=float)])
    corners = np.array(
        [
            [bounds[i, 0], bounds[j, 1], bounds[k, 2]]
            for i, j, k in product((0, 1), repeat=3)
        ]
    )
    rotation, translation = transform_matrix(transform)
    world = corners @ rotation.T + translation
    return world.min(axis=0), world.max(axis=0)


class BoxGeometryKernel:
    """Geometry kernel over :class:`AabbSolid` boxes.

    Implements ``GeometryKernelProtocol`` for scene elements.
    """

    def transformed_solids(
        self, element: SceneElement, transform: Transform
    ) -> list[AabbSolid]:
        schema = getattr(element, "schema", None)
        if schema is None:
            raise GeometryExtractionFailure(repr(element), "not a scene element")

        solids = []
        for solid in schema.solids:
            lower, upper = bound_corners(solid.min_corner, solid.max_corner, transform)
            box = AabbSolid(lower=lower, upper=upper)
            if box.volume > 0:
                solids.append(box)
        return solids

    def intersect(self, a: Any, b: Any) -> GeometryResult:
        if not isinstance(a, AabbSolid) or not isinstance(b, AabbSolid):
            return GeometryResult.failure("unsupported solid type")
        lower = np.maximum(a.lower, b.lower)
        upper = np.minimum(a.upper, b.upper)
        if not (np.all(np.isfinite(lower)) and np.all(np.isfinite(upper))):
            return GeometryResult.failure("non-finite solid bounds")
        if np.any(upper < lower):
            return GeometryResult.empty()
        return GeometryResult.success(AabbSolid(lower=lower, upper=upper))

    def volume(self, solid: AabbSolid) -> float:
        return solid.volume

    def centroid(self, solid: AabbSolid) -> Vec3:
        return Vec3.from_iterable((solid.lower + solid.upper) / 2.0)

    def cross_section_frame(self, run: RunDescriptor) -> Frame | None:
        schema = getattr(run.element, "schema", None)
        if schema is None or schema.connector_frame is None:
            return None
        return frame_from_schema(schema.connector_frame).transformed(run.transform)
