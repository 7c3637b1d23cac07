"""STL export of placed opening boxes using numpy-stl."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import numpy as np
from stl import mesh

from openings.contracts.protocols import TargetModelProtocol
from openings.domain.value_objects import BoxSpec, Frame, HostType, PlacementResult

logger = logging.getLogger(__name__)

# Two triangles per face; vertex indices follow box_vertices() ordering.
BOX_TRIANGLES: list[tuple[int, int, int]] = [
    # Bottom face (z=min)
    (0, 2, 1),
    (0, 3, 2),
    # Top face (z=max)
    (4, 5, 6),
    (4, 6, 7),
    # Front face (y=min)
    (0, 1, 5),
    (0, 5, 4),
    # Back face (y=max)
    (2, 3, 7),
    (2, 7, 6),
    # Left face (x=min)
    (0, 4, 7),
    (0, 7, 3),
    # Right face (x=max)
    (1, 2, 6),
    (1, 6, 5),
]


def local_extents(
    host_type: HostType, spec: BoxSpec
) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
    """Box extents in the instance's own axes, relative to its insertion point.

    Wall boxes sit on their insertion point and extend along up. Floor boxes
    have it on the slab's top face and protrude past both slab faces. Round
    boxes are exported as their square envelope.
    """
    width = spec.diameter if spec.is_round else spec.width
    height = spec.diameter if spec.is_round else spec.height
    if host_type is HostType.WALL:
        half_thickness = spec.thickness / 2
        return (
            (-width / 2, -half_thickness, 0.0),
            (width / 2, half_thickness, height),
        )
    return (
        (-width / 2, -height / 2, -(spec.host_thickness + spec.protrusion)),
        (width / 2, height / 2, spec.protrusion),
    )


def box_vertices(
    lower: tuple[float, float, float],
    upper: tuple[float, float, float],
    frame: Frame,
) -> np.ndarray:
    """Eight world-space corners of a box given in ``frame`` coordinates."""
    x0, y0, z0 = lower
    x1, y1, z1 = upper
    local = np.array(
        [
            (x0, y0, z0),
            (x1, y0, z0),
            (x1, y1, z0),
            (x0, y1, z0),
            (x0, y0, z1),
            (x1, y0, z1),
            (x1, y1, z1),
            (x0, y1, z1),
        ]
    )
    axes = np.array(
        [frame.x_axis.as_tuple(), frame.y_axis.as_tuple(), frame.z_axis.as_tuple()]
    )
    return local @ axes + np.array(frame.origin.as_tuple())


class BoxStlExporter:
    """Exports placed opening boxes as oriented hexahedra.

    Coordinates are written Y-up for viewer compatibility:
    x' = x, y' = z, z' = y.
    """

    def __init__(self, target: TargetModelProtocol) -> None:
        self.target = target

    def build_box_mesh(self, vertices: np.ndarray) -> mesh.Mesh:
        vertices = vertices[:, [0, 2, 1]]
        box_mesh = mesh.Mesh(np.zeros(len(BOX_TRIANGLES), dtype=mesh.Mesh.dtype))
        for i, (v0, v1, v2) in enumerate(BOX_TRIANGLES):
            box_mesh.vectors[i] = [vertices[v0], vertices[v1], vertices[v2]]
        return box_mesh

    def combine_meshes(self, meshes: list[mesh.Mesh]) -> mesh.Mesh:
        if not meshes:
            return mesh.Mesh(np.zeros(0, dtype=mesh.Mesh.dtype))

        total_faces = sum(m.vectors.shape[0] for m in meshes)
        combined = mesh.Mesh(np.zeros(total_faces, dtype=mesh.Mesh.dtype))

        offset = 0
        for m in meshes:
            num_faces = m.vectors.shape[0]
            combined.vectors[offset : offset + num_faces] = m.vectors
            offset += num_faces

        return combined

    def export(self, results: Iterable[PlacementResult]) -> mesh.Mesh:
        """Build one mesh holding every created box.

        Results without an instance or a computed size are skipped.
        """
        meshes = []
        for result in results:
            if not result.created or result.spec is None:
                continue
            frame = self.target.instance_frame(result.instance)
            lower, upper = local_extents(result.record.host_type, result.spec)
            meshes.append(self.build_box_mesh(box_vertices(lower, upper, frame)))
        return self.combine_meshes(meshes)

    def export_to_file(
        self, results: Iterable[PlacementResult], filepath: Path | str
    ) -> int:
        """Write the created boxes to an STL file.

        Returns:
            Number of boxes written.
        """
        combined = self.export(results)
        combined.save(str(filepath))
        count = combined.vectors.shape[0] // len(BOX_TRIANGLES)
        logger.info(f"Exported {count} box(es) to {filepath}")
        return count
