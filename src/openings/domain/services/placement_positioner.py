"""Anchor point computation for opening box templates.

Box templates are not authored with their insertion point at the geometric
centre. Floor templates have it on the top face; wall templates have it on
the bottom face along the box's own up axis. The positioner shifts the clash
centroid so the instanced solid ends up centred on the clash.
"""

from __future__ import annotations

from ..value_objects import (
    Z_AXIS,
    BoxSpec,
    HostType,
    IntersectionRecord,
    Vec3,
)

__all__ = ["PlacementPositioner"]


class PlacementPositioner:
    """Converts clash centroids into template anchor points."""

    def anchor_for(self, record: IntersectionRecord, spec: BoxSpec) -> Vec3:
        """Return the insertion point for a freshly created (unrotated) box.

        Args:
            record: The clash being marked.
            spec: Computed box size for that clash.

        Returns:
            Floor hosts: centroid shifted up by half the host thickness.
            Wall hosts: centroid shifted down by half the box height
            (diameter for round boxes).
        """
        if record.host_type is HostType.FLOOR:
            return self.floor_anchor(record.centroid, record.host_thickness)
        return self.wall_anchor(record.centroid, spec, Z_AXIS)

    @staticmethod
    def floor_anchor(centroid: Vec3, host_thickness: float) -> Vec3:
        return centroid + Z_AXIS * (host_thickness / 2.0)

    @staticmethod
    def wall_anchor(centroid: Vec3, spec: BoxSpec, up: Vec3) -> Vec3:
        """Wall anchor for a box whose local up axis is ``up``.

        The orientation solver uses this after a twist correction has
        turned the box's up axis away from the vertical.
        """
        return centroid - up.normalized() * (spec.stacking_height / 2.0)
