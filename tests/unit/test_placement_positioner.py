"""Unit tests for anchor point computation."""

from openings.domain.services import PlacementPositioner
from openings.domain.value_objects import (
    X_AXIS,
    BoxSpec,
    HostType,
    RectangularSection,
    Vec3,
)


def make_spec(
    width: float = 400.0, height: float = 300.0, diameter: float | None = None
) -> BoxSpec:
    return BoxSpec(
        width=width,
        height=height,
        host_thickness=200.0,
        protrusion=100.0,
        diameter=diameter,
    )


class TestPlacementPositioner:
    """Tests for PlacementPositioner."""

    def test_floor_anchor_on_top_face(self, make_record) -> None:
        """Floor boxes are anchored half the slab thickness above the centroid."""
        record = make_record(
            host_type=HostType.FLOOR,
            centroid=Vec3(0.0, 0.0, 100.0),
            host_thickness=200.0,
        )
        anchor = PlacementPositioner().anchor_for(record, make_spec())

        assert anchor == Vec3(0.0, 0.0, 200.0)

    def test_wall_anchor_below_centroid(self, make_record) -> None:
        """Wall boxes are anchored half the box height below the centroid."""
        record = make_record(
            host_type=HostType.WALL,
            section=RectangularSection(width=300.0, height=200.0),
            centroid=Vec3(0.0, 0.0, 0.0),
        )
        anchor = PlacementPositioner().anchor_for(record, make_spec(height=300.0))

        assert anchor == Vec3(0.0, 0.0, -150.0)

    def test_round_wall_box_uses_diameter(self, make_record) -> None:
        record = make_record(host_type=HostType.WALL, centroid=Vec3(5.0, 5.0, 1000.0))
        spec = make_spec(width=250.0, height=250.0, diameter=250.0)

        anchor = PlacementPositioner().anchor_for(record, spec)

        assert anchor == Vec3(5.0, 5.0, 875.0)

    def test_wall_anchor_along_tilted_up_axis(self) -> None:
        """After a twist the box's up axis is horizontal; the anchor follows it."""
        anchor = PlacementPositioner.wall_anchor(
            Vec3(0.0, 0.0, 1000.0), make_spec(height=300.0), X_AXIS * 2.0
        )

        assert anchor.is_close(Vec3(-150.0, 0.0, 1000.0))

    def test_centroid_unchanged_for_zero_thickness_floor(self, make_record) -> None:
        record = make_record(
            host_type=HostType.FLOOR,
            centroid=Vec3(1.0, 2.0, 3.0),
            host_thickness=0.0,
        )
        assert PlacementPositioner().anchor_for(record, make_spec()) == Vec3(
            1.0, 2.0, 3.0
        )
