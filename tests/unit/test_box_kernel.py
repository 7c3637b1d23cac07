"""Unit tests for the axis-aligned box geometry kernel."""

import math

import numpy as np
import pytest

from openings.domain.exceptions import GeometryExtractionFailure
from openings.domain.value_objects import (
    X_AXIS,
    Y_AXIS,
    Z_AXIS,
    RoundSection,
    RunCategory,
    RunDescriptor,
    Transform,
    Vec3,
)
from openings.infrastructure import AabbSolid, BoxGeometryKernel
from openings.infrastructure.box_kernel import bound_corners
from openings.infrastructure.scene import ElementSchema, SceneElement


def box(lower, upper) -> AabbSolid:
    return AabbSolid(
        lower=np.array(lower, dtype=float), upper=np.array(upper, dtype=float)
    )


def element(**fields) -> SceneElement:
    return SceneElement("mep", ElementSchema(id="e1", category="pipes", **fields))


class TestAabbSolid:
    """Tests for AabbSolid."""

    def test_volume(self) -> None:
        assert box((0, 0, 0), (10, 20, 30)).volume == 6000.0

    def test_flat_box_has_zero_volume(self) -> None:
        assert box((0, 0, 0), (10, 0, 30)).volume == 0.0


class TestBoundCorners:
    """Tests for re-bounding transformed boxes."""

    def test_quarter_turn_swaps_extents(self) -> None:
        lower, upper = bound_corners(
            (0, 0, 0), (100, 10, 5), Transform.rotation_z(math.pi / 2)
        )

        np.testing.assert_allclose(lower, [-10, 0, 0], atol=1e-9)
        np.testing.assert_allclose(upper, [0, 100, 5], atol=1e-9)

    def test_translation(self) -> None:
        lower, upper = bound_corners(
            (0, 0, 0), (1, 1, 1), Transform.translation(Vec3(5.0, 6.0, 7.0))
        )

        np.testing.assert_allclose(lower, [5, 6, 7])
        np.testing.assert_allclose(upper, [6, 7, 8])


class TestBoxGeometryKernel:
    """Tests for BoxGeometryKernel."""

    @pytest.fixture
    def kernel(self) -> BoxGeometryKernel:
        return BoxGeometryKernel()

    def test_transformed_solids_drop_empty_boxes(self, kernel) -> None:
        scene_element = element(
            solids=[
                {"min": [0, 0, 0], "max": [10, 10, 10]},
                {"min": [0, 0, 0], "max": [10, 0, 10]},
            ]
        )
        solids = kernel.transformed_solids(scene_element, Transform.identity())

        assert len(solids) == 1
        assert solids[0].volume == 1000.0

    def test_non_scene_element_fails_extraction(self, kernel) -> None:
        with pytest.raises(GeometryExtractionFailure):
            kernel.transformed_solids("p1", Transform.identity())

    def test_overlap(self, kernel) -> None:
        result = kernel.intersect(
            box((0, 0, 0), (10, 10, 10)), box((5, 5, 5), (20, 20, 20))
        )

        assert result.ok
        assert kernel.volume(result.solid) == 125.0
        assert kernel.centroid(result.solid) == Vec3(7.5, 7.5, 7.5)

    def test_disjoint_boxes(self, kernel) -> None:
        result = kernel.intersect(box((0, 0, 0), (1, 1, 1)), box((2, 2, 2), (3, 3, 3)))

        assert result.ok
        assert result.solid is None

    def test_touching_boxes_give_zero_volume(self, kernel) -> None:
        result = kernel.intersect(box((0, 0, 0), (1, 1, 1)), box((1, 0, 0), (2, 1, 1)))

        assert result.ok
        assert kernel.volume(result.solid) == 0.0

    def test_unsupported_solid_fails(self, kernel) -> None:
        result = kernel.intersect(box((0, 0, 0), (1, 1, 1)), "not a solid")

        assert not result.ok
        assert "unsupported" in result.error

    def test_non_finite_bounds_fail(self, kernel) -> None:
        broken = box((0, 0, 0), (math.inf, 1, 1))
        result = kernel.intersect(broken, box((math.inf, 0, 0), (math.inf, 1, 1)))

        assert not result.ok

    def test_connector_frame_follows_model_transform(self, kernel) -> None:
        scene_element = element(
            connector_frame={
                "x_axis": [1, 0, 0],
                "y_axis": [0, 0, 1],
                "z_axis": [0, -1, 0],
            }
        )
        run = RunDescriptor(
            model_id="mep",
            element_id="e1",
            element=scene_element,
            transform=Transform.rotation_z(math.pi / 2),
            category=RunCategory.PIPE,
            cross_section=RoundSection(diameter=100.0),
        )
        frame = kernel.cross_section_frame(run)

        assert frame.x_axis.is_close(Y_AXIS)
        assert frame.y_axis.is_close(Z_AXIS)
        assert frame.z_axis.is_close(X_AXIS)

    def test_missing_connector_frame(self, kernel) -> None:
        run = RunDescriptor(
            model_id="mep",
            element_id="e1",
            element=element(),
            category=RunCategory.PIPE,
            cross_section=RoundSection(diameter=100.0),
        )
        assert kernel.cross_section_frame(run) is None
