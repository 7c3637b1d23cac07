"""Rotation of placed opening boxes onto host and run axes.

Boxes are created unrotated (hand = +X, facing = +Y, up = +Z). The solver
then walks a small state machine keyed by host type, section shape and run
orientation:

1. Wall: turn facing onto the wall normal. Rectangular runs twisted about
   their own axis get a further 90 degree turn about the facing axis.
2. Floor, horizontal run: turn hand onto the run's plan direction.
3. Floor, vertical run: turn hand onto the connector frame's x axis, or
   fall back to a width/height comparison when no frame exists.
4. Floor, rectangular run: axis-swap correction pass.

Templates do not rotate about their insertion point, so after every rotation
the instance is moved back onto the intended anchor. A step that lacks the
data it needs is skipped; the coarser orientation already applied stays.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Literal

from ..exceptions import OrientationDataUnavailable
from ..value_objects import (
    Z_AXIS,
    AppliedRotation,
    BoxSpec,
    HostType,
    IntersectionRecord,
    SectionShape,
    Vec3,
)
from .placement_positioner import PlacementPositioner

if TYPE_CHECKING:
    from openings.contracts.protocols import (
        GeometryKernelProtocol,
        TargetModelProtocol,
    )

logger = logging.getLogger(__name__)

StepHandler = Callable[
    ["OrientationOutcome", Any, IntersectionRecord, BoxSpec], None
]

__all__ = [
    "HORIZONTAL_RUN_THRESHOLD",
    "OrientationOutcome",
    "OrientationSolver",
]

# Rotations smaller than this (radians) are not applied.
ANGLE_TOLERANCE = 1e-3

# A run whose plan projection is shorter than this passes vertically.
HORIZONTAL_RUN_THRESHOLD = 1e-3

# Connector height axes with |z| below this are twisted off the vertical.
TWIST_THRESHOLD = math.cos(math.pi / 4)

# The other axis must beat the carrier axis by this much to trigger a swap.
SWAP_MARGIN = 1e-3

# Position drift below this is not corrected.
POSITION_TOLERANCE = 1e-9

Confidence = Literal["exact", "heuristic", "low"]


@dataclass
class OrientationOutcome:
    """Rotations applied to one instance and where it was left.

    Attributes:
        rotations: Applied rotations in order.
        anchor: Final intended insertion point.
        skipped_steps: Steps skipped for lack of data.
    """

    rotations: list[AppliedRotation] = field(default_factory=list)
    anchor: Vec3 | None = None
    skipped_steps: list[str] = field(default_factory=list)


class OrientationSolver:
    """Aligns a freshly placed box with its host surface and run section.

    Attributes:
        target: Target model holding the instance.
        kernel: Geometry kernel, used for run connector frames.
    """

    def __init__(
        self,
        target: TargetModelProtocol,
        kernel: GeometryKernelProtocol,
        positioner: PlacementPositioner | None = None,
    ) -> None:
        self.target = target
        self.kernel = kernel
        self.positioner = positioner or PlacementPositioner()

    def orient(
        self,
        instance: Any,
        record: IntersectionRecord,
        spec: BoxSpec,
        anchor: Vec3,
    ) -> OrientationOutcome:
        """Apply every orientation step that applies to this clash.

        Args:
            instance: The placed box instance.
            record: The clash it marks.
            spec: Its computed size.
            anchor: Insertion point it was created at.

        Returns:
            The applied rotations and the final anchor. Never raises
            :class:`OrientationDataUnavailable`.
        """
        outcome = OrientationOutcome(anchor=anchor)
        for step, handler in self._steps_for(record):
            try:
                handler(outcome, instance, record, spec)
            except OrientationDataUnavailable as exc:
                outcome.skipped_steps.append(step)
                logger.info(f"{record.identity_tag}: {exc}")
        return outcome

    def _steps_for(
        self, record: IntersectionRecord
    ) -> list[tuple[str, StepHandler]]:
        rectangular = record.section_shape is SectionShape.RECTANGULAR
        if record.host_type is HostType.WALL:
            steps = [("wall_facing", self._wall_facing)]
            if rectangular:
                steps.append(("wall_twist", self._wall_twist))
            return steps

        if record.run_direction.horizontal().length >= HORIZONTAL_RUN_THRESHOLD:
            steps = [("floor_horizontal", self._floor_horizontal)]
        else:
            steps = [("floor_vertical", self._floor_vertical)]
        if rectangular:
            # Separate pass: a best-effort disambiguation, not an exact result.
            steps.append(("floor_axis_swap", self._floor_axis_swap))
        return steps

    # -- wall --------------------------------------------------------------

    def _wall_facing(
        self,
        outcome: OrientationOutcome,
        instance: Any,
        record: IntersectionRecord,
        spec: BoxSpec,
    ) -> None:
        normal = self._horizontal_unit(
            record.host_normal, "wall_facing", "host normal is vertical"
        )
        facing = self._horizontal_unit(
            self.target.instance_frame(instance).y_axis,
            "wall_facing",
            "instance facing is vertical",
        )
        angle = facing.signed_angle_to(normal, Z_AXIS)
        self._rotate(outcome, instance, outcome.anchor, Z_AXIS, angle, "wall_facing")

    def _wall_twist(
        self,
        outcome: OrientationOutcome,
        instance: Any,
        record: IntersectionRecord,
        spec: BoxSpec,
    ) -> None:
        connector = self.kernel.cross_section_frame(record.run)
        if connector is None or connector.y_axis.is_zero():
            raise OrientationDataUnavailable("wall_twist", "no connector frame")
        if abs(connector.y_axis.normalized().z) >= TWIST_THRESHOLD:
            return

        frame = self.target.instance_frame(instance)
        facing = frame.y_axis.normalized()
        half_height = spec.stacking_height / 2.0
        centre = outcome.anchor + frame.z_axis.normalized() * half_height
        self.target.rotate_instance(instance, centre, facing, math.pi / 2)
        up = self.target.instance_frame(instance).z_axis
        outcome.anchor = self.positioner.wall_anchor(centre, spec, up)
        self._restore(instance, outcome.anchor)
        outcome.rotations.append(
            AppliedRotation(
                origin=centre, axis=facing, angle=math.pi / 2, step="wall_twist"
            )
        )

    # -- floor -------------------------------------------------------------

    def _floor_horizontal(
        self,
        outcome: OrientationOutcome,
        instance: Any,
        record: IntersectionRecord,
        spec: BoxSpec,
    ) -> None:
        direction = record.run_direction.horizontal().normalized()
        self._turn_hand_onto(outcome, instance, direction, "floor_horizontal")

    def _floor_vertical(
        self,
        outcome: OrientationOutcome,
        instance: Any,
        record: IntersectionRecord,
        spec: BoxSpec,
    ) -> None:
        connector = self.kernel.cross_section_frame(record.run)
        if connector is not None:
            direction = self._horizontal_unit(
                connector.x_axis,
                "floor_vertical",
                "connector width axis is vertical",
            )
            self._turn_hand_onto(outcome, instance, direction, "floor_vertical")
            return

        # No connector frame: only the box's own proportions are left to go on.
        # Near-square sections may be misclassified and there is no tie-break.
        logger.debug(f"{record.identity_tag}: no connector frame for vertical run")
        if spec.height > spec.width:
            self._rotate(
                outcome,
                instance,
                outcome.anchor,
                Z_AXIS,
                math.pi / 2,
                "floor_vertical_fallback",
                confidence="low",
            )

    def _floor_axis_swap(
        self,
        outcome: OrientationOutcome,
        instance: Any,
        record: IntersectionRecord,
        spec: BoxSpec,
    ) -> None:
        if spec.width == spec.height:
            return
        frame = self.target.instance_frame(instance)
        hand = frame.x_axis
        facing = frame.y_axis
        direction = record.run_direction

        if spec.width >= spec.height:
            carrier, other = hand, facing
        else:
            carrier, other = facing, hand
        if abs(other.dot(direction)) <= abs(carrier.dot(direction)) + SWAP_MARGIN:
            return

        angle = -math.pi / 2 if direction.cross(facing).z > 0 else math.pi / 2
        self._rotate(
            outcome,
            instance,
            outcome.anchor,
            Z_AXIS,
            angle,
            "floor_axis_swap",
            confidence="heuristic",
        )

    # -- helpers -----------------------------------------------------------

    def _turn_hand_onto(self, outcome, instance, direction: Vec3, step: str) -> None:
        hand = self._horizontal_unit(
            self.target.instance_frame(instance).x_axis,
            step,
            "instance hand is vertical",
        )
        angle = hand.signed_angle_to(direction, Z_AXIS)
        self._rotate(outcome, instance, outcome.anchor, Z_AXIS, angle, step)

    def _rotate(
        self,
        outcome: OrientationOutcome,
        instance: Any,
        origin: Vec3,
        axis: Vec3,
        angle: float,
        step: str,
        confidence: Confidence = "exact",
    ) -> None:
        if abs(angle) <= ANGLE_TOLERANCE:
            return
        self.target.rotate_instance(instance, origin, axis, angle)
        self._restore(instance, outcome.anchor)
        outcome.rotations.append(
            AppliedRotation(
                origin=origin, axis=axis, angle=angle, step=step, confidence=confidence
            )
        )

    def _restore(self, instance: Any, anchor: Vec3) -> None:
        """Move the instance back onto ``anchor`` if the rotation displaced it."""
        delta = anchor - self.target.instance_location(instance)
        if not delta.is_zero(POSITION_TOLERANCE):
            self.target.move_instance(instance, delta)

    @staticmethod
    def _horizontal_unit(vector: Vec3, step: str, reason: str) -> Vec3:
        projected = vector.horizontal()
        if projected.length < HORIZONTAL_RUN_THRESHOLD:
            raise OrientationDataUnavailable(step, reason)
        return projected.normalized()
