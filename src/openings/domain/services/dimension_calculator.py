"""Box sizing from run cross sections and placement settings.

Every box dimension is rounded UP to the configured granularity so that an
opening is never smaller than the real penetration plus clearance.
"""

from __future__ import annotations

import math

from ..value_objects import (
    BoxSpec,
    IntersectionRecord,
    PlacementSettings,
    RectangularSection,
    RoundSection,
)

__all__ = [
    "DimensionCalculator",
    "ceil_to_multiple",
]

# Quotients this close to an integer are snapped before taking the ceiling.
_QUOTIENT_TOLERANCE = 1e-9


def ceil_to_multiple(value: float, multiple: float) -> float:
    """Round ``value`` up to the smallest multiple of ``multiple`` >= value.

    A quotient within ``_QUOTIENT_TOLERANCE`` of an integer is snapped to that
    integer first, so float noise from unit conversion does not add a whole
    step. The result can therefore fall below ``value`` by at most
    ``multiple * _QUOTIENT_TOLERANCE``.

    Args:
        value: Raw size.
        multiple: Rounding granularity. Values <= 0 disable rounding.

    Returns:
        The rounded size, or ``value`` unchanged when rounding is disabled.

    Example:
        >>> ceil_to_multiple(160.0, 50.0)
        200.0
        >>> ceil_to_multiple(150.0, 50.0)
        150.0
        >>> ceil_to_multiple(150.00000004, 50.0)
        150.0
    """
    if multiple <= 0:
        return value
    quotient = value / multiple
    nearest = round(quotient)
    if abs(quotient - nearest) <= _QUOTIENT_TOLERANCE:
        return nearest * multiple
    return math.ceil(quotient) * multiple


class DimensionCalculator:
    """Computes opening box sizes.

    Attributes:
        settings: Sizing settings for the current batch.
    """

    def __init__(self, settings: PlacementSettings) -> None:
        self.settings = settings

    def calculate(self, record: IntersectionRecord) -> BoxSpec:
        """Compute the box spec for one clash.

        Round sections give a square plan (width = height = diameter);
        rectangular sections round width and height independently.
        """
        section = record.cross_section
        clearance = 2 * self.settings.minimum_clearance
        rounding = self.settings.rounding_granularity

        if isinstance(section, RoundSection):
            size = ceil_to_multiple(section.diameter + clearance, rounding)
            return BoxSpec(
                width=size,
                height=size,
                diameter=size,
                host_thickness=record.host_thickness,
                protrusion=self.settings.protrusion,
            )

        assert isinstance(section, RectangularSection)
        return BoxSpec(
            width=ceil_to_multiple(section.width + clearance, rounding),
            height=ceil_to_multiple(section.height + clearance, rounding),
            host_thickness=record.host_thickness,
            protrusion=self.settings.protrusion,
        )
