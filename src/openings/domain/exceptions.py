"""Domain exceptions for clash detection and opening box placement."""

from __future__ import annotations

from .value_objects import HostType, RunCategory, SectionShape


class OpeningsError(Exception):
    """Base class for placement engine errors."""


class MissingTemplate(OpeningsError):
    """Raised when no box template exists for a (host, shape, category) key."""

    def __init__(
        self,
        host_type: HostType,
        shape: SectionShape,
        category: RunCategory,
        path: str | None = None,
    ) -> None:
        self.host_type = host_type
        self.shape = shape
        self.category = category
        self.path = path
        message = (
            f"No opening box template for {host_type.value} host, "
            f"{shape.value} section, {category.value} run"
        )
        if path:
            message += f" (looked in {path})"
        super().__init__(message)


class GeometryExtractionFailure(OpeningsError):
    """Raised when solids cannot be read from an element."""

    def __init__(self, identity: str, reason: str = "") -> None:
        self.identity = identity
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Cannot extract geometry of {identity}{detail}")


class BooleanOperationFailure(OpeningsError):
    """Raised when the kernel cannot intersect two solids."""


class DegenerateIntersection(OpeningsError):
    """Raised when an overlap volume is at or below the clash epsilon."""

    def __init__(self, volume: float, epsilon: float) -> None:
        self.volume = volume
        self.epsilon = epsilon
        super().__init__(
            f"Intersection volume {volume:g} is not above epsilon {epsilon:g}"
        )


class ParameterWriteFailure(OpeningsError):
    """Raised when a parameter is missing, read-only or rejects a value."""

    def __init__(self, parameter: str, reason: str) -> None:
        self.parameter = parameter
        self.reason = reason
        super().__init__(f"Cannot write parameter '{parameter}': {reason}")


class OrientationDataUnavailable(OpeningsError):
    """Raised when a vector needed by an orientation step cannot be read."""

    def __init__(self, step: str, reason: str) -> None:
        self.step = step
        self.reason = reason
        super().__init__(f"Orientation step '{step}' skipped: {reason}")


class InvalidInput(OpeningsError):
    """Raised when a batch cannot start (no document, read-only, template)."""


class UserCancelled(OpeningsError):
    """Raised when the user declines a confirmation before mutation."""
