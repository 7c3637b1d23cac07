"""Vector, rigid transform and local frame value objects."""

from __future__ import annotations

import math
from dataclasses import dataclass

# Lengths below this are treated as zero when normalizing or projecting.
ZERO_TOLERANCE = 1e-9


@dataclass(frozen=True)
class Vec3:
    """3D vector or point in working-space coordinates (Z up)."""

    x: float
    y: float
    z: float

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vec3:
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def dot(self, other: Vec3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    @property
    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def is_zero(self, tolerance: float = ZERO_TOLERANCE) -> bool:
        return self.length <= tolerance

    def is_unit(self, tolerance: float = 1e-6) -> bool:
        return abs(self.length - 1.0) <= tolerance

    def normalized(self) -> Vec3:
        """Return the unit vector in this direction.

        Raises:
            ValueError: If the vector has (near) zero length.
        """
        length = self.length
        if length <= ZERO_TOLERANCE:
            raise ValueError("Cannot normalize a zero-length vector")
        return Vec3(self.x / length, self.y / length, self.z / length)

    def horizontal(self) -> Vec3:
        """Projection onto the XY plane."""
        return Vec3(self.x, self.y, 0.0)

    def distance_to(self, other: Vec3) -> float:
        return (self - other).length

    def signed_angle_to(self, other: Vec3, axis: Vec3) -> float:
        """Angle in radians rotating this vector onto ``other`` about ``axis``.

        Positive angles are counter-clockwise when looking down ``axis``.
        """
        cross = self.cross(other)
        return math.atan2(cross.dot(axis.normalized()), self.dot(other))

    def rotated(self, axis: Vec3, angle: float) -> Vec3:
        """Rotate about ``axis`` (through the origin) using Rodrigues' formula."""
        k = axis.normalized()
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        return (
            self * cos_a
            + k.cross(self) * sin_a
            + k * (k.dot(self) * (1.0 - cos_a))
        )

    def is_close(self, other: Vec3, tolerance: float = 1e-9) -> bool:
        return self.distance_to(other) <= tolerance

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @classmethod
    def from_iterable(cls, values) -> Vec3:
        x, y, z = values
        return cls(float(x), float(y), float(z))


ORIGIN = Vec3(0.0, 0.0, 0.0)
X_AXIS = Vec3(1.0, 0.0, 0.0)
Y_AXIS = Vec3(0.0, 1.0, 0.0)
Z_AXIS = Vec3(0.0, 0.0, 1.0)


@dataclass(frozen=True)
class Transform:
    """Rigid transform: rotation given by three basis vectors plus translation.

    ``of_point(p) = origin + basis_x * p.x + basis_y * p.y + basis_z * p.z``.
    """

    basis_x: Vec3 = X_AXIS
    basis_y: Vec3 = Y_AXIS
    basis_z: Vec3 = Z_AXIS
    origin: Vec3 = ORIGIN

    @classmethod
    def identity(cls) -> Transform:
        return cls()

    @classmethod
    def translation(cls, offset: Vec3) -> Transform:
        return cls(origin=offset)

    @classmethod
    def rotation_z(cls, angle: float, origin: Vec3 = ORIGIN) -> Transform:
        """Rotation by ``angle`` radians about the vertical, then translation."""
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        return cls(
            basis_x=Vec3(cos_a, sin_a, 0.0),
            basis_y=Vec3(-sin_a, cos_a, 0.0),
            basis_z=Z_AXIS,
            origin=origin,
        )

    def of_vector(self, vector: Vec3) -> Vec3:
        return (
            self.basis_x * vector.x
            + self.basis_y * vector.y
            + self.basis_z * vector.z
        )

    def of_point(self, point: Vec3) -> Vec3:
        return self.origin + self.of_vector(point)

    def multiply(self, other: Transform) -> Transform:
        """Compose transforms: the result applies ``other`` first, then self."""
        return Transform(
            basis_x=self.of_vector(other.basis_x),
            basis_y=self.of_vector(other.basis_y),
            basis_z=self.of_vector(other.basis_z),
            origin=self.of_point(other.origin),
        )

    @property
    def inverse(self) -> Transform:
        # Rotation part is orthonormal, so its inverse is the transpose.
        bx = Vec3(self.basis_x.x, self.basis_y.x, self.basis_z.x)
        by = Vec3(self.basis_x.y, self.basis_y.y, self.basis_z.y)
        bz = Vec3(self.basis_x.z, self.basis_y.z, self.basis_z.z)
        rotation = Transform(basis_x=bx, basis_y=by, basis_z=bz)
        return Transform(
            basis_x=bx, basis_y=by, basis_z=bz, origin=-rotation.of_vector(self.origin)
        )

    @property
    def is_identity(self) -> bool:
        return (
            self.basis_x.is_close(X_AXIS)
            and self.basis_y.is_close(Y_AXIS)
            and self.basis_z.is_close(Z_AXIS)
            and self.origin.is_close(ORIGIN)
        )


@dataclass(frozen=True)
class Frame:
    """Local coordinate system (origin plus three axes).

    Used for run connector frames (x = section width axis, y = section height
    axis, z = flow direction) and for box instance frames (x = hand,
    y = facing, z = up).
    """

    origin: Vec3
    x_axis: Vec3
    y_axis: Vec3
    z_axis: Vec3

    @classmethod
    def world(cls, origin: Vec3 = ORIGIN) -> Frame:
        return cls(origin=origin, x_axis=X_AXIS, y_axis=Y_AXIS, z_axis=Z_AXIS)

    def transformed(self, transform: Transform) -> Frame:
        return Frame(
            origin=transform.of_point(self.origin),
            x_axis=transform.of_vector(self.x_axis),
            y_axis=transform.of_vector(self.y_axis),
            z_axis=transform.of_vector(self.z_axis),
        )

    def rotated(self, origin: Vec3, axis: Vec3, angle: float) -> Frame:
        """Rotate the whole frame about an axis through ``origin``."""
        return Frame(
            origin=origin + (self.origin - origin).rotated(axis, angle),
            x_axis=self.x_axis.rotated(axis, angle),
            y_axis=self.y_axis.rotated(axis, angle),
            z_axis=self.z_axis.rotated(axis, angle),
        )

    def moved(self, delta: Vec3) -> Frame:
        return Frame(
            origin=self.origin + delta,
            x_axis=self.x_axis,
            y_axis=self.y_axis,
            z_axis=self.z_axis,
        )
