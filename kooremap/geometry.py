"""Small fixed-size vectors and a 3x3 matrix used throughout the mesh code."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Union

_SINGULAR_TOLERANCE = 1e-20


@dataclass(frozen=True)
class Vector3D:
    """An immutable point or direction in three dimensions."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z)[index]

    def __add__(self, other: Vector3D) -> Vector3D:
        return Vector3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3D) -> Vector3D:
        return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector3D:
        return Vector3D(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector3D:
        return Vector3D(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vector3D:
        return Vector3D(-self.x, -self.y, -self.z)

    def __str__(self) -> str:
        return f"({self.x:.6f}, {self.y:.6f}, {self.z:.6f})"

    def dot(self, other: Vector3D) -> float:
        """Scalar product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3D) -> Vector3D:
        """Vector product."""
        return Vector3D(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def magnitude(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.dot(self))

    def normalized(self) -> Vector3D:
        """Unit vector in the same direction; a zero vector stays zero."""
        length = self.magnitude()
        if length == 0.0:
            return self
        return self / length


@dataclass(frozen=True)
class Vector2D:
    """An immutable point or direction in the plane."""

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y))

    def __add__(self, other: Vector2D) -> Vector2D:
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2D) -> Vector2D:
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2D:
        return Vector2D(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector2D:
        return Vector2D(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Vector2D:
        return Vector2D(-self.x, -self.y)

    def length(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.length_squared())

    def length_squared(self) -> float:
        """Squared Euclidean length."""
        return self.x * self.x + self.y * self.y

    def normalized(self) -> Vector2D:
        """Unit vector in the same direction; a zero vector stays zero."""
        length = self.length()
        if length == 0.0:
            return self
        return self / length

    def perpendicular(self) -> Vector2D:
        """The vector rotated a quarter turn counter-clockwise."""
        return Vector2D(-self.y, self.x)


Operand = Union["Matrix3x3", Vector3D, float, int]


class Matrix3x3:
    """An immutable 3x3 matrix stored in row-major order."""

    __slots__ = ("_m",)

    def __init__(self, *values: float) -> None:
        if not values:
            values = (0.0,) * 9
        if len(values) != 9:
            raise ValueError("Matrix3x3 needs exactly 9 values")
        self._m = tuple(float(v) for v in values)

    @staticmethod
    def identity() -> Matrix3x3:
        return Matrix3x3(1, 0, 0, 0, 1, 0, 0, 0, 1)

    @staticmethod
    def from_columns(c0: Vector3D, c1: Vector3D, c2: Vector3D) -> Matrix3x3:
        return Matrix3x3(
            c0.x, c1.x, c2.x,
            c0.y, c1.y, c2.y,
            c0.z, c1.z, c2.z,
        )

    @property
    def rows(self) -> tuple[tuple[float, float, float], ...]:
        m = self._m
        return (m[0:3], m[3:6], m[6:9])

    def __getitem__(self, index: tuple[int, int]) -> float:
        i, j = index
        return self._m[3 * i + j]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix3x3):
            return NotImplemented
        return self._m == other._m

    def __hash__(self) -> int:
        return hash(self._m)

    def __repr__(self) -> str:
        return f"Matrix3x3{self._m!r}"

    def __add__(self, other: Matrix3x3) -> Matrix3x3:
        return Matrix3x3(*(a + b for a, b in zip(self._m, other._m)))

    def __sub__(self, other: Matrix3x3) -> Matrix3x3:
        return Matrix3x3(*(a - b for a, b in zip(self._m, other._m)))

    def __matmul__(self, other: Matrix3x3) -> Matrix3x3:
        cols = list(zip(*other.rows))
        return Matrix3x3(
            *(sum(a * b for a, b in zip(row, col)) for row in self.rows for col in cols)
        )

    def __mul__(self, other: Operand):
        if isinstance(other, Matrix3x3):
            return self @ other
        if isinstance(other, Vector3D):
            return Vector3D(*(sum(a * b for a, b in zip(row, other)) for row in self.rows))
        return Matrix3x3(*(a * other for a in self._m))

    def __rmul__(self, scalar: float) -> Matrix3x3:
        return Matrix3x3(*(a * scalar for a in self._m))

    def transpose(self) -> Matrix3x3:
        return Matrix3x3(*(v for col in zip(*self.rows) for v in col))

    def symmetric(self) -> Matrix3x3:
        """The symmetric part, (M + M^T) / 2."""
        return (self + self.transpose()) * 0.5

    def determinant(self) -> float:
        m = self._m
        return (
            m[0] * (m[4] * m[8] - m[5] * m[7])
            - m[1] * (m[3] * m[8] - m[5] * m[6])
            + m[2] * (m[3] * m[7] - m[4] * m[6])
        )

    def inverse(self) -> Matrix3x3:
        """The inverse matrix; raises ValueError when the matrix is singular."""
        det = self.determinant()
        if abs(det) < _SINGULAR_TOLERANCE:
            raise ValueError("Matrix is singular and cannot be inverted")
        m = self._m
        inv = 1.0 / det
        return Matrix3x3(
            (m[4] * m[8] - m[5] * m[7]) * inv,
            (m[2] * m[7] - m[1] * m[8]) * inv,
            (m[1] * m[5] - m[2] * m[4]) * inv,
            (m[5] * m[6] - m[3] * m[8]) * inv,
            (m[0] * m[8] - m[2] * m[6]) * inv,
            (m[2] * m[3] - m[0] * m[5]) * inv,
            (m[3] * m[7] - m[4] * m[6]) * inv,
            (m[1] * m[6] - m[0] * m[7]) * inv,
            (m[0] * m[4] - m[1] * m[3]) * inv,
        )