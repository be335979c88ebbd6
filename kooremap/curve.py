"""Planar curve through control points with arc-length parameterisation."""

from __future__ import annotations

from bisect import bisect_left
from enum import Enum
from typing import Iterable, Optional

from kooremap.geometry import Vector2D

ARC_LENGTH_SAMPLES = 1000


class InterpolationType(Enum):
    """How the curve passes between control points."""

    LINEAR = "linear"
    CATMULL_ROM = "catmull_rom"
    BSPLINE = "bspline"


def _catmull_rom(p0: Vector2D, p1: Vector2D, p2: Vector2D, p3: Vector2D, t: float) -> Vector2D:
    t2 = t * t
    t3 = t2 * t
    return 0.5 * (
        p1 * 2
        + (p2 - p0) * t
        + (p0 * 2 - p1 * 5 + p2 * 4 - p3) * t2
        + (p1 * 3 - p0 - p2 * 3 + p3) * t3
    )


def _catmull_rom_tangent(
    p0: Vector2D, p1: Vector2D, p2: Vector2D, p3: Vector2D, t: float
) -> Vector2D:
    t2 = t * t
    return 0.5 * (
        (p2 - p0)
        + (p0 * 4 - p1 * 10 + p2 * 8 - p3 * 2) * t
        + (p1 * 9 - p0 * 3 - p2 * 9 + p3 * 3) * t2
    )


class CurveInterpolator:
    """Evaluates a curve by parameter t in [0, 1] or by arc length."""

    def __init__(
        self,
        points: Optional[Iterable[Vector2D]] = None,
        interpolation_type: InterpolationType = InterpolationType.CATMULL_ROM,
    ) -> None:
        self._type = interpolation_type
        self.control_points: list[Vector2D] = []
        self._arc_lengths: list[float] = []
        self._parameters: list[float] = []
        self.arc_length = 0.0
        if points is not None:
            self.set_control_points(points)

    @property
    def interpolation_type(self) -> InterpolationType:
        return self._type

    @interpolation_type.setter
    def interpolation_type(self, value: InterpolationType) -> None:
        self._type = value
        self._recompute_arc_length()

    def set_control_points(self, points: Iterable[Vector2D]) -> None:
        """Replace the control points; at least two are required."""
        points = list(points)
        if len(points) < 2:
            raise ValueError("Curve requires at least 2 control points")
        self.control_points = points
        self._recompute_arc_length()

    def _recompute_arc_length(self) -> None:
        self._arc_lengths = []
        self._parameters = []
        if len(self.control_points) < 2:
            self.arc_length = 0.0
            return
        total = 0.0
        prev = self.evaluate(0.0)
        self._arc_lengths.append(0.0)
        self._parameters.append(0.0)
        for i in range(1, ARC_LENGTH_SAMPLES + 1):
            t = i / ARC_LENGTH_SAMPLES
            current = self.evaluate(t)
            total += (current - prev).length()
            self._arc_lengths.append(total)
            self._parameters.append(t)
            prev = current
        self.arc_length = total

    def _segment(self, t: float) -> tuple[int, float]:
        count = len(self.control_points) - 1
        scaled = min(max(t, 0.0), 1.0) * count
        segment = int(scaled)
        if segment >= count:
            return count - 1, 1.0
        return segment, scaled - segment

    def _segment_points(self, segment: int) -> tuple[Vector2D, Vector2D, Vector2D, Vector2D]:
        pts = self.control_points
        p1, p2 = pts[segment], pts[segment + 1]
        p0 = p1 * 2 - p2 if segment == 0 else pts[segment - 1]
        p3 = p2 * 2 - p1 if segment + 2 >= len(pts) else pts[segment + 2]
        return p0, p1, p2, p3

    def evaluate(self, t: float) -> Vector2D:
        """Point on the curve at parameter t, clamped to [0, 1]."""
        if len(self.control_points) < 2:
            return Vector2D(0, 0)
        segment, local = self._segment(t)
        if self._type is InterpolationType.LINEAR:
            p1, p2 = self.control_points[segment], self.control_points[segment + 1]
            return p1 + (p2 - p1) * local
        return _catmull_rom(*self._segment_points(segment), local)

    def evaluate_tangent(self, t: float) -> Vector2D:
        """Derivative of the curve with respect to t."""
        if len(self.control_points) < 2:
            return Vector2D(1, 0)
        count = len(self.control_points) - 1
        segment, local = self._segment(t)
        if self._type is InterpolationType.LINEAR:
            p1, p2 = self.control_points[segment], self.control_points[segment + 1]
            return (p2 - p1) * count
        return _catmull_rom_tangent(*self._segment_points(segment), local) * count

    def evaluate_normal(self, t: float) -> Vector2D:
        """Unit tangent turned a quarter turn counter-clockwise."""
        return self.evaluate_tangent(t).normalized().perpendicular()

    def parameter_at_arc_length(self, s: float) -> float:
        """Parameter t at arc length s, from the sampled length table."""
        if self.arc_length <= 0 or not self._arc_lengths:
            return 0.0
        s = min(max(s, 0.0), self.arc_length)
        idx = bisect_left(self._arc_lengths, s)
        if idx == 0:
            return 0.0
        if idx == len(self._arc_lengths):
            return 1.0
        s0, s1 = self._arc_lengths[idx - 1], self._arc_lengths[idx]
        t0, t1 = self._parameters[idx - 1], self._parameters[idx]
        if s1 - s0 < 1e-10:
            return t0
        return t0 + (t1 - t0) * (s - s0) / (s1 - s0)

    def evaluate_at_arc_length(self, s: float) -> Vector2D:
        return self.evaluate(self.parameter_at_arc_length(s))

    def evaluate_tangent_at_arc_length(self, s: float) -> Vector2D:
        return self.evaluate_tangent(self.parameter_at_arc_length(s))

    def scale(self, factor: float) -> None:
        """Scale all control points about the origin."""
        self.control_points = [p * factor for p in self.control_points]
        self._recompute_arc_length()

    def translate(self, offset: Vector2D) -> None:
        """Shift all control points; the arc length is unchanged."""
        self.control_points = [p + offset for p in self.control_points]