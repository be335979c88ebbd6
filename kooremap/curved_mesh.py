"""Structured HEX8 mesh swept along a planar centerline curve."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Callable, Optional

from kooremap.curve import CurveInterpolator, InterpolationType
from kooremap.geometry import Vector2D, Vector3D
from kooremap.mesh import Element, Mesh, Node, Part

_CURVATURE_SAMPLES = 100
_CURVATURE_STEP = 0.001

ProgressCallback = Callable[[int], None]


@dataclass
class CurvedMeshConfig:
    """Centerline, cross section and element counts of a curved mesh."""

    centerline_points: list[Vector2D] = field(default_factory=list)
    interpolation: InterpolationType = InterpolationType.CATMULL_ROM
    width: float = 1.0
    thickness: float = 1.0
    elements_along_curve: int = 10
    elements_width: int = 5
    elements_thickness: int = 5
    center_at_origin: bool = False

    def validate(self) -> None:
        """Raise ValueError when the configuration cannot produce a mesh."""
        if len(self.centerline_points) < 2:
            raise ValueError("Curved mesh requires at least 2 centerline points")
        if self.elements_along_curve <= 0:
            raise ValueError("elements_along_curve must be positive")
        if self.elements_width <= 0:
            raise ValueError("elements_j must be positive")
        if self.elements_thickness <= 0:
            raise ValueError("elements_k must be positive")
        if self.width <= 0:
            raise ValueError("Cross-section width must be positive")
        if self.thickness <= 0:
            raise ValueError("Cross-section thickness must be positive")

    def total_elements(self) -> int:
        return self.elements_along_curve * self.elements_width * self.elements_thickness


@dataclass
class CurvedMeshStats:
    """Figures describing the last generated curved mesh."""

    arc_length: float = 0.0
    scale_factor: float = 1.0
    width: float = 0.0
    thickness: float = 0.0
    total_elements: int = 0
    total_nodes: int = 0
    max_curvature: float = 0.0
    curvature_at_max: float = 0.0
    min_radius: float = 0.0


class CurvedMeshGenerator:
    """Builds a curved structured mesh, optionally fitted to a reference."""

    def __init__(self, progress_callback: Optional[ProgressCallback] = None) -> None:
        self.progress_callback = progress_callback
        self.curve = CurveInterpolator()
        self.stats = CurvedMeshStats()

    def _report(self, percent: int) -> None:
        if self.progress_callback is not None:
            self.progress_callback(percent)

    def generate(
        self,
        config: CurvedMeshConfig,
        ref_arc_length: float = 0.0,
        ref_width: float = 0.0,
        ref_thickness: float = 0.0,
    ) -> Mesh:
        """Generate the mesh; reference values that are positive override the config."""
        config.validate()
        self._report(5)

        self.curve = CurveInterpolator(config.centerline_points, config.interpolation)
        original_length = self.curve.arc_length

        scale_factor = 1.0
        if ref_arc_length > 0:
            if original_length <= 0:
                raise ValueError("Centerline has zero length and cannot be scaled")
            scale_factor = ref_arc_length / original_length
            self.curve.scale(scale_factor)
        width = ref_width if ref_width > 0 else config.width
        thickness = ref_thickness if ref_thickness > 0 else config.thickness
        self._report(10)

        self._analyze_curve()
        stats = self.stats
        stats.arc_length = self.curve.arc_length
        stats.scale_factor = scale_factor
        stats.width = width
        stats.thickness = thickness
        stats.total_elements = config.total_elements()
        self._report(15)

        ni = config.elements_along_curve + 1
        nj = config.elements_width + 1
        nk = config.elements_thickness + 1

        positions: list[Vector2D] = []
        normals: list[Vector2D] = []
        for i in range(ni):
            s = i / (ni - 1) * stats.arc_length
            positions.append(self.curve.evaluate_at_arc_length(s))
            tangent = self.curve.evaluate_tangent_at_arc_length(s).normalized()
            normals.append(tangent.perpendicular())
        self._report(20)

        mesh = Mesh()
        node_id = 1
        for k in range(nk):
            thickness_offset = (k / (nk - 1) - 0.5) * thickness
            for j in range(nj):
                y = (j / (nj - 1) - 0.5) * width
                for pos, normal in zip(positions, normals):
                    x = pos.x + normal.x * thickness_offset
                    z = pos.y + normal.y * thickness_offset
                    mesh.add_node(Node(node_id, Vector3D(x, y, z)))
                    node_id += 1
            if self.progress_callback is not None and k % 2 == 0:
                self._report(20 + 50 * k // nk)
        self._report(70)

        def index(ii: int, jj: int, kk: int) -> int:
            return 1 + ii + jj * ni + kk * ni * nj

        elem_id = 1
        for k in range(config.elements_thickness):
            for j in range(config.elements_width):
                for i in range(config.elements_along_curve):
                    node_ids = [
                        index(i, j, k),
                        index(i + 1, j, k),
                        index(i + 1, j + 1, k),
                        index(i, j + 1, k),
                        index(i, j, k + 1),
                        index(i + 1, j, k + 1),
                        index(i + 1, j + 1, k + 1),
                        index(i, j + 1, k + 1),
                    ]
                    mesh.add_element(
                        Element(elem_id, 1, node_ids, i=i, j=j, k=k, index_assigned=True)
                    )
                    elem_id += 1
            if self.progress_callback is not None:
                self._report(70 + 25 * k // config.elements_thickness)

        stats.total_nodes = mesh.node_count
        mesh.set_grid_dimensions(
            config.elements_along_curve, config.elements_width, config.elements_thickness
        )
        mesh.add_part(Part(1, "curved_mesh_part"))
        self._report(100)
        return mesh

    def compute_curvature(self, t: float) -> float:
        """Numerical curvature of the current curve at parameter t.

        At an end of the curve the one-sided difference has no second
        derivative, and the curvature is reported as zero.
        """
        t0 = max(0.0, t - _CURVATURE_STEP)
        t1 = min(1.0, t + _CURVATURE_STEP)
        p0 = self.curve.evaluate(t0)
        p1 = self.curve.evaluate(t)
        p2 = self.curve.evaluate(t1)
        dp = (p2 - p0) / (t1 - t0)
        denominator = (t1 - t) * (t - t0)
        if denominator == 0.0:
            return 0.0
        d2p = (p2 - p1 * 2 + p0) / denominator
        cross = dp.x * d2p.y - dp.y * d2p.x
        len_cubed = dp.length_squared() ** 1.5
        if len_cubed < 1e-10:
            return 0.0
        return abs(cross) / len_cubed

    def _analyze_curve(self) -> None:
        stats = self.stats
        stats.max_curvature = 0.0
        stats.curvature_at_max = 0.0
        stats.min_radius = sys.float_info.max
        for i in range(_CURVATURE_SAMPLES + 1):
            t = i / _CURVATURE_SAMPLES
            curvature = self.compute_curvature(t)
            if curvature > stats.max_curvature:
                stats.max_curvature = curvature
                stats.curvature_at_max = t
        if stats.max_curvature > 1e-10:
            stats.min_radius = 1.0 / stats.max_curvature