"""Example structured meshes: a flat box and its bent, twisted or folded twin."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional

from kooremap.geometry import Vector3D
from kooremap.mesh import Element, ElementType, Mesh, Node, Part

DEG_TO_RAD = math.pi / 180.0
EPSILON = 1e-10
_STEP = 0.001

CenterlineFunction = Callable[[float], Vector3D]
CrossSectionFunction = Callable[[float], "tuple[float, float]"]


class BentMeshType(Enum):
    """Shape the flat box is bent into."""

    TEARDROP = "teardrop"
    ARC = "arc"
    S_CURVE = "s_curve"
    HELIX = "helix"
    TORUS = "torus"
    TWIST = "twist"
    BEND_TWIST = "bend_twist"
    WAVE = "wave"
    WATERDROP = "waterdrop"
    BULGE = "bulge"
    TAPER = "taper"
    CUSTOM = "custom"


_PLANAR_BENDS = (BentMeshType.ARC, BentMeshType.TORUS, BentMeshType.BEND_TWIST)


@dataclass
class ExampleMeshConfig:
    """Grid size, box dimensions and the parameters of every bent shape."""

    dim_i: int = 10
    dim_j: int = 4
    dim_k: int = 2
    length_i: float = 100.0
    length_j: float = 20.0
    length_k: float = 5.0
    start_node_id: int = 1
    start_element_id: int = 1
    part_id: int = 1
    bent_type: BentMeshType = BentMeshType.ARC
    teardrop_length: float = 100.0
    teardrop_radius: float = 20.0
    arc_angle: float = 90.0
    arc_radius: float = 50.0
    s_curve_amplitude: float = 10.0
    s_curve_frequency: float = 1.0
    helix_radius: float = 20.0
    helix_pitch: float = 50.0
    torus_radius: float = 50.0
    torus_angle: float = 180.0
    twist_angle: float = 90.0
    wave_amplitude: float = 5.0
    wave_frequency: float = 2.0
    bulge_position: float = 0.5
    bulge_width: float = 0.3
    bulge_factor: float = 1.5
    taper_ratio: float = 0.5
    waterdrop_flat_ratio: float = 0.4
    waterdrop_fold_angle: float = 180.0
    waterdrop_fold_radius: float = 10.0


def _combine(origin: Vector3D, *terms: "tuple[Vector3D, float]") -> Vector3D:
    """origin plus the sum of direction * factor."""
    x, y, z = origin.x, origin.y, origin.z
    for direction, factor in terms:
        x += direction.x * factor
        y += direction.y * factor
        z += direction.z * factor
    return Vector3D(x, y, z)


def _waterdrop_arc_position(t: float, config: ExampleMeshConfig) -> "tuple[float, float, float]":
    """Arc length along the fold for t, with half the elements in the curve.

    Returns (s, flat_length, arc_length).
    """
    fold_angle = config.waterdrop_fold_angle * DEG_TO_RAD
    radius = config.waterdrop_fold_radius
    flat_length = config.waterdrop_flat_ratio * config.length_i
    arc_length = radius * fold_angle
    curve_share = 0.5
    flat_share = (1.0 - curve_share) / 2.0
    if t <= flat_share:
        s = t / flat_share * flat_length
    elif t >= 1.0 - flat_share:
        local = (t - (1.0 - flat_share)) / flat_share
        s = flat_length + arc_length + local * flat_length
    else:
        local = (t - flat_share) / curve_share
        s = flat_length + local * arc_length
    return s, flat_length, arc_length


def _twisted(local_j: float, local_k: float, angle: float) -> "tuple[float, float]":
    if abs(angle) <= EPSILON:
        return local_j, local_k
    cos_t, sin_t = math.cos(angle), math.sin(angle)
    return local_j * cos_t - local_k * sin_t, local_j * sin_t + local_k * cos_t


def _perpendicular_to(tangent: Vector3D) -> Vector3D:
    axis = Vector3D(1, 0, 0) if abs(tangent.x) < 0.9 else Vector3D(0, 1, 0)
    return axis.cross(tangent).normalized()


class ExampleMeshGenerator:
    """Generates matching flat and bent structured HEX8 meshes."""

    def __init__(
        self,
        custom_centerline: Optional[CenterlineFunction] = None,
        custom_cross_section: Optional[CrossSectionFunction] = None,
    ) -> None:
        self.custom_centerline = custom_centerline
        self.custom_cross_section = custom_cross_section

    # ------------------------------------------------------------------
    # Meshes

    @staticmethod
    def _add_hex_elements(mesh: Mesh, config: ExampleMeshConfig) -> None:
        per_row = config.dim_i + 1
        per_slice = per_row * (config.dim_j + 1)
        elem_id = config.start_element_id
        for k in range(config.dim_k):
            for j in range(config.dim_j):
                for i in range(config.dim_i):
                    base = config.start_node_id + i + j * per_row + k * per_slice
                    node_ids = [
                        base,
                        base + 1,
                        base + 1 + per_row,
                        base + per_row,
                        base + per_slice,
                        base + 1 + per_slice,
                        base + 1 + per_row + per_slice,
                        base + per_row + per_slice,
                    ]
                    mesh.add_element(
                        Element(elem_id, config.part_id, node_ids, i=i, j=j, k=k, index_assigned=True)
                    )
                    elem_id += 1

    def generate_flat_mesh(self, config: ExampleMeshConfig) -> Mesh:
        """Flat box; for WATERDROP the X coordinate is the arc length of the fold."""
        mesh = Mesh()
        mesh.name = "flat_structured_mesh"
        dy = config.length_j / config.dim_j
        dz = config.length_k / config.dim_k
        node_id = config.start_node_id
        for k in range(config.dim_k + 1):
            z = k * dz - config.length_k / 2.0
            for j in range(config.dim_j + 1):
                y = j * dy - config.length_j / 2.0
                for i in range(config.dim_i + 1):
                    t = i / config.dim_i
                    if config.bent_type is BentMeshType.WATERDROP:
                        x = _waterdrop_arc_position(t, config)[0]
                    else:
                        x = t * config.length_i
                    mesh.add_node(Node(node_id, Vector3D(x, y, z)))
                    node_id += 1
        self._add_hex_elements(mesh, config)
        mesh.add_part(Part(config.part_id, "flat_part"))
        return mesh

    def generate_bent_mesh(self, config: ExampleMeshConfig) -> Mesh:
        """The same grid as the flat mesh, bent into the configured shape."""
        mesh = Mesh()
        mesh.name = "bent_structured_mesh"
        node_id = config.start_node_id
        for k in range(config.dim_k + 1):
            for j in range(config.dim_j + 1):
                for i in range(config.dim_i + 1):
                    mesh.add_node(Node(node_id, self.bent_position(i, j, k, config)))
                    node_id += 1
        self._add_hex_elements(mesh, config)
        mesh.add_part(Part(config.part_id, "bent_part"))
        return mesh

    def generate_flat_unstructured_mesh(self, config: ExampleMeshConfig, refine_factor: int = 2) -> Mesh:
        """A flat mesh refined by the given factor in every direction."""
        refined = replace(
            config,
            dim_i=config.dim_i * refine_factor,
            dim_j=config.dim_j * refine_factor,
            dim_k=config.dim_k * refine_factor,
        )
        mesh = self.generate_flat_mesh(refined)
        mesh.name = "flat_unstructured_mesh"
        return mesh

    def generate_flat_tet_mesh(self, config: ExampleMeshConfig) -> Mesh:
        """The flat mesh with each hexahedron split into five tetrahedra."""
        hex_mesh = self.generate_flat_mesh(config)
        mesh = Mesh()
        mesh.name = "flat_tet_mesh"
        for node_id in sorted(hex_mesh.nodes):
            mesh.add_node(hex_mesh.nodes[node_id])

        tet_id = config.start_element_id
        for hex_id in sorted(hex_mesh.elements):
            n = hex_mesh.elements[hex_id].node_ids
            tets = (
                (n[0], n[1], n[3], n[4]),
                (n[1], n[2], n[3], n[6]),
                (n[1], n[4], n[5], n[6]),
                (n[3], n[4], n[6], n[7]),
                (n[1], n[3], n[4], n[6]),
            )
            for corners in tets:
                mesh.add_element(
                    Element(tet_id, config.part_id, [*corners, 0, 0, 0, 0], type=ElementType.TET4)
                )
                tet_id += 1
        mesh.add_part(Part(config.part_id, "tet_part"))
        return mesh

    # ------------------------------------------------------------------
    # Geometry

    def bent_position(self, i: int, j: int, k: int, config: ExampleMeshConfig) -> Vector3D:
        """Position of grid node (i, j, k) in the bent mesh."""
        t = i / config.dim_i
        local_j = j / config.dim_j - 0.5
        local_k = k / config.dim_k - 0.5
        center = self.centerline_point(t, config)
        scale_j, scale_k = self.cross_section_scale(t, config)

        if config.bent_type is BentMeshType.WATERDROP:
            tangent = self.tangent(t, config)
            width_dir = Vector3D(0, 1, 0)
            thickness_dir = tangent.cross(width_dir)
            thickness_dir = (
                thickness_dir.normalized() if thickness_dir.magnitude() > EPSILON else Vector3D(0, 0, 1)
            )
            return _combine(
                center,
                (width_dir, local_j * config.length_j * scale_j),
                (thickness_dir, local_k * config.length_k * scale_k),
            )

        if config.bent_type in _PLANAR_BENDS:
            tangent = self.tangent(t, config)
            width_dir = Vector3D(0, 0, 1)
            thickness_dir = tangent.cross(width_dir)
            thickness_dir = (
                thickness_dir.normalized() if thickness_dir.magnitude() > EPSILON else Vector3D(0, 1, 0)
            )
            local_j, local_k = _twisted(local_j, local_k, self._twist_angle(t, config))
            return _combine(
                center,
                (width_dir, local_j * config.length_j * scale_j),
                (thickness_dir, local_k * config.length_k * scale_k),
            )

        _, normal, binormal = self.frenet_frame(t, config)
        local_j, local_k = _twisted(local_j, local_k, self._twist_angle(t, config))
        return _combine(
            center,
            (binormal, local_j * config.length_j * scale_j),
            (normal, local_k * config.length_k * scale_k),
        )

    def centerline_point(self, t: float, config: ExampleMeshConfig) -> Vector3D:
        """Point on the bent centerline at parameter t in [0, 1]."""
        kind = config.bent_type
        if kind is BentMeshType.TEARDROP:
            x = t * config.teardrop_length
            bulge = 0.0
            if 0.0 < t < 1.0:
                peak = 0.35
                if t < peak:
                    bulge = math.sin(t / peak * math.pi / 2)
                else:
                    bulge = math.cos((t - peak) / (1.0 - peak) * math.pi / 2)
                bulge *= config.teardrop_radius * 0.3
            return Vector3D(x, bulge, 0)
        if kind in (BentMeshType.ARC, BentMeshType.BEND_TWIST):
            theta = t * config.arc_angle * DEG_TO_RAD
            r = config.arc_radius
            return Vector3D(r * math.sin(theta), r * (1.0 - math.cos(theta)), 0)
        if kind is BentMeshType.TORUS:
            theta = t * config.torus_angle * DEG_TO_RAD
            r = config.torus_radius
            return Vector3D(r * math.sin(theta), r * (1.0 - math.cos(theta)), 0)
        if kind is BentMeshType.S_CURVE:
            y = config.s_curve_amplitude * math.sin(t * 2 * math.pi * config.s_curve_frequency)
            return Vector3D(t * config.length_i, y, 0)
        if kind is BentMeshType.HELIX:
            angle = t * 2 * math.pi * (config.length_i / config.helix_pitch)
            r = config.helix_radius
            return Vector3D(t * config.length_i, r * math.cos(angle), r * math.sin(angle))
        if kind is BentMeshType.WAVE:
            phase = t * 2 * math.pi * config.wave_frequency
            a = config.wave_amplitude
            return Vector3D(t * config.length_i, a * math.sin(phase), a * math.sin(phase + math.pi / 2))
        if kind is BentMeshType.WATERDROP:
            return self._waterdrop_centerline(t, config)
        if kind is BentMeshType.CUSTOM and self.custom_centerline is not None:
            return self.custom_centerline(t)
        return Vector3D(t * config.length_i, 0, 0)

    @staticmethod
    def _waterdrop_centerline(t: float, config: ExampleMeshConfig) -> Vector3D:
        s, flat_length, arc_length = _waterdrop_arc_position(t, config)
        radius = config.waterdrop_fold_radius
        if s <= flat_length:
            return Vector3D(s, 0, 0.0)
        if s >= flat_length + arc_length:
            return Vector3D(flat_length - (s - flat_length - arc_length), 0, 2.0 * radius)
        theta = (s - flat_length) / radius
        return Vector3D(flat_length + radius * math.sin(theta), 0, radius - radius * math.cos(theta))

    def cross_section_scale(self, t: float, config: ExampleMeshConfig) -> "tuple[float, float]":
        """Scale factors of the width and thickness at parameter t."""
        kind = config.bent_type
        if kind is BentMeshType.TEARDROP:
            max_scale = 1.0 + config.teardrop_radius / config.length_j
            if t <= 0.1:
                scale = 1.0
            elif t <= 0.4:
                scale = 1.0 + (max_scale - 1.0) * math.sin((t - 0.1) / 0.3 * math.pi / 2)
            elif t <= 0.7:
                scale = max_scale * (1.0 - 0.2 * ((t - 0.4) / 0.3))
            else:
                scale = max(0.1, max_scale * 0.8 * (1.0 - (t - 0.7) / 0.3 * 0.9))
            return scale, scale
        if kind is BentMeshType.BULGE:
            dist = abs(t - config.bulge_position)
            half = config.bulge_width / 2.0
            scale = 1.0
            if dist < half:
                scale = 1.0 + (config.bulge_factor - 1.0) * (1.0 + math.cos(dist / half * math.pi)) / 2.0
            return scale, scale
        if kind is BentMeshType.TAPER:
            scale = 1.0 + (config.taper_ratio - 1.0) * t
            return scale, scale
        if kind is BentMeshType.CUSTOM and self.custom_cross_section is not None:
            return self.custom_cross_section(t)
        return 1.0, 1.0

    @staticmethod
    def _twist_angle(t: float, config: ExampleMeshConfig) -> float:
        if config.bent_type in (BentMeshType.TWIST, BentMeshType.BEND_TWIST):
            return t * config.twist_angle * DEG_TO_RAD
        return 0.0

    def tangent(self, t: float, config: ExampleMeshConfig) -> Vector3D:
        """Unit tangent of the centerline by central difference."""
        p1 = self.centerline_point(max(0.0, t - _STEP), config)
        p2 = self.centerline_point(min(1.0, t + _STEP), config)
        direction = p2 - p1
        return direction.normalized() if direction.magnitude() > EPSILON else Vector3D(1, 0, 0)

    def frenet_frame(self, t: float, config: ExampleMeshConfig) -> "tuple[Vector3D, Vector3D, Vector3D]":
        """(tangent, normal, binormal) of the centerline at parameter t."""
        tangent = self.tangent(t, config)
        tan1 = self.tangent(max(0.0, t - _STEP), config)
        tan2 = self.tangent(min(1.0, t + _STEP), config)
        curvature = tan2 - tan1

        if curvature.magnitude() > EPSILON:
            normal = curvature.normalized()
            normal = _combine(normal, (tangent, -normal.dot(tangent)))
            normal = normal.normalized() if normal.magnitude() > EPSILON else _perpendicular_to(tangent)
        else:
            normal = _perpendicular_to(tangent)

        binormal = tangent.cross(normal)
        if binormal.magnitude() > EPSILON:
            binormal = binormal.normalized()
            if config.bent_type in _PLANAR_BENDS and binormal.z < 0:
                binormal = _combine(Vector3D(0, 0, 0), (binormal, -1.0))
                normal = _combine(Vector3D(0, 0, 0), (normal, -1.0))
        return tangent, normal, binormal