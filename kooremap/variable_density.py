"""Box-shaped HEX8 mesh with five zones of varying element size along I."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Sequence

from kooremap.mesh import Element, Mesh, Node
from kooremap.geometry import Vector3D

ProgressCallback = Callable[[int], None]


class GrowthType(Enum):
    """How element sizes change across a transition zone."""

    LINEAR = "linear"
    GEOMETRIC = "geometric"
    EXPONENTIAL = "exponential"


@dataclass
class ZoneConfig:
    """One zone along I: a length weight and an element count."""

    length: float = 0.0
    num_elements: int = 0
    growth_type: GrowthType = GrowthType.LINEAR


@dataclass
class ReferenceConfig:
    """Reference flat mesh file and its overall dimensions."""

    flat_mesh_file: str = ""
    length_i: float = 0.0
    length_j: float = 0.0
    length_k: float = 0.0


@dataclass
class VariableDensityConfig:
    """Zones along I plus uniform element counts along J and K."""

    reference: ReferenceConfig = field(default_factory=ReferenceConfig)
    elements_j: int = 10
    elements_k: int = 5
    zone1_dense_start: ZoneConfig = field(default_factory=ZoneConfig)
    zone2_increasing: ZoneConfig = field(default_factory=ZoneConfig)
    zone3_sparse: ZoneConfig = field(default_factory=ZoneConfig)
    zone4_decreasing: ZoneConfig = field(default_factory=ZoneConfig)
    zone5_dense_end: ZoneConfig = field(default_factory=ZoneConfig)
    center_at_origin: bool = False

    @property
    def zones(self) -> tuple[ZoneConfig, ...]:
        return (
            self.zone1_dense_start,
            self.zone2_increasing,
            self.zone3_sparse,
            self.zone4_decreasing,
            self.zone5_dense_end,
        )

    def validate(self) -> None:
        """Raise ValueError when the configuration cannot produce a mesh."""
        for number, zone in enumerate(self.zones, start=1):
            if zone.num_elements < 0:
                raise ValueError(f"Zone {number} has a negative element count")
            if zone.length < 0:
                raise ValueError(f"Zone {number} has a negative length")
        if self.total_elements_i() <= 0:
            raise ValueError("At least one element is required along I")
        if self.elements_j <= 0:
            raise ValueError("elements_j must be positive")
        if self.elements_k <= 0:
            raise ValueError("elements_k must be positive")
        uniform = (
            self.zone1_dense_start.length
            + self.zone3_sparse.length
            + self.zone5_dense_end.length
        )
        if uniform <= 0:
            raise ValueError("Dense and sparse zones must have a positive total length")

    def total_length(self) -> float:
        return sum(zone.length for zone in self.zones)

    def total_elements_i(self) -> int:
        return sum(zone.num_elements for zone in self.zones)

    def total_elements(self) -> int:
        return self.total_elements_i() * self.elements_j * self.elements_k


@dataclass
class VariableDensityStats:
    """Zone lengths and element sizes of the last generated mesh."""

    zone1_length: float = 0.0
    zone2_length: float = 0.0
    zone3_length: float = 0.0
    zone4_length: float = 0.0
    zone5_length: float = 0.0
    total_length_i: float = 0.0
    total_length_j: float = 0.0
    total_length_k: float = 0.0
    dense_element_size: float = 0.0
    sparse_element_size: float = 0.0
    size_ratio: float = 0.0
    scale_factor: float = 1.0
    total_elements_i: int = 0
    total_elements_j: int = 0
    total_elements_k: int = 0
    total_elements: int = 0
    total_nodes: int = 0


def compute_uniform_spacing(length: float, num_elements: int) -> list[float]:
    """Equal element sizes filling the given length."""
    dx = length / num_elements
    return [dx] * num_elements


def compute_transition_spacing(
    start_size: float,
    end_size: float,
    num_elements: int,
    growth_type: GrowthType = GrowthType.LINEAR,
) -> list[float]:
    """Element sizes going from start_size to end_size."""
    if num_elements <= 0:
        return []

    def fraction(i: int) -> float:
        return 0.5 if num_elements == 1 else i / (num_elements - 1)

    if growth_type is not GrowthType.LINEAR and (start_size <= 0 or end_size <= 0):
        growth_type = GrowthType.LINEAR

    if growth_type is GrowthType.LINEAR:
        return [start_size + (end_size - start_size) * fraction(i) for i in range(num_elements)]
    if growth_type is GrowthType.GEOMETRIC:
        ratio = 1.0 if num_elements == 1 else (end_size / start_size) ** (1.0 / (num_elements - 1))
        sizes = []
        size = start_size
        for _ in range(num_elements):
            sizes.append(size)
            size *= ratio
        return sizes
    log_ratio = math.log(end_size / start_size)
    return [start_size * math.exp(log_ratio * fraction(i)) for i in range(num_elements)]


def compute_x_coordinates(config: VariableDensityConfig, target_length: float) -> list[float]:
    """Node coordinates along I, scaled so the last one equals target_length."""
    z1, z2, z3, z4, z5 = config.zones
    uniform_sum = z1.length + z3.length + z5.length
    dense = z1.length / z1.num_elements if z1.num_elements > 0 else 0.1
    sparse = z3.length / z3.num_elements if z3.num_elements > 0 else 1.0

    zone2_length = sum(
        compute_transition_spacing(dense, sparse, z2.num_elements, z2.growth_type)
    )
    zone4_length = sum(
        compute_transition_spacing(sparse, dense, z4.num_elements, z4.growth_type)
    )
    scale = target_length / (uniform_sum + zone2_length + zone4_length)

    spacing: list[float] = []
    spacing += [dense * scale] * z1.num_elements
    spacing += compute_transition_spacing(
        dense * scale, sparse * scale, z2.num_elements, z2.growth_type
    )
    spacing += [sparse * scale] * z3.num_elements
    spacing += compute_transition_spacing(
        sparse * scale, dense * scale, z4.num_elements, z4.growth_type
    )
    spacing += [dense * scale] * z5.num_elements

    coords = [0.0]
    for dx in spacing:
        coords.append(coords[-1] + dx)
    return coords


class VariableDensityMeshGenerator:
    """Builds the variable-density mesh and records its statistics."""

    def __init__(self, progress_callback: Optional[ProgressCallback] = None) -> None:
        self.progress_callback = progress_callback
        self.stats = VariableDensityStats()

    def _report(self, percent: int) -> None:
        if self.progress_callback is not None:
            self.progress_callback(percent)

    def generate(
        self,
        config: VariableDensityConfig,
        ref_length_i: Optional[float] = None,
        ref_length_j: Optional[float] = None,
        ref_length_k: Optional[float] = None,
    ) -> Mesh:
        """Generate the mesh; omitted lengths come from the config's reference."""
        ref = config.reference
        if ref_length_i is None:
            ref_length_i = ref.length_i if ref.length_i > 0 else config.total_length()
        if ref_length_j is None:
            ref_length_j = ref.length_j if ref.length_j > 0 else 1.0
        if ref_length_k is None:
            ref_length_k = ref.length_k if ref.length_k > 0 else 1.0

        config.validate()
        self._report(5)

        x_coords = compute_x_coordinates(config, ref_length_i)

        zone_ends = []
        idx = 0
        for zone in config.zones[:4]:
            idx += zone.num_elements
            zone_ends.append(x_coords[idx] if idx < len(x_coords) else 0.0)
        z1_end, z2_end, z3_end, z4_end = zone_ends
        total_length = x_coords[-1]

        stats = VariableDensityStats()
        stats.zone1_length = z1_end
        stats.zone2_length = z2_end - z1_end
        stats.zone3_length = z3_end - z2_end
        stats.zone4_length = z4_end - z3_end
        stats.zone5_length = total_length - z4_end
        stats.total_length_i = total_length
        stats.total_length_j = ref_length_j
        stats.total_length_k = ref_length_k
        if config.zone1_dense_start.num_elements > 0:
            stats.dense_element_size = stats.zone1_length / config.zone1_dense_start.num_elements
        if config.zone3_sparse.num_elements > 0:
            stats.sparse_element_size = stats.zone3_length / config.zone3_sparse.num_elements
        stats.size_ratio = (
            stats.sparse_element_size / stats.dense_element_size
            if stats.dense_element_size > 0
            else 0.0
        )
        uniform_sum = (
            config.zone1_dense_start.length
            + config.zone3_sparse.length
            + config.zone5_dense_end.length
        )
        stats.scale_factor = total_length / uniform_sum if uniform_sum > 0 else 1.0
        stats.total_elements_i = config.total_elements_i()
        stats.total_elements_j = config.elements_j
        stats.total_elements_k = config.elements_k
        stats.total_elements = config.total_elements()
        self.stats = stats
        self._report(20)

        mesh = self._create_mesh(
            x_coords,
            ref_length_j,
            ref_length_k,
            config.elements_j,
            config.elements_k,
            config.center_at_origin,
        )
        stats.total_nodes = mesh.node_count
        self._report(100)
        return mesh

    def _create_mesh(
        self,
        x_coords: Sequence[float],
        length_j: float,
        length_k: float,
        elements_j: int,
        elements_k: int,
        center_at_origin: bool,
    ) -> Mesh:
        mesh = Mesh()
        ni = len(x_coords)
        nj = elements_j + 1
        nk = elements_k + 1

        offset_x = offset_y = offset_z = 0.0
        if center_at_origin:
            offset_x = -x_coords[-1] / 2.0
            offset_y = -length_j / 2.0
            offset_z = -length_k / 2.0

        dy = length_j / elements_j
        dz = length_k / elements_k
        node_id = 1
        for k in range(nk):
            z = k * dz + offset_z
            for j in range(nj):
                y = j * dy + offset_y
                for x in x_coords:
                    mesh.add_node(Node(node_id, Vector3D(x + offset_x, y, z)))
                    node_id += 1
            if self.progress_callback is not None:
                self._report(20 + 60 * (k + 1) // nk)

        dim_i = ni - 1
        elem_id = 1
        for k in range(elements_k):
            for j in range(elements_j):
                for i in range(dim_i):
                    n1 = 1 + i + j * ni + k * ni * nj
                    n2 = n1 + 1
                    n3 = n1 + 1 + ni
                    n4 = n1 + ni
                    layer = ni * nj
                    node_ids = [n1, n2, n3, n4, n1 + layer, n2 + layer, n3 + layer, n4 + layer]
                    mesh.add_element(Element(elem_id, 1, node_ids))
                    elem_id += 1
            if self.progress_callback is not None:
                self._report(80 + 20 * (k + 1) // elements_k)

        mesh.set_grid_dimensions(dim_i, elements_j, elements_k)
        return mesh