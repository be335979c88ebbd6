"""Nodes, elements, parts, materials and the mesh container."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from kooremap.geometry import Vector3D


class ElementType(Enum):
    """Supported solid element shapes."""

    HEX8 = "hex8"
    TET4 = "tet4"


@dataclass
class Node:
    """A mesh node with an optional displacement."""

    id: int
    position: Vector3D = field(default_factory=Vector3D)
    displacement: Optional[Vector3D] = None

    def effective_position(self) -> Vector3D:
        """Position including the displacement, if one is set."""
        if self.displacement is None:
            return self.position
        return self.position + self.displacement


@dataclass
class Element:
    """A solid element; TET4 elements use the first four node ids."""

    id: int = 0
    part_id: int = 0
    node_ids: list[int] = field(default_factory=lambda: [0] * 8)
    type: ElementType = ElementType.HEX8
    i: int = -1
    j: int = -1
    k: int = -1
    index_assigned: bool = False

    def __post_init__(self) -> None:
        self.node_ids = list(self.node_ids)


@dataclass
class Part:
    """A group of elements sharing a material."""

    id: int = 0
    name: str = ""
    material_id: int = 0


@dataclass
class MaterialData:
    """Elastic material constants as read from a keyword file."""

    id: int = 0
    name: str = ""
    E: float = 0.0
    nu: float = 0.0
    rho: float = 0.0

    def is_valid(self) -> bool:
        """True when the elastic constants are physically meaningful."""
        return self.E > 0.0 and -1.0 < self.nu < 0.5


@dataclass
class Mesh:
    """A collection of nodes, elements, parts and materials keyed by id."""

    name: str = ""
    nodes: dict[int, Node] = field(default_factory=dict)
    elements: dict[int, Element] = field(default_factory=dict)
    parts: dict[int, Part] = field(default_factory=dict)
    materials: dict[int, MaterialData] = field(default_factory=dict)
    grid_dimensions: Optional[tuple[int, int, int]] = None

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def element_count(self) -> int:
        return len(self.elements)

    @property
    def material_count(self) -> int:
        return len(self.materials)

    def add_node(self, node: Node) -> None:
        self.nodes[node.id] = node

    def add_element(self, element: Element) -> None:
        self.elements[element.id] = element

    def add_part(self, part: Part) -> None:
        self.parts[part.id] = part

    def add_material(self, material_id: int, material: MaterialData) -> None:
        self.materials[material_id] = material

    def get_node(self, node_id: int) -> Optional[Node]:
        return self.nodes.get(node_id)

    def element_material(self, element: Element) -> Optional[MaterialData]:
        """The material assigned to the element's part, if any."""
        part = self.parts.get(element.part_id)
        if part is None:
            return None
        return self.materials.get(part.material_id)

    def set_grid_dimensions(self, dim_i: int, dim_j: int, dim_k: int) -> None:
        self.grid_dimensions = (dim_i, dim_j, dim_k)