"""Per-element strain and stress between a reference and a deformed mesh."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from kooremap import deformation
from kooremap.geometry import Vector3D
from kooremap.material import MaterialModel
from kooremap.mesh import Element, ElementType, Mesh
from kooremap.tensors import StrainTensor, StrainType, StressTensor

_FLOAT_MAX = sys.float_info.max


class MeshMismatchError(ValueError):
    """Two meshes do not share nodes, elements or connectivity."""


@dataclass
class ElementResult:
    """Strain and, when a material is known, stress of one element."""

    element_id: int = 0
    is_valid: bool = False
    error_message: str = ""
    center: Vector3D = field(default_factory=Vector3D)
    strain: StrainTensor = field(default_factory=StrainTensor)
    stress: StressTensor = field(default_factory=StressTensor)
    von_mises_strain: float = 0.0
    max_principal_strain: float = 0.0
    min_principal_strain: float = 0.0
    von_mises_stress: float = 0.0
    max_principal_stress: float = 0.0
    min_principal_stress: float = 0.0


@dataclass
class MeshAnalysisResult:
    """All element results with summary statistics over the valid ones."""

    element_results: list[ElementResult] = field(default_factory=list)
    valid_elements: int = 0
    invalid_elements: int = 0
    has_material: bool = False
    min_von_mises_strain: float = 0.0
    max_von_mises_strain: float = 0.0
    avg_von_mises_strain: float = 0.0
    min_von_mises_stress: float = 0.0
    max_von_mises_stress: float = 0.0
    avg_von_mises_stress: float = 0.0


class ElementAnalyzer:
    """Computes element strains and stresses for a pair of matching meshes."""

    def __init__(
        self,
        strain_type: StrainType = StrainType.ENGINEERING,
        num_gauss_points: int = 1,
        use_part_materials: bool = True,
    ) -> None:
        self.strain_type = strain_type
        self.num_gauss_points = num_gauss_points
        self.use_part_materials = use_part_materials
        self.material: Optional[MaterialModel] = None

    def set_material(self, material: MaterialModel) -> None:
        """Default material for elements without a part material."""
        self.material = material

    def clear_material(self) -> None:
        self.material = None

    def _material_for(self, element: Element, ref_mesh: Mesh) -> Optional[MaterialModel]:
        if self.use_part_materials:
            data = ref_mesh.element_material(element)
            if data is not None and data.is_valid():
                return MaterialModel.isotropic_elastic(data.E, data.nu)
        return self.material

    @staticmethod
    def validate_mesh_pair(mesh1: Mesh, mesh2: Mesh) -> None:
        """Raise MeshMismatchError unless the meshes share topology."""
        if mesh1.node_count != mesh2.node_count:
            raise MeshMismatchError(
                f"Node count mismatch: {mesh1.node_count} vs {mesh2.node_count}"
            )
        if mesh1.element_count != mesh2.element_count:
            raise MeshMismatchError(
                f"Element count mismatch: {mesh1.element_count} vs {mesh2.element_count}"
            )
        for elem_id, elem1 in sorted(mesh1.elements.items()):
            elem2 = mesh2.elements.get(elem_id)
            if elem2 is None:
                raise MeshMismatchError(f"Element {elem_id} not found in second mesh")
            if list(elem1.node_ids[:8]) != list(elem2.node_ids[:8]):
                raise MeshMismatchError(f"Element {elem_id} has different connectivity")

    def analyze_element(self, element: Element, ref_mesh: Mesh, def_mesh: Mesh) -> ElementResult:
        """Analyse one element; problems are reported in the result."""
        material = self._material_for(element, ref_mesh)
        if element.type is ElementType.HEX8:
            count = 8
        elif element.type is ElementType.TET4:
            count = 4
        else:
            return ElementResult(element.id, error_message="Unsupported element type")

        ref_nodes: list[Vector3D] = []
        def_nodes: list[Vector3D] = []
        for node_id in element.node_ids[:count]:
            ref_node = ref_mesh.get_node(node_id)
            def_node = def_mesh.get_node(node_id)
            if ref_node is None or def_node is None:
                return ElementResult(element.id, error_message=f"Missing node {node_id}")
            ref_nodes.append(ref_node.effective_position())
            def_nodes.append(def_node.effective_position())

        if count == 8:
            return self._analyze_hex8(element, ref_nodes, def_nodes, material)
        return self._analyze_tet4(element, ref_nodes, def_nodes, material)

    def _hex8_strain(self, ref_nodes: Sequence[Vector3D], def_nodes: Sequence[Vector3D]) -> StrainTensor:
        total = StrainTensor()
        total_weight = 0.0
        for xi, eta, zeta, weight in deformation.gauss_points_hex8(self.num_gauss_points):
            F = deformation.deformation_gradient_hex8(ref_nodes, def_nodes, xi, eta, zeta)
            total = total + StrainTensor.from_deformation_gradient(F, self.strain_type) * weight
            total_weight += weight
        if total_weight > 0:
            total = total * (1.0 / total_weight)
        return total

    def _analyze_hex8(self, element, ref_nodes, def_nodes, material) -> ElementResult:
        return self._finish(
            element,
            def_nodes,
            material,
            lambda: self._hex8_strain(ref_nodes, def_nodes),
        )

    def _analyze_tet4(self, element, ref_nodes, def_nodes, material) -> ElementResult:
        return self._finish(
            element,
            def_nodes,
            material,
            lambda: StrainTensor.from_deformation_gradient(
                deformation.deformation_gradient_tet4(ref_nodes, def_nodes), self.strain_type
            ),
        )

    @staticmethod
    def _finish(
        element: Element,
        def_nodes: Sequence[Vector3D],
        material: Optional[MaterialModel],
        strain_of: Callable[[], StrainTensor],
    ) -> ElementResult:
        center = Vector3D()
        for p in def_nodes:
            center = center + p
        result = ElementResult(element.id, center=center / len(def_nodes))
        try:
            strain = strain_of()
        except (ValueError, ArithmeticError) as exc:
            result.error_message = str(exc)
            return result
        result.strain = strain
        result.von_mises_strain = strain.von_mises_strain()
        principal = strain.principal_strains()
        result.max_principal_strain = principal[0]
        result.min_principal_strain = principal[2]
        if material is not None:
            stress = material.compute_stress(strain)
            result.stress = stress
            result.von_mises_stress = stress.von_mises()
            principal_stress = stress.principal_stresses()
            result.max_principal_stress = principal_stress[0]
            result.min_principal_stress = principal_stress[2]
        result.is_valid = True
        return result

    def analyze_mesh(
        self,
        ref_mesh: Mesh,
        def_mesh: Mesh,
        progress: Optional[Callable[[int], None]] = None,
    ) -> MeshAnalysisResult:
        """Analyse every element of the reference mesh in id order."""
        result = MeshAnalysisResult()
        result.has_material = self.material is not None or (
            self.use_part_materials and ref_mesh.material_count > 0
        )
        elements = sorted(ref_mesh.elements.items())
        total = len(elements)
        for processed, (_, element) in enumerate(elements, start=1):
            elem_result = self.analyze_element(element, ref_mesh, def_mesh)
            result.element_results.append(elem_result)
            if elem_result.is_valid:
                result.valid_elements += 1
            else:
                result.invalid_elements += 1
            if progress is not None and total > 0:
                progress(100 * processed // total)
        self._compute_statistics(result)
        return result

    @staticmethod
    def _compute_statistics(result: MeshAnalysisResult) -> None:
        if not result.element_results:
            return
        result.min_von_mises_strain = _FLOAT_MAX
        result.max_von_mises_strain = -_FLOAT_MAX
        result.min_von_mises_stress = _FLOAT_MAX
        result.max_von_mises_stress = -_FLOAT_MAX
        valid = [r for r in result.element_results if r.is_valid]
        for r in valid:
            result.min_von_mises_strain = min(result.min_von_mises_strain, r.von_mises_strain)
            result.max_von_mises_strain = max(result.max_von_mises_strain, r.von_mises_strain)
            if result.has_material:
                result.min_von_mises_stress = min(result.min_von_mises_stress, r.von_mises_stress)
                result.max_von_mises_stress = max(result.max_von_mises_stress, r.von_mises_stress)
        if valid:
            result.avg_von_mises_strain = sum(r.von_mises_strain for r in valid) / len(valid)
            if result.has_material:
                result.avg_von_mises_stress = sum(r.von_mises_stress for r in valid) / len(valid)