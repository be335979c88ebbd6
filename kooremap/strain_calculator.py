"""Element strains from nodal displacements between two matching HEX8 meshes."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, field
from typing import Iterator, Optional

from kooremap.deformation import shape_function_derivatives_hex8
from kooremap.geometry import Matrix3x3, Vector3D
from kooremap.mesh import Element, Mesh
from kooremap.tensors import StrainType

_FLOAT_MAX = sys.float_info.max
_GAUSS = 1.0 / math.sqrt(3.0)
_CORNERS = (
    (-1, -1, -1), (1, -1, -1), (1, 1, -1), (-1, 1, -1),
    (-1, -1, 1), (1, -1, 1), (1, 1, 1), (-1, 1, 1),
)
CSV_HEADER = "ElementID,exx,eyy,ezz,exy,eyz,exz,VonMises,Volumetric,MaxShear,Jacobian"


class StrainCalculationError(RuntimeError):
    """The meshes cannot be compared for strain."""


def _cbrt(value: float) -> float:
    return math.copysign(abs(value) ** (1.0 / 3.0), value)


@dataclass(frozen=True)
class StrainData:
    """Strain components; the shear terms are tensor shear strains."""

    exx: float = 0.0
    eyy: float = 0.0
    ezz: float = 0.0
    exy: float = 0.0
    eyz: float = 0.0
    exz: float = 0.0

    def __iter__(self) -> Iterator[float]:
        return iter((self.exx, self.eyy, self.ezz, self.exy, self.eyz, self.exz))

    def principal(self) -> tuple[float, float, float]:
        """Principal strains from Cardano's formula, largest first."""
        exx, eyy, ezz = self.exx, self.eyy, self.ezz
        exy, eyz, exz = self.exy, self.eyz, self.exz
        i1 = exx + eyy + ezz
        i2 = exx * eyy + eyy * ezz + ezz * exx - exy * exy - eyz * eyz - exz * exz
        i3 = (
            exx * eyy * ezz + 2.0 * exy * eyz * exz
            - exx * eyz * eyz - eyy * exz * exz - ezz * exy * exy
        )
        p = i2 - i1 * i1 / 3.0
        q = 2.0 * i1 ** 3 / 27.0 - i1 * i2 / 3.0 + i3
        discriminant = q * q / 4.0 + p ** 3 / 27.0
        shift = i1 / 3.0
        if discriminant < 0:
            m = 2.0 * math.sqrt(-p / 3.0)
            arg = max(-1.0, min(1.0, 3.0 * q / (p * m)))
            theta = math.acos(arg) / 3.0
            values = [
                m * math.cos(theta) + shift,
                m * math.cos(theta - 2.0 * math.pi / 3.0) + shift,
                m * math.cos(theta - 4.0 * math.pi / 3.0) + shift,
            ]
        else:
            sqrt_d = math.sqrt(max(0.0, discriminant))
            root = _cbrt(-q / 2.0 + sqrt_d) + _cbrt(-q / 2.0 - sqrt_d) + shift
            values = [root, root, root]
        values.sort(reverse=True)
        return (values[0], values[1], values[2])

    def volumetric(self) -> float:
        return self.exx + self.eyy + self.ezz

    def von_mises(self) -> float:
        """Equivalent strain sqrt(2/3 e':e') of the deviatoric part."""
        hydro = self.volumetric() / 3.0
        dxx, dyy, dzz = self.exx - hydro, self.eyy - hydro, self.ezz - hydro
        total = dxx * dxx + dyy * dyy + dzz * dzz
        total += 2.0 * (self.exy ** 2 + self.eyz ** 2 + self.exz ** 2)
        return math.sqrt(2.0 / 3.0 * total)

    def max_shear(self) -> float:
        principal = self.principal()
        return (principal[0] - principal[2]) / 2.0


@dataclass
class ElementStrainData:
    """Averaged element strain, corner strains and the centre Jacobian."""

    element_id: int = 0
    strain: StrainData = field(default_factory=StrainData)
    jacobian: float = 0.0
    node_strains: list[StrainData] = field(default_factory=lambda: [StrainData()] * 8)


@dataclass
class StrainStats:
    """Extremes and averages over all computed element strains."""

    min_von_mises: float = 0.0
    max_von_mises: float = 0.0
    avg_von_mises: float = 0.0
    min_volumetric: float = 0.0
    max_volumetric: float = 0.0
    avg_volumetric: float = 0.0
    min_max_shear: float = 0.0
    max_max_shear: float = 0.0
    avg_max_shear: float = 0.0
    min_principal: float = 0.0
    max_principal: float = 0.0
    elements_processed: int = 0


def _green_lagrange(F: Matrix3x3) -> StrainData:
    C = F.transpose() @ F
    return StrainData(
        0.5 * (C[0, 0] - 1.0),
        0.5 * (C[1, 1] - 1.0),
        0.5 * (C[2, 2] - 1.0),
        0.5 * C[0, 1],
        0.5 * C[1, 2],
        0.5 * C[0, 2],
    )


def _strain_from_gradient(F: Matrix3x3, strain_type: StrainType) -> StrainData:
    if strain_type is StrainType.ENGINEERING:
        return StrainData(
            F[0, 0] - 1.0,
            F[1, 1] - 1.0,
            F[2, 2] - 1.0,
            0.5 * (F[0, 1] + F[1, 0]),
            0.5 * (F[1, 2] + F[2, 1]),
            0.5 * (F[0, 2] + F[2, 0]),
        )
    if strain_type is StrainType.GREEN_LAGRANGE:
        return _green_lagrange(F)
    C = F.transpose() @ F
    return StrainData(
        0.5 * math.log(max(1e-10, C[0, 0])),
        0.5 * math.log(max(1e-10, C[1, 1])),
        0.5 * math.log(max(1e-10, C[2, 2])),
        0.5 * C[0, 1] / math.sqrt(C[0, 0] * C[1, 1]),
        0.5 * C[1, 2] / math.sqrt(C[1, 1] * C[2, 2]),
        0.5 * C[0, 2] / math.sqrt(C[0, 0] * C[2, 2]),
    )


class StrainCalculator:
    """Computes HEX8 element strains from a reference and a deformed mesh."""

    def __init__(
        self,
        ref_mesh: Optional[Mesh] = None,
        def_mesh: Optional[Mesh] = None,
        strain_type: StrainType = StrainType.ENGINEERING,
    ) -> None:
        self.ref_mesh = ref_mesh
        self.def_mesh = def_mesh
        self.strain_type = strain_type
        self.element_strains: dict[int, ElementStrainData] = {}
        self.displacements: dict[int, Vector3D] = {}
        self.stats = StrainStats()

    def calculate(self) -> None:
        """Compute displacements, element strains and statistics."""
        if self.ref_mesh is None or self.def_mesh is None:
            raise StrainCalculationError("Reference or deformed mesh not set")
        if self.ref_mesh.node_count != self.def_mesh.node_count:
            raise StrainCalculationError("Mesh node counts do not match")
        self._calculate_displacements()
        self.element_strains = {
            elem_id: self._element_strain(element)
            for elem_id, element in sorted(self.ref_mesh.elements.items())
        }
        self._update_stats()

    def _calculate_displacements(self) -> None:
        self.displacements = {}
        for node_id, ref_node in sorted(self.ref_mesh.nodes.items()):
            def_node = self.def_mesh.get_node(node_id)
            if def_node is None:
                raise StrainCalculationError(f"Node {node_id} not found in deformed mesh")
            self.displacements[node_id] = def_node.position - ref_node.position

    def _element_strain(self, element: Element) -> ElementStrainData:
        coords = (-_GAUSS, _GAUSS)
        samples = [
            _strain_from_gradient(self._deformation_gradient(element, xi, eta, zeta), self.strain_type)
            for xi in coords
            for eta in coords
            for zeta in coords
        ]
        average = StrainData(*(sum(c) / len(samples) for c in zip(*samples)))
        node_strains = [
            _green_lagrange(self._deformation_gradient(element, *corner))
            for corner in _CORNERS
        ]
        return ElementStrainData(
            element_id=element.id,
            strain=average,
            jacobian=self._jacobian(element, 0.0, 0.0, 0.0).determinant(),
            node_strains=node_strains,
        )

    def _jacobian(self, element: Element, xi: float, eta: float, zeta: float) -> Matrix3x3:
        dN = shape_function_derivatives_hex8(xi, eta, zeta)
        J = [[0.0] * 3 for _ in range(3)]
        for node_id, d in zip(element.node_ids[:8], dN):
            node = self.ref_mesh.get_node(node_id)
            if node is None:
                continue
            for i, coord in enumerate(node.position):
                for j, dj in enumerate(d):
                    J[i][j] += coord * dj
        return Matrix3x3(*(v for row in J for v in row))

    def _deformation_gradient(
        self, element: Element, xi: float, eta: float, zeta: float
    ) -> Matrix3x3:
        dN = shape_function_derivatives_hex8(xi, eta, zeta)
        try:
            j_inv = self._jacobian(element, xi, eta, zeta).inverse()
        except ValueError:
            return Matrix3x3.identity()
        F = [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]]
        for node_id, d in zip(element.node_ids[:8], dN):
            u = self.displacements.get(node_id)
            if u is None:
                continue
            d_phys = j_inv * d
            for i, ui in enumerate(u):
                for j, dj in enumerate(d_phys):
                    F[i][j] += ui * dj
        return Matrix3x3(*(v for row in F for v in row))

    def _update_stats(self) -> None:
        stats = StrainStats()
        self.stats = stats
        if not self.element_strains:
            return
        stats.min_von_mises = stats.min_volumetric = stats.min_max_shear = _FLOAT_MAX
        stats.min_principal = _FLOAT_MAX
        stats.max_von_mises = stats.max_volumetric = stats.max_max_shear = -_FLOAT_MAX
        stats.max_principal = -_FLOAT_MAX
        sum_vm = sum_vol = sum_shear = 0.0
        for data in self.element_strains.values():
            vm = data.strain.von_mises()
            vol = data.strain.volumetric()
            shear = data.strain.max_shear()
            principal = data.strain.principal()
            stats.min_von_mises = min(stats.min_von_mises, vm)
            stats.max_von_mises = max(stats.max_von_mises, vm)
            stats.min_volumetric = min(stats.min_volumetric, vol)
            stats.max_volumetric = max(stats.max_volumetric, vol)
            stats.min_max_shear = min(stats.min_max_shear, shear)
            stats.max_max_shear = max(stats.max_max_shear, shear)
            stats.min_principal = min(stats.min_principal, principal[2])
            stats.max_principal = max(stats.max_principal, principal[0])
            sum_vm += vm
            sum_vol += vol
            sum_shear += shear
            stats.elements_processed += 1
        count = stats.elements_processed
        stats.avg_von_mises = sum_vm / count
        stats.avg_volumetric = sum_vol / count
        stats.avg_max_shear = sum_shear / count

    def element_strain(self, element_id: int) -> Optional[ElementStrainData]:
        return self.element_strains.get(element_id)

    def node_displacement(self, node_id: int) -> Vector3D:
        """The node's displacement, or a zero vector if unknown."""
        return self.displacements.get(node_id, Vector3D())

    def export_csv(self, filename: str) -> None:
        """Write one line per element; raises OSError if the file cannot be written."""
        with open(filename, "w", encoding="utf-8", newline="") as out:
            out.write(CSV_HEADER + "\n")
            for elem_id, data in self.element_strains.items():
                s = data.strain
                values = (
                    *s, s.von_mises(), s.volumetric(), s.max_shear(), data.jacobian,
                )
                out.write(f"{elem_id}," + ",".join(f"{v:g}" for v in values) + "\n")