"""Symmetric strain and stress tensors with invariants and derived measures."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from kooremap.geometry import Matrix3x3

_HYDROSTATIC_TOLERANCE = 1e-14


class StrainType(Enum):
    """Strain measure derived from a deformation gradient."""

    ENGINEERING = "engineering"
    GREEN_LAGRANGE = "green_lagrange"
    LOGARITHMIC = "logarithmic"


def _cbrt(value: float) -> float:
    return math.copysign(abs(value) ** (1.0 / 3.0), value)


def _clamp_unit(numerator: float, denominator: float) -> float:
    if denominator == 0.0:
        if numerator == 0.0:
            return 1.0
        return math.copysign(1.0, numerator) * math.copysign(1.0, denominator)
    return max(-1.0, min(1.0, numerator / denominator))


@dataclass(frozen=True)
class StrainTensor:
    """Strain in Voigt form; the shear terms are engineering shear strains."""

    xx: float = 0.0
    yy: float = 0.0
    zz: float = 0.0
    xy: float = 0.0
    yz: float = 0.0
    xz: float = 0.0

    @staticmethod
    def from_deformation_gradient(
        F: Matrix3x3, strain_type: StrainType = StrainType.ENGINEERING
    ) -> StrainTensor:
        """Small strain for ENGINEERING, Green-Lagrange strain otherwise."""
        identity = Matrix3x3.identity()
        if strain_type is StrainType.ENGINEERING:
            E = F.symmetric() - identity
        else:
            E = (F.transpose() @ F - identity) * 0.5
        return StrainTensor.from_matrix(E)

    @staticmethod
    def from_matrix(E: Matrix3x3) -> StrainTensor:
        return StrainTensor(
            E[0, 0], E[1, 1], E[2, 2],
            E[0, 1] + E[1, 0],
            E[1, 2] + E[2, 1],
            E[0, 2] + E[2, 0],
        )

    @staticmethod
    def from_voigt(v: Sequence[float]) -> StrainTensor:
        return StrainTensor(*v[:6])

    def to_matrix(self) -> Matrix3x3:
        """Tensor form, with shear halved."""
        return Matrix3x3(
            self.xx, self.xy * 0.5, self.xz * 0.5,
            self.xy * 0.5, self.yy, self.yz * 0.5,
            self.xz * 0.5, self.yz * 0.5, self.zz,
        )

    def to_voigt(self) -> tuple[float, ...]:
        return (self.xx, self.yy, self.zz, self.xy, self.yz, self.xz)

    def volumetric_strain(self) -> float:
        return self.xx + self.yy + self.zz

    def i1(self) -> float:
        return self.xx + self.yy + self.zz

    def i2(self) -> float:
        exy, eyz, exz = self.xy * 0.5, self.yz * 0.5, self.xz * 0.5
        return (
            self.xx * self.yy + self.yy * self.zz + self.zz * self.xx
            - exy * exy - eyz * eyz - exz * exz
        )

    def i3(self) -> float:
        return self.to_matrix().determinant()

    def principal_strains(self) -> tuple[float, float, float]:
        """Eigenvalues of the strain tensor, largest first."""
        i1, i2, i3 = self.i1(), self.i2(), self.i3()
        p = i1 / 3.0
        q = (2.0 * i1 ** 3 - 9.0 * i1 * i2 + 27.0 * i3) / 27.0
        r = (i1 * i1 - 3.0 * i2) / 9.0
        if abs(r) < _HYDROSTATIC_TOLERANCE:
            values = [p, p, p]
        else:
            r_sqrt = math.sqrt(max(0.0, r))
            theta = math.acos(_clamp_unit(q, 2.0 * r * r_sqrt))
            coeff = 2.0 * r_sqrt
            values = [
                p + coeff * math.cos(theta / 3.0),
                p + coeff * math.cos((theta + 2.0 * math.pi) / 3.0),
                p + coeff * math.cos((theta + 4.0 * math.pi) / 3.0),
            ]
        values.sort(reverse=True)
        return (values[0], values[1], values[2])

    def deviatoric(self) -> StrainTensor:
        hydro = self.volumetric_strain() / 3.0
        return StrainTensor(
            self.xx - hydro, self.yy - hydro, self.zz - hydro,
            self.xy, self.yz, self.xz,
        )

    def von_mises_strain(self) -> float:
        """Equivalent strain sqrt(2/3 e':e')."""
        dev = self.deviatoric()
        total = dev.xx ** 2 + dev.yy ** 2 + dev.zz ** 2
        total += 0.5 * (dev.xy ** 2 + dev.yz ** 2 + dev.xz ** 2)
        return math.sqrt(2.0 / 3.0 * total)

    def max_shear_strain(self) -> float:
        principal = self.principal_strains()
        return (principal[0] - principal[2]) / 2.0

    def double_contraction(self, other: StrainTensor) -> float:
        return (
            self.xx * other.xx + self.yy * other.yy + self.zz * other.zz
            + 0.5 * (self.xy * other.xy + self.yz * other.yz + self.xz * other.xz)
        )

    def magnitude(self) -> float:
        return math.sqrt(self.double_contraction(self))

    def __add__(self, other: StrainTensor) -> StrainTensor:
        return StrainTensor(*(a + b for a, b in zip(self.to_voigt(), other.to_voigt())))

    def __sub__(self, other: StrainTensor) -> StrainTensor:
        return StrainTensor(*(a - b for a, b in zip(self.to_voigt(), other.to_voigt())))

    def __mul__(self, scalar: float) -> StrainTensor:
        return StrainTensor(*(a * scalar for a in self.to_voigt()))

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> StrainTensor:
        return StrainTensor(*(a / scalar for a in self.to_voigt()))


@dataclass(frozen=True)
class StressTensor:
    """Stress in Voigt form; shear terms are tensor shear stresses."""

    xx: float = 0.0
    yy: float = 0.0
    zz: float = 0.0
    xy: float = 0.0
    yz: float = 0.0
    xz: float = 0.0

    @staticmethod
    def from_strain(strain: StrainTensor, E: float, nu: float) -> StressTensor:
        """Isotropic linear-elastic stress for the given strain."""
        lam = E * nu / ((1.0 + nu) * (1.0 - 2.0 * nu))
        mu = E / (2.0 * (1.0 + nu))
        trace = strain.volumetric_strain()
        return StressTensor(
            lam * trace + 2.0 * mu * strain.xx,
            lam * trace + 2.0 * mu * strain.yy,
            lam * trace + 2.0 * mu * strain.zz,
            mu * strain.xy,
            mu * strain.yz,
            mu * strain.xz,
        )

    @staticmethod
    def from_matrix(S: Matrix3x3) -> StressTensor:
        return StressTensor(S[0, 0], S[1, 1], S[2, 2], S[0, 1], S[1, 2], S[0, 2])

    @staticmethod
    def from_voigt(v: Sequence[float]) -> StressTensor:
        return StressTensor(*v[:6])

    def to_matrix(self) -> Matrix3x3:
        return Matrix3x3(
            self.xx, self.xy, self.xz,
            self.xy, self.yy, self.yz,
            self.xz, self.yz, self.zz,
        )

    def to_voigt(self) -> tuple[float, ...]:
        return (self.xx, self.yy, self.zz, self.xy, self.yz, self.xz)

    def i1(self) -> float:
        return self.xx + self.yy + self.zz

    def i2(self) -> float:
        return (
            self.xx * self.yy + self.yy * self.zz + self.zz * self.xx
            - self.xy ** 2 - self.yz ** 2 - self.xz ** 2
        )

    def i3(self) -> float:
        return self.to_matrix().determinant()

    def hydrostatic_stress(self) -> float:
        return self.i1() / 3.0

    def principal_stresses(self) -> tuple[float, float, float]:
        """Roots of the characteristic cubic, largest first."""
        i1, i2, i3 = self.i1(), self.i2(), self.i3()
        p = i2 - i1 * i1 / 3.0
        q = 2.0 * i1 ** 3 / 27.0 - i1 * i2 / 3.0 + i3
        discriminant = q * q / 4.0 + p ** 3 / 27.0
        s0 = i1 / 3.0
        if abs(p) < _HYDROSTATIC_TOLERANCE:
            values = [s0, s0, s0]
        elif discriminant <= 0.0:
            r = math.sqrt(-p ** 3 / 27.0)
            theta = math.acos(_clamp_unit(-q, 2.0 * r))
            coeff = 2.0 * _cbrt(r)
            values = [
                s0 + coeff * math.cos(theta / 3.0),
                s0 + coeff * math.cos((theta + 2.0 * math.pi) / 3.0),
                s0 + coeff * math.cos((theta + 4.0 * math.pi) / 3.0),
            ]
        else:
            sqrt_d = math.sqrt(discriminant)
            root = s0 + _cbrt(-q / 2.0 + sqrt_d) + _cbrt(-q / 2.0 - sqrt_d)
            values = [root, root, root]
        values.sort(reverse=True)
        return (values[0], values[1], values[2])

    def deviatoric(self) -> StressTensor:
        hydro = self.hydrostatic_stress()
        return StressTensor(
            self.xx - hydro, self.yy - hydro, self.zz - hydro,
            self.xy, self.yz, self.xz,
        )

    def von_mises(self) -> float:
        d1 = self.xx - self.yy
        d2 = self.yy - self.zz
        d3 = self.zz - self.xx
        shear = self.xy ** 2 + self.yz ** 2 + self.xz ** 2
        return math.sqrt(0.5 * (d1 * d1 + d2 * d2 + d3 * d3 + 6.0 * shear))

    def max_shear_stress(self) -> float:
        principal = self.principal_stresses()
        return (principal[0] - principal[2]) / 2.0

    def triaxiality(self) -> float:
        """Hydrostatic over von Mises stress; zero when von Mises vanishes."""
        vm = self.von_mises()
        if abs(vm) < _HYDROSTATIC_TOLERANCE:
            return 0.0
        return self.hydrostatic_stress() / vm

    def double_contraction(self, other: StressTensor) -> float:
        return (
            self.xx * other.xx + self.yy * other.yy + self.zz * other.zz
            + 2.0 * (self.xy * other.xy + self.yz * other.yz + self.xz * other.xz)
        )

    def magnitude(self) -> float:
        return math.sqrt(self.double_contraction(self))

    def __add__(self, other: StressTensor) -> StressTensor:
        return StressTensor(*(a + b for a, b in zip(self.to_voigt(), other.to_voigt())))

    def __sub__(self, other: StressTensor) -> StressTensor:
        return StressTensor(*(a - b for a, b in zip(self.to_voigt(), other.to_voigt())))

    def __mul__(self, scalar: float) -> StressTensor:
        return StressTensor(*(a * scalar for a in self.to_voigt()))

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> StressTensor:
        return StressTensor(*(a / scalar for a in self.to_voigt()))