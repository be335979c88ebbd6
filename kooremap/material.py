"""Linear-elastic material model: stress from strain and the 6x6 matrices."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from kooremap.tensors import StrainTensor, StressTensor

Matrix6 = tuple[tuple[float, ...], ...]


class MaterialType(Enum):
    """Constitutive law of a material."""

    LINEAR_ELASTIC = "linear_elastic"


def _zero6() -> list[list[float]]:
    return [[0.0] * 6 for _ in range(6)]


def _freeze(rows: list[list[float]]) -> Matrix6:
    return tuple(tuple(row) for row in rows)


@dataclass(frozen=True)
class MaterialModel:
    """An isotropic material with Young's modulus, Poisson ratio and density."""

    type: MaterialType = MaterialType.LINEAR_ELASTIC
    E: float = 0.0
    nu: float = 0.0
    rho: float = 0.0

    @staticmethod
    def isotropic_elastic(E: float, nu: float) -> MaterialModel:
        return MaterialModel(MaterialType.LINEAR_ELASTIC, E, nu, 0.0)

    @staticmethod
    def from_lsdyna_mat_elastic(rho: float, E: float, nu: float) -> MaterialModel:
        """Build from the field order of an elastic material keyword."""
        return MaterialModel(MaterialType.LINEAR_ELASTIC, E, nu, rho)

    def shear_modulus(self) -> float:
        return self.E / (2.0 * (1.0 + self.nu))

    def lame_lambda(self) -> float:
        return self.E * self.nu / ((1.0 + self.nu) * (1.0 - 2.0 * self.nu))

    def compute_stress(self, strain: StrainTensor) -> StressTensor:
        """Stress for the given strain; zero for unsupported material types."""
        if self.type is MaterialType.LINEAR_ELASTIC:
            return StressTensor.from_strain(strain, self.E, self.nu)
        return StressTensor()

    def stiffness_matrix(self) -> Matrix6:
        """Voigt stiffness matrix C with engineering shear strains."""
        C = _zero6()
        if self.type is MaterialType.LINEAR_ELASTIC:
            lam = self.lame_lambda()
            mu = self.shear_modulus()
            c11 = lam + 2.0 * mu
            for i in range(3):
                for j in range(3):
                    C[i][j] = c11 if i == j else lam
            for i in range(3, 6):
                C[i][i] = mu
        return _freeze(C)

    def compliance_matrix(self) -> Matrix6:
        """Voigt compliance matrix S; all zero unless E is positive."""
        S = _zero6()
        if self.type is MaterialType.LINEAR_ELASTIC and self.E > 0:
            E, nu = self.E, self.nu
            G = self.shear_modulus()
            for i in range(3):
                for j in range(3):
                    S[i][j] = 1.0 / E if i == j else -nu / E
            for i in range(3, 6):
                S[i][i] = 1.0 / G
        return _freeze(S)

    def __str__(self) -> str:
        if self.type is not MaterialType.LINEAR_ELASTIC:
            return ""
        text = f"Linear Elastic: E={self.E:.3e}, nu={self.nu:.2f}"
        if self.rho > 0:
            text += f", rho={self.rho:.2e}"
        return text