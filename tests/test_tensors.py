import math

import pytest

from kooremap.geometry import Matrix3x3
from kooremap.tensors import StrainTensor, StrainType, StressTensor

GENERAL = StrainTensor(0.02, -0.01, 0.005, 0.004, -0.006, 0.003)


def _rotation_z(angle):
    c, s = math.cos(angle), math.sin(angle)
    return Matrix3x3(c, -s, 0, s, c, 0, 0, 0, 1)


@pytest.mark.parametrize("kind", list(StrainType))
def test_identity_gradient_gives_zero_strain(kind):
    strain = StrainTensor.from_deformation_gradient(Matrix3x3.identity(), kind)
    assert strain.to_voigt() == pytest.approx((0,) * 6, abs=1e-15)


def test_green_lagrange_is_zero_for_rotation():
    strain = StrainTensor.from_deformation_gradient(
        _rotation_z(0.7), StrainType.GREEN_LAGRANGE
    )
    assert strain.to_voigt() == pytest.approx((0,) * 6, abs=1e-12)


def test_engineering_strain_uses_symmetric_part():
    F = Matrix3x3(1, 0.2, 0, 0, 1, 0, 0, 0, 1)
    strain = StrainTensor.from_deformation_gradient(F, StrainType.ENGINEERING)
    assert strain.xy == pytest.approx(0.2)
    assert strain.xx == pytest.approx(0.0)


def test_voigt_roundtrip():
    assert StrainTensor.from_voigt(GENERAL.to_voigt()) == GENERAL
    stress = StressTensor(1, 2, 3, 4, 5, 6)
    assert StressTensor.from_voigt(stress.to_voigt()) == stress


def test_matrix_roundtrip():
    back = StrainTensor.from_matrix(GENERAL.to_matrix())
    assert back.to_voigt() == pytest.approx(GENERAL.to_voigt())
    stress = StressTensor(1, 2, 3, 4, 5, 6)
    assert StressTensor.from_matrix(stress.to_matrix()) == stress


def test_principal_strains_of_diagonal_tensor():
    assert StrainTensor(0.3, 0.1, 0.2).principal_strains() == pytest.approx((0.3, 0.2, 0.1))


def test_principal_strains_reproduce_invariants():
    p = GENERAL.principal_strains()
    assert list(p) == sorted(p, reverse=True)
    assert sum(p) == pytest.approx(GENERAL.i1())
    assert p[0] * p[1] + p[1] * p[2] + p[2] * p[0] == pytest.approx(GENERAL.i2())
    assert p[0] * p[1] * p[2] == pytest.approx(GENERAL.i3(), abs=1e-15)


def test_hydrostatic_strain():
    strain = StrainTensor(0.01, 0.01, 0.01)
    assert strain.principal_strains() == pytest.approx((0.01, 0.01, 0.01))
    assert strain.von_mises_strain() == pytest.approx(0.0, abs=1e-15)
    assert strain.deviatoric().volumetric_strain() == pytest.approx(0.0, abs=1e-15)


def test_max_shear_strain():
    p = GENERAL.principal_strains()
    assert GENERAL.max_shear_strain() == pytest.approx((p[0] - p[2]) / 2.0)


def test_strain_magnitude_and_arithmetic():
    assert GENERAL.magnitude() ** 2 == pytest.approx(GENERAL.double_contraction(GENERAL))
    other = StrainTensor(1, 2, 3, 4, 5, 6)
    result = (GENERAL + other) - other
    assert result.to_voigt() == pytest.approx(GENERAL.to_voigt())
    assert ((GENERAL * 4.0) / 4.0).to_voigt() == pytest.approx(GENERAL.to_voigt())


def test_stress_from_strain_without_poisson():
    stress = StressTensor.from_strain(StrainTensor(xx=0.01), 200.0, 0.0)
    assert stress.xx == pytest.approx(2.0)
    assert stress.yy == pytest.approx(0.0)


def test_stress_from_hydrostatic_strain_is_hydrostatic():
    stress = StressTensor.from_strain(StrainTensor(0.001, 0.001, 0.001), 1000.0, 0.3)
    assert stress.von_mises() == pytest.approx(0.0, abs=1e-12)
    assert stress.xx == pytest.approx(stress.yy) == pytest.approx(stress.zz)


def test_uniaxial_von_mises_and_triaxiality():
    stress = StressTensor(xx=100.0)
    assert stress.von_mises() == pytest.approx(100.0)
    assert stress.triaxiality() == pytest.approx(1.0 / 3.0)


def test_triaxiality_zero_without_von_mises():
    assert StressTensor(5, 5, 5).triaxiality() == 0.0


def test_principal_stresses_sum_to_trace_and_sorted():
    stress = StressTensor(50, -20, 10, 15, -5, 8)
    p = stress.principal_stresses()
    assert list(p) == sorted(p, reverse=True)
    assert sum(p) == pytest.approx(stress.i1())


def test_hydrostatic_principal_stresses():
    assert StressTensor(7, 7, 7).principal_stresses() == pytest.approx((7, 7, 7))
    assert StressTensor(7, 7, 7).hydrostatic_stress() == pytest.approx(7)


def test_stress_deviatoric_and_magnitude():
    stress = StressTensor(50, -20, 10, 15, -5, 8)
    assert stress.deviatoric().i1() == pytest.approx(0.0, abs=1e-12)
    assert stress.magnitude() ** 2 == pytest.approx(stress.double_contraction(stress))
    assert stress.i3() == pytest.approx(stress.to_matrix().determinant())


def test_stress_max_shear():
    stress = StressTensor(50, -20, 10, 15, -5, 8)
    p = stress.principal_stresses()
    assert stress.max_shear_stress() == pytest.approx((p[0] - p[2]) / 2.0)