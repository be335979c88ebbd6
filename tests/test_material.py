import pytest

from kooremap.material import MaterialModel, MaterialType
from kooremap.tensors import StrainTensor, StressTensor


def test_isotropic_elastic_fields():
    m = MaterialModel.isotropic_elastic(210000.0, 0.3)
    assert m.type is MaterialType.LINEAR_ELASTIC
    assert m.E == 210000.0
    assert m.nu == 0.3
    assert m.rho == 0.0


def test_from_lsdyna_order():
    m = MaterialModel.from_lsdyna_mat_elastic(7.85e-9, 210000.0, 0.3)
    assert (m.rho, m.E, m.nu) == (7.85e-9, 210000.0, 0.3)


def test_compute_stress_matches_tensor_law():
    m = MaterialModel.isotropic_elastic(1000.0, 0.25)
    strain = StrainTensor(0.01, -0.002, 0.003, 0.004, 0.0, 0.001)
    assert m.compute_stress(strain) == StressTensor.from_strain(strain, 1000.0, 0.25)


def test_stiffness_times_compliance_is_identity():
    m = MaterialModel.isotropic_elastic(500.0, 0.2)
    C = m.stiffness_matrix()
    S = m.compliance_matrix()
    for i in range(6):
        for j in range(6):
            value = sum(C[i][k] * S[k][j] for k in range(6))
            assert value == pytest.approx(1.0 if i == j else 0.0, abs=1e-12)


def test_stiffness_is_symmetric():
    C = MaterialModel.isotropic_elastic(300.0, 0.3).stiffness_matrix()
    for i in range(6):
        for j in range(6):
            assert C[i][j] == pytest.approx(C[j][i])


def test_stiffness_shear_diagonal_is_shear_modulus():
    m = MaterialModel.isotropic_elastic(300.0, 0.3)
    C = m.stiffness_matrix()
    assert all(C[i][i] == pytest.approx(m.shear_modulus()) for i in range(3, 6))
    assert C[0][1] == pytest.approx(m.lame_lambda())


def test_compliance_zero_without_positive_modulus():
    S = MaterialModel.isotropic_elastic(0.0, 0.3).compliance_matrix()
    assert all(v == 0.0 for row in S for v in row)


def test_string_form():
    assert str(MaterialModel.isotropic_elastic(210000.0, 0.3)) == (
        "Linear Elastic: E=2.100e+05, nu=0.30"
    )


def test_string_includes_density_when_positive():
    text = str(MaterialModel.from_lsdyna_mat_elastic(7.85e-9, 210000.0, 0.3))
    assert text.startswith("Linear Elastic: E=2.100e+05, nu=0.30, rho=")
    assert "rho=7.85e-09" in text