import pytest

from kooremap.geometry import Vector3D
from kooremap.mesh import Element, Mesh, Node
from kooremap.strain_calculator import (
    CSV_HEADER,
    StrainCalculationError,
    StrainCalculator,
    StrainData,
)
from kooremap.tensors import StrainType

CORNERS = [
    (0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0),
    (0, 0, 1), (1, 0, 1), (1, 1, 1), (0, 1, 1),
]


def cube(transform=lambda x, y, z: (x, y, z)):
    mesh = Mesh()
    for node_id, corner in enumerate(CORNERS, start=1):
        mesh.add_node(Node(node_id, Vector3D(*transform(*corner))))
    mesh.add_element(Element(1, 1, list(range(1, 9))))
    return mesh


def stretched():
    return cube(lambda x, y, z: (1.1 * x, y, z))


def test_uniform_stretch_engineering():
    calc = StrainCalculator(cube(), stretched())
    calc.calculate()
    s = calc.element_strain(1).strain
    assert s.exx == pytest.approx(0.1)
    assert s.eyy == pytest.approx(0.0, abs=1e-12)
    assert s.exy == pytest.approx(0.0, abs=1e-12)
    assert s.volumetric() == pytest.approx(0.1)


def test_green_lagrange_larger_than_engineering():
    calc = StrainCalculator(cube(), stretched(), StrainType.GREEN_LAGRANGE)
    calc.calculate()
    assert calc.element_strain(1).strain.exx == pytest.approx(0.105)


def test_center_jacobian_of_unit_cube():
    calc = StrainCalculator(cube(), cube())
    calc.calculate()
    assert calc.element_strain(1).jacobian == pytest.approx(0.125)


def test_rigid_translation_has_no_strain():
    calc = StrainCalculator(cube(), cube(lambda x, y, z: (x + 3, y - 2, z + 1)))
    calc.calculate()
    strain = calc.element_strain(1).strain
    assert all(abs(c) < 1e-12 for c in strain)
    assert calc.node_displacement(5) == Vector3D(3, -2, 1)
    assert calc.stats.elements_processed == 1
    assert calc.stats.max_von_mises == pytest.approx(0.0, abs=1e-12)


def test_node_strains_use_green_lagrange():
    calc = StrainCalculator(cube(), stretched())
    calc.calculate()
    data = calc.element_strain(1)
    assert len(data.node_strains) == 8
    for ns in data.node_strains:
        assert ns.exx == pytest.approx(0.5 * (1.1 * 1.1 - 1.0))


def test_stats_match_element_values():
    calc = StrainCalculator(cube(), stretched())
    calc.calculate()
    s = calc.element_strain(1).strain
    assert calc.stats.avg_volumetric == pytest.approx(s.volumetric())
    assert calc.stats.min_von_mises == pytest.approx(s.von_mises())
    assert calc.stats.max_principal == pytest.approx(s.principal()[0])


def test_unknown_lookups():
    calc = StrainCalculator(cube(), cube())
    calc.calculate()
    assert calc.element_strain(99) is None
    assert calc.node_displacement(99) == Vector3D()


def test_meshes_not_set():
    with pytest.raises(StrainCalculationError, match="not set"):
        StrainCalculator().calculate()


def test_node_count_mismatch():
    deformed = cube()
    deformed.add_node(Node(100, Vector3D()))
    with pytest.raises(StrainCalculationError, match="node counts"):
        StrainCalculator(cube(), deformed).calculate()


def test_missing_node_in_deformed_mesh():
    deformed = cube()
    del deformed.nodes[3]
    deformed.add_node(Node(100, Vector3D()))
    with pytest.raises(StrainCalculationError, match="Node 3 not found"):
        StrainCalculator(cube(), deformed).calculate()


def test_principal_of_zero_strain():
    assert StrainData().principal() == (0.0, 0.0, 0.0)


def test_principal_sorted_and_trace_preserved():
    s = StrainData(exx=1.0, eyy=2.0)
    p = s.principal()
    assert p == pytest.approx((2.0, 1.0, 0.0), abs=1e-12)
    assert list(p) == sorted(p, reverse=True)
    assert s.max_shear() == pytest.approx(1.0)


def test_hydrostatic_strain_has_no_von_mises():
    s = StrainData(0.3, 0.3, 0.3)
    assert s.von_mises() == pytest.approx(0.0, abs=1e-12)
    assert s.volumetric() == pytest.approx(0.9)


def test_export_csv(tmp_path):
    calc = StrainCalculator(cube(), stretched())
    calc.calculate()
    path = tmp_path / "strain.csv"
    calc.export_csv(str(path))
    lines = path.read_text().splitlines()
    assert lines[0] == CSV_HEADER
    fields = lines[1].split(",")
    assert fields[0] == "1"
    assert len(fields) == 11
    assert float(fields[1]) == pytest.approx(0.1, rel=1e-5)


def test_export_csv_bad_path(tmp_path):
    calc = StrainCalculator(cube(), cube())
    calc.calculate()
    with pytest.raises(OSError):
        calc.export_csv(str(tmp_path / "missing" / "out.csv"))