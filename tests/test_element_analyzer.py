import pytest

from kooremap.element_analyzer import ElementAnalyzer, MeshMismatchError
from kooremap.geometry import Vector3D
from kooremap.material import MaterialModel
from kooremap.mesh import Element, ElementType, MaterialData, Mesh, Node, Part
from kooremap.tensors import StrainTensor, StrainType

CUBE = [
    (0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0),
    (0, 0, 1), (1, 0, 1), (1, 1, 1), (0, 1, 1),
]


def make_hex_mesh(stretch_x=1.0, elem_id=1):
    mesh = Mesh()
    for index, (x, y, z) in enumerate(CUBE, start=1):
        mesh.add_node(Node(index, Vector3D(x * stretch_x, y, z)))
    mesh.add_element(Element(elem_id, 1, list(range(1, 9))))
    return mesh


def make_tet_mesh(stretch_x=1.0):
    mesh = Mesh()
    for index, (x, y, z) in enumerate([(0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 1)], start=1):
        mesh.add_node(Node(index, Vector3D(x * stretch_x, y, z)))
    mesh.add_element(Element(1, 1, [1, 2, 3, 4, 0, 0, 0, 0], ElementType.TET4))
    return mesh


def test_validate_accepts_identical_topology():
    ElementAnalyzer.validate_mesh_pair(make_hex_mesh(), make_hex_mesh(1.2))
    assert make_hex_mesh().element_count == 1


def test_validate_node_count_mismatch():
    other = make_hex_mesh()
    other.add_node(Node(99, Vector3D()))
    with pytest.raises(MeshMismatchError, match="Node count mismatch: 8 vs 9"):
        ElementAnalyzer.validate_mesh_pair(make_hex_mesh(), other)


def test_validate_missing_element():
    with pytest.raises(MeshMismatchError, match="Element 1 not found"):
        ElementAnalyzer.validate_mesh_pair(make_hex_mesh(), make_hex_mesh(elem_id=2))


def test_validate_connectivity_mismatch():
    other = make_hex_mesh()
    other.elements[1].node_ids[0], other.elements[1].node_ids[1] = 2, 1
    with pytest.raises(MeshMismatchError, match="different connectivity"):
        ElementAnalyzer.validate_mesh_pair(make_hex_mesh(), other)


def test_hex_uniaxial_stretch_strain():
    analyzer = ElementAnalyzer()
    result = analyzer.analyze_element(make_hex_mesh().elements[1], make_hex_mesh(), make_hex_mesh(1.1))
    assert result.is_valid
    assert result.strain.xx == pytest.approx(0.1)
    assert result.strain.yy == pytest.approx(0.0, abs=1e-12)
    assert result.max_principal_strain == pytest.approx(0.1)
    assert result.von_mises_strain == pytest.approx(StrainTensor(xx=0.1).von_mises_strain())
    assert result.center.x == pytest.approx(0.55)


def test_hex_eight_point_integration_matches_one_point():
    ref, deformed = make_hex_mesh(), make_hex_mesh(1.1)
    one = ElementAnalyzer().analyze_element(ref.elements[1], ref, deformed)
    eight = ElementAnalyzer(num_gauss_points=8).analyze_element(ref.elements[1], ref, deformed)
    assert eight.strain.xx == pytest.approx(one.strain.xx)


def test_green_lagrange_differs_from_engineering():
    ref, deformed = make_hex_mesh(), make_hex_mesh(1.1)
    result = ElementAnalyzer(StrainType.GREEN_LAGRANGE).analyze_element(ref.elements[1], ref, deformed)
    assert result.strain.xx == pytest.approx(0.5 * (1.1 * 1.1 - 1.0))


def test_default_material_gives_stress():
    analyzer = ElementAnalyzer()
    material = MaterialModel.isotropic_elastic(1000.0, 0.3)
    analyzer.set_material(material)
    ref, deformed = make_hex_mesh(), make_hex_mesh(1.1)
    result = analyzer.analyze_element(ref.elements[1], ref, deformed)
    expected = material.compute_stress(result.strain)
    assert result.von_mises_stress == pytest.approx(expected.von_mises())
    assert result.max_principal_stress == pytest.approx(expected.principal_stresses()[0])


def test_clear_material_removes_stress():
    analyzer = ElementAnalyzer()
    analyzer.set_material(MaterialModel.isotropic_elastic(1000.0, 0.3))
    analyzer.clear_material()
    ref, deformed = make_hex_mesh(), make_hex_mesh(1.1)
    assert analyzer.analyze_element(ref.elements[1], ref, deformed).von_mises_stress == 0.0


def test_part_material_takes_precedence():
    ref, deformed = make_hex_mesh(), make_hex_mesh(1.1)
    ref.add_part(Part(1, "p", 5))
    ref.add_material(5, MaterialData(5, "steel", 2000.0, 0.25))
    analyzer = ElementAnalyzer()
    analyzer.set_material(MaterialModel.isotropic_elastic(1.0, 0.3))
    result = analyzer.analyze_element(ref.elements[1], ref, deformed)
    expected = MaterialModel.isotropic_elastic(2000.0, 0.25).compute_stress(result.strain)
    assert result.von_mises_stress == pytest.approx(expected.von_mises())


def test_missing_node_reported():
    ref, deformed = make_hex_mesh(), make_hex_mesh()
    del deformed.nodes[3]
    result = ElementAnalyzer().analyze_element(ref.elements[1], ref, deformed)
    assert not result.is_valid
    assert result.error_message == "Missing node 3"


def test_degenerate_element_is_invalid():
    ref = make_hex_mesh()
    for node in ref.nodes.values():
        node.position = Vector3D(node.position.x, node.position.y, 0.0)
    result = ElementAnalyzer().analyze_element(ref.elements[1], ref, make_hex_mesh())
    assert not result.is_valid
    assert "singular" in result.error_message


def test_tet_stretch_strain():
    ref, deformed = make_tet_mesh(), make_tet_mesh(1.1)
    result = ElementAnalyzer().analyze_element(ref.elements[1], ref, deformed)
    assert result.is_valid
    assert result.strain.xx == pytest.approx(0.1)
    assert result.center.x == pytest.approx(1.1 / 4.0)


def test_analyze_mesh_statistics_and_progress():
    ref, deformed = make_hex_mesh(), make_hex_mesh(1.1)
    ref.add_element(Element(2, 1, [1, 2, 3, 4, 5, 6, 7, 50]))
    deformed.add_element(Element(2, 1, [1, 2, 3, 4, 5, 6, 7, 50]))
    seen = []
    result = ElementAnalyzer().analyze_mesh(ref, deformed, seen.append)
    assert seen == [50, 100]
    assert (result.valid_elements, result.invalid_elements) == (1, 1)
    assert not result.has_material
    assert [r.element_id for r in result.element_results] == [1, 2]
    vm = result.element_results[0].von_mises_strain
    assert result.min_von_mises_strain == vm == result.max_von_mises_strain
    assert result.avg_von_mises_strain == pytest.approx(vm)


def test_analyze_mesh_has_material_from_parts():
    ref, deformed = make_hex_mesh(), make_hex_mesh(1.1)
    ref.add_part(Part(1, "p", 5))
    ref.add_material(5, MaterialData(5, "steel", 2000.0, 0.25))
    result = ElementAnalyzer().analyze_mesh(ref, deformed)
    assert result.has_material
    assert result.avg_von_mises_stress == pytest.approx(result.element_results[0].von_mises_stress)
    assert result.avg_von_mises_stress > 0.0


def test_analyze_empty_mesh():
    result = ElementAnalyzer().analyze_mesh(Mesh(), Mesh())
    assert result.element_results == []
    assert result.min_von_mises_strain == 0.0