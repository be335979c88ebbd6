import pytest

from kooremap.variable_density import (
    GrowthType,
    ReferenceConfig,
    VariableDensityConfig,
    VariableDensityMeshGenerator,
    ZoneConfig,
    compute_transition_spacing,
    compute_uniform_spacing,
    compute_x_coordinates,
)


def _config(growth=GrowthType.LINEAR, **overrides):
    values = dict(
        elements_j=2,
        elements_k=1,
        zone1_dense_start=ZoneConfig(1.0, 5),
        zone2_increasing=ZoneConfig(0.0, 3, growth),
        zone3_sparse=ZoneConfig(8.0, 4),
        zone4_decreasing=ZoneConfig(0.0, 3, growth),
        zone5_dense_end=ZoneConfig(1.0, 5),
    )
    values.update(overrides)
    return VariableDensityConfig(**values)


def test_linear_transition_worked_example():
    assert compute_transition_spacing(1.0, 3.0, 3, GrowthType.LINEAR) == pytest.approx([1.0, 2.0, 3.0])


@pytest.mark.parametrize("growth", [GrowthType.GEOMETRIC, GrowthType.EXPONENTIAL])
def test_geometric_transitions_have_constant_ratio(growth):
    sizes = compute_transition_spacing(1.0, 4.0, 5, growth)
    assert sizes[0] == pytest.approx(1.0)
    assert sizes[-1] == pytest.approx(4.0)
    ratios = [b / a for a, b in zip(sizes, sizes[1:])]
    assert all(r == pytest.approx(ratios[0]) for r in ratios)


def test_single_element_transition_takes_midpoint():
    assert compute_transition_spacing(1.0, 3.0, 1, GrowthType.LINEAR) == pytest.approx([2.0])
    assert compute_transition_spacing(1.0, 4.0, 1, GrowthType.GEOMETRIC) == [1.0]


def test_transition_edge_cases():
    assert compute_transition_spacing(1.0, 2.0, 0) == []
    assert compute_transition_spacing(0.0, 2.0, 3, GrowthType.GEOMETRIC) == (
        compute_transition_spacing(0.0, 2.0, 3, GrowthType.LINEAR)
    )


def test_uniform_spacing_fills_length():
    sizes = compute_uniform_spacing(10.0, 4)
    assert len(sizes) == 4
    assert sum(sizes) == pytest.approx(10.0)
    assert len(set(sizes)) == 1


@pytest.mark.parametrize("growth", list(GrowthType))
def test_x_coordinates_reach_target(growth):
    config = _config(growth)
    coords = compute_x_coordinates(config, 50.0)
    assert len(coords) == config.total_elements_i() + 1
    assert coords[0] == 0.0
    assert coords[-1] == pytest.approx(50.0)
    assert all(b > a for a, b in zip(coords, coords[1:]))


def test_generate_mesh_and_stats():
    config = _config()
    generator = VariableDensityMeshGenerator()
    mesh = generator.generate(config, 50.0, 4.0, 2.0)
    ni = config.total_elements_i() + 1
    assert mesh.node_count == ni * 3 * 2
    assert mesh.element_count == config.total_elements()
    assert mesh.grid_dimensions == (config.total_elements_i(), 2, 1)
    stats = generator.stats
    zone_sum = (
        stats.zone1_length + stats.zone2_length + stats.zone3_length
        + stats.zone4_length + stats.zone5_length
    )
    assert zone_sum == pytest.approx(stats.total_length_i)
    assert stats.total_length_i == pytest.approx(50.0)
    assert stats.total_nodes == mesh.node_count
    assert stats.sparse_element_size > stats.dense_element_size
    assert stats.size_ratio == pytest.approx(stats.sparse_element_size / stats.dense_element_size)
    xs = [n.position.x for n in mesh.nodes.values()]
    assert min(xs) == 0.0
    assert max(xs) == pytest.approx(50.0)


def test_generate_uses_reference_defaults():
    config = _config(reference=ReferenceConfig(length_i=20.0, length_j=3.0))
    generator = VariableDensityMeshGenerator()
    mesh = generator.generate(config)
    assert generator.stats.total_length_i == pytest.approx(20.0)
    assert generator.stats.total_length_j == 3.0
    assert generator.stats.total_length_k == 1.0
    ys = [n.position.y for n in mesh.nodes.values()]
    assert max(ys) == pytest.approx(3.0)


def test_center_at_origin():
    config = _config(center_at_origin=True)
    mesh = VariableDensityMeshGenerator().generate(config, 10.0, 2.0, 2.0)
    xs = [n.position.x for n in mesh.nodes.values()]
    zs = [n.position.z for n in mesh.nodes.values()]
    assert min(xs) == pytest.approx(-max(xs))
    assert max(xs) == pytest.approx(5.0)
    assert min(zs) == pytest.approx(-1.0)


def test_progress_reported():
    seen = []
    VariableDensityMeshGenerator(seen.append).generate(_config(), 10.0, 1.0, 1.0)
    assert seen[0] == 5
    assert seen[-1] == 100
    assert seen == sorted(seen)


def test_config_totals():
    config = _config()
    assert config.total_elements_i() == 20
    assert config.total_length() == pytest.approx(10.0)
    assert config.total_elements() == config.total_elements_i() * 2 * 1


@pytest.mark.parametrize(
    "overrides",
    [
        {"elements_j": 0},
        {"elements_k": 0},
        {"zone1_dense_start": ZoneConfig(1.0, -1)},
        {"zone3_sparse": ZoneConfig(-8.0, 4)},
    ],
)
def test_invalid_config_raises(overrides):
    with pytest.raises(ValueError):
        VariableDensityMeshGenerator().generate(_config(**overrides), 10.0, 1.0, 1.0)


def test_empty_config_raises():
    with pytest.raises(ValueError):
        VariableDensityMeshGenerator().generate(VariableDensityConfig())