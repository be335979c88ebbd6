# kooremap

A library for building structured hexahedral finite-element meshes and
measuring how a mesh has deformed relative to a reference.

It has no runtime dependencies beyond the standard library and supports
Python 3.10 and later.

## What is in the package

| Module | Contents |
| --- | --- |
| `kooremap.geometry` | `Vector3D`, `Vector2D` and an immutable `Matrix3x3` (`@` multiplies matrices, `inverse()` raises `ValueError` when singular) |
| `kooremap.mesh` | `Node`, `Element`, `ElementType` (HEX8, TET4), `Part`, `MaterialData` and the `Mesh` container |
| `kooremap.tensors` | `StrainTensor`, `StressTensor`, `StrainType`: invariants, principal values, deviatoric parts, von Mises measures |
| `kooremap.material` | `MaterialModel`: isotropic linear elasticity, stress from strain, 6x6 stiffness and compliance matrices |
| `kooremap.deformation` | HEX8 shape functions and derivatives, Jacobians, deformation gradients for HEX8 and TET4, Gauss points |
| `kooremap.element_analyzer` | `ElementAnalyzer`, `ElementResult`, `MeshAnalysisResult`, `MeshMismatchError` |
| `kooremap.strain_calculator` | `StrainCalculator`: displacement-based HEX8 strains, statistics and CSV export |
| `kooremap.curve` | `CurveInterpolator`: linear or Catmull-Rom planar curve with arc-length lookup |
| `kooremap.curved_mesh` | `CurvedMeshConfig`, `CurvedMeshGenerator`: a block swept along a planar centerline |
| `kooremap.variable_density` | `VariableDensityConfig`, `VariableDensityMeshGenerator` and spacing helpers |
| `kooremap.config_reader` | Reader for the indentation-based YAML-style configuration of the two generators |
| `kooremap.example_mesh` | `ExampleMeshGenerator`: matching flat and bent meshes (arc, helix, torus, twist, wave, waterdrop, ...) |
| `kooremap.args` | A small `ArgumentParser` with positionals, valued options and flags; raises `ArgumentError` |
| `kooremap.console` | `ConsoleOutput`: coloured status lines, headers and a progress bar |
| `kooremap.platform_utils` | Path, file, directory and terminal helpers |

## Strain and stress

```python
from kooremap.geometry import Matrix3x3
from kooremap.tensors import StrainTensor, StrainType
from kooremap.material import MaterialModel

F = Matrix3x3.identity()
strain = StrainTensor.from_deformation_gradient(F, StrainType.GREEN_LAGRANGE)
print(strain.von_mises_strain())        # 0.0 for an undeformed configuration

steel = MaterialModel.isotropic_elastic(210e3, 0.3)
stress = steel.compute_stress(strain)
print(stress.von_mises(), stress.principal_stresses())
```

Shear components of `StrainTensor` are engineering shears (γ = 2ε);
`to_matrix()` returns the tensor form. `StrainType.ENGINEERING` gives the
small-strain measure, any other type the Green-Lagrange strain.

## Comparing two meshes

`ElementAnalyzer` computes the deformation gradient of every element of a
reference mesh against the element with the same id in a deformed mesh.
HEX8 elements are averaged over Gauss points (one point by default, eight
with `num_gauss_points=8`); TET4 elements have constant strain. Stresses are
computed when a default material is set with `set_material`, or when the
element's part maps to a valid `MaterialData` in the reference mesh.

```python
from kooremap.element_analyzer import ElementAnalyzer
from kooremap.material import MaterialModel

analyzer = ElementAnalyzer()
analyzer.set_material(MaterialModel.isotropic_elastic(210e3, 0.3))
ElementAnalyzer.validate_mesh_pair(reference, deformed)   # raises MeshMismatchError
result = analyzer.analyze_mesh(reference, deformed, None)
print(result.valid_elements, result.max_von_mises_strain)
```

Elements that cannot be analysed (a missing node, a degenerate reference
shape) are kept in `result.element_results` with `is_valid` false and an
`error_message`.

`StrainCalculator` offers a second, displacement-based computation for HEX8
meshes. `calculate()` raises `StrainCalculationError` when the meshes are
missing or do not match; afterwards `element_strain(id)` gives the averaged
strain, corner strains and centre Jacobian, `stats` holds the extremes and
averages, and `export_csv(filename)` writes one line per element.

## Generating meshes

A variable-density block has five zones along I: dense, growing, sparse,
shrinking and dense again. The transition zones take their length from the
neighbouring element sizes, and the whole axis is scaled to the requested
length.

```python
from kooremap.config_reader import read_string
from kooremap.variable_density import VariableDensityMeshGenerator

config = read_string("""
elements_j: 4
elements_k: 2
variable_density:
  zone1_dense_start:
    length: 10
    num_elements: 10
  zone2_increasing:
    num_elements: 5
    growth_type: geometric
  zone3_sparse:
    length: 40
    num_elements: 8
  zone4_decreasing:
    num_elements: 5
    growth_type: geometric
  zone5_dense_end:
    length: 10
    num_elements: 10
""")

generator = VariableDensityMeshGenerator()
mesh = generator.generate(config, 100.0, 10.0, 2.0)
print(mesh.node_count, generator.stats.size_ratio)
```

Curved blocks follow a 2-D centerline interpolated by `CurveInterpolator`
and sampled at equal arc length. `CurvedMeshGenerator.generate` accepts a
reference arc length, width and thickness; any that are positive override
the configuration.

```python
from kooremap.curve import CurveInterpolator
from kooremap.geometry import Vector2D

curve = CurveInterpolator()
curve.set_control_points([Vector2D(0, 0), Vector2D(5, 2), Vector2D(10, 0)])
print(curve.arc_length, curve.evaluate_at_arc_length(1.0))
```

`read_extended_string` and `read_extended_file` return an
`ExtendedMeshConfig` holding either a flat or a curved configuration,
chosen by the `type:` key (`flat` or `curved`). Invalid configurations make
the generators raise `ValueError`.

`ExampleMeshGenerator` builds a flat structured mesh and its bent twin for
any `BentMeshType`, plus a refined flat mesh and a flat mesh split into
tetrahedra, which is handy for trying out the analysis end to end.

## What the package does not do

- It does not read or write mesh keyword files; meshes are built in memory
  through the generators or the `Mesh` methods.
- It does not map a mesh onto another shape; it only generates meshes and
  analyses pairs of meshes that already share node and element ids.
- It installs no command. `ArgumentParser` and `ConsoleOutput` are building
  blocks for a command-line program but none is provided.

## Running the tests

Install the `test` extra and run `pytest` from the project root.