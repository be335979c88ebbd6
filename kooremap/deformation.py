"""Shape functions, Jacobians and deformation gradients for HEX8 and TET4."""

from __future__ import annotations

import math
from typing import Sequence

from kooremap.geometry import Matrix3x3, Vector3D

HEX8_CORNERS: tuple[Vector3D, ...] = (
    Vector3D(-1, -1, -1),
    Vector3D(+1, -1, -1),
    Vector3D(+1, +1, -1),
    Vector3D(-1, +1, -1),
    Vector3D(-1, -1, +1),
    Vector3D(+1, -1, +1),
    Vector3D(+1, +1, +1),
    Vector3D(-1, +1, +1),
)


def shape_functions_hex8(xi: float, eta: float, zeta: float) -> tuple[float, ...]:
    """Trilinear shape function values at a natural coordinate."""
    return tuple(
        0.125 * (1.0 + c.x * xi) * (1.0 + c.y * eta) * (1.0 + c.z * zeta)
        for c in HEX8_CORNERS
    )


def shape_function_derivatives_hex8(
    xi: float, eta: float, zeta: float
) -> tuple[Vector3D, ...]:
    """Derivatives of each shape function with respect to (xi, eta, zeta)."""
    return tuple(
        Vector3D(
            0.125 * c.x * (1.0 + c.y * eta) * (1.0 + c.z * zeta),
            0.125 * (1.0 + c.x * xi) * c.y * (1.0 + c.z * zeta),
            0.125 * (1.0 + c.x * xi) * (1.0 + c.y * eta) * c.z,
        )
        for c in HEX8_CORNERS
    )


def jacobian_hex8(
    nodes: Sequence[Vector3D], xi: float, eta: float, zeta: float
) -> Matrix3x3:
    """J[i, j] = d x_i / d xi_j at the given natural coordinate."""
    dN = shape_function_derivatives_hex8(xi, eta, zeta)
    return Matrix3x3(
        *(
            sum(d[j] * node[i] for d, node in zip(dN, nodes))
            for i in range(3)
            for j in range(3)
        )
    )


def jacobian_tet4(nodes: Sequence[Vector3D]) -> Matrix3x3:
    """Matrix whose columns are the edge vectors from the first node."""
    origin = nodes[0]
    return Matrix3x3.from_columns(nodes[1] - origin, nodes[2] - origin, nodes[3] - origin)


def deformation_gradient_hex8(
    ref_nodes: Sequence[Vector3D],
    def_nodes: Sequence[Vector3D],
    xi: float,
    eta: float,
    zeta: float,
) -> Matrix3x3:
    """F = J_def * J_ref^-1; raises ValueError for a degenerate reference."""
    j_ref = jacobian_hex8(ref_nodes, xi, eta, zeta)
    j_def = jacobian_hex8(def_nodes, xi, eta, zeta)
    return j_def @ j_ref.inverse()


def deformation_gradient_tet4(
    ref_nodes: Sequence[Vector3D], def_nodes: Sequence[Vector3D]
) -> Matrix3x3:
    """Constant F of a linear tetrahedron; raises ValueError if degenerate."""
    return jacobian_tet4(def_nodes) @ jacobian_tet4(ref_nodes).inverse()


def gauss_points_hex8(num_points: int) -> list[tuple[float, float, float, float]]:
    """(xi, eta, zeta, weight) for 1 or 8 points; empty for other counts."""
    if num_points == 1:
        return [(0.0, 0.0, 0.0, 8.0)]
    if num_points == 8:
        g = 1.0 / math.sqrt(3.0)
        coords = (-g, g)
        return [(xi, eta, zeta, 1.0) for xi in coords for eta in coords for zeta in coords]
    return []