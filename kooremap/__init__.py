"""Structured hexahedral mesh generation and strain/stress analysis."""

__version__ = "1.0.0"

__all__ = [
    "args",
    "config_reader",
    "console",
    "curve",
    "curved_mesh",
    "deformation",
    "element_analyzer",
    "example_mesh",
    "geometry",
    "material",
    "mesh",
    "platform_utils",
    "strain_calculator",
    "tensors",
    "variable_density",
]