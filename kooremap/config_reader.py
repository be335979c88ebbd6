"""Reader for the small indentation-based YAML dialect of mesh configurations."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from kooremap.curve import InterpolationType
from kooremap.curved_mesh import CurvedMeshConfig
from kooremap.geometry import Vector2D
from kooremap.variable_density import (
    GrowthType,
    ReferenceConfig,
    VariableDensityConfig,
    ZoneConfig,
)

_WHITESPACE = " \t\n\v\f\r"
_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*[+-]?\d+")
_FLOAT_PREFIX = re.compile(
    r"[ \t\n\v\f\r]*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|infinity|inf|nan)",
    re.IGNORECASE,
)
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_TRUE_WORDS = ("true", "yes", "1")


def _to_int(text: str) -> int:
    """Integer from the leading digits of text; ValueError if there are none."""
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"not an integer: {text!r}")
    value = int(match.group())
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _to_float(text: str) -> float:
    """Number from the leading part of text; ValueError if there is none."""
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    return float(match.group())


def _trim(text: str) -> str:
    return text.strip(_WHITESPACE)


@dataclass
class YamlNode:
    """A scalar value with named children; list items use keys '0', '1', ..."""

    value: str = ""
    children: dict[str, YamlNode] = field(default_factory=dict)

    def child(self, key: str) -> Optional[YamlNode]:
        return self.children.get(key)

    def as_float(self, default: float = 0.0) -> float:
        if not self.value:
            return default
        try:
            return _to_float(self.value)
        except ValueError:
            return default

    def as_int(self, default: int = 0) -> int:
        if not self.value:
            return default
        try:
            return _to_int(self.value)
        except ValueError:
            return default

    def as_str(self, default: str = "") -> str:
        return self.value if self.value else default


class MeshGenType(Enum):
    """Kind of mesh a configuration describes."""

    FLAT = "flat"
    CURVED = "curved"


@dataclass
class ExtendedMeshConfig:
    """A flat variable-density or a curved mesh configuration."""

    type: MeshGenType = MeshGenType.FLAT
    reference: ReferenceConfig = field(default_factory=ReferenceConfig)
    flat_config: VariableDensityConfig = field(default_factory=VariableDensityConfig)
    curved_config: CurvedMeshConfig = field(default_factory=CurvedMeshConfig)


@dataclass
class _ParsedLine:
    indent: int
    key: str = ""
    value: str = ""
    is_list_item: bool = False


@dataclass
class _Frame:
    indent: int
    node: YamlNode
    list_counter: int = 0


def _parse_line(line: str) -> Optional[_ParsedLine]:
    """Split one line; None for blank lines and comments."""
    indent = len(line) - len(line.lstrip(" "))
    content = _trim(line)
    if not content or content.startswith("#"):
        return None
    if len(content) >= 2 and content[0] == "-" and content[1] in " [":
        rest = content[2:] if content[1] == " " else content[1:]
        return _ParsedLine(indent, value=_trim(rest), is_list_item=True)
    key, colon, rest = content.partition(":")
    if not colon:
        return _ParsedLine(indent, key=content)
    value = _trim(rest)
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return _ParsedLine(indent, key=_trim(key), value=value)


def parse_yaml(content: str) -> YamlNode:
    """Build a node tree from indentation, 'key: value' lines and '- item' lines."""
    root = YamlNode()
    stack = [_Frame(-1, root)]
    for raw in content.split("\n"):
        line = raw[:-1] if raw.endswith("\r") else raw
        parsed = _parse_line(line)
        if parsed is None:
            continue
        while len(stack) > 1 and stack[-1].indent >= parsed.indent:
            stack.pop()
        frame = stack[-1]
        if parsed.is_list_item:
            key = str(frame.list_counter)
            frame.list_counter += 1
            node = frame.node.children.setdefault(key, YamlNode())
            node.value = parsed.value
        else:
            node = frame.node.children.setdefault(parsed.key, YamlNode())
            node.value = parsed.value
            if not parsed.value:
                stack.append(_Frame(parsed.indent, node))
    return root


def parse_point(text: str) -> Vector2D:
    """Parse '[x, y]' or 'x, y'; missing or bad parts read as zero."""
    s = _trim(text)
    if s.startswith("["):
        s = s[1:]
    if s.endswith("]"):
        s = s[:-1]
    x_text, comma, y_text = s.partition(",")
    if not comma:
        return Vector2D(0, 0)
    x = y = 0.0
    try:
        x = _to_float(_trim(x_text))
        y = _to_float(_trim(y_text))
    except ValueError:
        pass
    return Vector2D(x, y)


def _parse_growth_type(text: str) -> GrowthType:
    lower = text.lower()
    if lower == "geometric":
        return GrowthType.GEOMETRIC
    if lower == "exponential":
        return GrowthType.EXPONENTIAL
    return GrowthType.LINEAR


def _parse_mesh_type(text: str) -> MeshGenType:
    return MeshGenType.CURVED if text.lower() in ("curved", "curve") else MeshGenType.FLAT


def _parse_interpolation_type(text: str) -> InterpolationType:
    lower = text.lower()
    if lower == "linear":
        return InterpolationType.LINEAR
    if lower in ("bspline", "b-spline"):
        return InterpolationType.BSPLINE
    return InterpolationType.CATMULL_ROM


def _parse_zone(node: Optional[YamlNode]) -> ZoneConfig:
    zone = ZoneConfig()
    if node is None:
        return zone
    if (length := node.child("length")) is not None:
        zone.length = length.as_float(0)
    if (count := node.child("num_elements")) is not None:
        zone.num_elements = count.as_int(0)
    if (growth := node.child("growth_type")) is not None:
        zone.growth_type = _parse_growth_type(growth.as_str("linear"))
    return zone


def _parse_reference(root: YamlNode) -> ReferenceConfig:
    reference = ReferenceConfig()
    ref = root.child("reference")
    if ref is None:
        return reference
    if (flat_mesh := ref.child("flat_mesh")) is not None:
        reference.flat_mesh_file = flat_mesh.as_str()
    dims = ref.child("dimensions")
    if dims is not None:
        if (li := dims.child("length_i")) is not None:
            reference.length_i = li.as_float()
        if (lj := dims.child("length_j")) is not None:
            reference.length_j = lj.as_float()
        if (lk := dims.child("length_k")) is not None:
            reference.length_k = lk.as_float()
    return reference


def _center_at_origin(root: YamlNode) -> Optional[bool]:
    opts = root.child("options")
    if opts is None:
        return None
    center = opts.child("center_at_origin")
    if center is None:
        return None
    return center.as_str("false").lower() in _TRUE_WORDS


def _node_to_config(root: YamlNode) -> VariableDensityConfig:
    config = VariableDensityConfig()
    config.reference = _parse_reference(root)
    if (ej := root.child("elements_j")) is not None:
        config.elements_j = ej.as_int(10)
    if (ek := root.child("elements_k")) is not None:
        config.elements_k = ek.as_int(5)
    vd = root.child("variable_density")
    if vd is not None:
        config.zone1_dense_start = _parse_zone(vd.child("zone1_dense_start"))
        config.zone2_increasing = _parse_zone(vd.child("zone2_increasing"))
        config.zone3_sparse = _parse_zone(vd.child("zone3_sparse"))
        config.zone4_decreasing = _parse_zone(vd.child("zone4_decreasing"))
        config.zone5_dense_end = _parse_zone(vd.child("zone5_dense_end"))
    center = _center_at_origin(root)
    if center is not None:
        config.center_at_origin = center
    return config


def _parse_centerline_points(node: YamlNode) -> list[Vector2D]:
    indexed: list[tuple[int, Vector2D]] = []
    for key in sorted(node.children):
        child = node.children[key]
        try:
            index = _to_int(key)
        except ValueError:
            point = parse_point(child.value)
            if point.x != 0 or point.y != 0:
                indexed.append((len(indexed), point))
            continue
        indexed.append((index, parse_point(child.value)))
    indexed.sort(key=lambda entry: entry[0])
    return [point for _, point in indexed]


def _parse_curved_config(root: YamlNode) -> CurvedMeshConfig:
    config = CurvedMeshConfig()
    if (points := root.child("centerline_points")) is not None:
        config.centerline_points = _parse_centerline_points(points)
    if (interp := root.child("interpolation")) is not None:
        config.interpolation = _parse_interpolation_type(interp.as_str("catmull_rom"))
    cs = root.child("cross_section")
    if cs is not None:
        if (w := cs.child("width")) is not None:
            config.width = w.as_float(1.0)
        if (t := cs.child("thickness")) is not None:
            config.thickness = t.as_float(1.0)
    if (e := root.child("elements_along_curve")) is not None:
        config.elements_along_curve = e.as_int(10)
    if (ej := root.child("elements_j")) is not None:
        config.elements_width = ej.as_int(5)
    if (ek := root.child("elements_k")) is not None:
        config.elements_thickness = ek.as_int(5)
    center = _center_at_origin(root)
    if center is not None:
        config.center_at_origin = center
    return config


def _node_to_extended_config(root: YamlNode) -> ExtendedMeshConfig:
    config = ExtendedMeshConfig()
    if (type_node := root.child("type")) is not None:
        config.type = _parse_mesh_type(type_node.as_str("flat"))
    config.reference = _parse_reference(root)
    if config.type is MeshGenType.FLAT:
        config.flat_config = _node_to_config(root)
        config.flat_config.reference = config.reference
    else:
        config.curved_config = _parse_curved_config(root)
    return config


def _read_text(filename: str) -> str:
    try:
        with open(filename, encoding="utf-8") as handle:
            return handle.read()
    except OSError as exc:
        raise OSError(f"Cannot open file: {filename}") from exc


def read_string(yaml_content: str) -> VariableDensityConfig:
    """Variable-density configuration from YAML text."""
    return _node_to_config(parse_yaml(yaml_content))


def read_file(filename: str) -> VariableDensityConfig:
    """Variable-density configuration from a file; OSError if it cannot be read."""
    return read_string(_read_text(filename))


def read_extended_string(yaml_content: str) -> ExtendedMeshConfig:
    """Flat or curved configuration from YAML text, chosen by 'type'."""
    return _node_to_extended_config(parse_yaml(yaml_content))


def read_extended_file(filename: str) -> ExtendedMeshConfig:
    """Flat or curved configuration from a file; OSError if it cannot be read."""
    return read_extended_string(_read_text(filename))