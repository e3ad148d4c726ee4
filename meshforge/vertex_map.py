"""Reading and writing vertex attributes through a vertex type's declaration.

A :class:`VertexParamMap` looks at a vertex type's attribute declaration and
records where its position, normal, texture coordinate and colour live. Mesh
generators can then fill in any vertex type. Attributes that a type lacks are
skipped on write and read back as defaults.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Iterable, Sequence

import numpy as np

from .vertex_array import AttribUsage, AttributeType, BufferAttribute

Vector = Sequence[float] | np.ndarray


@lru_cache(maxsize=None)
def _field_at(vertex_type: type, offset: int) -> str:
    dtype = getattr(vertex_type, "DTYPE", None)
    if not isinstance(dtype, np.dtype) or dtype.fields is None:
        raise TypeError(f"{vertex_type.__name__} is not a vertex type with a record layout")
    for name, spec in dtype.fields.items():
        if spec[1] == offset:
            return name
    raise ValueError(f"{vertex_type.__name__} has no field at byte offset {offset}")


def _components(value: Vector, count: int) -> list[float]:
    values = np.asarray(value, dtype=np.float64).reshape(-1)
    if values.size < count:
        raise ValueError(f"expected at least {count} components, got {values.size}")
    return [float(v) for v in values[:count]]


def _write(vertex: Any, offset: int, values: list[float]) -> None:
    """Overwrite the leading components of the field at ``offset``."""
    name = _field_at(type(vertex), offset)
    current = list(getattr(vertex, name))
    current[: len(values)] = values
    setattr(vertex, name, current)


def _read(vertex: Any, offset: int, count: int) -> np.ndarray:
    name = _field_at(type(vertex), offset)
    values = np.asarray(getattr(vertex, name), dtype=np.float64).reshape(-1)
    if values.size < count:
        raise ValueError(f"field {name!r} has fewer than {count} components")
    return values[:count].copy()


class VertexParamMap:
    """Where the position, normal, texture and colour attributes of a vertex type live."""

    def __init__(self, v_decl: Iterable[BufferAttribute] = ()) -> None:
        self.position_offset: int | None = None
        self.normal_offset: int | None = None
        self.texture_offset: int | None = None
        self.color_offset: int | None = None
        self.color_size = 0
        for attrib in v_decl:
            is_float = attrib.type == AttributeType.FLOAT
            if attrib.usage == AttribUsage.POSITION and attrib.size == 3 and is_float:
                self.position_offset = attrib.offset
            elif attrib.usage == AttribUsage.NORMAL and attrib.size == 3 and is_float:
                self.normal_offset = attrib.offset
            elif attrib.usage == AttribUsage.TEXTURE and attrib.size == 2 and is_float:
                self.texture_offset = attrib.offset
            elif attrib.usage == AttribUsage.COLOR and is_float:
                self.color_offset = attrib.offset
                self.color_size = attrib.size

    @classmethod
    def for_type(cls, vertex_type: type) -> "VertexParamMap":
        """Build the map from a vertex type's ``V_DECL``."""
        return cls(vertex_type.V_DECL)

    @property
    def has_position(self) -> bool:
        return self.position_offset is not None

    @property
    def has_normal(self) -> bool:
        return self.normal_offset is not None

    @property
    def has_texture(self) -> bool:
        return self.texture_offset is not None

    @property
    def has_color(self) -> bool:
        return self.color_offset is not None

    def set_position(self, vertex: Any, value: Vector) -> None:
        if self.position_offset is not None:
            _write(vertex, self.position_offset, _components(value, 3))

    def set_normal(self, vertex: Any, value: Vector) -> None:
        if self.normal_offset is not None:
            _write(vertex, self.normal_offset, _components(value, 3))

    def set_texture(self, vertex: Any, value: Vector) -> None:
        if self.texture_offset is not None:
            _write(vertex, self.texture_offset, _components(value, 2))

    def set_color(self, vertex: Any, value: Vector) -> None:
        """Write the first ``color_size`` components of an RGBA value."""
        if self.color_offset is not None:
            _write(vertex, self.color_offset, _components(value, self.color_size))

    def get_position(self, vertex: Any) -> np.ndarray:
        if self.position_offset is not None:
            return _read(vertex, self.position_offset, 3)
        return np.zeros(3)

    def get_normal(self, vertex: Any) -> np.ndarray:
        if self.normal_offset is not None:
            return _read(vertex, self.normal_offset, 3)
        return np.zeros(3)

    def get_texture(self, vertex: Any) -> np.ndarray:
        if self.texture_offset is not None:
            return _read(vertex, self.texture_offset, 2)
        return np.zeros(2)

    def get_color(self, vertex: Any) -> np.ndarray:
        """Read the colour as RGBA, filling missing channels; white when absent."""
        if self.color_offset is not None:
            if self.color_size == 2:
                return np.concatenate([_read(vertex, self.color_offset, 2), [0.0, 1.0]])
            if self.color_size == 3:
                return np.concatenate([_read(vertex, self.color_offset, 3), [1.0]])
            if self.color_size == 4:
                return _read(vertex, self.color_offset, 4)
        return np.ones(4)


def create_vertex(
    vertex_type: type,
    pos: Vector,
    norm: Vector,
    uv: Vector,
    col: Vector,
    vmap: VertexParamMap | None = None,
) -> Any:
    """Create a vertex of ``vertex_type``, setting whichever attributes it has."""
    if vmap is None:
        vmap = VertexParamMap.for_type(vertex_type)
    vertex = vertex_type()
    vmap.set_position(vertex, pos)
    vmap.set_normal(vertex, norm)
    vmap.set_texture(vertex, uv)
    vmap.set_color(vertex, col)
    return vertex