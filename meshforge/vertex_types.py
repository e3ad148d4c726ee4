"""Standard vertex layouts with matching attribute declarations.

Each vertex type is a mutable dataclass of float vectors. Its ``DTYPE`` is the
tightly packed single-precision record layout, and ``V_DECL`` describes how
each field feeds a shader input slot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterable, Sequence

import numpy as np

from .vertex_array import AttribUsage, AttributeType, BufferAttribute

_ZERO3 = (0.0, 0.0, 0.0)
_ZERO2 = (0.0, 0.0)
_BLACK = (0.0, 0.0, 0.0, 1.0)


def _dtype(components: dict[str, int]) -> np.dtype:
    return np.dtype([(name, "<f4", (size,)) for name, size in components.items()])


class _Vertex:
    """Shared behaviour: component-count checks and record conversion."""

    _COMPONENTS: ClassVar[dict[str, int]] = {}
    DTYPE: ClassVar[np.dtype]
    V_DECL: ClassVar[tuple[BufferAttribute, ...]] = ()

    def __setattr__(self, name: str, value: object) -> None:
        size = self._COMPONENTS.get(name)
        if size is not None:
            values = tuple(float(v) for v in np.asarray(value, dtype=np.float64).reshape(-1))
            if len(values) != size:
                raise ValueError(f"{name} needs {size} components, got {len(values)}")
            value = values
        super().__setattr__(name, value)

    def to_record(self) -> tuple[tuple[float, ...], ...]:
        """The field values in layout order, as stored in ``DTYPE``."""
        return tuple(getattr(self, name) for name in self._COMPONENTS)


def _decl(cls: type[_Vertex], layout: Sequence[tuple[int, str, AttribUsage]]) -> tuple[BufferAttribute, ...]:
    stride = cls.DTYPE.itemsize
    return tuple(
        BufferAttribute(
            slot,
            cls._COMPONENTS[name],
            AttributeType.FLOAT,
            stride,
            cls.DTYPE.fields[name][1],
            usage,
        )
        for slot, name, usage in layout
    )


@dataclass
class VertexPosCol(_Vertex):
    """A vertex with a position and an RGBA colour."""

    _COMPONENTS: ClassVar[dict[str, int]] = {"position": 3, "color": 4}
    DTYPE: ClassVar[np.dtype] = _dtype(_COMPONENTS)

    position: tuple[float, ...] = _ZERO3
    color: tuple[float, ...] = _BLACK

    @classmethod
    def from_components(cls, x, y, z, r, g, b, a=1.0) -> "VertexPosCol":
        return cls((x, y, z), (r, g, b, a))


@dataclass
class VertexPosNormCol(_Vertex):
    """A vertex with a position, a normal and an RGBA colour."""

    _COMPONENTS: ClassVar[dict[str, int]] = {"position": 3, "normal": 3, "color": 4}
    DTYPE: ClassVar[np.dtype] = _dtype(_COMPONENTS)

    position: tuple[float, ...] = _ZERO3
    normal: tuple[float, ...] = _ZERO3
    color: tuple[float, ...] = _BLACK

    @classmethod
    def from_components(cls, x, y, z, nx, ny, nz, r, g, b, a=1.0) -> "VertexPosNormCol":
        return cls((x, y, z), (nx, ny, nz), (r, g, b, a))


@dataclass
class VertexPosNormTex(_Vertex):
    """A vertex with a position, a normal and texture coordinates."""

    _COMPONENTS: ClassVar[dict[str, int]] = {"position": 3, "normal": 3, "uv": 2}
    DTYPE: ClassVar[np.dtype] = _dtype(_COMPONENTS)

    position: tuple[float, ...] = _ZERO3
    normal: tuple[float, ...] = _ZERO3
    uv: tuple[float, ...] = _ZERO2

    @classmethod
    def from_components(cls, x, y, z, nx, ny, nz, u, v) -> "VertexPosNormTex":
        return cls((x, y, z), (nx, ny, nz), (u, v))


@dataclass
class VertexPosNormTexCol(_Vertex):
    """A vertex with a position, a normal, texture coordinates and an RGBA colour."""

    _COMPONENTS: ClassVar[dict[str, int]] = {"position": 3, "normal": 3, "uv": 2, "color": 4}
    DTYPE: ClassVar[np.dtype] = _dtype(_COMPONENTS)

    position: tuple[float, ...] = _ZERO3
    normal: tuple[float, ...] = _ZERO3
    uv: tuple[float, ...] = _ZERO2
    color: tuple[float, ...] = _BLACK

    @classmethod
    def from_components(
        cls, x, y, z, nx, ny, nz, u, v, r, g, b, a=1.0
    ) -> "VertexPosNormTexCol":
        return cls((x, y, z), (nx, ny, nz), (u, v), (r, g, b, a))


VertexPosCol.V_DECL = _decl(
    VertexPosCol,
    [(0, "position", AttribUsage.POSITION), (1, "color", AttribUsage.COLOR)],
)
VertexPosNormCol.V_DECL = _decl(
    VertexPosNormCol,
    [
        (0, "position", AttribUsage.POSITION),
        (1, "color", AttribUsage.COLOR),
        (2, "normal", AttribUsage.NORMAL),
    ],
)
VertexPosNormTex.V_DECL = _decl(
    VertexPosNormTex,
    [
        (0, "position", AttribUsage.POSITION),
        (2, "normal", AttribUsage.NORMAL),
        (3, "uv", AttribUsage.TEXTURE),
    ],
)
VertexPosNormTexCol.V_DECL = _decl(
    VertexPosNormTexCol,
    [
        (0, "position", AttribUsage.POSITION),
        (1, "color", AttribUsage.COLOR),
        (2, "normal", AttribUsage.NORMAL),
        (3, "uv", AttribUsage.TEXTURE),
    ],
)


def pack_vertices(vertices: Iterable[_Vertex]) -> np.ndarray:
    """Pack vertices of one type into a structured array of that type's ``DTYPE``."""
    items = list(vertices)
    if not items:
        raise ValueError("cannot pack an empty vertex list; the layout is unknown")
    kind = type(items[0])
    if not isinstance(items[0], _Vertex):
        raise TypeError(f"{kind.__name__} is not a vertex type")
    if any(type(vertex) is not kind for vertex in items):
        raise TypeError("all vertices must be of the same type")
    return np.array([vertex.to_record() for vertex in items], dtype=kind.DTYPE)