"""Collecting vertices and indices, then baking them into a vertex array object."""

from __future__ import annotations

import operator
from typing import Any, Generic, Iterable, TypeVar

import numpy as np

from .buffers import IndexBuffer, VertexBuffer
from .vertex_array import VertexArrayObject
from .vertex_types import pack_vertices

V = TypeVar("V")

_MAX_INDEX = 2**32 - 1


def _check_index(index: Any) -> int:
    value = operator.index(index)
    if not 0 <= value <= _MAX_INDEX:
        raise ValueError(f"index {value} is outside the 32-bit unsigned range")
    return value


class MeshBuilder(Generic[V]):
    """Accumulates vertices of one type and 32-bit indices for an interleaved mesh.

    ``vertices`` and ``indices`` are the live lists; mesh generators may
    append to or edit them directly.
    """

    def __init__(self, vertex_type: type[V]) -> None:
        if not hasattr(vertex_type, "DTYPE") or not hasattr(vertex_type, "V_DECL"):
            raise TypeError(f"{vertex_type!r} is not a vertex type")
        self.vertex_type = vertex_type
        self.vertices: list[V] = []
        self.indices: list[int] = []

    def _check_vertex(self, vertex: Any) -> None:
        if not isinstance(vertex, self.vertex_type):
            raise TypeError(
                f"expected a {self.vertex_type.__name__}, got {type(vertex).__name__}"
            )

    def add_vertex(self, vertex: V) -> int:
        """Append a vertex and return its index."""
        self._check_vertex(vertex)
        self.vertices.append(vertex)
        return len(self.vertices) - 1

    def add_vertex_range(self, data: Iterable[V]) -> int:
        """Append several vertices and return the index of the first one."""
        items = list(data)
        for vertex in items:
            self._check_vertex(vertex)
        start = len(self.vertices)
        self.vertices.extend(items)
        return start

    def add_index(self, index: int) -> None:
        self.indices.append(_check_index(index))

    def add_index_tri(self, a: int, b: int, c: int) -> None:
        """Append a triangle between three vertex indices."""
        self.indices.extend((_check_index(a), _check_index(b), _check_index(c)))

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def index_count(self) -> int:
        return len(self.indices)

    @property
    def triangle_count(self) -> int:
        """Triangles counted from the indices, or from the vertices when there are none."""
        if self.indices:
            return len(self.indices) // 3
        return len(self.vertices) // 3

    def vertex_data(self) -> np.ndarray:
        """The vertices packed into the vertex type's record layout."""
        if not self.vertices:
            return np.zeros(0, dtype=self.vertex_type.DTYPE)
        return pack_vertices(self.vertices)

    def index_data(self) -> np.ndarray:
        """The indices as a uint32 array."""
        return np.array(self.indices, dtype=np.uint32)

    def bake(self) -> VertexArrayObject:
        """Create a vertex array object holding the current mesh data."""
        vbo = VertexBuffer()
        vbo.load_data(self.vertex_data())

        ebo = IndexBuffer()
        ebo.load_data(self.index_data())

        result = VertexArrayObject()
        result.add_vertex_buffer(vbo, self.vertex_type.V_DECL)
        result.set_index_buffer(ebo)
        return result