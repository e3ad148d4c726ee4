"""Vertex array objects: a mesh's vertex buffers, attribute layout and index buffer.

A vertex array object groups one or more vertex buffers, the attribute layout
describing how each buffer feeds the vertex shader, and an optional index
buffer. Drawing produces a :class:`DrawCall` describing what would be issued.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Iterable

from .buffers import IndexBuffer, IndexType, VertexBuffer

logger = logging.getLogger(__name__)


class AttribUsage(IntEnum):
    """A hint describing what a vertex attribute is used for."""

    UNKNOWN = 0
    POSITION = 1
    COLOR = 2
    COLOR1 = 3
    COLOR2 = 4
    COLOR3 = 5
    TEXTURE = 6
    TEXTURE1 = 7
    TEXTURE2 = 8
    TEXTURE3 = 9
    NORMAL = 10
    TANGENT = 11
    BINORMAL = 12
    USER0 = 13
    USER1 = 14
    USER2 = 15
    USER3 = 16


class AttributeType(IntEnum):
    """The component type of a vertex attribute."""

    BYTE = 0x1400
    UBYTE = 0x1401
    SHORT = 0x1402
    USHORT = 0x1403
    INT = 0x1404
    UINT = 0x1405
    FLOAT = 0x1406
    DOUBLE = 0x140A
    UNKNOWN = 0


class DrawMode(IntEnum):
    """The primitive topology used when drawing."""

    POINTS = 0x0000
    LINE_LIST = 0x0001
    LINE_LOOP = 0x0002
    LINE_STRIP = 0x0003
    TRIANGLE_LIST = 0x0004
    TRIANGLE_STRIP = 0x0005
    TRIANGLE_FAN = 0x0006


@dataclass(frozen=True)
class BufferAttribute:
    """How one shader input slot reads its data from a vertex buffer."""

    slot: int
    size: int
    type: AttributeType
    stride: int
    offset: int
    usage: AttribUsage = AttribUsage.UNKNOWN
    normalized: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", AttributeType(self.type))
        object.__setattr__(self, "usage", AttribUsage(self.usage))
        object.__setattr__(self, "normalized", bool(self.normalized))


@dataclass(frozen=True)
class VertexBufferBinding:
    """A vertex buffer together with the attributes it feeds."""

    buffer: VertexBuffer
    attributes: tuple[BufferAttribute, ...]


@dataclass(frozen=True)
class DrawCall:
    """A description of one draw: topology, vertex or index count and index type."""

    mode: DrawMode
    count: int
    index_type: IndexType | None = None
    first: int = 0

    @property
    def indexed(self) -> bool:
        return self.index_type is not None


_handles = itertools.count(1)


class VertexArrayObject:
    """All the buffers and attribute layout that make up a drawable mesh."""

    _bound: ClassVar[int] = 0

    def __init__(self) -> None:
        self._handle = next(_handles)
        self._index_buffer: IndexBuffer | None = None
        self._vertex_buffers: list[VertexBufferBinding] = []
        self._enabled: dict[int, BufferAttribute] = {}
        self._vertex_count = 0

    def __enter__(self) -> "VertexArrayObject":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def release(self) -> None:
        """Free this object's handle; it must not be used afterwards."""
        if self._handle != 0:
            if VertexArrayObject._bound == self._handle:
                VertexArrayObject._bound = 0
            self._handle = 0

    def _require_live(self) -> None:
        if self._handle == 0:
            raise RuntimeError("vertex array object has been released")

    @property
    def handle(self) -> int:
        return self._handle

    @property
    def index_buffer(self) -> IndexBuffer | None:
        return self._index_buffer

    @property
    def vertex_buffers(self) -> tuple[VertexBufferBinding, ...]:
        return tuple(self._vertex_buffers)

    @property
    def vertex_count(self) -> int:
        """The element count of the first vertex buffer added."""
        return self._vertex_count

    @property
    def enabled_attributes(self) -> dict[int, BufferAttribute]:
        """The attribute configured for each enabled shader input slot."""
        return dict(self._enabled)

    @property
    def is_bound(self) -> bool:
        return self._handle != 0 and VertexArrayObject._bound == self._handle

    def set_index_buffer(self, ibo: IndexBuffer | None) -> None:
        """Use ``ibo`` for indexed drawing, or ``None`` to draw vertices in order."""
        self._require_live()
        if ibo is not None and not isinstance(ibo, IndexBuffer):
            raise TypeError("index buffer must be an IndexBuffer or None")
        self._index_buffer = ibo

    def add_vertex_buffer(
        self, buffer: VertexBuffer, attributes: Iterable[BufferAttribute]
    ) -> None:
        """Attach a vertex buffer and enable the attributes it supplies."""
        self._require_live()
        if not isinstance(buffer, VertexBuffer):
            raise TypeError("buffer must be a VertexBuffer")
        attrs = tuple(attributes)
        for attrib in attrs:
            if not isinstance(attrib, BufferAttribute):
                raise TypeError("attributes must be BufferAttribute instances")

        if not self._vertex_buffers:
            self._vertex_count = buffer.element_count
        elif buffer.element_count != self._vertex_count:
            logger.warning("Buffer element count does not match vertex count of this VAO!!!")

        self._vertex_buffers.append(VertexBufferBinding(buffer, attrs))
        for attrib in attrs:
            self._enabled[attrib.slot] = attrib

    def draw(self, mode: DrawMode = DrawMode.TRIANGLE_LIST) -> DrawCall:
        """Describe drawing this mesh with the given topology."""
        self._require_live()
        mode = DrawMode(mode)
        self.bind()
        try:
            if self._index_buffer is None:
                return DrawCall(mode, self._vertex_count)
            return DrawCall(
                mode, self._index_buffer.element_count, self._index_buffer.element_type
            )
        finally:
            VertexArrayObject.unbind()

    def bind(self) -> None:
        """Make this the current vertex array object."""
        self._require_live()
        VertexArrayObject._bound = self._handle

    @staticmethod
    def unbind() -> None:
        """Clear the current vertex array object."""
        VertexArrayObject._bound = 0

    @staticmethod
    def bound_handle() -> int:
        """The handle of the current vertex array object, or 0 when none is."""
        return VertexArrayObject._bound