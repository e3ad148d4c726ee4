"""In-memory GPU-style buffers holding vertex and index data.

Each buffer receives a unique non-zero handle when created, remembers its
usage hint, and records the bytes loaded into it along with the size and
number of elements. Binding is tracked per buffer slot, so only one buffer
of each type is bound at a time.
"""

from __future__ import annotations

import itertools
from enum import IntEnum
from typing import Any

import numpy as np


class BufferType(IntEnum):
    """The slot a buffer binds to."""

    VERTEX = 0x8892  # GL_ARRAY_BUFFER
    INDEX = 0x8893  # GL_ELEMENT_ARRAY_BUFFER


class BufferUsage(IntEnum):
    """Hints describing how often a buffer's contents change and who reads them."""

    STREAM_DRAW = 0x88E0
    STREAM_READ = 0x88E1
    STREAM_COPY = 0x88E2
    STATIC_DRAW = 0x88E4
    STATIC_READ = 0x88E5
    STATIC_COPY = 0x88E6
    DYNAMIC_DRAW = 0x88E8
    DYNAMIC_READ = 0x88E9
    DYNAMIC_COPY = 0x88EA


class IndexType(IntEnum):
    """The element type stored in an index buffer."""

    UBYTE = 0x1401  # GL_UNSIGNED_BYTE
    USHORT = 0x1403  # GL_UNSIGNED_SHORT
    UINT = 0x1405  # GL_UNSIGNED_INT
    UNKNOWN = 0  # GL_NONE


_INDEX_DTYPES: dict[np.dtype, IndexType] = {
    np.dtype(np.uint8): IndexType.UBYTE,
    np.dtype(np.uint16): IndexType.USHORT,
    np.dtype(np.uint32): IndexType.UINT,
}

_handles = itertools.count(1)
_bindings: dict[BufferType, int] = {kind: 0 for kind in BufferType}


def _as_array(data: Any) -> np.ndarray:
    if isinstance(data, np.ndarray):
        return np.ascontiguousarray(data)
    if isinstance(data, (bytes, bytearray, memoryview)):
        return np.frombuffer(bytes(data), dtype=np.uint8)
    # Plain Python sequences are treated as single-precision floats.
    return np.ascontiguousarray(np.asarray(data, dtype=np.float32))


class Buffer:
    """Base class for all buffer types; create a VertexBuffer or IndexBuffer instead."""

    def __init__(self, buffer_type: BufferType, usage: BufferUsage) -> None:
        if type(self) is Buffer:
            raise TypeError("Buffer is abstract; use VertexBuffer or IndexBuffer")
        self._type = BufferType(buffer_type)
        self._usage = BufferUsage(usage)
        self._handle = next(_handles)
        self._element_size = 0
        self._element_count = 0
        self._data = b""

    def __enter__(self) -> "Buffer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def release(self) -> None:
        """Free this buffer's handle and contents."""
        if self._handle != 0:
            if _bindings[self._type] == self._handle:
                _bindings[self._type] = 0
            self._handle = 0
            self._data = b""

    def load_data(self, data: Any) -> None:
        """Load an array of elements; each array item is one element."""
        array = _as_array(data)
        self._store(array.tobytes(), array.itemsize, array.size)

    def _store(self, raw: bytes, element_size: int, element_count: int) -> None:
        if element_size < 0 or element_count < 0:
            raise ValueError("element size and count must not be negative")
        needed = element_size * element_count
        if len(raw) < needed:
            raise ValueError(
                f"data holds {len(raw)} bytes but {needed} bytes were requested"
            )
        self._data = bytes(raw[:needed])
        self._element_size = element_size
        self._element_count = element_count

    @property
    def data(self) -> bytes:
        """The raw bytes currently loaded into the buffer."""
        return self._data

    @property
    def element_count(self) -> int:
        return self._element_count

    @property
    def element_size(self) -> int:
        return self._element_size

    @property
    def total_size(self) -> int:
        """The total size of the buffer contents, in bytes."""
        return self._element_count * self._element_size

    @property
    def buffer_type(self) -> BufferType:
        return self._type

    @property
    def usage(self) -> BufferUsage:
        return self._usage

    @property
    def handle(self) -> int:
        return self._handle

    @property
    def is_bound(self) -> bool:
        return self._handle != 0 and _bindings[self._type] == self._handle

    def bind(self) -> None:
        """Bind this buffer to the slot given by its type."""
        _bindings[self._type] = self._handle

    @staticmethod
    def unbind(buffer_type: BufferType) -> None:
        """Clear whichever buffer is bound to the given slot."""
        _bindings[BufferType(buffer_type)] = 0

    @staticmethod
    def bound_handle(buffer_type: BufferType) -> int:
        """The handle bound to the given slot, or 0 when none is."""
        return _bindings[BufferType(buffer_type)]


class VertexBuffer(Buffer):
    """A buffer holding vertex data."""

    def __init__(self, usage: BufferUsage = BufferUsage.STATIC_DRAW) -> None:
        super().__init__(BufferType.VERTEX, usage)

    @staticmethod
    def unbind(buffer_type: BufferType = BufferType.VERTEX) -> None:
        """Clear the bound vertex buffer."""
        Buffer.unbind(buffer_type)


class IndexBuffer(Buffer):
    """A buffer holding 8, 16 or 32-bit unsigned indices."""

    def __init__(self, usage: BufferUsage = BufferUsage.STATIC_DRAW) -> None:
        super().__init__(BufferType.INDEX, usage)
        self._element_type = IndexType.UNKNOWN

    @property
    def element_type(self) -> IndexType:
        return self._element_type

    def load_data(self, data: Any) -> None:
        """Load an array of uint8, uint16 or uint32 indices."""
        if not isinstance(data, np.ndarray):
            raise TypeError("index data must be a numpy array of uint8, uint16 or uint32")
        element_type = _INDEX_DTYPES.get(data.dtype.newbyteorder("="))
        if element_type is None:
            raise TypeError("index data must be one of uint8, uint16 or uint32")
        array = np.ascontiguousarray(data)
        self._store(array.tobytes(), array.itemsize, array.size)
        self._element_type = element_type

    def load_raw(
        self, data: Any, element_size: int, element_count: int, element_type: IndexType
    ) -> None:
        """Load raw bytes, stating the element size, count and index type explicitly."""
        self._store(bytes(memoryview(data).cast("B")), element_size, element_count)
        self._element_type = IndexType(element_type)

    @property
    def indices(self) -> np.ndarray:
        """The loaded indices as an array of the matching unsigned type."""
        for dtype, kind in _INDEX_DTYPES.items():
            if kind is self._element_type:
                return np.frombuffer(self._data, dtype=dtype)
        raise ValueError("index buffer has no known element type")

    @staticmethod
    def unbind(buffer_type: BufferType = BufferType.INDEX) -> None:
        """Clear the bound index buffer."""
        Buffer.unbind(buffer_type)