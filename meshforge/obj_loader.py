"""Loading Wavefront OBJ geometry into a vertex array object.

Supports ``v``, ``vt``, ``vn`` and ``f`` statements. Polygons are split into
triangle fans, negative (relative) indices are resolved, and each distinct
position/texture/normal combination becomes one vertex. Other statements are
ignored.
"""

from __future__ import annotations

from typing import Iterable

from .mesh_builder import MeshBuilder
from .vertex_array import VertexArrayObject
from .vertex_types import VertexPosNormTexCol

_WHITE = (1.0, 1.0, 1.0, 1.0)


def _floats(fields: list[str], minimum: int, size: int, line: int) -> tuple[float, ...]:
    if len(fields) < minimum:
        raise ValueError(f"line {line}: expected at least {minimum} values")
    try:
        values = [float(field) for field in fields[:size]]
    except ValueError as exc:
        raise ValueError(f"line {line}: {exc}") from None
    values.extend([0.0] * (size - len(values)))
    return tuple(values)


def _resolve(text: str, count: int, kind: str, line: int) -> int | None:
    if text == "":
        return None
    try:
        number = int(text)
    except ValueError:
        raise ValueError(f"line {line}: invalid {kind} index {text!r}") from None
    index = number - 1 if number > 0 else count + number
    if number == 0 or not 0 <= index < count:
        raise ValueError(f"line {line}: {kind} index {number} is out of range")
    return index


def _parse(lines: Iterable[str]) -> MeshBuilder[VertexPosNormTexCol]:
    positions: list[tuple[float, ...]] = []
    uvs: list[tuple[float, ...]] = []
    normals: list[tuple[float, ...]] = []
    mesh: MeshBuilder[VertexPosNormTexCol] = MeshBuilder(VertexPosNormTexCol)
    corners: dict[tuple[int, int | None, int | None], int] = {}

    def corner(token: str, line: int) -> int:
        parts = token.split("/")
        if len(parts) > 3 or parts[0] == "":
            raise ValueError(f"line {line}: malformed face vertex {token!r}")
        parts += [""] * (3 - len(parts))
        vi = _resolve(parts[0], len(positions), "position", line)
        ti = _resolve(parts[1], len(uvs), "texture", line)
        ni = _resolve(parts[2], len(normals), "normal", line)
        key = (vi, ti, ni)
        if key not in corners:
            corners[key] = mesh.add_vertex(
                VertexPosNormTexCol(
                    positions[vi],
                    normals[ni] if ni is not None else (0.0, 0.0, 0.0),
                    uvs[ti] if ti is not None else (0.0, 0.0),
                    _WHITE,
                )
            )
        return corners[key]

    for number, raw in enumerate(lines, start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        keyword, *fields = line.split()
        if keyword == "v":
            positions.append(_floats(fields, 3, 3, number))
        elif keyword == "vt":
            uvs.append(_floats(fields, 1, 2, number))
        elif keyword == "vn":
            normals.append(_floats(fields, 3, 3, number))
        elif keyword == "f":
            if len(fields) < 3:
                raise ValueError(f"line {number}: a face needs at least 3 vertices")
            indices = [corner(token, number) for token in fields]
            for b, c in zip(indices[1:-1], indices[2:]):
                mesh.add_index_tri(indices[0], b, c)
    return mesh


def load_from_file(filename: str) -> VertexArrayObject:
    """Load an OBJ file and bake it into a vertex array object."""
    with open(filename, encoding="utf-8") as handle:
        mesh = _parse(handle)
    return mesh.bake()