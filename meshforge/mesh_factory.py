"""Procedural mesh generation: cubes, spheres and planes.

Every generator appends vertices and triangle indices to a
:class:`~meshforge.mesh_builder.MeshBuilder`. Attributes are written through
a :class:`~meshforge.vertex_map.VertexParamMap`, so any vertex type works; the
attributes it lacks are skipped. A vertex type with no position attribute is
left untouched and a warning is logged.
"""

from __future__ import annotations

import copy
import logging
import math
import operator
from typing import Any, Sequence

import numpy as np

from .mesh_builder import MeshBuilder
from .vertex_map import VertexParamMap, create_vertex

logger = logging.getLogger(__name__)

Vector = Sequence[float] | np.ndarray

_WHITE = (1.0, 1.0, 1.0, 1.0)
_ZERO3 = (0.0, 0.0, 0.0)

_GOLDEN = (1.0 + math.sqrt(5.0)) / 2.0

_ICO_DIRECTIONS = (
    (-1.0, _GOLDEN, 0.0),
    (1.0, _GOLDEN, 0.0),
    (-1.0, -_GOLDEN, 0.0),
    (1.0, -_GOLDEN, 0.0),
    (0.0, -1.0, _GOLDEN),
    (0.0, 1.0, _GOLDEN),
    (0.0, -1.0, -_GOLDEN),
    (0.0, 1.0, -_GOLDEN),
    (_GOLDEN, 0.0, -1.0),
    (_GOLDEN, 0.0, 1.0),
    (-_GOLDEN, 0.0, -1.0),
    (-_GOLDEN, 0.0, 1.0),
)

_ICO_FACES = (
    # 5 faces around point 0
    (0, 11, 5), (0, 5, 1), (0, 1, 7), (0, 7, 10), (0, 10, 11),
    # 5 adjacent faces
    (1, 5, 9), (5, 11, 4), (11, 10, 2), (10, 7, 6), (7, 1, 8),
    # 5 faces around point 3
    (3, 9, 4), (3, 4, 2), (3, 2, 6), (3, 6, 8), (3, 8, 9),
    # 5 adjacent faces
    (4, 9, 5), (2, 4, 11), (6, 2, 10), (8, 6, 7), (9, 8, 1),
)

_CUBE_CORNERS = np.array(
    [
        (-0.5, -0.5, -0.5),
        (0.5, -0.5, -0.5),
        (-0.5, 0.5, -0.5),
        (0.5, 0.5, -0.5),
        (-0.5, -0.5, 0.5),
        (0.5, -0.5, 0.5),
        (-0.5, 0.5, 0.5),
        (0.5, 0.5, 0.5),
    ]
)

_CUBE_NORMALS = np.array(
    [
        (-1.0, 0.0, 0.0),
        (1.0, 0.0, 0.0),
        (0.0, -1.0, 0.0),
        (0.0, 1.0, 0.0),
        (0.0, 0.0, -1.0),
        (0.0, 0.0, 1.0),
    ]
)

_QUAD_UVS = ((0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0))

# (normal index, corner indices) for bottom, top, left, right, front and back faces.
_CUBE_FACES = (
    (4, (0, 2, 3, 1)),
    (5, (6, 4, 5, 7)),
    (0, (0, 4, 6, 2)),
    (1, (3, 7, 5, 1)),
    (3, (2, 6, 7, 3)),
    (2, (1, 5, 4, 0)),
)


def _vec(value: Vector, size: int, name: str) -> np.ndarray:
    array = np.asarray(value, dtype=np.float64).reshape(-1)
    if array.shape != (size,):
        raise ValueError(f"{name} needs {size} components, got {array.size}")
    return array


def _radii(radius: float | Vector) -> np.ndarray:
    array = np.asarray(radius, dtype=np.float64).reshape(-1)
    if array.size == 1:
        return np.full(3, float(array[0]))
    if array.size != 3:
        raise ValueError(f"radius must be a number or a 3-component vector, got {array.size}")
    return array


def _normalize(vector: np.ndarray) -> np.ndarray:
    length = np.linalg.norm(vector)
    if length == 0.0:
        raise ValueError("cannot normalize a zero-length vector")
    return vector / length


def _check_tessellation(tessellation: Any) -> int:
    value = operator.index(tessellation)
    if value < 0:
        raise ValueError("tessellation must not be negative")
    return value


def _map_for(mesh: MeshBuilder, generator: str) -> VertexParamMap | None:
    vmap = VertexParamMap.for_type(mesh.vertex_type)
    if not vmap.has_position:
        logger.warning("Vertex type does not have position attribute, aborting %s", generator)
        return None
    return vmap


def _sphere_uv(direction: np.ndarray) -> tuple[float, float]:
    u = math.atan2(direction[1], direction[0]) / (2.0 * math.pi)
    v = math.asin(max(-1.0, min(1.0, direction[2]))) / math.pi + 0.5
    return u, v


def _euler_matrix(euler_deg: Vector) -> np.ndarray:
    """Rotation about x, then y, then z (angles in degrees), as a 4x4 matrix."""
    x, y, z = np.radians(_vec(euler_deg, 3, "euler_deg"))
    cx, sx = math.cos(x), math.sin(x)
    cy, sy = math.cos(y), math.sin(y)
    cz, sz = math.cos(z), math.sin(z)
    rx = np.array([[1, 0, 0], [0, cx, -sx], [0, sx, cx]])
    ry = np.array([[cy, 0, sy], [0, 1, 0], [-sy, 0, cy]])
    rz = np.array([[cz, -sz, 0], [sz, cz, 0], [0, 0, 1]])
    result = np.identity(4)
    result[:3, :3] = rz @ ry @ rx
    return result


def add_cube(
    mesh: MeshBuilder,
    pos: Vector,
    scale: Vector,
    euler_deg: Vector = _ZERO3,
    col: Vector = _WHITE,
) -> None:
    """Add a unit cube scaled, rotated by Euler angles in degrees, then moved to ``pos``."""
    translate = np.identity(4)
    translate[:3, 3] = _vec(pos, 3, "pos")
    scaling = np.diag([*_vec(scale, 3, "scale"), 1.0])
    add_cube_transform(mesh, translate @ _euler_matrix(euler_deg) @ scaling, col)


def add_cube_transform(mesh: MeshBuilder, transform: Any, col: Vector = _WHITE) -> None:
    """Add a 1x1x1 cube centred on the origin, transformed by a 4x4 matrix."""
    matrix = np.asarray(transform, dtype=np.float64)
    if matrix.shape != (4, 4):
        raise ValueError(f"transform must be a 4x4 matrix, got shape {matrix.shape}")
    colour = _vec(col, 4, "col")
    vmap = _map_for(mesh, "AddCube")
    if vmap is None:
        return

    homogeneous = np.hstack([_CUBE_CORNERS, np.ones((8, 1))])
    positions = (matrix @ homogeneous.T).T[:, :3]
    # Normals use only the upper 3x3 part of the transform.
    normals = (matrix[:3, :3] @ _CUBE_NORMALS.T).T

    for normal_index, corners in _CUBE_FACES:
        face = [
            mesh.add_vertex(
                create_vertex(
                    mesh.vertex_type, positions[corner], normals[normal_index], uv, colour, vmap
                )
            )
            for corner, uv in zip(corners, _QUAD_UVS)
        ]
        mesh.add_index_tri(face[0], face[1], face[2])
        mesh.add_index_tri(face[0], face[2], face[3])


def _sphere_vertex(
    vertex_type: type,
    direction: Vector,
    radii: np.ndarray,
    center: np.ndarray,
    vmap: VertexParamMap,
    colour: np.ndarray,
) -> Any:
    unit = _normalize(np.asarray(direction, dtype=np.float64))
    vertex = vertex_type()
    vmap.set_position(vertex, center + unit * radii)
    vmap.set_normal(vertex, unit)
    vmap.set_texture(vertex, _sphere_uv(unit))
    vmap.set_color(vertex, colour)
    return vertex


def _middle_point(
    vertex_type: type,
    radii: np.ndarray,
    center: np.ndarray,
    a: int,
    b: int,
    vertices: list,
    cache: dict[tuple[int, int], int],
    vmap: VertexParamMap,
) -> int:
    key = (a, b) if a < b else (b, a)
    cached = cache.get(key)
    if cached is not None:
        return cached

    p1, p2 = vertices[a], vertices[b]
    n1 = _normalize(vmap.get_position(p1) - center)
    n2 = _normalize(vmap.get_position(p2) - center)
    unit = _normalize((n1 + n2) / 2.0)

    vertex = vertex_type()
    vmap.set_position(vertex, center + unit * radii)
    vmap.set_normal(vertex, unit)
    vmap.set_texture(vertex, _sphere_uv(unit))
    if vmap.has_color:
        vmap.set_color(vertex, (vmap.get_color(p1) + vmap.get_color(p2)) / 2.0)

    index = len(vertices)
    cache[key] = index
    vertices.append(vertex)
    return index


def _correct_uv_seams(
    vertices: list, indices: list[int], offset: int, vmap: VertexParamMap
) -> None:
    """Duplicate vertices of triangles that wrap around the texture seam."""
    if not vmap.has_texture:
        return

    def split(slot: int, uv: np.ndarray) -> None:
        source = vertices[indices[slot]]
        indices[slot] = len(vertices)
        vertex = copy.copy(source)
        vmap.set_texture(vertex, uv)
        vertices.append(vertex)

    first = offset // 3
    count = (len(indices) - offset) // 3
    for tri in range(first, first + count):
        base = tri * 3
        uv0 = vmap.get_texture(vertices[indices[base]])
        uv1 = vmap.get_texture(vertices[indices[base + 1]])
        uv2 = vmap.get_texture(vertices[indices[base + 2]])
        d1 = uv1[0] - uv0[0]
        d2 = uv2[0] - uv0[0]
        if abs(d1) > 0.5 and abs(d2) > 0.5:
            split(base, uv0 + np.array([1.0 if d1 > 0.0 else -1.0, 0.0]))
        elif abs(d1) > 0.5:
            split(base + 1, uv1 + np.array([1.0 if d1 < 0.0 else -1.0, 0.0]))
        elif abs(d2) > 0.5:
            split(base + 2, uv2 + np.array([1.0 if d2 < 0.0 else -1.0, 0.0]))


def add_ico_sphere(
    mesh: MeshBuilder,
    center: Vector,
    radius: float | Vector,
    tessellation: int = 0,
    col: Vector = _WHITE,
) -> None:
    """Add an icosphere; each tessellation step splits every triangle into four.

    ``radius`` is a single radius or one radius per axis.
    """
    steps = _check_tessellation(tessellation)
    centre = _vec(center, 3, "center")
    radii = _radii(radius)
    colour = _vec(col, 4, "col")
    vmap = _map_for(mesh, "AddIcoSphere")
    if vmap is None:
        return

    vertices = mesh.vertices
    indices = mesh.indices
    index_offset = len(vertices)
    initial_index = len(indices)
    vertex_type = mesh.vertex_type

    vertices.extend(
        _sphere_vertex(vertex_type, direction, radii, centre, vmap, colour)
        for direction in _ICO_DIRECTIONS
    )
    faces = [tuple(index_offset + i for i in face) for face in _ICO_FACES]

    cache: dict[tuple[int, int], int] = {}
    for _ in range(steps):
        refined = []
        for i0, i1, i2 in faces:
            a = _middle_point(vertex_type, radii, centre, i0, i1, vertices, cache, vmap)
            b = _middle_point(vertex_type, radii, centre, i1, i2, vertices, cache, vmap)
            c = _middle_point(vertex_type, radii, centre, i2, i0, vertices, cache, vmap)
            refined.extend([(i0, a, c), (i1, b, a), (i2, c, b), (a, b, c)])
        faces = refined

    for face in faces:
        indices.extend(face)

    _correct_uv_seams(vertices, indices, initial_index, vmap)


def add_uv_sphere(
    mesh: MeshBuilder,
    center: Vector,
    radius: float | Vector,
    tessellation: int = 0,
    col: Vector = _WHITE,
) -> None:
    """Add a latitude/longitude sphere with ``1 + 2**(tessellation + 1)`` slices.

    ``radius`` is a single radius or one radius per axis.
    """
    steps = _check_tessellation(tessellation)
    centre = _vec(center, 3, "center")
    radii = _radii(radius)
    colour = _vec(col, 4, "col")
    vmap = _map_for(mesh, "AddUvSphere")
    if vmap is None:
        return

    slices = 1 + 2 ** (steps + 1)
    stacks = slices // 2 + 1
    vertices = mesh.vertices
    indices = mesh.indices
    offset = len(vertices)

    d_long = (math.pi * 2.0) / slices
    d_lat = math.pi / stacks

    for i in range(stacks + 1):
        stack_angle = math.pi / 2.0 - i * d_lat
        xy = math.cos(stack_angle)
        z = math.sin(stack_angle)
        for j in range(slices + 1):
            slice_angle = j * d_long
            normal = np.array([xy * math.cos(slice_angle), xy * math.sin(slice_angle), z])
            vertex = mesh.vertex_type()
            vmap.set_normal(vertex, normal)
            vmap.set_position(vertex, centre + normal * radii)
            vmap.set_texture(vertex, (j / slices, 1.0 - i / stacks))
            vmap.set_color(vertex, colour)
            vertices.append(vertex)

    vmap.set_texture(vertices[offset], (0.5, 1.0))
    vmap.set_texture(vertices[-1], (0.5, 0.0))

    for i in range(stacks):
        k1 = i * (slices + 1)
        k2 = k1 + slices + 1
        for j in range(slices):
            if i != 0:
                indices.extend((offset + k1 + j, offset + k2 + j, offset + k1 + j + 1))
            if i != stacks - 1:
                indices.extend((offset + k1 + j + 1, offset + k2 + j, offset + k2 + j + 1))


def add_plane(
    mesh: MeshBuilder,
    pos: Vector,
    normal: Vector,
    tangent: Vector,
    scale: Vector,
    col: Vector = _WHITE,
) -> None:
    """Add a quad centred on ``pos`` facing ``normal``, with its x axis along ``tangent``."""
    centre = _vec(pos, 3, "pos")
    n_norm = _normalize(_vec(normal, 3, "normal"))
    n_tangent = _normalize(_vec(tangent, 3, "tangent"))
    half = _vec(scale, 2, "scale") / 2.0
    colour = _vec(col, 4, "col")
    vmap = _map_for(mesh, "AddPlane")
    if vmap is None:
        return

    binormal = np.cross(n_norm, n_tangent)
    along = n_tangent * half[0]
    across = binormal * half[1]
    positions = (
        centre - along - across,
        centre - along + across,
        centre + along + across,
        centre + along - across,
    )

    p1, p2, p3, p4 = (
        mesh.add_vertex(create_vertex(mesh.vertex_type, position, n_norm, uv, colour, vmap))
        for position, uv in zip(positions, _QUAD_UVS)
    )
    mesh.add_index_tri(p1, p3, p2)
    mesh.add_index_tri(p1, p4, p3)