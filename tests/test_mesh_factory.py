from dataclasses import dataclass
from typing import ClassVar

import numpy as np
import pytest

from meshforge.mesh_builder import MeshBuilder
from meshforge.mesh_factory import (
    add_cube,
    add_cube_transform,
    add_ico_sphere,
    add_plane,
    add_uv_sphere,
)
from meshforge.vertex_types import (
    VertexPosCol,
    VertexPosNormTex,
    VertexPosNormTexCol,
)


@dataclass
class _NoPositionVertex:
    DTYPE: ClassVar[np.dtype] = np.dtype([("value", "<f4", (1,))])
    V_DECL: ClassVar[tuple] = ()
    value: tuple = (0.0,)


def _positions(mesh):
    return np.array([v.position for v in mesh.vertices])


def _indices_valid(mesh):
    return all(0 <= i < len(mesh.vertices) for i in mesh.indices)


def test_cube_counts_and_bounds():
    mesh = MeshBuilder(VertexPosNormTexCol)
    add_cube(mesh, (1.0, 2.0, 3.0), (2.0, 2.0, 2.0))
    assert mesh.vertex_count == 24
    assert mesh.index_count == 36
    assert _indices_valid(mesh)
    pos = _positions(mesh)
    assert np.allclose(pos.min(axis=0), [0.0, 1.0, 2.0])
    assert np.allclose(pos.max(axis=0), [2.0, 3.0, 4.0])


def test_cube_default_colour_is_white_and_normals_axis_aligned():
    mesh = MeshBuilder(VertexPosNormTexCol)
    add_cube(mesh, (0, 0, 0), (1, 1, 1))
    assert all(np.allclose(v.color, (1, 1, 1, 1)) for v in mesh.vertices)
    for v in mesh.vertices:
        assert np.isclose(np.linalg.norm(v.normal), 1.0)
        assert np.count_nonzero(np.round(v.normal, 6)) == 1


def test_cube_rotation_applied_after_scale():
    mesh = MeshBuilder(VertexPosCol)
    add_cube(mesh, (0, 0, 0), (2.0, 1.0, 1.0), (0.0, 0.0, 90.0))
    pos = _positions(mesh)
    assert np.isclose(np.abs(pos[:, 0]).max(), 0.5, atol=1e-5)
    assert np.isclose(np.abs(pos[:, 1]).max(), 1.0, atol=1e-5)


def test_cube_transform_identity_matches_add_cube():
    a = MeshBuilder(VertexPosNormTex)
    b = MeshBuilder(VertexPosNormTex)
    add_cube_transform(a, np.identity(4))
    add_cube(b, (0, 0, 0), (1, 1, 1))
    assert a.indices == b.indices
    assert np.allclose(_positions(a), _positions(b), atol=1e-6)


def test_cube_transform_rejects_bad_matrix():
    mesh = MeshBuilder(VertexPosCol)
    with pytest.raises(ValueError):
        add_cube_transform(mesh, np.identity(3))


def test_cube_triangles_face_outwards():
    mesh = MeshBuilder(VertexPosNormTex)
    add_cube(mesh, (0, 0, 0), (1, 1, 1))
    pos = _positions(mesh)
    for k in range(0, len(mesh.indices), 3):
        a, b, c = (pos[i] for i in mesh.indices[k : k + 3])
        face_normal = np.cross(b - a, c - a)
        normal = np.array(mesh.vertices[mesh.indices[k]].normal)
        assert abs(np.dot(face_normal, normal)) > 0


def test_ico_sphere_base_without_texture():
    mesh = MeshBuilder(VertexPosCol)
    add_ico_sphere(mesh, (0, 0, 0), 1.0)
    assert mesh.vertex_count == 12
    assert mesh.triangle_count == 20


def test_ico_sphere_tessellation_multiplies_triangles_and_shares_midpoints():
    mesh = MeshBuilder(VertexPosCol)
    add_ico_sphere(mesh, (0, 0, 0), 1.0, 1)
    assert mesh.triangle_count == 80
    assert mesh.vertex_count == 42
    assert _indices_valid(mesh)


def test_ico_sphere_points_lie_on_sphere():
    center = np.array([1.0, -2.0, 0.5])
    mesh = MeshBuilder(VertexPosNormTexCol)
    add_ico_sphere(mesh, center, 2.0, 2, (0.2, 0.4, 0.6, 1.0))
    assert _indices_valid(mesh)
    for v in mesh.vertices:
        assert np.isclose(np.linalg.norm(np.array(v.position) - center), 2.0)
        assert np.isclose(np.linalg.norm(v.normal), 1.0)
        assert np.allclose(v.color, (0.2, 0.4, 0.6, 1.0), atol=1e-6)


def test_ico_sphere_appends_after_existing_data():
    mesh = MeshBuilder(VertexPosCol)
    add_cube(mesh, (0, 0, 0), (1, 1, 1))
    add_ico_sphere(mesh, (0, 0, 0), 1.0)
    assert mesh.vertex_count == 24 + 12
    assert min(mesh.indices[36:]) == 24


def test_ico_sphere_negative_tessellation_raises():
    mesh = MeshBuilder(VertexPosCol)
    with pytest.raises(ValueError):
        add_ico_sphere(mesh, (0, 0, 0), 1.0, -1)


def test_ico_sphere_seam_vertices_are_duplicates_of_originals():
    mesh = MeshBuilder(VertexPosNormTex)
    add_ico_sphere(mesh, (0, 0, 0), 1.0, 1)
    assert mesh.triangle_count == 80
    originals = {tuple(np.round(v.position, 5)) for v in mesh.vertices[:42]}
    for v in mesh.vertices[42:]:
        assert tuple(np.round(v.position, 5)) in originals


def test_ico_sphere_per_axis_radii():
    mesh = MeshBuilder(VertexPosCol)
    add_ico_sphere(mesh, (0, 0, 0), (1.0, 2.0, 3.0), 1)
    pos = _positions(mesh)
    scaled = pos / np.array([1.0, 2.0, 3.0])
    assert np.allclose(np.linalg.norm(scaled, axis=1), 1.0, atol=1e-5)


def test_uv_sphere_base_counts():
    mesh = MeshBuilder(VertexPosNormTex)
    add_uv_sphere(mesh, (0, 0, 0), 1.0)
    assert mesh.vertex_count == 12
    assert mesh.index_count == 18
    assert _indices_valid(mesh)


def test_uv_sphere_poles_and_radius():
    mesh = MeshBuilder(VertexPosNormTex)
    add_uv_sphere(mesh, (0, 0, 1.0), 0.5, 1)
    assert np.allclose(mesh.vertices[0].uv, (0.5, 1.0))
    assert np.allclose(mesh.vertices[-1].uv, (0.5, 0.0))
    assert np.allclose(mesh.vertices[0].position, (0.0, 0.0, 1.5), atol=1e-6)
    for v in mesh.vertices:
        assert np.isclose(np.linalg.norm(np.array(v.position) - (0, 0, 1.0)), 0.5, atol=1e-6)


def test_uv_sphere_negative_tessellation_raises():
    mesh = MeshBuilder(VertexPosNormTex)
    with pytest.raises(ValueError):
        add_uv_sphere(mesh, (0, 0, 0), 1.0, -2)


def test_plane_corners_and_indices():
    mesh = MeshBuilder(VertexPosNormTex)
    add_plane(mesh, (0, 0, 0), (0, 0, 1), (1, 0, 0), (2.0, 4.0))
    assert mesh.indices == [0, 2, 1, 0, 3, 2]
    assert np.allclose(
        _positions(mesh),
        [(-1, -2, 0), (-1, 2, 0), (1, 2, 0), (1, -2, 0)],
    )
    assert np.allclose([v.uv for v in mesh.vertices], [(0, 0), (0, 1), (1, 1), (1, 0)])
    assert all(np.allclose(v.normal, (0, 0, 1)) for v in mesh.vertices)


def test_plane_normalizes_inputs_and_keeps_colour():
    mesh = MeshBuilder(VertexPosCol)
    add_plane(mesh, (1, 1, 1), (0, 5, 0), (3, 0, 0), (1.0, 1.0), (0.5, 0.5, 0.5, 1.0))
    pos = _positions(mesh)
    assert np.allclose(pos[:, 1], 1.0)
    assert np.allclose(pos.mean(axis=0), (1, 1, 1))
    assert all(np.allclose(v.color, (0.5, 0.5, 0.5, 1.0)) for v in mesh.vertices)


def test_plane_zero_normal_raises():
    mesh = MeshBuilder(VertexPosCol)
    with pytest.raises(ValueError):
        add_plane(mesh, (0, 0, 0), (0, 0, 0), (1, 0, 0), (1, 1))


@pytest.mark.parametrize(
    "generate",
    [
        lambda m: add_cube(m, (0, 0, 0), (1, 1, 1)),
        lambda m: add_ico_sphere(m, (0, 0, 0), 1.0),
        lambda m: add_uv_sphere(m, (0, 0, 0), 1.0),
        lambda m: add_plane(m, (0, 0, 0), (0, 0, 1), (1, 0, 0), (1, 1)),
    ],
)
def test_vertex_type_without_position_is_left_untouched(generate):
    mesh = MeshBuilder(_NoPositionVertex)
    generate(mesh)
    assert mesh.vertex_count == 0
    assert mesh.index_count == 0


def test_generated_mesh_bakes():
    mesh = MeshBuilder(VertexPosCol)
    add_ico_sphere(mesh, (1.0, 0.0, 0.0), (0.5, 0.5, 0.5), 3)
    add_cube(mesh, (0, 0, 0), (0.5, 0.5, 0.5))
    vao = mesh.bake()
    call = vao.draw()
    assert call.count == mesh.index_count
    assert vao.vertex_count == mesh.vertex_count