import numpy as np
import pytest

from meshforge.vertex_array import AttribUsage, AttributeType, BufferAttribute
from meshforge.vertex_map import VertexParamMap, create_vertex
from meshforge.vertex_types import (
    VertexPosCol,
    VertexPosNormTex,
    VertexPosNormTexCol,
)


def test_map_for_pos_col_finds_position_and_color_only():
    vmap = VertexParamMap.for_type(VertexPosCol)
    assert vmap.has_position and vmap.has_color
    assert not vmap.has_normal and not vmap.has_texture
    assert vmap.position_offset == 0
    assert vmap.color_offset == VertexPosCol.DTYPE.fields["color"][1]
    assert vmap.color_size == 4


def test_map_for_pos_norm_tex_has_no_color():
    vmap = VertexParamMap.for_type(VertexPosNormTex)
    assert vmap.has_texture and vmap.has_normal
    assert not vmap.has_color
    assert vmap.texture_offset == VertexPosNormTex.DTYPE.fields["uv"][1]


def test_empty_decl_maps_nothing():
    vmap = VertexParamMap()
    assert not (vmap.has_position or vmap.has_normal or vmap.has_texture or vmap.has_color)
    assert vmap.color_size == 0


def test_position_round_trip():
    vmap = VertexParamMap.for_type(VertexPosNormTexCol)
    vertex = VertexPosNormTexCol()
    vmap.set_position(vertex, [1.5, -2.0, 3.25])
    assert vertex.position == (1.5, -2.0, 3.25)
    assert np.allclose(vmap.get_position(vertex), [1.5, -2.0, 3.25])


def test_missing_attributes_are_skipped_and_read_as_defaults():
    vmap = VertexParamMap.for_type(VertexPosCol)
    vertex = VertexPosCol()
    vmap.set_normal(vertex, [0.0, 1.0, 0.0])
    vmap.set_texture(vertex, [0.5, 0.5])
    assert vertex == VertexPosCol()
    assert np.array_equal(vmap.get_normal(vertex), np.zeros(3))
    assert np.array_equal(vmap.get_texture(vertex), np.zeros(2))


def test_color_defaults_to_white_when_absent():
    vmap = VertexParamMap.for_type(VertexPosNormTex)
    assert np.array_equal(vmap.get_color(VertexPosNormTex()), np.ones(4))


def test_three_component_color_reads_with_opaque_alpha():
    stride = VertexPosCol.DTYPE.itemsize
    offset = VertexPosCol.DTYPE.fields["color"][1]
    vmap = VertexParamMap([BufferAttribute(1, 3, AttributeType.FLOAT, stride, offset, AttribUsage.COLOR)])
    vertex = VertexPosCol((0, 0, 0), (0.25, 0.5, 0.75, 0.125))
    assert np.allclose(vmap.get_color(vertex), [0.25, 0.5, 0.75, 1.0])
    vmap.set_color(vertex, [1.0, 0.0, 0.0, 0.0])
    assert vertex.color == (1.0, 0.0, 0.0, 0.125)


def test_set_color_needs_enough_components():
    vmap = VertexParamMap.for_type(VertexPosCol)
    with pytest.raises(ValueError):
        vmap.set_color(VertexPosCol(), [1.0, 0.0])


def test_non_vertex_object_rejected():
    vmap = VertexParamMap.for_type(VertexPosCol)
    with pytest.raises(TypeError):
        vmap.set_position(object(), [0.0, 0.0, 0.0])


def test_create_vertex_sets_every_attribute():
    vertex = create_vertex(
        VertexPosNormTexCol, (1, 2, 3), (0, 0, 1), (0.25, 0.75), (0.1, 0.2, 0.3, 0.4)
    )
    assert vertex.position == (1.0, 2.0, 3.0)
    assert vertex.normal == (0.0, 0.0, 1.0)
    assert vertex.uv == (0.25, 0.75)
    assert vertex.color == (0.1, 0.2, 0.3, 0.4)


def test_create_vertex_ignores_fields_the_type_lacks():
    vmap = VertexParamMap.for_type(VertexPosCol)
    vertex = create_vertex(VertexPosCol, (1, 1, 1), (0, 1, 0), (0.5, 0.5), (1, 0, 0, 1), vmap)
    assert vertex == VertexPosCol((1, 1, 1), (1, 0, 0, 1))