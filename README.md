# meshforge

Build triangle meshes procedurally, describe vertex layouts, load OBJ
geometry, and model vertex/index buffers, vertex array objects and a
perspective or orthographic camera, all in plain Python on top of NumPy.

## Installation

```
pip install meshforge
```

To run the test suite:

```
pip install "meshforge[test]"
pytest
```

## Modules

### `meshforge.camera`

- `perspective(fov_radians, aspect, near, far)`,
  `orthographic(left, right, bottom, top, near, far)` and
  `look_at_matrix(eye, center, up)` return right-handed 4x4 NumPy
  matrices (acting on column vectors, clip depth in [-1, 1]). They raise
  `ValueError` for degenerate input such as a zero aspect ratio or
  coincident planes.
- `Camera` has `position`, `forward` and `up` properties, `look_at(point)`,
  `resize_window(width, height)`, `set_fov_degrees(value)`, the
  `fov_radians` and `ortho_vertical_scale` properties, and
  `set_ortho_enabled(value)`. Its `view`, `projection` and
  `view_projection` matrices are read-only arrays; `view_projection` is
  cached and recomputed only after the view or projection changes.

Two behaviours to be aware of: `set_ortho_enabled` always switches the
camera to orthographic mode, whatever value is passed; and a new camera's
`fov_radians` is `math.degrees(90.0)`, so set a field of view with
`set_fov_degrees` or `fov_radians` before relying on the perspective
projection.

### `meshforge.buffers`

`VertexBuffer` and `IndexBuffer` hold data in memory, together with the
`BufferType`, `BufferUsage` and `IndexType` enumerations. Each buffer gets
a unique non-zero `handle`, and reports `element_size`, `element_count`,
`total_size` and its raw `data` bytes. `load_data` takes a NumPy array
(one item per element), bytes, or a sequence of numbers (stored as
float32). An `IndexBuffer` accepts only uint8, uint16 or uint32 arrays and
infers its `element_type`; `load_raw(data, element_size, element_count,
element_type)` states it explicitly, and `indices` reads the data back.
`bind`, `unbind`, `is_bound` and `bound_handle` track one bound buffer per
slot. `release()` (or use as a context manager) frees the handle.

### `meshforge.vertex_array`

`VertexArrayObject` ties vertex buffers, described by lists of
`BufferAttribute` (slot, size, `AttributeType`, stride, offset,
`AttribUsage`, normalized), to an optional index buffer.
`add_vertex_buffer(buffer, attributes)` takes the vertex count from the
first buffer and logs a warning if later buffers differ.
`draw(mode=DrawMode.TRIANGLE_LIST)` returns a `DrawCall` with the mode,
the vertex or index count and, when indexed, the index type.

### `meshforge.vertex_types`

Ready-made vertex dataclasses, `VertexPosCol`, `VertexPosNormCol`,
`VertexPosNormTex` and `VertexPosNormTexCol`, each with a packed
float32 `DTYPE`, a `V_DECL` attribute declaration and a
`from_components(...)` constructor. `pack_vertices(vertices)` turns a
list of one vertex type into a structured NumPy array.

### `meshforge.vertex_map`

`VertexParamMap` reads a vertex type's declaration to find its position,
normal, texture and colour attributes, and offers `set_*`/`get_*` methods
that skip or default whatever the type lacks.
`create_vertex(vertex_type, pos, norm, uv, col, vmap=None)` builds a
vertex from all four values.

### `meshforge.mesh_builder`

`MeshBuilder(vertex_type)` collects vertices (`add_vertex`,
`add_vertex_range`) and 32-bit indices (`add_index`, `add_index_tri`),
reports `vertex_count`, `index_count` and `triangle_count`, and `bake()`s
everything into a `VertexArrayObject` with an interleaved vertex buffer
and a uint32 index buffer.

### `meshforge.mesh_factory`

`add_cube`, `add_cube_transform`, `add_ico_sphere`, `add_uv_sphere` and
`add_plane` append generated geometry to a `MeshBuilder`, filling in
whichever of position, normal, UV and colour the vertex type carries.
Sphere radii may be a single number or one per axis; icospheres have
their UV seams corrected. A vertex type without a position attribute is
left untouched and a warning is logged.

### `meshforge.obj_loader`

`load_from_file(filename)` reads `v`, `vt`, `vn` and `f` statements from a
Wavefront OBJ file, splits polygons into triangle fans, resolves negative
indices, and bakes the result as `VertexPosNormTexCol` vertices (white
colour) into a `VertexArrayObject`. Other statements are ignored;
malformed lines raise `ValueError`.

## Example

```python
from meshforge.camera import Camera
from meshforge.mesh_builder import MeshBuilder
from meshforge.mesh_factory import add_cube, add_ico_sphere
from meshforge.vertex_types import VertexPosCol

mesh = MeshBuilder(VertexPosCol)
add_ico_sphere(mesh, (1.0, 0.0, 0.0), 0.5, 3)
add_cube(mesh, (0.0, 0.0, 0.0), (0.5, 0.5, 0.5))
vao = mesh.bake()

camera = Camera()
camera.set_fov_degrees(60.0)
camera.position = (0.0, 3.0, 3.0)
camera.look_at((0.0, 0.0, 0.0))
mvp = camera.view_projection

print(vao.draw())
```

## What this package does not do

It does not draw anything. There is no window, no graphics context and
no shader compilation: buffers, vertex array objects and binding are
modelled in memory, and `draw` only describes the call it would make.
There is no command-line program.