"""Procedural meshes, vertex layouts, OBJ loading, in-memory buffer models and a camera."""

__version__ = "0.1.0"

__all__ = [
    "buffers",
    "camera",
    "mesh_builder",
    "mesh_factory",
    "obj_loader",
    "vertex_array",
    "vertex_map",
    "vertex_types",
]