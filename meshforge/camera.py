"""A simple first/third person camera producing view and projection matrices.

Matrices are 4x4 numpy arrays in row-major order that act on column vectors,
using a right-handed coordinate system and a clip-space depth range of [-1, 1].
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

Vector = Sequence[float] | np.ndarray


def _vec3(value: Vector) -> np.ndarray:
    array = np.array(value, dtype=np.float64).reshape(-1)
    if array.shape != (3,):
        raise ValueError(f"expected a 3-component vector, got shape {array.shape}")
    return array


def _normalize(vector: np.ndarray) -> np.ndarray:
    length = np.linalg.norm(vector)
    if length == 0.0:
        raise ValueError("cannot normalize a zero-length vector")
    return vector / length


def _frozen(matrix: np.ndarray) -> np.ndarray:
    matrix.flags.writeable = False
    return matrix


def perspective(fov_radians: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Return a right-handed perspective projection matrix."""
    if aspect == 0.0:
        raise ValueError("aspect ratio must be non-zero")
    if far == near:
        raise ValueError("near and far planes must differ")
    tan_half = math.tan(fov_radians / 2.0)
    result = np.zeros((4, 4), dtype=np.float64)
    result[0, 0] = 1.0 / (aspect * tan_half)
    result[1, 1] = 1.0 / tan_half
    result[2, 2] = -(far + near) / (far - near)
    result[3, 2] = -1.0
    result[2, 3] = -(2.0 * far * near) / (far - near)
    return result


def orthographic(
    left: float, right: float, bottom: float, top: float, near: float, far: float
) -> np.ndarray:
    """Return a right-handed orthographic projection matrix."""
    if right == left or top == bottom or far == near:
        raise ValueError("orthographic volume must have non-zero extent on every axis")
    result = np.identity(4, dtype=np.float64)
    result[0, 0] = 2.0 / (right - left)
    result[1, 1] = 2.0 / (top - bottom)
    result[2, 2] = -2.0 / (far - near)
    result[0, 3] = -(right + left) / (right - left)
    result[1, 3] = -(top + bottom) / (top - bottom)
    result[2, 3] = -(far + near) / (far - near)
    return result


def look_at_matrix(eye: Vector, center: Vector, up: Vector) -> np.ndarray:
    """Return a right-handed view matrix looking from ``eye`` towards ``center``."""
    eye_v = _vec3(eye)
    f = _normalize(_vec3(center) - eye_v)
    s = _normalize(np.cross(f, _vec3(up)))
    u = np.cross(s, f)
    result = np.identity(4, dtype=np.float64)
    result[0, :3] = s
    result[1, :3] = u
    result[2, :3] = -f
    result[0, 3] = -np.dot(s, eye_v)
    result[1, 3] = -np.dot(u, eye_v)
    result[2, 3] = np.dot(f, eye_v)
    return result


class Camera:
    """A camera with a position, facing direction and perspective or orthographic projection."""

    def __init__(self) -> None:
        self._near_plane = 0.1
        self._far_plane = 1000.0
        # The default field of view is degrees(90), kept as the original defaults define it.
        self._fov_radians = math.degrees(90.0)
        self._aspect_ratio = 1.0
        self._ortho_vertical_scale = 1.0
        self._is_ortho = False
        self._position = np.zeros(3, dtype=np.float64)
        self._forward = np.array([0.0, 0.0, 1.0])
        self._up = np.array([0.0, 1.0, 0.0])
        self._view = _frozen(np.identity(4, dtype=np.float64))
        self._projection = _frozen(np.identity(4, dtype=np.float64))
        self._view_projection = _frozen(np.identity(4, dtype=np.float64))
        self._is_dirty = True
        self._calculate_projection()

    # --- orientation -----------------------------------------------------

    @property
    def position(self) -> np.ndarray:
        """The camera's position in world space."""
        return self._position.copy()

    @position.setter
    def position(self, value: Vector) -> None:
        self._position = _vec3(value)
        self._calculate_view()

    @property
    def forward(self) -> np.ndarray:
        """The direction the camera faces in world space."""
        return self._forward.copy()

    @forward.setter
    def forward(self, value: Vector) -> None:
        self._forward = _vec3(value)
        self._calculate_view()

    @property
    def up(self) -> np.ndarray:
        """The vector pointing out of the top of the camera."""
        return self._up.copy()

    @up.setter
    def up(self, value: Vector) -> None:
        self._up = _vec3(value)
        self._calculate_view()

    def look_at(self, point: Vector) -> None:
        """Turn the camera to face the given world-space point."""
        self._forward = _normalize(_vec3(point) - self._position)
        self._calculate_view()

    # --- projection ------------------------------------------------------

    @property
    def near_plane(self) -> float:
        return self._near_plane

    @property
    def far_plane(self) -> float:
        return self._far_plane

    @property
    def aspect_ratio(self) -> float:
        return self._aspect_ratio

    def resize_window(self, width: int, height: int) -> None:
        """Update the aspect ratio from a new window size."""
        self._aspect_ratio = float(width) / float(height)
        self._calculate_projection()

    @property
    def ortho_enabled(self) -> bool:
        """Whether the camera uses an orthographic projection."""
        return self._is_ortho

    def set_ortho_enabled(self, value: bool) -> None:
        """Switch the camera to orthographic projection.

        The flag argument is accepted for interface compatibility; the camera
        always switches to orthographic mode.
        """
        self._is_ortho = True
        self._calculate_projection()

    @property
    def fov_radians(self) -> float:
        """The vertical field of view, in radians."""
        return self._fov_radians

    @fov_radians.setter
    def fov_radians(self, value: float) -> None:
        self._fov_radians = float(value)
        self._calculate_projection()

    def set_fov_degrees(self, value: float) -> None:
        """Set the vertical field of view in degrees."""
        self.fov_radians = math.radians(value)

    @property
    def ortho_vertical_scale(self) -> float:
        """How many units are visible vertically in orthographic mode."""
        return self._ortho_vertical_scale

    @ortho_vertical_scale.setter
    def ortho_vertical_scale(self, value: float) -> None:
        self._ortho_vertical_scale = float(value)
        self._calculate_projection()

    # --- matrices --------------------------------------------------------

    @property
    def view(self) -> np.ndarray:
        return self._view

    @property
    def projection(self) -> np.ndarray:
        return self._projection

    @property
    def view_projection(self) -> np.ndarray:
        """The combined projection @ view matrix, recomputed only when stale."""
        if self._is_dirty:
            self._view_projection = _frozen(self._projection @ self._view)
            self._is_dirty = False
        return self._view_projection

    def _calculate_projection(self) -> None:
        if self._is_ortho:
            w = (self._ortho_vertical_scale * self._aspect_ratio) / 2.0
            h = self._ortho_vertical_scale / 2.0
            matrix = orthographic(-w, w, -h, h, self._near_plane, self._far_plane)
        else:
            matrix = perspective(
                self._fov_radians, self._aspect_ratio, self._near_plane, self._far_plane
            )
        self._projection = _frozen(matrix)
        self._is_dirty = True

    def _calculate_view(self) -> None:
        self._view = _frozen(
            look_at_matrix(self._position, self._position + self._forward, self._up)
        )
        self._is_dirty = True