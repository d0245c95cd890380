"""Geometric helpers for rigid transforms and coordinate conventions.

Depends only on numpy, trimesh, and PyDrake.
"""

import logging

import numpy as np
import trimesh

from pydrake.math import RigidTransform, RotationMatrix

console_logger = logging.getLogger(__name__)


def convert_mesh_yup_to_zup(mesh: trimesh.Trimesh) -> None:
    """Convert mesh vertices from Y-up (GLTF) to Z-up (Drake) coordinates in-place.

    Affordance operations test normals against the world Z axis, so meshes
    authored in Y-up must be converted before analysis.

    Transformation: (x, y, z)_yup → (x, -z, y)_zup

    Args:
        mesh: Mesh with vertices in Y-up coordinates (modified in-place).
    """
    vertices_zup = np.column_stack(
        [
            mesh.vertices[:, 0],  # X unchanged
            -mesh.vertices[:, 2],  # Y = -Z_yup
            mesh.vertices[:, 1],  # Z = Y_yup
        ]
    )
    mesh.vertices = vertices_zup


def rigid_transform_to_matrix(transform: RigidTransform) -> np.ndarray:
    """Convert Drake RigidTransform to 4x4 homogeneous matrix for trimesh.

    Args:
        transform: Drake RigidTransform object.

    Returns:
        4x4 numpy array representing the transformation.
    """
    matrix = np.eye(4)
    matrix[:3, :3] = transform.rotation().matrix()  # 3x3 rotation matrix
    matrix[:3, 3] = transform.translation()  # 3x1 translation vector
    return matrix


def create_rigid_transform(
    rotation: np.ndarray | None = None, translation: np.ndarray | None = None
) -> RigidTransform:
    """Create a RigidTransform from a rotation matrix and a translation vector.

    Args:
        rotation: 3x3 rotation matrix. Identity if None.
        translation: Translation vector (3,). Zero if None.

    Returns:
        The rigid transform.
    """
    R = RotationMatrix() if rotation is None else RotationMatrix(np.asarray(rotation))
    p = np.zeros(3) if translation is None else np.asarray(translation, dtype=float)
    return RigidTransform(R, p)


def transform_points(transform: RigidTransform, points: np.ndarray) -> np.ndarray:
    """Apply a rigid transform to points.

    Args:
        transform: Transform from the points' frame to the target frame.
        points: Points as rows, shape (N, 3).

    Returns:
        Transformed points, shape (N, 3).
    """
    points = np.asarray(points, dtype=float).reshape(-1, 3)
    rotation = transform.rotation().matrix()
    return points @ rotation.T + transform.translation()
