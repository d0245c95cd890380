"""World-frame triangle records for affordance analysis.

Defines the geometry input of the analysis (a triangle mesh placed in the world
by a rigid transform) and derives, for each mesh face, its world-frame vertices,
unit normal and area.
"""

import logging

from dataclasses import dataclass, field

import numpy as np
import trimesh

from pydrake.math import RigidTransform

from affordance.utils.geometry_utils import transform_points

console_logger = logging.getLogger(__name__)


class InvalidGeometryKindError(ValueError):
    """Raised when an object's geometry is not a triangle mesh."""


@dataclass
class AffordanceObject:
    """Rigid object whose surface is analysed for affordances."""

    mesh: trimesh.Trimesh
    """Triangle mesh in the object's local frame."""

    transform: RigidTransform = field(default_factory=RigidTransform)
    """Pose of the object in the world frame (X_WO)."""

    name: str = "object"
    """Human readable object name, used in log messages."""

    @property
    def num_triangles(self) -> int:
        return len(self.mesh.faces)


@dataclass(frozen=True)
class TrianglePoints:
    """The three world-frame vertex positions of a triangle."""

    p1: np.ndarray
    p2: np.ndarray
    p3: np.ndarray

    def as_array(self) -> np.ndarray:
        """Vertices stacked as rows, shape (3, 3)."""
        return np.stack([self.p1, self.p2, self.p3])


@dataclass(frozen=True)
class Triangle:
    """A mesh face with its derived world-frame quantities."""

    index_triple: tuple[int, int, int]
    """Vertex indices of the face in the source mesh."""

    points: TrianglePoints
    """World-frame vertex positions."""

    normal: np.ndarray
    """Unit normal in world frame (3,). Zero for degenerate faces."""

    area: float
    """Triangle area."""


def validate_geometry(affordance_object: AffordanceObject) -> trimesh.Trimesh:
    """Check that the object's geometry is a triangle mesh.

    Args:
        affordance_object: Object to check.

    Returns:
        The object's mesh.

    Raises:
        InvalidGeometryKindError: If the geometry is not a trimesh.Trimesh.
    """
    mesh = affordance_object.mesh
    if not isinstance(mesh, trimesh.Trimesh):
        raise InvalidGeometryKindError(
            f"Object '{affordance_object.name}' has geometry of type "
            f"{type(mesh).__name__}, expected trimesh.Trimesh"
        )

    return mesh


def compute_triangle_normals_and_areas(
    points: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    """Compute unit normals and areas of triangles.

    Args:
        points: Triangle vertices, shape (N, 3, 3).

    Returns:
        Tuple of (normals (N, 3), areas (N,)). Degenerate triangles get a zero
        normal and zero area.
    """
    cross = np.cross(points[:, 1] - points[:, 0], points[:, 2] - points[:, 0])
    cross_norm = np.linalg.norm(cross, axis=1)

    normals = np.zeros_like(cross)
    valid = cross_norm > 1e-12
    normals[valid] = cross[valid] / cross_norm[valid, np.newaxis]

    return normals, 0.5 * cross_norm


def build_triangles(affordance_object: AffordanceObject) -> list[Triangle]:
    """Build world-frame triangle records for every face of the object's mesh.

    Vertices are transformed by the object's pose before normals and areas are
    computed, so orientation tests see world-frame normals.

    Args:
        affordance_object: Object with a triangle mesh and world pose.

    Returns:
        One Triangle per mesh face, in mesh face order.

    Raises:
        InvalidGeometryKindError: If the geometry is not a triangle mesh.
    """
    mesh = validate_geometry(affordance_object)
    faces = np.asarray(mesh.faces, dtype=np.int64)
    if len(faces) == 0:
        return []

    world_vertices = transform_points(
        affordance_object.transform, np.asarray(mesh.vertices, dtype=float)
    )
    points = world_vertices[faces]  # (N, 3, 3).
    normals, areas = compute_triangle_normals_and_areas(points)

    num_degenerate = int(np.sum(areas <= 0.0))
    if num_degenerate > 0:
        console_logger.warning(
            f"Object '{affordance_object.name}' has {num_degenerate} degenerate "
            "triangles (zero area)"
        )

    triangles = [
        Triangle(
            index_triple=(int(face[0]), int(face[1]), int(face[2])),
            points=TrianglePoints(p1=tri[0], p2=tri[1], p3=tri[2]),
            normal=normal,
            area=float(area),
        )
        for face, tri, normal, area in zip(faces, points, normals, areas)
    ]

    console_logger.debug(
        f"Built {len(triangles)} triangles for object '{affordance_object.name}' "
        f"(total area {float(np.sum(areas)):.4f})"
    )
    return triangles
