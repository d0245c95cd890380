"""Small triangle meshes with known normals and areas for unit tests."""

import numpy as np
import trimesh

from pydrake.math import RigidTransform

from affordance.analysis.triangles import AffordanceObject


def create_flat_square_mesh(size: float = 1.0) -> trimesh.Trimesh:
    """Square in the z=0 plane, two triangles with normal +Z."""
    vertices = np.array(
        [[0.0, 0.0, 0.0], [size, 0.0, 0.0], [size, size, 0.0], [0.0, size, 0.0]]
    )
    faces = np.array([[0, 1, 2], [0, 2, 3]])
    return trimesh.Trimesh(vertices=vertices, faces=faces, process=False)


def create_wall_mesh(size: float = 1.0) -> trimesh.Trimesh:
    """Square in the x=0 plane, two triangles with normal +X."""
    vertices = np.array(
        [[0.0, 0.0, 0.0], [0.0, size, 0.0], [0.0, size, size], [0.0, 0.0, size]]
    )
    faces = np.array([[0, 1, 2], [0, 2, 3]])
    return trimesh.Trimesh(vertices=vertices, faces=faces, process=False)


def create_fin_mesh() -> trimesh.Trimesh:
    """Flat square with a vertical fin on its diagonal edge 0-2.

    Faces 0 and 1 form the square (normal +Z, area 0.5 each). Face 2 is the fin
    (normal (-1, 1, 0) normalized, area sqrt(2) / 2). Edge 0-2 is shared by all
    three faces.
    """
    vertices = np.array(
        [
            [0.0, 0.0, 0.0],
            [1.0, 0.0, 0.0],
            [1.0, 1.0, 0.0],
            [0.0, 1.0, 0.0],
            [0.0, 0.0, 1.0],
        ]
    )
    faces = np.array([[0, 1, 2], [0, 2, 3], [0, 4, 2]])
    return trimesh.Trimesh(vertices=vertices, faces=faces, process=False)


def create_bowtie_mesh() -> trimesh.Trimesh:
    """Two upward-facing triangles of area 0.03 sharing only vertex 0."""
    vertices = np.array(
        [
            [0.0, 0.0, 0.0],
            [0.3, 0.0, 0.0],
            [0.0, 0.2, 0.0],
            [-0.3, 0.0, 0.0],
            [0.0, -0.2, 0.0],
        ]
    )
    faces = np.array([[0, 1, 2], [0, 3, 4]])
    return trimesh.Trimesh(vertices=vertices, faces=faces, process=False)


def create_fold_mesh(height: float = 0.5) -> trimesh.Trimesh:
    """Two triangles sharing the edge (0,0,0)-(0,1,0).

    Triangle 0 is flat with normal +Z and area 0.5. Triangle 1 rises to `height`
    at x=1, with normal (-height, 0, 1) normalized.
    """
    vertices = np.array(
        [[0.0, 0.0, 0.0], [0.0, 1.0, 0.0], [-1.0, 0.0, 0.0], [1.0, 0.0, height]]
    )
    faces = np.array([[0, 1, 2], [0, 3, 1]])
    return trimesh.Trimesh(vertices=vertices, faces=faces, process=False)


def create_strip_mesh(num_quads: int) -> trimesh.Trimesh:
    """Flat 1-wide strip along X made of 2 * num_quads upward-facing triangles."""
    xs = np.arange(num_quads + 1, dtype=float)
    vertices = np.zeros((2 * (num_quads + 1), 3))
    vertices[0::2, 0] = xs
    vertices[1::2, 0] = xs
    vertices[1::2, 1] = 1.0

    faces = []
    for i in range(num_quads):
        faces.append([2 * i, 2 * i + 2, 2 * i + 1])
        faces.append([2 * i + 1, 2 * i + 2, 2 * i + 3])
    return trimesh.Trimesh(vertices=vertices, faces=np.array(faces), process=False)


def create_object(
    mesh: trimesh.Trimesh, transform: RigidTransform | None = None
) -> AffordanceObject:
    return AffordanceObject(
        mesh=mesh,
        transform=RigidTransform() if transform is None else transform,
        name="test_object",
    )
