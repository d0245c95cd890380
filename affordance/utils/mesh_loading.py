"""Creation and loading of objects for affordance analysis."""

import logging

from pathlib import Path

import numpy as np
import trimesh

from pydrake.math import RigidTransform

from affordance.analysis.triangles import AffordanceObject, InvalidGeometryKindError
from affordance.utils.geometry_utils import convert_mesh_yup_to_zup

console_logger = logging.getLogger(__name__)


def create_box_object(
    extents: list[float] | np.ndarray,
    transform: RigidTransform | None = None,
    name: str = "box",
) -> AffordanceObject:
    """Create an object with a triangulated box centered at its origin.

    Args:
        extents: Box side lengths along x, y and z.
        transform: Pose of the box in the world frame. Identity if None.
        name: Object name.

    Returns:
        Object whose mesh has 12 triangles.
    """
    mesh = trimesh.creation.box(extents=extents)
    return AffordanceObject(
        mesh=mesh,
        transform=RigidTransform() if transform is None else transform,
        name=name,
    )


def load_affordance_object(
    mesh_path: Path,
    transform: RigidTransform | None = None,
    convert_yup_to_zup: bool = False,
) -> AffordanceObject:
    """Load a mesh file as an object for affordance analysis.

    Handles both single Trimesh and Scene objects with multiple geometries;
    scene geometries are concatenated.

    Args:
        mesh_path: Path to a mesh file readable by trimesh.
        transform: Pose of the object in the world frame. Identity if None.
        convert_yup_to_zup: Convert the mesh from Y-up (GLTF) to Z-up (Drake).

    Returns:
        Object named after the file stem.

    Raises:
        FileNotFoundError: If the mesh file doesn't exist.
        InvalidGeometryKindError: If the file holds no triangle mesh.
    """
    mesh_path = Path(mesh_path)
    if not mesh_path.exists():
        raise FileNotFoundError(f"Mesh file not found: {mesh_path}")

    mesh = trimesh.load(str(mesh_path), force="mesh")

    if isinstance(mesh, trimesh.Scene):
        meshes = [g for g in mesh.geometry.values() if isinstance(g, trimesh.Trimesh)]
        if not meshes:
            raise InvalidGeometryKindError(
                f"No Trimesh objects in Scene from {mesh_path}"
            )
        mesh = trimesh.util.concatenate(meshes)

    if not isinstance(mesh, trimesh.Trimesh):
        raise InvalidGeometryKindError(
            f"Could not load a triangle mesh from {mesh_path}, "
            f"got {type(mesh).__name__}"
        )

    if convert_yup_to_zup:
        convert_mesh_yup_to_zup(mesh)

    console_logger.info(
        f"Loaded {mesh_path.name}: {len(mesh.faces)} triangles, "
        f"{len(mesh.vertices)} vertices"
    )
    return AffordanceObject(
        mesh=mesh,
        transform=RigidTransform() if transform is None else transform,
        name=mesh_path.stem,
    )
