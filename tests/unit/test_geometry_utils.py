import math
import unittest

import numpy as np
import trimesh

from pydrake.math import RigidTransform, RollPitchYaw

from affordance.utils.geometry_utils import (
    convert_mesh_yup_to_zup,
    create_rigid_transform,
    rigid_transform_to_matrix,
    transform_points,
)


class TestGeometryUtils(unittest.TestCase):
    def test_transform_points_matches_drake(self):
        transform = RigidTransform(RollPitchYaw(0.1, -0.4, 1.2), [0.5, -1.0, 2.0])
        points = np.array([[0.0, 0.0, 0.0], [1.0, 2.0, 3.0], [-1.0, 0.5, 0.0]])

        result = transform_points(transform, points)

        expected = transform.multiply(points.T).T
        np.testing.assert_allclose(result, expected, atol=1e-12)

    def test_rigid_transform_to_matrix(self):
        transform = RigidTransform(
            RollPitchYaw(0.0, 0.0, math.pi / 2), [1.0, 2.0, 3.0]
        )
        matrix = rigid_transform_to_matrix(transform)

        self.assertEqual(matrix.shape, (4, 4))
        np.testing.assert_allclose(matrix[:3, 3], [1.0, 2.0, 3.0])
        x_rotated = matrix[:3, :3] @ np.array([1.0, 0.0, 0.0])
        np.testing.assert_allclose(x_rotated, [0.0, 1.0, 0.0], atol=1e-12)
        np.testing.assert_array_equal(matrix[3], [0.0, 0.0, 0.0, 1.0])

    def test_create_rigid_transform_defaults_to_identity(self):
        transform = create_rigid_transform()
        np.testing.assert_allclose(transform.GetAsMatrix4(), np.eye(4))

    def test_create_rigid_transform(self):
        rotation = RollPitchYaw(0.2, 0.3, 0.4).ToRotationMatrix().matrix()
        transform = create_rigid_transform(rotation=rotation, translation=[1, 2, 3])
        np.testing.assert_allclose(transform.rotation().matrix(), rotation)
        np.testing.assert_allclose(transform.translation(), [1.0, 2.0, 3.0])

    def test_convert_mesh_yup_to_zup(self):
        mesh = trimesh.creation.box(extents=[1.0, 2.0, 3.0])
        convert_mesh_yup_to_zup(mesh)
        np.testing.assert_allclose(mesh.extents, [1.0, 3.0, 2.0])


if __name__ == "__main__":
    unittest.main()
