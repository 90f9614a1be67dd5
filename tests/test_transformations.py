import math
import unittest
import numpy as np

from sceneframe import Direction, Transform
from sceneframe.utils import linear_inverse, rigid_inverse_matrix


def _sample(seed: int) -> Transform:
    rng = np.random.default_rng(seed)
    rx, ry, rz = rng.uniform(-math.pi, math.pi, 3)
    return Transform.new(*rng.uniform(-10, 10, 3)) * Transform.Angles(rx, ry, rz)


class TestTransformMethods(unittest.TestCase):
    def setUp(self):
        self.a = _sample(1)
        self.b = _sample(2)
        self.c = _sample(3)

    def test_composition_is_matrix_product(self):
        np.testing.assert_allclose((self.a * self.b).matrix,
                                   self.a.matrix @ self.b.matrix, atol=1e-12)
        self.assertEqual(self.a.ToWorldSpace(self.b), self.a * self.b)
        self.assertEqual(self.a @ self.b, self.a * self.b)

    def test_composition_associative(self):
        left = (self.a * self.b) * self.c
        right = self.a * (self.b * self.c)
        np.testing.assert_allclose(left.matrix, right.matrix, atol=1e-9)

    def test_inverse(self):
        np.testing.assert_allclose((self.a * self.a.Inverse()).matrix, np.eye(4), atol=1e-9)
        np.testing.assert_allclose((self.a.inverse() * self.a).matrix, np.eye(4), atol=1e-9)
        np.testing.assert_allclose(self.a.inverse().inverse().matrix, self.a.matrix, atol=1e-9)

    def test_inverse_matches_rigid_closed_form(self):
        R = self.a.matrix[:3, :3]
        t = self.a.matrix[:3, 3]
        inv = self.a.inverse()
        np.testing.assert_allclose(inv.matrix[:3, :3], R.T, atol=1e-12)
        np.testing.assert_allclose(inv.matrix[:3, 3], -R.T @ t, atol=1e-9)
        np.testing.assert_array_equal(inv.matrix[3, :], [0, 0, 0, 1])

    def test_inverse_of_scaled(self):
        s = Transform.new(1, 2, 3, 2, 0, 0, 0, 3, 0, 0, 0, 4)
        np.testing.assert_allclose((s * s.inverse()).matrix, np.eye(4), atol=1e-12)

    def test_rigid_inverse_agrees_with_general_inverse(self):
        for t in (self.a, self.b, self.c):
            fast = rigid_inverse_matrix(t.matrix)
            np.testing.assert_allclose(fast, np.linalg.inv(t.matrix), atol=1e-9)
            general = linear_inverse(t.matrix[:3, :3])
            np.testing.assert_allclose(fast[:3, :3], general, atol=1e-12)
            np.testing.assert_allclose(t.inverse().matrix, fast, atol=0)

    def test_singular_basis_inverts_to_non_finite(self):
        flat = Transform.new(1, 2, 3, 1, 0, 0, 0, 0, 0, 0, 0, 1)
        inv = flat.Inverse()
        self.assertFalse(np.all(np.isfinite(inv.matrix[:3, :])))
        np.testing.assert_array_equal(inv.matrix[3, :], [0, 0, 0, 1])

        with np.errstate(invalid="ignore"):
            local = flat.ToObjectSpace(self.a)
            point = flat.PointToObjectSpace([1, 2, 3])
            squashed = Transform.from_matrix((0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 0))
            vec = squashed.VectorToObjectSpace((1, 2, 3))
        self.assertFalse(np.all(np.isfinite(local.matrix[:3, :])))
        self.assertFalse(np.all(np.isfinite(point)))
        self.assertFalse(np.all(np.isfinite(vec)))

    def test_world_object_space_round_trip(self):
        back = self.a.ToObjectSpace(self.a.ToWorldSpace(self.b))
        self.assertTrue(back.fuzzy_eq(self.b, atol=1e-9))
        self.assertTrue(self.a.to_object_space(self.b).fuzzy_eq(self.a.inverse() * self.b))

    def test_point_to_world_space(self):
        t = Transform.new(1, 2, 3) * Transform.Angles(0, 0, math.pi / 2)
        out = t.PointToWorldSpace([1, 0, 0])
        # rotated onto +Y, then translated
        np.testing.assert_allclose(out, [1, 3, 3], atol=1e-12)
        np.testing.assert_allclose(t * np.array([1.0, 0.0, 0.0]), out, atol=1e-12)

    def test_point_to_object_space(self):
        p = np.array([4.0, -1.0, 2.5])
        local = self.a.PointToObjectSpace(p)
        np.testing.assert_allclose(self.a.point_to_world_space(local), p, atol=1e-9)
        np.testing.assert_allclose(local, self.a.inverse() * p, atol=1e-12)

    def test_vector_ignores_translation(self):
        t = Transform.new(5, 6, 7)
        np.testing.assert_array_equal(t.VectorToWorldSpace([1, 2, 3]), [1, 2, 3])
        np.testing.assert_array_equal(t.VectorToObjectSpace([1, 2, 3]), [1, 2, 3])

    def test_vector_rotation(self):
        t = Transform.new(5, 6, 7) * Transform.Angles(0, 0, math.pi / 2)
        np.testing.assert_allclose(t.vector_to_world_space([1, 0, 0]), [0, 1, 0], atol=1e-12)
        np.testing.assert_allclose(t.vector_to_object_space([0, 1, 0]), [1, 0, 0], atol=1e-12)

    def test_vector_round_trip(self):
        v = np.array([0.3, -2.0, 1.0])
        np.testing.assert_allclose(
            self.a.vector_to_object_space(self.a.vector_to_world_space(v)), v, atol=1e-9)

    def test_add_sub_vector(self):
        moved = self.a + np.array([1.0, 2.0, 3.0])
        np.testing.assert_allclose(moved.Position, self.a.Position + [1, 2, 3], atol=1e-12)
        np.testing.assert_array_equal(moved.matrix[:3, :3], self.a.matrix[:3, :3])

        moved = self.a - (1, 2, 3)
        np.testing.assert_allclose(moved.Position, self.a.Position - [1, 2, 3], atol=1e-12)
        np.testing.assert_array_equal(moved.matrix[:3, :3], self.a.matrix[:3, :3])

    def test_unsupported_operands(self):
        with self.assertRaises(TypeError):
            self.a * "abc"
        with self.assertRaises(TypeError):
            self.a * 2.0
        with self.assertRaises(TypeError):
            self.a + self.b
        with self.assertRaises(TypeError):
            self.a - 1
        with self.assertRaises(TypeError):
            [1, 2, 3] * self.a

    def test_derived_vectors(self):
        t = Transform.Angles(0, math.pi / 2, 0)
        # quarter turn about Y: look direction moves from -Z to -X
        np.testing.assert_allclose(t.LookVector, [-1, 0, 0], atol=1e-12)
        np.testing.assert_allclose(t.RightVector, t.XVector, atol=0)
        np.testing.assert_allclose(t.UpVector, t.YVector, atol=0)
        np.testing.assert_allclose(t.LookVector, -t.ZVector, atol=0)

    def test_direction_vector(self):
        np.testing.assert_array_equal(
            Transform.identity.direction_vector(Direction.FORWARD), [0, 0, -1])
        for direction, expected in (
            (Direction.FORWARD, self.a.LookVector),
            (Direction.BACK, self.a.ZVector),
            (Direction.UP, self.a.UpVector),
            (Direction.DOWN, -self.a.UpVector),
            (Direction.RIGHT, self.a.RightVector),
            (Direction.LEFT, -self.a.RightVector),
        ):
            with self.subTest(direction=direction):
                np.testing.assert_allclose(
                    self.a.direction_vector(direction), expected, atol=1e-12)

    def test_rotation_property(self):
        r = self.a.Rotation
        np.testing.assert_array_equal(r.Position, [0, 0, 0])
        np.testing.assert_array_equal(r.matrix[:3, :3], self.a.matrix[:3, :3])
        np.testing.assert_array_equal(r.matrix[3, :], [0, 0, 0, 1])


if __name__ == "__main__":
    unittest.main()
