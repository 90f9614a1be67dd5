import unittest
import numpy as np

from sceneframe import InvalidArgumentsError, Transform, TransformError, resolve_constructor_args
from sceneframe.args import (
    IdentityArgs,
    LookAtArgs,
    PositionMatrixArgs,
    PositionQuaternionArgs,
    PositionXYZArgs,
    TranslationArgs,
)


class TestConstructorArgs(unittest.TestCase):
    def test_zero_args(self):
        self.assertIsInstance(resolve_constructor_args(()), IdentityArgs)

    def test_single_vector(self):
        for v in (np.array([1.0, 2.0, 3.0]), [1, 2, 3], (1, 2, 3)):
            shape = resolve_constructor_args((v,))
            self.assertIsInstance(shape, TranslationArgs)
            np.testing.assert_array_equal(shape.position, [1, 2, 3])

    def test_look_at_shapes(self):
        shape = resolve_constructor_args(([0, 0, 0], [0, 0, -1]))
        self.assertIsInstance(shape, LookAtArgs)
        self.assertIsNone(shape.up)

        shape = resolve_constructor_args(([0, 0, 0], [0, 0, -1], [1, 0, 0]))
        self.assertIsInstance(shape, LookAtArgs)
        np.testing.assert_array_equal(shape.up, [1, 0, 0])

        # an explicit None counts as an omitted up vector
        shape = resolve_constructor_args(([0, 0, 0], [0, 0, -1], None))
        self.assertIsInstance(shape, LookAtArgs)
        self.assertIsNone(shape.up)

    def test_three_numbers(self):
        shape = resolve_constructor_args((1, 2.5, np.float32(3)))
        self.assertEqual(shape, PositionXYZArgs(1.0, 2.5, 3.0))

    def test_seven_numbers(self):
        shape = resolve_constructor_args((1, 2, 3, 0, 0, 0, 1))
        self.assertEqual(shape, PositionQuaternionArgs(1.0, 2.0, 3.0, 0.0, 0.0, 0.0, 1.0))

    def test_twelve_numbers(self):
        shape = resolve_constructor_args(tuple(range(12)))
        self.assertIsInstance(shape, PositionMatrixArgs)
        self.assertEqual(shape.r22, 11.0)

    def test_numeric_types(self):
        shape = resolve_constructor_args((np.int64(1), np.float64(2), 3))
        self.assertIsInstance(shape, PositionXYZArgs)

    def test_unmatched_shapes(self):
        bad_calls = [
            (1,),
            (1, 2),
            (1, 2, 3, 4),
            ([0, 0, 0], 1),
            ([0, 0, 0], [0, 0, 1], 1),
            ([0, 0, 0], [0, 0, 1], [0, 1, 0], [1, 0, 0]),
            (1, 2, [3, 3, 3]),
            (True, 2, 3),
            ("1", "2", "3"),
            ([1, 2],),
            (np.zeros(4),),
            tuple(range(8)),
            tuple(range(11)),
            tuple(range(13)),
            (None,),
        ]
        for args in bad_calls:
            with self.subTest(args=args):
                with self.assertRaises(InvalidArgumentsError):
                    resolve_constructor_args(args)

    def test_error_types(self):
        with self.assertRaises(InvalidArgumentsError) as ctx:
            Transform.new(1, 2)
        err = ctx.exception
        self.assertIsInstance(err, TransformError)
        self.assertIsInstance(err, TypeError)
        self.assertIsInstance(err, ValueError)
        self.assertEqual(err.received, ("number", "number"))
        self.assertIn("Invalid arguments to constructor", str(err))

    def test_error_names_kinds(self):
        with self.assertRaises(InvalidArgumentsError) as ctx:
            Transform.new([0, 0, 0], "up")
        self.assertEqual(ctx.exception.received, ("Vector3", "str"))


if __name__ == "__main__":
    unittest.main()
