import math
import unittest

import numpy as np

import displaced_points.circle_functions as cf
from displaced_points.errors import InputError


class TestCircleFunctions(unittest.TestCase):
    def test_radius_from_circumference(self):
        self.assertAlmostEqual(cf.radius_from_circumference(2 * math.pi), 1.0)
        self.assertAlmostEqual(
            cf.radius_from_circumference(4 * 12 * math.sqrt(2)), 48 * math.sqrt(2) / (2 * math.pi)
        )

    def test_radius_from_zero_circumference_is_zero(self):
        self.assertEqual(cf.radius_from_circumference(0), 0.0)

    def test_radius_from_circumference_is_vectorised(self):
        circumferences = np.array([0.0, math.pi, 2 * math.pi, 10.0])
        radii = cf.radius_from_circumference(circumferences)

        np.testing.assert_allclose(radii, circumferences / (2 * np.pi))
        self.assertEqual(radii.shape, (4,))

    def test_invalid_circumference(self):
        for value in [-1.0, float("nan"), float("inf")]:
            with self.assertRaises(InputError):
                cf.radius_from_circumference(value)

    def test_round_trip_with_circumference_from_radius(self):
        for radius in [0.5, 3.0, 19.28]:
            self.assertAlmostEqual(
                cf.radius_from_circumference(cf.circumference_from_radius(radius)), radius
            )

    def test_area_and_radius(self):
        self.assertAlmostEqual(cf.area_from_radius(2.0), 4 * math.pi)
        self.assertAlmostEqual(cf.radius_from_area(4 * math.pi), 2.0)


class TestCircleProperties(unittest.TestCase):
    def test_from_circumference(self):
        circle = cf.CircleProperties.from_circumference(10 * math.pi)

        self.assertAlmostEqual(circle.radius, 5.0)
        self.assertAlmostEqual(circle.diameter, 10.0)
        self.assertAlmostEqual(circle.circumference, 10 * math.pi)
        self.assertAlmostEqual(circle.area, 25 * math.pi)

    def test_from_radius_and_area_agree(self):
        self.assertAlmostEqual(
            cf.CircleProperties.from_area(9 * math.pi).radius,
            cf.CircleProperties.from_radius(3).radius,
        )

    def test_negative_radius(self):
        with self.assertRaises(InputError):
            cf.CircleProperties.from_radius(-1)
