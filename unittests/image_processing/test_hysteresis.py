"""
test_hysteresis
===============

Tests the methods contained in the hysteresis submodule of edgethin.
"""

from unittest import TestCase

import numpy as np

from edgethin.exceptions import ConfigurationError
from edgethin.image_processing.edge_detection import hysteresis


class TestClassify(TestCase):
    def test_classify(self):
        image = np.array([[0.1, 0.2, 0.3],
                          [0.8, 0.81, 1.0]])

        np.testing.assert_array_equal(hysteresis.classify(image, 0.8, 0.2),
                                      [[0.0, 0.0, 0.5],
                                       [0.5, 1.0, 1.0]])


class TestHysteresisThreshold(TestCase):
    def test_strong_center(self):
        image = np.array([[0.5, 0.5, 0.5],
                          [0.5, 1.0, 0.5],
                          [0.5, 0.5, 0.1]])

        result = hysteresis.hysteresis_threshold(image, 0.8, 0.2)

        np.testing.assert_array_equal(result, [[0.9, 0.9, 0.9],
                                               [0.9, 0.9, 0.9],
                                               [0.9, 0.9, 0.0]])

    def test_unconnected_weak(self):
        image = np.array([[0.9, 0.0, 0.0, 0.5],
                          [0.0, 0.0, 0.0, 0.5]])

        result = hysteresis.hysteresis_threshold(image, 0.8, 0.2)

        np.testing.assert_array_equal(result, [[0.9, 0.0, 0.0, 0.5],
                                               [0.0, 0.0, 0.0, 0.5]])

    def test_diagonal_chain(self):
        image = np.zeros((6, 6))
        image[np.arange(5), np.arange(5)] = 0.5
        image[0, 0] = 1.0
        image[5, 0] = 0.5

        result = hysteresis.hysteresis_threshold(image, 0.8, 0.2)

        np.testing.assert_array_equal(result[np.arange(5), np.arange(5)], 0.9)
        self.assertEqual(result[5, 0], 0.5)
        self.assertEqual(np.count_nonzero(result == 0.9), 5)

    def test_multiple_regions(self):
        image = np.zeros((5, 7))
        image[1, 1:3] = [1.0, 0.5]
        image[3, 4:7] = [0.5, 0.5, 1.0]

        result = hysteresis.hysteresis_threshold(image, 0.8, 0.2)

        expected = np.zeros((5, 7))
        expected[1, 1:3] = 0.9
        expected[3, 4:7] = 0.9

        np.testing.assert_array_equal(result, expected)

    def test_threshold_boundaries(self):
        # values equal to a threshold fall in the lower class
        image = np.array([[0.8, 0.2]])

        result = hysteresis.hysteresis_threshold(image, 0.8, 0.2)

        np.testing.assert_array_equal(result, [[0.5, 0.0]])

    def test_no_strong_values_left(self):
        rng = np.random.default_rng(5)
        image = rng.random((20, 20))

        result = hysteresis.hysteresis_threshold(image, 0.7, 0.3)

        self.assertFalse((result == hysteresis.STRONG).any())
        self.assertTrue(np.isin(result, [0.0, 0.5, 0.9]).all())

    def test_input_unchanged(self):
        image = np.array([[0.5, 1.0],
                          [0.0, 0.5]])
        original = image.copy()

        hysteresis.hysteresis_threshold(image, 0.8, 0.2)

        np.testing.assert_array_equal(image, original)

    def test_integer_image(self):
        image = np.array([[0, 200, 120, 0, 120]], dtype=np.uint8)

        result = hysteresis.hysteresis_threshold(image, 150, 100)

        np.testing.assert_array_equal(result, [[0.0, 0.9, 0.9, 0.0, 0.5]])

    def test_not_2d(self):
        with self.assertRaises(ConfigurationError):
            hysteresis.hysteresis_threshold(np.ones((2, 2, 2)), 0.8, 0.2)


if __name__ == '__main__':
    import unittest
    unittest.main()
