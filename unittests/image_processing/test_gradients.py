"""
test_gradients
==============

Tests the functions contained in the gradients submodule of edgethin.
"""

from unittest import TestCase
from math import pi

import numpy as np

from edgethin.exceptions import ConfigurationError
from edgethin.image_processing import gradients


class TestImageGradients(TestCase):
    def setUp(self):
        self.ramp = np.tile(np.arange(6, dtype=np.float64), (5, 1))

    def test_kernels_normalized(self):
        for method in gradients.GRADIENT_KERNELS:
            with self.subTest(method=method):
                grad_x, grad_y = gradients.image_gradients(self.ramp, method)

                np.testing.assert_array_almost_equal(grad_x[:, 1:-1], 1, decimal=5)
                np.testing.assert_array_almost_equal(grad_y, 0)

    def test_vertical_ramp(self):
        grad_x, grad_y = gradients.image_gradients(self.ramp.T, "sobel")

        np.testing.assert_array_almost_equal(grad_x, 0)
        np.testing.assert_array_almost_equal(grad_y[1:-1], 1)

    def test_method_case_insensitive(self):
        grad_x, _ = gradients.image_gradients(self.ramp, "Sobel")

        np.testing.assert_array_almost_equal(grad_x[:, 1:-1], 1)

    def test_border_modes(self):
        expected = {"replicate": 0.5, "symmetric": 0.5, "reflect": 0.0, "circular": -2.0}

        for mode, value in expected.items():
            with self.subTest(mode=mode):
                grad_x, _ = gradients.image_gradients(self.ramp, "sobel", mode)

                np.testing.assert_array_almost_equal(grad_x[:, 0], value)

    def test_integer_image(self):
        grad_x, _ = gradients.image_gradients(self.ramp.astype(np.uint8), "sobel")

        self.assertEqual(grad_x.dtype, np.float64)
        np.testing.assert_array_almost_equal(grad_x[:, 1:-1], 1)

    def test_unknown_method(self):
        with self.assertRaises(ConfigurationError):
            gradients.image_gradients(self.ramp, "ando5")

    def test_unknown_border(self):
        with self.assertRaises(ConfigurationError):
            gradients.image_gradients(self.ramp, "sobel", "constant")

    def test_not_2d(self):
        with self.assertRaises(ConfigurationError):
            gradients.image_gradients(np.ones((3, 3, 3)))


class TestMagnitude(TestCase):
    def test_magnitude(self):
        np.testing.assert_array_almost_equal(gradients.magnitude([[3.0, 0.0]], [[4.0, -2.0]]), [[5.0, 2.0]])

    def test_shape_mismatch(self):
        with self.assertRaises(ConfigurationError):
            gradients.magnitude(np.ones((2, 2)), np.ones((2, 3)))


class TestPhase(TestCase):
    def test_directions(self):
        grad_x = np.array([[1.0, 0.0, 0.0, -1.0]])
        grad_y = np.array([[0.0, -1.0, 1.0, 0.0]])

        np.testing.assert_array_almost_equal(gradients.phase(grad_x, grad_y), [[0, pi / 2, -pi / 2, pi]])

    def test_flat(self):
        grad_x = np.array([[1e-10, 0.0, 1e-3]])
        grad_y = np.array([[-1e-10, 0.0, 0.0]])

        np.testing.assert_array_equal(gradients.phase(grad_x, grad_y), [[0.0, 0.0, 0.0]])

    def test_shape_mismatch(self):
        with self.assertRaises(ConfigurationError):
            gradients.phase(np.ones((2, 2)), np.ones(4))


class TestOrientation(TestCase):
    def test_orientation(self):
        grad_x = np.array([[1.0, 1.0]])
        grad_y = np.array([[2.0, 0.0]])

        np.testing.assert_array_almost_equal(gradients.orientation(grad_x, grad_y), [[np.arctan2(1, 2), pi / 2]])

    def test_not_rotated_phase(self):
        # the vertical gradient is not negated so this is not phase + pi/2
        orientation = gradients.orientation([[1.0]], [[2.0]])
        phase = gradients.phase([[1.0]], [[2.0]])

        self.assertAlmostEqual(float(orientation[0, 0]), 0.4636476, places=6)
        self.assertAlmostEqual(float(phase[0, 0]), -1.1071487, places=6)

    def test_flat(self):
        np.testing.assert_array_equal(gradients.orientation([[0.0]], [[1e-12]]), [[0.0]])


class TestMagnitudePhase(TestCase):
    def setUp(self):
        # dark on top, bright on the bottom
        self.image = np.zeros((8, 8))
        self.image[4:] = 1.0

    def test_magnitude_phase(self):
        grad_x = np.array([[3.0]])
        grad_y = np.array([[-4.0]])

        mag, phase = gradients.magnitude_phase(grad_x, grad_y)

        self.assertAlmostEqual(float(mag[0, 0]), 5.0)
        self.assertAlmostEqual(float(phase[0, 0]), np.arctan2(4, 3))

    def test_from_image(self):
        mag, phase = gradients.magnitude_phase_from_image(self.image, "sobel")

        self.assertTrue((mag[3:5] > 0).all())
        np.testing.assert_array_equal(mag[:2], 0)
        np.testing.assert_array_equal(mag[6:], 0)
        # the intensity increases down the image, which is the -pi/2 direction
        np.testing.assert_array_almost_equal(phase[3:5], -pi / 2)
        np.testing.assert_array_equal(phase[:2], 0)

    def test_imedge(self):
        grad_x, grad_y, mag, orientation = gradients.imedge(self.image)

        np.testing.assert_array_almost_equal(grad_x, 0)
        self.assertTrue((grad_y[3:5] > 0).all())
        np.testing.assert_array_almost_equal(mag, np.hypot(grad_x, grad_y))
        np.testing.assert_array_almost_equal(orientation[3:5], 0)


if __name__ == '__main__':
    import unittest
    unittest.main()
