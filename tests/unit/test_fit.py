"""Вписывание в квадрат: размеры, распределение рамки, ошибки геометрии."""
import math
import unittest

import numpy as np

from canvasfit.errors import FitError
from canvasfit.models.image_model import Raster
from canvasfit.services.process_service import ProcessService


class TestFitScenarios(unittest.TestCase):
    def setUp(self):
        self.service = ProcessService()

    def test_landscape_gets_vertical_border(self):
        """800x600 -> 700: 700x525, рамка 87, нечётный пиксель уходит в высоту."""
        fit = self.service.fit(800, 600, 700)
        self.assertEqual(fit.width, 700)
        self.assertEqual(fit.vertical_border, 87)
        self.assertEqual(fit.horizontal_border, 0)
        self.assertEqual(fit.height, 526)
        self.assertEqual(fit.edge, 700)
        self.assertEqual(fit.height + 2 * fit.vertical_border, 700)

    def test_portrait_gets_horizontal_border(self):
        fit = self.service.fit(600, 800, 700)
        self.assertEqual((fit.width, fit.height), (526, 700))
        self.assertEqual((fit.vertical_border, fit.horizontal_border), (0, 87))

    def test_square_source_has_no_border(self):
        fit = self.service.fit(500, 500, 300)
        self.assertEqual((fit.width, fit.height), (300, 300))
        self.assertFalse(fit.needs_padding)

    def test_even_difference(self):
        fit = self.service.fit(400, 200, 100)
        self.assertEqual((fit.width, fit.height, fit.vertical_border), (100, 50, 25))

    def test_one_pixel_difference_becomes_square_without_border(self):
        fit = self.service.fit(3, 2, 3)
        self.assertEqual((fit.width, fit.height), (3, 3))
        self.assertFalse(fit.needs_padding)

    def test_fractional_target_is_truncated(self):
        fit = self.service.fit(800, 600, 700.9)
        self.assertEqual(fit.width, 700)
        self.assertEqual(fit.edge, 700)

    def test_upscale(self):
        fit = self.service.fit(40, 30, 400)
        self.assertEqual((fit.width, fit.height, fit.vertical_border), (400, 300, 50))

    def test_extreme_aspect_keeps_one_pixel(self):
        fit = self.service.fit(1000, 1, 10)
        self.assertEqual(fit.width, 10)
        self.assertGreaterEqual(fit.height, 1)
        self.assertEqual(fit.height + 2 * fit.vertical_border, 10)


class TestFitProperties(unittest.TestCase):
    CASES = [
        (800, 600, 700),
        (600, 800, 333),
        (1920, 1080, 512),
        (1080, 1920, 511),
        (1, 1, 7),
        (7, 3, 5),
        (3, 7, 100),
        (1234, 567, 89),
        (99, 100, 98),
        (4000, 3, 250),
    ]

    def setUp(self):
        self.service = ProcessService()

    def test_padded_result_is_square(self):
        for w, h, t in self.CASES:
            with self.subTest(src=(w, h), target=t):
                fit = self.service.fit(w, h, t)
                self.assertEqual(fit.width + 2 * fit.horizontal_border, fit.height + 2 * fit.vertical_border)
                self.assertEqual(fit.edge, max(fit.width, fit.height))
                self.assertEqual(fit.edge, t)

    def test_only_one_axis_is_padded(self):
        for w, h, t in self.CASES:
            with self.subTest(src=(w, h), target=t):
                fit = self.service.fit(w, h, t)
                self.assertFalse(fit.vertical_border and fit.horizontal_border)

    def test_aspect_ratio_within_one_pixel(self):
        for w, h, t in self.CASES:
            with self.subTest(src=(w, h), target=t):
                fit = self.service.fit(w, h, t)
                short_src, long_src = min(w, h), max(w, h)
                short_fit = fit.height if w >= h else fit.width
                expected = max(1.0, short_src * t / long_src)
                self.assertLessEqual(abs(short_fit - expected), 1.0 + 1e-9)

    def test_fit_then_pad_gives_exact_square(self):
        for w, h, t in self.CASES[:6]:
            with self.subTest(src=(w, h), target=t):
                fit = self.service.fit(w, h, t)
                raster = Raster(np.zeros((fit.height, fit.width, 3), dtype=np.uint8))
                padded = self.service.pad(raster, fit.vertical_border, fit.horizontal_border)
                self.assertEqual(padded.width, padded.height)
                self.assertEqual(padded.width, max(fit.width, fit.height))


class TestFitErrors(unittest.TestCase):
    def setUp(self):
        self.service = ProcessService()

    def test_invalid_source(self):
        for w, h in ((0, 10), (10, 0), (-5, 10)):
            with self.subTest(src=(w, h)):
                with self.assertRaises(FitError):
                    self.service.fit(w, h, 100)

    def test_invalid_target(self):
        for target in (0, -1, 0.5, math.nan, math.inf):
            with self.subTest(target=target):
                with self.assertRaises(FitError):
                    self.service.fit(100, 100, target)

    def test_fit_error_is_value_error(self):
        with self.assertRaises(ValueError):
            self.service.fit(100, 100, 0)


if __name__ == "__main__":
    unittest.main()
