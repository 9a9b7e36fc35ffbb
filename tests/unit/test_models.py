"""Модели: инварианты Raster, FitResult и порядок SizeRequest."""
import math
import unittest

import numpy as np

from canvasfit.errors import FitError
from canvasfit.models.image_model import FitResult, QualitySetting, Raster, SizeRequest


class TestRaster(unittest.TestCase):
    def test_dimensions_from_pixels(self):
        raster = Raster(np.zeros((20, 30, 4), dtype=np.uint8))
        self.assertEqual((raster.width, raster.height, raster.channels), (30, 20, 4))
        self.assertTrue(raster.has_alpha)

    def test_grayscale_is_single_channel(self):
        raster = Raster(np.zeros((5, 7), dtype=np.uint8))
        self.assertEqual(raster.channels, 1)
        self.assertFalse(raster.has_alpha)

    def test_rejects_empty_image(self):
        with self.assertRaises(ValueError):
            Raster(np.zeros((0, 5, 3), dtype=np.uint8))

    def test_rejects_two_channels(self):
        with self.assertRaises(ValueError):
            Raster(np.zeros((5, 5, 2), dtype=np.uint8))

    def test_rejects_flat_array(self):
        with self.assertRaises(ValueError):
            Raster(np.zeros(10, dtype=np.uint8))


class TestFitResult(unittest.TestCase):
    def test_edge_includes_both_borders(self):
        fit = FitResult(width=700, height=526, vertical_border=87)
        self.assertEqual(fit.edge, 700)
        self.assertTrue(fit.needs_padding)

    def test_square_needs_no_padding(self):
        self.assertFalse(FitResult(width=300, height=300).needs_padding)


class TestSizeRequest(unittest.TestCase):
    def test_largest_first(self):
        """[300, 700, 100] обрабатывается как [700, 300, 100]."""
        requests = SizeRequest.ordered([300, 700, 100])
        self.assertEqual([r.edge for r in requests], [700, 300, 100])
        self.assertEqual([r.index for r in requests], [0, 1, 2])

    def test_accepts_numeric_strings_and_fractions(self):
        requests = SizeRequest.ordered(["12.5", "40"])
        self.assertEqual([r.edge for r in requests], [40.0, 12.5])

    def test_duplicates_are_kept(self):
        self.assertEqual(len(SizeRequest.ordered([50, 50])), 2)

    def test_invalid_sizes(self):
        for bad in ([], [0], [-3], ["abc"], [math.nan], [math.inf], [None]):
            with self.subTest(sizes=bad):
                with self.assertRaises(FitError):
                    SizeRequest.ordered(bad)


class TestQualitySetting(unittest.TestCase):
    def test_defaults(self):
        setting = QualitySetting()
        self.assertEqual((setting.quality, setting.codec), (90, "JPEG"))


if __name__ == "__main__":
    unittest.main()
