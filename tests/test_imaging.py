"""Tests for image loading and binarization."""

import os
import shutil
import tempfile
import unittest

import numpy as np
from PIL import Image, UnidentifiedImageError

from danielsson.errors import InvalidInput
from danielsson.imaging import binarize, load_mask, read_image, to_grayscale


class TestImaging(unittest.TestCase):
    """Test cases for the image to mask conversion."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Clean up test fixtures."""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def save(self, image, name):
        path = os.path.join(self.temp_dir, name)
        image.save(path)
        return path

    def test_read_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            read_image(os.path.join(self.temp_dir, "missing.png"))

    def test_read_invalid_file(self):
        path = os.path.join(self.temp_dir, "not_an_image.png")
        with open(path, 'w') as f:
            f.write("plain text")
        with self.assertRaises(UnidentifiedImageError):
            read_image(path)

    def test_read_image(self):
        path = self.save(Image.new("RGB", (7, 3), (10, 20, 30)), "rgb.png")
        image = read_image(path)
        self.assertEqual(image.mode, "RGB")
        self.assertEqual(image.size, (7, 3))

    def test_grayscale_8bit(self):
        gray = to_grayscale(Image.fromarray(np.array([[0, 51, 255]], dtype=np.uint8)))
        self.assertEqual(gray.dtype, np.float64)
        np.testing.assert_allclose(gray, [[0.0, 0.2, 1.0]])

    def test_grayscale_16bit(self):
        image = Image.fromarray(np.array([[0, 65535], [32768, 0]], dtype=np.uint16))
        gray = to_grayscale(image)
        np.testing.assert_allclose(gray, [[0.0, 1.0], [32768 / 65535, 0.0]])

    def test_grayscale_rgb_uses_luminance(self):
        pixels = np.zeros((1, 3, 3), dtype=np.uint8)
        pixels[0, 0] = (255, 255, 255)
        pixels[0, 1] = (255, 0, 0)
        gray = to_grayscale(Image.fromarray(pixels))
        self.assertEqual(gray.shape, (1, 3))
        self.assertEqual(gray[0, 0], 1.0)
        # Red has a luminance weight of about 0.299
        self.assertAlmostEqual(gray[0, 1], 0.3, delta=0.01)
        self.assertEqual(gray[0, 2], 0.0)

    def test_grayscale_rgba_drops_alpha(self):
        image = Image.new("RGBA", (2, 2), (255, 255, 255, 0))
        np.testing.assert_allclose(to_grayscale(image), np.ones((2, 2)))

    def test_binarize(self):
        gray = np.array([[0.1, 0.5, 0.51], [0.9, 0.0, 1.0]])
        np.testing.assert_array_equal(
            binarize(gray),
            [[False, False, True], [True, False, True]]
        )
        np.testing.assert_array_equal(binarize(gray, 0.0), gray > 0.0)
        self.assertFalse(binarize(gray, 1.0).any())

    def test_binarize_invalid_threshold(self):
        gray = np.zeros((2, 2))
        for threshold in (-0.1, 1.5, "0.5", None, True):
            with self.assertRaises(InvalidInput):
                binarize(gray, threshold)

    def test_binarize_requires_single_channel(self):
        with self.assertRaises(InvalidInput):
            binarize(np.zeros((2, 2, 3)))

    def test_load_mask_rgb(self):
        pixels = np.zeros((5, 6, 3), dtype=np.uint8)
        pixels[2, 3] = (255, 255, 255)
        pixels[0, 0] = (255, 0, 0)
        path = self.save(Image.fromarray(pixels), "disk.png")

        mask = load_mask(path)
        self.assertEqual(mask.dtype, bool)
        self.assertEqual(mask.shape, (5, 6))
        self.assertEqual(int(mask.sum()), 1)
        self.assertTrue(mask[2, 3])

        # Red pixel is foreground at a lower threshold
        mask = load_mask(path, threshold=0.2)
        self.assertTrue(mask[0, 0])
        self.assertEqual(int(mask.sum()), 2)

    def test_load_mask_binary_image_ignores_threshold(self):
        pixels = np.zeros((4, 4), dtype=bool)
        pixels[1, 1] = True
        path = self.save(Image.fromarray(pixels), "binary.png")

        for threshold in (0.0, 1.0):
            mask = load_mask(path, threshold)
            np.testing.assert_array_equal(mask, pixels)

    def test_load_mask_invalid_threshold(self):
        path = self.save(Image.new("L", (2, 2)), "gray.png")
        with self.assertRaises(InvalidInput):
            load_mask(path, threshold=2.0)


if __name__ == '__main__':
    unittest.main()
