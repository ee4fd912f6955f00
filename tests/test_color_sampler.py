import unittest
from pathlib import Path
import sys

from PIL import Image


# Allow top-level imports from repo root.
_REPO_DIR = Path(__file__).resolve().parents[1]
if str(_REPO_DIR) not in sys.path:
    sys.path.insert(0, str(_REPO_DIR))

from backend.texture_classes import Color
from pile_generator import average_color
from settings import DEFAULT_COLOR


def _image(pixels, size):
    image = Image.new("RGBA", size)
    image.putdata(pixels)
    return image


class TestAverageColor(unittest.TestCase):
    def test_default_color_is_opaque_mid_gray(self) -> None:
        self.assertEqual(DEFAULT_COLOR, Color(170, 170, 170, 255))

    def test_fully_transparent_image_returns_default(self) -> None:
        image = _image([(255, 0, 0, 0), (0, 255, 0, 127), (0, 0, 255, 10), (9, 9, 9, 0)], (2, 2))

        self.assertEqual(average_color(image), DEFAULT_COLOR)

    def test_zero_area_image_returns_default(self) -> None:
        self.assertEqual(average_color(Image.new("RGBA", (0, 0))), DEFAULT_COLOR)
        self.assertEqual(average_color(Image.new("RGBA", (4, 0))), DEFAULT_COLOR)

    def test_single_opaque_pixel_returns_its_color(self) -> None:
        image = _image([(12, 34, 56, 255)], (1, 1))

        self.assertEqual(average_color(image), Color(12, 34, 56))

    def test_uniform_color_is_returned_exactly(self) -> None:
        image = Image.new("RGBA", (16, 16), (200, 120, 40, 255))

        self.assertEqual(average_color(image), Color(200, 120, 40))

    def test_only_visible_pixels_are_counted(self) -> None:
        image = _image([(100, 100, 100, 255), (200, 50, 0, 128), (255, 255, 255, 127), (0, 0, 0, 0)], (2, 2))

        self.assertEqual(average_color(image), Color(150, 75, 50))

    def test_mean_is_truncated(self) -> None:
        image = _image([(10, 0, 1, 255), (11, 1, 2, 255)], (2, 1))

        self.assertEqual(average_color(image), Color(10, 0, 1))

    def test_alpha_of_result_is_opaque(self) -> None:
        image = _image([(10, 20, 30, 130)], (1, 1))

        self.assertEqual(average_color(image).a, 255)

    def test_rgb_image_counts_every_pixel(self) -> None:
        image = Image.new("RGB", (3, 3), (7, 8, 9))

        self.assertEqual(average_color(image), Color(7, 8, 9))


class TestColor(unittest.TestCase):
    def test_rejects_out_of_range_channels(self) -> None:
        with self.assertRaises(ValueError):
            Color(256, 0, 0)
        with self.assertRaises(ValueError):
            Color(0, -1, 0)

    def test_from_argb(self) -> None:
        self.assertEqual(Color.from_argb(0x80102030), Color(0x10, 0x20, 0x30, 0x80))


if __name__ == "__main__":
    unittest.main()
