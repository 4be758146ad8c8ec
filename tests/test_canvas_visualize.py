import unittest

import numpy as np

from shape_kit.canvas import DrawingSurface
from shape_kit.types import ScoredBox
from shape_kit.visualize import LABEL_COLORS, draw_boxes, format_label


class TestDrawingSurface(unittest.TestCase):
    def test_stroke_protocol(self) -> None:
        surface = DrawingSurface(width=64, height=64)
        surface.extend_stroke(5, 5)  # move without press is ignored
        self.assertEqual(surface.strokes, [])

        surface.begin_stroke(10, 10)
        self.assertTrue(surface.is_drawing)
        surface.extend_stroke(20, 10)
        surface.extend_stroke(20, 20)
        surface.end_stroke()
        self.assertFalse(surface.is_drawing)
        surface.extend_stroke(40, 40)
        self.assertEqual(surface.strokes, [[(10, 10), (20, 10), (20, 20)]])

    def test_blank_surface_tensor(self) -> None:
        surface = DrawingSurface(width=32, height=16)
        t = surface.to_tensor()
        self.assertEqual(t.shape, (1, 1, 16, 32))
        self.assertEqual(t.dtype, np.float32)
        self.assertEqual(float(t.max()), 0.0)

    def test_strokes_render_white(self) -> None:
        surface = DrawingSurface(width=64, height=64, line_width=2)
        surface.add_stroke([(8, 32), (56, 32)])
        t = surface.to_tensor()
        self.assertAlmostEqual(float(t[0, 0, 32, 30]), 1.0, places=6)
        self.assertEqual(float(t[0, 0, 2, 2]), 0.0)
        self.assertLessEqual(float(t.max()), 1.0)

    def test_clear(self) -> None:
        surface = DrawingSurface(width=32, height=32)
        surface.add_stroke([(1, 1), (30, 30)])
        surface.begin_stroke(3, 3)
        surface.clear()
        self.assertEqual(surface.strokes, [])
        self.assertFalse(surface.is_drawing)
        self.assertEqual(float(surface.to_tensor().max()), 0.0)

    def test_from_image_resizes(self) -> None:
        img = np.full((100, 50, 3), 255, dtype=np.uint8)
        surface = DrawingSurface.from_image(img, width=64, height=64)
        self.assertEqual(surface.render().shape, (64, 64, 3))
        self.assertAlmostEqual(float(surface.to_tensor().min()), 1.0, places=6)


class TestDrawBoxes(unittest.TestCase):
    def _box(self, label: str = "circle") -> ScoredBox:
        return ScoredBox(
            label=label,
            class_id=0,
            confidence=0.876,
            class_scores=(0.9, 0.06, 0.04),
            cx=32.0,
            cy=32.0,
            w=20.0,
            h=20.0,
            area=400,
        )

    def test_format_label(self) -> None:
        box = self._box()
        self.assertEqual(format_label(box), "circle (0.88)")
        self.assertEqual(format_label(box, show_scores=True, show_area=True), "circle (0.88) [0.90 0.06 0.04] area=400")

    def test_draws_rectangle_in_label_color(self) -> None:
        img = np.zeros((64, 64, 3), dtype=np.uint8)
        vis = draw_boxes(img, [self._box()], box_thickness=1)
        self.assertEqual(img.sum(), 0)
        # left edge of the rectangle at x = cx - w/2 = 22
        self.assertEqual(tuple(int(v) for v in vis[40, 22]), LABEL_COLORS["circle"])

    def test_rejects_non_bgr(self) -> None:
        with self.assertRaises(ValueError):
            draw_boxes(np.zeros((8, 8), dtype=np.uint8), [])


if __name__ == "__main__":
    unittest.main()
