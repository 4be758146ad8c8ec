from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np


Point = Tuple[int, int]


class DrawingSurface:
    """
    Freehand drawing layer: white strokes on a black background.

    Mirrors the pointer protocol of a canvas widget: `begin_stroke` on press,
    `extend_stroke` on move, `end_stroke` on release or when the pointer
    leaves the surface. Moves outside a stroke are ignored.
    """

    def __init__(self, width: int = 512, height: int = 512, line_width: int = 2):
        if width < 1 or height < 1:
            raise ValueError("Surface size must be >= 1 in both dimensions.")
        if line_width < 1:
            raise ValueError("line_width must be >= 1")
        self.width = int(width)
        self.height = int(height)
        self.line_width = int(line_width)
        self._strokes: List[List[Point]] = []
        self._current: Optional[List[Point]] = None
        self._background: Optional[np.ndarray] = None

    @classmethod
    def from_image(cls, image_bgr: np.ndarray, width: int = 512, height: int = 512) -> "DrawingSurface":
        """
        Wrap an existing drawing (e.g. a scanned sketch) as the surface background.
        """

        cv2 = _require_cv2()
        if image_bgr is None or not hasattr(image_bgr, "shape"):
            raise TypeError("image_bgr must be a NumPy array (BGR).")
        if image_bgr.ndim == 2:
            image_bgr = cv2.cvtColor(image_bgr, cv2.COLOR_GRAY2BGR)
        if image_bgr.ndim != 3 or image_bgr.shape[2] != 3:
            raise ValueError(f"Expected image shape (H, W, 3), got {getattr(image_bgr, 'shape', None)}")

        surface = cls(width=width, height=height)
        if image_bgr.shape[:2] != (height, width):
            image_bgr = cv2.resize(image_bgr, (width, height), interpolation=cv2.INTER_AREA)
        surface._background = image_bgr.astype(np.uint8, copy=True)
        return surface

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def is_drawing(self) -> bool:
        return self._current is not None

    @property
    def strokes(self) -> List[List[Point]]:
        out = [list(s) for s in self._strokes]
        if self._current is not None:
            out.append(list(self._current))
        return out

    def begin_stroke(self, x: float, y: float) -> None:
        self.end_stroke()
        self._current = [(int(round(x)), int(round(y)))]

    def extend_stroke(self, x: float, y: float) -> None:
        if self._current is None:
            return
        self._current.append((int(round(x)), int(round(y))))

    def end_stroke(self) -> None:
        if self._current is not None:
            self._strokes.append(self._current)
            self._current = None

    def add_stroke(self, points: Iterable[Sequence[float]]) -> None:
        pts = list(points)
        if not pts:
            return
        self.begin_stroke(*pts[0][:2])
        for p in pts[1:]:
            self.extend_stroke(*p[:2])
        self.end_stroke()

    def clear(self) -> None:
        self._strokes = []
        self._current = None
        self._background = None

    def render(self) -> np.ndarray:
        """
        Rasterize the surface as an (H, W, 3) uint8 BGR image.
        """

        cv2 = _require_cv2()
        if self._background is not None:
            img = self._background.copy()
        else:
            img = np.zeros((self.height, self.width, 3), dtype=np.uint8)

        for stroke in self.strokes:
            if len(stroke) == 1:
                cv2.circle(img, stroke[0], max(self.line_width // 2, 1), (255, 255, 255), thickness=-1)
                continue
            for p0, p1 in zip(stroke, stroke[1:]):
                cv2.line(img, p0, p1, (255, 255, 255), thickness=self.line_width)
        return img

    def to_tensor(self) -> np.ndarray:
        """
        Model input: float32 (1, 1, H, W), channel mean scaled to [0, 1].
        """

        img = self.render().astype(np.float32)
        gray = img.sum(axis=2) / (3.0 * 255.0)
        return gray[None, None, ...].astype(np.float32)


def _require_cv2():
    try:
        import cv2  # type: ignore
    except Exception as e:  # pragma: no cover
        raise ImportError("OpenCV is required for DrawingSurface. Install with `pip install opencv-python`.") from e
    return cv2
