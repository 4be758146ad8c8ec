from __future__ import annotations

from typing import Dict, Iterable, Tuple

import numpy as np

from .types import ScoredBox


# BGR colors keyed by label
LABEL_COLORS: Dict[str, Tuple[int, int, int]] = {
    "circle": (0, 255, 0),  # lime
    "triangle": (255, 191, 0),  # deep sky blue
    "square": (0, 165, 255),  # orange
}
FALLBACK_COLOR: Tuple[int, int, int] = (0, 0, 255)


def color_for_label(label: str) -> Tuple[int, int, int]:
    return LABEL_COLORS.get(label, FALLBACK_COLOR)


def format_label(box: ScoredBox, *, show_scores: bool = False, show_area: bool = False) -> str:
    """
    Annotation text, e.g. "circle (0.97)" or "circle (0.97) [0.91 0.05 0.04] area=1234".
    """

    text = f"{box.label} ({box.confidence:.2f})"
    if show_scores:
        text += " [" + " ".join(f"{s:.2f}" for s in box.class_scores) + "]"
    if show_area and box.area is not None:
        text += f" area={box.area}"
    return text


def draw_boxes(
    image_bgr: np.ndarray,
    boxes: Iterable[ScoredBox],
    *,
    show_scores: bool = False,
    show_area: bool = False,
    box_thickness: int = 2,
    font_scale: float = 0.5,
    font_thickness: int = 1,
) -> np.ndarray:
    """
    Draw boxes + labels on an OpenCV BGR image and return a copy.

    Boxes may extend past the image; OpenCV clips the drawing.
    """

    try:
        import cv2  # type: ignore
    except Exception as e:  # pragma: no cover
        raise ImportError("OpenCV is required for draw_boxes(). Install with `pip install opencv-python`.") from e

    if image_bgr is None or not hasattr(image_bgr, "shape"):
        raise TypeError("image_bgr must be a NumPy array (BGR).")
    if image_bgr.ndim != 3 or image_bgr.shape[2] != 3:
        raise ValueError(f"Expected image shape (H, W, 3), got {getattr(image_bgr, 'shape', None)}")

    out = image_bgr.copy()

    for box in boxes:
        x, y, w, h = box.as_xywh()
        x1, y1 = int(round(x)), int(round(y))
        x2, y2 = int(round(x + w)), int(round(y + h))

        color = color_for_label(box.label)
        cv2.rectangle(out, (x1, y1), (x2, y2), color, thickness=box_thickness)

        label = format_label(box, show_scores=show_scores, show_area=show_area)
        (_, th), _ = cv2.getTextSize(label, cv2.FONT_HERSHEY_SIMPLEX, font_scale, font_thickness)
        # Above the box when there is room, else just inside the top edge.
        y_text = y1 - 4 if y1 - 4 - th >= 0 else y1 + th + 4
        cv2.putText(
            out,
            label,
            (x1, y_text),
            cv2.FONT_HERSHEY_SIMPLEX,
            font_scale,
            color,
            thickness=font_thickness,
            lineType=cv2.LINE_AA,
        )

    return out
