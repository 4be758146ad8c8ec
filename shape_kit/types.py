from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import DegenerateBoxError


DEFAULT_CLASS_NAMES: Tuple[str, ...] = ("circle", "triangle", "square")


@dataclass(frozen=True)
class GridSpec:
    """
    Geometry of the detector output: S x S cells, B anchors per cell, C classes.

    Each anchor is encoded as `[obj, cx, cy, w, h, cls_0 .. cls_{C-1}, area]`,
    the trailing area channel being present only when `has_area` is set.
    """

    grid_size: int = 16
    num_anchors: int = 2
    num_classes: int = 3
    has_area: bool = True

    def __post_init__(self) -> None:
        if self.grid_size < 1:
            raise ValueError("grid_size must be >= 1")
        if self.num_anchors < 1:
            raise ValueError("num_anchors must be >= 1")
        if self.num_classes < 1:
            raise ValueError("num_classes must be >= 1")

    @property
    def record_size(self) -> int:
        return 1 + 4 + self.num_classes + (1 if self.has_area else 0)

    @property
    def num_records(self) -> int:
        return self.grid_size * self.grid_size * self.num_anchors

    @property
    def expected_length(self) -> int:
        return self.num_records * self.record_size


@dataclass(frozen=True)
class DetectionRecord:
    """
    Raw prediction of one anchor in one grid cell, before any activation.
    """

    gx: int
    gy: int
    anchor: int
    objectness_logit: float
    cx: float
    cy: float
    w: float
    h: float
    class_logits: Tuple[float, ...]
    area: Optional[float] = None


@dataclass(frozen=True)
class ScoredBox:
    """
    Final detection in display coordinates (center + size).

    `confidence` is the sigmoid objectness in (0, 1); `class_scores` holds the
    softmax class probabilities indexed by class id.
    """

    label: str
    class_id: int
    confidence: float
    class_scores: Tuple[float, ...]
    cx: float
    cy: float
    w: float
    h: float
    area: Optional[int] = None

    def as_xyxy(self) -> Tuple[float, float, float, float]:
        half_w = self.w / 2
        half_h = self.h / 2
        return self.cx - half_w, self.cy - half_h, self.cx + half_w, self.cy + half_h

    def as_xywh(self) -> Tuple[float, float, float, float]:
        # Top-left corner + size, the rectangle handed to the renderer.
        return self.cx - self.w / 2, self.cy - self.h / 2, self.w, self.h

    def is_degenerate(self) -> bool:
        return not (self.w > 0 and self.h > 0)

    def validate(self) -> "ScoredBox":
        if self.is_degenerate():
            raise DegenerateBoxError(f"Box has non-positive size: w={self.w}, h={self.h}")
        return self
