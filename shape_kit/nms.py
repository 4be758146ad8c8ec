from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

import numpy as np

from .types import ScoredBox


@dataclass(frozen=True)
class NMSConfig:
    iou_threshold: float = 0.4

    def __post_init__(self) -> None:
        if not 0.0 <= self.iou_threshold <= 1.0:
            raise ValueError("iou_threshold must be in [0, 1]")


def iou(a: ScoredBox, b: ScoredBox) -> float:
    """
    Intersection-over-Union of two center/size boxes; 0 when the union is empty.
    """

    ax1, ay1, ax2, ay2 = a.as_xyxy()
    bx1, by1, bx2, by2 = b.as_xyxy()

    inter_w = max(0.0, min(ax2, bx2) - max(ax1, bx1))
    inter_h = max(0.0, min(ay2, by2) - max(ay1, by1))
    inter = inter_w * inter_h
    # areas from the corners so that iou(a, a) is exactly 1
    union = (ax2 - ax1) * (ay2 - ay1) + (bx2 - bx1) * (by2 - by1) - inter
    if union <= 0:
        return 0.0
    return inter / union


def nms(boxes: np.ndarray, scores: np.ndarray, cfg: NMSConfig) -> np.ndarray:
    """
    Simple NumPy NMS. Expects boxes shape (N,4) in xyxy and scores shape (N,).
    Returns indices of boxes to keep, highest score first.

    Equal scores keep input order. A box is dropped only when its IoU with a
    kept box is strictly above the threshold.
    """

    if boxes.size == 0:
        return np.empty((0,), dtype=np.int64)

    x1 = boxes[:, 0]
    y1 = boxes[:, 1]
    x2 = boxes[:, 2]
    y2 = boxes[:, 3]
    areas = (x2 - x1) * (y2 - y1)

    order = np.argsort(-scores, kind="stable")
    keep = []

    while order.size > 0:
        i = order[0]
        keep.append(i)
        rest = order[1:]

        xx1 = np.maximum(x1[i], x1[rest])
        yy1 = np.maximum(y1[i], y1[rest])
        xx2 = np.minimum(x2[i], x2[rest])
        yy2 = np.minimum(y2[i], y2[rest])

        w = np.maximum(0.0, xx2 - xx1)
        h = np.maximum(0.0, yy2 - yy1)
        inter = w * h
        union = areas[i] + areas[rest] - inter
        overlap = np.divide(inter, union, out=np.zeros_like(inter), where=union > 0)

        order = rest[overlap <= cfg.iou_threshold]

    return np.array(keep, dtype=np.int64)


def suppress(boxes: Sequence[ScoredBox], cfg: NMSConfig = NMSConfig()) -> List[ScoredBox]:
    """
    Per-class greedy NMS.

    Groups come out in first-seen class order, each sorted by confidence.
    Boxes of different classes never suppress each other.
    """

    groups: Dict[int, List[ScoredBox]] = {}
    for box in boxes:
        groups.setdefault(box.class_id, []).append(box)

    kept: List[ScoredBox] = []
    for group in groups.values():
        xyxy = np.array([b.as_xyxy() for b in group], dtype=np.float64)
        scores = np.array([b.confidence for b in group], dtype=np.float64)
        keep_idx = nms(xyxy, scores, cfg)
        kept.extend(group[int(i)] for i in keep_idx)
    return kept
