from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .decode import iter_records
from .nms import NMSConfig, suppress
from .projection import project_box
from .scoring import score_record
from .types import DEFAULT_CLASS_NAMES, GridSpec, ScoredBox


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShapePostConfig:
    """
    Post-processing settings for the grid shape detector.
    """

    grid: GridSpec = GridSpec()
    conf_threshold: float = 0.1
    iou_threshold: float = 0.4
    class_names: Sequence[str] = DEFAULT_CLASS_NAMES
    # If False, skip NMS and return every candidate sorted by confidence.
    apply_nms: bool = True

    def __post_init__(self) -> None:
        if not 0.0 <= self.conf_threshold < 1.0:
            raise ValueError("conf_threshold must be in [0, 1)")
        if not 0.0 <= self.iou_threshold <= 1.0:
            raise ValueError("iou_threshold must be in [0, 1]")

    def label_for(self, class_id: int) -> str:
        if 0 <= class_id < len(self.class_names):
            return self.class_names[class_id]
        return str(class_id)


class ShapePostprocessor:
    """
    Turns one raw grid-detector output into labeled boxes in display coordinates.

    Stages: decode the flat tensor per (cell, anchor) -> sigmoid objectness
    filter + softmax class scores -> project to display space -> drop
    zero-size boxes -> per-class NMS.

    Holds no state between calls; the same input always gives the same boxes.
    """

    def __init__(self, cfg: ShapePostConfig = ShapePostConfig()):
        self.cfg = cfg
        self._nms_cfg = NMSConfig(iou_threshold=cfg.iou_threshold)

    def process(self, preds, image_size: Tuple[int, int]) -> List[ScoredBox]:
        """
        Args:
            preds: raw output for a single image, any shape holding S*S*B*record_size floats
            image_size: (width, height) of the display the boxes are drawn on
        """

        candidates = self.candidates(preds, image_size)
        if not candidates:
            return []

        if not self.cfg.apply_nms:
            return sorted(candidates, key=lambda b: b.confidence, reverse=True)

        kept = suppress(candidates, self._nms_cfg)
        logger.debug("NMS kept %d of %d boxes", len(kept), len(candidates))
        return kept

    def candidates(self, preds, image_size: Tuple[int, int]) -> List[ScoredBox]:
        """
        Boxes above the objectness threshold, before NMS, in grid order.
        """

        grid = self.cfg.grid
        records = iter_records(preds, grid)

        boxes: List[ScoredBox] = []
        degenerate = 0
        for record in records:
            scored = score_record(record, self.cfg.conf_threshold)
            if scored is None:
                continue

            cx, cy, w, h, area = project_box(record, grid, image_size)
            box = ScoredBox(
                label=self.cfg.label_for(scored.class_id),
                class_id=scored.class_id,
                confidence=scored.objectness,
                class_scores=scored.class_scores,
                cx=cx,
                cy=cy,
                w=w,
                h=h,
                area=area,
            )
            if box.is_degenerate():
                degenerate += 1
                continue
            boxes.append(box)

        if degenerate:
            logger.debug("Dropped %d zero-size boxes", degenerate)
        logger.debug("%d of %d anchors above objectness %.2f", len(boxes), grid.num_records, self.cfg.conf_threshold)
        return boxes
