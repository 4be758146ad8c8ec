from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from shape_kit.types import GridSpec


def make_output(
    spec: GridSpec,
    obj: float = -10.0,
    box: Sequence[float] = (0.5, 0.5, 0.25, 0.25),
    cls: Optional[Sequence[float]] = None,
    area: float = 0.05,
) -> np.ndarray:
    """
    Build an (S, S, B, record_size) output grid where every anchor carries the same values.
    Callers edit single anchors, then flatten.
    """

    cls = [0.0] * spec.num_classes if cls is None else list(cls)
    rec = [obj, *box, *cls]
    if spec.has_area:
        rec.append(area)
    grid = np.empty((spec.grid_size, spec.grid_size, spec.num_anchors, spec.record_size), dtype=np.float32)
    grid[...] = np.array(rec, dtype=np.float32)
    return grid
