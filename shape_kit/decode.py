from __future__ import annotations

from typing import Iterator

import numpy as np

from .errors import ShapeMismatchError
from .types import DetectionRecord, GridSpec


def flatten_output(preds, spec: GridSpec) -> np.ndarray:
    """
    Flatten a raw model output and check it against the grid geometry.

    Any batch/channel axes are dropped: ORT typically returns `(1, N)` here.
    """

    flat = np.asarray(preds, dtype=np.float64).reshape(-1)
    if flat.size != spec.expected_length:
        raise ShapeMismatchError(expected=spec.expected_length, actual=int(flat.size))
    return flat


def iter_records(preds, spec: GridSpec) -> Iterator[DetectionRecord]:
    """
    Yield one DetectionRecord per (cell, anchor), row-major over (y, x, b).

    The shape check runs eagerly so a malformed tensor fails on the call,
    before a single record is produced.
    """

    flat = flatten_output(preds, spec)
    return _iter_grid(flat, spec)


def _iter_grid(flat: np.ndarray, spec: GridSpec) -> Iterator[DetectionRecord]:
    s, b, c = spec.grid_size, spec.num_anchors, spec.num_classes
    # offset of (y, x, b) is ((y * S + x) * B + b) * record_size
    grid = flat.reshape(s, s, b, spec.record_size)

    for gy in range(s):
        for gx in range(s):
            for anchor in range(b):
                v = grid[gy, gx, anchor]
                yield DetectionRecord(
                    gx=gx,
                    gy=gy,
                    anchor=anchor,
                    objectness_logit=float(v[0]),
                    cx=float(v[1]),
                    cy=float(v[2]),
                    w=float(v[3]),
                    h=float(v[4]),
                    class_logits=tuple(float(x) for x in v[5 : 5 + c]),
                    area=float(v[5 + c]) if spec.has_area else None,
                )
