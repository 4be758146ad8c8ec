from __future__ import annotations

from typing import Optional, Tuple

from .types import DetectionRecord, GridSpec


def project_box(
    record: DetectionRecord,
    spec: GridSpec,
    image_size: Tuple[int, int],
) -> Tuple[float, float, float, float, Optional[int]]:
    """
    Map grid-relative predictions to display coordinates.

    Args:
        record: decoded anchor prediction
        spec: grid geometry (cell size is derived per axis as W/S and H/S)
        image_size: (width, height) of the display surface

    Returns:
        (cx, cy, w, h, area); area is None when the model has no area channel.
        Offsets outside [0, 1] are not clamped.
    """

    width, height = image_size
    cell_w = width / spec.grid_size
    cell_h = height / spec.grid_size

    cx = (record.gx + record.cx) * cell_w
    cy = (record.gy + record.cy) * cell_h
    w = record.w * width
    h = record.h * height

    area = None
    if record.area is not None:
        area = int(round(record.area * width * height))
    return cx, cy, w, h, area
