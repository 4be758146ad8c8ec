from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .metadata import load_class_names
from .postprocess import ShapePostConfig
from .types import DEFAULT_CLASS_NAMES, GridSpec


@dataclass(frozen=True)
class RunConfig:
    schema_version: int
    model_path: str
    grid_size: int = 16
    num_anchors: int = 2
    num_classes: int = 3
    has_area: bool = True
    conf_threshold: float = 0.1
    iou_threshold: float = 0.4
    class_names: Tuple[str, ...] = DEFAULT_CLASS_NAMES
    canvas_size: int = 512

    def __post_init__(self) -> None:
        if self.schema_version != 1:
            raise ValueError("run config schema_version must be 1")
        if not self.model_path:
            raise ValueError("model_path must not be empty")
        if self.canvas_size < 1:
            raise ValueError("canvas_size must be >= 1")
        if len(self.class_names) < self.num_classes:
            raise ValueError(
                f"class_names has {len(self.class_names)} entries, need at least num_classes={self.num_classes}"
            )

    def grid_spec(self) -> GridSpec:
        return GridSpec(
            grid_size=self.grid_size,
            num_anchors=self.num_anchors,
            num_classes=self.num_classes,
            has_area=self.has_area,
        )

    def post_config(self, **overrides: Any) -> ShapePostConfig:
        params: Dict[str, Any] = dict(
            grid=self.grid_spec(),
            conf_threshold=self.conf_threshold,
            iou_threshold=self.iou_threshold,
            class_names=self.class_names,
        )
        params.update({k: v for k, v in overrides.items() if v is not None})
        return ShapePostConfig(**params)


def _require_number(payload: Dict[str, Any], key: str, default: Optional[float] = None) -> float:
    if key not in payload:
        if default is None:
            raise ValueError(f"Missing required key: {key}")
        return default
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return float(value)


def _require_int(payload: Dict[str, Any], key: str, default: Optional[int] = None) -> int:
    if key not in payload:
        if default is None:
            raise ValueError(f"Missing required key: {key}")
        return default
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    return int(value)


def load_run_config(path: Path) -> RunConfig:
    """
    Load a JSON run configuration. Relative `model_path` and `metadata_path` entries resolve
    against the config file's directory.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Run config not found: {path}")
    raw = path.read_text(encoding="utf-8")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid run config JSON: {path}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Run config must be a JSON object")

    allowed = {
        "schema_version",
        "model_path",
        "grid_size",
        "num_anchors",
        "num_classes",
        "has_area",
        "conf_threshold",
        "iou_threshold",
        "class_names",
        "metadata_path",
        "canvas_size",
    }
    unknown = sorted(set(payload.keys()) - allowed)
    if unknown:
        raise ValueError(f"Unknown run config keys: {unknown}")
    if "class_names" in payload and "metadata_path" in payload:
        raise ValueError("Use either class_names or metadata_path, not both")

    model_path = payload.get("model_path")
    if not isinstance(model_path, str):
        raise ValueError("model_path must be a string")
    if model_path and not Path(model_path).is_absolute():
        model_path = str(path.parent / model_path)

    has_area = payload.get("has_area", True)
    if not isinstance(has_area, bool):
        raise ValueError("has_area must be a boolean")

    class_names: Tuple[str, ...] = DEFAULT_CLASS_NAMES
    if "class_names" in payload:
        names = payload["class_names"]
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            raise ValueError("class_names must be a list of strings")
        class_names = tuple(names)
    elif "metadata_path" in payload:
        meta = Path(payload["metadata_path"])
        if not meta.is_absolute():
            meta = path.parent / meta
        class_names = load_class_names(str(meta))

    return RunConfig(
        schema_version=_require_int(payload, "schema_version"),
        model_path=model_path,
        grid_size=_require_int(payload, "grid_size", 16),
        num_anchors=_require_int(payload, "num_anchors", 2),
        num_classes=_require_int(payload, "num_classes", 3),
        has_area=has_area,
        conf_threshold=_require_number(payload, "conf_threshold", 0.1),
        iou_threshold=_require_number(payload, "iou_threshold", 0.4),
        class_names=class_names,
        canvas_size=_require_int(payload, "canvas_size", 512),
    )
