"""
Post-processing and runtime helpers for a grid-based sketch shape detector.

The core (decode, scoring, projection, NMS) only needs NumPy. OpenCV is used
for rasterizing the drawing surface and rendering boxes; ONNX Runtime is
imported lazily by the inference backend.
"""

from .types import DEFAULT_CLASS_NAMES, DetectionRecord, GridSpec, ScoredBox
from .errors import DegenerateBoxError, ShapeMismatchError
from .decode import iter_records
from .scoring import score_record, sigmoid, softmax
from .projection import project_box
from .nms import NMSConfig, iou, nms, suppress
from .postprocess import ShapePostConfig, ShapePostprocessor
from .canvas import DrawingSurface
from .runtime import ShapePipeline, load_pipeline, find_project_root, resolve_path
from .metadata import load_class_names
from .config import RunConfig, load_run_config
from .visualize import draw_boxes, format_label

__all__ = [
    "DEFAULT_CLASS_NAMES",
    "DetectionRecord",
    "GridSpec",
    "ScoredBox",
    "DegenerateBoxError",
    "ShapeMismatchError",
    "iter_records",
    "score_record",
    "sigmoid",
    "softmax",
    "project_box",
    "NMSConfig",
    "iou",
    "nms",
    "suppress",
    "ShapePostConfig",
    "ShapePostprocessor",
    "DrawingSurface",
    "ShapePipeline",
    "load_pipeline",
    "find_project_root",
    "resolve_path",
    "load_class_names",
    "RunConfig",
    "load_run_config",
    "draw_boxes",
    "format_label",
]
