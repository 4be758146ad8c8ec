from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

import numpy as np

from .canvas import DrawingSurface
from .postprocess import ShapePostConfig, ShapePostprocessor
from .types import ScoredBox


PathLike = Union[str, Path]

logger = logging.getLogger(__name__)


def find_project_root(
    start: Optional[PathLike] = None,
    markers: Sequence[str] = ("pyproject.toml", ".git"),
) -> Path:
    """
    Best-effort project root discovery (first parent holding a marker file).
    """

    p = Path(start) if start is not None else Path.cwd()
    p = p.resolve()

    if p.is_file():
        p = p.parent

    for parent in (p, *p.parents):
        for m in markers:
            if (parent / m).exists():
                return parent
    return p


def resolve_path(path: PathLike, root: Optional[PathLike] = "auto") -> Path:
    """
    Resolve `path` to an absolute Path; relative paths resolve against `root`
    or, with root="auto", against the project root.
    """

    p = Path(path)
    if p.is_absolute():
        return p

    if root == "auto" or root is None:
        base = find_project_root()
    else:
        base = Path(root).resolve()

    return (base / p).resolve()


class ShapePipeline:
    """
    Drawing surface -> inference -> post-process.

    The inference callable is injected, so one session can serve many calls
    and tests can substitute a fake. Boxes come back in surface coordinates.
    """

    def __init__(
        self,
        infer_fn: Callable[[np.ndarray], np.ndarray],
        *,
        backend: Optional[object] = None,
        backend_name: Optional[str] = None,
        post_cfg: ShapePostConfig = ShapePostConfig(),
    ):
        self._infer_fn = infer_fn
        self.backend = backend
        self.backend_name = backend_name
        self.post = ShapePostprocessor(post_cfg)

    def __call__(self, surface: DrawingSurface) -> List[ScoredBox]:
        tensor = surface.to_tensor()
        # Inference errors propagate; post-processing never sees a partial result.
        preds = self._infer_fn(tensor)
        boxes = self.post.process(preds, image_size=surface.size)
        logger.debug("Detected %d shapes", len(boxes))
        return boxes


def load_pipeline(
    model_path: PathLike,
    *,
    root: Optional[PathLike] = "auto",
    post_cfg: ShapePostConfig = ShapePostConfig(),
    onnx_providers: Optional[Sequence[str]] = None,
    onnx_input_name: Optional[str] = None,
    onnx_output_name: Optional[str] = None,
) -> ShapePipeline:
    """
    Create a pipeline backed by an ONNX Runtime session.

        pipe = load_pipeline("Models/trained_model.onnx")
        boxes = pipe(surface)
    """

    from .backends.onnxruntime_backend import OnnxRuntimeBackend, OnnxRuntimeBackendConfig

    resolved = resolve_path(model_path, root=root)
    if resolved.suffix.lower() != ".onnx":
        raise ValueError(f"Expected an .onnx model, got '{resolved.suffix}'.")

    ort_backend = OnnxRuntimeBackend(
        resolved,
        OnnxRuntimeBackendConfig(
            providers=onnx_providers,
            input_name=onnx_input_name,
            output_name=onnx_output_name,
        ),
    )
    return ShapePipeline(
        ort_backend.infer,
        backend=ort_backend,
        backend_name="onnxruntime",
        post_cfg=post_cfg,
    )
