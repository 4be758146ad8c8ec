from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np


PathLike = Union[str, Path]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OnnxRuntimeBackendConfig:
    """
    Configuration for ONNX Runtime inference.

    - providers: ORT execution providers (e.g., ["CPUExecutionProvider"])
    - input_name/output_name: override auto-selected I/O names if needed
    """

    providers: Optional[Sequence[str]] = None
    input_name: Optional[str] = None
    output_name: Optional[str] = None


class OnnxRuntimeBackend:
    """
    Inference session handle for the shape detector.

    The ORT session is created once here and reused for every `infer` call.
    Expects a float32 (1, 1, H, W) grayscale tensor and returns the detector
    output as a NumPy array.
    """

    def __init__(self, model_path: PathLike, cfg: OnnxRuntimeBackendConfig = OnnxRuntimeBackendConfig()):
        try:
            import onnxruntime as ort  # type: ignore
        except Exception as e:  # pragma: no cover
            raise ImportError(
                "onnxruntime is required for the ONNX backend. Install it with `pip install onnxruntime`."
            ) from e

        self.model_path = Path(model_path)
        if not self.model_path.exists():
            raise FileNotFoundError(str(self.model_path))

        providers = list(cfg.providers) if cfg.providers is not None else None
        self.session = ort.InferenceSession(str(self.model_path), providers=providers)

        self.input_name = cfg.input_name or self.session.get_inputs()[0].name
        self.output_name = cfg.output_name or self.session.get_outputs()[0].name
        logger.info("Loaded %s (input=%s, output=%s)", self.model_path.name, self.input_name, self.output_name)

    @property
    def providers_in_use(self) -> Sequence[str]:
        return tuple(self.session.get_providers())

    def infer(self, tensor: np.ndarray) -> np.ndarray:
        tensor = np.ascontiguousarray(tensor, dtype=np.float32)
        outputs = self.session.run([self.output_name], {self.input_name: tensor})
        return outputs[0]
