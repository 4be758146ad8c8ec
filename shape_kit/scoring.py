from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from .types import DetectionRecord


@dataclass(frozen=True)
class RecordScore:
    objectness: float
    class_scores: Tuple[float, ...]
    class_id: int


def sigmoid(x):
    """
    Numerically stable logistic function; works on scalars and arrays.
    """

    x = np.asarray(x, dtype=np.float64)
    # tanh form does not overflow for large |x|
    out = 0.5 * (1.0 + np.tanh(0.5 * x))
    return out if out.ndim else float(out)


def softmax(logits: Sequence[float]) -> np.ndarray:
    z = np.asarray(logits, dtype=np.float64)
    z = z - np.max(z)
    e = np.exp(z)
    return e / e.sum()


def score_record(record: DetectionRecord, conf_threshold: float = 0.1) -> Optional[RecordScore]:
    """
    Activate objectness and class logits for one record.

    Returns None unless objectness > conf_threshold (NaN never passes). Class scores are softmax
    probabilities; the class id is the arg-max (lowest index wins ties).
    """

    objectness = sigmoid(record.objectness_logit)
    if not objectness > conf_threshold:
        return None

    probs = softmax(record.class_logits)
    return RecordScore(
        objectness=float(objectness),
        class_scores=tuple(float(p) for p in probs),
        class_id=int(np.argmax(probs)),
    )
