from __future__ import annotations

import importlib.util
import sys
from pathlib import Path


def _ensure_paths() -> None:
    # Repo root for `import shape_kit` without an install; tests dir for `_tensors`.
    here = Path(__file__).resolve().parent
    for p in (here.parent, here):
        if str(p) not in sys.path:
            sys.path.insert(0, str(p))


_ensure_paths()

# Rendering and rasterization tests need OpenCV; the core tests do not.
collect_ignore = []
if importlib.util.find_spec("cv2") is None:
    collect_ignore.append("test_canvas_visualize.py")
