"""
Inference backends for shape_kit.

Kept out of the package root so decoding and NMS can be imported and tested
without an inference runtime installed.
"""

from __future__ import annotations

__all__ = []
