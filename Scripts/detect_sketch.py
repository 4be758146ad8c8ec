from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

import cv2

from shape_kit import (
    DrawingSurface,
    ShapePostConfig,
    draw_boxes,
    format_label,
    load_class_names,
    load_pipeline,
    load_run_config,
)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )


def _load_surface(args: argparse.Namespace, canvas_size: int) -> DrawingSurface:
    if args.image is not None:
        img = cv2.imread(args.image)
        if img is None:
            raise FileNotFoundError(f"Could not read image at path: {args.image}")
        return DrawingSurface.from_image(img, width=canvas_size, height=canvas_size)

    strokes_path = Path(args.strokes)
    if not strokes_path.exists():
        raise FileNotFoundError(f"Strokes file not found: {strokes_path}")
    strokes = json.loads(strokes_path.read_text(encoding="utf-8"))
    if not isinstance(strokes, list):
        raise ValueError("Strokes file must hold a JSON list of point lists, e.g. [[[10, 10], [50, 60]]]")

    surface = DrawingSurface(width=canvas_size, height=canvas_size)
    for stroke in strokes:
        surface.add_stroke(stroke)
    return surface


def main() -> int:
    parser = argparse.ArgumentParser(description="Detect hand-drawn shapes and visualize the boxes.")
    src = parser.add_mutually_exclusive_group(required=True)
    src.add_argument("--image", default=None, help="Path to a drawing (white strokes on black).")
    src.add_argument("--strokes", default=None, help="Path to a JSON list of strokes (lists of [x, y] points).")
    parser.add_argument("--config", default=None, help="Optional JSON run config (model, grid, thresholds, labels).")
    parser.add_argument("--model", default=None, help="Path to the .onnx model (overrides the config).")
    parser.add_argument("--metadata", default=None, help="Path to class metadata (names mapping).")
    parser.add_argument("--conf", type=float, default=None, help="Objectness threshold (default 0.1).")
    parser.add_argument("--iou", type=float, default=None, help="IoU threshold for NMS (default 0.4).")
    parser.add_argument("--no-nms", action="store_true", help="Disable NMS and keep every candidate.")
    parser.add_argument(
        "--onnx-providers",
        default=None,
        help='Comma-separated ORT providers, e.g. "CPUExecutionProvider".',
    )
    parser.add_argument("--show-scores", action="store_true", help="Annotate per-class scores and area.")
    parser.add_argument("--show", action="store_true", help="Show a window with visualized detections.")
    parser.add_argument("--out", default=None, help="Optional output image path for the visualization.")
    parser.add_argument("--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args()

    _setup_logging(args.verbose)

    canvas_size = 512
    if args.config:
        run_cfg = load_run_config(Path(args.config))
        canvas_size = run_cfg.canvas_size
        model_path = args.model or run_cfg.model_path
        class_names = load_class_names(args.metadata) if args.metadata else None
        post_cfg = run_cfg.post_config(
            conf_threshold=args.conf,
            iou_threshold=args.iou,
            class_names=class_names,
            apply_nms=False if args.no_nms else None,
        )
    else:
        model_path = args.model or "Models/trained_model.onnx"
        defaults = ShapePostConfig()
        post_cfg = ShapePostConfig(
            conf_threshold=defaults.conf_threshold if args.conf is None else args.conf,
            iou_threshold=defaults.iou_threshold if args.iou is None else args.iou,
            class_names=load_class_names(args.metadata) if args.metadata else defaults.class_names,
            apply_nms=not bool(args.no_nms),
        )

    onnx_providers = None
    if args.onnx_providers:
        onnx_providers = [p.strip() for p in str(args.onnx_providers).split(",") if p.strip()]

    pipeline = load_pipeline(model_path, post_cfg=post_cfg, onnx_providers=onnx_providers)

    surface = _load_surface(args, canvas_size)
    boxes = pipeline(surface)

    for box in boxes:
        print(format_label(box, show_scores=True, show_area=True), box.as_xywh())

    if args.out or args.show:
        vis = draw_boxes(surface.render(), boxes, show_scores=args.show_scores, show_area=args.show_scores)
        if args.out:
            ok = cv2.imwrite(args.out, vis)
            if not ok:
                raise RuntimeError(f"Failed to write output image: {args.out}")
        if args.show:
            cv2.imshow("detections", vis)
            cv2.waitKey(0)
            cv2.destroyAllWindows()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
