import json
import tempfile
import unittest
from pathlib import Path

from shape_kit.config import RunConfig, load_run_config
from shape_kit.metadata import load_class_names
from shape_kit.types import DEFAULT_CLASS_NAMES


class TestRunConfig(unittest.TestCase):
    def _tmpdir(self) -> Path:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        return Path(tmpdir.name)

    def _write_config(self, payload: dict) -> Path:
        path = self._tmpdir() / "run.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    def test_load_defaults(self) -> None:
        cfg = load_run_config(self._write_config({"schema_version": 1, "model_path": "Models/trained_model.onnx"}))
        self.assertIsInstance(cfg, RunConfig)
        self.assertEqual(cfg.class_names, DEFAULT_CLASS_NAMES)
        post = cfg.post_config()
        self.assertEqual(post.grid.expected_length, 16 * 16 * 2 * 9)
        self.assertEqual(post.conf_threshold, 0.1)
        self.assertEqual(post.iou_threshold, 0.4)

    def test_overrides(self) -> None:
        cfg = load_run_config(
            self._write_config(
                {
                    "schema_version": 1,
                    "model_path": "m.onnx",
                    "grid_size": 8,
                    "num_anchors": 1,
                    "num_classes": 2,
                    "has_area": False,
                    "conf_threshold": 0.3,
                    "class_names": ["star", "heart"],
                }
            )
        )
        post = cfg.post_config(iou_threshold=0.6, conf_threshold=None)
        self.assertEqual(post.grid.record_size, 7)
        self.assertEqual(post.conf_threshold, 0.3)
        self.assertEqual(post.iou_threshold, 0.6)
        self.assertEqual(post.label_for(1), "heart")

    def test_unknown_keys_rejected(self) -> None:
        with self.assertRaises(ValueError):
            load_run_config(self._write_config({"schema_version": 1, "model_path": "m.onnx", "color": "red"}))

    def test_bad_types_rejected(self) -> None:
        with self.assertRaises(ValueError):
            load_run_config(self._write_config({"schema_version": 1, "model_path": "m.onnx", "grid_size": 2.5}))
        with self.assertRaises(ValueError):
            load_run_config(self._write_config({"schema_version": 1, "model_path": "m.onnx", "iou_threshold": True}))
        with self.assertRaises(ValueError):
            load_run_config(self._write_config({"schema_version": 2, "model_path": "m.onnx"}))

    def test_too_few_class_names(self) -> None:
        with self.assertRaises(ValueError):
            load_run_config(self._write_config({"schema_version": 1, "model_path": "m.onnx", "class_names": ["a"]}))

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_run_config(self._tmpdir() / "nope.json")

    def test_metadata_path_relative_to_config(self) -> None:
        d = self._tmpdir()
        (d / "metadata.yaml").write_text("names:\n  0: maru\n  1: sankaku\n  2: shikaku\n", encoding="utf-8")
        path = d / "run.json"
        path.write_text(
            json.dumps({"schema_version": 1, "model_path": "m.onnx", "metadata_path": "metadata.yaml"}),
            encoding="utf-8",
        )
        self.assertEqual(load_run_config(path).class_names, ("maru", "sankaku", "shikaku"))

    def test_model_path_relative_to_config(self) -> None:
        d = self._tmpdir()
        path = d / "run.json"
        path.write_text(json.dumps({"schema_version": 1, "model_path": "Models/m.onnx"}), encoding="utf-8")
        self.assertEqual(Path(load_run_config(path).model_path), d / "Models" / "m.onnx")

        abs_model = str((d / "elsewhere.onnx").resolve())
        path.write_text(json.dumps({"schema_version": 1, "model_path": abs_model}), encoding="utf-8")
        self.assertEqual(load_run_config(path).model_path, abs_model)


class TestLoadClassNames(unittest.TestCase):
    def test_gaps_and_trailing_keys(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        path = Path(tmpdir.name) / "metadata.yaml"
        path.write_text(
            "# labels\nnames:\n  0: 'circle'\n  2: \"square\"\nimgsz: 512\n",
            encoding="utf-8",
        )
        self.assertEqual(load_class_names(str(path)), ("circle", "1", "square"))

    def test_empty_names(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        path = Path(tmpdir.name) / "metadata.yaml"
        path.write_text("imgsz: 512\n", encoding="utf-8")
        with self.assertRaises(ValueError):
            load_class_names(str(path))


if __name__ == "__main__":
    unittest.main()
