from __future__ import annotations

from typing import Dict, Tuple


def load_class_names(metadata_path: str) -> Tuple[str, ...]:
    """
    Load the label table from a lightweight `metadata.yaml`:

        names:
          0: circle
          1: triangle
          2: square

    Labels are returned ordered by class id; missing ids become their string
    form. Parsed by hand so PyYAML is not needed.
    """

    names: Dict[int, str] = {}
    in_names = False

    with open(metadata_path, "r", encoding="utf-8") as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            if line == "names:":
                in_names = True
                continue
            if not in_names:
                continue

            if ":" not in line:
                continue
            left, right = line.split(":", 1)
            left = left.strip()
            right = right.strip().strip("'").strip('"')
            if not left.isdigit():
                # next top-level key ends the block
                if not raw.startswith((" ", "\t")):
                    in_names = False
                continue
            names[int(left)] = right

    if not names:
        raise ValueError(f"No class names found in {metadata_path}")
    return tuple(names.get(i, str(i)) for i in range(max(names) + 1))
