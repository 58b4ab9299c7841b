"""
Rectangle input loading

Reads rectangle lists from JSON or CSV files:

  JSON: a list of {"x", "y", "width", "height"} objects or
        [x, y, width, height] arrays, optionally wrapped in
        {"rectangles": [...]}
  CSV:  a header row with x, y, width, height columns
"""

import csv
import json
import os
from typing import Any, List

from loguru import logger

from .models import Rectangle

SAMPLE_RECTANGLES_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "sample_rectangles.json")


def _parse_entry(entry: Any, row: int) -> Rectangle:
    try:
        if isinstance(entry, dict):
            return Rectangle(
                x=entry["x"],
                y=entry["y"],
                width=entry["width"],
                height=entry["height"]
            )
        x, y, width, height = entry
        return Rectangle(x=x, y=y, width=width, height=height)
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid rectangle in row {row}: {e}") from e


def load_rectangles_json(path: str) -> List[Rectangle]:
    """Load rectangles from a JSON file"""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("rectangles")
    if not isinstance(data, list):
        raise ValueError(f"No rectangle list found in {path}")

    rectangles = [_parse_entry(entry, i) for i, entry in enumerate(data)]
    logger.info(f"Loaded {len(rectangles)} rectangles from {path}")
    return rectangles


def load_rectangles_csv(path: str) -> List[Rectangle]:
    """Load rectangles from a CSV file with x, y, width, height columns"""
    rectangles = []
    with open(path, "r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        # Row 1 is the header
        for row_number, row in enumerate(reader, 2):
            # Numeric strings are coerced by the model
            rectangles.append(_parse_entry({
                key: row.get(key) for key in ("x", "y", "width", "height")
            }, row_number))

    logger.info(f"Loaded {len(rectangles)} rectangles from {path}")
    return rectangles


def load_rectangles(path: str) -> List[Rectangle]:
    """Load rectangles, choosing the format from the file extension"""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Input file not found: {path}")

    ext = os.path.splitext(path)[1].lower()
    if ext == ".csv":
        return load_rectangles_csv(path)
    if ext == ".json":
        return load_rectangles_json(path)
    raise ValueError(f"Unsupported rectangle file type: {ext or path}")


def load_sample_rectangles() -> List[Rectangle]:
    """Rectangle layout of the original demo window"""
    return load_rectangles_json(SAMPLE_RECTANGLES_PATH)
