"""Save and load the font metrics table (JSON)."""

import json
from pathlib import Path
from typing import Dict

from .errors import FontExtractionError, OutputWriteError
from .models import FontMetrics


def save_metrics_table(table: Dict[str, FontMetrics], output_path) -> None:
    """Write ``{font name: metrics}`` as pretty-printed JSON.

    Raises:
        OutputWriteError: The file cannot be written
    """
    output_path = Path(output_path)
    data = {name: metrics.to_dict() for name, metrics in table.items()}
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
    except OSError as e:
        raise OutputWriteError(
            f"Failed to write font metrics to {output_path}: {e}"
        ) from e


def load_metrics_table(path) -> Dict[str, FontMetrics]:
    """Read a table written by save_metrics_table.

    Raises:
        FontExtractionError: The file is missing, corrupted or incomplete
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise FontExtractionError(f"Could not read font metrics from {path}: {e}") from e

    if not isinstance(data, dict):
        raise FontExtractionError(f"Font metrics file {path} must hold a JSON object")

    table: Dict[str, FontMetrics] = {}
    for name, entry in data.items():
        try:
            table[name] = FontMetrics.from_dict(entry)
        except (KeyError, TypeError, ValueError) as e:
            raise FontExtractionError(
                f"Incomplete metrics for '{name}' in {path}: {e}"
            ) from e
    return table
