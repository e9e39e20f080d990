# =============================================================================
# plot_bridge.py — Plotter-facing Entry Points
# =============================================================================
#
# The plotting front end (browser canvas via Pyodide, or the Flask bridge in
# tools/) never touches the binary format.  It hands over the raw .trk bytes
# and gets back plain dicts / JSON:
#
#   decode_trk(trk_bytes, x_name, y_name) -> {
#       "format":      "Trick-10-L",
#       "row_count":   int,
#       "variables":   [{name, unit, type_id, c_type, declared_width, width,
#                        min, max}, ...],
#       "x": name, "y": name,
#       "points":      [[x0, y0], [x1, y1], ...]        (if both axes given)
#   }
#
# Axis selection mirrors the desktop plotter: the user picks two variables
# by name and every row becomes one (x, y) point.
# =============================================================================

from __future__ import annotations
import json

import numpy as np

from TLDE.TMM.constants import DEFAULT_TIME_VARIABLE
from TLDE.TDM.assembler import LogDataset, decode_log


def plot_points(dataset: LogDataset, x_name: str, y_name: str) -> np.ndarray:
    """(row_count, 2) array of (x, y) pairs.  KeyError for an unknown name."""
    x, y = dataset.series(x_name, y_name)
    return np.column_stack((x, y))


def default_axes(dataset: LogDataset) -> tuple[str | None, str | None]:
    """
    Initial axis pick: time on x and the first other variable on y.
    Falls back to the first two variables when time was not logged.
    """
    names = dataset.names()
    if not names:
        return None, None
    x = DEFAULT_TIME_VARIABLE if DEFAULT_TIME_VARIABLE in names else names[0]
    others = [n for n in names if n != x]
    return x, (others[0] if others else x)


def _finite(value: float) -> float | None:
    return float(value) if np.isfinite(value) else None


def dataset_summary(dataset: LogDataset) -> dict:
    variables = []
    for d, col in zip(dataset.descriptors, dataset.columns):
        variables.append({
            "name":           d.name,
            "unit":           d.unit,
            "type_id":        d.type_id,
            "c_type":         d.type_tag.c_name,
            "declared_width": d.declared_width,
            "width":          d.width,
            "min":            _finite(np.nanmin(col)) if len(col) else None,
            "max":            _finite(np.nanmax(col)) if len(col) else None,
        })
    return {
        "format":    dataset.version.text,
        "row_count": dataset.row_count,
        "variables": variables,
    }


def decode_trk(trk_bytes, x_name: str | None = None, y_name: str | None = None) -> dict:
    """
    Main plotter entry point.

    Parameters
    ----------
    trk_bytes : bytes-like — whole .trk file
    x_name    : variable for the x axis (optional)
    y_name    : variable for the y axis (optional)

    Returns
    -------
    Plain JSON-serialisable dict (see module header).  "points" is present
    only when both axis names are given.  NaN / inf samples (in points and
    in min / max) come back as None so the output is strict JSON.

    Raises
    ------
    DecodeError for a malformed file, KeyError for an unknown axis name.
    """
    dataset = decode_log(bytes(trk_bytes))
    result = dataset_summary(dataset)
    if x_name and y_name:
        result["x"] = x_name
        result["y"] = y_name
        result["points"] = [
            [_finite(px), _finite(py)] for px, py in plot_points(dataset, x_name, y_name)
        ]
    return result


def decode_trk_json(trk_bytes, x_name: str | None = None, y_name: str | None = None) -> str:
    """Same as decode_trk() but returns a JSON string — useful when Pyodide
    proxy conversion is unavailable."""
    return json.dumps(decode_trk(trk_bytes, x_name, y_name))
