# =============================================================================
# TLDE/TViz/__init__.py — Plotter Bridge
# =============================================================================
#
# Data flow:
#   plotter: uploads .trk bytes, picks an x and a y variable by name
#   Python:  decode_log → LogDataset → (x, y) points + per-variable summary
#   plotter: draws the line
#
# Sub-modules:
#   plot_bridge.py  — plot_points, default_axes, decode_trk / decode_trk_json
# =============================================================================
