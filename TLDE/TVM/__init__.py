# =============================================================================
# TLDE/TVM/__init__.py — Trick Verification Module
# =============================================================================
#
# Sub-modules:
#   trk_inspect.py  — decode a run's .trk and print a sectioned report (CLI)
#   validate.py     — self-validation suite for TMM / TDM / TGM
# =============================================================================
