# =============================================================================
# TLDE/TGM/__init__.py — Trick Generation Module
# =============================================================================
#
# Writes .trk files.  The decoder's test fixtures and the inspector's demo
# log are built here, so the writer must stay byte-compatible with TDM.
#
# Sub-modules:
#   trk_writer.py  — VarSpec, encode_header / encode_row, build_trk, write_trk
# =============================================================================
