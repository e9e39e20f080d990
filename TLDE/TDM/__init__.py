# =============================================================================
# TLDE/TDM/__init__.py — Trick Decoding Module
# =============================================================================
#
# Turns .trk bytes into a LogDataset.  The decoding core (primitives,
# header, rows, assembler) is pure: no logging, no retries, no global state.
#
# Sub-modules:
#   errors.py      — DecodeError and its five kinds
#   primitives.py  — little-endian primitive decoders, codec table
#   stream.py      — BytesIO cursor helpers
#   header.py      — descriptor reader
#   rows.py        — row decoder
#   assembler.py   — row loop, column transposition, LogDataset
#   source.py      — run directory / file path → LogDataset
# =============================================================================
