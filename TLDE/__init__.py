# =============================================================================
# Trick Log Decoding Engine (TLDE)
# =============================================================================
#
# Reads the binary .trk time-series logs written by a Trick simulation and
# turns them into named float64 columns for plotting and analysis.
#
# ── DATA FLOW ─────────────────────────────────────────────────────────────────
#   {path}/{name}.trk  → TDM.source      loads the whole file into memory
#                      → TDM.header      10 B tag, u32 count, descriptors
#                      → TDM.rows        one fixed-layout row at a time
#                      → TDM.assembler   rows → one column per variable
#                      → LogDataset      queried by variable name
#                      → TViz            (x, y) series for the plotter
#
# RESPONSIBLE for:
#   - Mapping Trick type ids to primitive widths (TMM.types)
#   - Little-endian decoding of every primitive Trick logs
#   - Failing loudly, with a byte offset, on any malformed input
#
# NOT responsible for:
#   - Drawing plots, axis widgets, menus or any event loop
#   - Physical-unit formatting (units are passed through as text)
#   - Parsing the companion .header text file
#
# ── Module layout ─────────────────────────────────────────────────────────────
#   TMM/   Type Mapping Module   — type registry, format constants
#   TDM/   Trick Decoding Module — errors, primitives, header, rows,
#                                  assembler, file source
#   TGM/   Trick Generation Module — .trk writer (fixtures, demo logs)
#   TVM/   Trick Verification Module — inspector CLI, self-validation suite
#   TViz/  plotter bridge — named series, JSON summaries
# =============================================================================

from TLDE.TMM.types import TypeTag, TypeRegistry, DEFAULT_REGISTRY
from TLDE.TDM.errors import (
    DecodeError, TruncatedHeader, UnknownType, TruncatedRow, UnsupportedType, InvalidText,
)
from TLDE.TDM.header import FormatVersion, VariableDescriptor, read_header
from TLDE.TDM.rows import read_row
from TLDE.TDM.assembler import LogDataset, decode_log
from TLDE.TDM.source import LogFileInfo, TrickRun, load_trk
