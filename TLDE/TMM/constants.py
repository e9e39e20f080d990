# =============================================================================
# constants.py — TMM Format Constants
# =============================================================================
#
# Fixed layout values of the Trick .trk binary log.  Every integer in the
# header is a 4-byte little-endian field regardless of the host platform.
#
#   [ format tag 10 B ][ num_params u32 ][ descriptor x num_params ][ rows ... ]
#
# Descriptor record:
#   [ name_len u32 ][ name ][ unit_len u32 ][ unit ][ type_id u32 ][ size u32 ]
#
# Row region: num_params back-to-back fields per row, no padding, repeated
# until end of file.
# =============================================================================

import os

# -----------------------------------------------------------------------------
# HEADER LAYOUT
# -----------------------------------------------------------------------------

FORMAT_TAG_SIZE = 10        # bytes — opaque version marker, e.g. b"Trick-10-L"
COUNT_SIZE      = 4         # bytes — every length / count / id field is a u32

DEFAULT_FORMAT_TAG = b"Trick-10-L"

# Bit-field widths come from the descriptor's declared size, clamped here.
BITFIELD_MAX_WIDTH = 4

# -----------------------------------------------------------------------------
# FILE NAMING  (run directory convention: {path}/{name}.trk + {name}.header)
# -----------------------------------------------------------------------------

LOG_SUFFIX    = ".trk"
HEADER_SUFFIX = ".header"

# Simulation time is logged first by convention; used as the default axis.
DEFAULT_TIME_VARIABLE = "sys.exec.out.time"

# -----------------------------------------------------------------------------
# ENVIRONMENT
# -----------------------------------------------------------------------------

DATA_ROOT_ENV = "TRK_DATA_ROOT"


def data_root() -> str:
    """Directory holding run logs: $TRK_DATA_ROOT, else the working directory."""
    return os.environ.get(DATA_ROOT_ENV) or os.getcwd()
