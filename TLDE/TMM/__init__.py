# =============================================================================
# TLDE/TMM/__init__.py — Type Mapping Module
# =============================================================================
#
# Single source of truth for the .trk format's fixed values: the type id
# table and the header layout constants.  Nothing in here does I/O.
#
# Sub-modules:
#   types.py      — TypeTag enum, TypeRegistry, DEFAULT_REGISTRY
#   constants.py  — header layout sizes, file suffixes, data root
# =============================================================================
