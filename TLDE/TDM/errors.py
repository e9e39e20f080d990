# =============================================================================
# errors.py — Decode Errors
# =============================================================================
#
# Every error is fatal for the decode call that raised it: a .trk stream has
# no record markers, so once the cursor is out of step with the layout there
# is nothing to resynchronise on.  Each error carries the byte offset at
# which it was detected.
# =============================================================================

from __future__ import annotations


class DecodeError(ValueError):
    """Base class for all .trk decode failures."""

    kind = "DecodeError"

    def __init__(self, message: str, offset: int | None = None) -> None:
        self.message = message
        self.offset  = offset
        super().__init__(self._format())

    def _format(self) -> str:
        if self.offset is None:
            return f"{self.kind}: {self.message}"
        return f"{self.kind} at byte {self.offset}: {self.message}"

    def at(self, offset: int) -> "DecodeError":
        """Return self with the detection offset filled in (if still unset)."""
        if self.offset is None:
            self.offset = offset
            self.args = (self._format(),)
        return self


class TruncatedHeader(DecodeError):
    kind = "TruncatedHeader"


class UnknownType(DecodeError):
    kind = "UnknownType"

    def __init__(self, type_id: int, offset: int | None = None) -> None:
        self.type_id = type_id
        super().__init__(f"type identifier {type_id} is not in the type table", offset)


class TruncatedRow(DecodeError):
    kind = "TruncatedRow"


class UnsupportedType(DecodeError):
    kind = "UnsupportedType"

    def __init__(self, message: str, type_tag=None, offset: int | None = None) -> None:
        self.type_tag = type_tag
        super().__init__(message, offset)


class InvalidText(DecodeError):
    kind = "InvalidText"
