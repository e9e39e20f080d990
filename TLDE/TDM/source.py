# =============================================================================
# source.py — Run directory → .trk bytes → LogDataset
# =============================================================================
#
# A simulation run writes its log as two files side by side:
#
#   {path}/{name}.trk      binary header + rows   (decoded here)
#   {path}/{name}.header   text description       (recorded, never parsed)
#
# The full path is built by plain string concatenation, matching how run
# directories are named on the command line.
# =============================================================================

from __future__ import annotations
import logging
import os
from dataclasses import dataclass

from TLDE.TMM.constants import LOG_SUFFIX, HEADER_SUFFIX
from .assembler import LogDataset, decode_log

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogFileInfo:
    header_file_name: str
    log_file_name:    str
    full_path:        str

    @classmethod
    def from_args(cls, name: str, path: str) -> "LogFileInfo":
        log_file_name = name + LOG_SUFFIX
        return cls(
            header_file_name=name + HEADER_SUFFIX,
            log_file_name=log_file_name,
            full_path=path + "/" + log_file_name,
        )

    @classmethod
    def from_trk_path(cls, trk_path: str) -> "LogFileInfo":
        """Describe a .trk file given its own path."""
        file_name = os.path.basename(trk_path)
        name = file_name[:-len(LOG_SUFFIX)] if file_name.endswith(LOG_SUFFIX) else file_name
        return cls(
            header_file_name=name + HEADER_SUFFIX,
            log_file_name=file_name,
            full_path=trk_path,
        )


class TrickRun:
    """
    One logged run on disk.

    Usage:
        run = TrickRun.from_args("log_cannon", "RUN_test")
        dataset = run.read()
        t, x = dataset.series("sys.exec.out.time", "dyn.cannon.pos[0]")
    """

    def __init__(self, log_file: LogFileInfo) -> None:
        self.log_file = log_file

    @classmethod
    def from_args(cls, name: str, path: str) -> "TrickRun":
        return cls(LogFileInfo.from_args(name, path))

    def read(self, **decode_kwargs) -> LogDataset:
        """Load the whole .trk into memory and decode it (see decode_log)."""
        path = self.log_file.full_path
        logger.info("Reading %s (header file %s)", path, self.log_file.header_file_name)
        with open(path, "rb") as f:
            data = f.read()

        dataset = decode_log(data, **decode_kwargs)
        logger.info(
            "Decoded %s: %d variables, %d rows, format %s",
            self.log_file.log_file_name, len(dataset.descriptors),
            dataset.row_count, dataset.version.text,
        )
        return dataset


def load_trk(trk_path: str, **decode_kwargs) -> LogDataset:
    """Decode a .trk file given its own path."""
    return TrickRun(LogFileInfo.from_trk_path(trk_path)).read(**decode_kwargs)
