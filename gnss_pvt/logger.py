"""Binary dump of solved PVT epochs."""

from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType
from typing import BinaryIO

import numpy as np

logger = logging.getLogger(__name__)

# One record per solved epoch: 8 little-endian float64 fields, 64 bytes.
DUMP_RECORD_DTYPE = np.dtype(
    [
        ("epoch_time_s", "<f8"),
        ("ecef_x_m", "<f8"),
        ("ecef_y_m", "<f8"),
        ("ecef_z_m", "<f8"),
        ("clk_bias_m", "<f8"),
        ("lat_deg", "<f8"),
        ("lon_deg", "<f8"),
        ("height_m", "<f8"),
    ]
)


class PvtDumpWriter:
    """Append-only writer of fixed-layout PVT dump records.

    The file is opened once at construction. Failing to open or write is
    logged and never raised; a writer that failed to open stays disabled.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._handle: BinaryIO | None = None
        try:
            self._handle = self.path.open("wb")
        except OSError as exc:
            logger.warning("Exception opening PVT lib dump file %s: %s", self.path, exc)
            return
        logger.info("PVT lib dump enabled Log file: %s", self.path)

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def write(
        self,
        epoch_time_s: float,
        position: np.ndarray,
        lat_deg: float,
        lon_deg: float,
        height_m: float,
    ) -> bool:
        """Append one record; return False when nothing was written."""

        if self._handle is None:
            return False
        record = np.zeros(1, dtype=DUMP_RECORD_DTYPE)
        record[0] = (
            epoch_time_s,
            position[0],
            position[1],
            position[2],
            position[3],
            lat_deg,
            lon_deg,
            height_m,
        )
        try:
            self._handle.write(record.tobytes())
        except (OSError, ValueError) as exc:
            logger.warning("Exception writing PVT LS dump file %s: %s", self.path, exc)
            return False
        return True

    def close(self) -> None:
        if self._handle is None:
            return
        try:
            self._handle.close()
        finally:
            self._handle = None

    def __enter__(self) -> PvtDumpWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def load_dump(path: str | Path) -> np.ndarray:
    """Load all records of a PVT dump file as a structured array."""

    return np.fromfile(Path(path), dtype=DUMP_RECORD_DTYPE)
