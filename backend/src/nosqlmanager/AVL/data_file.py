# Mirror file: the whole index serialized as one JSON array, rewritten per mutation
from __future__ import annotations
import os
import time

from nosqlmanager.errors import IoFailure
from nosqlmanager.io_counters import MirrorStats, record_flush, record_load


class DataFile:
    def __init__(self, path: str):
        self.path = path
        self.stats = MirrorStats()

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def size(self) -> int:
        try:
            return os.path.getsize(self.path)
        except FileNotFoundError:
            return 0
        except OSError as e:
            raise IoFailure(f"cannot stat {self.path}: {e}") from e

    def read_all(self) -> bytes:
        """Whole file contents; b'' when the file does not exist."""
        if not self.exists():
            return b""
        try:
            with open(self.path, "rb") as f:
                b = f.read()
        except OSError as e:
            raise IoFailure(f"cannot read {self.path}: {e}") from e
        record_load(self.stats, len(b))
        return b

    def write_all(self, payload: bytes) -> None:
        """Replace the file contents in a single write, no fsync."""
        t0 = time.perf_counter()
        try:
            with open(self.path, "wb") as f:
                f.write(payload)
                f.flush()
        except OSError as e:
            raise IoFailure(f"cannot write {self.path}: {e}") from e
        record_flush(self.stats, len(payload), (time.perf_counter() - t0) * 1000)
