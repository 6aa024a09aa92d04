# Mirror accounting: loads and flushes of the JSON file.
# Each DataFile owns a MirrorStats; every event is also added to a process-wide
# window that the HTTP adapter resets per request.
from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass
class MirrorStats:
    loads: int = 0
    flushes: int = 0
    bytes_loaded: int = 0
    bytes_flushed: int = 0
    flush_ms: float = 0.0

    def record_load(self, nbytes: int) -> None:
        self.loads += 1
        self.bytes_loaded += nbytes

    def record_flush(self, nbytes: int, elapsed_ms: float) -> None:
        self.flushes += 1
        self.bytes_flushed += nbytes
        self.flush_ms += elapsed_ms

    def reset(self) -> None:
        self.loads = self.flushes = 0
        self.bytes_loaded = self.bytes_flushed = 0
        self.flush_ms = 0.0

    def as_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["flush_ms"] = round(self.flush_ms, 3)
        return out


_window = MirrorStats()

def record_load(stats: MirrorStats, nbytes: int) -> None:
    stats.record_load(nbytes)
    _window.record_load(nbytes)

def record_flush(stats: MirrorStats, nbytes: int, elapsed_ms: float) -> None:
    stats.record_flush(nbytes, elapsed_ms)
    _window.record_flush(nbytes, elapsed_ms)

def reset_counters() -> None:
    _window.reset()

def get_counters() -> Dict[str, Any]:
    return _window.as_dict()
