"""Columns showing memory figures and write throughput of a process."""

from __future__ import annotations

from proctable.process import ProcessInfo
from proctable.users import Column
from proctable.util import bytify

_U64_MAX = 2**64 - 1
_BYTES = "[bytes]"


def _kib_to_bytes(value: int) -> int:
    """Convert kB to bytes, saturating at the 64-bit unsigned maximum."""
    return min(value * 1024, _U64_MAX)


def _pick_header(header: str | None, default: str) -> str:
    return header if header is not None else default


def _add_status_memory(column: Column, proc: ProcessInfo, field: str) -> None:
    """Store one kB-valued field of the ``status`` file, converted to bytes."""
    status = proc.curr_status
    value = getattr(status, field) if status is not None else None
    if value is None:
        column._store(proc.pid, "", 0)
        return
    raw = _kib_to_bytes(value)
    column._store(proc.pid, bytify(raw), raw)


class VmData(Column):
    """Size of the data segment."""

    def __init__(self, header: str | None = None) -> None:
        super().__init__(_pick_header(header, "VmData"), _BYTES)

    def add(self, proc: ProcessInfo) -> None:
        _add_status_memory(self, proc, "vmdata")


class VmExe(Column):
    """Size of the text segment."""

    def __init__(self, header: str | None = None) -> None:
        super().__init__(_pick_header(header, "VmExe"), _BYTES)

    def add(self, proc: ProcessInfo) -> None:
        _add_status_memory(self, proc, "vmexe")


class VmHwm(Column):
    """Peak resident set size."""

    def __init__(self, header: str | None = None) -> None:
        super().__init__(_pick_header(header, "VmHwm"), _BYTES)

    def add(self, proc: ProcessInfo) -> None:
        _add_status_memory(self, proc, "vmhwm")


class VmLib(Column):
    """Size of shared library code."""

    def __init__(self, header: str | None = None) -> None:
        super().__init__(_pick_header(header, "VmLib"), _BYTES)

    def add(self, proc: ProcessInfo) -> None:
        _add_status_memory(self, proc, "vmlib")


class VmLock(Column):
    """Size of locked memory."""

    def __init__(self, header: str | None = None) -> None:
        super().__init__(_pick_header(header, "VmLock"), _BYTES)

    def add(self, proc: ProcessInfo) -> None:
        _add_status_memory(self, proc, "vmlck")


class VmPeak(Column):
    """Peak virtual memory size."""

    def __init__(self, header: str | None = None) -> None:
        super().__init__(_pick_header(header, "VmPeak"), _BYTES)

    def add(self, proc: ProcessInfo) -> None:
        _add_status_memory(self, proc, "vmpeak")


class VmPin(Column):
    """Size of pinned memory."""

    def __init__(self, header: str | None = None) -> None:
        super().__init__(_pick_header(header, "VmPin"), _BYTES)

    def add(self, proc: ProcessInfo) -> None:
        _add_status_memory(self, proc, "vmpin")


class VmPte(Column):
    """Size of page table entries."""

    def __init__(self, header: str | None = None) -> None:
        super().__init__(_pick_header(header, "VmPte"), _BYTES)

    def add(self, proc: ProcessInfo) -> None:
        _add_status_memory(self, proc, "vmpte")


class VmStack(Column):
    """Size of the stack."""

    def __init__(self, header: str | None = None) -> None:
        super().__init__(_pick_header(header, "VmStack"), _BYTES)

    def add(self, proc: ProcessInfo) -> None:
        _add_status_memory(self, proc, "vmstk")


class VmSwap(Column):
    """Swapped-out virtual memory size."""

    def __init__(self, header: str | None = None) -> None:
        super().__init__(_pick_header(header, "VmSwap"), _BYTES)

    def add(self, proc: ProcessInfo) -> None:
        _add_status_memory(self, proc, "vmswap")


class VmRss(Column):
    """Resident set size, taken from ``stat``."""

    def __init__(self, header: str | None = None) -> None:
        super().__init__(_pick_header(header, "VmRSS"), _BYTES)

    def add(self, proc: ProcessInfo) -> None:
        raw = proc.curr_proc.stat.rss_bytes()
        self._store(proc.pid, bytify(raw), raw)


class VmSize(Column):
    """Virtual memory size, taken from ``stat``."""

    def __init__(self, header: str | None = None) -> None:
        super().__init__(_pick_header(header, "VmSize"), _BYTES)

    def add(self, proc: ProcessInfo) -> None:
        raw = proc.curr_proc.stat.vsize
        self._store(proc.pid, bytify(raw), raw)


def _interval_divisor(interval: float) -> int:
    """Whole seconds plus the millisecond part of the interval."""
    total_ns = round(interval * 1_000_000_000)
    secs, rest = divmod(total_ns, 1_000_000_000)
    return secs + rest // 1_000_000


class WriteBytes(Column):
    """Bytes written per second between the two samples."""

    def __init__(self, header: str | None = None) -> None:
        super().__init__(_pick_header(header, "Write"), "[B/s]")

    def add(self, proc: ProcessInfo) -> None:
        if proc.curr_io is None or proc.prev_io is None:
            self._store(proc.pid, "", 0)
            return
        divisor = _interval_divisor(proc.interval)
        if divisor == 0:
            raise ZeroDivisionError("sampling interval is too short to compute throughput")
        written = proc.curr_io.write_bytes - proc.prev_io.write_bytes
        raw = written * 1000 // divisor
        self._store(proc.pid, bytify(raw), raw)