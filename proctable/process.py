"""Snapshots of running processes and threads read from a procfs tree."""

from __future__ import annotations

import errno
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, TypeVar

_T = TypeVar("_T")

_VM_FIELDS = {
    "vmpeak": "VmPeak",
    "vmsize": "VmSize",
    "vmlck": "VmLck",
    "vmpin": "VmPin",
    "vmhwm": "VmHWM",
    "vmrss": "VmRSS",
    "vmdata": "VmData",
    "vmstk": "VmStk",
    "vmexe": "VmExe",
    "vmlib": "VmLib",
    "vmpte": "VmPTE",
    "vmswap": "VmSwap",
}

_IO_FIELDS = (
    "rchar",
    "wchar",
    "syscr",
    "syscw",
    "read_bytes",
    "write_bytes",
    "cancelled_write_bytes",
)


def _page_size() -> int:
    try:
        return os.sysconf("SC_PAGE_SIZE")
    except (AttributeError, ValueError, OSError):
        return 4096


@dataclass(frozen=True)
class Stat:
    """The fields of a ``stat`` file, up to the resident set size."""

    pid: int
    comm: str
    state: str
    ppid: int
    pgrp: int
    session: int
    tty_nr: int
    tpgid: int
    flags: int
    minflt: int
    cminflt: int
    majflt: int
    cmajflt: int
    utime: int
    stime: int
    cutime: int
    cstime: int
    priority: int
    nice: int
    num_threads: int
    itrealvalue: int
    starttime: int
    vsize: int
    rss: int
    processor: int | None = None

    def rss_bytes(self) -> int:
        """Resident set size in bytes."""
        return max(self.rss, 0) * _page_size()


_STAT_INT_FIELDS = (
    "ppid",
    "pgrp",
    "session",
    "tty_nr",
    "tpgid",
    "flags",
    "minflt",
    "cminflt",
    "majflt",
    "cmajflt",
    "utime",
    "stime",
    "cutime",
    "cstime",
    "priority",
    "nice",
    "num_threads",
    "itrealvalue",
    "starttime",
    "vsize",
    "rss",
)

_PROCESSOR_INDEX = 36


def parse_stat(text: str) -> Stat:
    """Parse the contents of a ``stat`` file; raise ValueError if malformed."""
    text = text.strip()
    opening = text.find("(")
    closing = text.rfind(")")
    if opening < 0 or closing < opening:
        raise ValueError("malformed stat: missing command name")
    pid = int(text[:opening].strip())
    comm = text[opening + 1 : closing]
    rest = text[closing + 1 :].split()
    if len(rest) < 1 + len(_STAT_INT_FIELDS):
        raise ValueError("malformed stat: too few fields")
    values = {name: int(token) for name, token in zip(_STAT_INT_FIELDS, rest[1:])}
    processor = int(rest[_PROCESSOR_INDEX]) if len(rest) > _PROCESSOR_INDEX else None
    return Stat(pid=pid, comm=comm, state=rest[0], processor=processor, **values)


@dataclass(frozen=True)
class Status:
    """Identity and memory figures from a ``status`` file; memory sizes in kB."""

    name: str
    pid: int
    ppid: int
    ruid: int
    euid: int
    suid: int
    fuid: int
    rgid: int
    egid: int
    sgid: int
    fgid: int
    threads: int | None = None
    vmpeak: int | None = None
    vmsize: int | None = None
    vmlck: int | None = None
    vmpin: int | None = None
    vmhwm: int | None = None
    vmrss: int | None = None
    vmdata: int | None = None
    vmstk: int | None = None
    vmexe: int | None = None
    vmlib: int | None = None
    vmpte: int | None = None
    vmswap: int | None = None


def _ids(value: str, key: str) -> list[int]:
    ids = [int(part) for part in value.split()]
    if len(ids) < 4:
        raise ValueError(f"malformed status: {key} needs four ids")
    return ids


def parse_status(text: str) -> Status:
    """Parse the contents of a ``status`` file; raise ValueError if malformed."""
    entries: dict[str, str] = {}
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        if sep:
            entries[key.strip()] = value.strip()
    try:
        uids = _ids(entries["Uid"], "Uid")
        gids = _ids(entries["Gid"], "Gid")
        name = entries["Name"]
        pid = int(entries["Pid"])
    except KeyError as exc:
        raise ValueError(f"malformed status: missing {exc.args[0]}") from None
    memory = {
        attr: int(entries[key].split()[0]) for attr, key in _VM_FIELDS.items() if key in entries
    }
    threads = int(entries["Threads"]) if "Threads" in entries else None
    return Status(
        name=name,
        pid=pid,
        ppid=int(entries.get("PPid", "0")),
        ruid=uids[0],
        euid=uids[1],
        suid=uids[2],
        fuid=uids[3],
        rgid=gids[0],
        egid=gids[1],
        sgid=gids[2],
        fgid=gids[3],
        threads=threads,
        **memory,
    )


@dataclass(frozen=True)
class Io:
    """Counters from an ``io`` file."""

    rchar: int
    wchar: int
    syscr: int
    syscw: int
    read_bytes: int
    write_bytes: int
    cancelled_write_bytes: int


def parse_io(text: str) -> Io:
    """Parse the contents of an ``io`` file; raise ValueError if malformed."""
    entries: dict[str, int] = {}
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        if sep:
            entries[key.strip()] = int(value.strip())
    missing = [name for name in _IO_FIELDS if name not in entries]
    if missing:
        raise ValueError(f"malformed io: missing {', '.join(missing)}")
    return Io(**{name: entries[name] for name in _IO_FIELDS})


class Process:
    """A process (or thread) directory; its ``stat`` is read when created."""

    def __init__(self, pid: int, root: str | Path = "/proc") -> None:
        self.pid = pid
        self.root = Path(root)
        self.path = self.root / str(pid)
        self.owner = self.path.stat().st_uid
        self.stat = parse_stat(self._read("stat"))

    def __repr__(self) -> str:
        return f"Process(pid={self.pid}, path={str(self.path)!r})"

    def _read(self, name: str) -> str:
        return (self.path / name).read_text(encoding="utf-8", errors="replace")

    def io(self) -> Io:
        return parse_io(self._read("io"))

    def status(self) -> Status:
        return parse_status(self._read("status"))

    def cmdline(self) -> list[str]:
        data = (self.path / "cmdline").read_bytes()
        parts = data.split(b"\0")
        if parts and parts[-1] == b"":
            parts.pop()
        return [part.decode("utf-8", errors="replace") for part in parts]

    def loginuid(self) -> int:
        return int(self._read("loginuid").strip())

    def wchan(self) -> str:
        return self._read("wchan")

    def tasks(self) -> Iterator[Process]:
        """Yield the threads of this process, skipping any that cannot be read."""
        task_dir = self.path / "task"
        for tid in _numeric_entries(task_dir):
            try:
                yield Process(tid, task_dir)
            except (OSError, ValueError):
                continue


@dataclass
class ProcessTask:
    """Either a whole process or a bare thread known only by its stat and owner."""

    stat: Stat
    owner: int
    process: Process | None = None

    @classmethod
    def from_process(cls, process: Process) -> ProcessTask:
        return cls(process.stat, process.owner, process)

    def _require(self) -> Process:
        if self.process is None:
            raise OSError(errno.ENOTSUP, "not supported")
        return self.process

    def cmdline(self) -> list[str]:
        return self._require().cmdline()

    def loginuid(self) -> int:
        return self._require().loginuid()

    def wchan(self) -> str:
        return self._require().wchan()


@dataclass
class ProcessInfo:
    """Two samples of one process or thread; ``interval`` is in seconds."""

    pid: int
    ppid: int
    curr_proc: ProcessTask
    prev_proc: ProcessTask
    curr_io: Io | None
    prev_io: Io | None
    curr_status: Status | None
    interval: float


def _numeric_entries(directory: Path) -> list[int]:
    try:
        names = [entry.name for entry in directory.iterdir()]
    except OSError:
        return []
    return sorted(int(name) for name in names if name.isdigit())


def _ok(read: Callable[[], _T]) -> _T | None:
    try:
        return read()
    except (OSError, ValueError):
        return None


def _all_processes(root: Path) -> list[Process]:
    processes = []
    for pid in _numeric_entries(root):
        try:
            processes.append(Process(pid, root))
        except (OSError, ValueError):
            continue
    return processes


_TaskSample = tuple[int, Stat, "Status | None", "Io | None"]


def _collect_tasks(process: Process, samples: dict[int, _TaskSample]) -> None:
    for task in process.tasks():
        if task.pid != process.pid:
            samples[task.pid] = (process.pid, task.stat, _ok(task.status), _ok(task.io))


def collect_proc(interval: float, with_thread: bool = False, root: str | Path = "/proc") -> list[ProcessInfo]:
    """Sample every process twice, ``interval`` seconds apart."""
    root = Path(root)
    base_procs = []
    base_tasks: dict[int, _TaskSample] = {}

    for proc in _all_processes(root):
        io = _ok(proc.io)
        started = time.monotonic()
        if with_thread:
            _collect_tasks(proc, base_tasks)
        base_procs.append((proc.pid, proc, io, started))

    time.sleep(interval)

    result = []
    for pid, prev_proc, prev_io, prev_time in base_procs:
        try:
            curr_proc = Process(pid, root)
        except (OSError, ValueError):
            curr_proc = prev_proc
        curr_io = _ok(curr_proc.io)
        curr_status = _ok(curr_proc.status)
        elapsed = time.monotonic() - prev_time
        owner = curr_proc.owner

        curr_tasks: dict[int, _TaskSample] = {}
        if with_thread:
            _collect_tasks(curr_proc, curr_tasks)

        result.append(
            ProcessInfo(
                pid=pid,
                ppid=curr_proc.stat.ppid,
                curr_proc=ProcessTask.from_process(curr_proc),
                prev_proc=ProcessTask.from_process(prev_proc),
                curr_io=curr_io,
                prev_io=prev_io,
                curr_status=curr_status,
                interval=elapsed,
            )
        )

        for tid, (owner_pid, curr_stat, task_status, task_io) in curr_tasks.items():
            previous = base_tasks.pop(tid, None)
            if previous is None:
                continue
            _, prev_stat, _, prev_task_io = previous
            result.append(
                ProcessInfo(
                    pid=tid,
                    ppid=owner_pid,
                    curr_proc=ProcessTask(curr_stat, owner),
                    prev_proc=ProcessTask(prev_stat, owner),
                    curr_io=task_io,
                    prev_io=prev_task_io,
                    curr_status=task_status,
                    interval=elapsed,
                )
            )

    return result