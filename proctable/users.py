"""Columns showing a process's users and its kernel wait channel."""

from __future__ import annotations

try:
    import pwd
except ImportError:  # not available on every platform
    pwd = None

from proctable.process import ProcessInfo


def _user_name(uid: int) -> str:
    if pwd is not None:
        try:
            return pwd.getpwuid(uid).pw_name
        except (KeyError, OverflowError):
            pass
    return str(uid)


class Column:
    """A table column: header, unit and the formatted and raw value per pid."""

    def __init__(self, header: str, unit: str = "") -> None:
        self.header = header
        self.unit = unit
        self.fmt_contents: dict[int, str] = {}
        self.raw_contents: dict[int, object] = {}
        self.width = 0

    def _store(self, pid: int, fmt: str, raw: object) -> None:
        self.fmt_contents[pid] = fmt
        self.raw_contents[pid] = raw

    def add(self, proc: ProcessInfo) -> None:
        """Record an empty cell for ``proc``."""
        self._store(proc.pid, "", "")


class UserLogin(Column):
    """The login user of a process."""

    def __init__(self, header: str | None = None) -> None:
        super().__init__(header if header is not None else "Login User")

    def add(self, proc: ProcessInfo) -> None:
        try:
            content = _user_name(proc.curr_proc.loginuid())
        except (OSError, ValueError):
            content = ""
        self._store(proc.pid, content, content)


class UserReal(Column):
    """The real user of a process."""

    def __init__(self, header: str | None = None) -> None:
        super().__init__(header if header is not None else "Real User")

    def add(self, proc: ProcessInfo) -> None:
        status = proc.curr_status
        content = _user_name(status.ruid) if status is not None else ""
        self._store(proc.pid, content, content)


class UserSaved(Column):
    """The saved user of a process."""

    def __init__(self, header: str | None = None) -> None:
        super().__init__(header if header is not None else "Saved User")

    def add(self, proc: ProcessInfo) -> None:
        status = proc.curr_status
        content = _user_name(status.suid) if status is not None else ""
        self._store(proc.pid, content, content)


class Wchan(Column):
    """The kernel function a process is waiting in; ``-`` when not waiting."""

    def __init__(self, header: str | None = None) -> None:
        super().__init__(header if header is not None else "Wchan")

    def add(self, proc: ProcessInfo) -> None:
        try:
            raw = proc.curr_proc.wchan()
        except (OSError, ValueError):
            raw = ""
        fmt = "-" if raw == "0" else raw
        self._store(proc.pid, fmt, raw)