import os

import pytest

from proctable.process import (
    Io,
    Process,
    ProcessInfo,
    ProcessTask,
    Stat,
    Status,
    collect_proc,
    parse_io,
    parse_stat,
    parse_status,
)


def stat_line(pid, comm="bash", ppid=1, rss=5, vsize=8192):
    return (
        f"{pid} ({comm}) S {ppid} {pid} {pid} 0 -1 4194304 120 0 3 0 7 2 0 0 20 0 1 0 500 "
        f"{vsize} {rss} 18446744073709551615 1 1 0 0 0 0 0 0 0 0 0 0 17 2 0 0\n"
    )


def status_text(pid, name="bash", uids=(1000, 1001, 1002, 1003), vmdata=None):
    lines = [
        f"Name:\t{name}",
        "State:\tS (sleeping)",
        f"Pid:\t{pid}",
        "PPid:\t1",
        "Uid:\t" + "\t".join(str(u) for u in uids),
        "Gid:\t10\t11\t12\t13",
        "Threads:\t2",
    ]
    if vmdata is not None:
        lines.append(f"VmData:\t    {vmdata} kB")
    return "\n".join(lines) + "\n"


IO_TEXT = (
    "rchar: 100\nwchar: 200\nsyscr: 3\nsyscw: 4\n"
    "read_bytes: 4096\nwrite_bytes: 8192\ncancelled_write_bytes: 0\n"
)


def make_proc(root, pid, ppid=1, threads=(), with_io=True):
    d = root / str(pid)
    d.mkdir()
    (d / "stat").write_text(stat_line(pid, ppid=ppid))
    (d / "status").write_text(status_text(pid, vmdata=2048))
    if with_io:
        (d / "io").write_text(IO_TEXT)
    (d / "cmdline").write_bytes(b"ls\0-l\0")
    (d / "loginuid").write_text("1000")
    (d / "wchan").write_text("do_wait")
    task_dir = d / "task"
    task_dir.mkdir()
    for tid in (pid, *threads):
        t = task_dir / str(tid)
        t.mkdir()
        (t / "stat").write_text(stat_line(tid, ppid=ppid))
        (t / "status").write_text(status_text(tid))
    return d


def test_parse_stat_command_with_parentheses():
    stat = parse_stat(stat_line(42, comm="a) (b", ppid=7))
    assert stat.pid == 42
    assert stat.comm == "a) (b"
    assert stat.state == "S"
    assert stat.ppid == 7
    assert stat.vsize == 8192
    assert stat.rss == 5
    assert stat.processor == 2


def test_parse_stat_rejects_garbage():
    with pytest.raises(ValueError):
        parse_stat("not a stat line")


def test_parse_stat_rejects_short_line():
    with pytest.raises(ValueError):
        parse_stat("1 (x) S 0 1")


def test_rss_bytes_is_multiple_of_pages():
    assert parse_stat(stat_line(1, rss=0)).rss_bytes() == 0
    stat = parse_stat(stat_line(1, rss=3))
    assert stat.rss_bytes() % 3 == 0
    assert stat.rss_bytes() >= 3


def test_parse_status_reads_ids_and_memory():
    status = parse_status(status_text(9, name="sshd", vmdata=2048))
    assert status.name == "sshd"
    assert status.pid == 9
    assert (status.ruid, status.euid, status.suid, status.fuid) == (1000, 1001, 1002, 1003)
    assert (status.rgid, status.sgid) == (10, 12)
    assert status.vmdata == 2048
    assert status.vmswap is None
    assert status.threads == 2


def test_parse_status_requires_uid():
    with pytest.raises(ValueError):
        parse_status("Name:\tx\nPid:\t1\nGid:\t0\t0\t0\t0\n")


def test_parse_io():
    io = parse_io(IO_TEXT)
    assert io.write_bytes == 8192
    assert io.read_bytes == 4096
    assert io.rchar == 100


def test_parse_io_missing_field():
    with pytest.raises(ValueError):
        parse_io("rchar: 1\n")


def test_process_reads_files(tmp_path):
    make_proc(tmp_path, 100, ppid=1)
    proc = Process(100, tmp_path)
    assert proc.pid == 100
    assert proc.stat.ppid == 1
    assert proc.owner == (tmp_path / "100").stat().st_uid
    assert proc.cmdline() == ["ls", "-l"]
    assert proc.loginuid() == 1000
    assert proc.wchan() == "do_wait"
    assert proc.io().write_bytes == 8192
    assert proc.status().vmdata == 2048


def test_process_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Process(12345, tmp_path)


def test_process_tasks(tmp_path):
    make_proc(tmp_path, 100, threads=(101, 102))
    tids = [task.pid for task in Process(100, tmp_path).tasks()]
    assert tids == [100, 101, 102]


def test_bare_task_does_not_support_lookups():
    task = ProcessTask(parse_stat(stat_line(5)), owner=0)
    for call in (task.cmdline, task.loginuid, task.wchan):
        with pytest.raises(OSError):
            call()


def test_process_task_delegates(tmp_path):
    make_proc(tmp_path, 100)
    task = ProcessTask.from_process(Process(100, tmp_path))
    assert task.cmdline() == ["ls", "-l"]
    assert task.stat.pid == 100


def test_collect_proc_without_threads(tmp_path):
    make_proc(tmp_path, 200, ppid=1, threads=(201,))
    make_proc(tmp_path, 100, ppid=0)
    infos = collect_proc(0, with_thread=False, root=tmp_path)
    assert [info.pid for info in infos] == [100, 200]
    assert [info.ppid for info in infos] == [0, 1]
    assert all(info.interval >= 0 for info in infos)
    assert infos[0].curr_io.write_bytes == 8192
    assert infos[0].prev_io.write_bytes == 8192
    assert infos[0].curr_status.vmdata == 2048


def test_collect_proc_with_threads(tmp_path):
    make_proc(tmp_path, 200, threads=(201, 202))
    infos = collect_proc(0, with_thread=True, root=tmp_path)
    assert [info.pid for info in infos] == [200, 201, 202]
    thread = infos[1]
    assert thread.ppid == 200
    assert thread.curr_proc.owner == infos[0].curr_proc.owner
    with pytest.raises(OSError):
        thread.curr_proc.cmdline()


def test_collect_proc_io_missing(tmp_path):
    make_proc(tmp_path, 300, with_io=False)
    (info,) = collect_proc(0, root=tmp_path)
    assert info.curr_io is None
    assert info.prev_io is None


def test_collect_proc_missing_root(tmp_path):
    assert collect_proc(0, root=tmp_path / "absent") == []


def test_collect_proc_skips_unreadable(tmp_path):
    make_proc(tmp_path, 100)
    bad = tmp_path / "101"
    bad.mkdir()
    (bad / "stat").write_text("garbage")
    (tmp_path / "self").mkdir()
    assert [info.pid for info in collect_proc(0, root=tmp_path)] == [100]