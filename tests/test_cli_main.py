from __future__ import annotations

import importlib
import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

cli_main = importlib.import_module("treecopy.cli.main")  # noqa: E402
from treecopy.cli.console import format_progress_line  # noqa: E402
from treecopy.cli.main import main  # noqa: E402
from treecopy.cli.parser import build_parser  # noqa: E402
from treecopy.fs.local import LocalFileSystem  # noqa: E402
from treecopy.fs.report import ReportCopy  # noqa: E402
from treecopy.fs.spec import SpecCopyError, SpecCopyItem, SpecCopyProgress  # noqa: E402


@pytest.fixture(autouse=True)
def _drop_log_sinks() -> Iterator[None]:
    yield
    # sinks added by main() point at pytest's captured stderr
    logger.remove()


def _write_bytes(path: Path, size: int) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)


def test_parser_collects_patterns_until_next_flag() -> None:
    ns, l_unknown = build_parser().parse_known_args(
        ["s", "d", "-include", "*.h,*.cpp", "x.c", "-exclude", "*tmp*", "-skip_empty_dir"]
    )
    assert ns.path_src == "s"
    assert ns.path_dst == "d"
    assert ns.patterns_include == ["*.h,*.cpp", "x.c"]
    assert ns.patterns_exclude == ["*tmp*"]
    assert ns.if_skip_empty_dir
    assert not ns.if_detail_log
    assert l_unknown == []


def test_parser_accumulates_repeated_include() -> None:
    ns = build_parser().parse_args(["s", "d", "-include", "*.h", "-include", "*.cpp"])
    assert ns.patterns_include == ["*.h", "*.cpp"]


def test_parser_dash_tokens_end_pattern_lists_unless_value_like() -> None:
    ns, l_unknown = build_parser().parse_known_args(
        ["s", "d", "-include", "a", "-1", "-a b", "-x*", "-exclude", "e"]
    )
    assert ns.patterns_include == ["a", "-1", "-a b"]
    assert ns.patterns_exclude == ["e"]
    assert l_unknown == ["-x*"]


def test_main_without_positionals_prints_help(tmp_path: Path, capsys) -> None:
    assert main([str(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert "treecopy" in out
    assert "-include" in out


def test_help_flag_exits_before_copy(tmp_path: Path) -> None:
    src = tmp_path / "src"
    _write_bytes(src / "a.txt", 1)

    with pytest.raises(SystemExit) as exc_info:
        main([str(src), str(tmp_path / "dst"), "-help", "-detail_log"])

    assert exc_info.value.code == 0
    assert not (tmp_path / "dst").exists()


def test_main_returns_failure_count(tmp_path: Path, capsys, monkeypatch) -> None:
    src = tmp_path / "src"
    dst = tmp_path / "dst"
    _write_bytes(src / "a.txt", 10)
    _write_bytes(src / "b.txt", 20)
    _write_bytes(src / "c.txt", 30)

    fn_copy = LocalFileSystem.copy_path

    def _deny_c(self, path_src: Path, path_dst: Path, *, if_dir: bool) -> None:
        if path_dst.name == "c.txt":
            raise PermissionError(13, "Permission denied", str(path_dst))
        fn_copy(self, path_src, path_dst, if_dir=if_dir)

    monkeypatch.setattr(LocalFileSystem, "copy_path", _deny_c)

    assert main([str(src), str(dst), "-detail_log"]) == 1

    out = capsys.readouterr().out
    assert "file count:3, all size:60B" in out
    assert "[1/3]" in out and "[3/3]" in out
    assert "[10B 10B/60B, 16.6%]" in out
    assert f"[copy {src / 'c.txt'} failure]" in out
    assert "total 3 files to copy, 2 file copy successful." in out
    assert "1 file copy failure" in out
    assert "Permission denied" in out
    assert "time used: " in out


def test_main_without_detail_log_prints_only_summary(tmp_path: Path, capsys) -> None:
    src = tmp_path / "src"
    _write_bytes(src / "a.txt", 5)

    assert main([str(src), str(tmp_path / "dst")]) == 0

    out = capsys.readouterr().out
    assert "file count:1, all size:5B" in out
    assert "[1/1]" not in out
    assert "total 1 files to copy, 1 file copy successful." in out
    assert "file copy failure" not in out


def test_main_filters_with_flags(tmp_path: Path) -> None:
    src = tmp_path / "src"
    dst = tmp_path / "dst"
    _write_bytes(src / "keep.txt", 1)
    _write_bytes(src / "keep.md", 1)
    _write_bytes(src / "drop.png", 1)
    _write_bytes(src / "secret.txt", 1)
    (src / "empty").mkdir()

    n_status = main(
        [
            str(src),
            str(dst),
            "-include",
            "*.txt",
            "-include",
            "*.md;*empty",
            "-exclude",
            "*secret*",
            "-skip_empty_dir",
        ]
    )

    assert n_status == 0
    assert (dst / "keep.txt").exists()
    assert (dst / "keep.md").exists()
    assert not (dst / "drop.png").exists()
    assert not (dst / "secret.txt").exists()
    assert not (dst / "empty").exists()


def test_main_reports_missing_source(tmp_path: Path, capsys) -> None:
    assert main([str(tmp_path / "missing"), str(tmp_path / "dst")]) == 1
    assert "does not exist" in capsys.readouterr().out


def test_exit_status_is_capped(tmp_path: Path, monkeypatch) -> None:
    spec_error = SpecCopyError(Path("s"), Path("d"), OSError("boom"))
    report = ReportCopy(cnt_files=300, cnt_attempted=300, errors=(spec_error,) * 300)
    monkeypatch.setattr(cli_main, "copy_path", lambda *args, **kwargs: report)

    assert main([str(tmp_path), str(tmp_path / "dst")]) == 255


def test_format_progress_line() -> None:
    progress = SpecCopyProgress(
        item=SpecCopyItem(Path("/src/a.txt"), Path("/dst/a.txt"), 10),
        index=2,
        total=5,
        time_event="09:15:02",
        seconds_item=0.0031,
        seconds_run=0.0415,
        size_copied=30,
        size_all=60,
        percent=50.0,
    )

    assert format_progress_line(progress) == (
        "[09:15:02, 3ms/41ms], [2/5], [10B 30B/60B, 50.0%], "
        f"[copy {Path('/src/a.txt')} complete]"
    )


@pytest.mark.skipif(os.name != "posix", reason="undecodable names are posix-only")
def test_detail_log_survives_non_utf8_file_name(tmp_path: Path, capsys) -> None:
    src = tmp_path / "src"
    dst = tmp_path / "dst"
    _write_bytes(src / "b.txt", 2)
    c_name = os.fsdecode(b"\xff.txt")
    try:
        (src / c_name).write_bytes(b"abc")
    except OSError:
        pytest.skip("filesystem rejects non-UTF-8 names")

    assert main([str(src), str(dst), "-detail_log"]) == 0

    out = capsys.readouterr().out
    assert "\\xff.txt complete]" in out
    assert "b.txt complete]" in out
    assert "total 2 files to copy, 2 file copy successful." in out
    assert (dst / c_name).read_bytes() == b"abc"


@pytest.mark.skipif(os.name != "posix", reason="undecodable names are posix-only")
def test_summary_survives_non_utf8_path_in_error(
    tmp_path: Path, capsys, monkeypatch
) -> None:
    src = tmp_path / "src"
    c_name = os.fsdecode(b"\xfe.txt")
    try:
        _write_bytes(src / c_name, 1)
    except OSError:
        pytest.skip("filesystem rejects non-UTF-8 names")

    def _deny(self, path_src: Path, path_dst: Path, *, if_dir: bool) -> None:
        raise PermissionError(13, "Permission denied", str(path_dst))

    monkeypatch.setattr(LocalFileSystem, "copy_path", _deny)

    assert main([str(src), str(tmp_path / "dst")]) == 1

    out = capsys.readouterr().out
    assert "1 file copy failure" in out
    assert f"[copy {src}/\\xfe.txt -> " in out
