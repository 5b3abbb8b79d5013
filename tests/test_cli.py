"""Tests for the CLI module: arg parsing, exit codes, charsets, end-to-end."""

from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from tradiff.cli import (
    CliOptions,
    build_parser,
    check_charset_args,
    load_file,
    main,
    run_compare,
)


def _write(path: Path, text: str, encoding: str = "utf-8") -> Path:
    path.write_bytes(text.encode(encoding))
    return path


# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_two_files(self) -> None:
        ns = build_parser().parse_args(["a.tra", "b.tra"])
        assert ns.file1 == "a.tra"
        assert ns.file2 == "b.tra"
        assert ns.charset is None
        assert ns.color is None
        assert ns.debug is False

    def test_short_charset(self) -> None:
        ns = build_parser().parse_args(["a.tra", "b.tra", "-c", "cp1252"])
        assert ns.charset == "cp1252"

    def test_per_file_charsets(self) -> None:
        ns = build_parser().parse_args(
            ["a.tra", "b.tra", "--charset1", "cp1251", "--charset2", "utf-8"]
        )
        assert ns.charset1 == "cp1251"
        assert ns.charset2 == "utf-8"

    def test_missing_second_file(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["a.tra"])

    def test_invalid_color(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["a.tra", "b.tra", "--color", "sometimes"])


class TestCharsetArgs:
    def test_shared_excludes_per_file(self) -> None:
        ns = build_parser().parse_args(
            ["a.tra", "b.tra", "-c", "utf-8", "--charset1", "x", "--charset2", "y"]
        )
        with pytest.raises(argparse.ArgumentTypeError):
            check_charset_args(ns)

    def test_per_file_must_be_paired(self) -> None:
        ns = build_parser().parse_args(["a.tra", "b.tra", "--charset1", "cp1251"])
        with pytest.raises(argparse.ArgumentTypeError, match="together"):
            check_charset_args(ns)

    def test_valid_combinations(self) -> None:
        for argv in (
            ["a.tra", "b.tra"],
            ["a.tra", "b.tra", "-c", "utf-8"],
            ["a.tra", "b.tra", "--charset1", "x", "--charset2", "y"],
        ):
            check_charset_args(build_parser().parse_args(argv))

    def test_conflict_exit_code(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        a = _write(tmp_path / "a.tra", "@1 = ~a~\n")
        assert main([str(a), str(a), "--charset2", "utf-8"]) == 2
        assert "error:" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_same_entries(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        a = _write(tmp_path / "a.tra", "@1 = ~a~\n@2 = ~b~\n")
        b = _write(tmp_path / "b.tra", "@2 = ~B~\n@1 = ~A~\n")
        assert main([str(a), str(b)]) == 0
        assert capsys.readouterr().out == "Both files contain the same entries.\n"

    def test_differences_still_succeed(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        a = _write(tmp_path / "a.tra", "@1 = ~a~\n@2 = ~b~\n@3 = ~c~\n")
        b = _write(tmp_path / "b.tra", "@2 = ~b~\n@3 = ~c~\n@4 = ~d~\n")
        assert main([str(a), str(b)]) == 0
        out = capsys.readouterr().out
        assert "+ Entries in the second file but not in the first file:\n  - 4\n" in out
        assert "- Entries in the first file but not in the second file:\n  - 1\n" in out

    def test_recovered_errors_still_succeed(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        a = _write(tmp_path / "a.tra", "@1 = ~a~\njunk\n@2 = ~b~\n")
        b = _write(tmp_path / "b.tra", "@1 = ~a~\n@2 = ~b~\n")
        assert main([str(a), str(b)]) == 0
        out = capsys.readouterr().out
        assert f"ERROR The first file ({a}) contains syntax errors" in out
        assert "Both files contain the same entries." in out

    def test_fatal_parse_error_returns_1(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        a = _write(tmp_path / "a.tra", "@1 = ~a~\n")
        b = _write(tmp_path / "b.tra", "@1 = ~a~\n@2 =")
        assert main([str(a), str(b)]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert f"the second file ({b}) could not be parsed" in captured.err
        assert f"{b}:2:5" in captured.err

    def test_missing_file_returns_2(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        a = _write(tmp_path / "a.tra", "@1 = ~a~\n")
        assert main([str(a), str(tmp_path / "missing.tra")]) == 2
        assert "error:" in capsys.readouterr().err

    def test_unknown_charset_returns_2(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        a = _write(tmp_path / "a.tra", "@1 = ~a~\n")
        assert main([str(a), str(a), "-c", "klingon"]) == 2
        assert "unknown charset" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Charsets and decoding
# ---------------------------------------------------------------------------


class TestCharsets:
    def test_per_file_charsets_are_applied(self, tmp_path: Path) -> None:
        a = _write(tmp_path / "a.tra", "@1 = ~Привет~\n", "cp1251")
        b = _write(tmp_path / "b.tra", "@1 = ~Grüße~\n", "cp1252")
        first = load_file(a, "cp1251", "first")
        second = load_file(b, "cp1252", "second")
        assert "Привет" in first.source
        assert "Grüße" in second.source

    def test_lossy_decoding_warns(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        a = _write(tmp_path / "a.tra", "@1 = ~Grüße~\n", "cp1252")
        parsed = load_file(a, None, "first")
        assert parsed.result.errors == ()
        assert "warning: the first file" in capsys.readouterr().err

    def test_shared_charset_end_to_end(self, tmp_path: Path) -> None:
        a = _write(tmp_path / "a.tra", "@1 = ~Grüße~\n", "cp1252")
        b = _write(tmp_path / "b.tra", "@1 = ~Hallo~\n", "cp1252")
        assert main([str(a), str(b), "-c", "windows-1252"]) == 0


# ---------------------------------------------------------------------------
# Output options and --debug
# ---------------------------------------------------------------------------


class TestOutput:
    def _options(self, a: Path, b: Path, **overrides) -> CliOptions:
        values = dict(
            first_file=a,
            second_file=b,
            first_charset=None,
            second_charset=None,
            color="never",
            width=20,
            debug=False,
        )
        values.update(overrides)
        return CliOptions(**values)

    def test_color_always(self, tmp_path: Path) -> None:
        a = _write(tmp_path / "a.tra", "@1 = ~a~\n")
        report = run_compare(self._options(a, a, color="always"))
        assert "\033[" in report

    def test_color_never(self, tmp_path: Path) -> None:
        a = _write(tmp_path / "a.tra", "@1 = ~a~\n")
        assert "\033[" not in run_compare(self._options(a, a))

    def test_width_sets_rule_length(self, tmp_path: Path) -> None:
        a = _write(tmp_path / "a.tra", "@1 = ~a~\n@1 = ~b~\n")
        report = run_compare(self._options(a, a, width=12))
        assert "━" * 12 + "\n" in report
        assert "━" * 13 not in report

    def test_debug_dumps_fragments(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        a = _write(tmp_path / "a.tra", "@1 = ~a~ // c\n")
        assert main([str(a), str(a), "--debug"]) == 0
        err = capsys.readouterr().err
        assert f"Fragments of {a}" in err
        assert "Entry @1" in err
        assert "EndOfLineComment(' c')" in err
