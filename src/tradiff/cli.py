"""Command-line interface for tradiff."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from tradiff.decode import DecodeError
from tradiff.errors import ParseError

if TYPE_CHECKING:
    from tradiff.parser import ParseResult

_COLOR_CHOICES = ("auto", "always", "never")


class ConfigError(Exception):
    """Raised on an unreadable or invalid config file."""


class FileParseError(Exception):
    """A fatal ParseError tagged with the file it occurred in."""

    def __init__(self, ordinal: str, path: Path, error: ParseError) -> None:
        self.ordinal = ordinal
        self.path = path
        self.error = error
        super().__init__(f"the {ordinal} file ({path}) could not be parsed")

    def __str__(self) -> str:
        return f"{self.args[0]}\n{self.error.format(str(self.path))}"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    first_file: Path
    second_file: Path
    first_charset: str | None
    second_charset: str | None
    color: str
    width: int | None
    debug: bool


@dataclass(frozen=True, slots=True)
class ParsedFile:
    """A decoded and parsed input file."""

    path: Path
    source: str
    result: ParseResult


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="tradiff",
        description="Shows differences in entries between two WeiDU TRA files",
    )
    p.add_argument("file1", help="The first file to be compared")
    p.add_argument("file2", help="The second file to be compared")
    p.add_argument(
        "-c",
        "--charset",
        metavar="CHARSET",
        help="Charset used when reading both files (default: utf-8)",
    )
    p.add_argument("--charset1", metavar="CHARSET", help="Charset used for the first file")
    p.add_argument("--charset2", metavar="CHARSET", help="Charset used for the second file")
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover tradiff.toml next to the first file)",
    )
    p.add_argument(
        "--color",
        choices=_COLOR_CHOICES,
        default=None,
        help="Colorize the report (default: auto)",
    )
    p.add_argument("--debug", action="store_true", help="Dump parsed fragments to stderr")
    return p


def check_charset_args(args: argparse.Namespace) -> None:
    """Enforce that --charset1/--charset2 go together and exclude --charset."""
    if args.charset and (args.charset1 or args.charset2):
        raise argparse.ArgumentTypeError(
            "--charset cannot be used together with --charset1/--charset2"
        )
    if bool(args.charset1) != bool(args.charset2):
        raise argparse.ArgumentTypeError("--charset1 and --charset2 must be given together")


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "tradiff.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid config file {path}: {exc}") from None


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    check_charset_args(args)

    first_file = Path(args.file1)
    second_file = Path(args.file2)
    input_dir = first_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    # Charsets: config < CLI, a shared charset applies to both files
    first_charset: str | None = None
    second_charset: str | None = None
    cfg_input = config.get("input")
    if isinstance(cfg_input, dict):
        shared = cfg_input.get("charset")
        cfg_c1 = cfg_input.get("charset1")
        cfg_c2 = cfg_input.get("charset2")
        if shared is not None and (cfg_c1 is not None or cfg_c2 is not None):
            raise ConfigError(
                "input.charset cannot be used together with input.charset1/input.charset2"
            )
        if (cfg_c1 is None) != (cfg_c2 is None):
            raise ConfigError("input.charset1 and input.charset2 must be given together")
        if isinstance(shared, str):
            first_charset = second_charset = shared
        if isinstance(cfg_c1, str) and isinstance(cfg_c2, str):
            first_charset = cfg_c1
            second_charset = cfg_c2
    if args.charset:
        first_charset = second_charset = args.charset
    if args.charset1:
        first_charset = args.charset1
        second_charset = args.charset2

    # Output: config < CLI
    color = "auto"
    width: int | None = None
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict):
        cfg_color = cfg_output.get("color")
        if cfg_color in _COLOR_CHOICES:
            color = cfg_color
        elif cfg_color is not None:
            raise ConfigError(f"invalid output.color {cfg_color!r} (expected auto, always or never)")
        cfg_width = cfg_output.get("width")
        if isinstance(cfg_width, int) and cfg_width > 0:
            width = cfg_width
    if args.color is not None:
        color = args.color

    return CliOptions(
        first_file=first_file,
        second_file=second_file,
        first_charset=first_charset,
        second_charset=second_charset,
        color=color,
        width=width,
        debug=args.debug,
    )


def load_file(path: Path, charset: str | None, ordinal: str, debug: bool = False) -> ParsedFile:
    """Read, decode and parse one TRA file. Raises ParseError on fatal errors."""
    from tradiff.debug import dump_fragments
    from tradiff.decode import read_tra
    from tradiff.parser import parse

    decoded = read_tra(path, charset)
    if decoded.lossy:
        print(
            f"warning: the {ordinal} file ({path}) is not valid {decoded.encoding}; "
            "undecodable bytes were replaced",
            file=sys.stderr,
        )

    result = parse(decoded.text)

    if debug:
        dump_fragments(result.fragments, f"Fragments of {path}", file=sys.stderr)

    return ParsedFile(path, decoded.text, result)


def run_compare(options: CliOptions) -> str:
    """Load both files, compare their entries and return the rendered report."""
    from tradiff.diff import compare, extract_entries
    from tradiff.report import COLOR, PLAIN, FileReport, render_report, terminal_width

    first = _load_or_fail(options.first_file, options.first_charset, "first", options.debug)
    second = _load_or_fail(options.second_file, options.second_charset, "second", options.debug)

    diff = compare(
        extract_entries(first.result.fragments),
        extract_entries(second.result.fragments),
    )

    if options.color == "always":
        palette = COLOR
    elif options.color == "auto" and sys.stdout.isatty():
        palette = COLOR
    else:
        palette = PLAIN
    width = options.width if options.width is not None else terminal_width()

    return render_report(
        FileReport("first", str(first.path), first.source, first.result.errors),
        FileReport("second", str(second.path), second.source, second.result.errors),
        diff,
        palette,
        width,
    )


def _load_or_fail(path: Path, charset: str | None, ordinal: str, debug: bool) -> ParsedFile:
    try:
        return load_file(path, charset, ordinal, debug)
    except ParseError as exc:
        raise FileParseError(ordinal, path, exc) from exc


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except (argparse.ArgumentTypeError, ConfigError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        report = run_compare(options)
    except FileParseError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except (DecodeError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    sys.stdout.write(report)
    return 0
