"""Command-line interface of the mdfmt Markdown formatter."""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from typing import Sequence

from mdfmt.config import Config, ConfigError, find_config_file
from mdfmt.formatter import Engine
from mdfmt.parser import default_parser
from mdfmt.processor import FileInfo, FileProcessor
from mdfmt.renderer import MarkdownRenderer
from mdfmt.version import get_full_version_info

EXIT_OK = 0
EXIT_CHANGES_NEEDED = 1
EXIT_ERROR = 2
OUTPUT_FILE_PERMISSIONS = 0o600

USAGE = """mdfmt - Fast, reliable Markdown formatter

USAGE:
    mdfmt [OPTIONS] <files...>

DESCRIPTION:
    mdfmt formats Markdown files according to consistent style rules.
    By default, formatted output is written to stdout.

OPTIONS:
    Operation modes (mutually exclusive):
        -w, --write     Write formatted content back to files
        -c, --check     Check if files are formatted correctly (exit 1 if not)
        -l, --list      List files that need formatting
        -d, --diff      Show diff of changes without writing files

    Configuration:
        --config <file> Path to configuration file (.mdfmt.yaml)

    Output control:
        -v, --verbose   Verbose output (show processed files)
        -q, --quiet     Quiet mode (suppress non-error output)

    Information:
        -h, --help      Show this help message
        --version       Print version information

EXAMPLES:
    Format a single file to stdout:
        mdfmt README.md

    Format files in place:
        mdfmt --write *.md
        mdfmt -w docs/

    Check if files are properly formatted:
        mdfmt --check README.md docs/
        echo $?  # 0 if formatted, 1 if needs formatting

    Show what would change:
        mdfmt --diff README.md

    List files that need formatting:
        mdfmt --list docs/

    Use custom configuration:
        mdfmt --config .mdfmt.yaml --write docs/

    Verbose processing:
        mdfmt --verbose --write docs/

EXIT CODES:
    0   Success (no changes needed in check mode)
    1   Files need formatting (check mode only)
    2   Error occurred

CONFIGURATION:
    mdfmt looks for configuration in the following order:
    1. File specified by --config flag
    2. .mdfmt.yaml in current directory
    3. .mdfmt.yaml in parent directories (up to repository root)
    4. Built-in defaults
"""

_HINT = "Run 'mdfmt -h' for usage information."


class _UsageError(Exception):
    """Raised for invalid command-line arguments."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise _UsageError(message)


@dataclass(frozen=True)
class _Options:
    write: bool
    check: bool
    list: bool
    diff: bool
    verbose: bool
    quiet: bool

    @property
    def chatty(self) -> bool:
        return self.verbose and not self.quiet


def _build_parser() -> _ArgumentParser:
    parser = _ArgumentParser(prog="mdfmt", add_help=False, allow_abbrev=False)
    parser.add_argument("-w", "--write", action="store_true")
    parser.add_argument("-c", "--check", action="store_true")
    parser.add_argument("-l", "--list", action="store_true")
    parser.add_argument("-d", "--diff", action="store_true")
    parser.add_argument("--config", default="")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("-q", "--quiet", action="store_true")
    parser.add_argument("--version", action="store_true")
    parser.add_argument("-h", "--help", action="store_true")
    parser.add_argument("paths", nargs="*")
    return parser


def _validate(options: _Options) -> None:
    modes = sum((options.write, options.check, options.list, options.diff))
    if modes > 1:
        raise _UsageError(
            "only one of -w/--write, -c/--check, -l/--list, -d/--diff can be specified"
        )
    if options.verbose and options.quiet:
        raise _UsageError("-v/--verbose and -q/--quiet cannot be used together")


def load_config(config_path: str | os.PathLike | None = None) -> Config:
    """Return the configuration from the given file, a discovered one, or defaults.

    Raises ConfigError if the file cannot be loaded or the result is invalid.
    """
    cfg = Config.default()
    if config_path:
        try:
            cfg.load_from_file(config_path)
        except ConfigError as exc:
            raise ConfigError(f"failed to load config from {config_path}: {exc}") from exc
    else:
        try:
            found = find_config_file(os.getcwd())
        except FileNotFoundError:
            found = None
        if found is not None:
            try:
                cfg.load_from_file(found)
            except ConfigError as exc:
                raise ConfigError(f"failed to load config from {found}: {exc}") from exc

    try:
        cfg.validate()
    except ConfigError as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc
    return cfg


def format_markdown(content: bytes | str, cfg: Config) -> str:
    """Parse, format and render Markdown content."""
    doc = default_parser().parse(content)
    Engine().format(doc, cfg)
    return MarkdownRenderer().render(doc, cfg)


def has_content_changed(original: bytes | str, formatted: str) -> bool:
    """Return True if the content differs once surrounding whitespace is ignored."""
    if isinstance(original, (bytes, bytearray)):
        original = bytes(original).decode("utf-8", errors="replace")
    return original.strip() != formatted.strip()


def _write(path: str, text: str) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, OUTPUT_FILE_PERMISSIONS)
    with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
        handle.write(text)


def _emit(path: str, formatted: str, changed: bool, options: _Options) -> None:
    if options.write:
        if changed:
            try:
                _write(path, formatted)
            except OSError as exc:
                raise OSError(f"failed to write file: {exc}") from exc
            if options.chatty:
                print(f"Formatted: {path}")
        elif options.chatty:
            print(f"Already formatted: {path}")
    elif options.check:
        if changed and options.chatty:
            print(f"would reformat {path}")
    elif options.list:
        if changed:
            print(path)
    elif options.diff:
        if changed:
            print(f"--- {path}\n+++ {path}")
            print("File would be reformatted")
    else:
        sys.stdout.write(formatted)


def _process_file(file: FileInfo, cfg: Config, options: _Options) -> bool:
    try:
        with open(file.path, "rb") as handle:
            content = handle.read()
    except OSError as exc:
        raise OSError(f"failed to read file: {exc}") from exc

    formatted = format_markdown(content, cfg)
    changed = has_content_changed(content, formatted)
    if options.chatty and changed:
        print(f"File {file.path} will be reformatted")
    _emit(file.path, formatted, changed, options)
    return changed


def _process(paths: Sequence[str], cfg: Config, options: _Options) -> int:
    processor = FileProcessor(cfg, options.verbose)
    try:
        files = processor.find_files(paths)
    except OSError as exc:
        raise OSError(f"failed to find files: {exc}") from exc

    if not files:
        if options.chatty:
            print("No markdown files found")
        return EXIT_OK

    has_changes = False
    for file in files:
        try:
            if _process_file(file, cfg, options):
                has_changes = True
        except Exception as exc:
            raise RuntimeError(f"error processing {file.path}: {exc}") from exc

    if options.check and has_changes:
        return EXIT_CHANGES_NEEDED
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    """Run the formatter with the given arguments and return the exit code."""
    args_list = list(sys.argv[1:] if argv is None else argv)
    try:
        args = _build_parser().parse_args(args_list)
    except _UsageError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print(_HINT, file=sys.stderr)
        return EXIT_ERROR

    if args.help:
        sys.stderr.write(USAGE)
        return EXIT_OK
    if args.version:
        print(get_full_version_info())
        return EXIT_OK

    options = _Options(
        write=args.write,
        check=args.check,
        list=args.list,
        diff=args.diff,
        verbose=args.verbose,
        quiet=args.quiet,
    )
    try:
        _validate(options)
    except _UsageError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print(_HINT, file=sys.stderr)
        return EXIT_ERROR

    try:
        cfg = load_config(args.config)
    except (ConfigError, OSError) as exc:
        print(f"Error loading configuration: {exc}", file=sys.stderr)
        return EXIT_ERROR

    if not args.paths:
        if not options.quiet:
            print("Error: No input files or directories specified", file=sys.stderr)
            print(_HINT, file=sys.stderr)
        return EXIT_ERROR

    try:
        return _process(args.paths, cfg, options)
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())