"""Formatter configuration: defaults, loading, saving and validation."""

from __future__ import annotations

import dataclasses
import fnmatch
import os
from dataclasses import dataclass, field
from typing import Any

import yaml

DEFAULT_LINE_WIDTH = 80
DEFAULT_MAX_BLANK_LINES = 2
CONFIG_FILE_PERMISSIONS = 0o600

CONFIG_FILE_NAMES = (
    ".mdfmt.yaml",
    ".mdfmt.yml",
    ".mdfmt.json",
    "mdfmt.yaml",
    "mdfmt.yml",
    "mdfmt.json",
)

_BULLET_STYLES = ("-", "*", "+")
_NUMBER_STYLES = (".", ")")
_FENCE_STYLES = ("```", "~~~")


class ConfigError(Exception):
    """Raised when a configuration cannot be read, written or is invalid."""


@dataclass
class HeadingConfig:
    style: str = "atx"
    normalize_levels: bool = True


@dataclass
class ListConfig:
    bullet_style: str = "-"
    number_style: str = "."
    consistent_indentation: bool = True


@dataclass
class CodeConfig:
    fence_style: str = "```"
    language_detection: bool = True


@dataclass
class WhitespaceConfig:
    max_blank_lines: int = DEFAULT_MAX_BLANK_LINES
    trim_trailing_spaces: bool = True
    ensure_final_newline: bool = True


@dataclass
class FilesConfig:
    extensions: list[str] = field(
        default_factory=lambda: [".md", ".markdown", ".mdown"]
    )
    ignore_patterns: list[str] = field(
        default_factory=lambda: ["node_modules/**", ".git/**", "vendor/**"]
    )


def _scalar_to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _coerce(current: Any, value: Any, key: str) -> Any:
    """Convert a loaded YAML value to the type of the field it replaces."""
    if isinstance(current, bool):
        if not isinstance(value, bool):
            raise ConfigError(f"{key}: expected a boolean, got {value!r}")
        return value
    if isinstance(current, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{key}: expected an integer, got {value!r}")
        return value
    if isinstance(current, str):
        if isinstance(value, (str, int, float, bool)):
            return _scalar_to_str(value)
        raise ConfigError(f"{key}: expected a string, got {value!r}")
    if isinstance(current, list):
        if value is None:
            return []
        if not isinstance(value, list):
            raise ConfigError(f"{key}: expected a list, got {value!r}")
        items = []
        for item in value:
            if not isinstance(item, (str, int, float, bool)):
                raise ConfigError(f"{key}: expected a list of strings, got {item!r}")
            items.append(_scalar_to_str(item))
        return items
    raise ConfigError(f"{key}: unsupported value {value!r}")


def _apply(target: Any, data: dict, prefix: str = "") -> None:
    """Overlay values from a mapping onto a dataclass, leaving others as they are."""
    names = {f.name for f in dataclasses.fields(target)}
    for key, value in data.items():
        if key not in names:
            continue
        qualified = f"{prefix}{key}"
        current = getattr(target, key)
        if dataclasses.is_dataclass(current):
            if value is None:
                continue
            if not isinstance(value, dict):
                raise ConfigError(f"{qualified}: expected a mapping, got {value!r}")
            _apply(current, value, qualified + ".")
        elif value is None and not isinstance(current, list):
            continue
        else:
            setattr(target, key, _coerce(current, value, qualified))


def _extension(filename: str) -> str:
    """Return the extension including the dot, searching only the last path element."""
    for i in range(len(filename) - 1, -1, -1):
        char = filename[i]
        if char in ("/", os.sep):
            break
        if char == ".":
            return filename[i:]
    return ""


def _clean(path: str) -> str:
    return os.path.normpath(path) if path else "."


@dataclass
class Config:
    """Complete formatter configuration."""

    line_width: int = DEFAULT_LINE_WIDTH
    heading: HeadingConfig = field(default_factory=HeadingConfig)
    list: ListConfig = field(default_factory=ListConfig)
    code: CodeConfig = field(default_factory=CodeConfig)
    whitespace: WhitespaceConfig = field(default_factory=WhitespaceConfig)
    files: FilesConfig = field(default_factory=FilesConfig)

    @classmethod
    def default(cls) -> Config:
        """Return the built-in default configuration."""
        return cls()

    def load_from_file(self, filename: str | os.PathLike) -> None:
        """Overlay the settings found in a YAML (or JSON) file onto this configuration."""
        try:
            with open(filename, encoding="utf-8") as handle:
                text = handle.read()
        except OSError as exc:
            raise ConfigError(f"failed to read config file: {exc}") from exc

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"failed to parse config file: {exc}") from exc

        if data is None:
            return
        if not isinstance(data, dict):
            raise ConfigError("config file must contain a mapping at the top level")
        _apply(self, data)

    def save_to_file(self, filename: str | os.PathLike) -> None:
        """Write this configuration to a YAML file."""
        text = yaml.safe_dump(dataclasses.asdict(self), sort_keys=False)
        try:
            fd = os.open(
                filename, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CONFIG_FILE_PERMISSIONS
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
        except OSError as exc:
            raise ConfigError(f"failed to write config file: {exc}") from exc

    def validate(self) -> None:
        """Raise ConfigError if any setting is out of range."""
        if self.line_width < 1:
            raise ConfigError("line_width must be greater than 0")
        if self.heading.style not in ("atx", "setext"):
            raise ConfigError("heading.style must be 'atx' or 'setext'")
        if self.list.bullet_style not in _BULLET_STYLES:
            raise ConfigError("list.bullet_style must be '-', '*', or '+'")
        if self.list.number_style not in _NUMBER_STYLES:
            raise ConfigError("list.number_style must be '.' or ')'")
        if self.code.fence_style not in _FENCE_STYLES:
            raise ConfigError("code.fence_style must be '```' or '~~~'")
        if self.whitespace.max_blank_lines < 0:
            raise ConfigError("whitespace.max_blank_lines must be >= 0")

    def is_markdown_file(self, filename: str) -> bool:
        """Return True if the file's extension is one of the configured ones."""
        return _extension(filename).lower() in self.files.extensions

    def should_ignore(self, path: str) -> bool:
        """Return True if the path matches any of the ignore patterns."""
        path = _clean(path)
        base = os.path.basename(path) or path
        for pattern in self.files.ignore_patterns:
            if pattern.endswith("/**"):
                dir_pattern = pattern[: -len("/**")]
                if path.startswith(dir_pattern + "/") or path == dir_pattern:
                    return True
            elif "*" in pattern:
                if fnmatch.fnmatchcase(base, pattern):
                    return True
            elif path == pattern or base == pattern:
                return True
        return False


def find_config_file(start_dir: str | os.PathLike) -> str:
    """Search start_dir and its parents for a configuration file.

    Raises FileNotFoundError if none is found up to the filesystem root.
    """
    directory = os.fspath(start_dir)
    while True:
        for name in CONFIG_FILE_NAMES:
            candidate = os.path.join(directory, name)
            if os.path.exists(candidate):
                return candidate
        parent = os.path.dirname(directory)
        if parent == directory:
            break
        directory = parent
    raise FileNotFoundError("no configuration file found")