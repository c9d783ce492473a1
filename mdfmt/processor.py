"""Discovery of Markdown files and batch processing of them."""

from __future__ import annotations

import os
import sys
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator

from mdfmt.config import Config

FILE_PERMISSIONS = 0o600
MAX_WORKERS = 8


@dataclass(frozen=True)
class FileInfo:
    """A file selected for processing."""

    path: str
    relative_path: str = ""
    is_directory: bool = False
    size: int = 0


@dataclass
class ProcessingResult:
    """Outcome of processing one file."""

    file: FileInfo
    success: bool = False
    error: Exception | None = None
    changed: bool = False
    bytes_read: int = 0


def _relative(path: str) -> str:
    try:
        return os.path.relpath(path)
    except ValueError:
        return path


class FileProcessor:
    """Finds Markdown files and runs work over them."""

    def __init__(self, config: Config, verbose: bool = False) -> None:
        self.config = config
        self.verbose = verbose

    def find_files(self, paths: Iterable[str]) -> list[FileInfo]:
        """Return the Markdown files named by, or found below, the given paths.

        Raises OSError if a given path cannot be examined.
        """
        files: list[FileInfo] = []
        seen: set[str] = set()
        for path in paths:
            self._find_in_path(os.fspath(path), files, seen)
        return files

    def _find_in_path(self, path: str, files: list[FileInfo], seen: set[str]) -> None:
        clean_path = os.path.abspath(path)
        if clean_path in seen:
            return
        seen.add(clean_path)

        info = os.stat(clean_path)
        if os.path.isdir(clean_path):
            self._find_in_directory(clean_path, files, seen)
            return

        if self.is_markdown_file(clean_path) and not self.should_ignore_file(clean_path):
            files.append(
                FileInfo(
                    path=clean_path,
                    relative_path=_relative(clean_path),
                    size=info.st_size,
                )
            )

    def _walk(self, directory: str) -> Iterator[tuple[str, os.DirEntry]]:
        """Yield (path, entry) for everything below directory, in name order.

        Directories that are ignored are not descended into.
        """
        try:
            with os.scandir(directory) as scan:
                entries = sorted(scan, key=lambda entry: entry.name)
        except OSError as exc:
            self._warn(directory, exc)
            return
        for entry in entries:
            path = os.path.join(directory, entry.name)
            if os.path.abspath(path) in self._seen:
                continue
            is_dir = entry.is_dir(follow_symlinks=False)
            if self.should_ignore_file(path):
                continue
            yield path, entry
            if is_dir:
                yield from self._walk(path)

    def _find_in_directory(
        self, directory: str, files: list[FileInfo], seen: set[str]
    ) -> None:
        self._seen = seen
        try:
            for path, entry in self._walk(directory):
                if entry.is_dir(follow_symlinks=False):
                    continue
                if not self.is_markdown_file(path):
                    continue
                try:
                    size = entry.stat(follow_symlinks=False).st_size
                except OSError:
                    continue
                files.append(
                    FileInfo(path=path, relative_path=_relative(path), size=size)
                )
        finally:
            del self._seen

    def _warn(self, path: str, exc: OSError) -> None:
        if self.verbose:
            print(f"Warning: skipping {path}: {exc}", file=sys.stderr)

    def is_markdown_file(self, path: str) -> bool:
        """Return True if the path has one of the configured Markdown extensions."""
        return self.config.is_markdown_file(path)

    def should_ignore_file(self, path: str) -> bool:
        """Return True if the path matches one of the ignore patterns."""
        return self.config.should_ignore(path)

    def process_files(
        self,
        files: Iterable[FileInfo],
        processor: Callable[[FileInfo], ProcessingResult],
    ) -> list[ProcessingResult]:
        """Run processor over the files on up to eight worker threads."""
        files = list(files)
        workers = min(MAX_WORKERS, len(files))
        if workers == 0:
            return []
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(processor, files))

    def read_file(self, path: str) -> bytes:
        """Return the contents of a file."""
        if self.verbose:
            print(f"Reading file: {path}")
        with open(path, "rb") as handle:
            return handle.read()

    def write_file(self, path: str, content: bytes) -> None:
        """Replace the contents of a file, creating it if needed."""
        if self.verbose:
            print(f"Writing file: {path}")
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_PERMISSIONS)
        with os.fdopen(fd, "wb") as handle:
            handle.write(content)

    def backup_file(self, path: str) -> None:
        """Copy a file to the same path with ".backup" appended."""
        self.write_file(path + ".backup", self.read_file(path))