"""Version and build information for mdfmt."""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass

SHORT_COMMIT_HASH_LENGTH = 7
UNKNOWN_VALUE = "unknown"

# Build-time values; a release build overwrites these.
VERSION = "dev"
COMMIT = UNKNOWN_VALUE
DATE = UNKNOWN_VALUE
BUILT_BY = UNKNOWN_VALUE
BUILD_NUMBER = "0"


def _runtime_version() -> str:
    return f"Python {platform.python_version()}"


def _platform() -> str:
    machine = platform.machine().lower() or UNKNOWN_VALUE
    return f"{sys.platform}/{machine}"


def _is_known(value: str) -> bool:
    return value not in (UNKNOWN_VALUE, "")


def _short_commit(commit: str) -> str:
    return commit[:SHORT_COMMIT_HASH_LENGTH]


def get_version() -> str:
    """Return the version string, with the build number when one is set."""
    if BUILD_NUMBER not in ("0", ""):
        return f"{VERSION} (build {BUILD_NUMBER})"
    return VERSION


def get_full_version_info() -> str:
    """Return a two-line description of the version and the build."""
    version_line = f"mdfmt {get_version()}"
    if _is_known(COMMIT):
        version_line += f" ({_short_commit(COMMIT)})"

    build_info = []
    if _is_known(DATE):
        build_info.append(f"built {DATE.replace('_', ' ')}")
    if _is_known(BUILT_BY):
        build_info.append(f"by {BUILT_BY}")
    build_info.append(f"with {_runtime_version()}")
    build_info.append(f"for {_platform()}")

    return "\n".join([version_line, " ".join(build_info)])


@dataclass(frozen=True)
class BuildInfo:
    """Details of how and where this build was made."""

    version: str
    commit: str
    date: str
    built_by: str
    python_version: str
    platform: str

    def __str__(self) -> str:
        if self.version == "dev":
            return (
                f"mdfmt {self.version} ({self.commit}) built with "
                f"{self.python_version} on {self.platform}"
            )
        return f"mdfmt {self.version} built on {self.date} with {self.python_version}"

    def short(self) -> str:
        """Return the version followed by a shortened commit hash."""
        if not self.commit:
            return self.version
        return f"{self.version} ({_short_commit(self.commit)})"


def get_build_info() -> BuildInfo:
    """Return the current build information."""
    return BuildInfo(
        version=VERSION,
        commit=COMMIT,
        date=DATE,
        built_by=BUILT_BY,
        python_version=_runtime_version(),
        platform=_platform(),
    )