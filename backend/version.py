"""
Application version: installed distribution metadata first, else the repo root VERSION file.
"""

from __future__ import annotations

import re
from importlib import metadata
from pathlib import Path

DISTRIBUTION_NAME = "scoreheroes-core"
FALLBACK_VERSION = "0.0.0"

SEMVER_PATTERN = re.compile(r"^\d+\.\d+\.\d+(-[a-zA-Z0-9.]+)?$")


def _version_file() -> Path:
    # backend/version.py -> repo root
    return Path(__file__).resolve().parent.parent / "VERSION"


def _read_version_file(path: Path) -> str:
    if not path.is_file():
        return FALLBACK_VERSION
    try:
        lines = path.read_text(encoding="utf-8").strip().splitlines()
    except OSError:
        return FALLBACK_VERSION
    return lines[0].strip() if lines else FALLBACK_VERSION


def get_version() -> str:
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return _read_version_file(_version_file())


def is_semver(s: str) -> bool:
    """True for major.minor.patch with an optional -pre suffix (1.0.0, 1.0.0-alpha)."""
    return bool(s and SEMVER_PATTERN.match(s.strip()))
