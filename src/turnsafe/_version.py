"""Package version, validated as ``MAJOR.MINOR.PATCH``."""

from __future__ import annotations

import re
from importlib import metadata
from pathlib import Path

from packaging.version import InvalidVersion, Version

_DISTRIBUTION = "turnsafe"
_RELEASE_HEADING = re.compile(r"^## v(?P<version>\d+\.\d+\.\d+)\b", re.MULTILINE)


def _changelogs() -> list[Path]:
    # src/turnsafe/_version.py -> src/ and the checkout root
    return [parent / "CHANGELOG.md" for parent in Path(__file__).resolve().parents[1:3]]


def _version_from_changelog() -> str:
    """Latest release heading of ``CHANGELOG.md`` in a development checkout."""

    for changelog in _changelogs():
        if not changelog.is_file():
            continue
        match = _RELEASE_HEADING.search(changelog.read_text(encoding="utf-8"))
        if match:
            return match.group("version")
    raise RuntimeError(
        f"No version for {_DISTRIBUTION!r}: the distribution is not installed and "
        "no CHANGELOG.md release heading was found."
    )


def _validated(raw_version: str) -> str:
    try:
        release = Version(raw_version).release
    except InvalidVersion as exc:
        raise RuntimeError(f"{_DISTRIBUTION!r} has an unparsable version {raw_version!r}.") from exc
    if len(release) != 3:
        raise RuntimeError(
            f"{_DISTRIBUTION!r} version {raw_version!r} is not in MAJOR.MINOR.PATCH form."
        )
    return raw_version


def _load_version() -> str:
    try:
        raw_version = metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        raw_version = _version_from_changelog()
    return _validated(raw_version)


__version__ = _load_version()

__all__ = ["__version__"]
