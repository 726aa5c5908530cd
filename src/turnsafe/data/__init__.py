"""Embedded data resources for turnsafe."""

from __future__ import annotations

from importlib import resources
from pathlib import Path

__all__ = ["VEHICLES_RESOURCE", "vehicles_root"]


def _resource(name: str):
    return resources.files(__name__).joinpath(name)


VEHICLES_RESOURCE = _resource("vehicles")


def vehicles_root() -> Path:
    """Return the directory holding the bundled vehicle manifests."""

    return Path(str(VEHICLES_RESOURCE))
