from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest


ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = ROOT / "src"
for _path in (SRC_ROOT, ROOT):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))

from turnsafe.logging.config import MANAGED_LOGGERS  # noqa: E402
from turnsafe_core.models import EnvironmentParams, VehicleSpec  # noqa: E402

from tests.helpers import CARAVAN_SPEC, CELICA_SPEC, build_environment  # noqa: E402


@pytest.fixture()
def celica() -> VehicleSpec:
    return CELICA_SPEC


@pytest.fixture()
def caravan() -> VehicleSpec:
    return CARAVAN_SPEC


@pytest.fixture()
def environment() -> EnvironmentParams:
    """Dry asphalt, 75 ft radius."""

    return build_environment()


@pytest.fixture()
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty directory so no ambient ``pyproject.toml`` is read."""

    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.delenv("TURNSAFE_CONFIG", raising=False)
    return workdir


@pytest.fixture(autouse=True)
def _restore_managed_loggers() -> Iterator[None]:
    """Undo handlers installed by ``setup_logging`` during a test."""

    snapshot = {}
    for name in MANAGED_LOGGERS:
        logger = logging.getLogger(name)
        snapshot[name] = (list(logger.handlers), logger.level, logger.propagate)
    yield
    for name, (handlers, level, propagate) in snapshot.items():
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            if handler not in handlers:
                logger.removeHandler(handler)
                handler.close()
        logger.setLevel(level)
        logger.propagate = propagate
