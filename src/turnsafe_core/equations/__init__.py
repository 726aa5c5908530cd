"""Threshold equations and physical constants for :mod:`turnsafe_core`."""

from . import constants as _constants
from . import thresholds as _thresholds

from .constants import *  # noqa: F401,F403
from .thresholds import *  # noqa: F401,F403

__all__ = [*_constants.__all__, *_thresholds.__all__]
