"""Failure verdicts, critical-speed search and head-to-head comparison."""

from . import comparison as _comparison
from . import failure as _failure

from .comparison import *  # noqa: F401,F403
from .failure import *  # noqa: F401,F403

__all__ = [*_failure.__all__, *_comparison.__all__]
