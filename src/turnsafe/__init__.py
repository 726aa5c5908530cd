"""Top-level package for turnsafe.

This package loads vehicle manifests, evaluates spin-out and rollover limits
for a constant-radius turn and ramps pairs of vehicles against each other.
The physics itself lives in :mod:`turnsafe_core`.
"""

from ._version import __version__
from turnsafe_core import (
    CriticalSpeedResult,
    DriveType,
    EnvironmentParams,
    FailureAnalysis,
    FailureType,
    InvalidParameterError,
    VehicleSpec,
    analyze_failure,
    compare_outcomes,
    create_environment,
    find_critical_speed,
)
from .exporters import exporters_registry
from .sweep import (
    DuelResult,
    SweepSettings,
    independent_sweep,
    run_duel,
    synchronized_sweep,
)
from .vehicles import CatalogueVehicle, get_vehicle, load_vehicles

__all__ = [
    "__version__",
    "CatalogueVehicle",
    "CriticalSpeedResult",
    "DriveType",
    "DuelResult",
    "EnvironmentParams",
    "FailureAnalysis",
    "FailureType",
    "InvalidParameterError",
    "SweepSettings",
    "VehicleSpec",
    "analyze_failure",
    "compare_outcomes",
    "create_environment",
    "exporters_registry",
    "find_critical_speed",
    "get_vehicle",
    "independent_sweep",
    "load_vehicles",
    "run_duel",
    "synchronized_sweep",
]
