from mhvmc.vmc.estimators import MeanWithError, blocking_error_bars, gradient, local_values
from mhvmc.vmc.pipeline import Estimate, build_lattice, estimate, run_from_config

__all__ = [
    "Estimate",
    "MeanWithError",
    "blocking_error_bars",
    "build_lattice",
    "estimate",
    "gradient",
    "local_values",
    "run_from_config",
]
