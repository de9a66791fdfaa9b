from mhvmc.config.presets import ising_chain_small_config, ising_square_small_config
from mhvmc.config.schemas import (
    EstimatorConfig,
    IsingConfig,
    LatticeConfig,
    RbmConfig,
    RunConfig,
    SamplerConfig,
    StepsConfig,
)

__all__ = [
    "EstimatorConfig",
    "IsingConfig",
    "LatticeConfig",
    "RbmConfig",
    "RunConfig",
    "SamplerConfig",
    "StepsConfig",
    "ising_chain_small_config",
    "ising_square_small_config",
]
