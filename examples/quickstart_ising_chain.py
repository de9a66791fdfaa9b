from __future__ import annotations

from mhvmc.config.presets import ising_chain_small_config
from mhvmc.vmc.pipeline import run_from_config

if __name__ == "__main__":
    config = ising_chain_small_config(seed=0)
    result = run_from_config(config)

    print("Ising chain sampling run complete")
    print(f"Samples: {result.n_samples}")
    print(f"Acceptance rate: {result.acceptance_rate:.3f}")
    print(f"Energy: {result.mean_error.mean.real:.6f} ± {result.mean_error.stderr:.6f}")
