from __future__ import annotations

import argparse
import logging
from pathlib import Path

import numpy as np

from mhvmc.config.presets import ising_chain_small_config, ising_square_small_config
from mhvmc.physics.observables import magnetization_batch
from mhvmc.utils.io import save_json, save_npz
from mhvmc.utils.logging import configure_logging
from mhvmc.vmc.pipeline import run_from_config


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sample a random RBM on the transverse-field Ising model")
    parser.add_argument("--mode", choices=("chain", "square"), default="chain")
    parser.add_argument("--output-dir", type=Path, default=Path("results/sample_ising"))
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    if args.mode == "chain":
        config = ising_chain_small_config(seed=7 if args.seed is None else args.seed)
    else:
        config = ising_square_small_config(seed=11 if args.seed is None else args.seed)

    result = run_from_config(config)

    output_dir: Path = args.output_dir

    sampled = result.sample_set
    payload = {
        "mode": args.mode,
        "config": config.model_dump(),
        "n_samples": result.n_samples,
        "acceptance_rate": result.acceptance_rate,
        "energy": {
            "mean_real": result.mean_error.mean.real,
            "mean_imag": result.mean_error.mean.imag,
            "stderr": result.mean_error.stderr,
        },
        "mean_abs_magnetization": float(np.mean(np.abs(magnetization_batch(sampled.samples)))),
        "gradient_norm": None if result.gradient is None else float(np.linalg.norm(result.gradient)),
    }
    save_json(output_dir / "metrics.json", payload)
    save_npz(
        output_dir / "samples.npz",
        samples=sampled.samples,
        log_values=sampled.log_values,
        local_values=result.local_values,
        gradient=result.gradient,
    )


if __name__ == "__main__":
    main()
