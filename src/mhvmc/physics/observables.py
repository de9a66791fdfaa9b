from __future__ import annotations

import numpy as np

from mhvmc.types import ConfigBatch, FloatArray, IntArray


def magnetization_batch(samples: ConfigBatch) -> FloatArray:
    """Mean local state per sample."""

    if samples.ndim != 2:
        raise ValueError("samples must be rank-2")
    return np.asarray(np.mean(samples, axis=1, dtype=np.float64), dtype=np.float64)


def nearest_neighbor_correlator(samples: ConfigBatch, bonds: IntArray) -> float:
    """Average nearest-neighbor correlator ``<s_i s_j>`` over samples and bonds."""

    if samples.ndim != 2:
        raise ValueError("samples must be rank-2")
    pair_products = samples[:, bonds[:, 0]] * samples[:, bonds[:, 1]]
    return float(np.mean(pair_products, dtype=np.float64))
