from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from mhvmc.types import ComplexArray, ConfigArray, ConfigBatch, IntArray
from mhvmc.utils.checks import require_spin_values


def _check_bonds(bonds: IntArray, n_sites: int) -> None:
    if bonds.ndim != 2 or bonds.shape[1] != 2:
        raise ValueError(f"bonds must have shape (n_bonds, 2), received {bonds.shape}")
    if bonds.size and (bonds.min() < 0 or bonds.max() >= n_sites):
        raise ValueError(f"bond indices must lie in [0, {n_sites})")


def _check_config(x: ConfigArray, n_sites: int) -> ConfigArray:
    x = np.asarray(x, dtype=np.float64)
    if x.shape != (n_sites,):
        raise ValueError(f"expected a configuration of shape ({n_sites},), received {x.shape}")
    require_spin_values("configuration", x)
    return x


def diagonal_energy(x: ConfigArray, bonds: IntArray, J: float) -> float:
    """Compute ``J * sum_<i,j> s_i s_j`` for one configuration."""

    pair_products = x[bonds[:, 0]] * x[bonds[:, 1]]
    return float(J * np.sum(pair_products, dtype=np.float64))


@dataclass(frozen=True)
class TransverseFieldIsing:
    """``H = -h sum_i sigma^x_i + J sum_<ij> sigma^z_i sigma^z_j`` on ``{-1, +1}`` spins."""

    bonds: IntArray
    n_sites: int
    h: float
    J: float = 1.0

    def __post_init__(self) -> None:
        _check_bonds(self.bonds, self.n_sites)

    def get_conn(self, x: ConfigArray) -> tuple[ConfigBatch, ComplexArray]:
        """Diagonal element first, then one single-flip connection per site."""

        x = _check_config(x, self.n_sites)

        x_primes = np.repeat(x[None, :], self.n_sites + 1, axis=0)
        sites = np.arange(self.n_sites)
        x_primes[sites + 1, sites] *= -1.0

        mels = np.full(self.n_sites + 1, -self.h, dtype=np.complex128)
        mels[0] = diagonal_energy(x, self.bonds, self.J)
        return x_primes, mels


@dataclass(frozen=True)
class Heisenberg:
    """``H = J sum_<ij> (s^x s^x + s^y s^y + s^z s^z)`` with Pauli matrices on ``{-1, +1}``.

    Off-diagonal terms exchange antiparallel neighbours with element ``2J``.
    """

    bonds: IntArray
    n_sites: int
    J: float = 1.0

    def __post_init__(self) -> None:
        _check_bonds(self.bonds, self.n_sites)

    def get_conn(self, x: ConfigArray) -> tuple[ConfigBatch, ComplexArray]:
        x = _check_config(x, self.n_sites)

        i, j = self.bonds[:, 0], self.bonds[:, 1]
        flippable = self.bonds[x[i] != x[j]]

        x_primes = np.repeat(x[None, :], flippable.shape[0] + 1, axis=0)
        rows = np.arange(1, flippable.shape[0] + 1)
        x_primes[rows, flippable[:, 0]] = x[flippable[:, 1]]
        x_primes[rows, flippable[:, 1]] = x[flippable[:, 0]]

        mels = np.full(flippable.shape[0] + 1, 2.0 * self.J, dtype=np.complex128)
        mels[0] = diagonal_energy(x, self.bonds, self.J)
        return x_primes, mels
