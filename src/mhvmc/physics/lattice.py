from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from mhvmc.types import IntArray


@dataclass(frozen=True)
class Chain:
    """One-dimensional chain of ``length`` sites."""

    length: int
    pbc: bool = True

    def __post_init__(self) -> None:
        if self.length < 2:
            raise ValueError("length must be >= 2")

    @property
    def n_sites(self) -> int:
        return self.length

    @property
    def bonds(self) -> IntArray:
        """Unique nearest-neighbour bonds ``(i, i + 1)``; the closing bond only with PBC.

        A periodic chain of two sites has a single bond.
        """

        pairs = [(i, i + 1) for i in range(self.length - 1)]
        if self.pbc and self.length > 2:
            pairs.append((self.length - 1, 0))
        return np.asarray(pairs, dtype=np.int64)


@dataclass(frozen=True)
class SquareLattice:
    """Periodic LxL square lattice in row-major index order."""

    L: int

    def __post_init__(self) -> None:
        if self.L < 2:
            raise ValueError("L must be >= 2 for periodic square lattices")

    @property
    def n_sites(self) -> int:
        return self.L * self.L

    def index(self, row: int, col: int) -> int:
        return (row % self.L) * self.L + (col % self.L)

    @property
    def bonds(self) -> IntArray:
        return build_nearest_neighbor_bonds(self.L)


def build_nearest_neighbor_bonds(L: int) -> IntArray:
    """Build unique nearest-neighbor bonds for a periodic square lattice.

    Right and down neighbours of every site are used, which covers each
    undirected bond exactly once for ``L > 2``. For ``L == 2`` the wrap-around
    duplicates are dropped.
    """

    lattice = SquareLattice(L)
    seen: set[tuple[int, int]] = set()
    bonds: list[tuple[int, int]] = []
    for r in range(L):
        for c in range(L):
            i = lattice.index(r, c)
            for j in (lattice.index(r, c + 1), lattice.index(r + 1, c)):
                key = (min(i, j), max(i, j))
                if key in seen:
                    continue
                seen.add(key)
                bonds.append((i, j))
    return np.asarray(bonds, dtype=np.int64)
