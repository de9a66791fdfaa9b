from mhvmc.physics.lattice import Chain, SquareLattice, build_nearest_neighbor_bonds
from mhvmc.physics.observables import magnetization_batch, nearest_neighbor_correlator
from mhvmc.physics.operators import Heisenberg, TransverseFieldIsing, diagonal_energy

__all__ = [
    "Chain",
    "Heisenberg",
    "SquareLattice",
    "TransverseFieldIsing",
    "build_nearest_neighbor_bonds",
    "diagonal_energy",
    "magnetization_batch",
    "nearest_neighbor_correlator",
]
