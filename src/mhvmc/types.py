from __future__ import annotations

from typing import TypeAlias

import numpy as np
import numpy.typing as npt

ConfigArray: TypeAlias = npt.NDArray[np.float64]
ConfigBatch: TypeAlias = npt.NDArray[np.float64]
FloatArray: TypeAlias = npt.NDArray[np.float64]
ComplexArray: TypeAlias = npt.NDArray[np.complex128]
IntArray: TypeAlias = npt.NDArray[np.int64]
BoolArray: TypeAlias = npt.NDArray[np.bool_]

SPIN_HALF_STATES: tuple[float, float] = (-1.0, 1.0)
