from mhvmc.machine.parameterization import (
    FlatParameterLayout,
    ParameterSlice,
    build_layout,
    flatten_with_layout,
    unflatten_with_layout,
)
from mhvmc.machine.rbm import RbmParams, RbmSpin, init_rbm_params

__all__ = [
    "FlatParameterLayout",
    "ParameterSlice",
    "RbmParams",
    "RbmSpin",
    "build_layout",
    "flatten_with_layout",
    "init_rbm_params",
    "unflatten_with_layout",
]
