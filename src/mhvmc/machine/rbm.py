from __future__ import annotations

from dataclasses import dataclass, replace

import jax
import numpy as np
from jax import Array
from jax import numpy as jnp

from mhvmc.machine.parameterization import (
    FlatParameterLayout,
    build_layout,
    flatten_with_layout,
    unflatten_with_layout,
)
from mhvmc.types import ComplexArray, ConfigBatch

jax.config.update("jax_enable_x64", True)


@dataclass(frozen=True)
class RbmParams:
    """Complex RBM parameters for ``log psi(x) = a.x + sum_j lncosh(b_j + x.W[:, j])``."""

    a: ComplexArray
    b: ComplexArray
    w: ComplexArray

    @property
    def n_visible(self) -> int:
        return int(self.w.shape[0])

    @property
    def n_hidden(self) -> int:
        return int(self.w.shape[1])


def init_rbm_params(
    key: Array,
    n_visible: int,
    n_hidden: int,
    init_std: float,
) -> RbmParams:
    """Complex Gaussian initialisation with standard deviation ``init_std`` per part."""

    if n_visible < 1 or n_hidden < 1:
        raise ValueError("n_visible and n_hidden must be >= 1")

    keys = jax.random.split(key, 6)

    def _complex_normal(k_re: Array, k_im: Array, shape: tuple[int, ...]) -> ComplexArray:
        re = np.asarray(jax.random.normal(k_re, shape, dtype=jnp.float64))
        im = np.asarray(jax.random.normal(k_im, shape, dtype=jnp.float64))
        return (init_std * (re + 1j * im)).astype(np.complex128)

    return RbmParams(
        a=_complex_normal(keys[0], keys[1], (n_visible,)),
        b=_complex_normal(keys[2], keys[3], (n_hidden,)),
        w=_complex_normal(keys[4], keys[5], (n_visible, n_hidden)),
    )


def _lncosh(z: Array) -> Array:
    # cosh is even: fold onto Re(z) >= 0 so exp(-2z) cannot overflow.
    s = jnp.where(jnp.real(z) < 0, -z, z)
    return s + jnp.log1p(jnp.exp(-2.0 * s)) - jnp.log(2.0)


@jax.jit
def _log_val(x: Array, a: Array, b: Array, w: Array) -> Array:
    theta = x @ w + b
    return x @ a + jnp.sum(_lncosh(theta), axis=-1)


@jax.jit
def _der_log(x: Array, b: Array, w: Array) -> dict[str, Array]:
    x = x.astype(w.dtype)
    tanh_theta = jnp.tanh(x @ w + b)
    return {
        "a": x,
        "b": tanh_theta,
        "w": x[:, :, None] * tanh_theta[:, None, :],
    }


class RbmSpin:
    """Restricted Boltzmann machine wavefunction over real-valued local states.

    Implements the :class:`mhvmc.sampling.backend.Machine` protocol. Disabled
    biases are held at zero and left out of the parameter vector.
    """

    def __init__(
        self,
        params: RbmParams,
        use_visible_bias: bool = True,
        use_hidden_bias: bool = True,
    ) -> None:
        if params.a.shape != (params.n_visible,) or params.b.shape != (params.n_hidden,):
            raise ValueError(
                "bias shapes incompatible with weights: "
                f"a={params.a.shape}, b={params.b.shape}, w={params.w.shape}"
            )
        if not use_visible_bias:
            params = replace(params, a=np.zeros_like(params.a))
        if not use_hidden_bias:
            params = replace(params, b=np.zeros_like(params.b))

        self._use_visible_bias = use_visible_bias
        self._use_hidden_bias = use_hidden_bias
        self._params = params
        self._layout = build_layout(self._named_arrays(params))

    @classmethod
    def create(
        cls,
        key: Array,
        n_visible: int,
        alpha: float = 1.0,
        init_std: float = 0.01,
        use_visible_bias: bool = True,
        use_hidden_bias: bool = True,
    ) -> RbmSpin:
        n_hidden = max(1, int(round(alpha * n_visible)))
        params = init_rbm_params(key, n_visible=n_visible, n_hidden=n_hidden, init_std=init_std)
        return cls(params, use_visible_bias=use_visible_bias, use_hidden_bias=use_hidden_bias)

    @property
    def params(self) -> RbmParams:
        return self._params

    @property
    def n_visible(self) -> int:
        return self._params.n_visible

    @property
    def n_hidden(self) -> int:
        return self._params.n_hidden

    @property
    def layout(self) -> FlatParameterLayout:
        return self._layout

    @property
    def n_par(self) -> int:
        return self._layout.size

    @property
    def parameters(self) -> ComplexArray:
        return flatten_with_layout(self._named_arrays(self._params), self._layout)

    def set_parameters(self, vector: ComplexArray) -> None:
        unpacked = unflatten_with_layout(vector, self._layout)
        self._params = replace(self._params, **unpacked)

    def log_val(self, x: ConfigBatch) -> ComplexArray:
        x = self._check_input(x)
        p = self._params
        out = _log_val(jnp.asarray(x), jnp.asarray(p.a), jnp.asarray(p.b), jnp.asarray(p.w))
        return np.asarray(out, dtype=np.complex128)

    def der_log(self, x: ConfigBatch) -> ComplexArray:
        x = self._check_input(x)
        p = self._params
        blocks = _der_log(jnp.asarray(x), jnp.asarray(p.b), jnp.asarray(p.w))
        out = np.empty((x.shape[0], self.n_par), dtype=np.complex128)
        for sl in self._layout.slices:
            out[:, sl.start : sl.stop] = np.asarray(blocks[sl.name]).reshape(x.shape[0], -1)
        return out

    def _named_arrays(self, params: RbmParams) -> dict[str, np.ndarray]:
        named: dict[str, np.ndarray] = {"w": params.w}
        if self._use_visible_bias:
            named["a"] = params.a
        if self._use_hidden_bias:
            named["b"] = params.b
        return named

    def _check_input(self, x: ConfigBatch) -> np.ndarray:
        x = np.asarray(x, dtype=np.float64)
        if x.ndim != 2 or x.shape[1] != self.n_visible:
            raise ValueError(
                f"expected configurations of shape (n, {self.n_visible}), received {x.shape}"
            )
        return x

    def __repr__(self) -> str:
        return (
            f"RbmSpin(n_visible={self.n_visible}, n_hidden={self.n_hidden}, "
            f"n_par={self.n_par})"
        )
