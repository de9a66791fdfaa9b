from __future__ import annotations

import jax
import numpy as np
import pytest
from jax import numpy as jnp

from mhvmc.machine.parameterization import build_layout, flatten_with_layout, unflatten_with_layout
from mhvmc.machine.rbm import RbmParams, RbmSpin


def _random_configs(n: int, n_sites: int, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.choice([-1.0, 1.0], size=(n, n_sites))


def test_log_val_matches_closed_form() -> None:
    machine = RbmSpin.create(jax.random.PRNGKey(0), n_visible=5, alpha=2.0, init_std=0.3)
    x = _random_configs(9, 5)
    p = machine.params

    theta = x @ p.w + p.b
    expected = x @ p.a + np.sum(np.log(np.cosh(theta)), axis=1)
    np.testing.assert_allclose(machine.log_val(x), expected, rtol=1.0e-12, atol=1.0e-12)


def test_der_log_matches_holomorphic_autodiff() -> None:
    machine = RbmSpin.create(jax.random.PRNGKey(1), n_visible=4, alpha=1.5, init_std=0.3)
    layout = machine.layout
    x = _random_configs(6, 4, seed=1)

    def log_psi(flat: jax.Array, row: jax.Array) -> jax.Array:
        parts = {sl.name: flat[sl.start : sl.stop].reshape(sl.shape) for sl in layout.slices}
        theta = row @ parts["w"] + parts["b"]
        return row @ parts["a"] + jnp.sum(jnp.log(jnp.cosh(theta)))

    jac = jax.jacrev(log_psi, holomorphic=True)
    flat = jnp.asarray(machine.parameters)
    expected = np.stack([np.asarray(jac(flat, jnp.asarray(row, dtype=jnp.complex128))) for row in x])

    np.testing.assert_allclose(machine.der_log(x), expected, rtol=1.0e-10, atol=1.0e-10)


def test_log_val_is_stable_for_large_fields() -> None:
    w = np.full((3, 2), 400.0 + 0.5j)
    params = RbmParams(a=np.zeros(3, dtype=np.complex128), b=np.zeros(2, dtype=np.complex128), w=w)
    machine = RbmSpin(params)
    x = np.array([[1.0, 1.0, 1.0], [-1.0, -1.0, -1.0]])

    values = machine.log_val(x)
    assert np.all(np.isfinite(values))
    np.testing.assert_allclose(values.real, [2 * (1200.0 - np.log(2.0))] * 2, rtol=1.0e-12)


def test_disabled_biases_leave_the_parameter_vector() -> None:
    key = jax.random.PRNGKey(2)
    full = RbmSpin.create(key, n_visible=4, alpha=1.0)
    no_bias = RbmSpin.create(key, n_visible=4, alpha=1.0, use_visible_bias=False, use_hidden_bias=False)

    assert full.n_par == 4 + 4 + 16
    assert no_bias.n_par == 16
    assert no_bias.der_log(_random_configs(3, 4)).shape == (3, 16)
    np.testing.assert_array_equal(no_bias.params.a, np.zeros(4))


def test_set_parameters_round_trip() -> None:
    machine = RbmSpin.create(jax.random.PRNGKey(3), n_visible=3, alpha=1.0, init_std=0.1)
    vector = machine.parameters * (1.0 + 0.5j)
    machine.set_parameters(vector)
    np.testing.assert_allclose(machine.parameters, vector)

    with pytest.raises(ValueError):
        machine.set_parameters(vector[:-1])


def test_rejects_wrong_input_width() -> None:
    machine = RbmSpin.create(jax.random.PRNGKey(4), n_visible=3)
    with pytest.raises(ValueError):
        machine.log_val(np.ones((2, 4)))
    with pytest.raises(ValueError):
        machine.der_log(np.ones(3))


def test_layout_flatten_unflatten() -> None:
    arrays = {"w": np.ones((2, 3)) * (1 + 1j), "a": np.arange(2) + 0j}
    layout = build_layout(arrays)
    assert layout.names == ("a", "w")
    assert layout.size == 8

    flat = flatten_with_layout(arrays, layout)
    unpacked = unflatten_with_layout(flat, layout)
    np.testing.assert_array_equal(unpacked["w"], arrays["w"])
    np.testing.assert_array_equal(unpacked["a"], arrays["a"])

    with pytest.raises(ValueError):
        unflatten_with_layout(flat[:-1], layout)
