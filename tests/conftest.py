"""
conftest.py
~~~~~~~~~~~

Shared fixtures: seeded generators, small networks and a finite-difference
gradient checker for layers.
"""

import numpy as np
import pytest

from volumenet import (
    FullyConnectedConfig,
    LayerDef,
    Network,
    Volume,
)


@pytest.fixture
def rng():
    """A fresh generator with a fixed seed."""
    return np.random.default_rng(1234)


@pytest.fixture
def random_volume(rng):
    """Factory for gaussian-filled Volumes drawn from the seeded generator."""

    def make(sx, sy, depth):
        vol = Volume(sx, sy, depth, value=0.0)
        vol.w[...] = rng.standard_normal(vol.size())
        return vol

    return make


@pytest.fixture
def classifier(rng):
    """Input(1,1,2) -> fc(2) -> softmax."""
    return Network(
        [
            LayerDef("input", output=(1, 1, 2)),
            LayerDef("fc", config=FullyConnectedConfig(2)),
            LayerDef("softmax"),
        ],
        rng=rng,
    )


@pytest.fixture
def regressor(rng):
    """Input(1,1,2) -> fc(1) -> regression."""
    return Network(
        [
            LayerDef("input", output=(1, 1, 2)),
            LayerDef("fc", config=FullyConnectedConfig(1)),
            LayerDef("regression"),
        ],
        rng=rng,
    )


def _objective(layer, vol, upstream):
    # scalar whose gradient wrt the layer output is `upstream`
    out = layer.forward(vol, training=False)
    return float(np.dot(out.w, upstream))


@pytest.fixture
def grad_check(rng):
    """
    Compare a layer's analytic gradients against central differences.

    Returns (max_err_input, max_err_params) for a random upstream gradient.
    """

    def check(layer, vol, eps=1e-5):
        out = layer.forward(vol, training=False)
        upstream = rng.standard_normal(out.size())

        for pg in layer.get_response():
            pg.gradients[...] = 0.0
        out.dw[...] = upstream
        layer.backward()
        analytic_in = vol.dw.copy()
        analytic_params = [pg.gradients.copy() for pg in layer.get_response()]

        err_in = 0.0
        for i in range(vol.size()):
            orig = vol.w[i]
            vol.w[i] = orig + eps
            plus = _objective(layer, vol, upstream)
            vol.w[i] = orig - eps
            minus = _objective(layer, vol, upstream)
            vol.w[i] = orig
            numeric = (plus - minus) / (2 * eps)
            err_in = max(err_in, abs(numeric - analytic_in[i]))

        err_params = 0.0
        for pg, analytic in zip(layer.get_response(), analytic_params):
            p = pg.weights
            for j in range(len(p)):
                orig = p[j]
                p[j] = orig + eps
                plus = _objective(layer, vol, upstream)
                p[j] = orig - eps
                minus = _objective(layer, vol, upstream)
                p[j] = orig
                numeric = (plus - minus) / (2 * eps)
                err_params = max(err_params, abs(numeric - analytic[j]))

        return err_in, err_params

    return check
