"""
test_network.py
~~~~~~~~~~~~~~~

Unit tests for network assembly, the forward fold and the backward sweep.
"""

import numpy as np
import pytest

from volumenet import (
    ConvConfig,
    Dimensions,
    FullyConnectedConfig,
    InvariantViolation,
    LayerDef,
    LayerType,
    MaxoutConfig,
    Network,
    NetworkConfigError,
    PoolConfig,
    UnsupportedOperation,
    Volume,
)
from volumenet.layers import (
    ConvLayer,
    Dropout,
    FullyConnectedLayer,
    InputLayer,
    Maxout,
    PoolLayer,
    ReLU,
    Softmax,
    Tanh,
)
from volumenet.Network import expand_defs


def small_convnet(rng):
    return Network(
        [
            LayerDef("input", output=(6, 6, 2)),
            LayerDef("conv", config=ConvConfig(3, 3, pad=1), activation="relu"),
            LayerDef("pool", config=PoolConfig(2, stride=2)),
            LayerDef("fc", config=FullyConnectedConfig(4), activation="tanh"),
            LayerDef("softmax"),
        ],
        rng=rng,
    )


@pytest.mark.unit
class TestValidation:
    def test_too_few_layers(self):
        with pytest.raises(NetworkConfigError):
            Network([LayerDef("input", output=(1, 1, 2)), LayerDef("softmax")])

    def test_empty_list(self):
        with pytest.raises(NetworkConfigError):
            Network([])

    def test_first_layer_must_be_input(self):
        with pytest.raises(NetworkConfigError):
            Network(
                [
                    LayerDef("fc", config=FullyConnectedConfig(2)),
                    LayerDef("fc", config=FullyConnectedConfig(2)),
                    LayerDef("softmax"),
                ]
            )

    def test_input_requires_output_dims(self):
        with pytest.raises(NetworkConfigError):
            Network([LayerDef("input"), LayerDef("fc", config=FullyConnectedConfig(2)), LayerDef("softmax")])

    def test_missing_conv_config(self):
        with pytest.raises(NetworkConfigError):
            Network([LayerDef("input", output=(5, 5, 1)), LayerDef("conv"), LayerDef("softmax")])

    def test_mistyped_config(self):
        with pytest.raises(NetworkConfigError):
            Network(
                [
                    LayerDef("input", output=(5, 5, 1)),
                    LayerDef("conv", config=PoolConfig(2)),
                    LayerDef("softmax"),
                ]
            )

    def test_config_on_kind_without_config(self):
        with pytest.raises(NetworkConfigError):
            Network(
                [
                    LayerDef("input", output=(1, 1, 2)),
                    LayerDef("relu", config=FullyConnectedConfig(2)),
                    LayerDef("softmax"),
                ]
            )

    def test_last_layer_must_be_a_loss(self):
        with pytest.raises(NetworkConfigError):
            Network(
                [
                    LayerDef("input", output=(1, 1, 2)),
                    LayerDef("fc", config=FullyConnectedConfig(2)),
                    LayerDef("relu"),
                ]
            )

    def test_unknown_layer_type(self):
        with pytest.raises(NetworkConfigError):
            LayerDef("lrn")

    def test_unsupported_activation(self):
        with pytest.raises(NetworkConfigError):
            LayerDef("fc", config=FullyConnectedConfig(2), activation="softmax").validate()
        with pytest.raises(NetworkConfigError):
            LayerDef("fc", config=FullyConnectedConfig(2), activation="swish")

    def test_invalid_config_values(self):
        with pytest.raises(NetworkConfigError):
            ConvConfig(0, 3)
        with pytest.raises(NetworkConfigError):
            ConvConfig(2, 3, stride=0)
        with pytest.raises(NetworkConfigError):
            PoolConfig(2, pad=-1)
        with pytest.raises(NetworkConfigError):
            FullyConnectedConfig(1.5)

    def test_kernel_larger_than_input(self):
        with pytest.raises(NetworkConfigError):
            Network(
                [
                    LayerDef("input", output=(2, 2, 1)),
                    LayerDef("conv", config=ConvConfig(1, 5)),
                    LayerDef("softmax"),
                ]
            )

    def test_declared_output_must_match(self):
        with pytest.raises(NetworkConfigError):
            Network(
                [
                    LayerDef("input", output=(7, 7, 3)),
                    LayerDef("conv", output=(7, 7, 4), config=ConvConfig(4, 3)),
                    LayerDef("softmax"),
                ]
            )

    def test_matching_declared_output_is_accepted(self, rng):
        net = Network(
            [
                LayerDef("input", output=(7, 7, 3)),
                LayerDef("conv", output=(5, 5, 4), config=ConvConfig(4, 3)),
                LayerDef("softmax"),
            ],
            rng=rng,
        )
        assert net.layers[1].out_dims == Dimensions(5, 5, 4)


@pytest.mark.unit
class TestExpansion:
    def test_activation_becomes_its_own_layer(self):
        defs = expand_defs(
            [
                LayerDef("input", output=(1, 1, 2)),
                LayerDef("fc", config=FullyConnectedConfig(3), activation="sigmoid"),
                LayerDef("softmax"),
            ]
        )
        assert [d.layer_type for d in defs] == [
            LayerType.INPUT,
            LayerType.FC,
            LayerType.SIGMOID,
            LayerType.SOFTMAX,
        ]
        assert defs[1].activation is None

    def test_relu_gets_positive_bias(self):
        defs = expand_defs([LayerDef("fc", config=FullyConnectedConfig(3), activation="relu")])
        assert defs[0].config.bias_pref == 0.1
        defs = expand_defs([LayerDef("fc", config=FullyConnectedConfig(3), activation="tanh")])
        assert defs[0].config.bias_pref == 0.0

    def test_explicit_bias_is_kept(self):
        defs = expand_defs([LayerDef("fc", config=FullyConnectedConfig(3, bias_pref=0.3), activation="relu")])
        assert defs[0].config.bias_pref == 0.3

    def test_maxout_and_dropout(self):
        defs = expand_defs(
            [LayerDef("fc", config=FullyConnectedConfig(4), activation="maxout", drop_prob=0.2)]
        )
        assert [d.layer_type for d in defs] == [LayerType.FC, LayerType.MAXOUT, LayerType.DROPOUT]
        assert defs[1].config.group_size == 2
        assert defs[2].config.drop_prob == 0.2

    def test_caller_defs_are_untouched(self):
        d = LayerDef("fc", config=FullyConnectedConfig(3), activation="relu")
        expand_defs([d])
        assert d.activation == LayerType.RELU
        assert d.config.bias_pref is None


@pytest.mark.unit
class TestAssembly:
    def test_layer_chain(self, rng):
        net = small_convnet(rng)
        kinds = [type(L) for L in net.layers]
        assert kinds == [InputLayer, ConvLayer, ReLU, PoolLayer, FullyConnectedLayer, Tanh, Softmax]
        assert len(net) == 7

    def test_dims_are_chained(self, rng):
        net = small_convnet(rng)
        for prev, layer in zip(net.layers, net.layers[1:]):
            assert layer.in_dims == prev.out_dims
        assert net.layers[1].out_dims == Dimensions(6, 6, 3)
        assert net.layers[3].out_dims == Dimensions(3, 3, 3)
        assert net.out_dims == Dimensions(1, 1, 4)

    def test_maxout_and_dropout_layers(self, rng):
        net = Network(
            [
                LayerDef("input", output=(1, 1, 3)),
                LayerDef("fc", config=FullyConnectedConfig(6), activation="maxout", drop_prob=0.5),
                LayerDef("maxout", config=MaxoutConfig(3)),
                LayerDef("svm"),
            ],
            rng=rng,
        )
        assert [type(L) for L in net.layers[1:4]] == [FullyConnectedLayer, Maxout, Dropout]
        assert net.out_dims == Dimensions(1, 1, 1)

    def test_string_and_enum_types(self, rng):
        net = Network(
            [
                LayerDef(LayerType.INPUT, output=Dimensions(1, 1, 2)),
                LayerDef(LayerType.FC, config=FullyConnectedConfig(2)),
                LayerDef("regression"),
            ],
            rng=rng,
        )
        assert net.is_regression


@pytest.mark.unit
class TestForwardBackward:
    def test_forward_returns_probabilities(self, rng):
        net = small_convnet(rng)
        out = net.forward(Volume(6, 6, 2, rng=rng))
        assert out.dimensions() == Dimensions(1, 1, 4)
        assert out.w.sum() == pytest.approx(1.0)

    def test_forward_caches_fresh_volumes(self, rng):
        net = small_convnet(rng)
        net.forward(Volume(6, 6, 2, rng=rng))
        first = net.layers[2].out_vol
        net.forward(Volume(6, 6, 2, rng=rng))
        assert net.layers[2].out_vol is not first

    def test_backward_returns_loss_and_fills_gradients(self, rng):
        net = small_convnet(rng)
        vol = Volume(6, 6, 2, rng=rng)
        out = net.forward(vol, training=True)
        loss = net.backward(2)
        assert loss == pytest.approx(-np.log(out.w[2]))
        assert np.any(vol.dw != 0.0)
        assert any(np.any(pg.gradients != 0.0) for pg in net.get_response())

    def test_input_gradient_matches_finite_differences(self, rng):
        net = Network(
            [
                LayerDef("input", output=(2, 2, 2)),
                LayerDef("conv", config=ConvConfig(2, 2, pad=1), activation="tanh"),
                LayerDef("fc", config=FullyConnectedConfig(3), activation="sigmoid"),
                LayerDef("softmax"),
            ],
            rng=rng,
        )
        vol = Volume(2, 2, 2, rng=rng)
        net.forward(vol)
        net.backward(1)
        analytic = vol.dw.copy()

        eps = 1e-5
        for i in range(vol.size()):
            orig = vol.w[i]
            vol.w[i] = orig + eps
            plus = net.get_cost_loss(vol, 1)
            vol.w[i] = orig - eps
            minus = net.get_cost_loss(vol, 1)
            vol.w[i] = orig
            assert (plus - minus) / (2 * eps) == pytest.approx(analytic[i], abs=1e-6)

    def test_get_cost_loss_does_not_train(self, rng):
        net = small_convnet(rng)
        before = [pg.weights.copy() for pg in net.get_response()]
        loss = net.get_cost_loss(Volume(6, 6, 2, rng=rng), 0)
        assert loss > 0
        for pg, w in zip(net.get_response(), before):
            np.testing.assert_array_equal(pg.weights, w)

    def test_get_prediction(self, classifier):
        fc = classifier.layers[1]
        fc.filters[0].w[...] = [1.0, 0.0]
        fc.filters[1].w[...] = [0.0, 1.0]
        classifier.forward(Volume(1, 1, 2, weights=[0.2, 0.9]))
        assert classifier.get_prediction() == 1
        classifier.forward(Volume(1, 1, 2, weights=[0.9, 0.2]))
        assert classifier.get_prediction() == 0

    def test_get_prediction_before_forward(self, classifier):
        with pytest.raises(InvariantViolation):
            classifier.get_prediction()

    def test_regression_losses(self, regressor):
        vol = Volume(1, 1, 2, weights=[1.0, -1.0])
        out = regressor.forward(vol)
        loss = regressor.multi_dimensional_loss([out.w[0] + 2.0])
        assert loss == pytest.approx(2.0)
        assert np.any(vol.dw != 0.0)
        regressor.forward(vol)
        assert regressor.dimensional_loss(0, out.w[0]) == pytest.approx(0.0)

    def test_loss_kind_must_match_tail(self, classifier, regressor):
        vol = Volume(1, 1, 2, weights=[1.0, 2.0])
        classifier.forward(vol)
        with pytest.raises(UnsupportedOperation):
            classifier.multi_dimensional_loss([0.0, 1.0])
        regressor.forward(vol)
        with pytest.raises(UnsupportedOperation):
            regressor.backward(0)

    def test_parameter_groups_in_layer_order(self, rng):
        net = small_convnet(rng)
        groups = net.get_response()
        # conv: 3 filters + biases, fc: 4 filters + biases
        assert len(groups) == 4 + 5
        assert groups[0].weights is net.layers[1].filters[0].w
        assert groups[-1].weights is net.layers[4].biases.w

    def test_same_seed_same_network(self):
        a = small_convnet(np.random.default_rng(5))
        b = small_convnet(np.random.default_rng(5))
        for pa, pb in zip(a.get_response(), b.get_response()):
            np.testing.assert_array_equal(pa.weights, pb.weights)
