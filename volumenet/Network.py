import copy
import logging

import numpy as np

from .errors import InvariantViolation, NetworkConfigError, UnsupportedOperation
from .layers import (
    DropoutConfig,
    LayerDef,
    LayerType,
    LossLayer,
    MaxoutConfig,
    RegressionLossLayer,
    build_layer,
)

logger = logging.getLogger(__name__)


def expand_defs(defs):
    """
    Rewrite a layer-definition list so that every implied layer is explicit:
    an fc/conv def with an `activation` is followed by that activation layer,
    and one with a `drop_prob` is followed by a dropout layer.

    Returns new LayerDef objects; the caller's list is left untouched.
    """
    new_defs = []
    for d in defs:
        d = copy.deepcopy(d)
        if d.layer_type in (LayerType.FC, LayerType.CONV) and d.config.bias_pref is None:
            # relus like a bit of positive bias to get gradients early,
            # otherwise a unit can start (and stay) dead
            d.config.bias_pref = 0.1 if d.activation == LayerType.RELU else 0.0

        activation = d.activation
        drop_prob = d.drop_prob
        d.activation = None
        d.drop_prob = None
        new_defs.append(d)

        if activation == LayerType.MAXOUT:
            new_defs.append(LayerDef(LayerType.MAXOUT, config=MaxoutConfig()))
        elif activation is not None:
            new_defs.append(LayerDef(activation))

        if drop_prob is not None:
            new_defs.append(LayerDef(LayerType.DROPOUT, config=DropoutConfig(drop_prob)))
    return new_defs


class Network:
    """
    An ordered chain of layers: input first, a loss layer last.

    net = Network([
        LayerDef("input", output=(1, 1, 2)),
        LayerDef("fc", config=FullyConnectedConfig(2)),
        LayerDef("softmax"),
    ])
    """

    def __init__(self, defs, rng=None):
        if defs is None or len(defs) < 3:
            raise NetworkConfigError("At least one input, one hidden and one loss layer are required.")
        for d in defs:
            if not isinstance(d, LayerDef):
                raise NetworkConfigError(f"Expected LayerDef, got {type(d).__name__}")
            d.validate()
        if defs[0].layer_type != LayerType.INPUT:
            raise NetworkConfigError("First layer must be the input layer, to declare size of inputs.")

        expanded = expand_defs(defs)

        self.layers = []
        for i, d in enumerate(expanded):
            if i > 0:
                d.input = self.layers[i - 1].out_dims
            layer = build_layer(d, rng=rng)
            if min(layer.out_dims) <= 0:
                raise NetworkConfigError(
                    f"Layer {i} ({d.layer_type.value}) has empty output {tuple(layer.out_dims)} "
                    f"for input {tuple(d.input)}"
                )
            if i > 0 and d.output is not None and tuple(d.output) != tuple(layer.out_dims):
                raise NetworkConfigError(
                    f"Layer {i} ({d.layer_type.value}) declares output {tuple(d.output)} "
                    f"but produces {tuple(layer.out_dims)}"
                )
            self.layers.append(layer)

        if not isinstance(self.layers[-1], (LossLayer, RegressionLossLayer)):
            raise NetworkConfigError("Last layer must be a loss layer (softmax, svm or regression).")

        logger.debug("built network: %s", " -> ".join(repr(L) for L in self.layers))

    def __len__(self):
        return len(self.layers)

    @property
    def in_dims(self):
        return self.layers[0].out_dims

    @property
    def out_dims(self):
        return self.layers[-1].out_dims

    @property
    def is_regression(self):
        return isinstance(self.layers[-1], RegressionLossLayer)

    def forward(self, vol, training=False):
        """Forward prop the network. A trainer passes training=True."""
        act = vol
        for layer in self.layers:
            act = layer.forward(act, training=training)
        return act

    def _backward_hidden(self):
        for layer in reversed(self.layers[:-1]):
            layer.backward()

    def _tail(self, capability):
        tail = self.layers[-1]
        if not isinstance(tail, capability):
            raise UnsupportedOperation(
                f"{type(tail).__name__} tail does not support {capability.__name__} losses"
            )
        return tail

    def backward(self, label):
        """Classification loss for `label`, then the reverse sweep. Returns the loss."""
        loss = self._tail(LossLayer).loss(label)
        self._backward_hidden()
        return loss

    def multi_dimensional_loss(self, targets):
        loss = self._tail(RegressionLossLayer).multi_dimensional_loss(targets)
        self._backward_hidden()
        return loss

    def dimensional_loss(self, index, value):
        loss = self._tail(RegressionLossLayer).dimensional_loss(index, value)
        self._backward_hidden()
        return loss

    def get_cost_loss(self, vol, label):
        """Inference-mode forward pass followed by the classification loss."""
        self.forward(vol, training=False)
        return self._tail(LossLayer).loss(label)

    def get_prediction(self):
        """Index of the largest output of the most recent forward pass."""
        tail = self._tail(LossLayer)
        if tail.out_vol is None:
            raise InvariantViolation("get_prediction() needs a forward pass first")
        return int(np.argmax(tail.out_vol.w))

    def get_response(self):
        response = []
        for layer in self.layers:
            response.extend(layer.get_response())
        return response
