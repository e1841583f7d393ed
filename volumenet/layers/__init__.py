from .Layer import Layer, LossLayer, ParamGroup, RegressionLossLayer
from .LayerDef import (
    ConvConfig,
    DropoutConfig,
    FullyConnectedConfig,
    LayerDef,
    LayerType,
    MaxoutConfig,
    PoolConfig,
)
from .InputLayer import InputLayer
from .FullyConnectedLayer import FullyConnectedLayer
from .ConvLayer import ConvLayer
from .PoolLayer import PoolLayer
from .ReLU import ReLU
from .Sigmoid import Sigmoid
from .Tanh import Tanh
from .Maxout import Maxout
from .Dropout import Dropout
from .Softmax import Softmax
from .SVM import SVM
from .Regression import Regression


def build_layer(layer_def, rng=None):
    """Instantiate the layer a validated LayerDef (with `input` filled in) describes."""
    t = layer_def.layer_type
    dims = layer_def.input
    conf = layer_def.config
    if t == LayerType.INPUT:
        return InputLayer(layer_def.output)
    if t == LayerType.FC:
        return FullyConnectedLayer(dims, conf, rng=rng)
    if t == LayerType.CONV:
        return ConvLayer(dims, conf, rng=rng)
    if t == LayerType.POOL:
        return PoolLayer(dims, conf)
    if t == LayerType.DROPOUT:
        return Dropout(dims, conf, rng=rng)
    if t == LayerType.MAXOUT:
        return Maxout(dims, conf)
    simple = {
        LayerType.RELU: ReLU,
        LayerType.SIGMOID: Sigmoid,
        LayerType.TANH: Tanh,
        LayerType.SOFTMAX: Softmax,
        LayerType.SVM: SVM,
        LayerType.REGRESSION: Regression,
    }
    return simple[t](dims)


__all__ = [
    "Layer",
    "LossLayer",
    "RegressionLossLayer",
    "ParamGroup",
    "LayerDef",
    "LayerType",
    "FullyConnectedConfig",
    "ConvConfig",
    "PoolConfig",
    "DropoutConfig",
    "MaxoutConfig",
    "InputLayer",
    "FullyConnectedLayer",
    "ConvLayer",
    "PoolLayer",
    "ReLU",
    "Sigmoid",
    "Tanh",
    "Maxout",
    "Dropout",
    "Softmax",
    "SVM",
    "Regression",
    "build_layer",
]
