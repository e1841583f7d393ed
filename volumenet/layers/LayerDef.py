from enum import Enum

from ..Volume import Dimensions
from ..errors import NetworkConfigError


class LayerType(str, Enum):
    INPUT = "input"
    FC = "fc"
    CONV = "conv"
    POOL = "pool"
    RELU = "relu"
    SIGMOID = "sigmoid"
    TANH = "tanh"
    MAXOUT = "maxout"
    DROPOUT = "dropout"
    SOFTMAX = "softmax"
    SVM = "svm"
    REGRESSION = "regression"


ACTIVATIONS = (LayerType.RELU, LayerType.SIGMOID, LayerType.TANH, LayerType.MAXOUT)


def _positive_int(name, value):
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise NetworkConfigError(f"{name} must be a positive integer, got {value!r}")
    return value


def _non_negative_int(name, value):
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise NetworkConfigError(f"{name} must be a non-negative integer, got {value!r}")
    return value


class FullyConnectedConfig:
    def __init__(self, num_neurons, l1_decay_mul=0.0, l2_decay_mul=1.0, bias_pref=None):
        self.num_neurons = _positive_int("num_neurons", num_neurons)
        self.l1_decay_mul = float(l1_decay_mul)
        self.l2_decay_mul = float(l2_decay_mul)
        # None means "decided by the network builder" (0.1 before a relu, else 0.0)
        self.bias_pref = bias_pref


class ConvConfig:
    """
    filters: number of output channels
    sx, sy:  kernel width and height (sy defaults to sx)
    stride:  step between windows
    pad:     implicit zero padding on every side
    """

    def __init__(
        self,
        filters,
        sx,
        sy=None,
        stride=1,
        pad=0,
        l1_decay_mul=0.0,
        l2_decay_mul=1.0,
        bias_pref=None,
    ):
        self.filters = _positive_int("filters", filters)
        self.sx = _positive_int("sx", sx)
        self.sy = _positive_int("sy", sy if sy is not None else sx)
        self.stride = _positive_int("stride", stride)
        self.pad = _non_negative_int("pad", pad)
        self.l1_decay_mul = float(l1_decay_mul)
        self.l2_decay_mul = float(l2_decay_mul)
        self.bias_pref = bias_pref


class PoolConfig:
    def __init__(self, sx, sy=None, stride=2, pad=0):
        self.sx = _positive_int("sx", sx)
        self.sy = _positive_int("sy", sy if sy is not None else sx)
        self.stride = _positive_int("stride", stride)
        self.pad = _non_negative_int("pad", pad)


class DropoutConfig:
    def __init__(self, drop_prob=0.5):
        drop_prob = float(drop_prob)
        if not 0.0 <= drop_prob <= 1.0:
            raise NetworkConfigError(f"drop_prob must be within [0, 1], got {drop_prob}")
        self.drop_prob = drop_prob


class MaxoutConfig:
    def __init__(self, group_size=2):
        self.group_size = _positive_int("group_size", group_size)


# kind -> (config class, required)
CONFIG_TYPES = {
    LayerType.FC: (FullyConnectedConfig, True),
    LayerType.CONV: (ConvConfig, True),
    LayerType.POOL: (PoolConfig, True),
    LayerType.DROPOUT: (DropoutConfig, False),
    LayerType.MAXOUT: (MaxoutConfig, False),
}


class LayerDef:
    """
    Declares one layer of a network.

    layer_type: a LayerType (or its string value)
    output:     declared output Dimensions; required for the input layer,
                checked against the computed shape for every other kind
    config:     kind-specific config object (see CONFIG_TYPES)
    activation: fc/conv only, expands into a following activation layer
    drop_prob:  fc/conv only, expands into a following dropout layer

    `input` is filled in by the network from the previous layer's output.
    """

    def __init__(self, layer_type, output=None, config=None, activation=None, drop_prob=None):
        try:
            self.layer_type = LayerType(layer_type)
        except ValueError:
            raise NetworkConfigError(f"Unknown layer type: {layer_type!r}") from None
        if output is not None and not isinstance(output, Dimensions):
            output = Dimensions(*output)
        self.output = output
        self.input = None
        self.config = config
        if activation is None:
            self.activation = None
        else:
            try:
                self.activation = LayerType(activation)
            except ValueError:
                raise NetworkConfigError(f"Unsupported activation {activation!r}") from None
        self.drop_prob = drop_prob

    def validate(self):
        expected = CONFIG_TYPES.get(self.layer_type)
        if expected is None:
            if self.config is not None:
                raise NetworkConfigError(f"{self.layer_type.value} layer takes no config")
        else:
            config_cls, required = expected
            if self.config is None:
                if required:
                    raise NetworkConfigError(f"Config cannot be None for {self.layer_type.value} layer")
                self.config = config_cls()
            elif not isinstance(self.config, config_cls):
                raise NetworkConfigError(
                    f"Invalid config for {self.layer_type.value} layer: "
                    f"expected {config_cls.__name__}, got {type(self.config).__name__}"
                )

        if self.activation is not None:
            if self.layer_type not in (LayerType.FC, LayerType.CONV):
                raise NetworkConfigError("activation is only supported on fc/conv layers")
            if self.activation not in ACTIVATIONS:
                raise NetworkConfigError(f"Unsupported activation {self.activation.value}")
        if self.drop_prob is not None and self.layer_type not in (LayerType.FC, LayerType.CONV):
            raise NetworkConfigError("drop_prob is only supported on fc/conv layers")
        if self.layer_type == LayerType.INPUT and self.output is None:
            raise NetworkConfigError("Input layer must declare its output dimensions")
        return self

    def __repr__(self):
        return f"LayerDef({self.layer_type.value}, output={self.output})"
