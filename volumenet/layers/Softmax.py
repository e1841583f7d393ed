import math

import numpy as np

from .Layer import LossLayer
from .LayerDef import LayerType
from ..Volume import Dimensions, Volume
from ..errors import InvariantViolation, UnsupportedOperation


class Softmax(LossLayer):
    """
    Classifier over N discrete classes 0..N-1: exponentiates and normalizes
    the N incoming numbers into probabilities. Pair with loss(label).
    """

    layer_type = LayerType.SOFTMAX

    def __init__(self, in_dims):
        super().__init__(in_dims, Dimensions(1, 1, in_dims.size()))
        self.es = None

    def forward(self, vol, training=False):
        self.in_vol = vol
        # Stable softmax: subtract the max before exponentiating
        z = vol.w - np.max(vol.w)
        es = np.exp(z)
        es /= es.sum()

        out = Volume(1, 1, self.out_dims.z, value=0.0)
        out.w[...] = es
        # save these for backprop
        self.es = es
        self.out_vol = out
        return out

    def loss(self, index):
        self._require_forward()
        n = self.out_dims.z
        if not 0 <= index < n:
            raise InvariantViolation(f"Invalid class index: {index} (expected 0..{n - 1})")

        # dL/dz = probs - onehot(index)
        self.in_vol.zero_grad()
        self.in_vol.dw[...] = self.es
        self.in_vol.dw[index] -= 1.0

        # loss is the class negative log likelihood
        p = self.es[index]
        return -math.log(p) if p > 0.0 else math.inf

    def backward(self):
        raise UnsupportedOperation("Softmax is a loss layer: call loss() instead of backward()")
