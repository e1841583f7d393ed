import numpy as np

from .Layer import Layer
from .LayerDef import LayerType


class Tanh(Layer):
    layer_type = LayerType.TANH

    def __init__(self, in_dims):
        super().__init__(in_dims, in_dims)

    def forward(self, vol, training=False):
        self.in_vol = vol
        out = vol.clone_and_zero()
        out.w[...] = np.tanh(vol.w)
        self.out_vol = out
        return out

    def backward(self):
        self._require_forward()
        self.in_vol.zero_grad()
        y = self.out_vol.w
        self.in_vol.dw[...] = (1.0 - y * y) * self.out_vol.dw
