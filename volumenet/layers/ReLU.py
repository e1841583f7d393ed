import numpy as np

from .Layer import Layer
from .LayerDef import LayerType


class ReLU(Layer):
    layer_type = LayerType.RELU

    def __init__(self, in_dims):
        super().__init__(in_dims, in_dims)

    def forward(self, vol, training=False):
        self.in_vol = vol
        out = vol.clone()
        np.maximum(out.w, 0.0, out=out.w)
        self.out_vol = out
        return out

    def backward(self):
        self._require_forward()
        # threshold: no gradient where the unit was off
        self.in_vol.zero_grad()
        self.in_vol.dw[...] = np.where(self.out_vol.w <= 0.0, 0.0, self.out_vol.dw)
