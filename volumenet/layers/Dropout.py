import numpy as np

from .Layer import Layer
from .LayerDef import LayerType
from ..helpers.rng import get_rng


class Dropout(Layer):
    layer_type = LayerType.DROPOUT

    def __init__(self, in_dims, config, rng=None):
        super().__init__(in_dims, in_dims)
        self.drop_prob = config.drop_prob
        self.rng = rng
        self.dropped = np.zeros(in_dims.size(), dtype=bool)

    def forward(self, vol, training=False):
        self.in_vol = vol
        out = vol.clone()
        if training:
            # drop each element independently with probability drop_prob
            self.dropped = get_rng(self.rng).random(vol.size()) < self.drop_prob
            out.w[self.dropped] = 0.0
        else:
            # scale the activations during prediction
            self.dropped = np.zeros(vol.size(), dtype=bool)
            out.w *= self.drop_prob
        self.out_vol = out
        return out

    def backward(self):
        self._require_forward()
        self.in_vol.zero_grad()
        kept = ~self.dropped
        self.in_vol.dw[kept] = self.out_vol.dw[kept]
