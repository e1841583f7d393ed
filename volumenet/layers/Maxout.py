import numpy as np

from .Layer import Layer
from .LayerDef import LayerType
from ..Volume import Dimensions, Volume


class Maxout(Layer):
    """
    Takes the max over consecutive groups of `group_size` channels at every
    spatial position. Output depth is floor(in_depth / group_size); trailing
    channels that do not fill a group are ignored.
    """

    layer_type = LayerType.MAXOUT

    def __init__(self, in_dims, config):
        self.group_size = config.group_size
        super().__init__(in_dims, Dimensions(in_dims.x, in_dims.y, in_dims.z // self.group_size))
        self.switches = np.zeros(self.out_dims.size(), dtype=np.int64)

    def forward(self, vol, training=False):
        self.in_vol = vol
        n = self.out_dims.z
        gs = self.group_size

        # (sy, sx, n, gs) view of the grouped channels
        groups = vol.as_array()[:, :, :n * gs].reshape(vol.sy, vol.sx, n, gs)
        k = np.argmax(groups, axis=-1)  # (sy, sx, n)

        out = Volume(self.out_dims.x, self.out_dims.y, n, value=0.0)
        out.as_array()[...] = np.take_along_axis(groups, k[..., None], axis=-1)[..., 0]

        ys, xs, ds = np.indices((vol.sy, vol.sx, n))
        self.switches = ((vol.sx * ys + xs) * vol.depth + ds * gs + k).ravel()
        self.out_vol = out
        return out

    def backward(self):
        self._require_forward()
        self.in_vol.zero_grad()
        # each output cell has exactly one winner, so no index collides
        self.in_vol.dw[self.switches] = self.out_vol.dw
