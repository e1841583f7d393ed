import numpy as np

from .ConvLayer import output_size, window_bounds
from .Layer import Layer
from .LayerDef import LayerType
from ..Volume import Dimensions, Volume


class PoolLayer(Layer):
    """Max pooling over sx x sy windows, independently per depth slice."""

    layer_type = LayerType.POOL

    def __init__(self, in_dims, config):
        out_sx = output_size(in_dims.x, config.sx, config.stride, config.pad)
        out_sy = output_size(in_dims.y, config.sy, config.stride, config.pad)
        super().__init__(in_dims, Dimensions(out_sx, out_sy, in_dims.z))
        self.sx = config.sx
        self.sy = config.sy
        self.stride = config.stride
        self.pad = config.pad

        # flat input index of the max for every output cell, or -1 when the
        # window lies entirely in the padding
        self.switches = np.full(self.out_dims.size(), -1, dtype=np.int64)

    def forward(self, vol, training=False):
        self.in_vol = vol
        out = Volume(self.out_dims.x, self.out_dims.y, self.out_dims.z, value=0.0)
        depth = vol.depth
        x_arr = vol.as_array()
        switches = np.full(self.out_dims.size(), -1, dtype=np.int64)

        for ay in range(self.out_dims.y):
            y0, y1, _, _ = window_bounds(ay * self.stride - self.pad, self.sy, vol.sy)
            for ax in range(self.out_dims.x):
                x0, x1, _, _ = window_bounds(ax * self.stride - self.pad, self.sx, vol.sx)
                if y0 >= y1 or x0 >= x1:
                    continue
                w = x1 - x0
                window = x_arr[y0:y1, x0:x1, :].reshape(-1, depth)  # (h*w, depth)
                k = np.argmax(window, axis=0)  # first max wins on ties
                wy = y0 + k // w
                wx = x0 + k % w

                base = (self.out_dims.x * ay + ax) * depth
                out.w[base:base + depth] = window[k, np.arange(depth)]
                switches[base:base + depth] = (vol.sx * wy + wx) * depth + np.arange(depth)

        self.switches = switches
        self.out_vol = out
        return out

    def backward(self):
        self._require_forward()
        vol = self.in_vol
        vol.zero_grad()

        # route each output gradient to the input cell that won the max
        routed = self.switches >= 0
        np.add.at(vol.dw, self.switches[routed], self.out_vol.dw[routed])
