from .Layer import Layer, ParamGroup
from .LayerDef import LayerType
from ..Volume import Dimensions, Volume


def window_bounds(pos, size, limit):
    """
    Clip a window that starts at `pos` and spans `size` cells to [0, limit).

    Returns (lo, hi, k_lo, k_hi): the input slice and the matching slice of
    the kernel. Cells outside the input act as implicit zero padding.
    """
    lo = max(pos, 0)
    hi = min(pos + size, limit)
    return lo, hi, lo - pos, hi - pos


def output_size(in_size, kernel, stride, pad):
    # H_out = (H + 2*padding - kernel_size)//stride + 1
    return (in_size + 2 * pad - kernel) // stride + 1


class ConvLayer(Layer):
    layer_type = LayerType.CONV

    def __init__(self, in_dims, config, rng=None):
        # filters: config.filters x Volume(sx, sy, in_depth)
        # biases:  Volume(1, 1, config.filters)
        out_sx = output_size(in_dims.x, config.sx, config.stride, config.pad)
        out_sy = output_size(in_dims.y, config.sy, config.stride, config.pad)
        super().__init__(in_dims, Dimensions(out_sx, out_sy, config.filters))
        self.config = config
        self.sx = config.sx
        self.sy = config.sy
        self.stride = config.stride
        self.pad = config.pad

        bias = config.bias_pref if config.bias_pref is not None else 0.0
        self.filters = [
            Volume(self.sx, self.sy, in_dims.z, rng=rng) for _ in range(config.filters)
        ]
        self.biases = Volume(1, 1, config.filters, value=bias)

    # ----- helpers -----
    def _windows(self, vol):
        """Yield (ax, ay, ys, xs, fys, fxs) for every output cell."""
        for ay in range(self.out_dims.y):
            y = ay * self.stride - self.pad
            y0, y1, fy0, fy1 = window_bounds(y, self.sy, vol.sy)
            for ax in range(self.out_dims.x):
                x = ax * self.stride - self.pad
                x0, x1, fx0, fx1 = window_bounds(x, self.sx, vol.sx)
                if y0 >= y1 or x0 >= x1:
                    # window lies entirely in the padding
                    yield ax, ay, None, None, None, None
                    continue
                yield ax, ay, slice(y0, y1), slice(x0, x1), slice(fy0, fy1), slice(fx0, fx1)

    def forward(self, vol, training=False):
        # vol: (sx, sy, depth) with depth == in_dims.z
        # return: (out_sx, out_sy, filters)
        self.in_vol = vol  # cache for backward
        out = Volume(self.out_dims.x, self.out_dims.y, self.out_dims.z, value=0.0)

        x_arr = vol.as_array()  # (sy, sx, depth)
        out_arr = out.as_array()
        f_arrs = [f.as_array() for f in self.filters]

        for ax, ay, ys, xs, fys, fxs in self._windows(vol):
            if ys is None:
                out_arr[ay, ax, :] = self.biases.w
                continue
            patch = x_arr[ys, xs, :]
            for d, f_arr in enumerate(f_arrs):
                out_arr[ay, ax, d] = (f_arr[fys, fxs, :] * patch).sum() + self.biases.w[d]

        self.out_vol = out
        return out

    def backward(self):
        self._require_forward()
        vol = self.in_vol
        vol.zero_grad()

        x_arr = vol.as_array()
        dx_arr = vol.as_array(grad=True)
        dout_arr = self.out_vol.as_array(grad=True)
        f_arrs = [f.as_array() for f in self.filters]
        df_arrs = [f.as_array(grad=True) for f in self.filters]

        for ax, ay, ys, xs, fys, fxs in self._windows(vol):
            for d in range(self.out_dims.z):
                chain_grad = dout_arr[ay, ax, d]
                self.biases.dw[d] += chain_grad
                if ys is None:
                    continue
                df_arrs[d][fys, fxs, :] += x_arr[ys, xs, :] * chain_grad
                dx_arr[ys, xs, :] += f_arrs[d][fys, fxs, :] * chain_grad

    def get_response(self):
        resp = [
            ParamGroup.of(f, self.config.l1_decay_mul, self.config.l2_decay_mul)
            for f in self.filters
        ]
        resp.append(ParamGroup.of(self.biases, 0.0, 0.0))
        return resp
