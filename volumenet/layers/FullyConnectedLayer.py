import numpy as np

from .Layer import Layer, ParamGroup
from .LayerDef import LayerType
from ..Volume import Dimensions, Volume


class FullyConnectedLayer(Layer):
    layer_type = LayerType.FC

    def __init__(self, in_dims, config, rng=None):
        # one filter per neuron, each spanning the whole flattened input
        # filters: num_neurons x Volume(1, 1, num_inputs)
        # biases:  Volume(1, 1, num_neurons)
        num_inputs = in_dims.size()
        out_depth = config.num_neurons
        super().__init__(in_dims, Dimensions(1, 1, out_depth))
        self.config = config

        bias = config.bias_pref if config.bias_pref is not None else 0.0
        self.filters = [Volume(1, 1, num_inputs, rng=rng) for _ in range(out_depth)]
        self.biases = Volume(1, 1, out_depth, value=bias)

    def forward(self, vol, training=False):
        self.in_vol = vol  # cache for backward
        out = Volume(1, 1, self.out_dims.z, value=0.0)
        x = vol.w
        for i, f in enumerate(self.filters):
            out.w[i] = np.dot(f.w, x) + self.biases.w[i]
        self.out_vol = out
        return out

    def backward(self):
        self._require_forward()
        vol = self.in_vol
        vol.zero_grad()

        # grads accumulate across a batch; the trainer clears them after an update
        for i, f in enumerate(self.filters):
            chain_grad = self.out_vol.dw[i]
            f.dw += vol.w * chain_grad  # grad wrt params
            vol.dw += f.w * chain_grad  # grad wrt input
            self.biases.dw[i] += chain_grad

    def get_response(self):
        resp = [
            ParamGroup.of(f, self.config.l1_decay_mul, self.config.l2_decay_mul)
            for f in self.filters
        ]
        resp.append(ParamGroup.of(self.biases, 0.0, 0.0))
        return resp
