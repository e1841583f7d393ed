from .Layer import Layer
from .LayerDef import LayerType


class InputLayer(Layer):
    layer_type = LayerType.INPUT

    def __init__(self, dims):
        super().__init__(dims, dims)

    def forward(self, vol, training=False):
        self.in_vol = vol
        self.out_vol = vol
        return vol

    def backward(self):
        pass
