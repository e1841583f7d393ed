from .Layer import LossLayer
from .LayerDef import LayerType
from ..Volume import Dimensions
from ..errors import InvariantViolation, UnsupportedOperation

MARGIN = 1.0


class SVM(LossLayer):
    """Multiclass hinge loss; the forward pass hands the scores through."""

    layer_type = LayerType.SVM

    def __init__(self, in_dims):
        super().__init__(in_dims, Dimensions(1, 1, in_dims.size()))

    def forward(self, vol, training=False):
        self.in_vol = vol
        self.out_vol = vol
        return vol

    def loss(self, index):
        self._require_forward()
        n = self.out_dims.z
        if not 0 <= index < n:
            raise InvariantViolation(f"Invalid class index: {index} (expected 0..{n - 1})")

        vol = self.in_vol
        vol.zero_grad()

        # structured loss: the ground truth score should beat every
        # other class score by at least the margin
        y_score = vol.w[index]
        loss = 0.0
        for i in range(n):
            if i == index:
                continue
            y_diff = vol.w[i] - y_score + MARGIN
            if y_diff > 0:
                # violating dimension, apply loss
                vol.dw[i] += 1.0
                vol.dw[index] -= 1.0
                loss += y_diff
        return float(loss)

    def backward(self):
        raise UnsupportedOperation("SVM is a loss layer: call loss() instead of backward()")
