import numpy as np

from .Layer import RegressionLossLayer
from .LayerDef import LayerType
from ..Volume import Dimensions
from ..errors import InvariantViolation, UnsupportedOperation


class Regression(RegressionLossLayer):
    """
    L2 regression loss on the flattened input, 0.5 * (y - target)^2 per
    dimension. The forward pass hands the predictions through.
    """

    layer_type = LayerType.REGRESSION

    def __init__(self, in_dims):
        super().__init__(in_dims, Dimensions(1, 1, in_dims.size()))

    def forward(self, vol, training=False):
        self.in_vol = vol
        self.out_vol = vol
        return vol

    def multi_dimensional_loss(self, targets):
        self._require_forward()
        targets = np.asarray(targets, dtype=np.float64).ravel()
        n = self.out_dims.z
        if len(targets) != n:
            raise InvariantViolation(f"Invalid target length: {len(targets)} != {n}")

        self.in_vol.zero_grad()
        dy = self.in_vol.w - targets
        self.in_vol.dw[...] = dy
        return float(0.5 * np.sum(dy * dy))

    def dimensional_loss(self, index, value):
        """Supervise a single output dimension; every other gradient stays zero."""
        self._require_forward()
        n = self.out_dims.z
        if not 0 <= index < n:
            raise InvariantViolation(f"Invalid dimension index: {index} (expected 0..{n - 1})")

        self.in_vol.zero_grad()
        dy = self.in_vol.w[index] - value
        self.in_vol.dw[index] = dy
        return float(0.5 * dy * dy)

    def backward(self):
        raise UnsupportedOperation("Regression is a loss layer: call a loss method instead of backward()")
