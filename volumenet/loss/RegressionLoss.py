import numpy as np


class RegressionLoss:
    """L2 cost against a full target vector; runs the backward sweep."""

    def __init__(self, targets):
        self.targets = np.asarray(targets, dtype=np.float64).ravel()

    def __call__(self, net):
        return net.multi_dimensional_loss(self.targets)


class DimensionalLoss:
    """L2 cost supervising a single output dimension; runs the backward sweep."""

    def __init__(self, index, value):
        self.index = int(index)
        self.value = float(value)

    def __call__(self, net):
        return net.dimensional_loss(self.index, self.value)
