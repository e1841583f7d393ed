from .LabeledLoss import LabeledLoss
from .RegressionLoss import DimensionalLoss, RegressionLoss

__all__ = ["LabeledLoss", "RegressionLoss", "DimensionalLoss"]
