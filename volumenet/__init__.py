"""
volumenet
~~~~~~~~~

A small automatic-differentiation engine for feed-forward neural networks:
Volumes (3D tensors with gradients), layers with hand-derived backward
passes, a Network that chains them and a Trainer with several optimizers.
"""

from .Volume import Dimensions, Volume
from .errors import InvariantViolation, NetworkConfigError, UnsupportedOperation
from .layers import (
    ConvConfig,
    DropoutConfig,
    FullyConnectedConfig,
    LayerDef,
    LayerType,
    MaxoutConfig,
    ParamGroup,
    PoolConfig,
)
from .Network import Network
from .Trainer import Trainer, TrainerOptions, TrainingResult
from .optimizer import Method
from .loss import DimensionalLoss, LabeledLoss, RegressionLoss
from .helpers import RunLogger, get_rng, seed

__version__ = "0.1.0"

__all__ = [
    "Dimensions",
    "Volume",
    "InvariantViolation",
    "NetworkConfigError",
    "UnsupportedOperation",
    "LayerDef",
    "LayerType",
    "ParamGroup",
    "FullyConnectedConfig",
    "ConvConfig",
    "PoolConfig",
    "DropoutConfig",
    "MaxoutConfig",
    "Network",
    "Trainer",
    "TrainerOptions",
    "TrainingResult",
    "Method",
    "LabeledLoss",
    "RegressionLoss",
    "DimensionalLoss",
    "RunLogger",
    "get_rng",
    "seed",
]
