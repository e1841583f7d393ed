import logging
from enum import Enum

import numpy as np

logger = logging.getLogger(__name__)


class Method(str, Enum):
    SGD = "sgd"
    ADAGRAD = "adagrad"
    WINDOWGRAD = "windowgrad"
    ADADELTA = "adadelta"
    ADAM = "adam"
    NESTEROV = "nesterov"


class Optimizer:
    """
    Per-parameter update rule shared by every parameter group.

    gsum[i] / xsum[i] are the accumulators for parameter group i, shaped like
    its weight vector. They are allocated once, on the first update, and live
    as long as the optimizer. `update` mutates `p` (and the accumulators) in
    place; `g` is the already decayed and batch-averaged gradient.
    """

    method = None
    uses_xsum = False

    def __init__(self, options):
        self.options = options
        self.gsum = []
        self.xsum = []

    def ensure_state(self, groups):
        if self.gsum:
            return
        for pg in groups:
            self.gsum.append(np.zeros_like(pg.weights))
            # xsum only for the methods that need a second accumulator
            self.xsum.append(np.zeros_like(pg.weights) if self.uses_xsum else np.zeros(0))
        logger.debug(
            "allocated %s accumulators for %d parameter groups", self.method.value, len(groups)
        )

    def update(self, i, p, g, k):
        raise NotImplementedError
