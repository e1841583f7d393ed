import logging
import time
from collections import namedtuple

import numpy as np

from .errors import NetworkConfigError
from .optimizer import Method, get_optimizer

logger = logging.getLogger(__name__)


TrainingResult = namedtuple(
    "TrainingResult",
    [
        "forward_time",
        "backward_time",
        "l1_decay_loss",
        "l2_decay_loss",
        "cost_loss",
        "total_loss",
    ],
)


class TrainerOptions:
    """
    Hyperparameters of a Trainer.

    method:        sgd / adagrad / windowgrad / adadelta / adam / nesterov
    learning_rate: step size (unused by adadelta)
    batch_size:    steps whose gradients accumulate before one update
    momentum:      sgd / nesterov velocity decay
    rho:           windowgrad / adadelta running-average decay
    eps:           conditioning term of the adaptive methods
    beta1, beta2:  adam moment decays
    l1_decay, l2_decay: global weight decay, scaled per parameter group
    """

    def __init__(
        self,
        method=Method.SGD,
        learning_rate=0.01,
        batch_size=1,
        momentum=0.9,
        rho=0.95,
        eps=1e-8,
        beta1=0.9,
        beta2=0.999,
        l1_decay=0.0,
        l2_decay=0.0,
    ):
        try:
            self.method = Method(method)
        except ValueError:
            raise NetworkConfigError(f"Unknown training method: {method!r}") from None
        if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size < 1:
            raise NetworkConfigError(f"batch_size must be a positive integer, got {batch_size!r}")
        if learning_rate < 0:
            raise NetworkConfigError(f"learning_rate cannot be negative, got {learning_rate}")
        if eps <= 0:
            raise NetworkConfigError(f"eps must be positive, got {eps}")
        for name, value in (("momentum", momentum), ("rho", rho), ("beta1", beta1), ("beta2", beta2)):
            if not 0.0 <= value < 1.0:
                raise NetworkConfigError(f"{name} must be within [0, 1), got {value}")
        if l1_decay < 0 or l2_decay < 0:
            raise NetworkConfigError("decay coefficients cannot be negative")

        self.learning_rate = float(learning_rate)
        self.batch_size = batch_size
        self.momentum = float(momentum)
        self.rho = float(rho)
        self.eps = float(eps)
        self.beta1 = float(beta1)
        self.beta2 = float(beta2)
        self.l1_decay = float(l1_decay)
        self.l2_decay = float(l2_decay)


class Trainer:
    """
    Runs training steps on a Network and turns the accumulated gradients into
    parameter updates every `batch_size` steps.

    trainer = Trainer(net, TrainerOptions(learning_rate=0.1))
    result = trainer.train(vol, LabeledLoss(label))
    """

    def __init__(self, net, options=None, run_logger=None, **kwargs):
        if net is None:
            raise NetworkConfigError("network cannot be None")
        if options is None:
            options = TrainerOptions(**kwargs)
        elif kwargs:
            raise NetworkConfigError("pass either a TrainerOptions or keyword options, not both")

        self.net = net
        self.options = options
        self.optimizer = get_optimizer(options)
        self.run_logger = run_logger
        self.k = 0  # iteration counter

    @property
    def gsum(self):
        return self.optimizer.gsum

    @property
    def xsum(self):
        return self.optimizer.xsum

    def train(self, vol, loss_fn):
        """
        One training step: forward (training mode), loss + backward sweep,
        and on every batch boundary an optimizer update of all parameters.
        """
        start = time.time()
        self.net.forward(vol, training=True)  # also lets dropout know we're training
        fwd_time = time.time() - start

        start = time.time()
        cost_loss = float(loss_fn(self.net))
        bwd_time = time.time() - start

        self.k += 1
        l1_decay_loss = 0.0
        l2_decay_loss = 0.0
        if self.k % self.options.batch_size == 0:
            l1_decay_loss, l2_decay_loss = self._update()

        result = TrainingResult(
            forward_time=fwd_time,
            backward_time=bwd_time,
            l1_decay_loss=l1_decay_loss,
            l2_decay_loss=l2_decay_loss,
            cost_loss=cost_loss,
            total_loss=cost_loss + l1_decay_loss + l2_decay_loss,
        )
        if self.run_logger is not None:
            self.run_logger.log_step(self.k, **result._asdict())
        return result

    def _update(self):
        opts = self.options
        groups = self.net.get_response()
        self.optimizer.ensure_state(groups)

        l1_decay_loss = 0.0
        l2_decay_loss = 0.0
        # perform an update for all sets of weights
        for i, pg in enumerate(groups):
            p = pg.weights
            g = pg.gradients

            l1_decay = opts.l1_decay * pg.l1_decay_mul
            l2_decay = opts.l2_decay * pg.l2_decay_mul

            # accumulate weight decay loss
            l2_decay_loss += float(np.sum(l2_decay * p * p / 2.0))
            l1_decay_loss += float(np.sum(l1_decay * np.abs(p)))
            l1_grad = np.where(p > 0, l1_decay, -l1_decay)
            l2_grad = l2_decay * p

            # raw batch gradient
            gij = (l2_grad + l1_grad + g) / opts.batch_size
            self.optimizer.update(i, p, gij, self.k)

            # zero out gradient so that we can begin accumulating anew
            g[...] = 0.0

        logger.debug(
            "step %d: updated %d parameter groups with %s", self.k, len(groups), opts.method.value
        )
        return l1_decay_loss, l2_decay_loss
