import numpy as np

from .Optimizer import Method, Optimizer


class WindowgradOptimizer(Optimizer):
    """
    Adagrad with a moving-window average of squared gradients, so the
    history of the whole run does not keep shrinking the step.
    """

    method = Method.WINDOWGRAD

    def update(self, i, p, g, k):
        rho = self.options.rho
        gsum = self.gsum[i]
        gsum[...] = rho * gsum + (1.0 - rho) * g * g
        p -= self.options.learning_rate * g / np.sqrt(gsum + self.options.eps)
