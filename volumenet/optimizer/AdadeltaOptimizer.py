import numpy as np

from .Optimizer import Method, Optimizer


class AdadeltaOptimizer(Optimizer):
    """Adadelta; the learning rate is not used."""

    method = Method.ADADELTA
    uses_xsum = True

    def update(self, i, p, g, k):
        rho, eps = self.options.rho, self.options.eps
        gsum = self.gsum[i]
        xsum = self.xsum[i]
        gsum[...] = rho * gsum + (1.0 - rho) * g * g
        dx = -np.sqrt(xsum + eps) / np.sqrt(gsum + eps) * g
        # xsum lags behind gsum by one step
        xsum[...] = rho * xsum + (1.0 - rho) * dx * dx
        p += dx
