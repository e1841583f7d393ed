import numpy as np

from .Optimizer import Method, Optimizer


class AdagradOptimizer(Optimizer):
    method = Method.ADAGRAD

    def update(self, i, p, g, k):
        gsum = self.gsum[i]
        gsum += g * g
        p -= self.options.learning_rate * g / np.sqrt(gsum + self.options.eps)
