from .Optimizer import Method, Optimizer


class SGDOptimizer(Optimizer):
    """SGD with momentum: v = momentum*v - lr*g; p += v."""

    method = Method.SGD

    def update(self, i, p, g, k):
        v = self.gsum[i]
        # back up the step for the next iteration of momentum
        v[...] = self.options.momentum * v - self.options.learning_rate * g
        p += v
