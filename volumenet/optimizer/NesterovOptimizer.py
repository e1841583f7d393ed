from .Optimizer import Method, Optimizer


class NesterovOptimizer(Optimizer):
    """Nesterov momentum, applied as a look-ahead correction on the velocity."""

    method = Method.NESTEROV

    def update(self, i, p, g, k):
        mu = self.options.momentum
        v = self.gsum[i]
        v_prev = v.copy()
        v[...] = mu * v - self.options.learning_rate * g
        p += -mu * v_prev + (1.0 + mu) * v
