import numpy as np

from .Optimizer import Method, Optimizer


class AdamOptimizer(Optimizer):
    method = Method.ADAM
    uses_xsum = True

    def update(self, i, p, g, k):
        b1, b2 = self.options.beta1, self.options.beta2
        m = self.gsum[i]
        v = self.xsum[i]
        # Adam moments (in-place)
        m[...] = b1 * m + (1.0 - b1) * g
        v[...] = b2 * v + (1.0 - b2) * (g * g)
        # bias correction uses the trainer's iteration counter
        m_hat = m / (1.0 - b1 ** k)
        v_hat = v / (1.0 - b2 ** k)
        p -= self.options.learning_rate * m_hat / (np.sqrt(v_hat) + self.options.eps)
