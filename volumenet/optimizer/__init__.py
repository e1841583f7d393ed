from .Optimizer import Method, Optimizer
from .SGDOptimizer import SGDOptimizer
from .AdagradOptimizer import AdagradOptimizer
from .WindowgradOptimizer import WindowgradOptimizer
from .AdadeltaOptimizer import AdadeltaOptimizer
from .AdamOptimizer import AdamOptimizer
from .NesterovOptimizer import NesterovOptimizer

OPTIMIZERS = {
    Method.SGD: SGDOptimizer,
    Method.ADAGRAD: AdagradOptimizer,
    Method.WINDOWGRAD: WindowgradOptimizer,
    Method.ADADELTA: AdadeltaOptimizer,
    Method.ADAM: AdamOptimizer,
    Method.NESTEROV: NesterovOptimizer,
}


def get_optimizer(options):
    """Factory: the optimizer for options.method."""
    return OPTIMIZERS[Method(options.method)](options)


__all__ = [
    "Method",
    "Optimizer",
    "SGDOptimizer",
    "AdagradOptimizer",
    "WindowgradOptimizer",
    "AdadeltaOptimizer",
    "AdamOptimizer",
    "NesterovOptimizer",
    "OPTIMIZERS",
    "get_optimizer",
]
