# helpers/rng.py
import numpy as np

# Shared generator for weight initialization and dropout sampling.
# Seed it (or pass an explicit generator) before building a network
# to get reproducible runs.
_rng = np.random.default_rng()


def get_rng(rng=None):
    """Return `rng` when given, otherwise the shared generator."""
    if rng is not None:
        return rng
    return _rng


def seed(seed=42):
    """Reseed the shared generator."""
    global _rng
    _rng = np.random.default_rng(seed)
    return _rng
