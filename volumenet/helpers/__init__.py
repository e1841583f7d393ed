from .rng import get_rng, seed
from .logger import RunLogger

__all__ = ["get_rng", "seed", "RunLogger"]
