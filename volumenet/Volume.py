import math
from collections import namedtuple

import numpy as np

from .errors import InvariantViolation
from .helpers.rng import get_rng


class Dimensions(namedtuple("Dimensions", ["x", "y", "z"])):
    """Width (x), height (y) and depth (z) of a Volume."""

    __slots__ = ()

    def size(self):
        return self.x * self.y * self.z


class Volume:
    """
    Volume is the basic building block of all data in a network.

    It is a 3D block of numbers with a width (sx), height (sy) and depth,
    stored as two flat buffers of the same length: `w` holds the values and
    `dw` the gradients w.r.t. those values. Cell (x, y, d) lives at flat
    index ((sx * y) + x) * depth + d.

    Construction:
        Volume(sx, sy, depth)                  gaussian fill, std sqrt(1/n)
        Volume(sx, sy, depth, value=c)         constant fill (c=0.0 for zeros)
        Volume(1, 1, depth, weights=[...])     explicit channel vector
    """

    def __init__(self, sx, sy, depth, value=None, weights=None, rng=None):
        self.sx = int(sx)
        self.sy = int(sy)
        self.depth = int(depth)
        n = self.sx * self.sy * self.depth

        self.dw = np.zeros(n, dtype=np.float64)

        if weights is not None:
            weights = np.asarray(weights, dtype=np.float64).ravel()
            if len(weights) != self.depth:
                raise InvariantViolation(
                    f"Invalid input weights: expected {self.depth} values, got {len(weights)}"
                )
            if self.sx != 1:
                raise InvariantViolation("Invalid volume dimensions: sx must equal 1 when weights are given")
            if self.sy != 1:
                raise InvariantViolation("Invalid volume dimensions: sy must equal 1 when weights are given")
            self.w = weights.copy()
        elif value is not None:
            self.w = np.full(n, float(value), dtype=np.float64)
        else:
            # weight normalization is done to equalize the output
            # variance of every neuron, otherwise neurons with a lot
            # of incoming connections have outputs of larger variance
            scale = math.sqrt(1.0 / n) if n > 0 else 0.0
            self.w = get_rng(rng).standard_normal(n) * scale

    @classmethod
    def from_dimensions(cls, dims, value=None, rng=None):
        return cls(dims.x, dims.y, dims.z, value=value, rng=rng)

    # ----- shape -----
    @property
    def weights(self):
        return self.w

    @property
    def gradients(self):
        return self.dw

    def size(self):
        return len(self.w)

    def dimensions(self):
        return Dimensions(self.sx, self.sy, self.depth)

    def index(self, x, y, d):
        return ((self.sx * y) + x) * self.depth + d

    def as_array(self, grad=False):
        """(sy, sx, depth) view over the value (or gradient) buffer."""
        buf = self.dw if grad else self.w
        return buf.reshape(self.sy, self.sx, self.depth)

    # ----- value plane -----
    def get(self, x, y, d):
        return self.w[self.index(x, y, d)]

    def set(self, x, y, d, v):
        self.w[self.index(x, y, d)] = v

    def add(self, x, y, d, v):
        self.w[self.index(x, y, d)] += v

    def mult(self, x, y, d, v):
        self.w[self.index(x, y, d)] *= v

    def get_by_index(self, i):
        return self.w[i]

    def set_by_index(self, i, v):
        self.w[i] = v

    def add_by_index(self, i, v):
        self.w[i] += v

    def mult_by_index(self, i, v):
        self.w[i] *= v

    # ----- gradient plane -----
    def get_grad(self, x, y, d):
        return self.dw[self.index(x, y, d)]

    def set_grad(self, x, y, d, v):
        self.dw[self.index(x, y, d)] = v

    def add_grad(self, x, y, d, v):
        self.dw[self.index(x, y, d)] += v

    def mult_grad(self, x, y, d, v):
        self.dw[self.index(x, y, d)] *= v

    def get_grad_by_index(self, i):
        return self.dw[i]

    def set_grad_by_index(self, i, v):
        self.dw[i] = v

    def add_grad_by_index(self, i, v):
        self.dw[i] += v

    def zero_grad(self):
        self.dw[...] = 0.0

    # ----- whole-volume ops -----
    def clone(self):
        """Copy of the values with a fresh, zeroed gradient sheet."""
        vol = Volume(self.sx, self.sy, self.depth, value=0.0)
        vol.w[...] = self.w
        return vol

    def clone_and_zero(self):
        return Volume(self.sx, self.sy, self.depth, value=0.0)

    def add_from(self, other):
        self.w += other.w

    def add_from_scaled(self, other, scale):
        self.w += other.w * scale

    def set_const(self, v):
        self.w[...] = v

    def __repr__(self):
        return f"Volume(sx={self.sx}, sy={self.sy}, depth={self.depth})"
