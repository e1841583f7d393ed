from ..errors import InvariantViolation


class ParamGroup:
    """
    One trainable unit of a layer: a weight vector, its gradient vector and
    the decay multipliers the trainer applies on top of its global L1/L2 decay.

    `weights` and `gradients` alias the buffers of the owning Volume, so the
    trainer updates the layer in place.
    """

    def __init__(self, weights, gradients, l1_decay_mul=0.0, l2_decay_mul=1.0):
        self.weights = weights
        self.gradients = gradients
        self.l1_decay_mul = l1_decay_mul
        self.l2_decay_mul = l2_decay_mul

    @classmethod
    def of(cls, vol, l1_decay_mul=0.0, l2_decay_mul=1.0):
        return cls(vol.w, vol.dw, l1_decay_mul, l2_decay_mul)

    def __len__(self):
        return len(self.weights)


class Layer:
    # Subclasses override as needed
    layer_type = None

    def __init__(self, in_dims, out_dims):
        self.in_dims = in_dims
        self.out_dims = out_dims
        # most recent forward pass, owned by this layer
        self.in_vol = None
        self.out_vol = None

    def forward(self, vol, training=False):
        # Cache vol and return a new output Volume
        raise NotImplementedError

    def backward(self):
        # Write grad wrt input into self.in_vol.dw from self.out_vol.dw
        raise NotImplementedError

    def get_response(self):
        # Return list of ParamGroup (empty when nothing is trainable)
        return []

    def _require_forward(self):
        if self.in_vol is None:
            raise InvariantViolation(f"{type(self).__name__}: forward() must be called first")

    def __repr__(self):
        return f"{type(self).__name__}({tuple(self.in_dims)} -> {tuple(self.out_dims)})"


class LossLayer(Layer):
    """Terminal layer that turns a class index into a cost and seeds in_vol.dw."""

    def loss(self, index):
        raise NotImplementedError


class RegressionLossLayer(Layer):
    """Terminal layer supervised with real-valued targets."""

    def multi_dimensional_loss(self, targets):
        raise NotImplementedError

    def dimensional_loss(self, index, value):
        raise NotImplementedError
