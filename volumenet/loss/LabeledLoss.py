class LabeledLoss:
    """Classification cost for one labeled example; runs the backward sweep."""

    def __init__(self, label):
        self.label = int(label)

    def __call__(self, net):
        return net.backward(self.label)

    def __repr__(self):
        return f"LabeledLoss({self.label})"
