import logging

import numpy as np

from volumenet import (
    FullyConnectedConfig,
    LabeledLoss,
    LayerDef,
    Network,
    RunLogger,
    Trainer,
    TrainerOptions,
    Volume,
)


def generate_xor_data(n):
    combos = np.array([list(map(int, format(i, f'0{n}b'))) for i in range(2**n)], dtype=np.float64)
    Y = (np.sum(combos, axis=1) % 2).astype(int)  # odd parity = 1
    return combos, Y


def build_net(n_input, n_hidden, rng=None):
    return Network(
        [
            LayerDef("input", output=(1, 1, n_input)),
            LayerDef("fc", config=FullyConnectedConfig(n_hidden), activation="tanh"),
            LayerDef("softmax"),
        ],
        rng=rng,
    )


def run_xor(n, n_hidden, lr, epochs, method="adam", rng=None, run_logger=None):
    X, Y = generate_xor_data(n)
    net = build_net(n, n_hidden, rng=rng)
    trainer = Trainer(net, TrainerOptions(method=method, learning_rate=lr), run_logger=run_logger)

    for _ in range(epochs):
        for x, y in zip(X, Y):
            trainer.train(Volume(1, 1, n, weights=x), LabeledLoss(y))

    preds = []
    for x in X:
        net.forward(Volume(1, 1, n, weights=x))
        preds.append(net.get_prediction())
    preds = np.array(preds)

    print(f"Predicting XOR for {n} inputs:")
    print(f"XOR-{n} Predictions:", preds)
    print(f"Accuracy: {np.mean(preds == Y) * 100:.2f}%")
    return preds, Y


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    rng = np.random.default_rng(0)

    run_logger = RunLogger(tag="xor2")
    preds, Y = run_xor(n=2, n_hidden=8, lr=0.01, epochs=500, rng=rng, run_logger=run_logger)
    run_logger.save_json()
    run_logger.plot_loss(window=20)
    print(run_logger.calculate_accuracy(Y, preds))

    run_xor(n=3, n_hidden=16, lr=0.01, epochs=1000, rng=rng)
    run_xor(n=4, n_hidden=32, lr=0.005, epochs=1000, rng=rng)
