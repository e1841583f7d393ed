# helpers/logger.py
import csv
import datetime
import json
import pathlib

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402


class RunLogger:
    """
    Records per-step training metrics of one run under <root>/<tag>_<timestamp>/:
    history.csv (appended as steps arrive), history.json and loss plots.
    """

    def __init__(self, root="runs", tag="run"):
        ts = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
        self.root = pathlib.Path(root)
        self.tag = tag
        self.dir = self.root / f"{tag}_{ts}"
        self.dir.mkdir(parents=True, exist_ok=True)
        self.csv_path = self.dir / "history.csv"
        self.json_path = self.dir / "history.json"
        self.metrics = []  # list of dicts per step
        self._csv_header_written = False

    # ---------- logging ----------
    def log_step(self, step, **kwargs):
        row = {"step": int(step), **{k: float(v) for k, v in kwargs.items()}}
        self.metrics.append(row)
        with open(self.csv_path, "a", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=list(row.keys()))
            if not self._csv_header_written:
                writer.writeheader()
                self._csv_header_written = True
            writer.writerow(row)

    def history(self, key):
        return [row[key] for row in self.metrics if key in row]

    def save_json(self):
        with open(self.json_path, "w") as f:
            json.dump(self.metrics, f, indent=2)
        return str(self.json_path)

    # ---------- plotting ----------
    def _plots_dir(self, subdir):
        out = self.dir / subdir
        out.mkdir(parents=True, exist_ok=True)
        return out

    def plot_loss(self, subdir="plots", window=1):
        """
        Saves the loss curve as loss_curve_<tag>.png. With window > 1 the
        curves are smoothed with a moving average over that many steps.
        """
        outdir = self._plots_dir(subdir)
        plt.figure()
        for key, label in (("total_loss", "total loss"), ("cost_loss", "cost loss")):
            values = np.asarray(self.history(key), dtype=np.float64)
            if len(values) == 0:
                continue
            if window > 1 and len(values) >= window:
                values = np.convolve(values, np.ones(window) / window, mode="valid")
            plt.plot(values, label=label)
        plt.xlabel("Step")
        plt.ylabel("Loss")
        plt.title(f"Loss vs Steps ({self.tag})")
        if self.metrics:
            plt.legend()
        plt.tight_layout()
        path = outdir / f"loss_curve_{self.tag}.png"
        plt.savefig(path, dpi=160)
        plt.close()
        return str(path)

    # ---------- metrics calculation ----------
    def calculate_accuracy(self, y_true, y_pred, num_classes=None):
        """
        Accuracy and per-class recall from true and predicted labels.

        Returns a dict with 'accuracy', 'recall_per_class' and the
        'confusion_matrix' (cm[i, j] = true label i predicted as j).
        """
        y_true = np.asarray(y_true, dtype=np.int64)
        y_pred = np.asarray(y_pred, dtype=np.int64)
        if num_classes is None:
            num_classes = int(max(y_true.max(initial=0), y_pred.max(initial=0))) + 1

        cm = np.zeros((num_classes, num_classes), dtype=np.int64)
        np.add.at(cm, (y_true, y_pred), 1)

        support = cm.sum(axis=1)
        recall = np.divide(
            np.diag(cm), support, out=np.zeros(num_classes), where=support > 0
        )
        total = cm.sum()
        return {
            "accuracy": float(np.trace(cm) / total) if total else 0.0,
            "recall_per_class": recall.tolist(),
            "confusion_matrix": cm,
        }
