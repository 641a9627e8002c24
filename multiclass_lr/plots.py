from __future__ import annotations

"""
Figures for the experiments: accuracy curves over a hyperparameter sweep and
a confusion matrix for a trained classifier.
"""

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from sklearn.metrics import ConfusionMatrixDisplay


def plot_accuracy_curves(results: pd.DataFrame, filename: Path | str, xlabel: str, title: str):
    """
    One line per column of `results`; the index is the swept hyperparameter
    (depth, iterations, learning rate).
    """
    plt.figure(figsize=(8, 6))
    for column in results.columns:
        plt.plot(results.index, results[column], marker="o", lw=2, label=str(column))
    plt.xlabel(xlabel)
    plt.ylabel("Accuracy")
    plt.ylim([0.0, 1.05])
    plt.title(title)
    plt.legend(loc="lower right")
    plt.grid(True)
    plt.tight_layout()
    plt.savefig(filename)
    plt.close()


def plot_confusion_matrix(confusion: pd.DataFrame, filename: Path | str, title: str):
    """Render the DataFrame produced by compute_classification_metrics."""
    labels = [f"{label:g}" for label in confusion.index]
    disp = ConfusionMatrixDisplay(confusion_matrix=np.asarray(confusion), display_labels=labels)
    disp.plot(cmap="Blues", values_format="d")
    plt.title(title)
    plt.tight_layout()
    plt.savefig(filename)
    plt.close()
