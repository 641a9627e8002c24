from __future__ import annotations

"""
Metric helpers used across experiments: tolerant accuracy, fold/holdout
evaluation, and confusion summaries.
"""

from typing import Callable, Sequence

import numpy as np
import pandas as pd
from sklearn import metrics

from .base import Classifier
from .constants import DEFAULT_HOLDOUT_FRACTION, DEFAULT_REPEATS, LABEL_TOLERANCE
from .data import CrossValidationSet, DataSet
from .errors import PreconditionError


def count_correct(classifier: Classifier, dataset: DataSet) -> int:
    """Number of examples whose prediction is within the label tolerance."""
    preds = np.asarray(classifier.classify_all(dataset), dtype=float)
    return int(np.sum(np.abs(preds - dataset.label_array()) < LABEL_TOLERANCE))


def accuracy(classifier: Classifier, dataset: DataSet) -> float:
    if len(dataset) == 0:
        raise PreconditionError("Cannot score an empty dataset.")
    return count_correct(classifier, dataset) / len(dataset)


def cross_validated_accuracy(
    build: Callable[[], Classifier], cv_set: CrossValidationSet
) -> float:
    """
    Train a fresh classifier per fold and pool the hits: total correct over
    total held-out examples.
    """
    correct, total = 0, 0
    for split in cv_set:
        classifier = build()
        classifier.train(split.get_train())
        correct += count_correct(classifier, split.get_test())
        total += len(split.get_test())
    return correct / total


def holdout_accuracy(
    build: Callable[[], Classifier],
    dataset: DataSet,
    fraction: float = DEFAULT_HOLDOUT_FRACTION,
    repeats: int = DEFAULT_REPEATS,
    random_state: int | None = None,
) -> float:
    """Pooled accuracy over `repeats` independent random train/test splits."""
    rng = np.random.default_rng(random_state)
    correct, total = 0, 0
    for _ in range(repeats):
        split = dataset.split(fraction, random_state=int(rng.integers(2**31 - 1)))
        classifier = build()
        classifier.train(split.get_train())
        correct += count_correct(classifier, split.get_test())
        total += len(split.get_test())
    return correct / total


def compute_classification_metrics(
    y_true: Sequence[float] | np.ndarray,
    y_pred: Sequence[float] | np.ndarray,
    labels: Sequence[float] | None = None,
):
    """Accuracy, macro F1 and the confusion matrix for multiclass predictions."""
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    if labels is None:
        labels = sorted(set(y_true) | set(y_pred))
    return {
        "accuracy": float(np.mean(np.abs(y_true - y_pred) < LABEL_TOLERANCE)),
        "macro_f1": metrics.f1_score(
            y_true, y_pred, labels=labels, average="macro", zero_division=0
        ),
        "confusion_matrix": pd.DataFrame(
            metrics.confusion_matrix(y_true, y_pred, labels=labels),
            index=pd.Index(labels, name="actual"),
            columns=pd.Index(labels, name="predicted"),
        ),
    }


def evaluate(classifier: Classifier, dataset: DataSet):
    """compute_classification_metrics for a trained classifier on a dataset."""
    preds = classifier.classify_all(dataset)
    return compute_classification_metrics(dataset.label_array(), preds)
