from __future__ import annotations

"""
Logistic regression learners trained with per-example stochastic gradient
descent over sparse examples: a binary sigmoid model and a softmax model.
"""

import numpy as np

from .base import Classifier
from .constants import (
    DEFAULT_ITERATIONS,
    DEFAULT_L2,
    DEFAULT_LEARNING_RATE,
    LABEL_TOLERANCE,
    NEGATIVE_LABEL,
    POSITIVE_LABEL,
)
from .data import DataSet, Example, same_label
from .errors import PreconditionError


class _SGDLearner(Classifier):
    """Hyperparameters and sparse-row helpers shared by both learners."""

    def __init__(
        self,
        learning_rate: float = DEFAULT_LEARNING_RATE,
        iterations: int = DEFAULT_ITERATIONS,
        shuffle: bool = False,
        random_state: int | None = None,
        verbose: bool = False,
    ):
        self.learning_rate = learning_rate
        self.iterations = iterations
        self.shuffle = shuffle
        self.random_state = random_state
        self.verbose = verbose
        self.feature_index_: dict[int, int] = {}
        self.n_iter_: int = 0
        self._trained = False

    def set_iterations(self, iterations: int):
        self.iterations = iterations

    def set_learning_rate(self, learning_rate: float):
        self.learning_rate = learning_rate

    def _index_features(self, dataset: DataSet):
        indices = sorted(dataset.get_all_feature_indices())
        self.feature_index_ = {f: col for col, f in enumerate(indices)}

    def _row(self, example: Example) -> tuple[np.ndarray, np.ndarray]:
        """Column positions and values of the example's features known to the model."""
        pairs = [
            (self.feature_index_[f], v)
            for f, v in example.items()
            if f in self.feature_index_
        ]
        cols = np.array([c for c, _ in pairs], dtype=int)
        vals = np.array([v for _, v in pairs], dtype=float)
        return cols, vals

    def _pass_order(self, rng: np.random.Generator | None, n: int):
        return rng.permutation(n) if rng is not None else range(n)


class LRClassifier(_SGDLearner):
    """
    Binary logistic regression. classify returns +1.0 when sigmoid(w.x + b) >= 0.5,
    else -1.0; confidence is the distance of that probability from 0.5.

    The gradient target is 1 for positive labels and 0 otherwise. Set
    raw_targets=True to use the numeric label directly in the update instead.
    """

    is_binary = True

    def __init__(
        self,
        learning_rate: float = DEFAULT_LEARNING_RATE,
        iterations: int = DEFAULT_ITERATIONS,
        raw_targets: bool = False,
        shuffle: bool = False,
        random_state: int | None = None,
        verbose: bool = False,
    ):
        super().__init__(learning_rate, iterations, shuffle, random_state, verbose)
        self.raw_targets = raw_targets
        self.weights_: np.ndarray | None = None
        self.bias_: float = 0.0

    @staticmethod
    def _sigmoid(z):
        z = np.clip(z, -500, 500)
        return 1.0 / (1.0 + np.exp(-z))

    def _target(self, label: float) -> float:
        if self.raw_targets:
            return label
        return 1.0 if label > 0 else 0.0

    def train(self, dataset: DataSet):
        """Run `iterations` SGD passes over the dataset in its stored order."""
        self._check_dataset(dataset)
        self._index_features(dataset)
        self.weights_ = np.zeros(len(self.feature_index_))
        self.bias_ = 0.0
        self.n_iter_ = 0

        examples = dataset.get_data()
        rows = [self._row(example) for example in examples]
        targets = np.array([self._target(example.label) for example in examples])
        rng = np.random.default_rng(self.random_state) if self.shuffle else None

        for step in range(1, self.iterations + 1):
            for i in self._pass_order(rng, len(rows)):
                cols, vals = rows[i]
                pred = self._sigmoid(self.bias_ + self.weights_[cols] @ vals)
                diff = pred - targets[i]
                self.weights_[cols] -= self.learning_rate * diff * vals
                self.bias_ -= self.learning_rate * diff
            self.n_iter_ = step

            if self.verbose:
                preds = np.array(
                    [self._sigmoid(self.bias_ + self.weights_[c] @ v) for c, v in rows]
                )
                print(f"[LR] pass={step}, error={np.mean((preds - targets) ** 2):.4f}")

        self.bias_ = float(self.bias_)
        self._trained = True
        return self

    def decision_function(self, example: Example) -> float:
        """s = b + w.x over the model's feature index set."""
        self._check_trained()
        cols, vals = self._row(example)
        return float(self.bias_ + self.weights_[cols] @ vals)

    def predict_proba(self, example: Example) -> float:
        return float(self._sigmoid(self.decision_function(example)))

    def classify(self, example: Example) -> float:
        return POSITIVE_LABEL if self.predict_proba(example) >= 0.5 else NEGATIVE_LABEL

    def confidence(self, example: Example) -> float:
        return abs(self.predict_proba(example) - 0.5)

    def get_weights(self) -> dict[int, float]:
        """Learned weight per dataset feature index."""
        self._check_trained()
        return {f: float(self.weights_[col]) for f, col in self.feature_index_.items()}


class MultiLRClassifier(_SGDLearner):
    """
    Multinomial (softmax) logistic regression with optional L2 weight decay.

    Classes are the sorted distinct training labels. With strict_labels (the
    default) those labels must be the integers 0..K-1, so a predicted class
    index and its label coincide. With strict_labels=False any labels are
    accepted and translated through the class table.
    """

    def __init__(
        self,
        learning_rate: float = DEFAULT_LEARNING_RATE,
        iterations: int = DEFAULT_ITERATIONS,
        l2: float = 0.0,
        strict_labels: bool = True,
        shuffle: bool = False,
        random_state: int | None = None,
        verbose: bool = False,
    ):
        super().__init__(learning_rate, iterations, shuffle, random_state, verbose)
        self.l2 = l2
        self.strict_labels = strict_labels
        self.weights_: np.ndarray | None = None  # shape [classes, features]
        self.bias_: np.ndarray | None = None
        self.classes_: np.ndarray | None = None

    @staticmethod
    def _softmax(z: np.ndarray) -> np.ndarray:
        exp_z = np.exp(z - np.max(z))
        return exp_z / np.sum(exp_z)

    def _class_table(self, dataset: DataSet) -> dict[float, int]:
        labels = sorted(dataset.get_labels())
        num_classes = len(labels)
        if not self.strict_labels:
            return {label: row for row, label in enumerate(labels)}

        table = {}
        for label in labels:
            index = int(round(label))
            if abs(label - index) >= LABEL_TOLERANCE or not 0 <= index < num_classes:
                raise PreconditionError(
                    f"MultiLR expects integer labels in [0, {num_classes - 1}], got {label}"
                )
            table[label] = index
        return table

    @staticmethod
    def _lookup(table: dict[float, int], label: float) -> int:
        return next(row for known, row in table.items() if same_label(known, label))

    def train(self, dataset: DataSet):
        """Run `iterations` SGD passes of the cross-entropy gradient."""
        self._check_dataset(dataset)
        table = self._class_table(dataset)
        self._index_features(dataset)

        num_classes = len(table)
        if self.strict_labels:
            self.classes_ = np.arange(num_classes, dtype=float)
        else:
            self.classes_ = np.array(sorted(table), dtype=float)
        self.weights_ = np.zeros((num_classes, len(self.feature_index_)))
        self.bias_ = np.zeros(num_classes)
        self.n_iter_ = 0

        examples = dataset.get_data()
        rows = [self._row(example) for example in examples]
        targets = [self._lookup(table, example.label) for example in examples]
        rng = np.random.default_rng(self.random_state) if self.shuffle else None

        for step in range(1, self.iterations + 1):
            for i in self._pass_order(rng, len(rows)):
                cols, vals = rows[i]
                probs = self._softmax(self.bias_ + self.weights_[:, cols] @ vals)
                error = probs
                error[targets[i]] -= 1.0
                block = self.weights_[:, cols]
                self.weights_[:, cols] = block - self.learning_rate * (
                    np.outer(error, vals) + self.l2 * block
                )
                self.bias_ -= self.learning_rate * error
            self.n_iter_ = step

            if self.verbose:
                loss = -np.mean(
                    [
                        np.log(self._softmax(self.bias_ + self.weights_[:, c] @ v)[t] + 1e-12)
                        for (c, v), t in zip(rows, targets)
                    ]
                )
                print(f"[MultiLR] pass={step}, loss={loss:.4f}")

        self._trained = True
        return self

    def predict_proba(self, example: Example) -> np.ndarray:
        """Softmax vector over classes_."""
        self._check_trained()
        cols, vals = self._row(example)
        return self._softmax(self.bias_ + self.weights_[:, cols] @ vals)

    def classify(self, example: Example) -> float:
        # argmax keeps the lowest index on ties
        return float(self.classes_[int(np.argmax(self.predict_proba(example)))])

    def confidence(self, example: Example) -> float:
        return float(np.max(self.predict_proba(example)))


class RegularizedMultiLRClassifier(MultiLRClassifier):
    """MultiLR with L2 weight decay on by default."""

    def __init__(self, learning_rate: float = DEFAULT_LEARNING_RATE,
                 iterations: int = DEFAULT_ITERATIONS, l2: float = DEFAULT_L2, **kwargs):
        super().__init__(learning_rate=learning_rate, iterations=iterations, l2=l2, **kwargs)
