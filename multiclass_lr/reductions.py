from __future__ import annotations

"""
Multiclass reductions that compose a binary learner into a K-class predictor:
one-versus-all (K learners) and all-versus-all (K(K-1)/2 pairwise learners).
"""

from typing import Callable

from .base import Classifier
from .constants import NEGATIVE_LABEL, POSITIVE_LABEL
from .data import DataSet, Example, same_label
from .errors import PreconditionError


class _Reduction(Classifier):
    """Shared factory handling and class-order bookkeeping."""

    def __init__(self, factory: Callable[[], Classifier]):
        self.factory = factory
        self._trained = False

    def _new_binary_classifier(self) -> Classifier:
        classifier = self.factory()
        if not classifier.is_binary:
            raise PreconditionError(
                f"{type(self).__name__} needs a binary learner, got {type(classifier).__name__}"
            )
        return classifier

    def _class_order(self, dataset: DataSet) -> list[float]:
        self._check_dataset(dataset)
        labels = sorted(dataset.get_labels())
        if len(labels) < 2:
            raise PreconditionError(
                f"{type(self).__name__} needs at least two classes, got {len(labels)}"
            )
        return labels

    def confidence(self, example: Example) -> float:
        """Reductions do not score their own predictions."""
        self._check_trained()
        return 0.0


class OVAClassifier(_Reduction):
    """
    One binary learner per class (that class vs. the rest). Prediction is the
    most confident learner voting +1; when none does, the learner closest to
    its decision boundary wins.
    """

    def __init__(self, factory: Callable[[], Classifier]):
        super().__init__(factory)
        self.class_labels: list[float] = []
        self.classifiers: list[Classifier] = []

    @staticmethod
    def _one_vs_rest(dataset: DataSet, positive: float) -> DataSet:
        binary = dataset.empty_like()
        for example in dataset.get_data():
            copy = example.copy()
            copy.set_label(POSITIVE_LABEL if same_label(example.label, positive) else NEGATIVE_LABEL)
            binary.add_data(copy)
        return binary

    def train(self, dataset: DataSet):
        labels = self._class_order(dataset)
        classifiers = []
        for label in labels:
            classifier = self._new_binary_classifier()
            classifier.train(self._one_vs_rest(dataset, label))
            classifiers.append(classifier)

        self.class_labels = labels
        self.classifiers = classifiers
        self._trained = True
        return self

    def classify(self, example: Example) -> float:
        self._check_trained()
        best_label = None
        best_confidence = float("-inf")
        scored = []
        for label, classifier in zip(self.class_labels, self.classifiers):
            confidence = classifier.confidence(example)
            scored.append((label, confidence))
            if same_label(classifier.classify(example), POSITIVE_LABEL) and confidence > best_confidence:
                best_confidence = confidence
                best_label = label

        if best_label is None:
            # min keeps the first class on ties
            best_label = min(scored, key=lambda pair: pair[1])[0]
        return best_label


class AVAClassifier(_Reduction):
    """
    One binary learner per unordered class pair (i < j, i labelled +1). Each
    learner moves its confidence from the losing class to the winning one; the
    class with the highest tally is predicted.
    """

    def __init__(self, factory: Callable[[], Classifier]):
        super().__init__(factory)
        self.class_labels: list[float] = []
        self.class1_labels: list[float] = []
        self.class2_labels: list[float] = []
        self.classifiers: list[Classifier] = []

    @staticmethod
    def _pair_dataset(dataset: DataSet, positive: float, negative: float) -> DataSet:
        binary = dataset.empty_like()
        for example in dataset.get_data():
            if same_label(example.label, positive):
                target = POSITIVE_LABEL
            elif same_label(example.label, negative):
                target = NEGATIVE_LABEL
            else:
                continue
            copy = example.copy()
            copy.set_label(target)
            binary.add_data(copy)
        return binary

    @property
    def pairs(self) -> list[tuple[float, float]]:
        return list(zip(self.class1_labels, self.class2_labels))

    def train(self, dataset: DataSet):
        labels = self._class_order(dataset)
        class1, class2, classifiers = [], [], []
        for i, first in enumerate(labels):
            for second in labels[i + 1:]:
                classifier = self._new_binary_classifier()
                classifier.train(self._pair_dataset(dataset, first, second))
                class1.append(first)
                class2.append(second)
                classifiers.append(classifier)

        self.class_labels = labels
        self.class1_labels = class1
        self.class2_labels = class2
        self.classifiers = classifiers
        self._trained = True
        return self

    def votes(self, example: Example) -> dict[float, float]:
        """Confidence-weighted tally per class, in class order."""
        self._check_trained()
        tally = {label: 0.0 for label in self.class_labels}
        for first, second, classifier in zip(
            self.class1_labels, self.class2_labels, self.classifiers
        ):
            confidence = classifier.confidence(example)
            prediction = classifier.classify(example)
            if same_label(prediction, POSITIVE_LABEL):
                tally[first] += confidence
                tally[second] -= confidence
            elif same_label(prediction, NEGATIVE_LABEL):
                tally[first] -= confidence
                tally[second] += confidence
        return tally

    def classify(self, example: Example) -> float:
        tally = self.votes(example)
        best_label = self.class_labels[0]
        for label in self.class_labels:
            if tally[label] > tally[best_label]:
                best_label = label
        return best_label
