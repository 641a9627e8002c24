from __future__ import annotations

"""
Factory that mints fresh, untrained learners of a configured kind.
"""

from dataclasses import dataclass

from .base import Classifier
from .constants import DEFAULT_LEARNING_RATE
from .errors import PreconditionError
from .logreg import LRClassifier, MultiLRClassifier, RegularizedMultiLRClassifier
from .tree import DecisionTreeClassifier

DECISION_TREE = "decision_tree"
LOGISTIC_REGRESSION = "logistic_regression"
MULTI_LOGISTIC_REGRESSION = "multi_logistic_regression"
REGULARIZED_MULTI_LOGISTIC_REGRESSION = "regularized_multi_logistic_regression"

KINDS = (
    DECISION_TREE,
    LOGISTIC_REGRESSION,
    MULTI_LOGISTIC_REGRESSION,
    REGULARIZED_MULTI_LOGISTIC_REGRESSION,
)


@dataclass(frozen=True)
class ClassifierFactory:
    """
    (kind, hyperparameter) record. The hyperparameter is the depth limit for
    decision trees and the number of SGD passes for the logistic learners.
    """

    kind: str
    hyperparameter: int
    learning_rate: float = DEFAULT_LEARNING_RATE

    def __post_init__(self):
        if self.kind not in KINDS:
            raise PreconditionError(f"Unknown classifier kind: {self.kind}")

    def new_classifier(self) -> Classifier:
        if self.kind == DECISION_TREE:
            return DecisionTreeClassifier(depth_limit=self.hyperparameter)
        if self.kind == LOGISTIC_REGRESSION:
            return LRClassifier(learning_rate=self.learning_rate, iterations=self.hyperparameter)
        if self.kind == MULTI_LOGISTIC_REGRESSION:
            return MultiLRClassifier(
                learning_rate=self.learning_rate, iterations=self.hyperparameter
            )
        return RegularizedMultiLRClassifier(
            learning_rate=self.learning_rate, iterations=self.hyperparameter
        )

    def __call__(self) -> Classifier:
        return self.new_classifier()
