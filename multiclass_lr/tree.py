from __future__ import annotations

"""
Depth-limited decision tree learner, backed by scikit-learn on a dense view of
the dataset.
"""

import numpy as np
from sklearn.tree import DecisionTreeClassifier as SkDecisionTree

from .base import Classifier
from .data import DataSet, Example


class DecisionTreeClassifier(Classifier):
    """
    Works for any label set, so it can stand in as the binary learner inside
    OVA/AVA. confidence is the leaf probability of the predicted label.
    """

    is_binary = True

    def __init__(self, depth_limit: int | None = None, random_state: int = 0):
        self.depth_limit = depth_limit
        self.random_state = random_state
        self.tree_: SkDecisionTree | None = None
        self.feature_indices_: list[int] = []
        self._trained = False

    def set_depth_limit(self, depth_limit: int | None):
        self.depth_limit = depth_limit

    def train(self, dataset: DataSet):
        self._check_dataset(dataset)
        self.feature_indices_ = sorted(dataset.get_all_feature_indices())
        X = dataset.to_frame(self.feature_indices_).to_numpy()
        y = dataset.label_array()

        self.tree_ = SkDecisionTree(max_depth=self.depth_limit, random_state=self.random_state)
        self.tree_.fit(X, y)
        self._trained = True
        return self

    def _dense(self, example: Example) -> np.ndarray:
        return np.array([[example.get_feature(f) for f in self.feature_indices_]])

    def classify(self, example: Example) -> float:
        self._check_trained()
        return float(self.tree_.predict(self._dense(example))[0])

    def confidence(self, example: Example) -> float:
        self._check_trained()
        return float(np.max(self.tree_.predict_proba(self._dense(example))[0]))
