from __future__ import annotations

"""
Common contract for every learner: train on a DataSet, then classify and
score single examples.
"""

from abc import ABC, abstractmethod

from .data import DataSet, Example
from .errors import NotTrainedError, PreconditionError


class Classifier(ABC):
    """
    Fresh -> (train) -> Trained. classify/confidence on a fresh learner raise
    NotTrainedError; calling train again replaces the previous model.
    """

    # True when the learner emits +1/-1 on +1/-1 labelled data with a
    # distance-style confidence, which is what the reductions expect.
    is_binary = False

    @abstractmethod
    def train(self, dataset: DataSet):
        ...

    @abstractmethod
    def classify(self, example: Example) -> float:
        ...

    @abstractmethod
    def confidence(self, example: Example) -> float:
        ...

    @property
    def is_trained(self) -> bool:
        return getattr(self, "_trained", False)

    def _check_trained(self):
        if not self.is_trained:
            raise NotTrainedError(f"{type(self).__name__} has not been trained yet.")

    @staticmethod
    def _check_dataset(dataset: DataSet):
        if len(dataset) == 0:
            raise PreconditionError("Cannot train on an empty dataset.")
        if not dataset.get_all_feature_indices():
            raise PreconditionError("Cannot train with an empty feature index set.")

    def classify_all(self, dataset: DataSet) -> list[float]:
        return [self.classify(example) for example in dataset.get_data()]
