"""
Gradient-trained logistic regression learners and the one-versus-all /
all-versus-all reductions that turn any binary learner into a multiclass one.

This package contains sparse dataset helpers, the learners, a classifier
factory, and evaluation utilities used by main.py.
"""

from .base import Classifier
from .constants import LABEL_TOLERANCE
from .data import CSVFILE, TEXTFILE, CrossValidationSet, DataSet, DataSetSplit, Example
from .errors import NotTrainedError, PreconditionError
from .factory import (
    DECISION_TREE,
    LOGISTIC_REGRESSION,
    MULTI_LOGISTIC_REGRESSION,
    REGULARIZED_MULTI_LOGISTIC_REGRESSION,
    ClassifierFactory,
)
from .logreg import LRClassifier, MultiLRClassifier, RegularizedMultiLRClassifier
from .metrics import (
    accuracy,
    compute_classification_metrics,
    cross_validated_accuracy,
    evaluate,
    holdout_accuracy,
)
from .reductions import AVAClassifier, OVAClassifier
from .tree import DecisionTreeClassifier

__all__ = [
    "LABEL_TOLERANCE",
    "TEXTFILE",
    "CSVFILE",
    "Example",
    "DataSet",
    "DataSetSplit",
    "CrossValidationSet",
    "Classifier",
    "NotTrainedError",
    "PreconditionError",
    "LRClassifier",
    "MultiLRClassifier",
    "RegularizedMultiLRClassifier",
    "DecisionTreeClassifier",
    "ClassifierFactory",
    "DECISION_TREE",
    "LOGISTIC_REGRESSION",
    "MULTI_LOGISTIC_REGRESSION",
    "REGULARIZED_MULTI_LOGISTIC_REGRESSION",
    "OVAClassifier",
    "AVAClassifier",
    "accuracy",
    "cross_validated_accuracy",
    "holdout_accuracy",
    "compute_classification_metrics",
    "evaluate",
]
