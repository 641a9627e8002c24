import pytest

from multiclass_lr import (
    DECISION_TREE,
    LOGISTIC_REGRESSION,
    MULTI_LOGISTIC_REGRESSION,
    REGULARIZED_MULTI_LOGISTIC_REGRESSION,
    ClassifierFactory,
    DecisionTreeClassifier,
    LRClassifier,
    MultiLRClassifier,
    PreconditionError,
    RegularizedMultiLRClassifier,
)


def test_decision_tree_kind_uses_depth():
    clf = ClassifierFactory(DECISION_TREE, 3).new_classifier()

    assert isinstance(clf, DecisionTreeClassifier)
    assert clf.depth_limit == 3


def test_logistic_kind_uses_iterations():
    clf = ClassifierFactory(LOGISTIC_REGRESSION, 40, learning_rate=0.2).new_classifier()

    assert isinstance(clf, LRClassifier)
    assert clf.iterations == 40
    assert clf.learning_rate == 0.2


def test_multiclass_kinds():
    plain = ClassifierFactory(MULTI_LOGISTIC_REGRESSION, 7)()
    regularized = ClassifierFactory(REGULARIZED_MULTI_LOGISTIC_REGRESSION, 7)()

    assert type(plain) is MultiLRClassifier
    assert plain.iterations == 7 and plain.l2 == 0.0
    assert isinstance(regularized, RegularizedMultiLRClassifier)
    assert regularized.l2 == 0.001


def test_each_call_is_a_fresh_learner():
    factory = ClassifierFactory(LOGISTIC_REGRESSION, 5)
    first, second = factory(), factory()

    assert first is not second
    assert not first.is_trained


def test_unknown_kind():
    with pytest.raises(PreconditionError):
        ClassifierFactory("perceptron", 5)
