import itertools

import pytest

from multiclass_lr import (
    DECISION_TREE,
    LOGISTIC_REGRESSION,
    MULTI_LOGISTIC_REGRESSION,
    AVAClassifier,
    Classifier,
    ClassifierFactory,
    DataSet,
    Example,
    NotTrainedError,
    OVAClassifier,
    PreconditionError,
)


class StubClassifier(Classifier):
    """Binary learner with a fixed answer; remembers what it was trained on."""

    is_binary = True

    def __init__(self, prediction: float, confidence: float):
        self.prediction = prediction
        self.score = confidence
        self.trained_labels = None
        self._trained = False

    def train(self, dataset):
        self.trained_labels = [e.label for e in dataset.get_data()]
        self._trained = True

    def classify(self, example):
        return self.prediction

    def confidence(self, example):
        return self.score


def stub_factory(*answers):
    answers = iter(answers)
    created = []

    def factory():
        stub = StubClassifier(*next(answers))
        created.append(stub)
        return stub

    factory.created = created
    return factory


LR_FACTORY = ClassifierFactory(LOGISTIC_REGRESSION, 200, learning_rate=0.1)


def test_ova_over_lr_recovers_each_class(three_class):
    model = OVAClassifier(LR_FACTORY).train(three_class)

    assert model.classify(Example({0: 1.0})) == 0.0
    assert model.classify(Example({1: 1.0})) == 1.0
    assert model.classify(Example({2: 1.0})) == 2.0


def test_ava_over_lr_recovers_each_class(three_class):
    model = AVAClassifier(LR_FACTORY).train(three_class)

    assert len(model.classifiers) == 3
    for example in three_class:
        assert model.classify(example) == example.label


def test_ova_holds_one_learner_per_label(noisy_three_class):
    model = OVAClassifier(ClassifierFactory(LOGISTIC_REGRESSION, 5)).train(noisy_three_class)

    assert model.class_labels == [0.0, 1.0, 2.0]
    assert len(model.classifiers) == 3
    assert len({id(c) for c in model.classifiers}) == 3


def test_ava_holds_one_learner_per_pair():
    dataset = DataSet.from_examples([Example({i: 1.0}, float(i)) for i in range(4)])
    model = AVAClassifier(ClassifierFactory(LOGISTIC_REGRESSION, 5)).train(dataset)

    assert len(model.classifiers) == 6
    assert model.pairs == list(itertools.combinations([0.0, 1.0, 2.0, 3.0], 2))


@pytest.mark.parametrize("reduction", [OVAClassifier, AVAClassifier])
def test_training_leaves_source_untouched(reduction, noisy_three_class, snapshot):
    before = snapshot(noisy_three_class)
    reduction(LR_FACTORY).train(noisy_three_class)

    assert snapshot(noisy_three_class) == before


@pytest.mark.parametrize("reduction", [OVAClassifier, AVAClassifier])
def test_single_class_is_rejected(reduction):
    dataset = DataSet.from_examples([Example({0: 1.0}, 1.0), Example({0: 2.0}, 1.0)])

    with pytest.raises(PreconditionError):
        reduction(LR_FACTORY).train(dataset)


@pytest.mark.parametrize("reduction", [OVAClassifier, AVAClassifier])
def test_not_trained(reduction):
    model = reduction(LR_FACTORY)

    with pytest.raises(NotTrainedError):
        model.classify(Example({0: 1.0}))
    with pytest.raises(NotTrainedError):
        model.confidence(Example({0: 1.0}))


@pytest.mark.parametrize("reduction", [OVAClassifier, AVAClassifier])
def test_multiclass_inner_learner_is_rejected(reduction, three_class):
    with pytest.raises(PreconditionError):
        reduction(ClassifierFactory(MULTI_LOGISTIC_REGRESSION, 5)).train(three_class)


@pytest.mark.parametrize("reduction", [OVAClassifier, AVAClassifier])
def test_confidence_is_zero_once_trained(reduction, three_class):
    model = reduction(LR_FACTORY).train(three_class)

    assert model.confidence(Example({0: 1.0})) == 0.0


def test_ova_relabels_one_vs_rest(three_class):
    factory = stub_factory((-1.0, 0.1), (-1.0, 0.2), (-1.0, 0.3))
    OVAClassifier(factory).train(three_class)

    assert [s.trained_labels for s in factory.created] == [
        [1.0, -1.0, -1.0],
        [-1.0, 1.0, -1.0],
        [-1.0, -1.0, 1.0],
    ]


def test_ova_picks_most_confident_positive(three_class):
    factory = stub_factory((1.0, 0.2), (-1.0, 0.45), (1.0, 0.4))
    model = OVAClassifier(factory).train(three_class)

    assert model.classify(Example({})) == 2.0


def test_ova_positive_tie_keeps_class_order(three_class):
    factory = stub_factory((-1.0, 0.4), (1.0, 0.3), (1.0, 0.3))
    model = OVAClassifier(factory).train(three_class)

    assert model.classify(Example({})) == 1.0


def test_ova_falls_back_to_least_confident_negative(three_class):
    factory = stub_factory((-1.0, 0.3), (-1.0, 0.1), (-1.0, 0.4))
    model = OVAClassifier(factory).train(three_class)

    assert model.classify(Example({})) == 1.0


def test_ova_fallback_tie_keeps_class_order(three_class):
    factory = stub_factory((-1.0, 0.3), (-1.0, 0.2), (-1.0, 0.2))
    model = OVAClassifier(factory).train(three_class)

    assert model.classify(Example({})) == 1.0


def test_ava_pair_datasets_hold_only_their_classes():
    dataset = DataSet.from_examples(
        [Example({0: 1.0}, 0.0), Example({1: 1.0}, 1.0), Example({2: 1.0}, 2.0), Example({0: 2.0}, 0.0)]
    )
    factory = stub_factory(*[(1.0, 0.1)] * 3)
    AVAClassifier(factory).train(dataset)

    # pairs (0,1), (0,2), (1,2): first label -> +1, second -> -1
    assert [s.trained_labels for s in factory.created] == [
        [1.0, -1.0, 1.0],
        [1.0, -1.0, 1.0],
        [1.0, -1.0],
    ]


def test_ava_confidence_weighted_votes(three_class):
    # (0,1) says 1 strongly, (0,2) says 0 weakly, (1,2) abstains
    factory = stub_factory((-1.0, 0.4), (1.0, 0.1), (0.0, 0.5))
    model = AVAClassifier(factory).train(three_class)

    assert model.votes(Example({})) == pytest.approx({0.0: -0.3, 1.0: 0.4, 2.0: -0.1})
    assert model.classify(Example({})) == 1.0


def test_ava_tie_keeps_class_order(three_class):
    factory = stub_factory((0.0, 0.5), (0.0, 0.5), (0.0, 0.5))
    model = AVAClassifier(factory).train(three_class)

    assert model.classify(Example({})) == 0.0


@pytest.mark.parametrize("reduction", [OVAClassifier, AVAClassifier])
def test_reductions_over_trees(reduction, noisy_three_class):
    model = reduction(ClassifierFactory(DECISION_TREE, 2)).train(noisy_three_class)

    correct = sum(model.classify(e) == e.label for e in noisy_three_class)
    assert correct / len(noisy_three_class) > 0.9


@pytest.mark.parametrize("reduction", [OVAClassifier, AVAClassifier])
def test_retraining_replaces_inner_learners(reduction, noisy_three_class):
    model = reduction(ClassifierFactory(LOGISTIC_REGRESSION, 3)).train(noisy_three_class)
    two_class = DataSet.from_examples([e for e in noisy_three_class if e.label != 2.0])
    model.train(two_class)

    assert model.class_labels == [0.0, 1.0]
    assert len(model.classifiers) == (1 if reduction is AVAClassifier else 2)


@pytest.mark.parametrize("reduction", [OVAClassifier, AVAClassifier])
def test_predictions_are_deterministic(reduction, noisy_three_class):
    first = reduction(ClassifierFactory(LOGISTIC_REGRESSION, 10)).train(noisy_three_class)
    second = reduction(ClassifierFactory(LOGISTIC_REGRESSION, 10)).train(noisy_three_class)

    assert first.classify_all(noisy_three_class) == second.classify_all(noisy_three_class)


def test_ova_near_duplicate_labels_share_a_learner():
    dataset = DataSet.from_examples(
        [Example({0: 1.0}, 0.0), Example({1: 1.0}, 1.0), Example({1: 1.0}, 1.0005)]
    )
    model = OVAClassifier(ClassifierFactory(LOGISTIC_REGRESSION, 5)).train(dataset)

    assert model.class_labels == [0.0, 1.0]
    assert len(model.classifiers) == 2
