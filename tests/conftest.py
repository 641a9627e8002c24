# tests/conftest.py
from __future__ import annotations

import matplotlib
import pytest

from multiclass_lr import DataSet, Example

matplotlib.use("Agg")


@pytest.fixture
def snapshot():
    """(label, features) pairs for every example, for before/after comparisons."""

    def _snapshot(dataset: DataSet):
        return [(example.label, dict(example.features)) for example in dataset.get_data()]

    return _snapshot


@pytest.fixture
def separable_binary() -> DataSet:
    """{0:1} -> +1, {0:-1} -> -1"""
    return DataSet.from_examples([Example({0: 1.0}, 1.0), Example({0: -1.0}, -1.0)])


@pytest.fixture
def three_class() -> DataSet:
    """One-hot examples {i:1} labelled i for i in 0..2."""
    return DataSet.from_examples([Example({i: 1.0}, float(i)) for i in range(3)])


@pytest.fixture
def noisy_three_class() -> DataSet:
    """Forty examples per class around three separated centres."""
    examples = []
    for label, (a, b) in enumerate([(2.0, 0.0), (0.0, 2.0), (-2.0, -2.0)]):
        for k in range(40):
            jitter = ((k % 7) - 3) / 10.0
            examples.append(Example({0: a + jitter, 1: b - jitter, 2: 1.0}, float(label)))
    return DataSet.from_examples(examples)


@pytest.fixture
def wine_text(tmp_path):
    lines = [
        "0\tcrisp citrus apple acidity",
        "0\tapple citrus bright",
        "0\tcitrus lemon crisp",
        "1\toak tannin cherry",
        "1\tcherry plum tannin",
        "1\toak plum dark",
        "2\tsweet honey apricot",
        "2\thoney sweet dessert",
        "2\tapricot dessert sweet",
        "",
    ]
    path = tmp_path / "wines.train"
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


@pytest.fixture
def default_csv(tmp_path):
    path = tmp_path / "default.csv"
    rows = ["limit,age,paid,default"]
    for i in range(20):
        paid = i % 2
        rows.append(f"{1000 + 10 * i},{20 + i},{paid},{paid}")
    path.write_text("\n".join(rows) + "\n", encoding="utf-8")
    return path
