from __future__ import annotations

"""
Sparse examples, datasets, and the loaders/splitters the experiment driver uses.
"""

from pathlib import Path
from typing import Iterable, Iterator

import numpy as np
import pandas as pd
from sklearn.model_selection import KFold, train_test_split

from .constants import LABEL_TOLERANCE
from .errors import PreconditionError

TEXTFILE = "text"
CSVFILE = "csv"


def same_label(a: float, b: float) -> bool:
    return abs(a - b) < LABEL_TOLERANCE


class Example:
    """
    One labeled instance: a sparse index -> value map plus a scalar label.
    Indices that are not stored read as 0.0.
    """

    def __init__(self, features: dict[int, float] | None = None, label: float = 0.0):
        self.features: dict[int, float] = {
            int(k): float(v) for k, v in (features or {}).items()
        }
        self.label = float(label)

    def get_label(self) -> float:
        return self.label

    def set_label(self, label: float):
        self.label = float(label)

    def feature_set(self) -> set[int]:
        """Indices actually stored on this example."""
        return set(self.features)

    def get_feature(self, index: int) -> float:
        return self.features.get(index, 0.0)

    def set_feature(self, index: int, value: float):
        self.features[int(index)] = float(value)

    def items(self) -> Iterator[tuple[int, float]]:
        return iter(self.features.items())

    def copy(self) -> "Example":
        """Independent copy; relabelling the copy leaves this example untouched."""
        return Example(self.features, self.label)

    def __repr__(self) -> str:
        return f"Example(features={self.features!r}, label={self.label!r})"


class DataSetSplit:
    """A (train, test) pair of datasets."""

    def __init__(self, train: "DataSet", test: "DataSet"):
        self.train = train
        self.test = test

    def get_train(self) -> "DataSet":
        return self.train

    def get_test(self) -> "DataSet":
        return self.test


class DataSet:
    """
    Ordered examples plus the feature schema (index -> name) they share.

    The global feature index set is the feature map's keys; adding an example
    with an unseen index registers that index so the set always covers the data.
    """

    def __init__(self, feature_map: dict[int, str] | None = None):
        self.feature_map: dict[int, str] = dict(feature_map or {})
        self.data: list[Example] = []

    @classmethod
    def from_examples(
        cls, examples: Iterable[Example], feature_map: dict[int, str] | None = None
    ) -> "DataSet":
        dataset = cls(feature_map)
        for example in examples:
            dataset.add_data(example)
        return dataset

    def add_data(self, example: Example):
        for index in example.feature_set():
            if index not in self.feature_map:
                self.feature_map[index] = str(index)
        self.data.append(example)

    def get_data(self) -> list[Example]:
        return self.data

    def get_labels(self) -> set[float]:
        """
        Distinct labels present in the contained examples. Labels within
        LABEL_TOLERANCE of one already seen count as that label.
        """
        labels: set[float] = set()
        for example in self.data:
            if not any(same_label(example.label, seen) for seen in labels):
                labels.add(example.label)
        return labels

    def get_all_feature_indices(self) -> set[int]:
        return set(self.feature_map)

    def get_feature_map(self) -> dict[int, str]:
        return self.feature_map

    def empty_like(self) -> "DataSet":
        """New empty dataset with the same feature schema."""
        return DataSet(self.feature_map)

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[Example]:
        return iter(self.data)

    def _subset(self, positions: Iterable[int]) -> "DataSet":
        subset = self.empty_like()
        for pos in positions:
            subset.add_data(self.data[pos])
        return subset

    def split(self, fraction: float, random_state: int | None = None) -> DataSetSplit:
        """
        Random split with `fraction` of the examples in train. Both halves keep
        the original relative order of their examples.
        """
        if not 0.0 < fraction < 1.0:
            raise PreconditionError(f"Split fraction must be in (0, 1), got {fraction}")
        if len(self.data) < 2:
            raise PreconditionError("Need at least two examples to split.")

        train_pos, test_pos = train_test_split(
            np.arange(len(self.data)), train_size=fraction, random_state=random_state
        )
        return DataSetSplit(
            self._subset(sorted(train_pos)), self._subset(sorted(test_pos))
        )

    def get_cross_validation_set(
        self, num_splits: int, random_state: int | None = None
    ) -> "CrossValidationSet":
        return CrossValidationSet(self, num_splits, random_state=random_state)

    def to_frame(self, indices: Iterable[int] | None = None) -> pd.DataFrame:
        """Dense view: one row per example, one column per feature index."""
        columns = sorted(self.feature_map) if indices is None else list(indices)
        frame = pd.DataFrame([example.features for example in self.data], columns=columns)
        return frame.fillna(0.0).astype(float)

    def label_array(self) -> np.ndarray:
        return np.array([example.label for example in self.data], dtype=float)

    @classmethod
    def from_text(cls, path: Path | str) -> "DataSet":
        """
        Read `label<TAB>text` lines. Every distinct lowercased token becomes a
        binary feature with value 1.0.
        """
        dataset = cls()
        vocabulary: dict[str, int] = {}
        with open(path, encoding="utf-8") as handle:
            for line_no, line in enumerate(handle, start=1):
                line = line.rstrip("\n")
                if not line.strip():
                    continue
                if "\t" not in line:
                    raise PreconditionError(f"{path}:{line_no}: expected 'label<TAB>text'")
                raw_label, text = line.split("\t", 1)
                try:
                    label = float(raw_label)
                except ValueError as exc:
                    raise PreconditionError(
                        f"{path}:{line_no}: label {raw_label!r} is not numeric"
                    ) from exc

                example = Example(label=label)
                for token in text.lower().split():
                    if token not in vocabulary:
                        vocabulary[token] = len(vocabulary)
                        dataset.feature_map[vocabulary[token]] = token
                    example.set_feature(vocabulary[token], 1.0)
                dataset.add_data(example)
        return dataset

    @classmethod
    def from_csv(cls, path: Path | str, label_column: str | None = None) -> "DataSet":
        """
        Read a CSV with a header row. The label column defaults to the last one;
        every other column is a numeric feature indexed by its position.
        """
        df = pd.read_csv(path)
        if df.empty:
            raise PreconditionError(f"{path}: no rows")
        label_column = label_column if label_column is not None else df.columns[-1]
        if label_column not in df.columns:
            raise PreconditionError(f"{path}: unknown label column {label_column!r}")

        feature_cols = [col for col in df.columns if col != label_column]
        try:
            X = df[feature_cols].apply(pd.to_numeric).fillna(0.0)
            y = pd.to_numeric(df[label_column])
        except ValueError as exc:
            raise PreconditionError(f"{path}: non-numeric values ({exc})") from exc

        dataset = cls({i: str(col) for i, col in enumerate(feature_cols)})
        for row, label in zip(X.to_numpy(dtype=float), y.to_numpy(dtype=float)):
            features = {i: value for i, value in enumerate(row) if value != 0.0}
            dataset.add_data(Example(features, label))
        return dataset

    @classmethod
    def load(cls, path: Path | str, fmt: str = TEXTFILE, label_column: str | None = None):
        if fmt == TEXTFILE:
            return cls.from_text(path)
        if fmt == CSVFILE:
            return cls.from_csv(path, label_column=label_column)
        raise ValueError(f"Unknown dataset format: {fmt}")


class CrossValidationSet:
    """K disjoint folds over a dataset; fold i is the test part of split i."""

    def __init__(self, dataset: DataSet, num_splits: int, random_state: int | None = None):
        if num_splits < 2:
            raise PreconditionError("Cross validation needs at least two folds.")
        if num_splits > len(dataset):
            raise PreconditionError(
                f"Cannot make {num_splits} folds from {len(dataset)} examples."
            )
        self.dataset = dataset
        self.num_splits = num_splits
        kfold = KFold(n_splits=num_splits, shuffle=True, random_state=random_state)
        self._folds = [
            (sorted(train_pos), sorted(test_pos))
            for train_pos, test_pos in kfold.split(np.arange(len(dataset)))
        ]

    def get_num_splits(self) -> int:
        return self.num_splits

    def get_validation_set(self, fold: int) -> DataSetSplit:
        train_pos, test_pos = self._folds[fold]
        return DataSetSplit(
            self.dataset._subset(train_pos), self.dataset._subset(test_pos)
        )

    def __iter__(self) -> Iterator[DataSetSplit]:
        for fold in range(self.num_splits):
            yield self.get_validation_set(fold)
