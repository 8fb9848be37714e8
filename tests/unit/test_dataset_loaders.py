import numpy as np
import pytest

from sigmanet.core.types import Example, as_column
from sigmanet.data import (
    available_datasets,
    examples_from_records,
    examples_to_records,
    get_dataset,
)
from sigmanet.data.utils import deterministic_split, one_hot


def test_builtin_datasets_are_registered():
    assert {"csv", "xor"} <= set(available_datasets())
    with pytest.raises(KeyError):
        get_dataset("does-not-exist")


def test_xor_dataset():
    spec = get_dataset("xor")
    assert spec.d_in == 2 and spec.d_out == 1
    assert spec.test is None
    records = examples_to_records(spec.train)
    assert records == [
        ([0.0, 0.0], [0.0]),
        ([0.0, 1.0], [1.0]),
        ([1.0, 0.0], [1.0]),
        ([1.0, 1.0], [0.0]),
    ]


def test_xor_one_hot_has_test_split():
    spec = get_dataset("xor", one_hot=True)
    assert spec.num_classes == 2
    assert len(spec.test) == 4
    assert all(np.sum(e.targets == 1.0) == 1 for e in spec.test)


def _write_digits(path, rows):
    lines = ["label,p0,p1,p2"] + [",".join(str(v) for v in row) for row in rows]
    path.write_text("\n".join(lines) + "\n")


def test_csv_loader_scales_and_one_hot_encodes(tmp_path):
    train_path = tmp_path / "train.csv"
    test_path = tmp_path / "test.csv"
    _write_digits(train_path, [[0, 0, 255, 51], [2, 255, 0, 0], [1, 102, 102, 102]])
    _write_digits(test_path, [[2, 0, 0, 255]])

    spec = get_dataset("csv", path=train_path, test_path=test_path, num_classes=3)
    assert spec.num_classes == 3
    assert len(spec.train) == 3 and len(spec.test) == 1
    first = spec.train[0]
    assert first.inputs.shape == (3, 1)
    assert np.allclose(first.inputs.ravel(), [0.0, 1.0, 0.2])
    assert np.array_equal(first.targets.ravel(), [1.0, 0.0, 0.0])
    assert np.array_equal(spec.test[0].targets.ravel(), [0.0, 0.0, 1.0])


def test_csv_loader_encodes_string_labels(tmp_path):
    path = tmp_path / "pets.csv"
    path.write_text("w,h,kind\n1,2,dog\n3,4,cat\n5,6,dog\n7,8,cat\n9,10,dog\n")
    spec = get_dataset("csv", path=path, label_col="kind", scale=1.0, test_split=0.4, seed=0)
    assert spec.num_classes == 2
    assert spec.provenance["classes"] == ["cat", "dog"]
    assert len(spec.train) == 3 and len(spec.test) == 2
    assert spec.d_in == 2


def test_csv_loader_missing_label_column(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("a,b\n1,2\n")
    with pytest.raises(KeyError):
        get_dataset("csv", path=path, label_col="label")


def test_records_conversion():
    examples = examples_from_records([([1, 2], [0, 1]), ((0.5, 0.5), (1.0, 0.0))])
    assert all(isinstance(e, Example) for e in examples)
    assert examples[0].inputs.dtype == np.float64
    assert examples[0].inputs.shape == (2, 1)


@pytest.mark.parametrize(
    "records",
    [[([1, 2],)], [([1, "x"], [1])], [([[1, 2], [3, 4]], [1])], [5]],
)
def test_records_conversion_rejects_malformed(records):
    with pytest.raises(ValueError):
        examples_from_records(records)


def test_as_column_keeps_columns():
    column = as_column(np.ones((3, 1)))
    assert column.shape == (3, 1)


def test_one_hot_and_split():
    encoded = one_hot(np.array([2, 0]), 3)
    assert np.array_equal(encoded, [[0.0, 0.0, 1.0], [1.0, 0.0, 0.0]])
    with pytest.raises(ValueError):
        one_hot(np.array([3]), 3)

    splits = deterministic_split(10, test_split=0.3, seed=1)
    assert splits.sizes == {"train": 7, "test": 3}
    assert sorted(np.concatenate([splits.train, splits.test]).tolist()) == list(range(10))
