"""Tests for generating the validation and training splits."""

import numpy as np
import pytest

from cfvgen.config import Config
from cfvgen.datagen import assembler
from cfvgen.datagen.driver import generate_data
from cfvgen.datagen.storage import load_dataset, split_paths


def make_config(tmp_path, **datagen):
    config = Config()
    config.datagen.data_path = f"{tmp_path}/samples/"
    config.datagen.train_data_count = 20
    config.datagen.valid_data_count = 10
    config.datagen.gen_batch_size = 5
    config.datagen.seed = 123
    for key, value in datagen.items():
        setattr(config.datagen, key, value)
    return config


def test_writes_both_splits(tmp_path):
    results = generate_data(make_config(tmp_path))

    assert results["valid"].example_count == 10
    assert results["train"].example_count == 20
    for split in ("valid", "train"):
        for path in split_paths(tmp_path / "samples" / split).values():
            assert path.exists()

    train = load_dataset(tmp_path / "samples" / "train")
    assert train.inputs.shape == (20, 73)


def test_count_overrides(tmp_path):
    results = generate_data(make_config(tmp_path), train_data_count=5, valid_data_count=15)
    assert results["train"].example_count == 5
    assert results["valid"].example_count == 15


def test_reproducible_with_seed(tmp_path):
    first = generate_data(make_config(tmp_path / "a"))
    second = generate_data(make_config(tmp_path / "b"))
    for split in ("valid", "train"):
        np.testing.assert_array_equal(first[split].inputs, second[split].inputs)
        np.testing.assert_array_equal(first[split].targets, second[split].targets)


def test_splits_use_independent_streams(tmp_path):
    results = generate_data(make_config(tmp_path, train_data_count=10))
    assert not np.array_equal(results["valid"].inputs, results["train"].inputs)


def test_indivisible_counts_rejected_up_front(tmp_path):
    with pytest.raises(ValueError):
        generate_data(make_config(tmp_path, train_data_count=12))
    assert not (tmp_path / "samples").exists()


def test_failed_train_split_keeps_valid(tmp_path, monkeypatch):
    real_generate = assembler.DataGenerator.generate_tensors
    calls = []

    def fail_second(self, data_count, rng=None):
        calls.append(data_count)
        if len(calls) == 2:
            raise RuntimeError("solver failure")
        return real_generate(self, data_count, rng)

    monkeypatch.setattr(assembler.DataGenerator, "generate_tensors", fail_second)

    with pytest.raises(RuntimeError):
        generate_data(make_config(tmp_path))

    for path in split_paths(tmp_path / "samples" / "valid").values():
        assert path.exists()
    for path in split_paths(tmp_path / "samples" / "train").values():
        assert not path.exists()


def test_resolving_backend(tmp_path):
    config = make_config(tmp_path, train_data_count=2, valid_data_count=2,
                         gen_batch_size=2, value_backend="resolving")
    config.resolving.cfr_iters = 20
    config.resolving.cfr_skip_iters = 5

    results = generate_data(config)
    assert results["train"].targets.shape == (2, 72)
