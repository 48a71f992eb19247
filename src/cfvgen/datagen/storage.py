"""Persistence of generated dataset splits.

A split is three float32 torch tensors saved side by side:
`<file_name>.inputs`, `<file_name>.targets` and `<file_name>.mask`.
"""

from pathlib import Path
from typing import Dict, Union

import numpy as np

from cfvgen.types import DatasetTensors
from cfvgen.utils.logging import get_logger
from cfvgen.utils.serialization import save_tensor, load_tensor

logger = get_logger("datagen.storage")

TENSOR_NAMES = ("inputs", "targets", "mask")


def split_paths(file_name: Union[str, Path]) -> Dict[str, Path]:
    """Paths of the three tensors of a split."""
    return {name: Path(f"{file_name}.{name}") for name in TENSOR_NAMES}


def save_dataset(file_name: Union[str, Path], tensors: DatasetTensors):
    """Write the three tensors of a split, each atomically."""
    for name, path in split_paths(file_name).items():
        save_tensor(getattr(tensors, name), path)
    logger.info(f"Saved {tensors.example_count} examples to {file_name}.{{inputs,targets,mask}}")


def load_dataset(file_name: Union[str, Path]) -> DatasetTensors:
    """Read a split written by save_dataset."""
    paths = split_paths(file_name)
    missing = [str(p) for p in paths.values() if not p.exists()]
    if missing:
        raise FileNotFoundError(f"Missing dataset files: {', '.join(missing)}")
    return DatasetTensors(**{name: load_tensor(path) for name, path in paths.items()})


def describe_dataset(tensors: DatasetTensors, bucket_count: int, player_count: int) -> Dict:
    """Check the column layout of a split and summarize it.

    Raises:
        ValueError: if shapes do not match the bucket layout
    """
    example_count = tensors.example_count
    expected = {
        "inputs": (example_count, bucket_count * player_count + 1),
        "targets": (example_count, bucket_count * player_count),
        "mask": (example_count, bucket_count),
    }
    for name, shape in expected.items():
        actual = getattr(tensors, name).shape
        if actual != shape:
            raise ValueError(f"{name} has shape {actual}, expected {shape}")

    pot_features = tensors.inputs[:, -1]
    feasible = tensors.mask.sum(axis=1)
    return {
        "examples": example_count,
        "bucket_count": bucket_count,
        "player_count": player_count,
        "pot_feature_min": float(pot_features.min()) if example_count else None,
        "pot_feature_max": float(pot_features.max()) if example_count else None,
        "feasible_buckets_per_example": sorted({int(n) for n in np.unique(feasible)}),
    }
