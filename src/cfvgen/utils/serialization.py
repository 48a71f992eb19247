"""Serialization utilities."""

import os
from pathlib import Path

import numpy as np
import torch


def _tmp_path(path: Path) -> Path:
    return path.parent / f"{path.name}.tmp"


def save_tensor(array: np.ndarray, path: Path):
    """Save an array as a float32 torch tensor with atomic write.

    Args:
        array: Data to save
        path: Target file path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = _tmp_path(path)
    tensor = torch.from_numpy(np.ascontiguousarray(array, dtype=np.float32))

    try:
        with open(tmp_path, 'wb') as f:
            torch.save(tensor, f)
        os.replace(tmp_path, path)
    except Exception:
        if tmp_path.exists():
            tmp_path.unlink()
        raise


def load_tensor(path: Path) -> np.ndarray:
    """Load a tensor saved by save_tensor as a numpy array."""
    with open(path, 'rb') as f:
        tensor = torch.load(f, weights_only=True)
    return tensor.numpy()
