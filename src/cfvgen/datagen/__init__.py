"""Dataset assembly, splits and persistence."""

from cfvgen.datagen.assembler import DataGenerator
from cfvgen.datagen.driver import generate_data
from cfvgen.datagen.storage import save_dataset, load_dataset, describe_dataset

__all__ = [
    'DataGenerator',
    'generate_data',
    'save_dataset',
    'load_dataset',
    'describe_dataset',
]
