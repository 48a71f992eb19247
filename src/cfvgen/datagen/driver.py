"""Generates the validation and training splits."""

from dataclasses import replace
from typing import Dict, Optional

from cfvgen.config import Config
from cfvgen.datagen.assembler import DataGenerator
from cfvgen.types import DatasetTensors
from cfvgen.utils.logging import get_logger
from cfvgen.utils.rng import spawn_rngs
from cfvgen.utils.timers import Timer
from cfvgen.values.backends import create_value_backend

logger = get_logger("datagen.driver")

SPLITS = ("valid", "train")


def generate_data(
    config: Config,
    train_data_count: Optional[int] = None,
    valid_data_count: Optional[int] = None
) -> Dict[str, DatasetTensors]:
    """Generate `<data_path>valid` then `<data_path>train`.

    Counts default to the configured ones.

    Each split draws from its own random stream spawned from the configured
    seed. The validation files stay on disk if the training split fails.
    """
    datagen = config.datagen
    if train_data_count is not None:
        datagen = replace(datagen, train_data_count=train_data_count)
    if valid_data_count is not None:
        datagen = replace(datagen, valid_data_count=valid_data_count)
    config.game.validate()
    config.resolving.validate()
    datagen.validate()

    counts = {"valid": datagen.valid_data_count, "train": datagen.train_data_count}
    rngs = dict(zip(SPLITS, spawn_rngs(datagen.seed, len(SPLITS))))

    results = {}
    with create_value_backend(
        datagen.value_backend,
        config.game,
        config.resolving,
        num_workers=datagen.num_workers
    ) as backend:
        generator = DataGenerator(config.game, datagen, backend)
        for split in SPLITS:
            logger.info(f"Generating {split} data ...")
            timer = Timer(split)
            with timer.measure():
                results[split] = generator.generate_data_file(
                    counts[split], f"{datagen.data_path}{split}", rngs[split]
                )
            logger.info(
                f"{split} generation time: {timer.elapsed:.2f}s "
                f"({timer.rate(counts[split]):.1f} examples/s)"
            )

    logger.info("Done")
    return results
