"""Generates neural net training data from random situations.

Each batch shares one random board. For every example the generator samples
a range per player and a pot feature, asks the value backend for per-hand
values, and writes the bucketed ranges, values and feasibility mask into
three tensors:

- inputs  [N, bucket_count * player_count + 1]: player 1 bucket range,
  player 2 bucket range, pot feature in the last column
- targets [N, bucket_count * player_count]: player 1 then player 2 bucket values
- mask    [N, bucket_count]: 1 for buckets the example's board can produce
"""

from typing import Optional

import numpy as np

from cfvgen.abstraction.bucket_conversion import BucketConversion
from cfvgen.datagen.storage import save_dataset
from cfvgen.sampling.cards import CardGenerator
from cfvgen.sampling.ranges import RangeGenerator
from cfvgen.types import DataGenConfig, DatasetTensors, GameConfig, Player
from cfvgen.utils.logging import get_logger
from cfvgen.utils.rng import RNG
from cfvgen.values.backends import ValueBackend

logger = get_logger("datagen.assembler")


class DataGenerator:
    """Builds dataset splits with one value backend."""

    def __init__(
        self,
        game_config: GameConfig,
        datagen_config: DataGenConfig,
        backend: ValueBackend
    ):
        self.game_config = game_config
        self.datagen_config = datagen_config
        self.backend = backend
        self.bucket_conversion = BucketConversion(game_config)
        self.bucket_count = self.bucket_conversion.bucket_count

    @property
    def input_size(self) -> int:
        return self.bucket_count * self.game_config.player_count + 1

    @property
    def target_size(self) -> int:
        return self.bucket_count * self.game_config.player_count

    def _player_columns(self, player: Player) -> slice:
        return slice(player.value * self.bucket_count, (player.value + 1) * self.bucket_count)

    def generate_tensors(self, data_count: int, rng: Optional[RNG] = None) -> DatasetTensors:
        """Sample and label `data_count` examples.

        Raises:
            ValueError: if data_count is not a multiple of the batch size;
                checked before anything is allocated
        """
        batch_size = self.datagen_config.gen_batch_size
        if batch_size <= 0:
            raise ValueError(f"Batch size must be positive, got {batch_size}")
        if data_count < 0 or data_count % batch_size != 0:
            raise ValueError(
                f"Data count {data_count} has to be divisible by the batch size {batch_size}"
            )
        batch_count = data_count // batch_size
        rng = rng or RNG(self.datagen_config.seed)

        card_count = self.game_config.card_count
        player_count = self.game_config.player_count

        inputs = np.zeros((data_count, self.input_size))
        targets = np.zeros((data_count, self.target_size))
        mask = np.zeros((data_count, self.bucket_count))

        card_generator = CardGenerator(self.game_config, rng)
        range_generator = RangeGenerator(self.game_config, rng)

        for batch in range(batch_count):
            rows = slice(batch * batch_size, (batch + 1) * batch_size)

            board = card_generator.generate_cards(self.game_config.board_card_count)
            range_generator.set_board(board)
            board_buckets = self.bucket_conversion.set_board(board)
            self.backend.set_board(board)

            ranges = np.zeros((player_count, batch_size, card_count))
            for player in Player:
                ranges[player.value] = range_generator.generate_range(batch_size, player)

            pot_sample = self.backend.sample_pots(rng, batch_size)
            inputs[rows, -1] = pot_sample.features

            for player in Player:
                self.bucket_conversion.card_range_to_bucket_range(
                    board_buckets, ranges[player.value], inputs[rows, self._player_columns(player)]
                )

            values = self.backend.compute_values(ranges, pot_sample)

            for player in Player:
                self.bucket_conversion.card_range_to_bucket_range(
                    board_buckets, values[player.value], targets[rows, self._player_columns(player)]
                )

            bucket_mask = self.bucket_conversion.get_possible_bucket_mask(board_buckets)
            mask[rows, :] = bucket_mask

            logger.debug(f"Batch {batch + 1}/{batch_count}: board {board.tolist()}")

        return DatasetTensors(inputs=inputs, targets=targets, mask=mask)

    def generate_data_file(self, data_count: int, file_name: str, rng: Optional[RNG] = None):
        """Generate `data_count` examples and save them under `file_name`.

        Files are only written once every batch has been labeled.
        """
        logger.info(
            f"Generating {data_count} examples with {self.backend.name} "
            f"({self.bucket_count} buckets, batch size {self.datagen_config.gen_batch_size})"
        )
        tensors = self.generate_tensors(data_count, rng)
        save_dataset(file_name, tensors)
        return tensors
