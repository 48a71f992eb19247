"""CLI: Summarize a generated dataset split."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from cfvgen.abstraction.bucketer import Bucketer
from cfvgen.config import Config
from cfvgen.datagen.storage import describe_dataset, load_dataset
from cfvgen.utils.logging import get_logger, setup_logger

logger = get_logger("cli.inspect_data")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Check and summarize a dataset split")
    parser.add_argument("file_name", type=str,
                       help="Split prefix, e.g. data/TrainSamples/train")
    parser.add_argument("--config", type=Path,
                       help="YAML config with the game section used for generation")
    args = parser.parse_args(argv)

    setup_logger("cfvgen")
    try:
        config = Config.from_yaml(args.config) if args.config else Config()
        config.game.validate()
    except (OSError, TypeError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 2
    bucket_count = Bucketer(config.game).get_bucket_count()

    try:
        tensors = load_dataset(args.file_name)
        summary = describe_dataset(tensors, bucket_count, config.game.player_count)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    for key, value in summary.items():
        logger.info(f"  {key}: {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
