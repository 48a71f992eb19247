"""CLI: Generate CFV training and validation data."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from cfvgen.config import Config
from cfvgen.datagen.driver import generate_data
from cfvgen.types import VALUE_BACKENDS
from cfvgen.utils.logging import get_logger, setup_logger

logger = get_logger("cli.generate_data")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate CFV network training data")
    parser.add_argument("--config", type=Path,
                       help="YAML config file (game, datagen, resolving sections)")
    parser.add_argument("--train-count", type=int,
                       help="Number of training examples")
    parser.add_argument("--valid-count", type=int,
                       help="Number of validation examples")
    parser.add_argument("--batch-size", type=int,
                       help="Examples per sampled board (must divide both counts)")
    parser.add_argument("--data-path", type=str,
                       help="Output path prefix; files are <prefix>{valid,train}.{inputs,targets,mask}")
    parser.add_argument("--backend", choices=VALUE_BACKENDS,
                       help="Value backend used to label examples")
    parser.add_argument("--seed", type=int,
                       help="Random seed")
    parser.add_argument("--num-workers", type=int,
                       help="Worker processes for resolving")
    parser.add_argument("--cfr-iters", type=int,
                       help="CFR iterations per resolve")
    parser.add_argument("--cfr-skip-iters", type=int,
                       help="Warm-up CFR iterations excluded from root values")
    parser.add_argument("--save-config", type=Path,
                       help="Write the effective config to this YAML file")
    parser.add_argument("--log-file", type=Path,
                       help="Also log to this file")
    parser.add_argument("--verbose", "-v", action="store_true",
                       help="Debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    """Load the config file (if any) and apply command line overrides."""
    config = Config.from_yaml(args.config) if args.config else Config()

    overrides = {
        "train_data_count": args.train_count,
        "valid_data_count": args.valid_count,
        "gen_batch_size": args.batch_size,
        "data_path": args.data_path,
        "value_backend": args.backend,
        "seed": args.seed,
        "num_workers": args.num_workers,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(config.datagen, key, value)

    if args.cfr_iters is not None:
        config.resolving.cfr_iters = args.cfr_iters
    if args.cfr_skip_iters is not None:
        config.resolving.cfr_skip_iters = args.cfr_skip_iters

    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(
        "cfvgen",
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=args.log_file
    )

    try:
        config = config_from_args(args)
        config.validate()
    except (OSError, TypeError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    if args.save_config:
        config.save_yaml(args.save_config)
        logger.info(f"Saved config to {args.save_config}")

    datagen = config.datagen
    logger.info(
        f"Backend: {datagen.value_backend}, "
        f"valid/train: {datagen.valid_data_count}/{datagen.train_data_count}, "
        f"batch size: {datagen.gen_batch_size}, output: {datagen.data_path}"
    )

    try:
        generate_data(config)
    except (OSError, RuntimeError, ValueError, MemoryError):
        logger.exception("Data generation failed")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
