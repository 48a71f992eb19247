"""Logging utilities."""

import logging
import sys
import multiprocessing as mp
from pathlib import Path
from typing import Optional

_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _is_main_process() -> bool:
    """True unless running inside a multiprocessing worker."""
    return mp.current_process().name == 'MainProcess'


def setup_logger(
    name: str = "cfvgen",
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    use_rich: bool = True
) -> logging.Logger:
    """Setup logger with optional file output and rich formatting.

    Rich output is only used in the main process; spawned resolving workers
    get a plain stream handler.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()

    use_rich = use_rich and _is_main_process()

    if use_rich:
        from rich.logging import RichHandler
        console_handler = RichHandler(
            rich_tracebacks=True,
            show_time=True,
            show_path=False
        )
    else:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(_FORMAT))

    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """Get a `cfvgen.<name>` logger.

    Child loggers carry no handlers of their own and propagate to the
    `cfvgen` root logger, which is set up on first use.
    """
    root = logging.getLogger("cfvgen")
    if not root.handlers:
        setup_logger("cfvgen", use_rich=_is_main_process())

    if name:
        return logging.getLogger(f"cfvgen.{name}")
    return root
