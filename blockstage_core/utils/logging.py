"""
BlockStage Logging
Uses short logger names by default (e.g., blockstage_core.engine.collision).

Usage:
    from blockstage_core.utils import get_logger
    logger = get_logger('engine.collision')

    logger.info("Collision: swapping steps")

    After calling setup_logging() once at application startup, every
    blockstage_core logger uses the configured formatting and handlers.
"""

from blockstage_core.config import GLOBAL_LOGGING_LEVEL_THRESHOLD, LOGGING_LEVEL_TERMINAL, LOGGING_LEVEL_FILE

import logging
import sys
from pathlib import Path
from typing import Optional

class BlockStageFormatter(logging.Formatter):
    def format(self, record):
        # blockstage_core.engine.collision.extra -> blockstage_core.engine.collision
        if record.name.startswith('blockstage_core.'):
            parts = record.name.split('.')
            if len(parts) > 3:
                record.name = '.'.join(parts[:3])
        return super().format(record)

def setup_logging(output_dir: Optional[Path] = None) -> logging.Logger:
    """
    Setup unified logging for BlockStage - everything goes to stage.log.

    Args:
        output_dir: Directory for the log file. If None, only the terminal handler is installed.

    Returns:
        Main logger instance
    """
    formatter = BlockStageFormatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logger = logging.getLogger('blockstage_core')
    logger.setLevel(GLOBAL_LOGGING_LEVEL_THRESHOLD)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    if output_dir is not None:
        log_file = Path(output_dir) / 'stage.log'
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(LOGGING_LEVEL_FILE)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(LOGGING_LEVEL_TERMINAL)
    console_handler.setFormatter(BlockStageFormatter('%(message)s'))
    logger.addHandler(console_handler)

    # Stop propagation to root to avoid duplicate terminal logs
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the blockstage_core namespace.
    """
    full_name = f"blockstage_core.{name}" if not name.startswith('blockstage_core') else name
    return logging.getLogger(full_name)
