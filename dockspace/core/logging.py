import sys
import os
from typing import Optional

from loguru import logger

from .config import GeneralSettings


def setup_logging(settings: Optional[GeneralSettings] = None):
    """
    Configures Loguru logger from the general settings section.

    Console output always; a rotating file sink only when log_dir is set.
    """
    settings = settings or GeneralSettings()
    logger.remove()

    level = "DEBUG" if settings.debug_mode else "INFO"
    logger.add(sys.stderr, level=level, format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>")

    if settings.log_dir:
        if not os.path.exists(settings.log_dir):
            os.makedirs(settings.log_dir)
        logger.add(os.path.join(settings.log_dir, "dockspace_{time}.log"), rotation="10 MB", retention="1 week", level="DEBUG")

    logger.info(f"Logging initialized (level {level}).")
