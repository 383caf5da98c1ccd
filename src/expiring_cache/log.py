from __future__ import annotations

import logging

from expiring_cache import config


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    level = logging.getLevelName(config.CACHE_LOG_LEVEL)
    # getLevelName returns a string for unknown names
    logger.setLevel(level if isinstance(level, int) else logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger
