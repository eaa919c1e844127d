"""
Runtime configuration for bitspacket.

- Console logging, with the level taken from LOG_LEVEL or the CLI.
- Decoder limits (maximum packet nesting depth) from BITS_MAX_DEPTH or the CLI.
"""

from __future__ import annotations

import logging
import os

import coloredlogs
from pydantic import BaseModel, Field, ValidationError

module_logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s[%(process)d] %(levelname)s %(message)s"
DEFAULT_MAX_DEPTH = 128
# pydantic stops (de)serializing self-referencing models past 255 levels
MAX_DEPTH_CEILING = 200


def configure_logger(level: str | None = None) -> logging.Logger:
    """
    Install a coloredlogs console handler on the root logger.

    ``level`` wins over the LOG_LEVEL environment variable; an unknown level
    name falls back to INFO.
    """
    root_logger = logging.getLogger()
    log_level_str = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    log_level_int = getattr(logging, log_level_str, None)
    if not isinstance(log_level_int, int):
        module_logger.warning("Invalid log level '%s'. Defaulting to INFO.", log_level_str)
        log_level_int = logging.INFO

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    coloredlogs.install(
        level=log_level_int,
        fmt=LOG_FORMAT,
        logger=root_logger,
        reconfigure=True,
    )
    return root_logger


class DecodeLimits(BaseModel):
    # Nesting depth of the root packet is 1
    max_depth: int = Field(DEFAULT_MAX_DEPTH, ge=1, le=MAX_DEPTH_CEILING)


def get_decode_limits(max_depth: int | None = None) -> DecodeLimits:
    """
    Build the decoder limits. An explicit ``max_depth`` wins over
    BITS_MAX_DEPTH; a malformed environment value is ignored with a warning.
    """
    if max_depth is not None:
        return DecodeLimits(max_depth=max_depth)

    raw = os.getenv("BITS_MAX_DEPTH")
    if raw is None:
        return DecodeLimits()
    try:
        return DecodeLimits(max_depth=raw)
    except ValidationError:
        module_logger.warning(
            "Invalid BITS_MAX_DEPTH '%s'. Defaulting to %d.", raw, DEFAULT_MAX_DEPTH
        )
        return DecodeLimits()
