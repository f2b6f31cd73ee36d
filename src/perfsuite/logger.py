# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""Package logger shared by module-level code."""

import logging
import os

logger = logging.getLogger("perfsuite")


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for command-line use.

    Args:
        level (str | None): Logging level name ("DEBUG", "INFO", ...). If None, uses the
            `PERFSUITE_LOG_LEVEL` environment variable or defaults to "WARNING".
    """
    level = level or os.getenv("PERFSUITE_LOG_LEVEL", "WARNING")
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
