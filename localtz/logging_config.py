from __future__ import annotations

import logging
from typing import Optional

logger = logging.getLogger("localtz")


def configure_logging(level: Optional[str] = None) -> None:
    """Configure logging for command-line use."""
    if logging.getLogger().handlers:
        return

    logging.basicConfig(
        level=(level or "WARNING").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("watchdog").setLevel(logging.WARNING)
