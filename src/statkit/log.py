# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Logging setup for processes embedding StatKit."""

from __future__ import annotations

import logging
from typing import Optional

from statkit.config import MonitoringConfig

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
DATE_FORMAT = "%H:%M:%S"


def configure_logging(monitoring: Optional[MonitoringConfig] = None) -> None:
    """Configure root logging and the ``statkit`` logger level.

    Args:
        monitoring: Monitoring configuration; defaults to INFO.
    """
    monitoring = monitoring or MonitoringConfig()
    level = logging.getLevelName(monitoring.log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {monitoring.log_level!r}")

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt=DATE_FORMAT)
    logging.getLogger("statkit").setLevel(level)
