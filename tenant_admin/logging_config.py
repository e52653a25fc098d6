# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Logging setup."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once for the application process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("tenant_admin").setLevel(level)
    # Keep SQL echo quiet unless explicitly requested
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
