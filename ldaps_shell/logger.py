# Copyright 2022-2025 TII (SSRC) and the Ghaf contributors
# SPDX-License-Identifier: Apache-2.0
import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("ldaps_shell")

_handler = None


def setup_logger(level="warning"):
    """
    Sends package logs to stderr so that search output on stdout stays clean.
    Calling it again only changes the level.
    """
    global _handler

    log_level = getattr(logging, str(level).strip().upper(), None)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_handler)
        logger.propagate = False

    logger.setLevel(log_level)
    # ldap3 logs through the standard logging tree too; keep it quiet
    logging.getLogger("ldap3").setLevel(max(log_level, logging.WARNING))
    return logger
