#!/usr/bin/env python3
"""
logging_setup.py
================
Routes simulation log records to the console, a rotating run log
(``intersection.log``, 1 MB, 2 backups) and a separate rotating trace file
for the chatty ``fleet`` / ``vehicle`` loggers.

Call :func:`setup_logging` once from the runner; library code only ever
calls ``logging.getLogger(name)``.
"""

import logging
from logging.handlers import RotatingFileHandler
from typing import Iterable

from config import FLEET_DEBUG_LOG_FILE, LOG_FILE

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
TRACE_LOGGERS = ("fleet", "vehicle")


def setup_logging(
    level: int = logging.INFO,
    log_file: str = LOG_FILE,
    trace_file: str = FLEET_DEBUG_LOG_FILE,
    trace_loggers: Iterable[str] = TRACE_LOGGERS,
) -> None:
    """Install the console, run-log and trace handlers.

    Parameters
    ----------
    level : int
        Threshold for the console and the run log.
    log_file : str
        Path of the rotating run log.
    trace_file : str
        Path of the rotating DEBUG trace shared by *trace_loggers*.
    trace_loggers : iterable of str
        Loggers whose spawn / transition records always reach *trace_file*,
        whatever *level* is.
    """
    fmt = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    run_log = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=2)
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    for handler in (console, run_log):
        # trace loggers run at DEBUG and propagate; keep their noise out of here
        handler.setLevel(level)
        handler.setFormatter(fmt)
        root.addHandler(handler)

    trace = RotatingFileHandler(trace_file, maxBytes=5_000_000, backupCount=2)
    trace.setLevel(logging.DEBUG)
    trace.setFormatter(fmt)
    for name in trace_loggers:
        lg = logging.getLogger(name)
        lg.setLevel(logging.DEBUG)
        for old in list(lg.handlers):
            lg.removeHandler(old)
            old.close()
        lg.addHandler(trace)
