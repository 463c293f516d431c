"""Loguru setup for the fixedstep package.

The package logs through loguru but stays silent until configure_logging()
is called, so applications embedding a loop decide where records go.
"""

import sys
from typing import Any, Optional

from loguru import logger

from fixedstep.config import LogConfig

NAMESPACE = "fixedstep"

logger.disable(NAMESPACE)

_handler_ids: list[int] = []


def configure_logging(config=None, sink: Optional[Any] = None) -> int:
    """Route fixedstep log records to a sink.

    With no sink, records go to config.file (rotated and retained as
    configured) or to stderr. Returns the loguru handler id.
    """
    cfg = LogConfig.resolve(config)
    options = dict(level=cfg.level, format=cfg.format, filter=NAMESPACE,
                   backtrace=True, diagnose=False)

    if sink is None and cfg.file:
        sink = cfg.file
        options.update(rotation=cfg.rotation, retention=cfg.retention)
    elif sink is None:
        sink = sys.stderr

    handler_id = logger.add(sink, **options)
    _handler_ids.append(handler_id)
    logger.enable(NAMESPACE)
    return handler_id


def reset_logging(handler_id: Optional[int] = None):
    """Remove handlers added by configure_logging.

    The namespace is disabled again once no such handler remains.
    """
    targets = [handler_id] if handler_id is not None else list(_handler_ids)
    for hid in targets:
        if hid in _handler_ids:
            _handler_ids.remove(hid)
            logger.remove(hid)
    if not _handler_ids:
        logger.disable(NAMESPACE)
