"""Logging configuration helpers."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_LOG_FORMAT = "%(levelname)s: %(name)s: [batch=%(batch_id)s] %(message)s"

_current_batch: ContextVar[int | None] = ContextVar("current_batch", default=None)


class BatchContextFilter(logging.Filter):
    """Stamp each record with the id of the batch being generated."""

    def filter(self, record: logging.LogRecord) -> bool:
        batch_id = _current_batch.get()
        record.batch_id = "-" if batch_id is None else batch_id
        return True


@contextmanager
def batch_log_context(batch_id: int) -> Iterator[None]:
    """Tag log records emitted inside the block with a batch id."""
    token = _current_batch.set(batch_id)
    try:
        yield
    finally:
        _current_batch.reset(token)


def configure_logging() -> None:
    """Configure application logging with a single batch-aware stream handler."""
    logger = logging.getLogger("alter_ego")
    logger.setLevel(logging.INFO)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.addFilter(BatchContextFilter())
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
