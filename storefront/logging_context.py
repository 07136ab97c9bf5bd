"""Per-request correlation ids for backend log lines.

The HTTP middleware opens a ``request_scope`` around every request, taking
the id from ``X-Request-Id`` or minting one. Records emitted anywhere
inside the scope (routes, the cart, booking and user stores, the KV
backend) are stamped with that id by a ``RequestIdFilter`` sitting on the
handler that renders them, so plain ``logging.getLogger(__name__)``
loggers need nothing extra.

Usage:
    handler = install_request_id_filter(logging.StreamHandler())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    with request_scope("req-abc123"):
        logger.info("Saving cart")  # "... [req-abc123] INFO: Saving cart"
"""

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

REQUEST_ID_HEADER = "X-Request-Id"
NO_REQUEST_ID = "-"
LOG_FORMAT = "%(asctime)s [%(name)s] [%(request_id)s] %(levelname)s: %(message)s"

_request_id: ContextVar[str] = ContextVar("request_id", default=NO_REQUEST_ID)


def new_request_id() -> str:
    return uuid.uuid4().hex[:16]


def get_request_id() -> str:
    return _request_id.get()


@contextmanager
def request_scope(request_id: Optional[str] = None) -> Iterator[str]:
    """Bind ``request_id`` (or a fresh one) for the duration of the block."""
    token = _request_id.set(request_id or new_request_id())
    try:
        yield _request_id.get()
    finally:
        _request_id.reset(token)


class RequestIdFilter(logging.Filter):
    """Stamps ``record.request_id`` unless the caller passed one via ``extra``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def install_request_id_filter(handler: logging.Handler) -> logging.Handler:
    """Attach a ``RequestIdFilter`` to ``handler`` once and return it.

    Handler-level filters see records from every logger that propagates to
    the handler, unlike logger-level filters which only see their own.
    """
    if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
        handler.addFilter(RequestIdFilter())
    return handler
