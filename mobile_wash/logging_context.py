"""Per-request correlation ids for booking core log output.

One quote or booking attempt touches zone resolution, pricing and the
availability check. Setting a request id once lets all of those lines be
read together:

    set_request_id("REQ-abc123")
    logger.info("Quoting price")
    # 2024-01-15 10:00:00 [REQ-abc123] [mobile_wash.tools.pricing] INFO: Quoting price

``load_config`` installs ``request_id_handler`` on the root logger, so
records from any logger (ours or a library's) carry the id.
"""

import logging
from contextvars import ContextVar
from typing import IO, Optional

NO_REQUEST_ID = "-"
LOG_FORMAT = "%(asctime)s [%(request_id)s] [%(name)s] %(levelname)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

_request_id: ContextVar[str] = ContextVar("request_id", default=NO_REQUEST_ID)


def set_request_id(request_id: str) -> None:
    _request_id.set(request_id)


def get_request_id() -> str:
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """Stamps the current request id on a record as ``record.request_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def request_id_handler(stream: Optional[IO[str]] = None) -> logging.Handler:
    """Stream handler that stamps and renders the request id of every record."""
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    return handler


def get_request_logger(name: str) -> logging.Logger:
    """Module logger that also stamps ``request_id`` on its records.

    Useful when records are sent to handlers other than
    ``request_id_handler``, e.g. a JSON formatter reading the attribute.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIdFilter) for f in logger.filters):
        logger.addFilter(RequestIdFilter())
    return logger
