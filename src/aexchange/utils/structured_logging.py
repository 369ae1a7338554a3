r"""Machine-readable log records for the request pipeline.

Every attempt of a run emits records carrying the ``url``, ``method``,
``attempt``, ``delay`` and ``status_code`` of the exchange as extra
fields. ``StructuredFormatter`` renders records as one JSON object per
line, which log aggregators can index directly.

Structured output is opt-in:

```python
import logging
from aexchange.utils.structured_logging import StructuredFormatter, correlation_id

handler = logging.StreamHandler()
handler.setFormatter(StructuredFormatter())
logger = logging.getLogger("aexchange")
logger.addHandler(handler)
logger.setLevel(logging.DEBUG)

with correlation_id("checkout-42"):
    dogs = await client.get("https://api.example.com/dogs", expecting=list[str]).run()
```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "correlation_id",
    "get_correlation_id",
    "log_structured",
    "set_correlation_id",
]

import contextvars
import json
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "aexchange_correlation_id", default=None
)

# Attributes of every LogRecord, anything else was passed through ``extra``
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


def get_correlation_id() -> str | None:
    """Return the correlation id of the current context, if any.

    Example:
        ```pycon
        >>> from aexchange.utils.structured_logging import get_correlation_id
        >>> get_correlation_id() is None
        True

        ```
    """
    return _correlation_id.get()


def set_correlation_id(value: str) -> None:
    """Attach ``value`` to every record logged from the current context.

    The id lives in a context variable, so concurrent tasks each keep
    their own.
    """
    _correlation_id.set(value)


def clear_correlation_id() -> None:
    _correlation_id.set(None)


@contextmanager
def correlation_id(value: str) -> Iterator[str]:
    """Set the correlation id for the duration of a ``with`` block.

    The previous id is restored on exit.

    Example:
        ```pycon
        >>> from aexchange.utils.structured_logging import correlation_id, get_correlation_id
        >>> with correlation_id("req-1"):
        ...     get_correlation_id()
        ...
        'req-1'
        >>> get_correlation_id() is None
        True

        ```
    """
    token = _correlation_id.set(value)
    try:
        yield value
    finally:
        _correlation_id.reset(token)


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    The output holds ``timestamp`` (ISO 8601, UTC), ``level``,
    ``logger``, ``message`` and the source location, the correlation id
    when one is set, the formatted exception when there is one, and every
    field passed through ``extra``. Values that are not JSON serializable
    are rendered with ``str``.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from aexchange.utils.structured_logging import StructuredFormatter
        >>> record = logging.LogRecord("aexchange", logging.INFO, __file__, 1, "sent", (), None)
        >>> record.status_code = 200
        >>> payload = json.loads(StructuredFormatter().format(record))
        >>> payload["message"], payload["status_code"]
        ('sent', 200)

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        current = get_correlation_id()
        if current is not None:
            payload["correlation_id"] = current
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        payload.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES
        )
        return json.dumps(payload, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if datefmt is not None:
            return created.strftime(datefmt)
        return created.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def log_structured(logger: logging.Logger, level: int, message: str, **fields: Any) -> None:
    """Log ``message`` with ``fields`` attached as structured data.

    Args:
        logger: The logger to use.
        level: The log level, e.g. ``logging.DEBUG``.
        message: The human readable message.
        **fields: Structured fields, rendered as top level keys by
            ``StructuredFormatter``.
    """
    if logger.isEnabledFor(level):
        logger.log(level, message, extra=fields)
