import json
import logging
import random
from datetime import datetime, timezone

# Attributes every LogRecord carries; anything else came in through `extra`.
_RESERVED_ATTRS = frozenset(
    (
        "msg",
        "args",
        "levelname",
        "levelno",
        "name",
        "created",
        "msecs",
        "relativeCreated",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "exc_info",
        "exc_text",
        "stack_info",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
    )
)


class JsonFormatter(logging.Formatter):
    """JSON formatter for production logs.

    - Merges base fields (time, level, name, message) with any attributes
      provided via `extra` on the log record (e.g., event, order_id, total).
    - If the message is a dict, it is merged into the payload under its keys.
    - Decimal amounts are rendered as strings so money keeps its precision.
    - Dates are ISO-8601 UTC.
    """

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        base = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "name": record.name,
        }

        msg = record.getMessage() if not isinstance(record.msg, dict) else record.msg
        if isinstance(msg, dict):
            payload = {**base, **msg}
        else:
            payload = {**base, "message": msg}

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS:
                continue
            payload.setdefault(key, value)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class SamplingFilter(logging.Filter):
    """Probabilistically drop logs to reduce noise while keeping signal.

    - `rate`: float in [0.0, 1.0]; fraction of matching records to allow.
    - `levels`: iterable of level names to which sampling applies (e.g., ["INFO"]).
    - `allow_events`: event names that are never sampled. Matched against the
      record's `event` extra and its raw message.
    """

    def __init__(self, rate: float = 1.0, levels: list[str] | None = None, allow_events: list[str] | None = None):
        super().__init__()
        try:
            self.rate = float(rate)
        except (TypeError, ValueError):
            self.rate = 1.0
        self.levels = set(levels or ["INFO"])
        self.allow_events = set(allow_events or [])

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if record.levelname not in self.levels:
            return True
        event = getattr(record, "event", None) or getattr(record, "msg", "")
        if isinstance(event, str) and event in self.allow_events:
            return True
        if self.rate >= 1.0:
            return True
        if self.rate <= 0.0:
            return False
        return random.random() < self.rate
