import json
import logging
import os
import sys
import time

_EXTRA_FIELDS = ("cache", "key", "namespace", "endpoint", "status", "url")


class JsonFormatter(logging.Formatter):
    """Single-line JSON log formatter.

    { "t": 1700000000000, "lvl": "INFO", "name": "mod", "msg": "text", ... }
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "t": int(time.time() * 1000),
            "lvl": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                payload[field] = getattr(record, field)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once with JSON formatting.

    Level precedence: explicit ``level`` argument, then ``LOG_LEVEL``,
    then INFO.
    """
    root = logging.getLogger()
    if getattr(root, "_ogp_configured", False):
        return

    lvl_name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    lvl = logging.getLevelName(lvl_name)
    if not isinstance(lvl, int):
        lvl = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(lvl)
    root._ogp_configured = True  # type: ignore[attr-defined]
