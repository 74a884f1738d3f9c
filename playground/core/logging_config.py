"""Logging setup: one stdout handler, JSON lines or plain text.

Records carry the request being served and the render in flight, taken
from ``request_id_var`` and ``render_id_var``. JSON output adds them as
fields; text output prefixes them as ``[req <id>] [render <n>]``.
"""

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="")
render_id_var: contextvars.ContextVar[int] = contextvars.ContextVar("render_id", default=0)

_TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(context)s%(message)s"


def _context_fields() -> dict:
    fields = {}
    request_id = request_id_var.get()
    if request_id:
        fields["request_id"] = request_id
    render_id = render_id_var.get()
    if render_id:
        fields["render_id"] = render_id
    return fields


class _JsonFormatter(logging.Formatter):
    """One JSON object per record, with ``extra`` fields at the top level."""

    _RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys())

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_context_fields())

        for key, value in record.__dict__.items():
            if key not in self._RESERVED and key not in payload:
                payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class _TextFormatter(logging.Formatter):
    """Human-readable lines for local development."""

    def format(self, record: logging.LogRecord) -> str:
        fields = _context_fields()
        prefix = ""
        if "request_id" in fields:
            prefix += f"[req {fields['request_id']}] "
        if "render_id" in fields:
            prefix += f"[render {fields['render_id']}] "
        record.context = prefix
        return super().format(record)


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Install the stdout handler on the root logger.

    Args:
        log_level: Standard level name, INFO when omitted.
        log_format: ``"json"`` (default) or ``"text"``.
    """
    level = (log_level or "INFO").upper()
    fmt = (log_format or "json").lower()

    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(_TextFormatter(fmt=_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # Keep third-party chatter out of the application log.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logging.getLogger(__name__).info("Logging configured", extra={"level": level, "format": fmt})
