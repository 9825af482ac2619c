# buildkit/logging_utils.py
from __future__ import annotations
import datetime
import json
import logging
import sys
from typing import Optional, TextIO

_HANDLER_MARK = "_buildkit_handler"


class JsonFormatter(logging.Formatter):
    """Compact single-line JSON formatter for logs.

    Emits objects with keys: ts (ISO8601 UTC), level, module, msg, meta.
    meta is taken from record.__dict__.get('meta') and enriched with fields
    that may be attached to the LogRecord via `extra` (line, returncode, ...).
    """

    _KNOWN_FIELDS = (
        "line",
        "returncode",
        "elapsed",
        "path",
        "op",
        "shell",
    )

    def _safe(self, v):
        try:
            json.dumps(v)
            return v
        except (TypeError, ValueError):
            return str(v)

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.datetime.now(datetime.timezone.utc).isoformat().replace("+00:00", "Z")
        meta = {}
        raw_meta = record.__dict__.get("meta")
        if isinstance(raw_meta, dict):
            meta.update({str(k): self._safe(v) for k, v in raw_meta.items()})

        for k in self._KNOWN_FIELDS:
            if record.__dict__.get(k) is not None:
                meta[k] = self._safe(record.__dict__[k])

        if record.exc_info:
            meta["exc"] = self.formatException(record.exc_info)

        payload = {
            "ts": ts,
            "level": record.levelname.lower(),
            "module": record.name,
            "msg": record.getMessage(),
            "meta": meta,
        }
        return json.dumps(payload, separators=(",", ":"))


def configure_logging(level: str = "WARNING", json_logs: bool = False, stream: Optional[TextIO] = None) -> logging.Logger:
    """Attach a single stream handler to the `buildkit` logger.

    Safe to call multiple times: a handler installed by an earlier call is replaced.
    """
    root = logging.getLogger("buildkit")
    for h in list(root.handlers):
        if getattr(h, _HANDLER_MARK, False):
            root.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stderr)
    setattr(handler, _HANDLER_MARK, True)
    if json_logs:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    root.addHandler(handler)
    root.setLevel(getattr(logging, str(level).upper(), logging.WARNING))
    return root


__all__ = ["JsonFormatter", "configure_logging"]
