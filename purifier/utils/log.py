from __future__ import annotations
import json, logging, sys
from typing import Any, Dict

_ROOT = "purifier"

_RESERVED = (
    "name", "msg", "args", "levelname", "levelno",
    "pathname", "filename", "module", "exc_info",
    "exc_text", "stack_info", "lineno", "funcName",
    "created", "msecs", "relativeCreated", "thread",
    "threadName", "processName", "process", "taskName",
    "message", "asctime",
)

# per-field decision context the engines attach through ``extra``
_DECISION_KEYS = ("field", "reason")

def _component(name: str) -> str:
    """'purifier.sanitizer' -> 'sanitizer'; foreign logger names are kept."""
    head, _, rest = name.partition(".")
    return rest if head == _ROOT and rest else name

def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    out = {k: v for k, v in record.__dict__.items() if k not in _RESERVED}
    # list indices and map keys report the same way
    if "field" in out:
        out["field"] = str(out["field"])
    return out

class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "component": _component(record.name),
            "message": record.getMessage(),
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        payload.update(_extras(record))
        return json.dumps(payload, separators=(",", ":"), default=str)

class PlainFormatter(logging.Formatter):
    """Human-readable lines; field decisions are appended as ``[field=... reason=...]``."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _extras(record)
        context = " ".join(f"{k}={extras[k]}" for k in _DECISION_KEYS if k in extras)
        return f"{line} [{context}]" if context else line

def get_logger(name: str = _ROOT, level: str = "WARNING", structured_json: bool = True) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if structured_json else PlainFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger

def logger_for(name: str, cfg: Any) -> logging.Logger:
    """Logger configured from a ``PurifierCfg``'s ``[logging]`` table."""
    return get_logger(name, cfg.logging.level, cfg.logging.structured_json)
