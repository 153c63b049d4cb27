from __future__ import annotations

import logging
import re
from logging.config import dictConfig


DATA_URI_RE = re.compile(r"(data:[\w/+.-]+;base64,)[A-Za-z0-9+/=]{16,}")
API_KEY_RE = re.compile(r"AIza[0-9A-Za-z_-]{20,}")


class _PayloadRedactionFilter(logging.Filter):
    """Keeps API keys and inline image payloads out of the logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = redact(record.msg)
        if record.args and isinstance(record.args, tuple):
            record.args = tuple(redact(arg) if isinstance(arg, str) else arg for arg in record.args)
        return True


def redact(value: str) -> str:
    value = DATA_URI_RE.sub(r"\1[redacted-base64]", value)
    value = API_KEY_RE.sub("[redacted-api-key]", value)
    return value


def setup_logging(level: str = "INFO") -> None:
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "redact_payloads": {
                    "()": _PayloadRedactionFilter,
                }
            },
            "formatters": {
                "default": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "filters": ["redact_payloads"],
                }
            },
            "root": {
                "handlers": ["console"],
                "level": level,
            },
        }
    )


logger = logging.getLogger("medicoweb")
