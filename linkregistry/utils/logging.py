"""JSON logging for registry events

Every linkregistry module logs through `logging.getLogger(__name__)` and
passes structured context with `extra=`. The registry attaches an `event`
name (see `linkregistry.constants`) and the shortcode involved; rejected
requests also carry the exception's `errorCode`, and sweeps carry the
expired `count` and the `newlyExpired` shortcodes.

Call `initialize_logging()` once at process start-up; the level comes from
`LOG_LEVEL` unless given explicitly. A rejected creation request renders as:
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "WARNING",
    "logger": "linkregistry.registry",
    "message": "Short URL creation failed.",
    "reason": "Invalid URL 'example.com': missing scheme.",
    "errorCode": "validation:invalid_url",
    "event": "SHORT_URL_REJECTED"
}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from linkregistry.constants import ENV


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras"""

    STANDARD_ATTRS = frozenset(
        {
            'args',
            'asctime',
            'created',
            'exc_info',
            'exc_text',
            'filename',
            'funcName',
            'levelname',
            'levelno',
            'lineno',
            'module',
            'msecs',
            'msg',
            'name',
            'pathname',
            'process',
            'processName',
            'relativeCreated',
            'stack_info',
            'thread',
            'threadName',
            'taskName',
        }
    )

    def format(self, record: logging.LogRecord) -> str:
        # fmt: off
        timestamp = datetime.fromtimestamp(record.created, tz=UTC) \
                            .isoformat(timespec="milliseconds") \
                            .replace("+00:00", "Z")
        # fmt: on

        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        # Attach `extra` fields
        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS:
                log[key] = value

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        # datetimes and other extras fall back to their string form
        return json.dumps(log, default=str)


def initialize_logging(level: str | None = None) -> None:
    """Route every logger to stdout in JSON format

    Args:
        level (str | None): log level; defaults to `LOG_LEVEL` or 'INFO'.
    """
    log_level = (level or os.getenv(ENV.LOG_LEVEL, 'INFO')).upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
