"""
Structured Logging for the Cloudsmith provider.
Outputs JSON-formatted logs for machine readability and observability.
"""

import json
import sys
import logging
from datetime import datetime, timezone

# Configure provider logger
logger = logging.getLogger("CloudsmithProvider")
logger.setLevel(logging.INFO)
handler = logging.StreamHandler(sys.stdout)
logger.addHandler(handler)

class JsonFormatter(logging.Formatter):
    """JSON formatter that dynamically extracts all extra fields."""

    # Standard LogRecord attributes to exclude (these are Python logging internals)
    STANDARD_ATTRS = {
        'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
        'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname', 'process',
        'processName', 'relativeCreated', 'thread', 'threadName', 'exc_info',
        'exc_text', 'stack_info', 'asctime', 'taskName'
    }

    def format(self, record):
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
        }

        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS and not key.startswith('_'):
                try:
                    json.dumps(value)
                    log_record[key] = value
                except (TypeError, ValueError):
                    # Non-serializable (e.g., Exception objects, sets) - convert to string
                    log_record[key] = str(value)

        return json.dumps(log_record)

handler.setFormatter(JsonFormatter())

def get_logger(component: str = "provider"):
    return ResourceLogger(component)

def set_level(level: int) -> None:
    logger.setLevel(level)

class ResourceLogger:
    def __init__(self, component):
        self.component = component
        self.logger = logging.getLogger("CloudsmithProvider")

    def _extra(self, resource_id, fields):
        extra = {"component": self.component}
        if resource_id: extra["resource_id"] = resource_id
        extra.update(fields)
        return extra

    def debug(self, msg, resource_id=None, **kwargs):
        self.logger.debug(msg, extra=self._extra(resource_id, kwargs))

    def info(self, msg, resource_id=None, **kwargs):
        self.logger.info(msg, extra=self._extra(resource_id, kwargs))

    def error(self, msg, resource_id=None, **kwargs):
        self.logger.error(msg, extra=self._extra(resource_id, kwargs))

    def warning(self, msg, resource_id=None, **kwargs):
        self.logger.warning(msg, extra=self._extra(resource_id, kwargs))
