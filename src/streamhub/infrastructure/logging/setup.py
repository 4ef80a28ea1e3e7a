"""structlog over stdlib logging for the streamhub service.

Every event carries ``app`` and ``env``. The HTTP adapters log their own
structured events, so httpx/httpcore request chatter is held at WARNING
unless the service runs at DEBUG.
"""

from __future__ import annotations

import atexit
import copy
import logging
import logging.config
import queue
import sys
from datetime import datetime, timezone
from logging.handlers import QueueHandler, QueueListener
from typing import Any, Optional

import structlog

from streamhub.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)


BASE_LOGGING_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "()": "uvicorn.logging.DefaultFormatter",
            "fmt": "%(levelprefix)s %(message)s",
            "use_colors": None,
        },
        "access": {
            "()": "uvicorn.logging.AccessFormatter",
            "fmt": '%(levelprefix)s %(client_addr)s - "%(request_line)s" %(status_code)s',
        },
    },
    "handlers": {
        "default": {
            "formatter": "default",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
        },
        "access": {
            "formatter": "access",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stdout",
        },
    },
    "loggers": {
        "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
        "uvicorn.error": {"level": "INFO"},
        "uvicorn.access": {"handlers": ["access"], "level": "INFO", "propagate": False},
    },
}

# Client libraries that log one line per request.
QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore")

_QUEUE_LISTENER: Optional[QueueListener] = None


def _drop_color_message(_: Any, __: Any, event_dict: dict[str, Any]) -> dict[str, Any]:
    # uvicorn duplicates the message as "color_message".
    event_dict.pop("color_message", None)
    return event_dict


def _add_record_created_timestamp_utc(
    _: Any, __: Any, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Stamp foreign records with their creation time, not their format time.

    ProcessorFormatter sets event_dict["_record"] for foreign records.
    """
    record = event_dict.get("_record")
    if isinstance(record, logging.LogRecord):
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        event_dict["timestamp"] = dt.isoformat().replace("+00:00", "Z")
    return event_dict


def app_context_processor(config: AppConfig) -> structlog.typing.Processor:
    """Processor adding the service name and environment to every event."""
    app_name = config.app_name
    environment = config.environment

    def add_app_context(
        _: Any, __: Any, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict.setdefault("app", app_name)
        event_dict.setdefault("env", environment)
        return event_dict

    return add_app_context


def quiet_logger_level(name: str, config: AppConfig) -> str:
    """Level for stdlib logger *name*; client chatter stays at WARNING."""
    root_name = name.split(".", 1)[0]
    if root_name in QUIET_LOGGERS and config.log_level != "DEBUG":
        return "WARNING"
    return config.log_level


def _foreign_pre_chain(config: AppConfig) -> list[structlog.typing.Processor]:
    return [
        _drop_color_message,
        structlog.contextvars.merge_contextvars,
        _add_record_created_timestamp_utc,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        app_context_processor(config),
    ]


def _renderer(config: AppConfig) -> structlog.typing.Processor:
    if config.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def _formatter_kwargs(config: AppConfig) -> dict[str, Any]:
    return {
        "foreign_pre_chain": _foreign_pre_chain(config),
        "processors": [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(config),
        ],
    }


def build_logging_config(config: AppConfig) -> dict[str, Any]:
    """
    Build a uvicorn-compatible logging config dict (dictConfig) based on
    uvicorn's defaults, rendered through structlog.

    ``config.log_level`` is applied to the uvicorn loggers and the root
    logger; httpx/httpcore get ``quiet_logger_level``.
    """
    cfg = copy.deepcopy(BASE_LOGGING_CONFIG)

    cfg["formatters"]["structlog"] = {
        "()": structlog.stdlib.ProcessorFormatter,
        **_formatter_kwargs(config),
    }
    cfg["handlers"]["default"]["formatter"] = "structlog"
    cfg["handlers"]["access"]["formatter"] = "structlog"

    for logger_cfg in cfg["loggers"].values():
        logger_cfg["level"] = config.log_level
    for name in QUIET_LOGGERS:
        cfg["loggers"][name] = {"level": quiet_logger_level(name, config)}

    cfg["root"] = {"handlers": ["default"], "level": config.log_level}
    return cfg


def _stop_async_listener() -> None:
    global _QUEUE_LISTENER
    if _QUEUE_LISTENER is not None:
        try:
            _QUEUE_LISTENER.stop()
        finally:
            _QUEUE_LISTENER = None


class _LevelRangeFilter(logging.Filter):
    def __init__(self, min_level: int, max_level: int) -> None:
        super().__init__()
        self._min_level = min_level
        self._max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return self._min_level <= record.levelno <= self._max_level


class _StructlogPreservingQueueHandler(QueueHandler):
    """QueueHandler that keeps structlog event dicts intact."""

    def prepare(self, record: logging.LogRecord) -> logging.LogRecord:
        # The stock prepare() flattens record.msg to a string, which breaks
        # ProcessorFormatter's dict-msg handling.
        return copy.copy(record)


def _enable_async_logging(config: AppConfig) -> None:
    """
    Route all stdlib logging through a QueueHandler and emit from a
    QueueListener thread, so the event loop never blocks on log I/O.
    """
    global _QUEUE_LISTENER

    _stop_async_listener()

    formatter = structlog.stdlib.ProcessorFormatter(**_formatter_kwargs(config))

    # DEBUG..WARNING -> stdout, ERROR and above -> stderr
    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.addFilter(_LevelRangeFilter(logging.DEBUG, logging.WARNING))

    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setFormatter(formatter)
    stderr_handler.addFilter(_LevelRangeFilter(logging.ERROR, logging.CRITICAL))

    q: queue.Queue[logging.LogRecord] = queue.Queue()

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_StructlogPreservingQueueHandler(q))
    root.setLevel(config.log_level)

    names = set(logging.root.manager.loggerDict) | set(QUIET_LOGGERS)
    for name in names:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(quiet_logger_level(name, config))

    _QUEUE_LISTENER = QueueListener(
        q, stdout_handler, stderr_handler, respect_handler_level=True
    )
    _QUEUE_LISTENER.start()
    atexit.register(_stop_async_listener)


def configure_logging(config: AppConfig) -> dict[str, Any]:
    """
    Configure structlog + stdlib logging.

    Returns a uvicorn-compatible dictConfig; actual emission is wired
    through QueueHandler/QueueListener.
    """
    structlog.configure(
        processors=[
            _drop_color_message,
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            app_context_processor(config),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    cfg = build_logging_config(config)
    logging.config.dictConfig(cfg)
    _enable_async_logging(config)

    log.info(
        "logging_configured",
        app=config.app_name,
        env=config.environment,
        log_format=config.log_format,
        log_level=config.log_level,
    )
    return cfg
