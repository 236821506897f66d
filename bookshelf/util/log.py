import logging

import structlog

from bookshelf.internal.env_settings import Settings

_settings = Settings().app

_renderer = (
    structlog.processors.JSONRenderer()
    if _settings.json_logs
    else structlog.dev.ConsoleRenderer()
)

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
        _renderer,
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        logging.getLevelNamesMapping()[_settings.log_level]
    ),
    cache_logger_on_first_use=True,
)

logger: structlog.typing.FilteringBoundLogger = structlog.get_logger()
