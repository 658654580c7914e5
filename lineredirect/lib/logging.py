# This software is released under the Revised BSD License.
# See LICENSE for details
#
# Copyright (c) 2019, Ryan Chapin, https//:www.ryanchapin.com
# All rights reserved.

import logging
import sys
from datetime import datetime
from typing import Any, Union

import structlog
from structlog.stdlib import BoundLogger

from lineredirect.lib.enums import LogLevel
from lineredirect.lib.linestream import DEFAULT_ENCODING, LineRedirectStream

Logger = Union[BoundLogger, Any]


def add_timestamp(logger, method_name, event_dict):
    """
    Add ISO 8601 timestamp with timezone offset, to stay compatible with ELK stack timestamp
    formats.
    """
    event_dict["@timestamp"] = datetime.now().astimezone().isoformat()
    return event_dict


def get_logger(
    name: str,
    log_level: str,
    cache_logger: bool = True,
    force_reconfig: bool = False,
    const_kvs: dict[str, str] | None = None,
) -> Logger:
    if force_reconfig:
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()

    # These run for both our own loggers and third-party library logs.
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        add_timestamp,
        structlog.processors.add_log_level,
        structlog.processors.CallsiteParameterAdder(
            {
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            }
        ),
        structlog.processors.EventRenamer("message"),
        structlog.processors.dict_tracebacks,
    ]

    if const_kvs is not None:
        for k, v in const_kvs.items():
            shared_processors.append(
                lambda logger, method_name, event_dict, key=k, value=v: {**event_dict, key: value}
            )

    if not structlog.is_configured():
        structlog.configure(
            processors=shared_processors
            + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=cache_logger,
        )

    # Everything, including third-party stdlib logging, is rendered as JSON.
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper()))

    return structlog.get_logger(name)


class LogStreamer(LineRedirectStream):
    """
    A binary file-like object that logs every line written to it.

    Each completed line is passed, unmodified, to the logger method for `level` on a logger
    bound with `component`. Empty lines are logged as empty messages.
    """

    def __init__(
        self,
        logger: Logger,
        component: str,
        level: str = LogLevel.INFO.value,
        encoding: str | object = DEFAULT_ENCODING,
    ):
        log_level = LogLevel.get_enum_value_from_string(level)
        if log_level is None:
            raise ValueError(f"invalid log level; level={level}")
        self.logger = logger.bind(component=component)
        self.level = log_level
        super().__init__(getattr(self.logger, log_level.value), encoding=encoding)
