from contextvars import ContextVar
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional
import uuid

from configs import app_config

trace_id_var: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)


def trace_id_generator() -> str:
    return str(uuid.uuid4().hex)


def init_logging(level: str | None = None):
    log_handlers: list[logging.Handler] = []
    log_file = app_config.LOG_FILE
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        log_handlers.append(
            RotatingFileHandler(
                filename=log_file,
                maxBytes=app_config.LOG_FILE_MAX_SIZE * 1024 * 1024,
                backupCount=app_config.LOG_FILE_BACKUP_COUNT,
            )
        )

    # Always add StreamHandler to log to console
    sh = logging.StreamHandler(sys.stdout)
    log_handlers.append(sh)

    for handler in log_handlers:
        handler.addFilter(TransactionIdFilter())

    logging.basicConfig(
        level=level or app_config.LOG_LEVEL,
        format=app_config.LOG_FORMAT,
        datefmt=app_config.LOG_DATEFORMAT,
        handlers=log_handlers,
        force=True,
    )

    apply_transaction_id_formatter()

    # httpcore logs every connection step at debug level
    logging.getLogger("httpcore").propagate = False


class TransactionIdFilter(logging.Filter):
    # Exposes the id of the transaction being driven by the current task so
    # interleaved transactions can be told apart in the log.
    def filter(self, record):
        record.trace_id = trace_id_var.get() or ""
        return True


class TransactionIdFormatter(logging.Formatter):
    def format(self, record):
        if not hasattr(record, "trace_id"):
            record.trace_id = ""
        return super().format(record)


def apply_transaction_id_formatter():
    for handler in logging.root.handlers:
        if handler.formatter:
            handler.formatter = TransactionIdFormatter(app_config.LOG_FORMAT, app_config.LOG_DATEFORMAT)
