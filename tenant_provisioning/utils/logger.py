"""
Logging for the provisioning pipeline.

This module provides:
1. ContextAwareLogger for console logs (with pipe-delimited extras)
2. TenantContextFilter stamping tenant and correlation ids on records
3. AzureQueueHandler for structured queue logs
"""

import logging
import os
import sys
import traceback
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from azure.storage.queue import QueueClient, QueueServiceClient

from ..config import get_config
from ..constants import EnvironmentVariable, QueueName
from .json_utils import dumps

_service_logger = None

# Attributes owned by LogRecord; extras using these names would raise KeyError.
_RESERVED_RECORD_ATTRS = frozenset(
    [
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "asctime",
    ]
)


class ContextAwareLogger:
    """
    Logger wrapper that formats extra attributes in message while preserving them.

    Extras appear in console output even when a host overrides the formatters.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def _log_with_formatted_extra(self, level: str, msg: str, **kwargs: Any) -> None:
        """
        Log with extra data formatted into the message.

        Args:
            level: Logging level method to use
            msg: Log message
            **kwargs: Standard logging kwargs (exc_info, stack_info, ...) plus 'extra'
        """
        extra = kwargs.pop("extra", None) or {}

        if extra:
            extra_str = " | ".join([f"{k}={v}" for k, v in extra.items()])
            full_msg = f"{msg} | {extra_str}"
        else:
            full_msg = msg

        safe_extra = {
            (f"extra_{k}" if k in _RESERVED_RECORD_ATTRS else k): v for k, v in extra.items()
        }
        kwargs.setdefault("stacklevel", 3)

        log_method = getattr(self.logger, level)
        log_method(full_msg, extra=safe_extra, **kwargs)

    @property
    def name(self) -> str:
        return self.logger.name

    def set_level(self, level: Union[int, str]) -> None:
        """Set the logging level of the underlying logger."""
        self.logger.setLevel(level)

    def is_enabled_for(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._log_with_formatted_extra("info", msg, **kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._log_with_formatted_extra("error", msg, **kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._log_with_formatted_extra("warning", msg, **kwargs)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._log_with_formatted_extra("debug", msg, **kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log at ERROR level with the active exception attached."""
        self._log_with_formatted_extra("exception", msg, **kwargs)


class TenantContextFilter(logging.Filter):
    """
    Logging filter that adds tenant and correlation context to log records.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        # Lazy imports to avoid circular dependency
        from ..context.tenant_context import TenantContext
        from ..exceptions import get_correlation_id

        tenant_id = TenantContext.get_current_tenant_id()
        if tenant_id and not hasattr(record, "tenant_id"):
            record.tenant_id = tenant_id

        correlation_id = get_correlation_id()
        if correlation_id and not hasattr(record, "correlation_id"):
            record.correlation_id = correlation_id

        return True


class AzureQueueHandler(logging.Handler):
    """
    Logging handler that sends structured log entries to an Azure Storage Queue.

    Entries are buffered and sent one message per entry once ``batch_size``
    entries are pending, or on ``flush``/``close``.
    """

    def __init__(
        self,
        queue_name: str = QueueName.LOGS.value,
        connection_string: Optional[str] = None,
        batch_size: int = 10,
    ):
        super().__init__()
        self.queue_name = queue_name
        self.connection_string = connection_string or os.getenv(
            EnvironmentVariable.AZURE_STORAGE_CONNECTION.value
        )
        self.batch_size = batch_size
        self.log_buffer: List[Dict[str, Any]] = []

        if not self.connection_string:
            sys.stderr.write("Azure Storage connection string not provided\n")

        self._ensure_queue_exists()

    def _ensure_queue_exists(self) -> bool:
        """
        Ensure the specified queue exists, creating it if necessary.

        Returns:
            True if the queue exists or was created successfully
        """
        if not self.connection_string:
            return False

        try:
            queue_service = QueueServiceClient.from_connection_string(self.connection_string)
            queues = queue_service.list_queues()
            if not any(queue.name == self.queue_name for queue in queues):
                sys.stderr.write(f"Queue '{self.queue_name}' does not exist. Creating...\n")
                queue_service.create_queue(self.queue_name)
            return True
        except Exception as e:
            sys.stderr.write(f"Failed to ensure queue exists: {str(e)}\n")
            return False

    def build_entry(self, record: logging.LogRecord) -> Dict[str, Any]:
        """Convert a record to the structured entry shipped to the queue."""
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for field in ["tenant_id", "correlation_id"]:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_ATTRS
            and key not in ("tenant_id", "correlation_id")
            and not key.startswith("_")
            and not callable(value)
        }
        if context:
            log_entry["context"] = context

        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": [
                    line.rstrip() for line in traceback.format_exception(*record.exc_info)
                ],
            }
        return log_entry

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.log_buffer.append(self.build_entry(record))
            if len(self.log_buffer) >= self.batch_size:
                self.flush()
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        """Send any buffered log records to the queue."""
        if not self.log_buffer or not self.connection_string:
            return

        try:
            queue_client = QueueClient.from_connection_string(
                conn_str=self.connection_string, queue_name=self.queue_name
            )
            for log_entry in self.log_buffer:
                try:
                    queue_client.send_message(dumps(log_entry))
                except Exception as log_error:
                    sys.stderr.write(f"Error sending individual log entry: {str(log_error)}\n")
            self.log_buffer.clear()
        except Exception as e:
            sys.stderr.write(f"Error sending logs to Azure Queue: {str(e)}\n")

    def close(self) -> None:
        """Flush any remaining logs before closing."""
        self.flush()
        super().close()


def _resolve_level(log_level: Union[int, str]) -> int:
    if isinstance(log_level, str):
        return getattr(logging, log_level.upper(), logging.INFO)
    return log_level


def configure_logging(
    service_name: str,
    log_level: Optional[Union[int, str]] = None,
    enable_queue: Optional[bool] = None,
    queue_name: Optional[str] = None,
    queue_batch_size: int = 10,
    connection_string: Optional[str] = None,
) -> ContextAwareLogger:
    """
    Configure logging with console and optional queue output.

    Args:
        service_name: Name of the hosting service, used for the logger name
        log_level: Logging level (default: from config.logging.level)
        enable_queue: Ship logs to Azure Queue (default: config.features.enable_logs_queue)
        queue_name: Queue to send logs to (default: config.queue.logs_queue_name)
        queue_batch_size: Number of logs to batch before sending
        connection_string: Azure Storage connection string (default: from config)

    Returns:
        The configured logger wrapped with ContextAwareLogger
    """
    global _service_logger

    app_config = get_config()

    if log_level is None:
        log_level = app_config.logging.level
    if enable_queue is None:
        enable_queue = app_config.features.enable_logs_queue
    if connection_string is None:
        connection_string = app_config.queue.connection_string
    queue_name = queue_name or app_config.queue.logs_queue_name

    level = _resolve_level(log_level)

    logger = logging.getLogger(f"provisioning.{service_name}")
    logger.setLevel(level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    tenant_filter = TenantContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(app_config.logging.format))
    console_handler.addFilter(tenant_filter)
    logger.addHandler(console_handler)

    if enable_queue:
        queue_handler = AzureQueueHandler(
            queue_name=queue_name, connection_string=connection_string, batch_size=queue_batch_size
        )
        queue_handler.setLevel(level)
        queue_handler.addFilter(tenant_filter)
        logger.addHandler(queue_handler)

    wrapped_logger = ContextAwareLogger(logger)
    wrapped_logger.info(
        "Service logger configured",
        extra={
            "service_name": service_name,
            "queue_logging": enable_queue,
            "queue_name": queue_name if enable_queue else None,
        },
    )
    _service_logger = wrapped_logger
    return wrapped_logger


def reset_logging() -> None:
    """Forget the configured service logger."""
    global _service_logger
    _service_logger = None


def get_logger(log_level: Optional[Union[int, str]] = None) -> ContextAwareLogger:
    """
    Get the service logger, or a wrapped package logger if none is configured.

    Args:
        log_level: Optional log level to set on the fallback logger
    """
    if _service_logger is not None:
        return _service_logger

    logger = logging.getLogger("tenant_provisioning")

    if log_level is None:
        log_level = get_config().logging.level
    logger.setLevel(_resolve_level(log_level))

    return ContextAwareLogger(logger)
