"""
Operation context for cross-cutting concerns.

Wraps an operation with ENTER/EXIT/ERROR logging, duration and correlation id
tracking.
"""

import time
import uuid
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Optional, TypeVar, Union, cast

from ..exceptions import BaseError, clear_correlation_id, get_correlation_id, set_correlation_id
from ..utils.logger import ContextAwareLogger, get_logger
from .tenant_context import TenantContext


class OperationContext:
    """Context for a specific operation."""

    def __init__(self, operation_name: str, correlation_id: Optional[str] = None, **context):
        self.operation_name = operation_name
        self.operation_id = str(uuid.uuid4())
        self.correlation_id = correlation_id or get_correlation_id() or str(uuid.uuid4())

        self.context = context
        self.context["operation_id"] = self.operation_id
        self.context["correlation_id"] = self.correlation_id

        self.start_time = time.time()

    @property
    def duration_ms(self) -> float:
        """Get the operation duration in milliseconds."""
        return (time.time() - self.start_time) * 1000

    def add_context(self, **kwargs) -> None:
        self.context.update(kwargs)


class OperationHandler:
    """Handles operation logging and error enrichment."""

    def __init__(self, logger: Optional[ContextAwareLogger] = None):
        self.logger = logger if logger is not None else get_logger()

    @contextmanager
    def operation(self, name: str, correlation_id: Optional[str] = None, **context):
        """Context manager for operations."""
        tenant_id = TenantContext.get_current_tenant_id()
        if tenant_id and "tenant_id" not in context:
            context["tenant_id"] = tenant_id

        previous_correlation_id = get_correlation_id()
        op_ctx = OperationContext(name, correlation_id=correlation_id, **context)
        set_correlation_id(op_ctx.correlation_id)

        ids = {"operation_id": op_ctx.operation_id, "correlation_id": op_ctx.correlation_id}
        self.logger.info(f"ENTER: {name}", extra={**context, **ids})

        try:
            yield op_ctx
            self.logger.info(
                f"EXIT: {name}",
                extra={**context, **ids, "duration_ms": op_ctx.duration_ms, "status": "success"},
            )

        except BaseError as e:
            e.add_context(
                operation_name=name,
                operation_id=op_ctx.operation_id,
                operation_duration_ms=op_ctx.duration_ms,
            )
            # BaseError already logged itself
            self.logger.error(
                f"ERROR: {name} -> {e.error_code.name}: {e}",
                extra={
                    **context,
                    **ids,
                    "duration_ms": op_ctx.duration_ms,
                    "error_id": e.error_id,
                    "error_code": e.error_code.value,
                    "status": "error",
                },
            )
            raise

        except Exception as e:
            self.logger.exception(
                f"ERROR: {name} -> {type(e).__name__}: {str(e)}",
                extra={
                    **context,
                    **ids,
                    "duration_ms": op_ctx.duration_ms,
                    "error_type": type(e).__name__,
                    "status": "error",
                },
            )
            raise

        finally:
            if previous_correlation_id:
                set_correlation_id(previous_correlation_id)
            else:
                clear_correlation_id()


F = TypeVar("F", bound=Callable[..., Any])


def _find_correlation_id(args, kwargs) -> Optional[str]:
    """Correlation id of the first request-context-like argument, if any."""
    for value in list(args) + list(kwargs.values()):
        correlation_id = getattr(value, "correlation_id", None)
        if isinstance(correlation_id, str):
            return correlation_id
    return None


def operation(name: Union[Optional[str], Callable] = None):
    """
    Decorator for operations.

    Args:
        name: Optional operation name. Defaults to ``module.Class.function``.
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            if name is not None:
                op_name = name
            else:
                op_name = func.__name__
                if args and hasattr(args[0], func.__name__):
                    op_name = f"{args[0].__class__.__name__}.{op_name}"
                op_name = f"{func.__module__.split('.')[-1]}.{op_name}"

            context = {"source_module": func.__module__}
            if args and hasattr(args[0], func.__name__):
                context["class"] = args[0].__class__.__name__

            handler = OperationHandler()
            with handler.operation(
                op_name, correlation_id=_find_correlation_id(args, kwargs), **context
            ):
                return func(*args, **kwargs)

        return cast(F, wrapper)

    if callable(name):
        func, name = name, None
        return decorator(func)

    return decorator
