# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Request and polling telemetry for the Service Management SDK.

Every management call runs inside :meth:`TelemetryManager.trace_request`. With
telemetry enabled, the call is logged through :mod:`logging`. When
OpenTelemetry is installed it is also traced and counted, and it is reported
to any :class:`TelemetryHook` registered on the configuration.
Asynchronous operation status fetches are reported through
:meth:`TelemetryManager.record_operation_status`.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, List, Optional, Protocol, Union, runtime_checkable

from ..common.constants import (
    OTEL_ATTR_CLIENT_REQUEST_ID,
    OTEL_ATTR_HTTP_METHOD,
    OTEL_ATTR_HTTP_STATUS_CODE,
    OTEL_ATTR_HTTP_URL,
    OTEL_ATTR_OPERATION,
    OTEL_ATTR_RESOURCE,
    OTEL_ATTR_SERVICE_REQUEST_ID,
)

# Optional OpenTelemetry imports
try:
    from opentelemetry import metrics, trace
    from opentelemetry.trace import Status, StatusCode

    _OTEL_AVAILABLE = True
except ImportError:
    _OTEL_AVAILABLE = False
    trace = None  # type: ignore
    metrics = None  # type: ignore
    Status = None  # type: ignore
    StatusCode = None  # type: ignore


_INSTRUMENTATION_NAME = "servicemanagement"
_SCHEMA_URL = "https://opentelemetry.io/schemas/1.21.0"


@dataclass(frozen=True)
class TelemetryConfig:
    """
    Opt-in observability settings for :class:`~servicemanagement.ManagementClient`.

    :param enable_tracing: Emit one client span per management request (requires ``opentelemetry-api``).
    :param enable_metrics: Record request duration and count, error count and poll count (requires ``opentelemetry-api``).
    :param enable_logging: Log each request on ``logger_name``: WARNING for status >= 400, DEBUG otherwise.
    :param service_name: Prefix of span names (default: ``ServiceManagement``).
    :param log_level: Level applied to the SDK logger when logging is enabled.
    :param logger_name: Name of the SDK logger.
    :param hooks: Objects implementing any subset of :class:`TelemetryHook`.

    Example::

        config = ManagementConfig(
            subscription_id=sub_id,
            certificate_path="mgmt.pem",
            telemetry=TelemetryConfig(enable_logging=True, log_level="DEBUG"),
        )
    """

    enable_tracing: bool = False
    enable_metrics: bool = False
    enable_logging: bool = False

    service_name: Optional[str] = None

    log_level: str = "WARNING"
    logger_name: str = "servicemanagement"

    hooks: List["TelemetryHook"] = field(default_factory=list)


@dataclass
class RequestContext:
    """One management request as seen by hooks."""

    client_request_id: str
    method: str
    url: str
    operation: str  # e.g. "storage_services.list", "operations.get"
    resource_name: Optional[str] = None
    start_time: float = field(default_factory=time.perf_counter)

    # Free-form state shared between a hook's start and end callbacks
    custom_data: Dict[str, Any] = field(default_factory=dict)

    _span: Any = field(default=None, repr=False)


@dataclass
class ResponseContext:
    status_code: int
    duration_ms: float
    service_request_id: Optional[str] = None
    response_size: Optional[int] = None


@runtime_checkable
class TelemetryHook(Protocol):
    """
    Callbacks invoked around management requests. Every method is optional.

    A hook that raises is ignored; it never fails the request.
    """

    def on_request_start(self, context: RequestContext) -> None: ...

    def on_request_end(self, request: RequestContext, response: ResponseContext) -> None: ...

    def on_request_error(self, request: RequestContext, error: Exception) -> None: ...

    def on_operation_status(self, operation_id: str, status: str, attempt: int) -> None: ...

    def get_additional_headers(self) -> Dict[str, str]: ...


class TelemetryManager:
    """Internal; built by :func:`create_telemetry_manager`."""

    def __init__(self, config: Optional[TelemetryConfig] = None) -> None:
        self._config = config or TelemetryConfig()
        self._hooks = list(self._config.hooks)
        self._tracer: Optional[Any] = None
        self._instruments: Dict[str, Any] = {}
        self._logger: Optional[logging.Logger] = None

        if _OTEL_AVAILABLE and self._config.enable_tracing:
            self._tracer = trace.get_tracer(_INSTRUMENTATION_NAME, schema_url=_SCHEMA_URL)
        if _OTEL_AVAILABLE and self._config.enable_metrics:
            meter = metrics.get_meter(_INSTRUMENTATION_NAME, schema_url=_SCHEMA_URL)
            self._instruments = {
                "duration": meter.create_histogram(
                    "servicemanagement.client.request.duration", unit="ms", description="Management request duration"
                ),
                "requests": meter.create_counter(
                    "servicemanagement.client.request.count", unit="1", description="Management requests sent"
                ),
                "errors": meter.create_counter(
                    "servicemanagement.client.error.count", unit="1", description="Management responses with status >= 400"
                ),
                "polls": meter.create_counter(
                    "servicemanagement.client.operation.poll.count", unit="1", description="Operation status fetches"
                ),
            }
        if self._config.enable_logging:
            self._logger = logging.getLogger(self._config.logger_name)
            self._logger.setLevel(getattr(logging, self._config.log_level.upper()))

    def _notify(self, callback: str, *args: Any) -> None:
        for hook in self._hooks:
            method = getattr(hook, callback, None)
            if method is None:
                continue
            try:
                method(*args)
            except Exception:
                pass  # Hooks must not break requests or polling

    @contextmanager
    def trace_request(
        self,
        operation: str,
        method: str,
        url: str,
        client_request_id: str,
        resource_name: Optional[str] = None,
    ) -> Generator[RequestContext, None, None]:
        """
        Wrap one management request.

        The caller reports the outcome with :meth:`record_response`; an exception
        escaping the block is logged, recorded on the span, passed to
        ``on_request_error`` hooks and re-raised.
        """
        ctx = RequestContext(
            client_request_id=client_request_id,
            method=method,
            url=url,
            operation=operation,
            resource_name=resource_name,
        )
        self._notify("on_request_start", ctx)

        if self._tracer is not None:
            attributes = {
                OTEL_ATTR_OPERATION: operation,
                OTEL_ATTR_HTTP_METHOD: method,
                OTEL_ATTR_HTTP_URL: url,
                OTEL_ATTR_CLIENT_REQUEST_ID: client_request_id,
            }
            if resource_name:
                attributes[OTEL_ATTR_RESOURCE] = resource_name
            ctx._span = self._tracer.start_span(
                " ".join(filter(None, [self._config.service_name or "ServiceManagement", operation, resource_name])),
                kind=trace.SpanKind.CLIENT,
                attributes=attributes,
            )

        try:
            yield ctx
        except Exception as e:
            if ctx._span is not None:
                ctx._span.set_status(Status(StatusCode.ERROR, str(e)))
                ctx._span.record_exception(e)
            if self._logger:
                self._logger.warning(
                    f"{operation} {method} failed: {e}",
                    extra={"client_request_id": client_request_id},
                )
            self._notify("on_request_error", ctx, e)
            raise
        finally:
            if ctx._span is not None:
                ctx._span.end()

    def record_response(
        self,
        ctx: RequestContext,
        status_code: int,
        service_request_id: Optional[str] = None,
        response_size: Optional[int] = None,
    ) -> None:
        response = ResponseContext(
            status_code=status_code,
            duration_ms=(time.perf_counter() - ctx.start_time) * 1000,
            service_request_id=service_request_id,
            response_size=response_size,
        )

        if ctx._span is not None:
            ctx._span.set_attribute(OTEL_ATTR_HTTP_STATUS_CODE, status_code)
            if service_request_id:
                ctx._span.set_attribute(OTEL_ATTR_SERVICE_REQUEST_ID, service_request_id)

        if self._instruments:
            labels = {"operation": ctx.operation, "method": ctx.method, "status_code": status_code}
            self._instruments["duration"].record(response.duration_ms, labels)
            self._instruments["requests"].add(1, labels)
            if status_code >= 400:
                self._instruments["errors"].add(1, labels)

        if self._logger:
            self._logger.log(
                logging.WARNING if status_code >= 400 else logging.DEBUG,
                f"{ctx.operation} {ctx.method} {status_code} {response.duration_ms:.1f}ms",
                extra={"client_request_id": ctx.client_request_id, "service_request_id": service_request_id},
            )

        self._notify("on_request_end", ctx, response)

    def record_operation_status(self, operation_id: str, status: str, attempt: int) -> None:
        if self._instruments:
            self._instruments["polls"].add(1, {"status": status})
        if self._logger:
            self._logger.debug(
                f"operation {operation_id} status={status} attempt={attempt}",
                extra={"operation_id": operation_id},
            )
        self._notify("on_operation_status", operation_id, status, attempt)

    def get_additional_headers(self) -> Dict[str, str]:
        """Merge the headers returned by every hook; later hooks win."""
        headers: Dict[str, str] = {}
        for hook in self._hooks:
            method = getattr(hook, "get_additional_headers", None)
            if method is None:
                continue
            try:
                headers.update(method() or {})
            except Exception:
                pass
        return headers


class NoOpTelemetryManager:
    """Stand-in used when telemetry is disabled."""

    @contextmanager
    def trace_request(
        self,
        operation: str,
        method: str,
        url: str,
        client_request_id: str,
        resource_name: Optional[str] = None,
    ) -> Generator[RequestContext, None, None]:
        yield RequestContext(
            client_request_id=client_request_id,
            method=method,
            url=url,
            operation=operation,
            resource_name=resource_name,
        )

    def record_response(self, *args: Any, **kwargs: Any) -> None:
        pass

    def record_operation_status(self, *args: Any, **kwargs: Any) -> None:
        pass

    def get_additional_headers(self) -> Dict[str, str]:
        return {}


def create_telemetry_manager(
    config: Optional[TelemetryConfig],
) -> Union[TelemetryManager, NoOpTelemetryManager]:
    if config is None:
        return NoOpTelemetryManager()
    if not (config.enable_tracing or config.enable_metrics or config.enable_logging or config.hooks):
        return NoOpTelemetryManager()
    return TelemetryManager(config)


__all__ = [
    "TelemetryConfig",
    "TelemetryHook",
    "TelemetryManager",
    "NoOpTelemetryManager",
    "RequestContext",
    "ResponseContext",
    "create_telemetry_manager",
]
