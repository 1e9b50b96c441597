"""Tracing for discovery rounds, turns, model sends and tool calls.

Only ``opentelemetry-api`` is a hard dependency.  Until
:func:`configure_telemetry` installs an SDK tracer provider every span is a
no-op, so instrumented code never has to check whether tracing is on::

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("discovery.round") as span:
        span.set_attribute(ATTR_SERVER_COUNT, 3)

Exporting requires the ``otel`` extra (``pip install mcpbridge[otel]``).
"""

from __future__ import annotations

import importlib
import logging
from types import ModuleType
from typing import Any

from opentelemetry import trace

logger = logging.getLogger(__name__)

ATTR_SERVER_NAME = "mcpbridge.server.name"
ATTR_SERVER_URL = "mcpbridge.server.url"
ATTR_SERVER_COUNT = "mcpbridge.discovery.server_count"
ATTR_MAPPED_TOOLS = "mcpbridge.discovery.mapped_tools"
ATTR_MODEL = "mcpbridge.model"
ATTR_ATTEMPT = "mcpbridge.turn.attempt"
ATTR_MAX_ATTEMPTS = "mcpbridge.turn.max_attempts"
ATTR_TURN_STATUS = "mcpbridge.turn.status"
ATTR_FINISH_REASON = "mcpbridge.finish_reason"
ATTR_TOOL_NAME = "mcpbridge.tool.name"
ATTR_TOOL_SUCCESS = "mcpbridge.tool.success"

_INSTRUMENTATION_NAME = "mcpbridge"

_SDK_HINT = "opentelemetry-sdk is required for configure_telemetry()"
_OTLP_HINT = "opentelemetry-exporter-otlp is required for OTLP export"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Tracer for *name* (defaults to the package name)."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    *,
    service_name: str = "mcpbridge",
    console: bool = False,
    otlp_endpoint: str | None = None,
) -> Any:
    """Install a global tracer provider and return it.

    Spans go to stdout when *console* is set and to an OTLP/gRPC collector
    when *otlp_endpoint* is given.  With neither, spans are recorded but not
    exported.

    Raises:
        ImportError: If the ``otel`` extra is not installed.
    """
    resources = _require("opentelemetry.sdk.resources", _SDK_HINT)
    sdk_trace = _require("opentelemetry.sdk.trace", _SDK_HINT)
    export = _require("opentelemetry.sdk.trace.export", _SDK_HINT)

    provider = sdk_trace.TracerProvider(
        resource=resources.Resource.create({"service.name": service_name})
    )
    if console:
        provider.add_span_processor(export.SimpleSpanProcessor(export.ConsoleSpanExporter()))
    if otlp_endpoint:
        otlp = _require("opentelemetry.exporter.otlp.proto.grpc.trace_exporter", _OTLP_HINT)
        provider.add_span_processor(
            export.BatchSpanProcessor(otlp.OTLPSpanExporter(endpoint=otlp_endpoint))
        )

    trace.set_tracer_provider(provider)
    logger.info(
        "Tracing enabled for %s (console=%s, otlp=%s)", service_name, console, otlp_endpoint
    )
    return provider


def _require(module: str, hint: str) -> ModuleType:
    try:
        return importlib.import_module(module)
    except ImportError as exc:
        msg = f"{hint}. Install it with: pip install mcpbridge[otel]"
        raise ImportError(msg) from exc
