"""\
OpenTelemetry
=============

Author: Akshay Mestry <xa@mes3.dev>
Created on: Friday, July 04 2025
Last updated on: Sunday, October 18 2026

This module provides `OpenTelemetry` integration for the framework.
Captured errors are recorded on the active span together with their
severity level, so they show up next to the traces they interrupted.
"""

from __future__ import annotations

import typing as t

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
    OTLPSpanExporter,
)
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.export import ConsoleSpanExporter
from opentelemetry.sdk.trace.export import SimpleSpanProcessor

if t.TYPE_CHECKING:
    from faultline.core.config import Config
    from faultline.core.levels import Level

__all__: list[str] = ["LEVEL_ATTRIBUTE", "get_tracer", "record_error"]

LEVEL_ATTRIBUTE: t.Final[str] = "faultline.level"


def get_tracer(
    config: Config | None = None,
    name: str | None = None,
) -> trace.Tracer:
    """Configure and return a tracer with proper integration.

    This function sets up `OpenTelemetry TracerProvider` with
    configuration based on the framework's configurations. Spans are
    printed to the console in debug mode and exported over OTLP
    otherwise. When telemetry is disabled, spans are created but never
    exported.

    :param config: An optional configuration object to initialise the
        tracer. If not provided, a default `Config` instance is created.
    :param name: Override for the service name, defaults to `None`. If
        not provided, uses the name from the configuration.
    :return: A configured `OpenTelemetry Tracer` instance.
    """
    if config is None:
        from faultline.core.config import Config

        config = Config()
    service = name or config.telemetry.name or config.capture.application
    resource = Resource.create(
        {
            "service.name": service,
            "service.version": config.version,
            "deployment.environment": (
                "development" if config.debug else "production"
            ),
            "telemetry.sdk.name": config.name,
        }
    )
    provider = TracerProvider(resource=resource)
    if config.telemetry.enabled:
        if config.debug:
            processor = SimpleSpanProcessor(ConsoleSpanExporter())
        else:
            processor = BatchSpanProcessor(OTLPSpanExporter())
        provider.add_span_processor(processor)
    trace.set_tracer_provider(provider)
    return trace.get_tracer(service)


def record_error(exc: BaseException, level: Level | None = None) -> bool:
    """Record a captured error on the active span.

    :param exc: The captured error.
    :param level: Severity level of the error, if it has one.
    :return: `True` if a recording span was active.
    """
    span = trace.get_current_span()
    if not span.is_recording():
        return False
    attributes = {LEVEL_ATTRIBUTE: level.name} if level is not None else {}
    span.record_exception(exc, attributes=attributes)
    return True
