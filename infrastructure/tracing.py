"""
Span tracing for the multi-step flows (checkout, listing creation, trust scoring).

Spans go to the console exporter when TRACING_ENABLED is set. Until
configure_tracing runs, the OpenTelemetry API hands out no-op tracers, so
services can create spans unconditionally.
"""

import logging

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "campus-marketplace"

_provider = None


def configure_tracing(enabled: bool, service_name: str = DEFAULT_SERVICE_NAME):
    """Install the console-exporting provider once per process."""
    global _provider

    if not enabled:
        logger.info("Tracing disabled")
        return None
    if _provider is not None:
        return _provider

    provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: service_name}))
    provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)
    _provider = provider
    logger.info(f"Tracing enabled for {service_name}")
    return provider


def get_tracer(name: str) -> trace.Tracer:
    return trace.get_tracer(name)
