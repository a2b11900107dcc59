"""
OpenTelemetry provider setup for sqlite-storage.

Spans are always recorded once tracing is initialized; they are only
exported when an OTLP endpoint or the console exporter is configured.
A host application that installed its own TracerProvider first keeps it,
and store spans flow into that provider instead.

Environment variables (read by TracingConfig.from_env):
    OTLP_ENDPOINT: OTLP gRPC collector, e.g. "localhost:4317" (default: none)
    TRACE_CONSOLE: "true" to print finished spans to stdout
    TRACE_SAMPLING_RATIO: fraction of root spans to sample, 0.0-1.0 (default 1.0)
"""

import logging
import os
from dataclasses import dataclass

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

logger = logging.getLogger(__name__)

INSTRUMENTATION_NAME = "sqlite_storage"

_provider: TracerProvider | None = None


@dataclass
class TracingConfig:
    service_name: str = "sqlite-storage"
    otlp_endpoint: str | None = None
    console_export: bool = False
    sampling_ratio: float = 1.0

    @classmethod
    def from_env(cls) -> "TracingConfig":
        ratio = 1.0
        raw = os.getenv("TRACE_SAMPLING_RATIO")
        if raw is not None:
            try:
                ratio = min(1.0, max(0.0, float(raw)))
            except ValueError:
                logger.warning(f"Invalid TRACE_SAMPLING_RATIO={raw!r}, sampling every trace")

        return cls(
            otlp_endpoint=os.getenv("OTLP_ENDPOINT") or None,
            console_export=os.getenv("TRACE_CONSOLE", "").lower() == "true",
            sampling_ratio=ratio,
        )


def _add_exporters(provider: TracerProvider, config: TracingConfig) -> list[str]:
    exporters = []

    if config.otlp_endpoint:
        try:
            exporter = OTLPSpanExporter(endpoint=config.otlp_endpoint, insecure=True)
        except Exception as e:
            logger.warning(f"OTLP exporter unavailable for {config.otlp_endpoint}: {e}")
        else:
            provider.add_span_processor(BatchSpanProcessor(exporter))
            exporters.append(f"otlp({config.otlp_endpoint})")

    if config.console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        exporters.append("console")

    return exporters


def initialize_tracing(config: TracingConfig | None = None) -> trace.Tracer:
    """
    Install a TracerProvider for sqlite-storage spans.

    Args:
        config: Tracing settings (default: TracingConfig.from_env())

    Returns:
        The sqlite_storage tracer
    """
    global _provider

    if _provider is not None:
        logger.warning("Tracing already initialized")
        return trace.get_tracer(INSTRUMENTATION_NAME)

    config = config or TracingConfig.from_env()
    provider = TracerProvider(
        resource=Resource(attributes={SERVICE_NAME: config.service_name}),
        sampler=ParentBased(TraceIdRatioBased(config.sampling_ratio)),
    )
    exporters = _add_exporters(provider, config)

    trace.set_tracer_provider(provider)
    _provider = provider

    logger.info(
        f"Tracing initialized for {config.service_name} "
        f"(sampling={config.sampling_ratio}, exporters={', '.join(exporters) or 'none'})"
    )
    return trace.get_tracer(INSTRUMENTATION_NAME)


def get_tracer() -> trace.Tracer:
    """Return the sqlite_storage tracer, initializing tracing on first use."""
    if _provider is None:
        return initialize_tracing()
    return trace.get_tracer(INSTRUMENTATION_NAME)


def shutdown_tracing() -> None:
    """Flush pending spans and shut the provider down."""
    global _provider

    if _provider is None:
        return

    try:
        _provider.shutdown()
        logger.info("Tracing shutdown complete")
    except Exception as e:
        logger.error(f"Error during tracing shutdown: {e}")
    finally:
        _provider = None
