"""
OpenTelemetry tracing for the reservation engine.

Spans come from three places:
- FastAPI auto-instrumentation (one server span per request)
- SQLAlchemy auto-instrumentation (one span per statement, so lock waits and
  serialization failures show up under the request that hit them)
- Manual spans opened by controllers via ``trace.get_tracer(__name__)``

Exporters are chosen from settings: OTLP when OTEL_EXPORTER_OTLP_ENDPOINT is set,
console when OTEL_CONSOLE_EXPORT is true, nothing otherwise.
"""

from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ParentBasedTraceIdRatio

from reservation_engine.platform.config.core_setting import settings


UNTRACED_URLS = 'health,metrics'


class TracingConfig:
    def __init__(
        self,
        *,
        service_name: str,
        otlp_endpoint: str | None = None,
        enable_console: bool | None = None,
        sample_ratio: float | None = None,
    ) -> None:
        self.service_name = service_name
        self.otlp_endpoint = otlp_endpoint or settings.OTEL_EXPORTER_OTLP_ENDPOINT
        self.enable_console = (
            settings.OTEL_CONSOLE_EXPORT if enable_console is None else enable_console
        )
        self.sample_ratio = (
            settings.OTEL_TRACES_SAMPLE_RATIO if sample_ratio is None else sample_ratio
        )
        self._provider: TracerProvider | None = None

    @property
    def exporting(self) -> bool:
        return bool(self.otlp_endpoint) or self.enable_console

    def setup(self) -> None:
        """Install the global tracer provider. Call once per process."""
        resource = Resource(
            attributes={SERVICE_NAME: self.service_name, SERVICE_VERSION: settings.VERSION}
        )
        self._provider = TracerProvider(
            resource=resource, sampler=ParentBasedTraceIdRatio(self.sample_ratio)
        )

        if self.otlp_endpoint:
            self._provider.add_span_processor(
                BatchSpanProcessor(OTLPSpanExporter(endpoint=self.otlp_endpoint))
            )
        if self.enable_console:
            self._provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

        trace.set_tracer_provider(self._provider)

    def instrument_fastapi(self, *, app: Any) -> None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=UNTRACED_URLS)

    def instrument_sqlalchemy(self, *, engine: Any) -> None:
        # AsyncEngine wraps a sync engine; the instrumentor hooks the sync one
        target = getattr(engine, 'sync_engine', engine)
        SQLAlchemyInstrumentor().instrument(engine=target)

    def shutdown(self) -> None:
        if self._provider:
            self._provider.shutdown()
            self._provider = None
