import os
from fastapi import FastAPI
from opentelemetry import trace, metrics
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.instrumentation.psycopg2 import Psycopg2Instrumentor
from loguru import logger

# Proxies: they become real once setup_telemetry installs providers,
# and stay no-ops otherwise (tests, local runs without a collector)
tracer = trace.get_tracer("app.engine")
meter = metrics.get_meter("app.engine")

assignments_created = meter.create_counter(
    "engine.assignments.created",
    description="Assignments created by the accept-and-assign transaction",
)
capacity_rejections = meter.create_counter(
    "engine.assignments.capacity_rejected",
    description="Acceptances rejected because the project was full",
)
projects_auto_closed = meter.create_counter(
    "engine.projects.auto_closed",
    description="Projects closed by the deadline monitor",
)


def setup_telemetry(app: FastAPI):
    """
    Initialize OpenTelemetry tracing and metrics when an OTLP endpoint is configured.

    Reads OTEL_EXPORTER_OTLP_ENDPOINT, OTEL_SERVICE_NAME, ENVIRONMENT and
    OTEL_EXPORTER_OTLP_INSECURE. Without an endpoint telemetry stays disabled and
    the engine counters above remain no-ops. Setup failures are logged, never raised.

    Parameters:
        app (FastAPI): Application to instrument (/health is excluded).
    """
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not endpoint:
        logger.warning("No OTLP endpoint configured. Telemetry disabled.")
        return
    try:
        resource = Resource.create(
            {
                "service.name": os.getenv("OTEL_SERVICE_NAME", "deployment-engine"),
                "deployment.environment": os.getenv("ENVIRONMENT", "development"),
            }
        )
        insecure = os.getenv("OTEL_EXPORTER_OTLP_INSECURE", "false").lower() == "true"

        tracer_provider = TracerProvider(resource=resource)
        tracer_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=insecure))
        )
        trace.set_tracer_provider(tracer_provider)

        metric_reader = PeriodicExportingMetricReader(
            OTLPMetricExporter(endpoint=endpoint, insecure=insecure)
        )
        metrics.set_meter_provider(
            MeterProvider(resource=resource, metric_readers=[metric_reader])
        )

        # Instrument once, lifespan can run several times in one process (tests)
        if not getattr(setup_telemetry, "_instrumented", False):
            FastAPIInstrumentor.instrument_app(app, excluded_urls="/health")
            SQLAlchemyInstrumentor().instrument(enable_commenter=True)  # type: ignore
            Psycopg2Instrumentor().instrument(  # type: ignore
                enable_commenter=True, skip_dep_check=True
            )
            setup_telemetry._instrumented = True  # type: ignore

        logger.info("Traces & Metrics Active.")

    except Exception as e:
        logger.error(f"Traces & Metrics Setup Failed: {e}")
