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
from sqlalchemy import Engine
from loguru import logger


def setup_telemetry(app: FastAPI, engine: Engine):
    """
    Initialize OpenTelemetry tracing and metrics when an OTLP endpoint is configured.

    Registers tracer and meter providers exporting over OTLP (OTEL_EXPORTER_OTLP_ENDPOINT,
    OTEL_SERVICE_NAME, ENVIRONMENT, OTEL_EXPORTER_OTLP_INSECURE), then instruments the FastAPI
    app and the database engine once, so every dashboard query shows up as a span under its
    request. The reset job counters declared in `app.jobs.scheduler` are exported through the
    same meter provider. Without an endpoint telemetry stays disabled; setup failures are
    logged but not raised.

    Parameters:
        app (FastAPI): FastAPI application to instrument (excludes /health).
        engine (Engine): Engine serving the metric queries and the reset job.
    """
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not endpoint:
        logger.warning("No endpoint configured. Telemetry disabled.")
        return
    try:
        resource = Resource.create(
            {
                "service.name": os.getenv("OTEL_SERVICE_NAME", "dealboard-analytics"),
                "deployment.environment": os.getenv("ENVIRONMENT", "unexpected"),
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

        # Instrumenting twice would duplicate every span
        if not hasattr(setup_telemetry, "_instrumented"):
            FastAPIInstrumentor.instrument_app(app, excluded_urls="/health")
            SQLAlchemyInstrumentor().instrument(engine=engine, enable_commenter=True)  # type: ignore
            setup_telemetry._instrumented = True  # type: ignore

        logger.info("Traces & Metrics Active.")

    except Exception as e:
        logger.error(f"Traces & Metrics Setup Failed: {e}")
