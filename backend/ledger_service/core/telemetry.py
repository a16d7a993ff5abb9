"""OpenTelemetry wiring and the service's own planning and quote metrics."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI
from opentelemetry import metrics, trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.semconv.resource import ResourceAttributes

from ledger_service.config import AppSettings

logger = logging.getLogger(__name__)

METER_NAME = "ledger_service"
_EXPORT_INTERVAL_MS = 15000

_active = False

# Instruments resolve through the global meter provider, so they are no-ops
# until telemetry is enabled.
_meter = metrics.get_meter(METER_NAME)
_plans_built = _meter.create_counter(
    "ledger.plans.built",
    description="Sell plans produced, by plan kind",
)
_plan_items = _meter.create_histogram(
    "ledger.plans.items",
    description="Number of sell recommendations per plan",
)
_quote_lookups = _meter.create_counter(
    "ledger.quotes.lookups",
    description="Finnhub quote lookups, by outcome",
)


def record_plan(kind: str, item_count: int) -> None:
    attributes = {"plan.kind": kind}
    _plans_built.add(1, attributes)
    _plan_items.record(item_count, attributes)


def record_quote_lookup(outcome: str) -> None:
    _quote_lookups.add(1, {"quote.outcome": outcome})


def setup_telemetry(app: FastAPI, settings: AppSettings) -> bool:
    """Export traces, metrics and logs over OTLP when enabled in settings.

    Returns ``True`` when instrumentation is active after the call.
    """

    global _active  # noqa: PLW0603 - single initialisation guard

    if _active:
        return True
    if not settings.telemetry_enabled:
        logger.info("Telemetry disabled via configuration")
        return False

    resource = Resource.create(
        {
            ResourceAttributes.SERVICE_NAME: settings.telemetry_service_name or settings.app_name,
            ResourceAttributes.SERVICE_NAMESPACE: "dividend-ledger",
        }
    )
    exporter_kwargs: dict[str, Any] = {"insecure": settings.telemetry_otlp_insecure}
    if settings.telemetry_otlp_endpoint:
        exporter_kwargs["endpoint"] = settings.telemetry_otlp_endpoint

    tracer_provider = TracerProvider(
        resource=resource,
        sampler=ParentBased(TraceIdRatioBased(settings.telemetry_sample_ratio)),
    )
    tracer_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(**exporter_kwargs)))
    trace.set_tracer_provider(tracer_provider)

    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(**exporter_kwargs),
        export_interval_millis=_EXPORT_INTERVAL_MS,
    )
    meter_provider = MeterProvider(resource=resource, metric_readers=[reader])
    metrics.set_meter_provider(meter_provider)

    log_provider = LoggerProvider(resource=resource)
    log_provider.add_log_record_processor(BatchLogRecordProcessor(OTLPLogExporter(**exporter_kwargs)))
    set_logger_provider(log_provider)
    LoggingInstrumentor().instrument(set_logging_format=False)

    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=tracer_provider,
        meter_provider=meter_provider,
        excluded_urls="health",
    )
    # Finnhub and exchange rate lookups
    HTTPXClientInstrumentor().instrument()

    _active = True
    logger.info(
        "Telemetry exporting to %s (sample ratio %.2f)",
        settings.telemetry_otlp_endpoint or "default OTLP endpoint",
        settings.telemetry_sample_ratio,
    )
    return True


__all__ = ["METER_NAME", "record_plan", "record_quote_lookup", "setup_telemetry"]
