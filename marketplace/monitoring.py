"""Monitoring and observability setup.

Tracer and meter providers are always installed so spans and metrics are
recorded in-process. Exporters are attached only when
``OTEL_EXPORTER_OTLP_ENDPOINT`` is configured, which keeps local runs and
tests free of collector connections.
"""
import logging
from opentelemetry import trace, metrics
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource

from marketplace.config import OTEL_EXPORTER_OTLP_ENDPOINT, SERVICE_NAME

logger = logging.getLogger(__name__)


def init_tracing() -> trace.Tracer:
    """
    Initialize OpenTelemetry tracing.

    Returns:
        Tracer instance
    """
    resource = Resource.create({"service.name": SERVICE_NAME})

    tracer_provider = TracerProvider(resource=resource)
    if OTEL_EXPORTER_OTLP_ENDPOINT:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

        otlp_span_exporter = OTLPSpanExporter(
            endpoint=OTEL_EXPORTER_OTLP_ENDPOINT,
            insecure=True
        )
        tracer_provider.add_span_processor(BatchSpanProcessor(otlp_span_exporter))
        logger.info(f"Tracing initialized with endpoint: {OTEL_EXPORTER_OTLP_ENDPOINT}")
    trace.set_tracer_provider(tracer_provider)

    return trace.get_tracer(__name__)


def init_metrics() -> metrics.Meter:
    """
    Initialize OpenTelemetry metrics.

    Returns:
        Meter instance
    """
    resource = Resource.create({"service.name": SERVICE_NAME})

    metric_readers = []
    if OTEL_EXPORTER_OTLP_ENDPOINT:
        from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter

        otlp_metric_exporter = OTLPMetricExporter(
            endpoint=OTEL_EXPORTER_OTLP_ENDPOINT,
            insecure=True
        )
        metric_readers.append(PeriodicExportingMetricReader(
            otlp_metric_exporter,
            export_interval_millis=5000
        ))
        logger.info("Metrics initialized with OTLP exporter")

    meter_provider = MeterProvider(
        resource=resource,
        metric_readers=metric_readers
    )
    metrics.set_meter_provider(meter_provider)

    return metrics.get_meter(__name__)


tracer = init_tracing()
meter = init_metrics()

# Catalog metrics
catalog_views_counter = meter.create_counter(
    "marketplace.catalog.views",
    description="Catalog listings served, by entity kind",
    unit="1"
)

search_requests_counter = meter.create_counter(
    "marketplace.search.requests",
    description="Search requests by scope",
    unit="1"
)

# Cart metrics
cart_additions_counter = meter.create_counter(
    "marketplace.cart.additions",
    description="Total number of add-to-cart operations",
    unit="1"
)

cart_removals_counter = meter.create_counter(
    "marketplace.cart.removals",
    description="Cart rows removed by users or drained at checkout",
    unit="1"
)

# Order and booking metrics
orders_created_counter = meter.create_counter(
    "marketplace.orders.created",
    description="Total number of orders placed",
    unit="1"
)

order_amount_histogram = meter.create_histogram(
    "marketplace.orders.amount",
    description="Order totals as submitted by the client",
    unit="NGN"
)

bookings_created_counter = meter.create_counter(
    "marketplace.bookings.created",
    description="Total number of service bookings",
    unit="1"
)
