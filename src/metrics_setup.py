import os, time
from contextlib import contextmanager
from opentelemetry.metrics import set_meter_provider
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader


def _otlp_headers():
    headers = os.getenv("OTEL_EXPORTER_OTLP_HEADERS")
    if not headers:
        return None
    return dict(h.split("=", 1) for h in headers.split(",") if "=" in h)


def init_metrics(service_name: str):
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    reader = None
    if endpoint:
        exporter = OTLPMetricExporter(endpoint=endpoint, headers=_otlp_headers())
        reader = PeriodicExportingMetricReader(exporter)

    provider = MeterProvider(metric_readers=[reader] if reader else [])
    set_meter_provider(provider)
    meter = provider.get_meter(service_name)

    # core metrics
    select_latency_ms = meter.create_histogram("select_latency_ms", unit="ms", description="Selection latency")
    selected_items = meter.create_histogram("selected_items", description="Items returned per selection")
    gain_evaluations = meter.create_histogram("gain_evaluations", description="Marginal-gain evaluations per selection")
    requests_total = meter.create_counter("requests_total", description="Selection requests processed")
    invalid_total = meter.create_counter("invalid_requests_total", description="Requests rejected as invalid")

    return {
        "select_latency_ms": select_latency_ms,
        "selected_items": selected_items,
        "gain_evaluations": gain_evaluations,
        "requests_total": requests_total,
        "invalid_requests_total": invalid_total,
    }


def record_selection(metrics, result, **attrs):
    metrics["requests_total"].add(1, attributes=attrs)
    metrics["selected_items"].record(len(result.indices), attributes=attrs)
    metrics["gain_evaluations"].record(result.evaluations, attributes=attrs)


@contextmanager
def time_histogram(hist, **attrs):
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt_ms = (time.perf_counter() - t0) * 1000.0
        hist.record(dt_ms, attributes=attrs)
