"""Observability setup for the application."""

import logging
import uuid
from typing import Self

import sentry_sdk
from fastapi import FastAPI
from opentelemetry import _logs as logs
from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor, ConsoleLogExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import ConsoleMetricExporter, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import SERVICE_INSTANCE_ID, SERVICE_NAME, SERVICE_NAMESPACE, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from s3gate.configs.observability import ObservabilityConfig

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class ObservabilitySetupper:
    """Observability setupper."""

    def __init__(
        self,
        config: ObservabilityConfig | None = None,
        service_name: str | None = None,
    ) -> None:
        """Initialize the observability setupper.

        Args:
            config: The observability config.
                If None, the default observability config will be used.
            service_name: The name of the service to create the resource with.

        """
        self._config = config or ObservabilityConfig()
        self._resource = Resource.create(
            attributes={SERVICE_INSTANCE_ID: str(uuid.uuid4())}
            | ({SERVICE_NAMESPACE: self._config.service_namespace} if self._config.service_namespace else {})
            | ({SERVICE_NAME: service_name} if service_name else {})
        )

        self._logger_provider: LoggerProvider | None = None
        self._tracer_provider: TracerProvider | None = None
        self._meter_provider: MeterProvider | None = None

    def instrument_httpx(self) -> Self:
        """Instrument httpx."""
        HTTPXClientInstrumentor().instrument()

        logger.info("httpx has been instrumented")

        if self._config.suppress_httpx_logs:
            logging.getLogger("httpx").setLevel(logging.WARNING)
            logging.getLogger("httpcore").setLevel(logging.WARNING)
            logger.info("httpx logs have been suppressed")

        return self

    def instrument_fastapi(self, app: FastAPI) -> Self:
        """Instrument FastAPI."""
        for logger_name in ["uvicorn", "uvicorn.error", "uvicorn.access"]:
            uvicorn_logger = logging.getLogger(logger_name)

            for handler in uvicorn_logger.handlers[:]:
                uvicorn_logger.removeHandler(handler)

            uvicorn_logger.propagate = True

        FastAPIInstrumentor.instrument_app(app)

        logger.info("FastAPI has been instrumented")

        return self

    def setup_logging(self, level: int | str | None = None, formatter: logging.Formatter | None = None) -> Self:
        """Setup logging.

        Adds a console handler to the root logger, sets the root level and
        bridges records to the OpenTelemetry logger provider.

        Args:
            level: The level to set for the root logger.
                Defaults to the configured `log_level`.
            formatter: The formatter to use for the console handler.
                If None, a plain `LOG_FORMAT` formatter is used.

        """
        LoggingInstrumentor().instrument()

        root_logger = logging.getLogger()
        root_logger.setLevel(level or self._config.log_level.upper())

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter or logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(console_handler)

        logger_provider = LoggerProvider(resource=self._resource)

        if self._config.enable_console_logs:
            logger_provider.add_log_record_processor(BatchLogRecordProcessor(ConsoleLogExporter()))
            logger.info("Enabled console logs exporter")

        if self._config.enable_otel_logs:
            logger_provider.add_log_record_processor(BatchLogRecordProcessor(OTLPLogExporter()))
            logger.info("Enabled opentelemetry logs exporter")

        logs.set_logger_provider(logger_provider)

        self._logger_provider = logger_provider

        otel_handler = LoggingHandler(logger_provider=logger_provider)
        root_logger.addHandler(otel_handler)

        logger.info("Logging has been setup")

        return self

    def get_logger_provider(self) -> LoggerProvider | None:
        """Get the logger provider, or None if logging has not been setup."""
        return self._logger_provider

    def setup_tracing(self) -> Self:
        """Setup tracing.

        See `s3gate.configs.observability.ObservabilityConfig` for the exporters.
        """
        tracer_provider = TracerProvider(resource=self._resource)

        if self._config.enable_console_tracer:
            tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
            logger.info("Enabled console span exporter")

        if self._config.enable_otel_tracer:
            tracer_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
            logger.info("Enabled opentelemetry span exporter")

        trace.set_tracer_provider(tracer_provider)

        self._tracer_provider = tracer_provider

        logger.info("Tracing has been setup")

        return self

    def get_tracer_provider(self) -> TracerProvider | None:
        """Get the tracer provider, or None if tracing has not been setup."""
        return self._tracer_provider

    def setup_metrics(self) -> Self:
        """Setup metrics.

        See `s3gate.configs.observability.ObservabilityConfig` for the exporters.
        """
        metric_readers = []

        if self._config.enable_console_metrics:
            metric_readers.append(PeriodicExportingMetricReader(ConsoleMetricExporter()))
            logger.info("Enabled console metrics exporter")

        if self._config.enable_otel_metrics:
            metric_readers.append(PeriodicExportingMetricReader(OTLPMetricExporter()))
            logger.info("Enabled opentelemetry metrics exporter")

        meter_provider = MeterProvider(resource=self._resource, metric_readers=metric_readers)
        metrics.set_meter_provider(meter_provider)

        logger.info("Metrics have been setup")

        self._meter_provider = meter_provider

        return self

    def get_meter_provider(self) -> MeterProvider | None:
        """Get the meter provider, or None if metrics have not been setup."""
        return self._meter_provider

    def setup_sentry(self) -> Self:
        """Initialize Sentry if a DSN is configured."""
        if self._config.sentry_dsn is None:
            logger.info("Sentry DSN is not set, Sentry is disabled")
            return self

        sentry_sdk.init(dsn=self._config.sentry_dsn.get_secret_value())

        logger.info("Sentry has been setup")

        return self
