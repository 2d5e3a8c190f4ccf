"""Tests for the observability setup."""

import logging
from collections.abc import Iterator

import pytest
import sentry_sdk
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import SERVICE_NAME
from opentelemetry.sdk.trace import TracerProvider
from pydantic import SecretStr

from s3gate.app import setup_observability
from s3gate.configs.app import AppConfig
from s3gate.configs.observability import ObservabilityConfig
from s3gate.configs.s3 import S3Config
from s3gate.observability.setupper import ObservabilitySetupper
from tests.conftest import ACCESS_KEY, BUCKET, ENDPOINT_URL, SECRET_KEY

QUIET_CONFIG = {
    "enable_otel_tracer": False,
    "enable_console_tracer": False,
    "enable_otel_metrics": False,
    "enable_console_metrics": False,
    "enable_otel_logs": False,
    "enable_console_logs": False,
}


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    """Put the root logger and instrumentations back after each test."""
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield
    LoggingInstrumentor().uninstrument()
    HTTPXClientInstrumentor().uninstrument()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def sentry_init_calls(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, object]]:
    """Record `sentry_sdk.init` calls instead of initializing Sentry."""
    calls: list[dict[str, object]] = []
    monkeypatch.setattr(sentry_sdk, "init", lambda **kwargs: calls.append(kwargs))
    return calls


def _shutdown(setupper: ObservabilitySetupper) -> None:
    for provider in (
        setupper.get_logger_provider(),
        setupper.get_tracer_provider(),
        setupper.get_meter_provider(),
    ):
        if provider is not None:
            provider.shutdown()


def test_providers_are_not_set_before_setup() -> None:
    """Test that nothing is created until a setup step runs."""
    setupper = ObservabilitySetupper(ObservabilityConfig(**QUIET_CONFIG))

    assert setupper.get_logger_provider() is None
    assert setupper.get_tracer_provider() is None
    assert setupper.get_meter_provider() is None


def test_setup_without_exporters(sentry_init_calls: list[dict[str, object]]) -> None:
    """Test logging, tracing and metrics setup with every exporter disabled."""
    setupper = (
        ObservabilitySetupper(ObservabilityConfig(**QUIET_CONFIG, log_level="WARNING"), service_name="s3gate")
        .setup_logging()
        .setup_tracing()
        .setup_metrics()
        .setup_sentry()
    )

    logger_provider = setupper.get_logger_provider()
    tracer_provider = setupper.get_tracer_provider()
    assert isinstance(logger_provider, LoggerProvider)
    assert isinstance(tracer_provider, TracerProvider)
    assert isinstance(setupper.get_meter_provider(), MeterProvider)
    assert tracer_provider.resource.attributes[SERVICE_NAME] == "s3gate"
    assert logger_provider.resource.attributes[SERVICE_NAME] == "s3gate"

    root_logger = logging.getLogger()
    assert root_logger.level == logging.WARNING
    assert any(isinstance(handler, LoggingHandler) for handler in root_logger.handlers)

    assert sentry_init_calls == []

    _shutdown(setupper)


def test_sentry_is_initialized_with_dsn(sentry_init_calls: list[dict[str, object]]) -> None:
    """Test that a configured DSN initializes Sentry."""
    dsn = "https://public@sentry.example.com/1"

    ObservabilitySetupper(ObservabilityConfig(**QUIET_CONFIG, sentry_dsn=SecretStr(dsn))).setup_sentry()

    assert sentry_init_calls == [{"dsn": dsn}]


def test_setup_observability(sentry_init_calls: list[dict[str, object]]) -> None:
    """Test the application observability chain."""
    config = AppConfig(
        s3=S3Config(S3_ACCESS_KEY=ACCESS_KEY, S3_SECRET_KEY=SECRET_KEY, endpoint_url=ENDPOINT_URL, bucket=BUCKET),
        observability=ObservabilityConfig(**QUIET_CONFIG),
    )

    setupper = setup_observability(config)

    tracer_provider = setupper.get_tracer_provider()
    assert isinstance(tracer_provider, TracerProvider)
    assert tracer_provider.resource.attributes[SERVICE_NAME] == "s3gate"
    assert logging.getLogger("httpx").level == logging.WARNING
    assert sentry_init_calls == []

    _shutdown(setupper)
