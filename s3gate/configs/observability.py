"""Observability config."""

import os

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_enable_otel_exporters() -> bool:
    """Get if otel exporters are enabled."""
    return "OTEL_EXPORTER_OTLP_ENDPOINT" in os.environ


class ObservabilityConfig(BaseSettings):
    """Observability configuration.

    Attributes:
        service_namespace (str): The namespace of the service. Defaults to "s3gate".
        log_level (str): Root logger level. Defaults to "INFO".
        enable_otel_tracer (bool): Whether to enable the otel tracer.
            Defaults to whether the "OTEL_EXPORTER_OTLP_ENDPOINT" environment variable is set.
        enable_console_tracer (bool): Whether to enable the console tracer. Defaults to False.
        enable_otel_metrics (bool): Whether to enable the otel metrics. Same default as the tracer.
        enable_console_metrics (bool): Whether to enable the console metrics. Defaults to False.
        enable_otel_logs (bool): Whether to enable the otel logs. Same default as the tracer.
        enable_console_logs (bool): Whether to enable the console logs. Defaults to False.
        suppress_httpx_logs (bool): Whether to suppress the httpx logs. Defaults to True.
        report_unknown_exceptions (bool): Whether to record unknown exceptions on the
            current span and send them to Sentry. Defaults to False.
        sentry_dsn (SecretStr | None): Sentry DSN. Defaults to None.

    """

    model_config = SettingsConfigDict(env_prefix="OBSERVABILITY_", extra="ignore")

    service_namespace: str = "s3gate"
    log_level: str = Field(default="INFO", description="Root logger level.")

    enable_otel_tracer: bool = Field(
        default_factory=get_enable_otel_exporters, description="Whether to enable the otel tracer."
    )
    enable_console_tracer: bool = Field(default=False, description="Whether to enable the console tracer.")

    enable_otel_metrics: bool = Field(
        default_factory=get_enable_otel_exporters, description="Whether to enable the otel metrics."
    )
    enable_console_metrics: bool = Field(default=False, description="Whether to enable the console metrics.")

    enable_otel_logs: bool = Field(
        default_factory=get_enable_otel_exporters, description="Whether to enable the otel logs."
    )
    enable_console_logs: bool = Field(default=False, description="Whether to enable the console logs.")

    suppress_httpx_logs: bool = Field(default=True, description="Whether to suppress the httpx logs.")
    report_unknown_exceptions: bool = Field(
        default=False, description="Whether to report unknown exceptions to otel and Sentry."
    )
    sentry_dsn: SecretStr | None = Field(default=None, description="Sentry DSN. Sentry stays disabled if unset.")
