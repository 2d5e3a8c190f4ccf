"""Application assembly."""

import httpx
from dishka import AsyncContainer, make_async_container
from fastapi import FastAPI

from s3gate.configs.app import AppConfig
from s3gate.dependencies.dishka.configs import ConfigProvider
from s3gate.dependencies.dishka.s3 import S3Provider
from s3gate.entrypoints.fastapi import FastAPIEntrypoint
from s3gate.entrypoints.plugins.fastapi.cors import FastAPICORSMiddlewarePlugin
from s3gate.entrypoints.plugins.fastapi.dishka import FastAPIDishkaPlugin
from s3gate.entrypoints.plugins.fastapi.exceptions import FastAPIExceptionHandlersPlugin
from s3gate.entrypoints.plugins.fastapi.observability import FastAPIObservabilityPlugin
from s3gate.entrypoints.plugins.fastapi.storage import FastAPIStoragePlugin
from s3gate.observability.setupper import ObservabilitySetupper

SERVICE_NAME = "s3gate"


def build_container(config: AppConfig, transport: httpx.AsyncBaseTransport | None = None) -> AsyncContainer:
    """Build the dependency container.

    Args:
        config: The application config.
        transport: Optional httpx transport for the S3 client.

    """
    return make_async_container(ConfigProvider(config), S3Provider(transport))


def setup_observability(config: AppConfig) -> ObservabilitySetupper:
    """Setup logging, tracing, metrics and Sentry, and instrument httpx."""
    return (
        ObservabilitySetupper(config.observability, service_name=SERVICE_NAME)
        .setup_logging()
        .setup_tracing()
        .setup_metrics()
        .setup_sentry()
        .instrument_httpx()
    )


def build_entrypoint(
    config: AppConfig,
    container: AsyncContainer,
    observability: ObservabilitySetupper | None = None,
) -> FastAPIEntrypoint:
    """Build the FastAPI entrypoint with all plugins applied.

    Args:
        config: The application config.
        container: The dependency container, see `build_container`.
        observability: The observability setupper. FastAPI is not instrumented if None.

    """
    entrypoint = (
        FastAPIEntrypoint(app=FastAPI(title=SERVICE_NAME), server_config=config.server)
        .use_plugin(FastAPIDishkaPlugin(container))
        .use_plugin(
            FastAPIExceptionHandlersPlugin(
                observe_unknown_exceptions=config.observability.report_unknown_exceptions,
            )
        )
        .use_plugin(FastAPICORSMiddlewarePlugin(config.cors))
        .use_plugin(FastAPIStoragePlugin(config.storage_api))
    )
    if observability is not None:
        entrypoint.use_plugin(FastAPIObservabilityPlugin(observability))
    return entrypoint


def build_app(config: AppConfig, container: AsyncContainer) -> FastAPI:
    """Build the FastAPI application without observability."""
    return build_entrypoint(config, container).get_app()
