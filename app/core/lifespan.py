"""Application lifespan: startup and shutdown.

Single place for startup/shutdown wiring (shared HTTP client, SMS
transport, dispatch registry, telemetry, DB engine dispose). No business
logic here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from app.core.config import get_settings
from app.core.dispatch_registry import CampaignDispatchRegistry
from app.infrastructure.external.sms import HttpSmsTransport
from app.infrastructure.persistence.database import dispose_engine, get_engine
from app.shared.telemetry.telemetry import TelemetryConfig, get_telemetry, set_telemetry

logger = logging.getLogger(__name__)


def build_sms_transport(http_client: httpx.AsyncClient | None) -> HttpSmsTransport:
    settings = get_settings()
    return HttpSmsTransport(
        api_key=settings.sms_api_key.get_secret_value() if settings.sms_api_key else None,
        api_secret=(
            settings.sms_api_secret.get_secret_value() if settings.sms_api_secret else None
        ),
        sender_id=settings.sms_sender_id,
        base_url=settings.sms_api_base_url,
        country_code=settings.sms_country_code,
        timeout_seconds=settings.sms_timeout_seconds,
        delivery_report_url=settings.sms_delivery_report_url,
        http_client=http_client,
    )


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Shutdown order: running campaign dispatches cancelled, shared HTTP
    client closed, telemetry flushed, SQL engine disposed.
    """
    settings = get_settings()

    # ---- Startup ----
    # Shared HTTP client for the SMS gateway (connection reuse).
    app.state.http_client = httpx.AsyncClient(timeout=settings.sms_timeout_seconds)
    app.state.sms_transport = build_sms_transport(app.state.http_client)
    app.state.dispatch_registry = CampaignDispatchRegistry()
    if not settings.sms_configured:
        logger.warning("SMS credentials not configured; sends will be recorded as failed")

    if settings.telemetry_enabled:
        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        telemetry.instrument_sqlalchemy(get_engine())
        telemetry.instrument_logging()
        logger.info("Telemetry initialized")

    yield

    # ---- Shutdown ----
    await app.state.dispatch_registry.shutdown()

    if getattr(app.state, "http_client", None) is not None:
        await app.state.http_client.aclose()
        app.state.http_client = None
        logger.info("HTTP client closed")

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)
        logger.info("Telemetry shutdown complete")

    await dispose_engine()
