"""Connectivity checks for the external generation service."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from tryon.api import AITunnelClient
from tryon.config.settings import get_settings

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IntegrationCheckResult:
    """Structured result describing the integration check outcome."""

    name: str
    success: bool
    message: str


async def _run_check(
    name: str,
    factory: Callable[[], Awaitable[bool]],
    success_message: str,
) -> IntegrationCheckResult:
    try:
        result = await factory()
    except Exception as exc:
        logger.warning("%s check failed: %s", name, exc)
        return IntegrationCheckResult(name=name, success=False, message=str(exc))

    if result:
        return IntegrationCheckResult(name=name, success=True, message=success_message)
    return IntegrationCheckResult(
        name=name,
        success=False,
        message="Service responded with non-success status.",
    )


async def check_generation_service() -> IntegrationCheckResult:
    """Ping the AITunnel image API and return the result."""

    settings = get_settings()
    if not settings.aitunnel_api_key:
        return IntegrationCheckResult(
            name="AITunnel",
            success=False,
            message="AITUNNEL_API_KEY is not configured.",
        )
    client = AITunnelClient(settings)

    async def _ping() -> bool:
        try:
            return await client.ping()
        finally:
            await client.close()

    return await _run_check(
        name="AITunnel",
        factory=_ping,
        success_message="AITunnel API is reachable.",
    )


async def run_all_checks() -> list[IntegrationCheckResult]:
    """Execute all integration checks concurrently."""

    return list(await asyncio.gather(check_generation_service()))
