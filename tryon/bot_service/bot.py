"""Entrypoint for the try-on Telegram bot."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress

from aiogram import Bot, Dispatcher, Router
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from tryon.api import AITunnelClient
from tryon.bot_service.context import BotContext
from tryon.bot_service.handlers import setup_handlers
from tryon.bot_service.sessions import SessionRegistry
from tryon.config.settings import get_settings
from tryon.imggen import GenerationClient
from tryon.monitoring.logging import configure_logging

logger = logging.getLogger(__name__)


async def main() -> None:
    """Initialise dependencies and start polling Telegram."""

    configure_logging()

    settings = get_settings()
    if not settings.bot_token:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is not configured.")
    if not settings.aitunnel_api_key:
        raise RuntimeError("AITUNNEL_API_KEY is not configured.")

    client = AITunnelClient(settings)
    generation_client = GenerationClient(client, settings)
    sessions = SessionRegistry(generation_client, settings.free_attempts)

    bot = Bot(token=settings.bot_token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
    dispatcher = Dispatcher()
    router = Router()
    setup_handlers(router, BotContext(sessions=sessions))
    dispatcher.include_router(router)

    try:
        logger.info("Starting try-on bot polling.")
        await dispatcher.start_polling(bot)
    finally:
        with suppress(Exception):
            await bot.session.close()
        with suppress(Exception):
            await client.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
