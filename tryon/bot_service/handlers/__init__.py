"""Register message and command handlers."""

from __future__ import annotations

from aiogram import Router

from tryon.bot_service.context import BotContext

from . import generate, reset, start, subscribe, upload


def setup_handlers(router: Router, context: BotContext) -> None:
    """Attach all handler groups to the provided router."""

    start.setup(router, context)
    reset.setup(router, context)
    upload.setup(router, context)
    generate.setup(router, context)
    subscribe.setup(router, context)
