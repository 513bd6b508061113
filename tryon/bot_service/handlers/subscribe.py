"""Handler for the subscription offer button."""

from __future__ import annotations

from aiogram import F, Router
from aiogram.types import CallbackQuery

from tryon.bot_service.context import BotContext
from tryon.bot_service.keyboards import SUBSCRIBE_CALLBACK


def setup(router: Router, context: BotContext) -> None:
    """Register the subscribe callback."""

    @router.callback_query(F.data == SUBSCRIBE_CALLBACK)
    async def handle_subscribe(callback: CallbackQuery) -> None:
        session = context.session_for(callback.bot, callback.from_user.id, callback.message.chat.id)
        await callback.answer("اشتراک ویژه فعال شد!")
        await session.workflow.grant_premium()
