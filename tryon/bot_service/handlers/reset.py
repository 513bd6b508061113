"""Handlers that restart the workflow from the first step."""

from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message

from tryon.bot_service.context import BotContext
from tryon.bot_service.keyboards import RESET_CALLBACK


def setup(router: Router, context: BotContext) -> None:
    """Register /reset command and the "try another" button."""

    @router.message(Command("reset"))
    async def handle_reset(message: Message) -> None:
        session = context.session_for(message.bot, message.from_user.id, message.chat.id)
        await session.workflow.reset()

    @router.callback_query(F.data == RESET_CALLBACK)
    async def handle_reset_button(callback: CallbackQuery) -> None:
        await callback.answer()
        session = context.session_for(callback.bot, callback.from_user.id, callback.message.chat.id)
        await session.workflow.reset()
