"""Start command handler."""

from __future__ import annotations

from aiogram import Router
from aiogram.filters import CommandStart
from aiogram.types import Message

from tryon.bot_service.context import BotContext


def setup(router: Router, context: BotContext) -> None:
    """Register /start handler."""

    @router.message(CommandStart())
    async def handle_start(message: Message) -> None:
        await message.answer(
            "سلام! با این ربات می‌توانید لباس‌ها را به صورت مجازی روی عکس خودتان امتحان کنید. "
            "ابتدا عکس خود و سپس عکس لباس را بفرستید.",
        )
        session = context.session_for(message.bot, message.from_user.id, message.chat.id)
        await session.workflow.reset()
