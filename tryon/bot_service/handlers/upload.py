"""Handlers responsible for subject and garment photo uploads."""

from __future__ import annotations

import logging

from aiogram import F, Router
from aiogram.exceptions import TelegramNetworkError
from aiogram.types import Message

from tryon.bot_service.context import BotContext
from tryon.workflow import WorkflowStep

logger = logging.getLogger(__name__)


def setup(router: Router, context: BotContext) -> None:
    """Register media upload handlers."""

    @router.message(F.photo)
    async def handle_photo(message: Message) -> None:
        session = context.session_for(message.bot, message.from_user.id, message.chat.id)
        step = session.workflow.state.step
        if step is WorkflowStep.GENERATING:
            await message.answer("لطفاً تا آماده شدن نتیجه صبر کنید.")
            return
        if step is WorkflowStep.SHOWING_RESULT:
            await message.answer("برای امتحان لباس دیگر از دستور /reset استفاده کنید.")
            return

        file = message.photo[-1]
        try:
            file_info = await message.bot.get_file(file.file_id)
            file_stream = await message.bot.download_file(file_info.file_path)
        except TelegramNetworkError:
            logger.warning("Failed to download photo for user %s.", message.from_user.id)
            await message.answer("دریافت عکس از سرورهای تلگرام ممکن نشد. دوباره تلاش کنید.")
            return

        data = file_stream.read()
        file_stream.close()

        if step is WorkflowStep.AWAITING_SUBJECT_IMAGE:
            await session.workflow.provide_subject_image(data)
        else:
            await session.workflow.provide_garment_image(data)
