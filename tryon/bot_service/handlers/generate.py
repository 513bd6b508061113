"""Handlers that advance the flow and trigger the try-on generation."""

from __future__ import annotations

import logging

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message

from tryon.bot_service.context import BotContext
from tryon.bot_service.keyboards import GENERATE_CALLBACK, NEXT_CALLBACK
from tryon.bot_service.sessions import TryOnSession
from tryon.workflow import IncompleteInputError, QuotaExceededError

logger = logging.getLogger(__name__)

MISSING_SUBJECT = "ابتدا عکس خود را بفرستید."


def setup(router: Router, context: BotContext) -> None:
    """Register /next and /generate handlers plus their buttons."""

    @router.message(Command("next"))
    async def handle_next(message: Message) -> None:
        session = context.session_for(message.bot, message.from_user.id, message.chat.id)
        if not await session.workflow.advance_to_garment_step():
            await message.answer(MISSING_SUBJECT)

    @router.callback_query(F.data == NEXT_CALLBACK)
    async def handle_next_button(callback: CallbackQuery) -> None:
        session = context.session_for(callback.bot, callback.from_user.id, callback.message.chat.id)
        if await session.workflow.advance_to_garment_step():
            await callback.answer()
        else:
            await callback.answer(MISSING_SUBJECT, show_alert=True)

    @router.message(Command("generate"))
    async def handle_generate(message: Message) -> None:
        session = context.session_for(message.bot, message.from_user.id, message.chat.id)
        error = await _submit(session)
        if error:
            await message.answer(error)

    @router.callback_query(F.data == GENERATE_CALLBACK)
    async def handle_generate_button(callback: CallbackQuery) -> None:
        await callback.answer()
        session = context.session_for(callback.bot, callback.from_user.id, callback.message.chat.id)
        error = await _submit(session)
        if error:
            await callback.message.answer(error)


async def _submit(session: TryOnSession) -> str | None:
    """Run one submission and return a message to show, if any."""

    try:
        await session.workflow.submit_generation()
    except IncompleteInputError as exc:
        return str(exc)
    except QuotaExceededError:
        # the presenter has already sent the subscription offer
        logger.info("User %s hit the free quota.", session.user_id)
    return None
