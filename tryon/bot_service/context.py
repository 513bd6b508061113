"""Shared dependencies passed into handler setup functions."""

from __future__ import annotations

from dataclasses import dataclass

from aiogram import Bot

from tryon.bot_service.presenter import TelegramPresenter
from tryon.bot_service.sessions import SessionRegistry, TryOnSession


@dataclass(slots=True)
class BotContext:
    """Container for objects shared across handlers."""

    sessions: SessionRegistry

    def session_for(self, bot: Bot, user_id: int, chat_id: int) -> TryOnSession:
        """Return the user's session, wiring a presenter for the chat on first use."""

        return self.sessions.get(user_id, lambda: TelegramPresenter(bot, chat_id))
