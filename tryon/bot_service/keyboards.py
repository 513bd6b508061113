"""Inline keyboards shown next to the step prompts."""

from __future__ import annotations

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

NEXT_CALLBACK = "next"
GENERATE_CALLBACK = "generate"
RESET_CALLBACK = "reset"
SUBSCRIBE_CALLBACK = "subscribe"


def _single_button(text: str, callback_data: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[[InlineKeyboardButton(text=text, callback_data=callback_data)]],
    )


NEXT_KEYBOARD = _single_button("رفتن به مرحله بعد", NEXT_CALLBACK)
GENERATE_KEYBOARD = _single_button("ایجاد پرو مجازی", GENERATE_CALLBACK)
RESET_KEYBOARD = _single_button("امتحان یک لباس دیگر", RESET_CALLBACK)
SUBSCRIBE_KEYBOARD = _single_button("فعال‌سازی اشتراک ویژه", SUBSCRIBE_CALLBACK)
