"""Renders workflow state changes as Telegram messages."""

from __future__ import annotations

import html
import logging

from aiogram import Bot
from aiogram.types import BufferedInputFile

from tryon.bot_service import keyboards
from tryon.entitlement import EntitlementState
from tryon.workflow import WorkflowObserver, WorkflowState, WorkflowStep

logger = logging.getLogger(__name__)

SUBJECT_PROMPT = (
    "مرحله ۱: عکس خود را آپلود کنید.\n"
    "یک عکس واضح از روبرو که تمام بدن شما مشخص باشد بفرستید."
)
SUBJECT_SAVED = "عکس مدل ذخیره شد. می‌توانید عکس دیگری بفرستید یا به مرحله بعد بروید."
GARMENT_PROMPT = (
    "مرحله ۲: عکس لباس را آپلود کنید.\n"
    "عکسی با پس‌زمینه ساده از لباس مورد نظر را انتخاب کنید."
)
GARMENT_SAVED = "عکس لباس ذخیره شد. برای ایجاد پرو مجازی دکمه زیر را بزنید."
GENERATING_TEXT = "در حال ایجاد ظاهر جدید شما...\nاین فرآیند ممکن است چند لحظه طول بکشد."
RESULT_CAPTION = "نتیجه پرو مجازی شما آماده است!"
PREMIUM_ACTIVE = "اشتراک ویژه شما فعال است."
SUBSCRIPTION_OFFER = (
    "آپلودهای رایگان شما تمام شده است.\n"
    "با فعال‌سازی اشتراک ویژه می‌توانید بدون محدودیت لباس‌ها را امتحان کنید."
)


def quota_banner(entitlement: EntitlementState) -> str | None:
    """Return the remaining free attempts line, or ``None`` for premium users."""

    if entitlement.is_premium:
        return None
    return f"شما {entitlement.remaining_free_attempts} آپلود رایگان دیگر دارید."


class TelegramPresenter(WorkflowObserver):
    """Workflow observer bound to one Telegram chat."""

    def __init__(self, bot: Bot, chat_id: int) -> None:
        self._bot = bot
        self._chat_id = chat_id
        self._last_state: WorkflowState | None = None

    async def state_changed(self, state: WorkflowState, entitlement: EntitlementState) -> None:
        previous, self._last_state = self._last_state, state
        if state.step is WorkflowStep.SHOWING_RESULT and state.result_image is not None:
            if state is previous:
                # same result pushed again, e.g. after premium was granted
                if entitlement.is_premium:
                    await self._bot.send_message(self._chat_id, PREMIUM_ACTIVE)
                return
            photo = BufferedInputFile(state.result_image, filename="tryon.png")
            await self._bot.send_photo(
                self._chat_id,
                photo,
                caption=RESULT_CAPTION,
                reply_markup=keyboards.RESET_KEYBOARD,
            )
            return

        lines: list[str] = []
        markup = None
        if state.last_error:
            lines.append(f"<b>خطا</b>\n{html.escape(state.last_error)}")
        if state.step is WorkflowStep.AWAITING_SUBJECT_IMAGE:
            if state.subject_image is None:
                lines.append(SUBJECT_PROMPT)
            else:
                lines.append(SUBJECT_SAVED)
                markup = keyboards.NEXT_KEYBOARD
        elif state.step is WorkflowStep.AWAITING_GARMENT_IMAGE:
            if state.garment_image is None:
                lines.append(GARMENT_PROMPT)
            else:
                lines.append(GARMENT_SAVED)
                markup = keyboards.GENERATE_KEYBOARD
        elif state.step is WorkflowStep.GENERATING:
            lines.append(GENERATING_TEXT)

        banner = quota_banner(entitlement)
        if banner and state.step is not WorkflowStep.GENERATING:
            lines.append(banner)
        await self._bot.send_message(self._chat_id, "\n\n".join(lines), reply_markup=markup)

    async def quota_exceeded(self, entitlement: EntitlementState) -> None:
        logger.info(
            "Offering subscription in chat %s after %s free attempts.",
            self._chat_id,
            entitlement.free_attempts_used,
        )
        await self._bot.send_message(
            self._chat_id,
            SUBSCRIPTION_OFFER,
            reply_markup=keyboards.SUBSCRIBE_KEYBOARD,
        )
