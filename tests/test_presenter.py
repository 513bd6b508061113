"""Tests for rendering workflow states into Telegram messages."""

from __future__ import annotations

import pytest
import pytest_mock
from aiogram.types import BufferedInputFile

from tryon.bot_service import keyboards
from tryon.bot_service.presenter import (
    GARMENT_PROMPT,
    GENERATING_TEXT,
    PREMIUM_ACTIVE,
    SUBJECT_PROMPT,
    SUBSCRIPTION_OFFER,
    TelegramPresenter,
    quota_banner,
)
from tryon.entitlement import EntitlementState
from tryon.workflow import WorkflowState, WorkflowStep


@pytest.fixture
def bot(mocker: pytest_mock.MockerFixture):
    return mocker.AsyncMock()


@pytest.mark.asyncio
async def test_initial_state_prompts_for_subject(bot) -> None:
    presenter = TelegramPresenter(bot, chat_id=42)

    await presenter.state_changed(WorkflowState(), EntitlementState())

    chat_id, text = bot.send_message.await_args.args
    assert chat_id == 42
    assert SUBJECT_PROMPT in text
    assert "3" in text
    assert bot.send_message.await_args.kwargs["reply_markup"] is None


@pytest.mark.asyncio
async def test_subject_present_offers_next_button(bot) -> None:
    presenter = TelegramPresenter(bot, chat_id=42)

    await presenter.state_changed(WorkflowState(subject_image=b"A"), EntitlementState())

    assert bot.send_message.await_args.kwargs["reply_markup"] is keyboards.NEXT_KEYBOARD


@pytest.mark.asyncio
async def test_error_is_rendered_before_garment_prompt(bot) -> None:
    presenter = TelegramPresenter(bot, chat_id=1)
    state = WorkflowState(
        step=WorkflowStep.AWAITING_GARMENT_IMAGE,
        subject_image=b"A",
        last_error="x",
    )

    await presenter.state_changed(state, EntitlementState())

    text = bot.send_message.await_args.args[1]
    assert text.index("x") < text.index(GARMENT_PROMPT)


@pytest.mark.asyncio
async def test_generating_hides_quota_banner(bot) -> None:
    presenter = TelegramPresenter(bot, chat_id=1)
    state = WorkflowState(step=WorkflowStep.GENERATING, subject_image=b"A", garment_image=b"B")

    await presenter.state_changed(state, EntitlementState())

    assert bot.send_message.await_args.args[1] == GENERATING_TEXT


@pytest.mark.asyncio
async def test_result_is_sent_as_photo(bot) -> None:
    presenter = TelegramPresenter(bot, chat_id=7)
    state = WorkflowState(
        step=WorkflowStep.SHOWING_RESULT,
        subject_image=b"A",
        garment_image=b"B",
        result_image=b"C",
    )

    await presenter.state_changed(state, EntitlementState(free_attempts_used=1))

    bot.send_message.assert_not_awaited()
    chat_id, photo = bot.send_photo.await_args.args
    assert chat_id == 7
    assert isinstance(photo, BufferedInputFile)
    assert photo.data == b"C"


@pytest.mark.asyncio
async def test_quota_exceeded_sends_subscription_offer(bot) -> None:
    presenter = TelegramPresenter(bot, chat_id=3)

    await presenter.quota_exceeded(EntitlementState(free_attempts_used=3))

    bot.send_message.assert_awaited_once_with(3, SUBSCRIPTION_OFFER, reply_markup=keyboards.SUBSCRIBE_KEYBOARD)


def test_quota_banner_hidden_for_premium() -> None:
    assert quota_banner(EntitlementState(is_premium=True)) is None
    assert "1" in quota_banner(EntitlementState(free_attempts_used=2))


@pytest.mark.asyncio
async def test_repeated_result_push_does_not_resend_photo(bot) -> None:
    presenter = TelegramPresenter(bot, chat_id=7)
    state = WorkflowState(
        step=WorkflowStep.SHOWING_RESULT,
        subject_image=b"A",
        garment_image=b"B",
        result_image=b"C",
    )

    await presenter.state_changed(state, EntitlementState(free_attempts_used=3))
    await presenter.state_changed(state, EntitlementState(free_attempts_used=3, is_premium=True))

    bot.send_photo.assert_awaited_once()
    bot.send_message.assert_awaited_once_with(7, PREMIUM_ACTIVE)


@pytest.mark.asyncio
async def test_new_result_after_reset_is_sent_again(bot) -> None:
    presenter = TelegramPresenter(bot, chat_id=7)
    first = WorkflowState(step=WorkflowStep.SHOWING_RESULT, subject_image=b"A", garment_image=b"B", result_image=b"C")
    second = WorkflowState(step=WorkflowStep.SHOWING_RESULT, subject_image=b"A", garment_image=b"B", result_image=b"D")

    await presenter.state_changed(first, EntitlementState())
    await presenter.state_changed(WorkflowState(), EntitlementState())
    await presenter.state_changed(second, EntitlementState())

    assert bot.send_photo.await_count == 2
