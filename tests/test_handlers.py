"""
Tests for chemquiz/handlers with mocked aiogram messages.
"""

import pytest
from aiogram.dispatcher.event.bases import SkipHandler
from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import StorageKey
from aiogram.types import ReplyKeyboardMarkup, ReplyKeyboardRemove

from chemquiz.handlers.quiz import cmd_chemistry, handle_answer
from chemquiz.handlers.start import HELP_TEXT, cmd_start
from chemquiz.handlers.stats import cmd_mystats
from chemquiz.services.state_machine import BUSY_TEXT, EXIT_TEXT
from chemquiz.states import PracticeState


class TestQuizHandlers:
    """Tests for the practice handlers."""

    @pytest.mark.asyncio
    async def test_start_sends_question_with_exit_keyboard(self, quiz, make_message):
        msg = make_message("/chemistry")
        await cmd_chemistry(msg, quiz)

        text = msg.answer.await_args.args[0]
        markup = msg.answer.await_args.kwargs["reply_markup"]
        assert text.startswith("题目 #1")
        assert isinstance(markup, ReplyKeyboardMarkup)
        assert markup.keyboard[0][0].text == "退出"
        await quiz.shutdown()

    @pytest.mark.asyncio
    async def test_second_start_is_busy(self, quiz, make_message):
        await cmd_chemistry(make_message("/chemistry"), quiz)
        msg = make_message("刷化学")
        await cmd_chemistry(msg, quiz)
        assert msg.answer.await_args.args[0] == BUSY_TEXT
        await quiz.shutdown()

    @pytest.mark.asyncio
    async def test_answer_keeps_keyboard_while_running(self, quiz, make_message):
        await cmd_chemistry(make_message("/chemistry"), quiz)
        msg = make_message("18")
        await handle_answer(msg, quiz)
        assert "连续正确次数：1" in msg.answer.await_args.args[0]
        assert isinstance(msg.answer.await_args.kwargs["reply_markup"], ReplyKeyboardMarkup)
        await quiz.shutdown()

    @pytest.mark.asyncio
    async def test_exit_removes_keyboard(self, quiz, make_message):
        await cmd_chemistry(make_message("/chemistry"), quiz)
        msg = make_message("退出")
        await handle_answer(msg, quiz)
        assert msg.answer.await_args.args[0].startswith(EXIT_TEXT)
        assert isinstance(msg.answer.await_args.kwargs["reply_markup"], ReplyKeyboardRemove)

    @pytest.mark.asyncio
    async def test_answer_without_session_is_skipped(self, quiz, make_message):
        msg = make_message("18")
        with pytest.raises(SkipHandler):
            await handle_answer(msg, quiz)
        msg.answer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_answers_are_routed_by_fsm_state(self, quiz, make_message):
        context = FSMContext(
            storage=quiz.store.storage,
            key=StorageKey(bot_id=quiz.store.bot_id, chat_id=10, user_id=1),
        )
        event = make_message("18")
        assert not PracticeState.awaiting_answer(event, await context.get_state())

        await cmd_chemistry(make_message("/chemistry"), quiz)
        assert PracticeState.awaiting_answer(event, await context.get_state())

        await handle_answer(make_message("退出"), quiz)
        assert await context.get_state() is None


class TestOtherHandlers:
    """Tests for /start and /mystats."""

    @pytest.mark.asyncio
    async def test_start_shows_help(self, make_message):
        msg = make_message("/start")
        await cmd_start(msg)
        msg.answer.assert_awaited_once_with(HELP_TEXT)

    @pytest.mark.asyncio
    async def test_mystats(self, db, make_message):
        msg = make_message("/mystats", user_id=5)
        await cmd_mystats(msg)
        assert "还没有练习记录" in msg.answer.await_args.args[0]
