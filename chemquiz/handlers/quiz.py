from aiogram import Router, F
from aiogram.dispatcher.event.bases import SkipHandler
from aiogram.filters import Command
from aiogram.types import Message

from chemquiz.keyboards import build_exit_keyboard, remove_keyboard
from chemquiz.services.dispatcher import QuizDispatcher
from chemquiz.states import PracticeState

router = Router()

START_TEXT_TRIGGER = "刷化学"


@router.message(Command("chemistry", "chem"))
@router.message(F.text == START_TEXT_TRIGGER)
async def cmd_chemistry(msg: Message, quiz: QuizDispatcher) -> None:
    """Handle /chemistry - start a practice session."""
    text = await quiz.start_quiz(msg.from_user.id, msg.chat.id)
    await msg.answer(text, reply_markup=build_exit_keyboard(quiz.machine.exit_label))


@router.message(PracticeState.awaiting_answer, F.text)
async def handle_answer(msg: Message, quiz: QuizDispatcher) -> None:
    """Handle an answer, an exit request or any other text during practice."""
    text = await quiz.handle_message(msg.from_user.id, msg.chat.id, msg.text)
    if text is None:
        raise SkipHandler()

    if await quiz.has_session(msg.from_user.id, msg.chat.id):
        markup = build_exit_keyboard(quiz.machine.exit_label)
    else:
        markup = remove_keyboard()
    await msg.answer(text, reply_markup=markup)
