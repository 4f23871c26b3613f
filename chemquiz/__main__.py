import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.exceptions import TelegramAPIError
from aiogram.types import BotCommand, BotCommandScopeDefault

from chemquiz.config import LOG_LEVEL, get_bot_token, load_quiz_settings
from chemquiz.db import init_db
from chemquiz.handlers import setup_routers
from chemquiz.keyboards import remove_keyboard
from chemquiz.services.dispatcher import QuizDispatcher
from chemquiz.services.formula_bank import FormulaBank
from chemquiz.services.result_service import ResultService
from chemquiz.services.session_store import SessionStore
from chemquiz.services.state_machine import QuizStateMachine

logging.basicConfig(level=LOG_LEVEL)


async def on_startup(bot: Bot) -> None:
    await bot.set_my_commands(
        [
            BotCommand(command="chemistry", description="🧪 开始化学式练习"),
            BotCommand(command="mystats", description="📊 我的练习记录"),
            BotCommand(command="help", description="ℹ️ 玩法说明"),
        ],
        scope=BotCommandScopeDefault(),
    )
    logging.info("Bot commands updated")


async def on_shutdown(quiz: QuizDispatcher) -> None:
    await quiz.shutdown()


def build_dispatcher(bot: Bot) -> Dispatcher:
    """Wire the quiz engine into an aiogram dispatcher."""
    settings = load_quiz_settings()
    bank = FormulaBank.load()

    async def notify(chat_id: int, text: str) -> None:
        try:
            await bot.send_message(chat_id, text, reply_markup=remove_keyboard())
        except TelegramAPIError as e:
            logging.warning(f"Failed to send timeout notice to chat {chat_id}: {e}")

    store = SessionStore(bot_id=bot.id)
    machine = QuizStateMachine(
        store,
        bank,
        tolerance=settings.tolerance,
        exit_keywords=settings.exit_keywords,
    )
    quiz = QuizDispatcher(
        machine,
        timeout_ms=settings.timeout_ms,
        notify=notify,
        on_finish=ResultService.on_finish,
    )

    dp = Dispatcher(
        storage=store.storage, events_isolation=store.isolation, quiz=quiz
    )
    dp.include_router(setup_routers())
    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)
    return dp


async def main() -> None:
    init_db()
    bot = Bot(token=get_bot_token())
    dp = build_dispatcher(bot)
    await dp.start_polling(bot)


if __name__ == "__main__":
    asyncio.run(main())
