from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message

router = Router()

HELP_TEXT = (
    "🧪 化学式相对分子质量练习\n\n"
    "发送 /chemistry（或“刷化学”）开始练习，我会给出一个化学式，"
    "你回复它的相对分子质量。\n"
    "• 答对继续下一题，答错练习结束\n"
    "• 发送“退出”随时结束\n"
    "• 长时间不回答会自动结束\n\n"
    "/mystats 查看我的练习记录"
)


@router.message(Command("start", "help"))
async def cmd_start(msg: Message) -> None:
    """Handle /start and /help - explain how practice works."""
    await msg.answer(HELP_TEXT)
