from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message

from chemquiz.services.result_service import ResultService

router = Router()


@router.message(Command("mystats"))
async def cmd_mystats(msg: Message) -> None:
    """Handle /mystats - show the practice history of the user."""
    await msg.answer(ResultService.get_stats_text(msg.from_user.id))
