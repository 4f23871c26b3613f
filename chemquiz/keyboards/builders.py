from aiogram.types import KeyboardButton, ReplyKeyboardMarkup, ReplyKeyboardRemove

EXIT_LABEL = "退出"


def build_exit_keyboard(label: str = EXIT_LABEL) -> ReplyKeyboardMarkup:
    """Build the keyboard shown while a practice session is running."""
    return ReplyKeyboardMarkup(
        keyboard=[[KeyboardButton(text=label)]],
        resize_keyboard=True,
        input_field_placeholder="输入相对分子质量",
    )


def remove_keyboard() -> ReplyKeyboardRemove:
    """Hide the exit keyboard once the session is over."""
    return ReplyKeyboardRemove()
