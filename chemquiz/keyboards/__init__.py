from chemquiz.keyboards.builders import (
    build_exit_keyboard,
    remove_keyboard,
)

__all__ = [
    "build_exit_keyboard",
    "remove_keyboard",
]
