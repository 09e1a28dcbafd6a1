from quiz_bot.keyboards.builders import (
    build_topics_keyboard,
    build_order_keyboard,
    build_answers_keyboard,
)

__all__ = [
    "build_topics_keyboard",
    "build_order_keyboard",
    "build_answers_keyboard",
]
