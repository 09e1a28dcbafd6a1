from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton

from quiz_bot.services.quiz_machine import ORDER_PREFIX, TOPIC_PREFIX
from quiz_bot.states import OrderMode

# Order display names (Russian)
ORDERS = {
    OrderMode.ORDERED: "Упорядоченный",
    OrderMode.RANDOM: "Случайный",
}


def build_topics_keyboard(names: list[str]) -> InlineKeyboardMarkup:
    """Build keyboard for topic selection."""
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text=name, callback_data=f"{TOPIC_PREFIX}{name}")]
            for name in names
        ]
    )


def build_order_keyboard() -> InlineKeyboardMarkup:
    """Build keyboard for question order selection."""
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(
                    text=title, callback_data=f"{ORDER_PREFIX}{mode.value}"
                )
            ]
            for mode, title in ORDERS.items()
        ]
    )


def build_answers_keyboard(labels: list[str]) -> InlineKeyboardMarkup:
    """Build keyboard for answer options, one button per label in a single row."""
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text=label, callback_data=label) for label in labels]
        ]
    )
