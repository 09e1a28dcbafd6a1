import logging
import re
from typing import Optional

from aiogram import Bot
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import InlineKeyboardMarkup

from quiz_bot.keyboards import (
    build_answers_keyboard,
    build_order_keyboard,
    build_topics_keyboard,
)
from quiz_bot.services.quiz_machine import (
    Effect,
    ShowCompletion,
    ShowError,
    ShowFeedback,
    ShowHelp,
    ShowOrderChoice,
    ShowQuestion,
    ShowTopicList,
)

MAX_MESSAGE_LENGTH = 4000


def escape_md(text: str) -> str:
    """Escape special characters for MarkdownV2."""
    return re.sub(r"([_*\[\]()~`>#+\-=|{}.!\\])", r"\\\1", text)


def strip_md(text: str) -> str:
    """Undo MarkdownV2 escaping and drop bold/italic markers."""
    return re.sub(r"\\(.)|[*_]", lambda m: m.group(1) or "", text)


def format_question(effect: ShowQuestion) -> str:
    lines = effect.prompt.splitlines() or [""]
    text = f"❓ _Вопрос {effect.number} из {effect.total}_\n\n*{escape_md(lines[0])}*"
    if len(lines) > 1:
        text += "\n" + "\n".join(escape_md(line) for line in lines[1:])
    text += "\n\n" + "\n".join(
        f"{escape_md(label)}\\. {escape_md(option)}" for label, option in effect.options
    )
    return text


def format_feedback(effect: ShowFeedback) -> str:
    if effect.correct:
        text = "Правильно\\! 👍\n"
    else:
        text = (
            "Неправильно\\. ❌\n"
            f"Правильный ответ: *{escape_md(effect.correct_label)}*: "
            f"{escape_md(effect.correct_text)}\n"
        )
    return text + f"Ваш текущий счёт: {effect.score}/{effect.total}"


def render(effect: Effect) -> tuple[str, Optional[InlineKeyboardMarkup]]:
    """Turn an effect into MarkdownV2 text and an optional inline keyboard."""
    if isinstance(effect, ShowTopicList):
        return "Выберите тему для викторины:", build_topics_keyboard(list(effect.names))
    if isinstance(effect, ShowOrderChoice):
        return "Выберите порядок вопросов:", build_order_keyboard()
    if isinstance(effect, ShowQuestion):
        return format_question(effect), build_answers_keyboard(effect.labels)
    if isinstance(effect, ShowFeedback):
        return format_feedback(effect), None
    if isinstance(effect, ShowCompletion):
        return (
            "🏁 *Поздравляем\\! Вы завершили викторину\\.*\n"
            f"Ваш итоговый счёт: *{effect.score}*/*{effect.total}*",
            None,
        )
    if isinstance(effect, ShowError):
        return f"⚠️ {escape_md(effect.message)}", None
    if isinstance(effect, ShowHelp):
        return escape_md(effect.text), None
    raise TypeError(f"Unsupported effect: {effect!r}")


class TelegramTransport:
    """Delivers effects to a chat through the Telegram Bot API."""

    def __init__(self, bot: Bot) -> None:
        self.bot = bot

    async def send(self, chat_id: int, effect: Effect) -> None:
        text, keyboard = render(effect)
        try:
            await self.bot.send_message(
                chat_id, text, reply_markup=keyboard, parse_mode=ParseMode.MARKDOWN_V2
            )
        except TelegramBadRequest as e:
            logging.warning(f"Error sending {type(effect).__name__}: {e}")
            # Fallback to plain text
            await self.bot.send_message(
                chat_id,
                strip_md(text)[:MAX_MESSAGE_LENGTH],
                reply_markup=keyboard,
                parse_mode=None,
            )
