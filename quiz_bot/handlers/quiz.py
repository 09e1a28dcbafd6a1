import logging

from aiogram import Router
from aiogram.types import CallbackQuery

from quiz_bot.services.dispatcher import SessionDispatcher
from quiz_bot.services.quiz_machine import parse_payload

router = Router()


@router.callback_query()
async def handle_callback(cb: CallbackQuery, sessions: SessionDispatcher) -> None:
    """Handle topic, order and answer button presses."""
    if not cb.data or cb.message is None:
        await cb.answer("⚠️ Действие устарело. Нажми /start", show_alert=True)
        return

    event = parse_payload(cb.data)
    logging.debug(f"Callback {cb.data!r} from {cb.from_user.id} -> {event}")
    await sessions.handle(cb.from_user.id, event, chat_id=cb.message.chat.id)
    await cb.answer()
