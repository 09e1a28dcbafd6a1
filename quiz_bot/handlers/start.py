from aiogram import Router, F
from aiogram.filters import Command
from aiogram.types import Message

from quiz_bot.services.dispatcher import SessionDispatcher
from quiz_bot.services.quiz_machine import BeginQuiz, HelpRequested, Restart, UnknownCommand
from quiz_bot.states import OrderMode

router = Router()


@router.message(Command("start"))
async def cmd_start(msg: Message, sessions: SessionDispatcher) -> None:
    """Handle /start command - begin topic selection."""
    await sessions.handle(msg.from_user.id, BeginQuiz(), chat_id=msg.chat.id)


@router.message(Command("random"))
async def cmd_random(msg: Message, sessions: SessionDispatcher) -> None:
    """Handle /random command - begin a quiz with shuffled questions."""
    await sessions.handle(
        msg.from_user.id, BeginQuiz(order=OrderMode.RANDOM), chat_id=msg.chat.id
    )


@router.message(Command("restart"))
async def cmd_restart(msg: Message, sessions: SessionDispatcher) -> None:
    """Handle /restart command - drop the current quiz and start over."""
    await sessions.handle(msg.from_user.id, Restart(), chat_id=msg.chat.id)


@router.message(Command("help"))
async def cmd_help(msg: Message, sessions: SessionDispatcher) -> None:
    await sessions.handle(msg.from_user.id, HelpRequested(), chat_id=msg.chat.id)


@router.message(F.text.startswith("/"))
async def cmd_unknown(msg: Message, sessions: SessionDispatcher) -> None:
    """Handle any other command."""
    name = msg.text.split()[0].lstrip("/")
    await sessions.handle(msg.from_user.id, UnknownCommand(name), chat_id=msg.chat.id)
