import asyncio
import logging
import random
import time

from aiogram import Bot, Dispatcher
from aiogram.types import BotCommand, BotCommandScopeDefault

from quiz_bot.config import load_settings
from quiz_bot.handlers import setup_routers
from quiz_bot.services.dispatcher import SessionDispatcher
from quiz_bot.services.quiz_service import load_question_bank
from quiz_bot.services.session_store import SessionTable
from quiz_bot.services.transport import TelegramTransport

BOT_COMMANDS = [
    BotCommand(command="start", description="Начать викторину"),
    BotCommand(command="random", description="Начать викторину в случайном порядке"),
    BotCommand(command="restart", description="Перезапустить викторину"),
    BotCommand(command="help", description="Показать список команд"),
]


async def on_startup(bot: Bot) -> None:
    await bot.set_my_commands(BOT_COMMANDS, scope=BotCommandScopeDefault())
    logging.info("Bot command menu updated")


async def main() -> None:
    settings = load_settings()
    logging.basicConfig(level=settings.log_level)

    bank = load_question_bank(settings.quizzes_dir)

    seed = settings.random_seed if settings.random_seed is not None else time.time_ns()
    rng = random.Random(seed)

    bot = Bot(token=settings.bot_token)
    sessions = SessionDispatcher(
        bank=bank,
        table=SessionTable(),
        transport=TelegramTransport(bot),
        rng=rng,
    )

    dp = Dispatcher(sessions=sessions)
    dp.include_router(setup_routers())
    dp.startup.register(on_startup)

    me = await bot.get_me()
    logging.info(f"Authorized as @{me.username}, {len(bank)} topics available")
    await dp.start_polling(bot)


if __name__ == "__main__":
    asyncio.run(main())
