import logging
import random
from typing import Optional, Protocol

from quiz_bot.services.quiz_machine import Effect, Event, ShowCompletion, ShowQuestion, transition
from quiz_bot.services.quiz_service import QuestionBank
from quiz_bot.services.session_store import SessionTable
from quiz_bot.states import Phase


class Transport(Protocol):
    async def send(self, chat_id: int, effect: Effect) -> None: ...


class SessionDispatcher:
    """Routes user events through the state machine and delivers the effects."""

    def __init__(
        self,
        bank: QuestionBank,
        table: SessionTable,
        transport: Transport,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.bank = bank
        self.table = table
        self.transport = transport
        self.rng = rng or random.Random()

    async def handle(
        self, user_id: int, event: Event, chat_id: Optional[int] = None
    ) -> list[Effect]:
        """
        Apply one event for a user.

        The user's lock is held only while the session is read, transitioned
        and stored. Effects are sent after it is released.
        """
        async with self.table.lock(user_id):
            previous = self.table.get(user_id)
            result = transition(previous, event, self.bank, self.rng)
            session = result.session
            if session is None or session.phase is Phase.COMPLETED:
                self.table.delete(user_id)
            else:
                self.table.put(user_id, session)

        self._log_progress(user_id, previous, session, result.effects)
        await self.deliver(chat_id if chat_id is not None else user_id, result.effects)
        return result.effects

    async def deliver(self, chat_id: int, effects: list[Effect]) -> None:
        for effect in effects:
            try:
                await self.transport.send(chat_id, effect)
            except Exception as e:
                logging.warning(
                    f"Failed to deliver {type(effect).__name__} to chat {chat_id}: {e}"
                )

    def _log_progress(self, user_id: int, previous, session, effects: list[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, ShowCompletion):
                logging.info(
                    f"User {user_id} finished the quiz: {effect.score}/{effect.total}"
                )
            elif (
                isinstance(effect, ShowQuestion)
                and effect.number == 1
                and (previous is None or previous.phase is not Phase.IN_PROGRESS)
            ):
                logging.info(
                    f"User {user_id} started topic {session.topic} ({effect.total} questions)"
                )
