"""
Quiz session state machine.

``transition`` takes the current session (or None) and an incoming event and
returns the next session together with the effects to deliver. It never
performs I/O and never raises for user input: every phase and event pair has
a defined result, falling back to an error effect without changing the
session.
"""

import random
from dataclasses import dataclass, field, replace
from typing import Optional, Union

from quiz_bot.services.quiz_service import TOPIC_PREFIX, Question, QuestionBank
from quiz_bot.states import OrderMode, Phase

ORDER_PREFIX = "order_"

HELP_TEXT = (
    "Доступные команды:\n"
    "/start - Начать викторину\n"
    "/random - Начать викторину в случайном порядке\n"
    "/restart - Перезапустить викторину\n"
    "/help - Показать список команд"
)

NO_TOPICS = "Темы не найдены. Пожалуйста, попробуйте позже."
NO_SESSION = "Пожалуйста, начните викторину с помощью команды /start."
UNKNOWN_TOPIC = "Тема «{name}» не найдена. Выберите тему из списка."
EMPTY_TOPIC = "В теме «{name}» нет вопросов. Выберите другую тему."
ALREADY_COMPLETE = "Викторина уже завершена. Начните заново с помощью /start или /random."
UNKNOWN_COMMAND = "Неизвестная команда. Используйте /help для списка доступных команд."

PHASE_HINTS = {
    Phase.AWAITING_TOPIC: "Сначала выберите тему.",
    Phase.AWAITING_ORDER: "Сначала выберите порядок вопросов.",
    Phase.IN_PROGRESS: "Ответьте на текущий вопрос или начните заново с помощью /restart.",
}


# Events


@dataclass(frozen=True)
class BeginQuiz:
    order: Optional[OrderMode] = None  # preset by /random


@dataclass(frozen=True)
class TopicChosen:
    name: str


@dataclass(frozen=True)
class OrderChosen:
    mode: OrderMode


@dataclass(frozen=True)
class AnswerSelected:
    label: str


@dataclass(frozen=True)
class Restart:
    pass


@dataclass(frozen=True)
class HelpRequested:
    pass


@dataclass(frozen=True)
class UnknownCommand:
    name: str


Event = Union[
    BeginQuiz, TopicChosen, OrderChosen, AnswerSelected, Restart, HelpRequested, UnknownCommand
]


# Effects


@dataclass(frozen=True)
class ShowTopicList:
    names: tuple[str, ...]


@dataclass(frozen=True)
class ShowOrderChoice:
    pass


@dataclass(frozen=True)
class ShowQuestion:
    prompt: str
    options: tuple[tuple[str, str], ...]  # (label, text), sorted by label
    number: int  # 1-based
    total: int

    @property
    def labels(self) -> list[str]:
        return [label for label, _ in self.options]


@dataclass(frozen=True)
class ShowFeedback:
    correct: bool
    correct_label: str
    correct_text: str
    score: int
    total: int


@dataclass(frozen=True)
class ShowCompletion:
    score: int
    total: int


@dataclass(frozen=True)
class ShowError:
    message: str


@dataclass(frozen=True)
class ShowHelp:
    text: str


Effect = Union[
    ShowTopicList, ShowOrderChoice, ShowQuestion, ShowFeedback, ShowCompletion, ShowError, ShowHelp
]


@dataclass(frozen=True)
class Session:
    """One user's quiz state. Replaced, never mutated."""

    phase: Phase = Phase.AWAITING_TOPIC
    topic: Optional[str] = None
    order: tuple[int, ...] = ()
    position: int = 0
    score: int = 0
    preset_order: Optional[OrderMode] = None


@dataclass(frozen=True)
class Transition:
    session: Optional[Session]
    effects: list[Effect] = field(default_factory=list)


def parse_payload(data: str) -> Event:
    """Map inline button callback data to an event."""
    if data.startswith(TOPIC_PREFIX):
        return TopicChosen(data[len(TOPIC_PREFIX):])
    if data.startswith(ORDER_PREFIX):
        try:
            return OrderChosen(OrderMode(data[len(ORDER_PREFIX):]))
        except ValueError:
            pass
    return AnswerSelected(data)


def render_question(question: Question, number: int, total: int) -> ShowQuestion:
    return ShowQuestion(
        prompt=question.prompt,
        options=tuple(question.sorted_options()),
        number=number,
        total=total,
    )


def _begin(bank: QuestionBank, preset: Optional[OrderMode] = None) -> Transition:
    if not len(bank):
        return Transition(None, [ShowError(NO_TOPICS)])
    session = Session(phase=Phase.AWAITING_TOPIC, preset_order=preset)
    return Transition(session, [ShowTopicList(tuple(bank.topic_names()))])


def _start_quiz(
    session: Session, mode: OrderMode, bank: QuestionBank, rng: random.Random
) -> Transition:
    topic = bank[session.topic]
    order = list(range(len(topic)))
    if mode is OrderMode.RANDOM:
        rng.shuffle(order)
    session = replace(
        session, phase=Phase.IN_PROGRESS, order=tuple(order), position=0, score=0
    )
    first = topic.questions[order[0]]
    return Transition(session, [render_question(first, 1, len(order))])


def _choose_topic(session: Session, name: str, bank: QuestionBank, rng: random.Random) -> Transition:
    topic = bank.get(name)
    if topic is None:
        return Transition(session, [ShowError(UNKNOWN_TOPIC.format(name=name))])
    if not len(topic):
        return Transition(session, [ShowError(EMPTY_TOPIC.format(name=name))])

    session = replace(session, phase=Phase.AWAITING_ORDER, topic=name)
    if session.preset_order is not None:
        return _start_quiz(session, session.preset_order, bank, rng)
    return Transition(session, [ShowOrderChoice()])


def _answer(session: Session, label: str, bank: QuestionBank) -> Transition:
    topic = bank.get(session.topic)
    if topic is None or not len(topic):
        return Transition(None, [ShowError(NO_SESSION)])

    total = len(session.order)
    if session.position >= total:
        return Transition(None, [ShowError(ALREADY_COMPLETE)])

    question = topic.questions[session.order[session.position]]
    label = label.strip().upper()
    correct = bool(label) and question.is_correct(label)

    session = replace(
        session,
        position=session.position + 1,
        score=session.score + int(correct),
    )
    effects: list[Effect] = [
        ShowFeedback(
            correct=correct,
            correct_label=question.correct[0],
            correct_text=question.correct_text(),
            score=session.score,
            total=total,
        )
    ]

    if session.position == total:
        effects.append(ShowCompletion(score=session.score, total=total))
        return Transition(None, effects)

    following = topic.questions[session.order[session.position]]
    effects.append(render_question(following, session.position + 1, total))
    return Transition(session, effects)


def transition(
    session: Optional[Session],
    event: Event,
    bank: QuestionBank,
    rng: random.Random,
) -> Transition:
    """Compute the next session and the effects for one event."""
    if isinstance(event, HelpRequested):
        return Transition(session, [ShowHelp(HELP_TEXT)])
    if isinstance(event, UnknownCommand):
        return Transition(session, [ShowError(UNKNOWN_COMMAND)])
    if isinstance(event, BeginQuiz):
        return _begin(bank, event.order)
    if isinstance(event, Restart):
        return _begin(bank)

    if session is None:
        return Transition(None, [ShowError(NO_SESSION)])

    if session.phase is Phase.AWAITING_TOPIC and isinstance(event, TopicChosen):
        return _choose_topic(session, event.name, bank, rng)
    if session.phase is Phase.AWAITING_ORDER and isinstance(event, OrderChosen):
        if session.topic not in bank:
            return Transition(None, [ShowError(NO_SESSION)])
        return _start_quiz(session, event.mode, bank, rng)
    if session.phase is Phase.IN_PROGRESS and isinstance(event, AnswerSelected):
        return _answer(session, event.label, bank)

    hint = PHASE_HINTS.get(session.phase, NO_SESSION)
    return Transition(session, [ShowError(hint)])
