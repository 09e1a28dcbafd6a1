from quiz_bot.services.dispatcher import SessionDispatcher
from quiz_bot.services.quiz_service import (
    Question,
    QuestionBank,
    QuestionLoadError,
    Topic,
    extract_label,
    load_question_bank,
)
from quiz_bot.services.session_store import SessionTable

__all__ = [
    "SessionDispatcher",
    "Question",
    "QuestionBank",
    "QuestionLoadError",
    "Topic",
    "extract_label",
    "load_question_bank",
    "SessionTable",
]
