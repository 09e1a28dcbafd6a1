"""
Pytest configuration and shared fixtures for quiz_bot tests.
"""

import json
import random

import pytest

from quiz_bot.services.quiz_service import Question, QuestionBank, Topic


def make_topic(name: str, size: int) -> Topic:
    """Topic whose question i has prompt "Q<i>" and correct answer "A"."""
    questions = tuple(
        Question(
            id=i,
            prompt=f"Q{i}",
            options={"B": f"wrong {i}", "A": f"right {i}", "C": f"other {i}"},
            correct=("A",),
        )
        for i in range(size)
    )
    return Topic(name=name, questions=questions)


class RecordingTransport:
    """Transport that records every effect it is asked to deliver."""

    def __init__(self) -> None:
        self.sent = []

    async def send(self, chat_id, effect) -> None:
        self.sent.append((chat_id, effect))


@pytest.fixture
def bank() -> QuestionBank:
    return QuestionBank(
        topics={
            "linux": make_topic("linux", 3),
            "networking": make_topic("networking", 1),
            "empty": Topic(name="empty", questions=()),
        }
    )


@pytest.fixture
def empty_bank() -> QuestionBank:
    return QuestionBank(topics={})


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def write_topic(tmp_path):
    """Write a topic file into tmp_path and return its path."""

    def _write(name: str, payload):
        path = tmp_path / name
        if isinstance(payload, str):
            path.write_text(payload, encoding="utf-8")
        else:
            path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        return path

    return _write
