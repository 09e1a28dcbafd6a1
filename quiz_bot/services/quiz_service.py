import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Union

LABEL_SEPARATORS = (".", ")", ":")

# Telegram limits inline button callback data to 64 bytes
MAX_CALLBACK_BYTES = 64
TOPIC_PREFIX = "topic_"


class QuestionLoadError(Exception):
    """Raised when a question source cannot be read or is malformed."""


def extract_label(text: str) -> str:
    """
    Extract the option label from a prefixed option string.

    "A. Paris" -> "A", "b) London" -> "B", "C:Berlin" -> "C".
    Without a separator the first character is used.
    """
    if not text:
        return ""
    for sep in LABEL_SEPARATORS:
        if sep in text:
            return text.split(sep, 1)[0].strip().upper()
    return text[0].upper()


def _strip_label(text: str) -> str:
    for sep in LABEL_SEPARATORS:
        if sep in text:
            return text.split(sep, 1)[1].strip()
    return text[1:].strip()


@dataclass(frozen=True)
class Question:
    """A single multiple-choice question."""

    id: Union[int, str]
    prompt: str
    options: Mapping[str, str]
    correct: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    def __hash__(self) -> int:
        return hash((self.id, self.prompt, tuple(self.sorted_options()), self.correct))

    def sorted_options(self) -> list[tuple[str, str]]:
        """Options as (label, text) pairs sorted by label."""
        return sorted(self.options.items())

    def is_correct(self, label: str) -> bool:
        """Check a label against the correct answers, ignoring case."""
        label = label.strip().upper()
        return any(label == answer.upper() for answer in self.correct)

    def correct_text(self) -> str:
        """Display text of the first correct answer."""
        return self.options[self.correct[0]]


@dataclass(frozen=True)
class Topic:
    """A named group of questions loaded from one file."""

    name: str
    questions: tuple[Question, ...]
    source: Optional[Path] = None

    def __len__(self) -> int:
        return len(self.questions)


@dataclass(frozen=True)
class QuestionBank:
    """Read-only collection of topics, keyed by topic name."""

    topics: Mapping[str, Topic] = field(default_factory=dict)

    def __contains__(self, name: object) -> bool:
        return name in self.topics

    def __getitem__(self, name: str) -> Topic:
        return self.topics[name]

    def __len__(self) -> int:
        return len(self.topics)

    def get(self, name: str) -> Optional[Topic]:
        return self.topics.get(name)

    def topic_names(self) -> list[str]:
        """Topic names in a stable, sorted order."""
        return sorted(self.topics)


def _parse_options(raw) -> dict[str, str]:
    if isinstance(raw, dict):
        return {str(label).strip().upper(): str(text) for label, text in raw.items()}
    if isinstance(raw, list):
        # Legacy form: ["A. text", "B. text", ...]
        options = {}
        for item in raw:
            if not isinstance(item, str):
                raise QuestionLoadError(f"option must be a string, got {item!r}")
            label = extract_label(item)
            if not label:
                raise QuestionLoadError("empty option")
            if label in options:
                raise QuestionLoadError(f"duplicate option label {label!r}")
            options[label] = _strip_label(item)
        return options
    raise QuestionLoadError(f"options must be a mapping or a list, got {type(raw).__name__}")


def _correct_label(raw: str, options: Mapping[str, str]) -> str:
    # Exact labels such as "10" or "AB" win over prefix extraction
    label = raw.strip().upper()
    if label in options:
        return label
    return extract_label(raw)


def parse_question(record: dict, index: int) -> Question:
    """Build a Question from one JSON record, validating labels."""
    if not isinstance(record, dict):
        raise QuestionLoadError(f"question #{index} is not an object")

    prompt = record.get("question")
    if not isinstance(prompt, str) or not prompt.strip():
        raise QuestionLoadError(f"question #{index} has no text")

    options = _parse_options(record.get("options"))
    if not options:
        raise QuestionLoadError(f"question #{index} has no options")

    raw_correct = record.get("correct_answer")
    if isinstance(raw_correct, str):
        raw_correct = [raw_correct]
    if not isinstance(raw_correct, list) or not raw_correct:
        raise QuestionLoadError(f"question #{index} has no correct answer")

    correct = tuple(_correct_label(str(label), options) for label in raw_correct)
    missing = [label for label in correct if label not in options]
    if missing:
        raise QuestionLoadError(
            f"question #{index}: correct answer {', '.join(missing)} not among options"
        )

    return Question(
        id=record.get("id", index),
        prompt=prompt,
        options=options,
        correct=correct,
    )


def load_topic(path: Path) -> Topic:
    """Load one topic file: a JSON list of question records."""
    try:
        with path.open(encoding="utf-8") as f:
            records = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise QuestionLoadError(f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise QuestionLoadError(f"invalid JSON in {path}: {e}") from e

    if not isinstance(records, list):
        raise QuestionLoadError(f"{path} must contain a list of questions")
    if not records:
        raise QuestionLoadError(f"{path} contains no questions")

    if len(f"{TOPIC_PREFIX}{path.stem}".encode("utf-8")) > MAX_CALLBACK_BYTES:
        raise QuestionLoadError(f"topic name {path.stem!r} is too long for a button")

    questions = tuple(parse_question(record, i) for i, record in enumerate(records))
    return Topic(name=path.stem, questions=questions, source=path)


def load_question_bank(root: Union[str, Path]) -> QuestionBank:
    """
    Load every *.json topic file under root.

    Malformed topic files are logged and skipped. An inaccessible root
    raises QuestionLoadError.
    """
    root = Path(root)
    if not root.exists():
        raise QuestionLoadError(f"quiz directory {root} does not exist")
    if not root.is_dir():
        raise QuestionLoadError(f"{root} is not a directory")

    try:
        files = sorted(
            p for p in root.iterdir() if p.is_file() and p.suffix.lower() == ".json"
        )
    except OSError as e:
        raise QuestionLoadError(f"cannot read quiz directory {root}: {e}") from e

    topics: dict[str, Topic] = {}
    for path in files:
        try:
            topic = load_topic(path)
        except QuestionLoadError as e:
            logging.warning(f"Skipping topic file {path.name}: {e}")
            continue
        topics[topic.name] = topic
        logging.info(f"Loaded topic {topic.name} ({len(topic)} questions) from {path.name}")

    logging.info(f"Loaded {len(topics)} topics from {root}")
    return QuestionBank(topics=topics)
