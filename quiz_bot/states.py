from enum import Enum


class Phase(str, Enum):
    """Lifecycle phases of a user's quiz session."""

    AWAITING_TOPIC = "awaiting_topic"  # User is selecting a topic
    AWAITING_ORDER = "awaiting_order"  # User is selecting question order
    IN_PROGRESS = "in_progress"  # User is answering quiz questions
    COMPLETED = "completed"  # Terminal, never stored


class OrderMode(str, Enum):
    """Question order chosen before the quiz starts."""

    ORDERED = "ordered"
    RANDOM = "random"
