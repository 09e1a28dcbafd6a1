import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv  # pip install python-dotenv

ROOT_DIR = Path(__file__).parent.parent


@dataclass(frozen=True)
class Settings:
    bot_token: str
    quizzes_dir: Path
    log_level: str = "INFO"
    random_seed: Optional[int] = None
    env: str = "dev"


def _token_for(env: str) -> Optional[str]:
    specific = os.getenv("BOT_TOKEN_PROD") if env == "prod" else os.getenv("BOT_TOKEN_DEV")
    return specific or os.getenv("TELEGRAM_BOT_TOKEN") or os.getenv("BOT_TOKEN")


def load_settings() -> Settings:
    """Read settings from the environment and the .env file. Fails without a token."""
    # .env file name can be overridden, defaults to .env in the project root
    env_file = os.getenv("ENV_FILE", ".env")
    load_dotenv(ROOT_DIR / env_file)

    env = os.getenv("ENV", "dev").lower()
    bot_token = _token_for(env)
    if not bot_token:
        raise RuntimeError(f"Bot token is not set for ENV={env}")

    seed = os.getenv("RANDOM_SEED")
    return Settings(
        bot_token=bot_token,
        quizzes_dir=Path(os.getenv("QUIZZES_DIR", "quizzes")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        random_seed=int(seed) if seed else None,
        env=env,
    )
