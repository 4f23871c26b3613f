from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv  # pip install python-dotenv
import os

# the env file name comes from a variable, .env otherwise
env_file = os.getenv("ENV_FILE", ".env")
load_dotenv(Path(__file__).parent.parent / env_file)

ENV = os.getenv("ENV", "dev").lower()
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DB_PATH = Path(__file__).parent / "data" / "chemquiz.db"
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DB_PATH}")


def get_bot_token() -> str:
    """Token for the current environment; BOT_TOKEN is the fallback."""
    suffix = "PROD" if ENV == "prod" else "DEV"
    token = os.getenv(f"BOT_TOKEN_{suffix}") or os.getenv("BOT_TOKEN")
    if not token:
        raise RuntimeError(f"❌ No bot token configured for ENV={ENV}")
    return token


@dataclass(frozen=True)
class QuizSettings:
    """Tunables of the practice sessions."""

    timeout_ms: int = 300_000
    tolerance: float = 0.01
    exit_keywords: tuple[str, ...] = ("退出", "exit", "quit")

    def __post_init__(self) -> None:
        if self.timeout_ms <= 0:
            raise ValueError(f"QUIZ_TIMEOUT_MS must be positive, got {self.timeout_ms}")
        if not self.tolerance > 0:
            raise ValueError(f"QUIZ_TOLERANCE must be positive, got {self.tolerance}")
        if not self.exit_keywords:
            raise ValueError("QUIZ_EXIT_KEYWORDS must name at least one keyword")


def load_quiz_settings(environ: Optional[dict] = None) -> QuizSettings:
    """Read quiz settings from the environment."""
    env = os.environ if environ is None else environ
    defaults = QuizSettings()

    raw_timeout = env.get("QUIZ_TIMEOUT_MS")
    raw_tolerance = env.get("QUIZ_TOLERANCE")
    raw_keywords = env.get("QUIZ_EXIT_KEYWORDS")

    try:
        timeout_ms = int(raw_timeout) if raw_timeout else defaults.timeout_ms
        tolerance = float(raw_tolerance) if raw_tolerance else defaults.tolerance
    except ValueError as e:
        raise ValueError(f"Invalid quiz setting: {e}") from e

    if raw_keywords:
        keywords = tuple(k.strip() for k in raw_keywords.split(",") if k.strip())
    else:
        keywords = defaults.exit_keywords

    return QuizSettings(timeout_ms=timeout_ms, tolerance=tolerance, exit_keywords=keywords)
