import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

# Class attributes below read the environment at import time.
load_dotenv(BASE_DIR / ".env")


def _default_sqlite_uri() -> str:
    instance_path = BASE_DIR / "instance"
    instance_path.mkdir(exist_ok=True)
    return f"sqlite:///{instance_path / 'edura.db'}"


class Config:
    """Base configuration shared across environments."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-change-me")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", _default_sqlite_uri())
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_TIME_LIMIT = None

    # Completion service. The key is the only secret; everything else has a default.
    COMPLETION_API_KEY = os.environ.get("OPENAI_API_KEY")
    COMPLETION_MODEL = os.environ.get("COMPLETION_MODEL", "gpt-4o-mini")
    COMPLETION_API_BASE = os.environ.get("LLM_API_BASE")
    COMPLETION_MAX_TOKENS = int(os.environ.get("COMPLETION_MAX_TOKENS", "8192"))


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    WTF_CSRF_ENABLED = False
    COMPLETION_API_KEY = None
    COMPLETION_API_BASE = None
