# settings.py
"""Settings loaded from environment variables (+ optional .env)."""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(override=False)

BASE_DIR = Path(__file__).resolve().parent


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    data_file: Path
    public_dir: Path
    host: str
    port: int
    log_level: str


def load_settings() -> Settings:
    return Settings(
        data_file=_env_path("TODO_DATA_FILE", BASE_DIR / "todos.json"),
        public_dir=_env_path("TODO_PUBLIC_DIR", BASE_DIR / "public"),
        host=os.getenv("TODO_HOST", "127.0.0.1"),
        port=_env_int("TODO_PORT", 3000),
        log_level=os.getenv("TODO_LOG_LEVEL", "INFO").upper(),
    )


@lru_cache()
def get_settings() -> Settings:
    return load_settings()
