from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from handheld.repair import RepairSettings


def repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def load_env() -> None:
    # A project-local `.env` wins; otherwise search upward from the working directory.
    root_env = repo_root() / ".env"
    env_path = str(root_env) if root_env.exists() else (find_dotenv(usecwd=True) or str(root_env))
    load_dotenv(env_path)


@dataclass(frozen=True)
class ConsoleSettings:
    max_concurrency: int = 1
    log_level: str = "WARNING"

    def repair_settings(self) -> RepairSettings:
        return RepairSettings(max_concurrency=self.max_concurrency)


def _env_int(name: str, default: int, *, minimum: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def load_settings() -> ConsoleSettings:
    load_env()
    return ConsoleSettings(
        max_concurrency=_env_int("HANDHELD_MAX_CONCURRENCY", 1, minimum=1),
        log_level=(os.getenv("HANDHELD_LOG_LEVEL") or "WARNING").strip().upper(),
    )


def configure_logging(level: str) -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"unknown log level: {level!r}")
    logging.basicConfig(
        level=numeric,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
