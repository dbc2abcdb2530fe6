"""Runtime settings read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

DEFAULT_CORS_ORIGINS: Tuple[str, ...] = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
)


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)
    # advisory presets used when a goal request leaves inflationRate empty
    retirement_inflation: float = 0.04
    education_inflation: float = 0.08


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got {raw!r}") from exc


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from FINPLAN_* environment variables.

    Unset variables keep their defaults; a malformed number is a startup error
    rather than something to silently ignore. Reading the process environment
    first loads a .env file found from the working directory upwards; variables
    already set win over the file.
    """
    if env is None:
        load_dotenv(find_dotenv(usecwd=True))
        env = os.environ

    origins_raw = env.get("FINPLAN_CORS_ORIGINS", "")
    origins = tuple(origin.strip() for origin in origins_raw.split(",") if origin.strip())

    return Settings(
        log_level=env.get("FINPLAN_LOG_LEVEL", "INFO").upper(),
        cors_origins=origins or DEFAULT_CORS_ORIGINS,
        retirement_inflation=_env_float(env, "FINPLAN_DEFAULT_RETIREMENT_INFLATION", 0.04),
        education_inflation=_env_float(env, "FINPLAN_DEFAULT_EDUCATION_INFLATION", 0.08),
    )
