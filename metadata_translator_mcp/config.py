"""Runtime settings read from the environment (and an optional .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_PREFIX = "METADATA_TRANSLATOR_"


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    dll_dir: Path | None = None
    languages_file: Path | None = None
    key_prefix: str = "MT"


def _env_path(name: str) -> Path | None:
    value = os.environ.get(_PREFIX + name, "").strip()
    return Path(value).expanduser() if value else None


def load_settings(dotenv_path: str | os.PathLike | None = None) -> Settings:
    """Build Settings from METADATA_TRANSLATOR_* variables.

    A .env file in the working directory (or ``dotenv_path``) is loaded
    first; variables already set in the environment win.
    """
    load_dotenv(dotenv_path)

    return Settings(
        log_level=os.environ.get(_PREFIX + "LOG_LEVEL", "INFO").upper(),
        dll_dir=_env_path("DLL_DIR"),
        languages_file=_env_path("LANGUAGES_FILE"),
        key_prefix=os.environ.get(_PREFIX + "KEY_PREFIX", "MT") or "MT",
    )
