"""Runtime configuration loaded from the environment.

Values come from process environment variables, optionally seeded from a
``.env`` file in the working directory.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in TRUE_VALUES


@dataclass(frozen=True)
class Settings:
    """Toolkit settings."""

    dataset_root: str = "."
    log_level: str = "WARNING"
    log_json: bool = False
    strict_references: bool = True


def get_settings() -> Settings:
    """Build settings from the environment.

    Environment variables:
        JPDATA_DATASET_ROOT: Directory holding kana/, kanji/ and vocabulary/
        JPDATA_LOG_LEVEL: Log level name (default: WARNING)
        JPDATA_LOG_JSON: Emit JSON log lines when truthy
        JPDATA_STRICT_REFERENCES: Reject dangling attempt references when truthy

    Returns:
        Settings instance
    """
    load_dotenv()

    return Settings(
        dataset_root=os.getenv("JPDATA_DATASET_ROOT", "."),
        log_level=os.getenv("JPDATA_LOG_LEVEL", "WARNING").upper(),
        log_json=_env_flag("JPDATA_LOG_JSON", False),
        strict_references=_env_flag("JPDATA_STRICT_REFERENCES", True),
    )
