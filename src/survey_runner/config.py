"""Runner configuration — reads process settings from environment variables.

All settings have defaults suitable for running from a survey's working
directory.  Command-line flags override them.  The survey itself (URL,
questions, weights, rules) lives in the config file, not here.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() not in ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class RunnerSettings:
    """Immutable runner configuration read from environment at startup."""

    # Files
    config_path: str = "config.json"
    structure_path: str = "survey_structure.json"
    capture_path: str = "captured_request.json"

    # Browser
    headless: bool = True

    # Logging
    log_level: str = "INFO"

    # Random seed for reproducible answer streams (None = system entropy)
    seed: int | None = None


def load_settings() -> RunnerSettings:
    """Build settings from ``SURVEY_*`` environment variables."""
    raw_seed = os.getenv("SURVEY_SEED")

    return RunnerSettings(
        config_path=os.getenv("SURVEY_CONFIG_PATH", "config.json"),
        structure_path=os.getenv("SURVEY_STRUCTURE_PATH", "survey_structure.json"),
        capture_path=os.getenv("SURVEY_CAPTURE_PATH", "captured_request.json"),
        headless=_env_flag("SURVEY_HEADLESS", "1"),
        log_level=os.getenv("SURVEY_LOG_LEVEL", "INFO").upper(),
        seed=int(raw_seed) if raw_seed else None,
    )
