"""Configuration management"""
import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import load_dotenv

from prime_officer.exceptions import ConfigurationError

load_dotenv()

# Storage
# Folder holding cards.json, skill_tree.json, phases.json, reflections.json,
# user_template.json and the saved user.json
DATA_PATH: Path = Path(os.getenv("PRIME_OFFICER_DATA_PATH", "./data"))
USER_FILENAME: str = os.getenv("PRIME_OFFICER_USER_FILE", "user.json")

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Clock
# IANA timezone used to decide what "today" is (e.g. "Europe/Berlin")
TIMEZONE: str = os.getenv("PRIME_OFFICER_TIMEZONE", "UTC")

# Missions
DEFAULT_DAILY_CARD_COUNT: int = int(os.getenv("DEFAULT_DAILY_CARD_COUNT", "5"))
# - 'weighted' (default): weaker domains are drawn more often
# - 'balanced': one osint / academic / physical card, rest random
SELECTION_STRATEGY: str = os.getenv("SELECTION_STRATEGY", "weighted").lower()

SELECTION_STRATEGIES = ("weighted", "balanced")


# Validation
def validate_config() -> None:
    """Validate configuration values"""
    if LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ConfigurationError(f"LOG_LEVEL '{LOG_LEVEL}' is not a valid logging level", config_key="LOG_LEVEL")
    if DEFAULT_DAILY_CARD_COUNT < 1:
        raise ConfigurationError("DEFAULT_DAILY_CARD_COUNT must be at least 1", config_key="DEFAULT_DAILY_CARD_COUNT")
    if SELECTION_STRATEGY not in SELECTION_STRATEGIES:
        raise ConfigurationError(
            f"SELECTION_STRATEGY must be one of {', '.join(SELECTION_STRATEGIES)}",
            config_key="SELECTION_STRATEGY"
        )
    try:
        ZoneInfo(TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown timezone '{TIMEZONE}'", config_key="PRIME_OFFICER_TIMEZONE", cause=e)
