"""
Runtime configuration for the rules engine.

Values come from the environment (optionally seeded from a .env file via
python-dotenv) so the server and the CLI can tune the engine without code
changes:

    RULES_WEAK_MULTIPLIER    factor per Weak instance on outgoing damage (0.75)
    RULES_BREAK_MULTIPLIER   factor per Break instance on incoming damage (1.5)
    RULES_THORNS_ENABLED     reflect Thorns damage to attackers (true)
    RULES_LOG_LEVEL          logging level name for the CLI (INFO)
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

__all__ = ["RulesConfig", "load_config", "DEFAULT_LOG_FORMAT"]

logger = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class RulesConfig:
    """Engine tunables. The defaults are the shipped game balance."""
    weak_multiplier: float = 0.75
    break_multiplier: float = 1.5
    thorns_enabled: bool = True
    log_level: str = "INFO"
    log_format: str = DEFAULT_LOG_FORMAT

    def __post_init__(self):
        if self.weak_multiplier < 0:
            raise ConfigurationError(f"weak_multiplier must be >= 0, got {self.weak_multiplier}")
        if self.break_multiplier < 0:
            raise ConfigurationError(f"break_multiplier must be >= 0, got {self.break_multiplier}")
        if logging.getLevelName(self.log_level.upper()) == f"Level {self.log_level.upper()}":
            raise ConfigurationError(f"Unknown log level: {self.log_level}")


def _read_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


def _read_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def load_config(env_file: Optional[str] = None) -> RulesConfig:
    """
    Build a RulesConfig from the environment.

    Args:
        env_file: Optional path to a .env file. When omitted, python-dotenv
            searches for one from the current directory upwards. Variables
            already set in the environment win over the file.

    Returns:
        The loaded configuration.

    Raises:
        ConfigurationError: If a variable is present but unparseable.
    """
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv()

    config = RulesConfig(
        weak_multiplier=_read_float("RULES_WEAK_MULTIPLIER", RulesConfig.weak_multiplier),
        break_multiplier=_read_float("RULES_BREAK_MULTIPLIER", RulesConfig.break_multiplier),
        thorns_enabled=_read_bool("RULES_THORNS_ENABLED", RulesConfig.thorns_enabled),
        log_level=os.environ.get("RULES_LOG_LEVEL", RulesConfig.log_level).strip().upper() or "INFO",
    )
    logger.debug(f"Loaded rules config: {config}")
    return config
