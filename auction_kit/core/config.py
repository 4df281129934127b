"""
Engine configuration for auction-kit.

Defines validation defaults and logging settings. Values come from the
environment (optionally seeded from a .env file via python-dotenv).
"""

import logging
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from auction_kit.core.types import Amount, ValidationOptions

ENV_PREFIX = "AUCTION_KIT_"

TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class EngineConfig:
    """Engine-wide configuration parameters"""

    # Validation parameters
    min_bid_amount: Optional[Amount] = 1     # None disables the minimum check
    max_bid_amount: Optional[Amount] = None  # None means no ceiling
    allow_closed_auction: bool = False

    # Logging
    log_level: int = logging.INFO
    log_dir: Optional[str] = None            # None disables file logging

    def validation_options(self) -> ValidationOptions:
        return ValidationOptions(
            min_bid_amount=self.min_bid_amount,
            max_bid_amount=self.max_bid_amount,
            allow_closed_auction=self.allow_closed_auction,
        )


def _parse_amount(name: str, raw: Optional[str], default: Optional[Amount]) -> Optional[Amount]:
    if raw is None:
        return default
    raw = raw.strip()
    if not raw:
        return None
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if not value.is_finite():
        raise ValueError(f"{name} must be finite, got {raw!r}")
    return int(value) if value == value.to_integral_value() else value


def _parse_bool(name: str, raw: Optional[str], default: bool) -> bool:
    if raw is None:
        return default
    value = raw.strip().lower()
    if not value:
        return default
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _parse_level(raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {raw!r}")
    return level


def load_config(env_file: Optional[str] = None) -> EngineConfig:
    """
    Load configuration from the environment.

    Args:
        env_file: Optional path to a .env file. Without one, python-dotenv
            searches for a .env file from the working directory upward.
            Variables already set in the environment take precedence.

    Returns:
        EngineConfig instance
    """
    load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True))

    defaults = EngineConfig()
    env = os.environ

    return EngineConfig(
        min_bid_amount=_parse_amount(
            "min_bid_amount", env.get(ENV_PREFIX + "MIN_BID_AMOUNT"), defaults.min_bid_amount
        ),
        max_bid_amount=_parse_amount(
            "max_bid_amount", env.get(ENV_PREFIX + "MAX_BID_AMOUNT"), defaults.max_bid_amount
        ),
        allow_closed_auction=_parse_bool(
            "allow_closed_auction", env.get(ENV_PREFIX + "ALLOW_CLOSED_AUCTION"), defaults.allow_closed_auction
        ),
        log_level=_parse_level(env.get(ENV_PREFIX + "LOG_LEVEL"), defaults.log_level),
        log_dir=env.get(ENV_PREFIX + "LOG_DIR") or defaults.log_dir,
    )
