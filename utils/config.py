"""
Configuration loading utilities.

Loads environment variables from `.env` and validates the defaults used when
building control schedules. Invalid values fall back to the built-in defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv
from streamlit.logger import get_logger

from config import CHECKPOINT_MATCH_TOLERANCE_KM, DEFAULT_CONTROL_INTERVAL_KM

logger = get_logger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    control_interval_km: float
    use_24_hour_format: bool
    checkpoint_match_tolerance_km: float


def _positive_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    try:
        value = float(raw)
    except (ValueError, TypeError):
        logger.warning("%s=%r is not a number; using %s", name, raw, default)
        return default
    if not value > 0:
        logger.warning("%s=%r must be positive; using %s", name, raw, default)
        return default
    return value


def load_config() -> Config:
    """Load configuration from the environment (and `.env` when present)."""
    load_dotenv(find_dotenv(usecwd=True), override=False)

    control_interval_km = _positive_float("BREVET_CONTROL_INTERVAL_KM", DEFAULT_CONTROL_INTERVAL_KM)
    use_24_hour_format = os.getenv("BREVET_USE_24H", "false").strip().lower() in _TRUE_VALUES
    tolerance_km = _positive_float("BREVET_CHECKPOINT_TOLERANCE_KM", CHECKPOINT_MATCH_TOLERANCE_KM)
    logger.debug(
        "Brevet config: interval=%s km, 24h=%s, tolerance=%s km",
        control_interval_km,
        use_24_hour_format,
        tolerance_km,
    )

    return Config(
        control_interval_km=control_interval_km,
        use_24_hour_format=use_24_hour_format,
        checkpoint_match_tolerance_km=tolerance_km,
    )
