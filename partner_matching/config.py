import os
import logging
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} env var must be an integer, got {raw!r}")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} env var must be a number, got {raw!r}")


MATCH_CACHE_CAPACITY = _int_env("MATCH_CACHE_CAPACITY", 1000)
MATCH_CACHE_TTL_SECONDS = _float_env("MATCH_CACHE_TTL_SECONDS", 300.0)
SCORE_CACHE_CAPACITY = _int_env("SCORE_CACHE_CAPACITY", 5000)
DEFAULT_MATCH_LIMIT = _int_env("DEFAULT_MATCH_LIMIT", 10)
MATCHING_LOG_LEVEL = os.getenv("MATCHING_LOG_LEVEL", "INFO").upper()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging for scripts; libraries only ever call getLogger."""
    logging.basicConfig(level=(level or MATCHING_LOG_LEVEL).upper(), format=LOG_FORMAT)
