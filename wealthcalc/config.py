"""Service-wide defaults, read from the environment (and an optional .env file)."""

import logging
import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


def _list_env(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if not raw:
        return default
    return [item.strip() for item in raw.split(",") if item.strip()]


# Percent per year, used when a request omits settings.inflationRate
DEFAULT_INFLATION_RATE = _float_env("WEALTHCALC_DEFAULT_INFLATION", 6.0)
# Marginal slab as a decimal (0.30 = 30%)
DEFAULT_TAX_SLAB = _float_env("WEALTHCALC_DEFAULT_TAX_SLAB", 0.30)

CORS_ORIGINS = _list_env("WEALTHCALC_CORS_ORIGINS", ["http://localhost:5173"])
LOG_LEVEL = os.getenv("WEALTHCALC_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - [%(levelname)s] - %(name)s - %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


# Percent per year for purchasing-power views of the corpus
DEFAULT_CATEGORY_INFLATION = {
    "education": 10.0,
    "healthcare": 8.0,
    "realEstate": 7.0,
    "luxuryGoods": 6.0,
    "wholesale": 4.0,
    "retail": 5.0,
    "general": 6.0,
}
