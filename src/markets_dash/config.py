"""Runtime configuration: credential, watch lists and API settings."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from dotenv import load_dotenv

from .domain import ViewName, WatchItem
from .utils import ConfigError, is_valid_level

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://financialmodelingprep.com/api/v3"
DEFAULT_TIMESERIES = 400
DEFAULT_TIMEOUT = 30.0
PLACEHOLDER_API_KEY = "YOUR_FMP_API_KEY"
MISSING_KEY_MESSAGE = "Please add your FMP API key (set FMP_API_KEY or api_key in the markets config file)."

DEFAULT_SECTORS: tuple[WatchItem, ...] = (
    WatchItem("Technology", "XLK"),
    WatchItem("Financials", "XLF"),
    WatchItem("Health Care", "XLV"),
    WatchItem("Energy", "XLE"),
    WatchItem("Materials", "XLB"),
    WatchItem("Industrials", "XLI"),
    WatchItem("Consumer Discretionary", "XLY"),
    WatchItem("Consumer Staples", "XLP"),
    WatchItem("Utilities", "XLU"),
    WatchItem("Real Estate", "XLRE"),
    WatchItem("Communication Services", "XLC"),
    # Commodities
    WatchItem("Gold", "GLD"),
    WatchItem("Silver", "SLV"),
    WatchItem("Metals (miners)", "GDX"),
    WatchItem("Broad Commodities", "DBC"),
)

DEFAULT_FACTORS: tuple[WatchItem, ...] = (
    WatchItem("Value (ETF)", "VLUE"),
    WatchItem("Momentum (ETF)", "MTUM"),
    WatchItem("Quality (ETF)", "QUAL"),
    WatchItem("Size (Small)", "IWM"),
    WatchItem("Low Volatility", "USMV"),
    WatchItem("Growth", "VUG"),
)


@dataclass(frozen=True, slots=True)
class MarketsConfig:
    api_key: str | None = None
    sectors: tuple[WatchItem, ...] = DEFAULT_SECTORS
    factors: tuple[WatchItem, ...] = DEFAULT_FACTORS
    base_url: str = DEFAULT_BASE_URL
    timeseries: int = DEFAULT_TIMESERIES
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    @property
    def has_credential(self) -> bool:
        return normalize_api_key(self.api_key) is not None

    def watch_list(self, view: ViewName) -> tuple[WatchItem, ...]:
        return self.factors if view == "factors" else self.sectors


def normalize_api_key(raw: str | None) -> str | None:
    """Return a usable key, or None for a missing, blank or placeholder value."""
    if raw is None:
        return None
    key = raw.strip()
    if not key or key == PLACEHOLDER_API_KEY:
        return None
    return key


def parse_watch_list(raw: Any, label: str) -> tuple[WatchItem, ...]:
    if not isinstance(raw, list) or not raw:
        raise ConfigError(f"'{label}' must be a non-empty list of {{name, ticker}} entries")

    items = []
    for position, entry in enumerate(raw):
        if not isinstance(entry, Mapping):
            raise ConfigError(f"'{label}[{position}]' must be an object with name and ticker")
        raw_ticker = entry.get("ticker")
        if not isinstance(raw_ticker, str) or not raw_ticker.strip():
            raise ConfigError(f"'{label}[{position}]' is missing a ticker")
        ticker = raw_ticker.strip().upper()
        raw_name = entry.get("name")
        if raw_name is not None and not isinstance(raw_name, str):
            raise ConfigError(f"'{label}[{position}]' name must be a string")
        name = (raw_name or "").strip() or ticker
        items.append(WatchItem(name=name, ticker=ticker))
    return tuple(items)


def _read_overrides(path: Path) -> dict[str, Any]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as err:
        raise ConfigError(f"Markets config file not found: {path}") from err
    except json.JSONDecodeError as err:
        raise ConfigError(f"Markets config file {path} is not valid JSON: {err}") from err

    if not isinstance(payload, dict):
        raise ConfigError(f"Markets config file {path} must hold a JSON object")
    return payload


def _positive_number(raw: str | None, default: float, name: str) -> float:
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as err:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from err
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def _positive_int(raw: str | None, default: int, name: str) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as err:
        raise ConfigError(f"{name} must be a whole number, got {raw!r}") from err
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def _base_url(raw: str | None) -> str:
    if raw is None:
        return DEFAULT_BASE_URL
    url = raw.strip().rstrip("/")
    if not url.startswith(("http://", "https://")):
        raise ConfigError(f"FMP_BASE_URL must be an absolute http(s) URL, got {raw!r}")
    return url


def _log_level(raw: str | None) -> str:
    level = (raw or "INFO").strip().upper()
    if not is_valid_level(level):
        raise ConfigError(f"MARKETS_LOG_LEVEL must be a logging level name, got {raw!r}")
    return level


def load_config(env: Mapping[str, str] | None = None, use_dotenv: bool = True) -> MarketsConfig:
    """Build the configuration from the environment and an optional JSON override file."""
    if env is None:
        if use_dotenv:
            load_dotenv()
        env = os.environ

    overrides: dict[str, Any] = {}
    config_path = env.get("MARKETS_CONFIG")
    if config_path:
        overrides = _read_overrides(Path(config_path))
        logger.info("Loaded watch list overrides from %s", config_path)

    api_key = normalize_api_key(env.get("FMP_API_KEY"))
    if api_key is None:
        api_key = normalize_api_key(str(overrides.get("api_key") or ""))

    sectors = parse_watch_list(overrides["sectors"], "sectors") if "sectors" in overrides else DEFAULT_SECTORS
    factors = parse_watch_list(overrides["factors"], "factors") if "factors" in overrides else DEFAULT_FACTORS

    config = MarketsConfig(
        api_key=api_key,
        sectors=sectors,
        factors=factors,
        base_url=_base_url(env.get("FMP_BASE_URL")),
        timeseries=_positive_int(env.get("FMP_TIMESERIES"), DEFAULT_TIMESERIES, "FMP_TIMESERIES"),
        timeout=_positive_number(env.get("FMP_TIMEOUT"), DEFAULT_TIMEOUT, "FMP_TIMEOUT"),
        log_level=_log_level(env.get("MARKETS_LOG_LEVEL")),
    )

    if not config.has_credential:
        logger.warning("No FMP API key configured; fetches will fail until one is provided")
    return config
