"""Financial Modeling Prep backed history provider."""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from ..config import MarketsConfig, normalize_api_key
from ..domain import HistoricalSeries
from ..utils import ConfigError, DataError, NetworkError, install_redaction
from .normalization import parse_historical_payload
from .providers import HistoryProvider

logger = logging.getLogger(__name__)
install_redaction()


class FMPHistoryProvider(HistoryProvider):
    """Adapter around the ``historical-price-full`` endpoint.

    Every call is a fresh round trip: no retry, no backoff and no cache. Pass a
    shared ``httpx.AsyncClient`` to reuse connections across a batch; otherwise
    a short-lived client is opened per request.
    """

    def __init__(self, config: MarketsConfig, client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._client = client

    def history_url(self, ticker: str) -> str:
        return f"{self._config.base_url}/historical-price-full/{quote(ticker, safe='')}"

    async def fetch_history(self, ticker: str) -> HistoricalSeries:
        api_key = normalize_api_key(self._config.api_key)
        if api_key is None:
            raise ConfigError("No API key configured")

        url = self.history_url(ticker)
        params = {"timeseries": self._config.timeseries, "apikey": api_key}
        logger.debug("GET %s (timeseries=%s)", url, self._config.timeseries)

        try:
            if self._client is not None:
                response = await self._client.get(url, params=params)
            else:
                async with httpx.AsyncClient(timeout=self._config.timeout) as client:
                    response = await client.get(url, params=params)
        except httpx.HTTPError as err:
            logger.warning("Transport failure fetching %s: %s", ticker, type(err).__name__)
            raise NetworkError(f"Network error fetching {ticker}: {type(err).__name__}") from err

        if not response.is_success:
            logger.warning("HTTP %s fetching %s", response.status_code, ticker)
            raise NetworkError(f"HTTP {response.status_code} fetching {ticker}", status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as err:
            raise DataError(f"Invalid JSON returned for {ticker}") from err

        series = parse_historical_payload(payload, ticker)
        logger.debug("Received %d sessions for %s (latest %s)", len(series), ticker, series[0].date)
        return series
