import pytest

from markets_dash.config import MarketsConfig
from markets_dash.domain import WatchItem


@pytest.fixture
def config() -> MarketsConfig:
    return MarketsConfig(
        api_key="test-key",
        sectors=(WatchItem("Technology", "XLK"), WatchItem("Financials", "XLF"), WatchItem("Energy", "XLE")),
        factors=(WatchItem("Momentum (ETF)", "MTUM"), WatchItem("Quality (ETF)", "QUAL")),
    )
