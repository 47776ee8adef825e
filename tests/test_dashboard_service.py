import asyncio

from markets_dash.analytics.performance import ShortSeriesPolicy
from markets_dash.config import MISSING_KEY_MESSAGE, MarketsConfig
from markets_dash.domain import PerformanceResult, WatchItem
from markets_dash.services import DashboardService, RefreshCoordinator, fetch_batch
from markets_dash.utils import ConfigError, NetworkError
from markets_dash.viz.cards import ErrorCard, PerformanceCard

from support import FakeProvider, make_series

ITEMS = [WatchItem("Technology", "XLK"), WatchItem("Financials", "XLF"), WatchItem("Energy", "XLE")]


def test_batch_keeps_configuration_order_despite_completion_order():
    provider = FakeProvider(
        {"XLK": make_series([100, 99]), "XLF": make_series([50, 40]), "XLE": make_series([10, 20])},
        delays={"XLK": 0.03, "XLF": 0.01, "XLE": 0},
    )

    outcomes = asyncio.run(fetch_batch(provider, ITEMS))

    assert [outcome.values["1d"] for outcome in outcomes] == [1.01, 25.0, -50.0]


def test_one_failure_does_not_abort_the_others():
    failure = NetworkError("HTTP 500 fetching XLF", status_code=500)
    provider = FakeProvider({"XLK": make_series([100, 99]), "XLF": failure, "XLE": make_series([10, 20])})

    outcomes = asyncio.run(fetch_batch(provider, ITEMS))

    assert len(outcomes) == 3
    assert isinstance(outcomes[0], PerformanceResult)
    assert outcomes[1] is failure
    assert isinstance(outcomes[2], PerformanceResult)
    assert provider.calls == ["XLK", "XLF", "XLE"]


def test_empty_history_becomes_data_error_outcome():
    provider = FakeProvider({"XLK": (), "XLF": make_series([1, 1]), "XLE": make_series([1, 1])})

    outcomes = asyncio.run(fetch_batch(provider, ITEMS))

    assert "No historical data" in str(outcomes[0])


def test_policy_reaches_calculator():
    provider = FakeProvider({"XLK": make_series([100, 99])})

    (outcome,) = asyncio.run(fetch_batch(provider, ITEMS[:1], policy=ShortSeriesPolicy.OMIT))

    assert set(outcome.values) == {"1d"}


def test_refresh_renders_cards_in_order_with_one_error_card(config):
    provider = FakeProvider(
        {
            "XLK": make_series([100, 95]),
            "XLF": NetworkError("HTTP 429 fetching XLF", status_code=429),
            "XLE": make_series([80, 100]),
        }
    )
    service = DashboardService(config=config, provider_factory=lambda cfg, client: provider)

    report = asyncio.run(service.refresh("sectors"))

    assert report is not None
    assert report.ok
    assert report.status.startswith("Updated: ")
    assert [card.ticker for card in report.cards] == ["XLK", "XLF", "XLE"]
    assert [type(card) for card in report.cards] == [PerformanceCard, ErrorCard, PerformanceCard]
    assert report.cards[1].message == "Error: HTTP 429 fetching XLF"
    assert service.coordinator.current is report
    assert service.coordinator.state == "idle"


def test_view_selects_watch_list(config):
    provider = FakeProvider({"MTUM": make_series([10, 9]), "QUAL": make_series([10, 11])})
    service = DashboardService(config=config, provider_factory=lambda cfg, client: provider)

    report = asyncio.run(service.refresh("factors"))

    assert [card.ticker for card in report.cards] == ["MTUM", "QUAL"]
    assert provider.calls == ["MTUM", "QUAL"]


def test_orchestration_failure_becomes_status_message(config):
    def broken_factory(cfg, client):
        raise RuntimeError("provider unavailable")

    service = DashboardService(config=config, provider_factory=broken_factory)

    report = asyncio.run(service.refresh("sectors"))

    assert report.status == "Error: provider unavailable"
    assert report.cards == ()
    assert not report.ok


def test_missing_credential_yields_error_cards_and_startup_message():
    config = MarketsConfig(api_key=None, sectors=(WatchItem("Technology", "XLK"),))
    provider = FakeProvider({"XLK": ConfigError("No API key configured")})
    service = DashboardService(config=config, provider_factory=lambda cfg, client: provider)

    report = asyncio.run(service.refresh("sectors"))

    assert service.startup_message() == MISSING_KEY_MESSAGE
    assert report.cards[0].message == "Error: No API key configured"


def test_startup_message_absent_with_credential(config):
    assert DashboardService(config=config).startup_message() is None


def test_stale_refresh_is_not_applied(config):
    provider = FakeProvider(
        {
            "XLK": make_series([100, 90]),
            "XLF": make_series([100, 90]),
            "XLE": make_series([100, 90]),
            "MTUM": make_series([10, 9]),
            "QUAL": make_series([10, 9]),
        },
        delays={"XLK": 0.05, "XLF": 0.05, "XLE": 0.05},
    )
    service = DashboardService(config=config, provider_factory=lambda cfg, client: provider)

    async def scenario():
        slow = asyncio.create_task(service.refresh("sectors"))
        await asyncio.sleep(0)
        assert service.coordinator.state == "loading"
        fast = await service.refresh("factors")
        stale = await slow
        return fast, stale

    fast, stale = asyncio.run(scenario())

    assert fast is not None
    assert stale is None
    assert service.coordinator.current is fast
    assert service.coordinator.current.view == "factors"
    assert service.coordinator.state == "idle"


def test_coordinator_generations():
    coordinator = RefreshCoordinator()
    assert coordinator.state == "idle"

    first = coordinator.begin()
    second = coordinator.begin()

    assert (first, second) == (1, 2)
    assert coordinator.state == "loading"
    assert not coordinator.is_current(first)
    assert coordinator.apply(first, object()) is False
    assert coordinator.current is None
    assert coordinator.apply(second, "report") is True
    assert coordinator.current == "report"
    assert coordinator.state == "idle"
