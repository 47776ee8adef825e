import random

import pytest

from markets_dash.analytics.performance import (
    ShortSeriesPolicy,
    compute_performance,
    percent_change,
    reference_index,
)
from markets_dash.domain import LOOKBACKS, Lookback
from markets_dash.utils import DataError

from support import make_series

SCENARIO_LOOKBACKS = (Lookback("d1", 1, "1 session"), Lookback("d2", 2, "2 sessions"), Lookback("d4", 4, "4 sessions"))


def test_scenario_values():
    result = compute_performance(make_series([100, 95, 90, 80, 50]), SCENARIO_LOOKBACKS)

    assert result.values == {"d1": 5.26, "d2": 11.11, "d4": 100.0}
    assert result.latest == 100.0
    assert result.last_date == "2024-01-28"


def test_matches_formula_within_series_length():
    rng = random.Random(7)
    for _ in range(50):
        length = rng.randint(2, 300)
        closes = [rng.uniform(5, 500) for _ in range(length)]
        series = make_series(closes)
        lookbacks = [lb for lb in LOOKBACKS if lb.days < length]

        result = compute_performance(series, lookbacks)

        for lb in lookbacks:
            old = closes[lb.days]
            assert result.values[lb.key] == round((closes[0] - old) / old * 100, 2)


def test_short_series_clamps_to_oldest_sample():
    series = make_series([110, 105, 100])

    result = compute_performance(series)

    # 1w, 1m and 1y all reach past the third session
    assert result.values["1d"] == round((110 - 105) / 105 * 100, 2)
    assert result.values["1w"] == 10.0
    assert result.values["1m"] == 10.0
    assert result.values["1y"] == 10.0


def test_single_point_series_reports_zero_change():
    result = compute_performance(make_series([42.0]))

    assert set(result.values) == {"1d", "1w", "1m", "1y"}
    assert all(value == 0.0 for value in result.values.values())


def test_omit_policy_drops_unreachable_lookbacks():
    result = compute_performance(make_series([110, 105, 100]), policy=ShortSeriesPolicy.OMIT)

    assert set(result.values) == {"1d"}


def test_empty_series_raises_data_error():
    with pytest.raises(DataError, match="No historical data"):
        compute_performance(())


def test_zero_reference_close_drops_only_that_lookback():
    result = compute_performance(make_series([10, 0, 5]), [Lookback("1d", 1, "1 Day"), Lookback("2d", 2, "2 Days")])

    assert result.values == {"2d": 100.0}


def test_percent_change_rejects_zero_reference():
    with pytest.raises(DataError):
        percent_change(10, 0)


def test_zero_day_lookback_compares_latest_with_itself():
    result = compute_performance(make_series([10, 20]), [Lookback("now", 0, "Now")])

    assert result.values == {"now": 0.0}


def test_reference_index_policies():
    assert reference_index(5, 10) == 5
    assert reference_index(252, 10) == 9
    assert reference_index(252, 10, ShortSeriesPolicy.OMIT) is None
    assert reference_index(9, 10, ShortSeriesPolicy.OMIT) == 9
    with pytest.raises(DataError):
        reference_index(1, 0)


def test_percent_change_sign_and_rounding():
    assert percent_change(95, 100) == -5.0
    assert percent_change(100, 3) == 3233.33


def test_negative_lookback_days_rejected():
    with pytest.raises(ValueError):
        Lookback("bad", -1, "Bad")
