from datetime import date, timedelta

import pytest

from shop_finsight.config import EngineSettings, ForecastSettings
from shop_finsight.forecast import (
    FORECAST_ASSUMPTIONS,
    analyze_patterns,
    confidence_tier,
    forecast_cash_flow,
)
from shop_finsight.models import (
    CashFlowCategory,
    CashFlowEntry,
    ConfidenceTier,
    SubcategoryPattern,
)

START = date(2025, 1, 1)


def _monthly(subcategory: str, amounts: list[float]) -> list[CashFlowEntry]:
    """One entry per month of 2024 onwards, in chronological order."""
    return [
        CashFlowEntry(
            date=date(2024 + i // 12, i % 12 + 1, 15),
            category=CashFlowCategory.OPERATING,
            subcategory=subcategory,
            amount=amount,
        )
        for i, amount in enumerate(amounts)
    ]


def _pattern(confidence: float) -> SubcategoryPattern:
    return SubcategoryPattern("x", 1.0, 0.0, confidence, 1)


def test_empty_history() -> None:
    forecast = forecast_cash_flow([], START)

    assert forecast.projected_inflows == []
    assert forecast.projected_outflows == []
    assert forecast.net_cash_flow == 0.0
    assert forecast.cumulative_cash_flow == 0.0
    assert forecast.confidence == ConfidenceTier.LOW
    assert forecast.name == "12-Month Cash Flow Forecast"
    assert forecast.assumptions == FORECAST_ASSUMPTIONS


def test_stable_history_gives_high_confidence() -> None:
    """Twelve months of ~10M sales with a tiny variance."""
    amounts = [10_000_000.0 + (1_000.0 if i % 2 == 0 else -1_000.0) for i in range(12)]
    history = _monthly("sales", amounts)

    forecast = forecast_cash_flow(history, START, horizon_months=3)

    assert len(forecast.projected_inflows) == 3
    assert forecast.projected_outflows == []
    for line in forecast.projected_inflows:
        assert line.amount == pytest.approx(10_000_000.0)
        assert line.probability == pytest.approx(0.95)
        assert line.category == "sales"
        assert line.description == "Projected sales"
    assert forecast.net_cash_flow == pytest.approx(3 * 9_500_000.0)
    assert forecast.cumulative_cash_flow == forecast.net_cash_flow
    assert forecast.confidence == ConfidenceTier.HIGH


def test_outflows_are_projected_as_absolute_amounts() -> None:
    history = _monthly("sales", [10_000_000.0] * 12) + _monthly(
        "rent", [-5_000_000.0] * 12
    )

    forecast = forecast_cash_flow(history, START, horizon_months=2)

    assert len(forecast.projected_inflows) == 2
    assert len(forecast.projected_outflows) == 2
    for line in forecast.projected_outflows:
        assert line.amount == pytest.approx(5_000_000.0)
        assert line.category == "rent"
    assert forecast.net_cash_flow == pytest.approx(2 * (9_500_000.0 - 4_750_000.0))


def test_projection_dates_are_spaced_thirty_days_apart() -> None:
    forecast = forecast_cash_flow(_monthly("sales", [100.0] * 3), START, 2)

    assert [p.date for p in forecast.projected_inflows] == [
        date(2025, 1, 1),
        date(2025, 1, 31),
    ]
    assert forecast.start_date == START
    assert forecast.end_date == date(2025, 3, 2)
    assert forecast.name == "2-Month Cash Flow Forecast"


def test_growth_is_capped_upwards() -> None:
    patterns = analyze_patterns(_monthly("sales", [100.0] * 6 + [1_000.0] * 6))

    assert len(patterns) == 1
    assert patterns[0].avg_amount == pytest.approx(550.0)
    assert patterns[0].growth_rate == pytest.approx(0.5)
    assert patterns[0].confidence == pytest.approx(0.3)
    assert patterns[0].sample_size == 12

    forecast = forecast_cash_flow(
        _monthly("sales", [100.0] * 6 + [1_000.0] * 6), START, 1
    )
    assert forecast.projected_inflows[0].amount == pytest.approx(825.0)
    assert forecast.confidence == ConfidenceTier.LOW


def test_growth_is_capped_downwards() -> None:
    patterns = analyze_patterns(_monthly("sales", [1_000.0] * 6 + [10.0] * 6))

    assert patterns[0].growth_rate == pytest.approx(-0.5)


def test_growth_uses_chronological_order() -> None:
    history = _monthly("sales", [100.0] * 6 + [150.0] * 6)

    patterns = analyze_patterns(list(reversed(history)))

    assert patterns[0].growth_rate == pytest.approx(0.5)


def test_short_history_has_no_growth() -> None:
    """With fewer entries than the window, both windows cover everything."""
    patterns = analyze_patterns(_monthly("sales", [100.0, 200.0, 300.0]))

    assert patterns[0].growth_rate == 0.0
    assert patterns[0].avg_amount == pytest.approx(200.0)


def test_zero_average_uses_confidence_floor() -> None:
    patterns = analyze_patterns(_monthly("transfer", [100.0, -100.0]))

    assert patterns[0].avg_amount == 0.0
    assert patterns[0].growth_rate == 0.0
    assert patterns[0].confidence == pytest.approx(0.3)

    forecast = forecast_cash_flow(_monthly("transfer", [100.0, -100.0]), START, 1)
    assert forecast.projected_inflows == []
    assert forecast.projected_outflows[0].amount == 0.0


def test_patterns_keep_first_appearance_order() -> None:
    history = _monthly("rent", [-50.0] * 2) + _monthly("sales", [80.0] * 2)

    patterns = analyze_patterns(history)

    assert [p.subcategory for p in patterns] == ["rent", "sales"]


@pytest.mark.parametrize(
    "amounts",
    [
        [1.0, 1_000_000.0],
        [-3.0, 5.0, -7.0, 11.0],
        [50.0] * 24,
        [10.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 500.0],
        [-1_000.0, -900.0, -2_000.0, -50.0, -3_000.0, -1.0, -10_000.0],
    ],
)
def test_pattern_bounds(amounts: list[float]) -> None:
    for pattern in analyze_patterns(_monthly("mixed", amounts)):
        assert 0.3 <= pattern.confidence <= 0.95
        assert -0.5 <= pattern.growth_rate <= 0.5


def test_confidence_tiers() -> None:
    assert confidence_tier([]) == ConfidenceTier.LOW
    assert confidence_tier([_pattern(0.95)]) == ConfidenceTier.HIGH
    assert confidence_tier([_pattern(0.7)]) == ConfidenceTier.MEDIUM
    # Thresholds are strict
    assert confidence_tier([_pattern(0.8)]) == ConfidenceTier.MEDIUM
    assert confidence_tier([_pattern(0.6)]) == ConfidenceTier.LOW
    # Mean of 0.95 and 0.45 is 0.7
    assert confidence_tier([_pattern(0.95), _pattern(0.45)]) == ConfidenceTier.MEDIUM
    assert confidence_tier([_pattern(0.5), _pattern(0.3)]) == ConfidenceTier.LOW


def test_medium_tier_from_history() -> None:
    """Amounts 70/130: pstdev 30 on an average of 100 gives 0.7."""
    forecast = forecast_cash_flow(_monthly("repairs", [70.0, 130.0]), START, 1)

    assert forecast.patterns[0].confidence == pytest.approx(0.7)
    assert forecast.confidence == ConfidenceTier.MEDIUM


@pytest.mark.parametrize("horizon", [0, -3])
def test_non_positive_horizon_has_no_line_items(horizon: int) -> None:
    forecast = forecast_cash_flow(_monthly("sales", [100.0] * 4), START, horizon)

    assert forecast.projected_inflows == []
    assert forecast.net_cash_flow == 0.0
    assert forecast.end_date == START


def test_default_horizon_is_twelve_months() -> None:
    forecast = forecast_cash_flow(_monthly("sales", [100.0] * 4), START)

    assert len(forecast.projected_inflows) == 12
    assert forecast.end_date == START + timedelta(days=360)


def test_custom_forecast_settings() -> None:
    settings = EngineSettings(
        forecast=ForecastSettings(horizon_months=2, step_days=7, confidence_ceiling=1.0)
    )

    forecast = forecast_cash_flow(_monthly("sales", [100.0] * 4), START, settings=settings)

    assert [p.date for p in forecast.projected_inflows] == [
        date(2025, 1, 1),
        date(2025, 1, 8),
    ]
    assert forecast.projected_inflows[0].probability == pytest.approx(1.0)
