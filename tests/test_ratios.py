import pytest

from ratiofin.models import FinancialInput, RatioResult
from ratiofin.ratios import (
    canonical_kind,
    classify,
    compute_ratios,
    evaluate_input,
    format_amount,
    format_thousands,
    get_insight,
    health_grade,
    health_score,
    parse_amount,
    ratio_result_from_mapping,
    round2,
)


def _input(
    net_income=150_000_000.0,
    current_assets=500_000_000.0,
    current_liabilities=300_000_000.0,
    revenue=2_000_000_000.0,
    total_equity=1_000_000_000.0,
):
    return FinancialInput(
        company_name="PT Contoh",
        period_year=2025,
        net_income=net_income,
        current_assets=current_assets,
        current_liabilities=current_liabilities,
        revenue=revenue,
        total_equity=total_equity,
    )


def test_parse_amount_strips_thousands_separators():
    assert parse_amount("1.250.000") == 1_250_000.0
    assert parse_amount(" 1.250.000 ") == 1_250_000.0
    assert parse_amount("1 250 000") == 1_250_000.0
    assert parse_amount("-75.000") == -75_000.0


def test_parse_amount_comma_fraction():
    assert parse_amount("1.250.000,50") == 1_250_000.5
    assert parse_amount("0,25") == 0.25


def test_parse_amount_bad_input_is_zero():
    assert parse_amount("") == 0.0
    assert parse_amount(None) == 0.0
    assert parse_amount("abc") == 0.0
    assert parse_amount("12abc") == 0.0
    assert parse_amount("1,2,3") == 0.0
    assert parse_amount("nan") == 0.0
    assert parse_amount("inf") == 0.0
    assert parse_amount(float("nan")) == 0.0
    assert parse_amount(True) == 0.0


def test_parse_amount_numbers_pass_through():
    assert parse_amount(1234) == 1234.0
    assert parse_amount(12.5) == 12.5
    assert parse_amount("1250000") == 1_250_000.0
    assert parse_amount(parse_amount("1250000")) == 1_250_000.0


def test_format_thousands():
    assert format_thousands(1_250_000) == "1.250.000"
    assert format_thousands("1250000") == "1.250.000"
    assert format_thousands("1.250.000") == "1.250.000"
    assert format_thousands(999) == "999"
    assert format_thousands(0) == "0"
    assert format_thousands("") == ""
    assert format_thousands(None) == ""
    assert format_amount(-75_000.0) == "-75.000"


@pytest.mark.parametrize("n", [0, 7, 999, 1000, 1_250_000, 987_654_321_012])
def test_format_then_parse_gives_back_the_number(n):
    assert parse_amount(format_thousands(n)) == n


def test_round2_half_away_from_zero():
    assert round2(1.005) == 1.01
    assert round2(-1.005) == -1.01
    assert round2(2.675) == 2.68
    assert round2(1.004) == 1.0
    assert round2(float("inf")) == 0.0


def test_compute_ratios_reference_scenario():
    result = compute_ratios(_input())
    assert result == RatioResult(current_ratio=1.67, net_profit_margin=7.5, return_on_equity=15.0)


def test_compute_ratios_zero_denominators():
    result = compute_ratios(_input(current_liabilities=0.0, revenue=0.0, total_equity=0.0))
    assert result.current_ratio == 0.0
    assert result.net_profit_margin == 0.0
    assert result.return_on_equity == 0.0
    assert classify("current_ratio", result.current_ratio) == "Liquidity Risk"


def test_compute_ratios_matches_rounded_division():
    for assets, liabilities in [(10.0, 3.0), (1.0, 7.0), (123_456.0, 789.0), (0.0, 5.0)]:
        result = compute_ratios(_input(current_assets=assets, current_liabilities=liabilities))
        assert result.current_ratio == round2(assets / liabilities)


def test_compute_ratios_scale_invariant():
    base = compute_ratios(_input())
    scaled = compute_ratios(
        _input(
            net_income=300_000_000.0,
            current_assets=1_000_000_000.0,
            current_liabilities=600_000_000.0,
            revenue=4_000_000_000.0,
            total_equity=2_000_000_000.0,
        )
    )
    assert scaled == base


def test_compute_ratios_negative_values_pass_through():
    result = compute_ratios(_input(net_income=-50_000_000.0))
    assert result.net_profit_margin == -2.5
    assert result.return_on_equity == -5.0


def test_classify_boundaries():
    assert classify("current_ratio", 1.51) == "Healthy"
    assert classify("current_ratio", 1.50) == "Liquidity Risk"
    assert classify("net_profit_margin", 10.01) == "Efficient"
    assert classify("net_profit_margin", 10.0) == "Low Margin"
    assert classify("return_on_equity", 15.01) == "Very Good"
    assert classify("return_on_equity", 15.0) == "Suboptimal"


def test_classify_aliases_and_unknown():
    assert classify("currentRatio", 2.0) == "Healthy"
    assert classify("npm", "12.50") == "Efficient"
    assert classify("roe", 3.0) == "Suboptimal"
    assert classify("debt_to_equity", 1.0) == "-"
    assert classify(None, 1.0) == "-"


def test_get_insight_tiers():
    assert get_insight("current_ratio", 2.0).startswith("Very safe")
    assert get_insight("current_ratio", 1.0).startswith("Adequate")
    assert get_insight("current_ratio", 0.99).startswith("High risk")
    assert get_insight("net_profit_margin", 20.0).startswith("Very efficient")
    assert get_insight("net_profit_margin", 10.0).startswith("Standard")
    assert get_insight("net_profit_margin", 9.99).startswith("Thin margin")
    assert get_insight("return_on_equity", 15.0).startswith("Very effective")
    assert get_insight("return_on_equity", 8.0).startswith("Stable")
    assert get_insight("return_on_equity", 7.99).startswith("Low return")
    assert get_insight("quick_ratio", 1.0) == "No analysis available for this ratio."


def test_health_score_buckets():
    assert health_score(RatioResult(1.67, 7.5, 15.0)) == 80
    assert health_score(RatioResult(1.5, 15.0, 15.0)) == 100
    assert health_score(RatioResult(1.0, 5.0, 8.0)) == 50
    assert health_score(RatioResult(0.99, 4.99, 7.99)) == 0
    assert health_score(RatioResult(0.0, 0.0, 0.0)) == 0


def test_health_score_monotonic_per_ratio():
    grid = [-5.0, 0.0, 0.99, 1.0, 1.49, 1.5, 4.99, 5.0, 7.99, 8.0, 14.99, 15.0, 40.0]
    for fixed in (0.0, 1.2, 10.0, 20.0):
        for kind in ("current_ratio", "net_profit_margin", "return_on_equity"):
            scores = []
            for value in grid:
                values = {"current_ratio": fixed, "net_profit_margin": fixed, "return_on_equity": fixed}
                values[kind] = value
                scores.append(health_score(RatioResult(**values)))
            assert scores == sorted(scores)
            assert all(0 <= s <= 100 for s in scores)


def test_health_grade():
    assert health_grade(100) == "Strong"
    assert health_grade(80) == "Strong"
    assert health_grade(65) == "Moderate"
    assert health_grade(49) == "Weak"


def test_canonical_kind():
    assert canonical_kind("netProfitMargin") == "net_profit_margin"
    assert canonical_kind("Return on Equity") == "return_on_equity"
    assert canonical_kind("ROE") == "return_on_equity"
    assert canonical_kind("ebitda") is None


def test_ratio_result_from_mapping_naming_schemes():
    expected = RatioResult(1.67, 7.5, 15.0)
    assert ratio_result_from_mapping({"currentRatio": "1.67", "npm": "7.50", "roe": "15.00"}) == expected
    assert (
        ratio_result_from_mapping({"currentRatio": 1.67, "netProfitMargin": 7.5, "returnOnEquity": 15.0})
        == expected
    )
    assert (
        ratio_result_from_mapping({"current_ratio": 1.67, "net_profit_margin": 7.5, "return_on_equity": 15})
        == expected
    )


def test_ratio_result_from_mapping_missing_ratio():
    with pytest.raises(ValueError, match="return_on_equity"):
        ratio_result_from_mapping({"currentRatio": 1.67, "npm": 7.5, "roee": 15.0})


def test_evaluate_input_reference_scenario():
    report = evaluate_input(_input())
    labels = [item.label for item in report.classifications]
    assert [item.kind for item in report.classifications] == [
        "current_ratio",
        "net_profit_margin",
        "return_on_equity",
    ]
    assert labels == ["Healthy", "Low Margin", "Suboptimal"]
    assert report.health_score == 80
    assert report.health_grade == "Strong"
    assert report.classification("net_profit_margin").insight.startswith("Thin margin")
    assert report.classification("unknown") is None
