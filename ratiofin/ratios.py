"""Ratio engine: amount parsing, ratio formulas, labels, insights and the health score.

Every function here is pure and total. Bad amounts become 0, zero denominators
give a 0 ratio and unknown ratio kinds fall back to sentinel strings.
"""
from __future__ import annotations

import math
import numbers
import re
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, Mapping

from .config import (
    CLASSIFICATION_RULES,
    CURRENT_RATIO,
    HEALTH_GRADES,
    HEALTH_SCORE_BUCKETS,
    INSIGHT_TIERS,
    NET_PROFIT_MARGIN,
    POSITIVE_LABELS,
    RATIO_KIND_ALIASES,
    RATIO_KINDS,
    RETURN_ON_EQUITY,
    UNKNOWN_INSIGHT,
    UNKNOWN_LABEL,
    setup_logger,
)
from .models import FinancialInput, RatioClassification, RatioReport, RatioResult

logger = setup_logger(__name__)

_AMOUNT_PATTERN = re.compile(r"[+-]?\d+(?:\.\d+)?")
_CENT = Decimal("0.01")
# Wide enough to quantize any finite float to two places.
_ROUND_CONTEXT = Context(prec=400)


def _as_number(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        num = float(value)
    except (TypeError, ValueError):
        return 0.0
    return num if math.isfinite(num) else 0.0


def parse_amount(raw: Any) -> float:
    """Parse a display-formatted amount such as ``"1.250.000"`` into a float.

    Dots are thousands separators and a comma marks the fraction
    (``"1.250.000,50"`` -> ``1250000.5``). Numbers pass through unchanged.
    Anything that cannot be read returns ``0.0``.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (numbers.Real, Decimal)):
        return _as_number(raw)

    text = "".join(str(raw).split()).replace(".", "").replace(",", ".")
    if not text:
        return 0.0
    if not _AMOUNT_PATTERN.fullmatch(text):
        logger.debug("Unparseable amount %r, using 0", raw)
        return 0.0
    return _as_number(text)


def format_thousands(value: Any) -> str:
    """Format a whole amount with dot thousands separators: ``1250000`` -> ``"1.250.000"``."""
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, numbers.Real):
        if not math.isfinite(float(value)):
            return ""
        digits = str(abs(int(value)))
    else:
        digits = re.sub(r"\D", "", str(value))
    if not digits:
        return ""
    return f"{int(digits):,}".replace(",", ".")


def format_amount(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}{format_thousands(value) or 0}"


def round2(value: float) -> float:
    """Round half away from zero to two decimals, using the float's shortest repr."""
    num = _as_number(value)
    rounded = Decimal(repr(num)).quantize(_CENT, rounding=ROUND_HALF_UP, context=_ROUND_CONTEXT)
    return float(rounded)


def _ratio(numerator: float, denominator: float, scale: float = 1.0) -> float:
    if denominator == 0:
        return 0.0
    return round2(numerator / denominator * scale)


def compute_ratios(data: FinancialInput) -> RatioResult:
    return RatioResult(
        current_ratio=_ratio(data.current_assets, data.current_liabilities),
        net_profit_margin=_ratio(data.net_income, data.revenue, 100.0),
        return_on_equity=_ratio(data.net_income, data.total_equity, 100.0),
    )


def canonical_kind(name: Any) -> str | None:
    if name is None:
        return None
    key = str(name).strip().lower().replace("-", "_").replace(" ", "_")
    return RATIO_KIND_ALIASES.get(key) or RATIO_KIND_ALIASES.get(key.replace("_", ""))


def classify(kind: str, value: Any) -> str:
    rule = CLASSIFICATION_RULES.get(canonical_kind(kind))
    if rule is None:
        return UNKNOWN_LABEL
    threshold, above, at_or_below = rule
    return above if _as_number(value) > threshold else at_or_below


def is_positive_label(label: str) -> bool:
    return label in POSITIVE_LABELS


def get_insight(kind: str, value: Any) -> str:
    tiers = INSIGHT_TIERS.get(canonical_kind(kind))
    if tiers is None:
        return UNKNOWN_INSIGHT
    upper, middle, texts = tiers
    val = _as_number(value)
    if val >= upper:
        return texts[0]
    if val >= middle:
        return texts[1]
    return texts[2]


def _bucket_points(kind: str, value: float) -> int:
    top, top_points, middle, middle_points = HEALTH_SCORE_BUCKETS[kind]
    if value >= top:
        return top_points
    if value >= middle:
        return middle_points
    return 0


def health_score(result: RatioResult) -> int:
    return (
        _bucket_points(CURRENT_RATIO, _as_number(result.current_ratio))
        + _bucket_points(NET_PROFIT_MARGIN, _as_number(result.net_profit_margin))
        + _bucket_points(RETURN_ON_EQUITY, _as_number(result.return_on_equity))
    )


def health_grade(score: int) -> str:
    for floor, grade in HEALTH_GRADES:
        if score >= floor:
            return grade
    return HEALTH_GRADES[-1][1]


def ratio_result_from_mapping(mapping: Mapping[str, Any]) -> RatioResult:
    """Build a RatioResult from any supported naming scheme (``npm``, ``netProfitMargin``, ...).

    Adapter for external callers that already hold computed ratios, such as
    exported rows or payloads from other tools. The app itself always
    recomputes ratios from the stored figures.
    """
    values: dict[str, float] = {}
    for key, value in mapping.items():
        kind = canonical_kind(key)
        if kind is not None:
            values[kind] = _as_number(value)

    missing = [kind for kind in RATIO_KINDS if kind not in values]
    if missing:
        raise ValueError(f"Missing ratio values: {', '.join(missing)}")
    return RatioResult(**values)


def evaluate_input(data: FinancialInput) -> RatioReport:
    ratios = compute_ratios(data)
    values = ratios.as_dict()
    classifications = tuple(
        RatioClassification(
            kind=kind,
            value=values[kind],
            label=classify(kind, values[kind]),
            insight=get_insight(kind, values[kind]),
        )
        for kind in RATIO_KINDS
    )
    score = health_score(ratios)
    return RatioReport(
        data=data,
        ratios=ratios,
        classifications=classifications,
        health_score=score,
        health_grade=health_grade(score),
    )
