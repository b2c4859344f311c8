from __future__ import annotations

from typing import Any, Mapping

import pandas as pd

from .config import (
    AMOUNT_FIELDS,
    DEFAULT_PERIOD_YEAR,
    FORM_FIELD_ALIASES,
    MAX_PERIOD_YEAR,
    MIN_PERIOD_YEAR,
    RATIO_KINDS,
)
from .models import FinancialInput
from .ratios import evaluate_input, parse_amount

HISTORY_COLUMNS = [
    "company_name",
    "period_year",
    *AMOUNT_FIELDS.keys(),
    *RATIO_KINDS,
    *[f"{kind}_label" for kind in RATIO_KINDS],
    "health_score",
    "health_grade",
    "created_at",
]


def _norm_key(key: str) -> str:
    text = str(key).strip()
    return FORM_FIELD_ALIASES.get(text, text)


def _parse_year(raw: Any) -> int:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return DEFAULT_PERIOD_YEAR
    return int(parse_amount(raw))


def input_from_mapping(mapping: Mapping[str, Any]) -> FinancialInput:
    """Build a FinancialInput from a form payload or a stored record.

    Accepts snake_case storage fields and camelCase form fields. Every amount
    goes through ``parse_amount``, so display strings like ``"1.250.000"`` work.
    """
    fields = {_norm_key(k): v for k, v in mapping.items()}
    amounts = {name: parse_amount(fields.get(name)) for name in AMOUNT_FIELDS}
    return FinancialInput(
        company_name=str(fields.get("company_name") or "").strip(),
        period_year=_parse_year(fields.get("period_year")),
        **amounts,
    )


def input_to_record(data: FinancialInput) -> dict[str, Any]:
    record: dict[str, Any] = {
        "company_name": data.company_name,
        "period_year": int(data.period_year),
    }
    for name in AMOUNT_FIELDS:
        record[name] = float(getattr(data, name))
    return record


def validate_input(data: FinancialInput) -> list[str]:
    errors = []
    if not data.company_name.strip():
        errors.append("Company name is required.")
    if not MIN_PERIOD_YEAR <= data.period_year <= MAX_PERIOD_YEAR:
        errors.append(f"Period year must be between {MIN_PERIOD_YEAR} and {MAX_PERIOD_YEAR}.")
    return errors


def report_to_row(record: Mapping[str, Any]) -> dict[str, Any]:
    data = input_from_mapping(record)
    report = evaluate_input(data)
    row = input_to_record(data)
    row.update(report.ratios.as_dict())
    for item in report.classifications:
        row[f"{item.kind}_label"] = item.label
    row["health_score"] = report.health_score
    row["health_grade"] = report.health_grade
    row["created_at"] = record.get("created_at")
    return row


def build_history_frame(records: list[Mapping[str, Any]]) -> pd.DataFrame:
    rows = [report_to_row(record) for record in records]
    if not rows:
        return pd.DataFrame(columns=HISTORY_COLUMNS)

    df = pd.DataFrame(rows, columns=HISTORY_COLUMNS)
    df = df.sort_values(by=["company_name", "period_year"], ascending=[True, True])
    return df.reset_index(drop=True)


def apply_filters(df: pd.DataFrame, filters: dict) -> pd.DataFrame:
    out = df.copy()

    companies = filters.get("companies") or []
    if companies:
        out = out[out["company_name"].isin(companies)]

    year_min = filters.get("year_min")
    year_max = filters.get("year_max")
    if year_min is not None:
        out = out[out["period_year"] >= int(year_min)]
    if year_max is not None:
        out = out[out["period_year"] <= int(year_max)]

    min_score = filters.get("min_score")
    if min_score:
        out = out[out["health_score"] >= int(min_score)]

    keyword = (filters.get("keyword") or "").strip().lower()
    if keyword:
        out = out[out["company_name"].str.lower().str.contains(keyword, na=False)]

    return out
