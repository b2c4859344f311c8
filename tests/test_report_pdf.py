from __future__ import annotations

from ratiofin.models import FinancialInput
from ratiofin.ratios import evaluate_input
from ratiofin.records import build_history_frame, input_to_record
from ratiofin.report_pdf import build_report_pdf


def _input(name: str = "PT Sinar & Co", year: int = 2025) -> FinancialInput:
    return FinancialInput(
        company_name=name,
        period_year=year,
        net_income=-150_000_000.0,
        current_assets=500_000_000.0,
        current_liabilities=0.0,
        revenue=2_000_000_000.0,
        total_equity=1_000_000_000.0,
    )


def test_build_report_pdf_returns_pdf_bytes() -> None:
    pdf = build_report_pdf(evaluate_input(_input()))
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 1000


def test_build_report_pdf_with_history() -> None:
    history = build_history_frame([input_to_record(_input(year=y)) for y in (2023, 2024, 2025)])
    without = build_report_pdf(evaluate_input(_input()))
    with_history = build_report_pdf(evaluate_input(_input()), history)
    assert with_history.startswith(b"%PDF")
    assert len(with_history) > len(without)
