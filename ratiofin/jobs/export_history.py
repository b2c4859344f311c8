from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ratiofin.config import setup_logger
from ratiofin.ratios import evaluate_input
from ratiofin.records import build_history_frame, input_from_mapping
from ratiofin.report_pdf import build_report_pdf
from ratiofin.store import RecordStoreError, get_record_store

logger = setup_logger("ratiofin.jobs.export_history")


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a whole number, got {text!r}") from exc
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Recompute ratios for saved records and export them.")
    parser.add_argument("--out", type=Path, default=Path("ratio_history.csv"), help="CSV output path")
    parser.add_argument("--pdf", type=Path, default=None, help="Optional PDF report of the latest record")
    parser.add_argument("--limit", type=_positive_int, default=None, help="Only export the newest N records")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    store = get_record_store()
    try:
        records = store.list_records(limit=args.limit)
    except RecordStoreError as exc:
        logger.error("Export aborted: %s", exc)
        return 1

    df = build_history_frame(records)
    args.out.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(args.out, index=False, encoding="utf-8-sig")
    logger.info("Wrote %d records to %s", len(df), args.out)

    if args.pdf is not None:
        if not records:
            logger.warning("No records, skipping PDF")
        else:
            report = evaluate_input(input_from_mapping(records[0]))
            args.pdf.parent.mkdir(parents=True, exist_ok=True)
            args.pdf.write_bytes(build_report_pdf(report, df))
            logger.info("Wrote PDF report to %s", args.pdf)
    return 0


if __name__ == "__main__":
    sys.exit(main())
