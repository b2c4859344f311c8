from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

CURRENT_RATIO = "current_ratio"
NET_PROFIT_MARGIN = "net_profit_margin"
RETURN_ON_EQUITY = "return_on_equity"
RATIO_KINDS = (CURRENT_RATIO, NET_PROFIT_MARGIN, RETURN_ON_EQUITY)

RATIO_TITLES = {
    CURRENT_RATIO: "Current Ratio",
    NET_PROFIT_MARGIN: "Net Profit Margin",
    RETURN_ON_EQUITY: "Return on Equity",
}

RATIO_SUFFIXES = {
    CURRENT_RATIO: "x",
    NET_PROFIT_MARGIN: "%",
    RETURN_ON_EQUITY: "%",
}

# Every naming scheme seen at the input boundaries maps onto one canonical kind.
RATIO_KIND_ALIASES = {
    "current_ratio": CURRENT_RATIO,
    "currentratio": CURRENT_RATIO,
    "net_profit_margin": NET_PROFIT_MARGIN,
    "netprofitmargin": NET_PROFIT_MARGIN,
    "npm": NET_PROFIT_MARGIN,
    "return_on_equity": RETURN_ON_EQUITY,
    "returnonequity": RETURN_ON_EQUITY,
    "roe": RETURN_ON_EQUITY,
}

# (threshold, label above, label at-or-below); strict ">" comparison.
CLASSIFICATION_RULES = {
    CURRENT_RATIO: (1.5, "Healthy", "Liquidity Risk"),
    NET_PROFIT_MARGIN: (10.0, "Efficient", "Low Margin"),
    RETURN_ON_EQUITY: (15.0, "Very Good", "Suboptimal"),
}
UNKNOWN_LABEL = "-"
POSITIVE_LABELS = frozenset(rule[1] for rule in CLASSIFICATION_RULES.values())

# (upper bound, middle bound, [top text, middle text, bottom text]); ">=" comparison.
INSIGHT_TIERS = {
    CURRENT_RATIO: (
        2.0,
        1.0,
        [
            "Very safe: current assets cover short-term debt at least twice over.",
            "Adequate: short-term debt is covered, but the liquidity buffer is thin and worth watching.",
            "High risk: current assets do not cover short-term debt.",
        ],
    ),
    NET_PROFIT_MARGIN: (
        20.0,
        10.0,
        [
            "Very efficient: the company keeps a large share of every sale as net profit.",
            "Standard: profitability is in a normal range for most industries.",
            "Thin margin: costs absorb most of the revenue, leaving little net profit.",
        ],
    ),
    RETURN_ON_EQUITY: (
        15.0,
        8.0,
        [
            "Very effective: shareholders' capital is generating strong returns.",
            "Stable: equity earns a reasonable return.",
            "Low return: equity is not being turned into profit efficiently.",
        ],
    ),
}
UNKNOWN_INSIGHT = "No analysis available for this ratio."

# (top bound, top points, middle bound, middle points); ">=" comparison.
HEALTH_SCORE_BUCKETS = {
    CURRENT_RATIO: (1.5, 30, 1.0, 15),
    NET_PROFIT_MARGIN: (15.0, 40, 5.0, 20),
    RETURN_ON_EQUITY: (15.0, 30, 8.0, 15),
}
HEALTH_GRADES = [
    (80, "Strong"),
    (50, "Moderate"),
    (0, "Weak"),
]

AMOUNT_FIELDS = {
    "net_income": ("Net Income", "Profit after tax for the period."),
    "current_assets": ("Current Assets", "Cash, bank balances and other assets that convert to cash within a year."),
    "current_liabilities": ("Current Liabilities", "Short-term debt due within one year."),
    "revenue": ("Revenue", "Total sales for the period."),
    "total_equity": ("Total Equity", "Shareholders' own capital in the company."),
}

# camelCase names used by form payloads.
FORM_FIELD_ALIASES = {
    "companyName": "company_name",
    "periodYear": "period_year",
    "netIncome": "net_income",
    "currentAssets": "current_assets",
    "currentLiabilities": "current_liabilities",
    "totalEquity": "total_equity",
}

MIN_PERIOD_YEAR = 1900
MAX_PERIOD_YEAR = 2100
DEFAULT_PERIOD_YEAR = 2026

RECORDS_CACHE_TTL_SECONDS = 60 * 5


@dataclass(frozen=True)
class Settings:
    SUPABASE_URL: str | None = os.getenv("SUPABASE_URL")
    SUPABASE_KEY: str | None = os.getenv("SUPABASE_KEY")
    SUPABASE_TABLE: str = os.getenv("SUPABASE_TABLE", "financial_records")

    REQUEST_TIMEOUT: float = float(os.getenv("RATIOFIN_REQUEST_TIMEOUT", "15"))
    DATA_DIR: Path = Path(os.getenv("RATIOFIN_DATA_DIR", "data_cache"))
    LOG_LEVEL: str = os.getenv("RATIOFIN_LOG_LEVEL", "INFO")

    @property
    def supabase_enabled(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_KEY)

    @property
    def records_file(self) -> Path:
        return self.DATA_DIR / "records_v1.json"


settings = Settings()


def setup_logger(name: str, level: str | int | None = None) -> logging.Logger:
    """Return a logger with a single stream handler attached."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
    logger.setLevel(level if level is not None else settings.LOG_LEVEL.upper())
    logger.propagate = False
    return logger
