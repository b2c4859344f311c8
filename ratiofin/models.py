from dataclasses import dataclass, field


@dataclass(frozen=True)
class FinancialInput:
    company_name: str
    period_year: int
    net_income: float
    current_assets: float
    current_liabilities: float
    revenue: float
    total_equity: float


@dataclass(frozen=True)
class RatioResult:
    current_ratio: float
    net_profit_margin: float
    return_on_equity: float

    def as_dict(self) -> dict[str, float]:
        return {
            "current_ratio": self.current_ratio,
            "net_profit_margin": self.net_profit_margin,
            "return_on_equity": self.return_on_equity,
        }


@dataclass(frozen=True)
class RatioClassification:
    kind: str
    value: float
    label: str
    insight: str


@dataclass(frozen=True)
class RatioReport:
    data: FinancialInput
    ratios: RatioResult
    classifications: tuple[RatioClassification, ...] = field(default_factory=tuple)
    health_score: int = 0
    health_grade: str = ""

    def classification(self, kind: str) -> RatioClassification | None:
        for item in self.classifications:
            if item.kind == kind:
                return item
        return None
