from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .types_project import Project
from .types_risk import AnalysisSettings, RiskCategory, RiskResult


@dataclass
class Report:
    project: Project
    results: list[RiskResult]
    generated_at: datetime
    settings: AnalysisSettings = field(default_factory=AnalysisSettings)

    def result_for(self, category: RiskCategory) -> Optional[RiskResult]:
        for result in self.results:
            if result.category is category:
                return result
        return None

    @property
    def highest_risk(self) -> Optional[RiskResult]:
        """Result with the greatest risk value; earlier categories win ties."""

        if not self.results:
            return None
        return max(self.results, key=lambda result: (result.risk_value, -self.results.index(result)))

    @property
    def risk_breakdown(self) -> dict[str, float]:
        return {result.category.name: result.risk_value for result in self.results}
