from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .compatibility import CompatibilityTable, get_compatibility_table
from .types_project import Project
from .types_risk import Explanation, RiskCategory, RiskResult

logger = logging.getLogger(__name__)

NO_RISK = 0.0


@dataclass
class Findings:
    """Explanations collected during a single analyser run, in emission order."""

    root_causes: List[Explanation] = field(default_factory=list)
    warnings: List[Explanation] = field(default_factory=list)
    good_things: List[Explanation] = field(default_factory=list)
    tips: List[Explanation] = field(default_factory=list)

    def root_cause(self, key: str, **values: Any) -> None:
        self.root_causes.append(Explanation.of(key, **values))

    def warning(self, key: str, **values: Any) -> None:
        self.warnings.append(Explanation.of(key, **values))

    def good_thing(self, key: str, **values: Any) -> None:
        self.good_things.append(Explanation.of(key, **values))

    def tip(self, key: str, **values: Any) -> None:
        self.tips.append(Explanation.of(key, **values))


def ratio(numerator: float, denominator: float) -> float:
    """Normalise an accumulated sum into [0, 1]."""

    if denominator <= 0:
        return NO_RISK
    return min(1.0, max(0.0, numerator / denominator))


class RiskAnalyser(ABC):
    """Computes one risk category for one project.

    ``compute_result`` recomputes from scratch on every call and never mutates
    the project, so it can be called any number of times.
    """

    category: RiskCategory
    key_prefix: str
    general_tips: int = 4

    def __init__(self, project: Project, compatibilities: Optional[CompatibilityTable] = None) -> None:
        if project is None:
            logger.error("project cannot be null")
            raise ValueError("project cannot be null")
        self._project = project
        self._compatibilities = compatibilities if compatibilities is not None else get_compatibility_table()

    @property
    def project(self) -> Project:
        return self._project

    @property
    def compatibilities(self) -> CompatibilityTable:
        return self._compatibilities

    def key(self, name: str) -> str:
        return f"{self.key_prefix}.{name}"

    @abstractmethod
    def _analyse(self, findings: Findings) -> Tuple[float, float]:
        """Fill ``findings`` and return the normalised (exposure, impact)."""

    def compute_result(self) -> RiskResult:
        findings = Findings()
        exposure, impact = self._analyse(findings)
        if exposure > NO_RISK:
            for index in range(self.general_tips):
                findings.tip(self.key(f"general_tips.{index}"))
            if len(self._project.licenses) > 1:
                findings.tip(self.key("multiple_licenses_tip"))
        logger.debug(
            "%s on %s: exposure=%.4f impact=%.4f", self.category.name, self._project.name, exposure, impact
        )
        return RiskResult(
            category=self.category,
            exposure=exposure,
            impact=impact,
            root_causes=tuple(findings.root_causes),
            warnings=tuple(findings.warnings),
            good_things=tuple(findings.good_things),
            tips=tuple(findings.tips),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(project={self._project.name!r})"
