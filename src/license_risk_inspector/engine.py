from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from .analysers import build_analysers
from .analysers_base import RiskAnalyser
from .compatibility import CompatibilityTable
from .types_project import Project
from .types_risk import RiskCategory, RiskResult

logger = logging.getLogger(__name__)


class RiskAnalysisEngine:
    """Runs a set of risk analysers bound to the same project.

    Results come back in registration order. Categories are not commensurable,
    so no overall score is computed here.
    """

    def __init__(self, first_analyser: RiskAnalyser) -> None:
        if first_analyser is None:
            logger.error("first risk analyser cannot be null")
            raise ValueError("first risk analyser cannot be null")
        self._project = first_analyser.project
        self._analysers: List[RiskAnalyser] = [first_analyser]

    @classmethod
    def for_project(
        cls,
        project: Project,
        categories: Optional[Iterable[RiskCategory]] = None,
        compatibilities: Optional[CompatibilityTable] = None,
    ) -> "RiskAnalysisEngine":
        analysers = build_analysers(project, categories, compatibilities)
        if not analysers:
            raise ValueError("at least one risk category must be selected")
        engine = cls(analysers[0])
        for analyser in analysers[1:]:
            engine.add_risk_analyser(analyser)
        return engine

    @property
    def project(self) -> Project:
        return self._project

    @property
    def analysers(self) -> Tuple[RiskAnalyser, ...]:
        return tuple(self._analysers)

    def add_risk_analyser(self, analyser: RiskAnalyser) -> None:
        if analyser is None:
            logger.error("risk analyser cannot be null")
            raise ValueError("risk analyser cannot be null")
        if analyser.project is not self._project:
            logger.error("risk analyser %r is bound to a different project", analyser)
            raise ValueError("all risk analysers must be bound to the same project")
        self._analysers.append(analyser)

    def analyse(self) -> Tuple[RiskResult, ...]:
        logger.debug("Running %d risk analysers on %s", len(self._analysers), self._project.full_name)
        return tuple(analyser.compute_result() for analyser in self._analysers)
