from __future__ import annotations

"""Registry of the available risk analysers.

Analyser classes live in domain-focused modules; this module maps each risk
category to its analyser and builds ready-to-run instances for a project.
"""

from typing import Dict, Iterable, List, Optional, Type

from .analysers_base import Findings, RiskAnalyser
from .analysers_compatibility import (
    ComponentsLicensesIncompatibleWithProjectLicensesAnalyser,
    LimitedSetOfPotentialComponentsLicensesAnalyser,
    LimitedSetOfPotentialProjectLicensesAnalyser,
)
from .analysers_composition import (
    ComponentsLicensesMisalignedFromProjectLicensesAnalyser,
    HeterogeneousComponentsLicensesAnalyser,
)
from .analysers_properties import (
    ObsoleteComponentsLicensesAnalyser,
    ObsoleteProjectLicensesAnalyser,
    ScarcelySpreadComponentsLicensesAnalyser,
    ScarcelySpreadProjectLicensesAnalyser,
    UnfashionableComponentsLicensesAnalyser,
    UnfashionableProjectLicensesAnalyser,
)
from .compatibility import CompatibilityTable
from .types_project import Project
from .types_risk import RiskCategory

ANALYSERS: Dict[RiskCategory, Type[RiskAnalyser]] = {
    analyser.category: analyser
    for analyser in (
        ComponentsLicensesIncompatibleWithProjectLicensesAnalyser,
        LimitedSetOfPotentialProjectLicensesAnalyser,
        LimitedSetOfPotentialComponentsLicensesAnalyser,
        ObsoleteProjectLicensesAnalyser,
        ObsoleteComponentsLicensesAnalyser,
        UnfashionableProjectLicensesAnalyser,
        UnfashionableComponentsLicensesAnalyser,
        ScarcelySpreadProjectLicensesAnalyser,
        ScarcelySpreadComponentsLicensesAnalyser,
        HeterogeneousComponentsLicensesAnalyser,
        ComponentsLicensesMisalignedFromProjectLicensesAnalyser,
    )
}


def analyser_for(category: RiskCategory) -> Type[RiskAnalyser]:
    if category not in ANALYSERS:
        raise ValueError(f"No analyser registered for {category}")
    return ANALYSERS[category]


def build_analysers(
    project: Project,
    categories: Optional[Iterable[RiskCategory]] = None,
    compatibilities: Optional[CompatibilityTable] = None,
) -> List[RiskAnalyser]:
    selected = list(categories) if categories is not None else list(ANALYSERS)
    return [analyser_for(category)(project, compatibilities) for category in selected]


__all__ = [
    "ANALYSERS",
    "ComponentsLicensesIncompatibleWithProjectLicensesAnalyser",
    "ComponentsLicensesMisalignedFromProjectLicensesAnalyser",
    "Findings",
    "HeterogeneousComponentsLicensesAnalyser",
    "LimitedSetOfPotentialComponentsLicensesAnalyser",
    "LimitedSetOfPotentialProjectLicensesAnalyser",
    "ObsoleteComponentsLicensesAnalyser",
    "ObsoleteProjectLicensesAnalyser",
    "RiskAnalyser",
    "ScarcelySpreadComponentsLicensesAnalyser",
    "ScarcelySpreadProjectLicensesAnalyser",
    "UnfashionableComponentsLicensesAnalyser",
    "UnfashionableProjectLicensesAnalyser",
    "analyser_for",
    "build_analysers",
]
