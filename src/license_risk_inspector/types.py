from __future__ import annotations

"""Shared data structures for license risk analysis.

The definitions live in domain-focused modules; this module re-exports them
so callers have a single stable import path.
"""

from .types_licenses import (
    ComponentWeight,
    LinkType,
    Redistribution,
    SupportedLicense,
    fictitious_licenses,
    licenses_for_components,
    licenses_for_projects,
    non_fictitious_licenses,
)
from .types_project import Component, ComponentBinding, Project
from .types_properties import Compatibility, Obsolescence, Spreading, Trend
from .types_report import Report
from .types_risk import AnalysisSettings, Explanation, Language, RiskCategory, RiskResult, Verbosity

__all__ = [
    "AnalysisSettings",
    "Compatibility",
    "Component",
    "ComponentBinding",
    "ComponentWeight",
    "Explanation",
    "Language",
    "LinkType",
    "Obsolescence",
    "Project",
    "Redistribution",
    "Report",
    "RiskCategory",
    "RiskResult",
    "Spreading",
    "SupportedLicense",
    "Trend",
    "Verbosity",
    "fictitious_licenses",
    "licenses_for_components",
    "licenses_for_projects",
    "non_fictitious_licenses",
]
