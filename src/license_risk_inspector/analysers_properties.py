from __future__ import annotations

from typing import Callable, Tuple

from .analysers_base import Findings, RiskAnalyser, ratio
from .license_properties import obsolescence_of, spreading_of, trend_of
from .types_licenses import SupportedLicense
from .types_properties import IDEAL_OBSOLESCENCE, IDEAL_SPREADING, IDEAL_TREND
from .types_risk import RiskCategory


class ComponentLicensePropertyAnalyser(RiskAnalyser):
    """Weighted share of bindings whose license is not at the ideal level of a property scale."""

    ideal = None
    classify: Callable[[SupportedLicense], object]

    def _analyse(self, findings: Findings) -> Tuple[float, float]:
        bindings = self.project.component_bindings
        exposure = 0.0
        impact = 0.0
        for binding in bindings:
            level = self.classify(binding.license)
            if level is self.ideal:
                findings.good_thing(self.key("good_thing"), binding=binding.full_name, level=level.description)
                continue
            exposure += binding.weight_value
            impact += level.score * binding.weight_value
            findings.root_cause(self.key("root_cause"), binding=binding.full_name, level=level.description)
            findings.tip(self.key("tip"), binding=binding.full_name)
        total_cases = len(bindings)
        return ratio(exposure, total_cases), ratio(impact, total_cases)


class ProjectLicensePropertyAnalyser(RiskAnalyser):
    """Share of project licenses not at the ideal level; project licenses carry no weight."""

    ideal = None
    classify: Callable[[SupportedLicense], object]

    def _analyse(self, findings: Findings) -> Tuple[float, float]:
        licenses = self.project.licenses
        exposure = 0.0
        impact = 0.0
        for project_license in licenses:
            level = self.classify(project_license)
            if level is self.ideal:
                findings.good_thing(
                    self.key("good_thing"),
                    project=self.project.full_name,
                    license=project_license.spdx_id,
                    level=level.description,
                )
                continue
            exposure += 1
            impact += level.score
            findings.root_cause(
                self.key("root_cause"),
                project=self.project.full_name,
                license=project_license.spdx_id,
                level=level.description,
            )
            findings.tip(self.key("tip"), license=project_license.spdx_id)
        total_cases = len(licenses)
        return ratio(exposure, total_cases), ratio(impact, total_cases)


class ObsoleteComponentsLicensesAnalyser(ComponentLicensePropertyAnalyser):
    category = RiskCategory.HAVING_OBSOLETE_COMPONENTS_LICENSES
    key_prefix = "obsolete_components"
    ideal = IDEAL_OBSOLESCENCE
    classify = staticmethod(obsolescence_of)


class UnfashionableComponentsLicensesAnalyser(ComponentLicensePropertyAnalyser):
    category = RiskCategory.HAVING_UNFASHIONABLE_COMPONENTS_LICENSES
    key_prefix = "unfashionable_components"
    ideal = IDEAL_TREND
    classify = staticmethod(trend_of)


class ScarcelySpreadComponentsLicensesAnalyser(ComponentLicensePropertyAnalyser):
    category = RiskCategory.HAVING_SCARCELY_SPREAD_COMPONENTS_LICENSES
    key_prefix = "scarcely_spread_components"
    ideal = IDEAL_SPREADING
    classify = staticmethod(spreading_of)


class ObsoleteProjectLicensesAnalyser(ProjectLicensePropertyAnalyser):
    category = RiskCategory.HAVING_OBSOLETE_PROJECT_LICENSES
    key_prefix = "obsolete_project"
    ideal = IDEAL_OBSOLESCENCE
    classify = staticmethod(obsolescence_of)


class UnfashionableProjectLicensesAnalyser(ProjectLicensePropertyAnalyser):
    category = RiskCategory.HAVING_UNFASHIONABLE_PROJECT_LICENSES
    key_prefix = "unfashionable_project"
    ideal = IDEAL_TREND
    classify = staticmethod(trend_of)


class ScarcelySpreadProjectLicensesAnalyser(ProjectLicensePropertyAnalyser):
    category = RiskCategory.HAVING_SCARCELY_SPREAD_PROJECT_LICENSES
    key_prefix = "scarcely_spread_project"
    ideal = IDEAL_SPREADING
    classify = staticmethod(spreading_of)
