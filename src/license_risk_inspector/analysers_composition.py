from __future__ import annotations

from typing import Dict, Optional, Tuple

from .analysers_base import Findings, RiskAnalyser, ratio
from .types_licenses import SupportedLicense
from .types_project import ComponentBinding
from .types_risk import RiskCategory


class ComponentsLicensesMisalignedFromProjectLicensesAnalyser(RiskAnalyser):
    category = RiskCategory.HAVING_COMPONENTS_LICENSES_MISALIGNED_FROM_PROJECT_LICENSES
    key_prefix = "misaligned"

    def _analyse(self, findings: Findings) -> Tuple[float, float]:
        project = self.project
        licenses = project.licenses
        bindings = project.component_bindings
        mismatches = 0
        mismatched_weight = 0.0
        total_weight = 0.0
        for binding in bindings:
            for project_license in licenses:
                total_weight += binding.weight_value
                values = {
                    "binding": binding.full_name,
                    "project": project.full_name,
                    "license": project_license.spdx_id,
                }
                if binding.license is project_license:
                    findings.good_thing(self.key("good_thing"), **values)
                    continue
                mismatches += 1
                mismatched_weight += binding.weight_value
                findings.root_cause(self.key("root_cause"), **values)
                findings.tip(self.key("tip"), **values)
        total_cases = len(bindings) * len(licenses)
        return ratio(mismatches, total_cases), ratio(mismatched_weight, total_weight)


class HeterogeneousComponentsLicensesAnalyser(RiskAnalyser):
    """Measures how far the bill of components is from using one single license.

    The dominant license is the one with the highest accumulated weight; ties
    go to the most used license, then to the first one in declaration order.
    """

    category = RiskCategory.HAVING_HETEROGENEOUS_COMPONENTS_LICENSES
    key_prefix = "heterogeneous"

    def __init__(self, project, compatibilities=None) -> None:
        super().__init__(project, compatibilities)
        self._dominant_license: Optional[SupportedLicense] = None

    @property
    def dominant_license(self) -> Optional[SupportedLicense]:
        """License picked as reference by the last ``compute_result`` call."""

        return self._dominant_license

    @staticmethod
    def pick_dominant_license(bindings: Tuple[ComponentBinding, ...]) -> SupportedLicense:
        weights: Dict[SupportedLicense, float] = {}
        counts: Dict[SupportedLicense, int] = {}
        for binding in bindings:
            weights[binding.license] = weights.get(binding.license, 0.0) + binding.weight_value
            counts[binding.license] = counts.get(binding.license, 0) + 1
        # Enum iteration order is the final tie-break.
        present = [license for license in SupportedLicense if license in weights]
        return max(present, key=lambda license: (round(weights[license], 6), counts[license], -present.index(license)))

    def _analyse(self, findings: Findings) -> Tuple[float, float]:
        bindings = self.project.component_bindings
        dominant = self.pick_dominant_license(bindings)
        self._dominant_license = dominant
        distinct_licenses = len({binding.license for binding in bindings})

        outliers = 0
        outlier_weight = 0.0
        total_weight = 0.0
        for binding in bindings:
            total_weight += binding.weight_value
            values = {"binding": binding.full_name, "dominant": dominant.spdx_id}
            if binding.license is dominant:
                findings.good_thing(self.key("good_thing"), **values)
                continue
            outliers += 1
            outlier_weight += binding.weight_value
            findings.root_cause(self.key("root_cause"), **values)
            findings.tip(self.key("tip"), **values)

        if outliers:
            findings.warning(
                self.key("dominant_choice_warning"),
                dominant=dominant.spdx_id,
                distinct=distinct_licenses,
                alternatives=distinct_licenses - 1,
            )
            findings.root_cause(self.key("too_many_licenses_root_cause"), distinct=distinct_licenses)
        return ratio(outliers, distinct_licenses), ratio(outlier_weight, total_weight)
