from __future__ import annotations

from typing import Tuple

from .analysers_base import Findings, RiskAnalyser, ratio
from .types_licenses import LinkType, SupportedLicense, licenses_for_components, licenses_for_projects
from .types_project import ComponentBinding
from .types_properties import Compatibility
from .types_risk import RiskCategory

SPECIFIC_WARNING_KEY = "compatibility.specific_warning"

_NOT_A_COMPONENT_CANDIDATE = (SupportedLicense.UNDEFINED, SupportedLicense.UNSUPPORTED)
_MOSTLY = (Compatibility.MOSTLY_COMPATIBLE, Compatibility.MOSTLY_INCOMPATIBLE)


def _distance(compatibility: Compatibility) -> float:
    return 1.0 - compatibility.score


class ComponentsLicensesIncompatibleWithProjectLicensesAnalyser(RiskAnalyser):
    """Checks every binding against every project license.

    A binding is only fine when it is compatible with all project licenses at
    once. Unknown and unsupported licenses are always handled as incompatible.
    """

    category = RiskCategory.HAVING_COMPONENTS_LICENSES_INCOMPATIBLE_WITH_PROJECT_LICENSES
    key_prefix = "incompatible"
    general_tips = 8

    def _analyse(self, findings: Findings) -> Tuple[float, float]:
        project = self.project
        licenses = project.licenses
        bindings = project.component_bindings
        exposure = 0.0
        impact = 0.0
        for binding in bindings:
            natively_compatible = 0
            forced_compatible = 0
            for project_license in licenses:
                compatibility = self.compatibilities.compatibility_of(
                    binding.license, project_license, binding.link, project.redistribution
                )
                values = {
                    "binding": binding.full_name,
                    "project": project.full_name,
                    "license": project_license.spdx_id,
                }
                condition = self.compatibilities.specific_warning(
                    binding.license, project_license, binding.link, project.redistribution
                )
                if condition:
                    findings.warning(SPECIFIC_WARNING_KEY, condition=condition, **values)

                if compatibility is Compatibility.COMPATIBLE:
                    natively_compatible += 1
                    continue
                if compatibility is Compatibility.FORCED_COMPATIBLE:
                    forced_compatible += 1
                    findings.warning(self.key("forced_warning"), **values)
                    findings.warning(self.key("forced_permission_warning"), **values)
                    findings.tip(self.key("forced_tip"), **values)
                    continue

                exposure += binding.weight_value
                impact += _distance(compatibility) * binding.weight_value
                if compatibility is Compatibility.INCOMPATIBLE:
                    findings.root_cause(self.key("incompatible_root_cause"), **values)
                    findings.tip(self.key("replace_tip"), **values)
                    findings.tip(self.key("permission_tip"), **values)
                elif compatibility is Compatibility.UNKNOWN:
                    findings.root_cause(self.key("unknown_root_cause"), **values)
                    findings.warning(self.key("unknown_warning"), **values)
                    findings.tip(self.key("replace_with_known_tip"), **values)
                    findings.tip(self.key("clarify_license_tip"), **values)
                elif compatibility is Compatibility.UNSUPPORTED:
                    findings.root_cause(self.key("unsupported_root_cause"), **values)
                    findings.warning(self.key("unsupported_warning"), **values)
                    findings.tip(self.key("replace_with_supported_tip"), **values)
                elif compatibility is Compatibility.MOSTLY_COMPATIBLE:
                    findings.root_cause(self.key("mostly_compatible_root_cause"), **values)
                    findings.warning(self.key("mostly_compatible_warning"), **values)
                    findings.tip(self.key("replace_with_fully_compatible_tip"), **values)
                else:
                    findings.root_cause(self.key("mostly_incompatible_root_cause"), **values)
                    findings.warning(self.key("mostly_incompatible_warning"), **values)
                    findings.tip(self.key("replace_with_fully_compatible_tip"), **values)

            self._judge_binding(findings, binding, natively_compatible, forced_compatible, len(licenses))

        total_cases = len(bindings) * len(licenses)
        if exposure > 0:
            findings.warning(self.key("legal_issues_warning"))
        return ratio(exposure, total_cases), ratio(impact, total_cases)

    def _judge_binding(
        self,
        findings: Findings,
        binding: ComponentBinding,
        natively_compatible: int,
        forced_compatible: int,
        total_licenses: int,
    ) -> None:
        values = {"binding": binding.full_name, "project": self.project.full_name}
        if natively_compatible == total_licenses:
            findings.good_thing(self.key("compatible_good_thing"), **values)
        elif natively_compatible + forced_compatible == total_licenses:
            findings.good_thing(self.key("forced_good_thing"), **values)
        elif natively_compatible + forced_compatible > 0:
            findings.root_cause(
                self.key("partially_compatible_root_cause"),
                compatible=natively_compatible + forced_compatible,
                total=total_licenses,
                **values,
            )


class LimitedSetOfPotentialProjectLicensesAnalyser(RiskAnalyser):
    """How many real licenses could still be chosen for the project given its bill of components."""

    category = RiskCategory.HAVING_A_LIMITED_SET_OF_POTENTIAL_PROJECT_LICENSES
    key_prefix = "limited_project"
    general_tips = 6

    def _analyse(self, findings: Findings) -> Tuple[float, float]:
        project = self.project
        bindings = project.component_bindings
        candidates = licenses_for_projects()
        limited = 0
        impact = 0.0
        for candidate in candidates:
            viable = True
            for binding in bindings:
                compatibility = self.compatibilities.compatibility_of(
                    binding.license, candidate, binding.link, project.redistribution
                )
                weight = binding.weight_value
                values = {
                    "candidate": candidate.spdx_id,
                    "binding": binding.full_name,
                    "link": binding.link.description,
                    "redistribution": project.redistribution.description,
                }
                if compatibility is Compatibility.COMPATIBLE:
                    continue
                if compatibility is Compatibility.FORCED_COMPATIBLE:
                    if candidate in project.licenses:
                        findings.warning(self.key("forced_warning"), **values)
                        continue
                    # The exception was granted for the current project licenses only; it adds no impact.
                    viable = False
                    findings.root_cause(self.key("forced_root_cause"), **values)
                    findings.tip(self.key("replace_tip"), **values)
                    continue

                impact += _distance(compatibility) * weight
                if compatibility not in _MOSTLY:
                    viable = False
                if compatibility is Compatibility.INCOMPATIBLE:
                    findings.root_cause(self.key("incompatible_root_cause"), **values)
                elif compatibility is Compatibility.UNKNOWN:
                    findings.root_cause(self.key("unknown_root_cause"), **values)
                elif compatibility is Compatibility.UNSUPPORTED:
                    findings.root_cause(self.key("unsupported_root_cause"), **values)
                    findings.warning(self.key("unsupported_warning"), **values)
                elif compatibility is Compatibility.MOSTLY_COMPATIBLE:
                    findings.root_cause(self.key("mostly_compatible_root_cause"), **values)
                    findings.warning(self.key("verify_warning"), **values)
                else:
                    findings.root_cause(self.key("mostly_incompatible_root_cause"), **values)
                    findings.warning(self.key("verify_warning"), **values)
                findings.tip(self.key("replace_tip"), **values)

            if viable:
                findings.good_thing(
                    self.key("viable_good_thing"),
                    candidate=candidate.spdx_id,
                    redistribution=project.redistribution.description,
                )
            else:
                limited += 1

        if candidates and limited == len(candidates):
            findings.root_cause(self.key("no_viable_license_root_cause"))
        return ratio(limited, len(candidates)), ratio(impact, len(candidates) * len(bindings))


class LimitedSetOfPotentialComponentsLicensesAnalyser(RiskAnalyser):
    """Sweeps every supported license as a hypothetical new component under every link type.

    The actual bill of components is not consulted; only the project licenses
    and redistribution mode decide which future components would fit.
    """

    category = RiskCategory.HAVING_A_LIMITED_SET_OF_POTENTIAL_COMPONENTS_LICENSES
    key_prefix = "limited_components"
    general_tips = 4

    def _analyse(self, findings: Findings) -> Tuple[float, float]:
        project = self.project
        licenses = project.licenses
        candidates = [license for license in licenses_for_components() if license not in _NOT_A_COMPONENT_CANDIDATE]
        exposure = 0.0
        impact = 0.0
        for candidate in candidates:
            for link in LinkType:
                fits_every_license = True
                for project_license in licenses:
                    compatibility = self.compatibilities.compatibility_of(
                        candidate, project_license, link, project.redistribution
                    )
                    values = {
                        "candidate": candidate.spdx_id,
                        "link": link.description,
                        "license": project_license.spdx_id,
                        "redistribution": project.redistribution.description,
                    }
                    if compatibility is Compatibility.COMPATIBLE:
                        continue
                    if compatibility is Compatibility.FORCED_COMPATIBLE:
                        findings.warning(self.key("forced_warning"), **values)
                        continue

                    fits_every_license = False
                    exposure += 1
                    impact += _distance(compatibility)
                    if compatibility is Compatibility.UNSUPPORTED:
                        findings.root_cause(self.key("unsupported_root_cause"), **values)
                    elif compatibility is Compatibility.UNKNOWN:
                        findings.root_cause(self.key("unknown_root_cause"), **values)
                    elif compatibility in (Compatibility.MOSTLY_COMPATIBLE, Compatibility.MOSTLY_INCOMPATIBLE):
                        findings.root_cause(self.key("partially_usable_root_cause"), **values)
                        findings.warning(self.key("verify_warning"), **values)
                    else:
                        findings.root_cause(self.key("incompatible_root_cause"), **values)

                if fits_every_license:
                    findings.good_thing(self.key("usable_good_thing"), candidate=candidate.spdx_id, link=link.description)

        total_cases = len(candidates) * len(LinkType) * len(licenses)
        return ratio(exposure, total_cases), ratio(impact, total_cases)
