from __future__ import annotations

from enum import Enum
from typing import List


class SupportedLicense(Enum):
    """Licenses the base of knowledge can reason about.

    Declaration order matters: it is the order used to break ties when the
    heterogeneity analyser picks a dominant license.
    """

    AGPL_3_0_ONLY = ("AGPL-3.0-only", "GNU Affero General Public License v3.0 only", False)
    APACHE_1_1 = ("Apache-1.1", "Apache License 1.1", False)
    APACHE_2_0 = ("Apache-2.0", "Apache License 2.0", False)
    ARTISTIC_2_0 = ("Artistic-2.0", "Artistic License 2.0", False)
    BSD_3_CLAUSE = ("BSD-3-Clause", "BSD 3-Clause \"New\" or \"Revised\" License", False)
    BSD_4_CLAUSE = ("BSD-4-Clause", "BSD 4-Clause \"Original\" or \"Old\" License", False)
    CDDL_1_0 = ("CDDL-1.0", "Common Development and Distribution License 1.0", False)
    CPL_1_0 = ("CPL-1.0", "Common Public License 1.0", False)
    EPL_1_0 = ("EPL-1.0", "Eclipse Public License 1.0", False)
    EPL_2_0 = ("EPL-2.0", "Eclipse Public License 2.0", False)
    EUPL_1_1 = ("EUPL-1.1", "European Union Public License 1.1", False)
    GPL_2_0_ONLY = ("GPL-2.0-only", "GNU General Public License v2.0 only", False)
    GPL_2_0_OR_LATER = ("GPL-2.0-or-later", "GNU General Public License v2.0 or later", False)
    GPL_3_0_ONLY = ("GPL-3.0-only", "GNU General Public License v3.0 only", False)
    GPL_3_0_OR_LATER = ("GPL-3.0-or-later", "GNU General Public License v3.0 or later", False)
    LGPL_2_1_ONLY = ("LGPL-2.1-only", "GNU Lesser General Public License v2.1 only", False)
    LGPL_2_1_OR_LATER = ("LGPL-2.1-or-later", "GNU Lesser General Public License v2.1 or later", False)
    LGPL_3_0_OR_LATER = ("LGPL-3.0-or-later", "GNU Lesser General Public License v3.0 or later", False)
    MIT = ("MIT", "MIT License", False)
    MPL_1_1 = ("MPL-1.1", "Mozilla Public License 1.1", False)
    PUBLIC_DOMAIN = ("LicenseRef-Public-Domain", "Public domain", False)
    # Pseudo-licenses: only valid on components, never as a project license.
    UNDEFINED = ("UNDEFINED", "Undefined license", True)
    UNSUPPORTED = ("UNSUPPORTED", "License not supported yet", True)
    FORCED_AS_PROJECT_LICENSE = ("FORCED-AS-PROJECT-LICENSE", "Forced to be compatible with the project license", True)

    def __init__(self, spdx_id: str, full_name: str, fictitious: bool) -> None:
        self.spdx_id = spdx_id
        self.full_name = full_name
        self.fictitious = fictitious

    def __str__(self) -> str:
        return self.spdx_id

    @classmethod
    def parse(cls, text: str) -> "SupportedLicense":
        """Resolve a member name (``GPL_3_0_ONLY``) or an SPDX id (``GPL-3.0-only``)."""

        if not text:
            raise ValueError("license cannot be blank")
        candidate = text.strip()
        if candidate.upper() in cls.__members__:
            return cls[candidate.upper()]
        lowered = candidate.lower()
        for member in cls:
            if member.spdx_id.lower() == lowered:
                return member
        raise ValueError(f"Unknown license: {text}")


def licenses_for_projects() -> List[SupportedLicense]:
    return [license for license in SupportedLicense if not license.fictitious]


def licenses_for_components() -> List[SupportedLicense]:
    return list(SupportedLicense)


def fictitious_licenses() -> List[SupportedLicense]:
    return [license for license in SupportedLicense if license.fictitious]


def non_fictitious_licenses() -> List[SupportedLicense]:
    return licenses_for_projects()


class _ParsableEnum(Enum):
    @classmethod
    def parse(cls, text: str):
        if not text:
            raise ValueError(f"{cls.__name__} cannot be blank")
        key = text.strip().upper().replace("-", "_").replace(" ", "_")
        if key not in cls.__members__:
            raise ValueError(f"Unknown {cls.__name__}: {text}")
        return cls[key]


class LinkType(_ParsableEnum):
    STATIC = "static link"
    DYNAMIC = "dynamic link"

    @property
    def description(self) -> str:
        return self.value


class Redistribution(_ParsableEnum):
    NONE = "not redistributed"
    SOFTWARE_PACKAGE_OR_SAAS = "redistributed as a software package or SaaS"

    @property
    def description(self) -> str:
        return self.value


class ComponentWeight(_ParsableEnum):
    """How much a component contributes to the whole project."""

    LOW = ("low contribution", 0.01)
    NEAR_LOW = ("near low contribution", 0.33)
    NEAR_HIGH = ("near high contribution", 0.67)
    HIGH = ("high contribution", 1.0)

    def __init__(self, description: str, weight: float) -> None:
        self.description = description
        self.weight = weight
