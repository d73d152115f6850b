from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from .types_licenses import ComponentWeight, LinkType, Redistribution, SupportedLicense

logger = logging.getLogger(__name__)


def _reject(message: str) -> None:
    logger.error(message)
    raise ValueError(message)


@dataclass(frozen=True)
class Component:
    name: str
    version: str
    license: SupportedLicense

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            _reject("component name cannot be blank")
        if not self.version or not self.version.strip():
            _reject("component version cannot be blank")
        if self.license is None:
            _reject("component license cannot be null")


@dataclass(frozen=True)
class ComponentBinding:
    """A component as it is actually used by a project: how it is linked and how much it weighs."""

    component: Component
    link: LinkType
    weight: ComponentWeight

    def __post_init__(self) -> None:
        if self.component is None:
            _reject("component cannot be null")
        if self.link is None:
            _reject("link cannot be null")
        if self.weight is None:
            _reject("weight cannot be null")

    @property
    def license(self) -> SupportedLicense:
        return self.component.license

    @property
    def weight_value(self) -> float:
        return self.weight.weight

    @property
    def full_name(self) -> str:
        return (
            f"{self.component.name}-{self.component.version} "
            f"({self.component.license.spdx_id}), {self.link.description}"
        )


@dataclass(eq=False)
class Project:
    """A project, its licenses and its bill of component bindings.

    Licenses and bindings can only be appended. Callers that share a project
    between threads must not mutate it while an analysis is running.
    """

    name: str
    version: str
    license: SupportedLicense
    redistribution: Redistribution
    binding: ComponentBinding
    _licenses: List[SupportedLicense] = field(init=False, repr=False)
    _bindings: List[ComponentBinding] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            _reject("project name cannot be blank")
        if not self.version or not self.version.strip():
            _reject("project version cannot be blank")
        if self.license is None:
            _reject("project license cannot be null")
        if self.license.fictitious:
            _reject(f"{self.license.spdx_id} cannot be used as a project license")
        if self.redistribution is None:
            _reject("redistribution cannot be null")
        if self.binding is None:
            _reject("first component binding cannot be null")
        self._licenses = [self.license]
        self._bindings = [self.binding]

    @property
    def licenses(self) -> Tuple[SupportedLicense, ...]:
        return tuple(self._licenses)

    @property
    def component_bindings(self) -> Tuple[ComponentBinding, ...]:
        return tuple(self._bindings)

    def add_license(self, additional_license: SupportedLicense) -> None:
        if additional_license is None:
            _reject("additional license cannot be null")
        if additional_license.fictitious:
            _reject(f"{additional_license.spdx_id} cannot be used as a project license")
        if additional_license in self._licenses:
            _reject(f"{additional_license.spdx_id} is already a license of the project")
        self._licenses.append(additional_license)

    def add_component_binding(self, component_binding: ComponentBinding) -> None:
        if component_binding is None:
            _reject("component binding cannot be null")
        self._bindings.append(component_binding)

    @property
    def full_name(self) -> str:
        spdx_ids = ", ".join(license.spdx_id for license in self._licenses)
        return f"{self.name}-{self.version} ({spdx_ids}), {self.redistribution.description}"
