"""License compatibility base of knowledge.

Explicit entries come from ``data/compatibilities.yaml``. Entries for the
pseudo-licenses and for projects that are not redistributed are generated on
load. The table is built once per process and never written afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

import yaml

from .types_licenses import (
    LinkType,
    Redistribution,
    SupportedLicense,
    licenses_for_components,
    licenses_for_projects,
)
from .types_properties import Compatibility

logger = logging.getLogger(__name__)

DATA_FILE = Path(__file__).with_name("data") / "compatibilities.yaml"

CompatibilityKey = Tuple[SupportedLicense, SupportedLicense, LinkType, Redistribution]

_PSEUDO_LICENSE_COMPATIBILITIES = {
    SupportedLicense.UNDEFINED: Compatibility.UNKNOWN,
    SupportedLicense.UNSUPPORTED: Compatibility.UNSUPPORTED,
    SupportedLicense.FORCED_AS_PROJECT_LICENSE: Compatibility.FORCED_COMPATIBLE,
}


@dataclass(frozen=True)
class CompatibilityEntry:
    compatibility: Compatibility
    warning: Optional[str] = None


def _parse_entry(raw: object, where: str) -> CompatibilityEntry:
    if isinstance(raw, str):
        name, warning = raw, None
    elif isinstance(raw, dict):
        name, warning = raw.get("compatibility"), raw.get("warning")
    else:
        raise ValueError(f"Malformed compatibility entry at {where}: {raw!r}")
    if name not in Compatibility.__members__:
        raise ValueError(f"Unknown compatibility '{name}' at {where}")
    return CompatibilityEntry(Compatibility[name], str(warning) if warning else None)


def _member(enum_cls, name: str, where: str):
    if name not in enum_cls.__members__:
        raise ValueError(f"Unknown {enum_cls.__name__} '{name}' at {where}")
    return enum_cls[name]


def parse_compatibility_data(raw: Mapping) -> dict[CompatibilityKey, CompatibilityEntry]:
    """Turn the nested YAML mapping into a flat table keyed by the 4-tuple."""

    entries: dict[CompatibilityKey, CompatibilityEntry] = {}
    for link_name, by_redistribution in (raw or {}).items():
        link = _member(LinkType, link_name, link_name)
        for redistribution_name, by_component in (by_redistribution or {}).items():
            where = f"{link_name}/{redistribution_name}"
            redistribution = _member(Redistribution, redistribution_name, where)
            for component_name, by_project in (by_component or {}).items():
                component_license = _member(SupportedLicense, component_name, f"{where}/{component_name}")
                for project_name, value in (by_project or {}).items():
                    at = f"{where}/{component_name}/{project_name}"
                    project_license = _member(SupportedLicense, project_name, at)
                    if project_license.fictitious:
                        raise ValueError(f"{project_name} cannot be a project license ({at})")
                    entries[(component_license, project_license, link, redistribution)] = _parse_entry(value, at)
    return entries


def _generated_entries() -> dict[CompatibilityKey, CompatibilityEntry]:
    entries: dict[CompatibilityKey, CompatibilityEntry] = {}
    real_licenses = licenses_for_projects()
    for link in LinkType:
        # Nothing is redistributed, so no license term is triggered.
        for component_license in real_licenses:
            for project_license in real_licenses:
                entries[(component_license, project_license, link, Redistribution.NONE)] = CompatibilityEntry(
                    Compatibility.COMPATIBLE
                )
        for redistribution in Redistribution:
            for project_license in real_licenses:
                for pseudo_license, compatibility in _PSEUDO_LICENSE_COMPATIBILITIES.items():
                    entries[(pseudo_license, project_license, link, redistribution)] = CompatibilityEntry(compatibility)
    return entries


class CompatibilityTable:
    """Read-only lookup of license compatibilities."""

    def __init__(self, entries: Mapping[CompatibilityKey, CompatibilityEntry]) -> None:
        self._entries = MappingProxyType(dict(entries))

    @classmethod
    def from_yaml(cls, path: Path = DATA_FILE) -> "CompatibilityTable":
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        entries = _generated_entries()
        entries.update(parse_compatibility_data(raw))
        logger.debug("Loaded %d license compatibility entries from %s", len(entries), path)
        return cls(entries)

    @staticmethod
    def _check_key(
        component_license: SupportedLicense,
        project_license: SupportedLicense,
        link: LinkType,
        redistribution: Redistribution,
    ) -> CompatibilityKey:
        for name, value in (
            ("component license", component_license),
            ("project license", project_license),
            ("link", link),
            ("redistribution", redistribution),
        ):
            if value is None:
                logger.error("%s cannot be null", name)
                raise ValueError(f"{name} cannot be null")
        return (component_license, project_license, link, redistribution)

    def entry_for(
        self,
        component_license: SupportedLicense,
        project_license: SupportedLicense,
        link: LinkType,
        redistribution: Redistribution,
    ) -> Optional[CompatibilityEntry]:
        return self._entries.get(self._check_key(component_license, project_license, link, redistribution))

    def compatibility_of(
        self,
        component_license: SupportedLicense,
        project_license: SupportedLicense,
        link: LinkType,
        redistribution: Redistribution,
    ) -> Compatibility:
        entry = self.entry_for(component_license, project_license, link, redistribution)
        return entry.compatibility if entry else Compatibility.UNSUPPORTED

    def specific_warning(
        self,
        component_license: SupportedLicense,
        project_license: SupportedLicense,
        link: LinkType,
        redistribution: Redistribution,
    ) -> Optional[str]:
        entry = self.entry_for(component_license, project_license, link, redistribution)
        return entry.warning if entry else None

    def has_specific_warning(
        self,
        component_license: SupportedLicense,
        project_license: SupportedLicense,
        link: LinkType,
        redistribution: Redistribution,
    ) -> bool:
        return self.specific_warning(component_license, project_license, link, redistribution) is not None

    def number_of_supported_combinations(self) -> int:
        return len(self._entries)

    def licenses_coverage(self) -> float:
        possible = (
            len(licenses_for_components()) * len(licenses_for_projects()) * len(LinkType) * len(Redistribution)
        )
        return round(len(self._entries) / possible, 4)


@lru_cache(maxsize=1)
def get_compatibility_table() -> CompatibilityTable:
    return CompatibilityTable.from_yaml()


def compatibility_of(
    component_license: SupportedLicense,
    project_license: SupportedLicense,
    link: LinkType,
    redistribution: Redistribution,
) -> Compatibility:
    return get_compatibility_table().compatibility_of(component_license, project_license, link, redistribution)
