from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping

from .types_licenses import SupportedLicense, fictitious_licenses
from .types_properties import Obsolescence, Spreading, Trend

logger = logging.getLogger(__name__)

_NO_OBSOLESCENCE = 0.0
_HALF_OBSOLESCENCE = 0.5

# (versions in the license family, position of this version within it)
LICENSE_VERSIONS: Mapping[SupportedLicense, tuple[int, int]] = MappingProxyType(
    {
        SupportedLicense.AGPL_3_0_ONLY: (4, 3),
        SupportedLicense.APACHE_1_1: (3, 2),
        SupportedLicense.APACHE_2_0: (3, 3),
        SupportedLicense.ARTISTIC_2_0: (2, 2),
        SupportedLicense.BSD_3_CLAUSE: (5, 2),
        SupportedLicense.BSD_4_CLAUSE: (5, 1),
        SupportedLicense.CDDL_1_0: (2, 1),
        SupportedLicense.CPL_1_0: (1, 1),
        SupportedLicense.EPL_1_0: (2, 1),
        SupportedLicense.EPL_2_0: (2, 2),
        SupportedLicense.EUPL_1_1: (3, 2),
        SupportedLicense.GPL_2_0_ONLY: (6, 3),
        SupportedLicense.GPL_2_0_OR_LATER: (6, 4),
        SupportedLicense.GPL_3_0_ONLY: (6, 5),
        SupportedLicense.GPL_3_0_OR_LATER: (6, 6),
        SupportedLicense.LGPL_2_1_ONLY: (6, 3),
        SupportedLicense.LGPL_2_1_OR_LATER: (6, 4),
        SupportedLicense.LGPL_3_0_OR_LATER: (6, 6),
        SupportedLicense.MIT: (1, 1),
        SupportedLicense.MPL_1_1: (3, 2),
        SupportedLicense.PUBLIC_DOMAIN: (1, 1),
    }
)

_TRENDS = {
    SupportedLicense.AGPL_3_0_ONLY: Trend.NEAR_UNFASHIONABLE,
    SupportedLicense.APACHE_1_1: Trend.UNFASHIONABLE,
    SupportedLicense.APACHE_2_0: Trend.TRENDY,
    SupportedLicense.ARTISTIC_2_0: Trend.NEAR_TRENDY,
    SupportedLicense.BSD_3_CLAUSE: Trend.NEAR_TRENDY,
    SupportedLicense.BSD_4_CLAUSE: Trend.UNFASHIONABLE,
    SupportedLicense.CDDL_1_0: Trend.NEAR_UNFASHIONABLE,
    SupportedLicense.CPL_1_0: Trend.NEAR_UNFASHIONABLE,
    SupportedLicense.EPL_1_0: Trend.NEAR_UNFASHIONABLE,
    SupportedLicense.EPL_2_0: Trend.NEAR_TRENDY,
    SupportedLicense.EUPL_1_1: Trend.NEAR_UNFASHIONABLE,
    SupportedLicense.GPL_2_0_ONLY: Trend.UNFASHIONABLE,
    SupportedLicense.GPL_2_0_OR_LATER: Trend.NEAR_UNFASHIONABLE,
    SupportedLicense.GPL_3_0_ONLY: Trend.NEAR_UNFASHIONABLE,
    SupportedLicense.GPL_3_0_OR_LATER: Trend.NEAR_UNFASHIONABLE,
    SupportedLicense.LGPL_2_1_ONLY: Trend.UNFASHIONABLE,
    SupportedLicense.LGPL_2_1_OR_LATER: Trend.NEAR_UNFASHIONABLE,
    SupportedLicense.LGPL_3_0_OR_LATER: Trend.NEAR_UNFASHIONABLE,
    SupportedLicense.MIT: Trend.TRENDY,
    SupportedLicense.MPL_1_1: Trend.NEAR_UNFASHIONABLE,
    SupportedLicense.PUBLIC_DOMAIN: Trend.NEAR_UNFASHIONABLE,
}

_SPREADINGS = {
    SupportedLicense.AGPL_3_0_ONLY: Spreading.LITTLE_WIDESPREAD,
    SupportedLicense.APACHE_1_1: Spreading.NEAR_LITTLE_WIDESPREAD,
    SupportedLicense.APACHE_2_0: Spreading.HIGHLY_WIDESPREAD,
    SupportedLicense.ARTISTIC_2_0: Spreading.LITTLE_WIDESPREAD,
    SupportedLicense.BSD_3_CLAUSE: Spreading.NEAR_HIGHLY_WIDESPREAD,
    SupportedLicense.BSD_4_CLAUSE: Spreading.LITTLE_WIDESPREAD,
    SupportedLicense.CDDL_1_0: Spreading.LITTLE_WIDESPREAD,
    SupportedLicense.CPL_1_0: Spreading.LITTLE_WIDESPREAD,
    SupportedLicense.EPL_1_0: Spreading.LITTLE_WIDESPREAD,
    SupportedLicense.EPL_2_0: Spreading.NEAR_LITTLE_WIDESPREAD,
    SupportedLicense.EUPL_1_1: Spreading.LITTLE_WIDESPREAD,
    SupportedLicense.GPL_2_0_ONLY: Spreading.NEAR_HIGHLY_WIDESPREAD,
    SupportedLicense.GPL_2_0_OR_LATER: Spreading.HIGHLY_WIDESPREAD,
    SupportedLicense.GPL_3_0_ONLY: Spreading.NEAR_HIGHLY_WIDESPREAD,
    SupportedLicense.GPL_3_0_OR_LATER: Spreading.NEAR_HIGHLY_WIDESPREAD,
    SupportedLicense.LGPL_2_1_ONLY: Spreading.NEAR_HIGHLY_WIDESPREAD,
    SupportedLicense.LGPL_2_1_OR_LATER: Spreading.HIGHLY_WIDESPREAD,
    SupportedLicense.LGPL_3_0_OR_LATER: Spreading.LITTLE_WIDESPREAD,
    SupportedLicense.MIT: Spreading.HIGHLY_WIDESPREAD,
    SupportedLicense.MPL_1_1: Spreading.NEAR_LITTLE_WIDESPREAD,
    SupportedLicense.PUBLIC_DOMAIN: Spreading.NEAR_LITTLE_WIDESPREAD,
}


def compute_obsolescence(number_of_versions: int, current_version: int) -> Obsolescence:
    """Bucket ``1 - current_version / number_of_versions`` into an obsolescence level.

    The first version of a license family that has newer versions is always
    ``OUTDATED``, whatever the raw ratio says.
    """

    if number_of_versions < 1:
        raise ValueError("number_of_versions must be at least 1")
    if current_version < 1:
        raise ValueError("current_version must be at least 1")
    if current_version > number_of_versions:
        raise ValueError("current_version cannot be greater than number_of_versions")

    obsolescence = 1.0 - (current_version / number_of_versions)
    if obsolescence == _NO_OBSOLESCENCE:
        return Obsolescence.UPDATED
    if number_of_versions > 1 and current_version == 1:
        return Obsolescence.OUTDATED
    if obsolescence < _HALF_OBSOLESCENCE:
        return Obsolescence.NEAR_UPDATED
    return Obsolescence.NEAR_OUTDATED


def _build_obsolescences() -> Mapping[SupportedLicense, Obsolescence]:
    table = {license: compute_obsolescence(*versions) for license, versions in LICENSE_VERSIONS.items()}
    for pseudo_license in fictitious_licenses():
        table[pseudo_license] = Obsolescence.OUTDATED
    return MappingProxyType(table)


def _with_pseudo_licenses(table: dict, worst):
    pinned = dict(table)
    for pseudo_license in fictitious_licenses():
        pinned[pseudo_license] = worst
    return MappingProxyType(pinned)


OBSOLESCENCES = _build_obsolescences()
TRENDS = _with_pseudo_licenses(_TRENDS, Trend.UNFASHIONABLE)
SPREADINGS = _with_pseudo_licenses(_SPREADINGS, Spreading.LITTLE_WIDESPREAD)


def _lookup(table: Mapping, license: SupportedLicense, what: str):
    if license is None:
        logger.error("license cannot be null when looking up its %s", what)
        raise ValueError("license cannot be null")
    return table[license]


def obsolescence_of(license: SupportedLicense) -> Obsolescence:
    return _lookup(OBSOLESCENCES, license, "obsolescence")


def trend_of(license: SupportedLicense) -> Trend:
    return _lookup(TRENDS, license, "trend")


def spreading_of(license: SupportedLicense) -> Spreading:
    return _lookup(SPREADINGS, license, "spreading")
