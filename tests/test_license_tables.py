import pytest

from license_risk_inspector.compatibility import (
    CompatibilityTable,
    compatibility_of,
    get_compatibility_table,
    parse_compatibility_data,
)
from license_risk_inspector.license_properties import (
    compute_obsolescence,
    obsolescence_of,
    spreading_of,
    trend_of,
)
from license_risk_inspector.types import (
    Compatibility,
    ComponentWeight,
    LinkType,
    Obsolescence,
    Redistribution,
    Spreading,
    SupportedLicense,
    Trend,
    fictitious_licenses,
    licenses_for_components,
    licenses_for_projects,
    non_fictitious_licenses,
)

SAAS = Redistribution.SOFTWARE_PACKAGE_OR_SAAS


def test_license_sets_split_pseudo_licenses():
    assert len(licenses_for_components()) == 24
    assert len(licenses_for_projects()) == 21
    assert set(fictitious_licenses()) == {
        SupportedLicense.UNDEFINED,
        SupportedLicense.UNSUPPORTED,
        SupportedLicense.FORCED_AS_PROJECT_LICENSE,
    }
    assert not set(fictitious_licenses()) & set(licenses_for_projects())
    assert non_fictitious_licenses() == licenses_for_projects()


def test_fully_compatible_levels():
    assert Compatibility.COMPATIBLE.is_fully_compatible
    assert Compatibility.FORCED_COMPATIBLE.is_fully_compatible
    assert not Compatibility.MOSTLY_COMPATIBLE.is_fully_compatible
    assert Compatibility.INCOMPATIBLE.score == Compatibility.UNKNOWN.score == 0.0


def test_license_parse_accepts_names_and_spdx_ids():
    assert SupportedLicense.parse("GPL_3_0_ONLY") is SupportedLicense.GPL_3_0_ONLY
    assert SupportedLicense.parse("gpl-3.0-only") is SupportedLicense.GPL_3_0_ONLY
    assert SupportedLicense.parse("Apache-2.0") is SupportedLicense.APACHE_2_0
    with pytest.raises(ValueError):
        SupportedLicense.parse("WTFPL")


def test_value_enums_parse_and_weights():
    assert LinkType.parse("static") is LinkType.STATIC
    assert Redistribution.parse("software-package-or-saas") is SAAS
    assert ComponentWeight.parse("near_high").weight == 0.67
    assert [weight.weight for weight in ComponentWeight] == [0.01, 0.33, 0.67, 1.0]
    with pytest.raises(ValueError):
        LinkType.parse("plugin")


@pytest.mark.parametrize(
    "versions,current,expected",
    [
        (1, 1, Obsolescence.UPDATED),
        (6, 6, Obsolescence.UPDATED),
        (2, 1, Obsolescence.OUTDATED),
        (5, 1, Obsolescence.OUTDATED),
        (6, 5, Obsolescence.NEAR_UPDATED),
        (6, 3, Obsolescence.NEAR_OUTDATED),
        (5, 2, Obsolescence.NEAR_OUTDATED),
    ],
)
def test_compute_obsolescence_buckets(versions, current, expected):
    assert compute_obsolescence(versions, current) is expected


@pytest.mark.parametrize("versions,current", [(0, 1), (2, 0), (2, 3)])
def test_compute_obsolescence_rejects_invalid_versions(versions, current):
    with pytest.raises(ValueError):
        compute_obsolescence(versions, current)


def test_property_tables_cover_every_license_with_unit_scores():
    for license in SupportedLicense:
        for level in (obsolescence_of(license), trend_of(license), spreading_of(license)):
            assert 0.0 <= level.score <= 1.0


def test_pseudo_licenses_sit_at_the_worst_level():
    for license in fictitious_licenses():
        assert obsolescence_of(license) is Obsolescence.OUTDATED
        assert trend_of(license) is Trend.UNFASHIONABLE
        assert spreading_of(license) is Spreading.LITTLE_WIDESPREAD


def test_known_property_values():
    assert obsolescence_of(SupportedLicense.GPL_3_0_OR_LATER) is Obsolescence.UPDATED
    assert obsolescence_of(SupportedLicense.BSD_4_CLAUSE) is Obsolescence.OUTDATED
    assert trend_of(SupportedLicense.MIT) is Trend.TRENDY
    assert spreading_of(SupportedLicense.AGPL_3_0_ONLY) is Spreading.LITTLE_WIDESPREAD


def test_property_lookups_reject_none():
    with pytest.raises(ValueError):
        obsolescence_of(None)
    with pytest.raises(ValueError):
        trend_of(None)
    with pytest.raises(ValueError):
        spreading_of(None)


def test_compatibility_lookups_from_data_file():
    assert compatibility_of(SupportedLicense.MIT, SupportedLicense.APACHE_2_0, LinkType.DYNAMIC, SAAS) is (
        Compatibility.COMPATIBLE
    )
    assert compatibility_of(SupportedLicense.GPL_2_0_ONLY, SupportedLicense.APACHE_2_0, LinkType.STATIC, SAAS) is (
        Compatibility.INCOMPATIBLE
    )
    assert compatibility_of(
        SupportedLicense.GPL_2_0_ONLY, SupportedLicense.GPL_2_0_OR_LATER, LinkType.DYNAMIC, SAAS
    ) is Compatibility.MOSTLY_COMPATIBLE


def test_missing_combination_is_unsupported():
    assert compatibility_of(SupportedLicense.EPL_2_0, SupportedLicense.MIT, LinkType.STATIC, SAAS) is (
        Compatibility.UNSUPPORTED
    )


def test_pseudo_license_and_unredistributed_entries_are_generated():
    table = get_compatibility_table()
    for link in LinkType:
        for redistribution in Redistribution:
            assert table.compatibility_of(SupportedLicense.UNDEFINED, SupportedLicense.MIT, link, redistribution) is (
                Compatibility.UNKNOWN
            )
            assert table.compatibility_of(
                SupportedLicense.UNSUPPORTED, SupportedLicense.MIT, link, redistribution
            ) is Compatibility.UNSUPPORTED
            assert table.compatibility_of(
                SupportedLicense.FORCED_AS_PROJECT_LICENSE, SupportedLicense.GPL_3_0_ONLY, link, redistribution
            ) is Compatibility.FORCED_COMPATIBLE
    assert table.compatibility_of(
        SupportedLicense.GPL_2_0_ONLY, SupportedLicense.APACHE_2_0, LinkType.STATIC, Redistribution.NONE
    ) is Compatibility.COMPATIBLE


def test_specific_warnings():
    table = get_compatibility_table()
    assert table.has_specific_warning(SupportedLicense.CPL_1_0, SupportedLicense.APACHE_2_0, LinkType.DYNAMIC, SAAS)
    assert table.specific_warning(
        SupportedLicense.CPL_1_0, SupportedLicense.APACHE_2_0, LinkType.DYNAMIC, SAAS
    ) == "CPL_1_0_DYNAMIC_APACHE_2_0"
    assert not table.has_specific_warning(SupportedLicense.MIT, SupportedLicense.MIT, LinkType.DYNAMIC, SAAS)


def test_lookup_rejects_none_arguments():
    table = get_compatibility_table()
    with pytest.raises(ValueError):
        table.compatibility_of(None, SupportedLicense.MIT, LinkType.DYNAMIC, SAAS)
    with pytest.raises(ValueError):
        table.compatibility_of(SupportedLicense.MIT, SupportedLicense.MIT, None, SAAS)


def test_table_size_and_coverage():
    table = get_compatibility_table()
    # 441 dynamic + 324 static explicit entries, 882 unredistributed, 252 pseudo-license entries
    assert table.number_of_supported_combinations() == 1899
    assert table.licenses_coverage() == 0.942
    assert get_compatibility_table() is table


def test_parse_compatibility_data_validates_names():
    entries = parse_compatibility_data(
        {"STATIC": {"SOFTWARE_PACKAGE_OR_SAAS": {"MIT": {"GPL_3_0_ONLY": {"compatibility": "COMPATIBLE", "warning": "W"}}}}}
    )
    table = CompatibilityTable(entries)
    key = (SupportedLicense.MIT, SupportedLicense.GPL_3_0_ONLY, LinkType.STATIC, SAAS)
    assert table.compatibility_of(*key) is Compatibility.COMPATIBLE
    assert table.specific_warning(*key) == "W"

    with pytest.raises(ValueError):
        parse_compatibility_data({"STATIC": {"SOFTWARE_PACKAGE_OR_SAAS": {"MIT": {"MIT": "MAYBE"}}}})
    with pytest.raises(ValueError):
        parse_compatibility_data({"STATIC": {"SOFTWARE_PACKAGE_OR_SAAS": {"MIT": {"UNDEFINED": "COMPATIBLE"}}}})
