import json
from pathlib import Path

import pytest

from license_risk_inspector.project_loader import (
    ProjectDefinitionError,
    load_project,
    project_from_dict,
    project_to_dict,
)
from license_risk_inspector.types import ComponentWeight, LinkType, Redistribution, SupportedLicense


def test_project_from_dict_parses_names_and_spdx_ids(sample_definition):
    project = project_from_dict(sample_definition)

    assert project.licenses == (SupportedLicense.APACHE_2_0,)
    assert project.redistribution is Redistribution.SOFTWARE_PACKAGE_OR_SAAS
    first, second = project.component_bindings
    assert first.component.name == "libfoo"
    assert first.weight is ComponentWeight.HIGH
    assert second.license is SupportedLicense.GPL_2_0_ONLY
    assert second.link is LinkType.STATIC


def test_project_to_dict_round_trips(sample_definition):
    project = project_from_dict(sample_definition)
    payload = project_to_dict(project)

    assert payload["projectinfo"]["licenses"] == ["APACHE_2_0"]
    assert project_to_dict(project_from_dict(payload)) == payload


def test_schema_errors_are_collected(sample_definition):
    del sample_definition["projectinfo"]["name"]
    sample_definition["componentbindings"][0]["weight"] = 3

    with pytest.raises(ProjectDefinitionError) as excinfo:
        project_from_dict(sample_definition)

    assert len(excinfo.value.errors) == 2
    assert any("name" in message for message in excinfo.value.errors)
    assert isinstance(excinfo.value, ValueError)


def test_unknown_enum_values_are_reported_with_location(sample_definition):
    sample_definition["componentbindings"][1]["license"] = "WTFPL"
    sample_definition["projectinfo"]["redistribution"] = "BROADCAST"

    with pytest.raises(ProjectDefinitionError) as excinfo:
        project_from_dict(sample_definition)

    assert excinfo.value.errors[0].startswith("projectinfo/redistribution")
    assert excinfo.value.errors[1].startswith("componentbindings/1/license")


def test_model_rules_surface_as_definition_errors(sample_definition):
    sample_definition["projectinfo"]["licenses"] = ["MIT", "MIT"]
    with pytest.raises(ProjectDefinitionError):
        project_from_dict(sample_definition)

    sample_definition["projectinfo"]["licenses"] = ["UNDEFINED"]
    with pytest.raises(ProjectDefinitionError):
        project_from_dict(sample_definition)


def test_empty_bill_of_components_is_rejected(sample_definition):
    sample_definition["componentbindings"] = []
    with pytest.raises(ProjectDefinitionError):
        project_from_dict(sample_definition)


def test_load_project_from_json_and_yaml(tmp_path: Path, sample_definition):
    json_file = tmp_path / "project.json"
    json_file.write_text(json.dumps(sample_definition))
    yaml_file = tmp_path / "project.yaml"
    yaml_file.write_text(
        """
projectinfo:
  name: demo
  version: "1.0"
  licenses: [MIT]
  redistribution: NONE
componentbindings:
  - {component: libfoo, version: "2.1", license: BSD-3-Clause, weight: LOW, link: STATIC}
"""
    )

    assert load_project(json_file).name == "demo"
    yaml_project = load_project(yaml_file)
    assert yaml_project.redistribution is Redistribution.NONE
    assert yaml_project.component_bindings[0].license is SupportedLicense.BSD_3_CLAUSE


def test_load_project_reports_malformed_files(tmp_path: Path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(ProjectDefinitionError):
        load_project(broken)
