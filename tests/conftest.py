import copy
import sys
from pathlib import Path

import pytest

# Ensure src package is importable without installation
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))


@pytest.fixture
def make_project():
    """Build a project from (license, link, weight) triples using enum names."""

    from license_risk_inspector.types import (
        Component,
        ComponentBinding,
        ComponentWeight,
        LinkType,
        Project,
        Redistribution,
        SupportedLicense,
    )

    def _make(licenses=("MIT",), bindings=(("MIT", "DYNAMIC", "HIGH"),), redistribution="SOFTWARE_PACKAGE_OR_SAAS"):
        component_bindings = [
            ComponentBinding(
                component=Component(name=f"component{index}", version="1.0", license=SupportedLicense[license]),
                link=LinkType[link],
                weight=ComponentWeight[weight],
            )
            for index, (license, link, weight) in enumerate(bindings)
        ]
        project = Project(
            name="demo",
            version="1.0",
            license=SupportedLicense[licenses[0]],
            redistribution=Redistribution[redistribution],
            binding=component_bindings[0],
        )
        for extra in licenses[1:]:
            project.add_license(SupportedLicense[extra])
        for binding in component_bindings[1:]:
            project.add_component_binding(binding)
        return project

    return _make


SAMPLE_PROJECT = {
    "projectinfo": {
        "name": "demo",
        "version": "1.0",
        "licenses": ["Apache-2.0"],
        "redistribution": "SOFTWARE_PACKAGE_OR_SAAS",
    },
    "componentbindings": [
        {"component": "libfoo", "version": "2.1", "license": "MIT", "weight": "HIGH", "link": "DYNAMIC"},
        {"component": "libbar", "version": "0.9", "license": "GPL-2.0-only", "weight": "NEAR_LOW", "link": "STATIC"},
    ],
}


@pytest.fixture
def sample_definition():
    return copy.deepcopy(SAMPLE_PROJECT)
