from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml
from jsonschema import Draft7Validator

from .types_licenses import ComponentWeight, LinkType, Redistribution, SupportedLicense
from .types_project import Component, ComponentBinding, Project

logger = logging.getLogger(__name__)

_NON_BLANK = {"type": "string", "minLength": 1, "pattern": r"\S"}

PROJECT_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["projectinfo", "componentbindings"],
    "properties": {
        "projectinfo": {
            "type": "object",
            "required": ["name", "version", "licenses", "redistribution"],
            "properties": {
                "name": _NON_BLANK,
                "version": _NON_BLANK,
                "licenses": {"type": "array", "items": _NON_BLANK, "minItems": 1},
                "redistribution": _NON_BLANK,
            },
        },
        "componentbindings": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["component", "version", "license", "weight", "link"],
                "properties": {
                    "component": _NON_BLANK,
                    "version": _NON_BLANK,
                    "license": _NON_BLANK,
                    "weight": _NON_BLANK,
                    "link": _NON_BLANK,
                },
            },
        },
    },
}


class ProjectDefinitionError(ValueError):
    """Raised when a project definition cannot be turned into a ``Project``."""

    def __init__(self, errors: List[str]) -> None:
        self.errors = list(errors)
        super().__init__("Invalid project definition: " + "; ".join(self.errors))


def _location(path) -> str:
    parts = [str(part) for part in path]
    return "/".join(parts) if parts else "<root>"


def validate_definition(data: Any) -> List[str]:
    validator = Draft7Validator(PROJECT_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda error: list(error.absolute_path))
    return [f"{_location(error.absolute_path)}: {error.message}" for error in errors]


def _parse(parser, text: str, where: str, errors: List[str]):
    try:
        return parser(text)
    except ValueError as exc:
        errors.append(f"{where}: {exc}")
        return None


def project_from_dict(data: Any) -> Project:
    errors = validate_definition(data)
    if errors:
        for message in errors:
            logger.error("Project definition error: %s", message)
        raise ProjectDefinitionError(errors)

    info = data["projectinfo"]
    licenses = [
        _parse(SupportedLicense.parse, text, f"projectinfo/licenses/{index}", errors)
        for index, text in enumerate(info["licenses"])
    ]
    redistribution = _parse(Redistribution.parse, info["redistribution"], "projectinfo/redistribution", errors)

    bindings: List[ComponentBinding] = []
    for index, entry in enumerate(data["componentbindings"]):
        where = f"componentbindings/{index}"
        license = _parse(SupportedLicense.parse, entry["license"], f"{where}/license", errors)
        weight = _parse(ComponentWeight.parse, entry["weight"], f"{where}/weight", errors)
        link = _parse(LinkType.parse, entry["link"], f"{where}/link", errors)
        if license is None or weight is None or link is None:
            continue
        component = Component(name=entry["component"], version=entry["version"], license=license)
        bindings.append(ComponentBinding(component=component, link=link, weight=weight))

    if errors:
        for message in errors:
            logger.error("Project definition error: %s", message)
        raise ProjectDefinitionError(errors)

    try:
        project = Project(
            name=info["name"],
            version=info["version"],
            license=licenses[0],
            redistribution=redistribution,
            binding=bindings[0],
        )
        for additional in licenses[1:]:
            project.add_license(additional)
        for binding in bindings[1:]:
            project.add_component_binding(binding)
    except ValueError as exc:
        raise ProjectDefinitionError([str(exc)]) from exc
    return project


def load_project(path: Path) -> Project:
    """Read a project definition from a JSON or YAML file, chosen by suffix."""

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        logger.error("Unable to parse project definition %s: %s", path, exc)
        raise ProjectDefinitionError([f"{path}: {exc}"]) from exc
    logger.debug("Loaded project definition from %s", path)
    return project_from_dict(data)


def project_to_dict(project: Project) -> dict:
    return {
        "projectinfo": {
            "name": project.name,
            "version": project.version,
            "licenses": [license.name for license in project.licenses],
            "redistribution": project.redistribution.name,
        },
        "componentbindings": [
            {
                "component": binding.component.name,
                "version": binding.component.version,
                "license": binding.license.name,
                "weight": binding.weight.name,
                "link": binding.link.name,
            }
            for binding in project.component_bindings
        ],
    }
