from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .types_risk import Explanation, Language

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).with_name("data")
MESSAGES_FILE = DATA_DIR / "messages.yaml"
MESSAGES_FILES = {
    Language.ENGLISH: MESSAGES_FILE,
    Language.SPANISH: DATA_DIR / "messages_es.yaml",
}


@lru_cache(maxsize=None)
def load_messages(language: Language = Language.ENGLISH, path: Optional[Path] = None) -> Mapping[str, Any]:
    path = MESSAGES_FILES[language] if path is None else path
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Message catalogue {path} must be a mapping")
    logger.debug("Loaded %s message catalogue from %s", language.name.lower(), path)
    return raw


def template_for(
    key: str,
    catalogue: Optional[Mapping[str, Any]] = None,
    language: Language = Language.ENGLISH,
) -> Optional[str]:
    """Look up a dotted key; numeric parts index into lists."""

    node: Any = load_messages(language) if catalogue is None else catalogue
    for part in key.split("."):
        if isinstance(node, dict):
            node = node.get(part)
        elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
            node = node[int(part)]
        else:
            return None
        if node is None:
            return None
    return node if isinstance(node, str) else None


def _fallback(explanation: Explanation) -> str:
    if not explanation.values:
        return explanation.key
    details = ", ".join(f"{name}={value}" for name, value in explanation.values)
    return f"{explanation.key} ({details})"


def render_explanation(
    explanation: Explanation,
    catalogue: Optional[Mapping[str, Any]] = None,
    language: Language = Language.ENGLISH,
) -> str:
    """Render an explanation in ``language``.

    Keys missing from a translated catalogue are rendered in English; keys
    missing everywhere come back as the key plus its values.
    """

    template = template_for(explanation.key, catalogue, language)
    if template is None and catalogue is None and language is not Language.ENGLISH:
        logger.debug("No %s template for %s, using English", language.name.lower(), explanation.key)
        template = template_for(explanation.key)
    if template is None:
        logger.debug("No message template for %s", explanation.key)
        return _fallback(explanation)
    try:
        return template.format(**explanation.params)
    except (KeyError, IndexError):
        logger.warning("Message template for %s expects values that were not provided", explanation.key)
        return _fallback(explanation)
