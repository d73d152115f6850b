from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

PRECISION = 4
_QUANTUM = Decimal(1).scaleb(-PRECISION)


class RiskCategory(Enum):
    HAVING_COMPONENTS_LICENSES_INCOMPATIBLE_WITH_PROJECT_LICENSES = (
        "Having components licenses incompatible with project licenses"
    )
    HAVING_A_LIMITED_SET_OF_POTENTIAL_PROJECT_LICENSES = "Having a limited set of potential project licenses"
    HAVING_A_LIMITED_SET_OF_POTENTIAL_COMPONENTS_LICENSES = "Having a limited set of potential components licenses"
    HAVING_OBSOLETE_PROJECT_LICENSES = "Having obsolete project licenses"
    HAVING_OBSOLETE_COMPONENTS_LICENSES = "Having obsolete components licenses"
    HAVING_UNFASHIONABLE_PROJECT_LICENSES = "Having unfashionable project licenses"
    HAVING_UNFASHIONABLE_COMPONENTS_LICENSES = "Having unfashionable components licenses"
    HAVING_SCARCELY_SPREAD_PROJECT_LICENSES = "Having scarcely spread project licenses"
    HAVING_SCARCELY_SPREAD_COMPONENTS_LICENSES = "Having scarcely spread components licenses"
    HAVING_HETEROGENEOUS_COMPONENTS_LICENSES = "Having heterogeneous components licenses"
    HAVING_COMPONENTS_LICENSES_MISALIGNED_FROM_PROJECT_LICENSES = (
        "Having components licenses misaligned from project licenses"
    )

    @property
    def description(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "RiskCategory":
        key = text.strip().upper().replace("-", "_")
        if key in cls.__members__:
            return cls[key]
        prefixed = f"HAVING_{key}"
        if prefixed in cls.__members__:
            return cls[prefixed]
        raise ValueError(f"Unknown risk category: {text}")


class Verbosity(Enum):
    ESSENTIAL = "essential"
    RICH = "rich"
    DETAILED = "detailed"


class Language(Enum):
    """Languages the explanations can be rendered in."""

    ENGLISH = "en"
    SPANISH = "es"


@dataclass(frozen=True)
class Explanation:
    """A message key plus the values to interpolate when rendering it."""

    key: str
    values: Tuple[Tuple[str, Any], ...] = ()

    @classmethod
    def of(cls, key: str, **values: Any) -> "Explanation":
        return cls(key=key, values=tuple(values.items()))

    @property
    def params(self) -> dict[str, Any]:
        return dict(self.values)

    def as_dict(self) -> dict:
        return {"key": self.key, "values": {name: str(value) for name, value in self.values}}


def _rounded(value: float) -> float:
    # Ties round away from zero, not to even.
    return float(Decimal(repr(value)).quantize(_QUANTUM, rounding=ROUND_HALF_UP))


def _checked_unit_interval(name: str, value: float) -> float:
    if value is None:
        message = f"{name} cannot be null"
        logger.error(message)
        raise ValueError(message)
    if value < 0.0 or value > 1.0:
        message = f"{name} must be between 0.0 and 1.0, got {value}"
        logger.error(message)
        raise ValueError(message)
    return value


def _checked_explanations(name: str, entries: Optional[Iterable[Explanation]]) -> Tuple[Explanation, ...]:
    if entries is None:
        message = f"{name} cannot be null"
        logger.error(message)
        raise ValueError(message)
    return tuple(entries)


@dataclass(frozen=True)
class RiskResult:
    """Immutable outcome of one risk analyser run.

    Exposure and impact are rounded half-up to ``PRECISION`` decimals; the risk value
    is computed from the unrounded inputs and rounded the same way.
    """

    category: RiskCategory
    exposure: float
    impact: float
    root_causes: Tuple[Explanation, ...] = ()
    warnings: Tuple[Explanation, ...] = ()
    good_things: Tuple[Explanation, ...] = ()
    tips: Tuple[Explanation, ...] = ()
    risk_value: float = field(init=False)

    def __post_init__(self) -> None:
        if self.category is None:
            logger.error("risk category cannot be null")
            raise ValueError("risk category cannot be null")
        exposure = _checked_unit_interval("exposure", self.exposure)
        impact = _checked_unit_interval("impact", self.impact)
        object.__setattr__(self, "exposure", _rounded(exposure))
        object.__setattr__(self, "impact", _rounded(impact))
        object.__setattr__(self, "risk_value", _rounded(exposure * impact))
        object.__setattr__(self, "root_causes", _checked_explanations("root causes", self.root_causes))
        object.__setattr__(self, "warnings", _checked_explanations("warnings", self.warnings))
        object.__setattr__(self, "good_things", _checked_explanations("good things", self.good_things))
        object.__setattr__(self, "tips", _checked_explanations("tips", self.tips))

    def as_dict(self) -> dict:
        return {
            "category": self.category.name,
            "description": self.category.description,
            "risk_value": self.risk_value,
            "exposure": self.exposure,
            "impact": self.impact,
            "root_causes": [entry.as_dict() for entry in self.root_causes],
            "warnings": [entry.as_dict() for entry in self.warnings],
            "good_things": [entry.as_dict() for entry in self.good_things],
            "tips": [entry.as_dict() for entry in self.tips],
        }


@dataclass
class AnalysisSettings:
    """Which analysers to run, how much detail reports carry and in which language."""

    categories: List[RiskCategory] = field(default_factory=lambda: list(RiskCategory))
    verbosity: Verbosity = Verbosity.DETAILED
    language: Language = Language.ENGLISH

    def as_dict(self) -> dict:
        return {
            "categories": [category.name for category in self.categories],
            "verbosity": self.verbosity.value,
            "language": self.language.value,
        }
