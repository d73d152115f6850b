from __future__ import annotations

from enum import Enum


class _Scale(Enum):
    """Classification with a numeric score in [0, 1]."""

    def __init__(self, description: str, score: float) -> None:
        self.description = description
        self.score = score

    def __str__(self) -> str:
        return self.name


class Compatibility(_Scale):
    """How a component license relates to a project license (1.0 = compatible)."""

    COMPATIBLE = ("compatible", 1.0)
    FORCED_COMPATIBLE = ("forced to be compatible", 1.0)
    MOSTLY_COMPATIBLE = ("mostly compatible", 0.67)
    MOSTLY_INCOMPATIBLE = ("mostly incompatible", 0.33)
    INCOMPATIBLE = ("incompatible", 0.0)
    UNKNOWN = ("unknown compatibility", 0.0)
    UNSUPPORTED = ("unsupported compatibility", 0.0)

    @property
    def is_fully_compatible(self) -> bool:
        return self in (Compatibility.COMPATIBLE, Compatibility.FORCED_COMPATIBLE)


class Obsolescence(_Scale):
    UPDATED = ("updated", 0.0)
    NEAR_UPDATED = ("near updated", 0.33)
    NEAR_OUTDATED = ("near outdated", 0.67)
    OUTDATED = ("outdated", 1.0)


class Trend(_Scale):
    TRENDY = ("trendy", 0.0)
    NEAR_TRENDY = ("near trendy", 0.33)
    NEAR_UNFASHIONABLE = ("near unfashionable", 0.67)
    UNFASHIONABLE = ("unfashionable", 1.0)


class Spreading(_Scale):
    HIGHLY_WIDESPREAD = ("highly widespread", 0.0)
    NEAR_HIGHLY_WIDESPREAD = ("near highly widespread", 0.33)
    NEAR_LITTLE_WIDESPREAD = ("near little widespread", 0.67)
    LITTLE_WIDESPREAD = ("little widespread", 1.0)


IDEAL_OBSOLESCENCE = Obsolescence.UPDATED
IDEAL_TREND = Trend.TRENDY
IDEAL_SPREADING = Spreading.HIGHLY_WIDESPREAD
