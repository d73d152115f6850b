from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from .types import Report, RiskCategory, RiskResult

logger = logging.getLogger(__name__)

_THRESHOLDS = ("max_risk_value", "max_exposure", "max_impact")


@dataclass
class PolicyException:
    category: RiskCategory
    key: str
    reason: str = ""
    approved_by: Optional[str] = None
    expires: Optional[datetime] = None

    def as_dict(self) -> dict:
        return {
            "category": self.category.name,
            "key": self.key,
            "reason": self.reason,
            "approved_by": self.approved_by,
            "expires": self.expires.isoformat() if self.expires else None,
        }


@dataclass
class Thresholds:
    max_risk_value: Optional[float] = None
    max_exposure: Optional[float] = None
    max_impact: Optional[float] = None

    def merged_over(self, defaults: "Thresholds") -> "Thresholds":
        return Thresholds(
            **{
                name: getattr(self, name) if getattr(self, name) is not None else getattr(defaults, name)
                for name in _THRESHOLDS
            }
        )


@dataclass
class Policy:
    max_risk_value: Optional[float] = None
    max_exposure: Optional[float] = None
    max_impact: Optional[float] = None
    categories: Dict[RiskCategory, Thresholds] = field(default_factory=dict)
    disallow_root_causes: List[str] = field(default_factory=list)
    exceptions: List[PolicyException] = field(default_factory=list)

    @property
    def global_thresholds(self) -> Thresholds:
        return Thresholds(self.max_risk_value, self.max_exposure, self.max_impact)

    def thresholds_for(self, category: RiskCategory) -> Thresholds:
        override = self.categories.get(category)
        if override is None:
            return self.global_thresholds
        return override.merged_over(self.global_thresholds)


@dataclass
class PolicyEvaluation:
    passed: bool
    failures: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    used_exceptions: List[PolicyException] = field(default_factory=list)
    expired_exceptions: List[PolicyException] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "passed": self.passed,
            "failures": self.failures,
            "warnings": self.warnings,
            "used_exceptions": [exc.as_dict() for exc in self.used_exceptions],
            "expired_exceptions": [exc.as_dict() for exc in self.expired_exceptions],
        }


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _parse_expiry(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError as exc:
            raise ValueError(f"Invalid exception expiry: {value}") from exc
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _threshold(raw: dict, name: str, where: str) -> Optional[float]:
    value = raw.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{where}{name} must be a number, got {value!r}")
    if value < 0 or value > 1:
        raise ValueError(f"{where}{name} must be between 0.0 and 1.0, got {value}")
    return float(value)


def _parse_thresholds(raw: dict, where: str = "") -> Thresholds:
    return Thresholds(**{name: _threshold(raw, name, where) for name in _THRESHOLDS})


def policy_from_dict(raw: dict) -> Policy:
    if not isinstance(raw, dict):
        raise ValueError("Policy must be a mapping")

    categories: Dict[RiskCategory, Thresholds] = {}
    for name, entry in (raw.get("categories") or {}).items():
        category = RiskCategory.parse(str(name))
        categories[category] = _parse_thresholds(entry or {}, f"categories.{name}.")

    exceptions: list[PolicyException] = []
    for entry in raw.get("exceptions", []) or []:
        if not isinstance(entry, dict) or "category" not in entry or "key" not in entry:
            raise ValueError(f"Policy exceptions need a category and a key: {entry!r}")
        exceptions.append(
            PolicyException(
                category=RiskCategory.parse(str(entry["category"])),
                key=str(entry["key"]),
                reason=str(entry.get("reason", "")),
                approved_by=entry.get("approved_by"),
                expires=_parse_expiry(entry.get("expires")),
            )
        )

    global_thresholds = _parse_thresholds(raw)
    return Policy(
        max_risk_value=global_thresholds.max_risk_value,
        max_exposure=global_thresholds.max_exposure,
        max_impact=global_thresholds.max_impact,
        categories=categories,
        disallow_root_causes=[str(key) for key in raw.get("disallow_root_causes") or []],
        exceptions=exceptions,
    )


def load_policy(path: Path) -> Policy:
    raw = yaml.safe_load(path.read_text()) or {}
    logger.debug("Loaded policy from %s", path)
    return policy_from_dict(raw)


def _match_exception(
    category: RiskCategory, key: str, policy: Policy, now: datetime
) -> PolicyException | None:
    for exc in policy.exceptions:
        if exc.category is not category or exc.key != key:
            continue
        if exc.expires and exc.expires < now:
            continue
        return exc
    return None


def _check_thresholds(result: RiskResult, thresholds: Thresholds, failures: list[str]) -> None:
    category = result.category.name
    for label, value, limit in (
        ("risk value", result.risk_value, thresholds.max_risk_value),
        ("exposure", result.exposure, thresholds.max_exposure),
        ("impact", result.impact, thresholds.max_impact),
    ):
        if limit is not None and value > limit:
            failures.append(f"{category}: {label} {value} above policy maximum {limit}")


def evaluate_policy(report: Report, policy: Policy) -> PolicyEvaluation:
    failures: list[str] = []
    warnings: list[str] = []
    used_exceptions: list[PolicyException] = []
    expired: list[PolicyException] = []
    now = _utc_now()

    for result in report.results:
        _check_thresholds(result, policy.thresholds_for(result.category), failures)

        if not policy.disallow_root_causes:
            continue
        seen: set[str] = set()
        for cause in result.root_causes:
            if cause.key not in policy.disallow_root_causes or cause.key in seen:
                continue
            seen.add(cause.key)
            matched = _match_exception(result.category, cause.key, policy, now)
            if matched:
                used_exceptions.append(matched)
                continue
            failures.append(f"{result.category.name}: {cause.key} blocked by policy")

    for exc in policy.exceptions:
        if exc.expires and exc.expires < now:
            expired.append(exc)
            warnings.append(
                f"Exception for {exc.category.name} ({exc.key}) expired on {exc.expires.isoformat()}"
            )

    evaluation = PolicyEvaluation(
        passed=not failures,
        failures=failures,
        warnings=warnings,
        used_exceptions=used_exceptions,
        expired_exceptions=expired,
    )
    logger.debug("Policy evaluation passed=%s with %d failures", evaluation.passed, len(failures))
    return evaluation


def write_github_check(path: Path, evaluation: PolicyEvaluation, report: Report) -> None:
    payload = {
        "conclusion": "success" if evaluation.passed else "failure",
        "summary": "; ".join(evaluation.failures) if evaluation.failures else "All policy checks passed.",
        "details": evaluation.as_dict(),
        "project": report.project.full_name,
        "risk_breakdown": report.risk_breakdown,
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2))


def _bindings_by_name(report: dict) -> dict[str, list]:
    # A component may be bound more than once, e.g. statically and dynamically.
    grouped: dict[str, list] = {}
    for entry in report.get("project", {}).get("componentbindings", []):
        grouped.setdefault(f"{entry['component']}-{entry['version']}", []).append(entry)
    return {name: sorted(entries, key=lambda entry: json.dumps(entry, sort_keys=True)) for name, entries in grouped.items()}


def diff_reports(base: dict, target: dict) -> dict:
    """Compare two JSON reports: component drift and per-category risk deltas."""

    base_bindings = _bindings_by_name(base)
    target_bindings = _bindings_by_name(target)

    added = sorted(set(target_bindings) - set(base_bindings))
    removed = sorted(set(base_bindings) - set(target_bindings))
    changed = sorted(
        name
        for name in set(base_bindings).intersection(target_bindings)
        if base_bindings[name] != target_bindings[name]
    )

    base_risks = base.get("risk_breakdown", {})
    target_risks = target.get("risk_breakdown", {})
    deltas = {
        category: round(target_risks.get(category, 0.0) - base_risks.get(category, 0.0), 4)
        for category in sorted(set(base_risks) | set(target_risks))
    }

    return {
        "added_components": added,
        "removed_components": removed,
        "changed_components": changed,
        "risk_deltas": deltas,
    }
