from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from jinja2 import Environment, select_autoescape

from .messages import render_explanation
from .project_loader import project_to_dict
from .types import Report, RiskResult, Verbosity


env = Environment(autoescape=select_autoescape(["html", "xml"]))

SECTIONS = (
    ("root_causes", "Root causes"),
    ("warnings", "Warnings"),
    ("good_things", "Good things"),
    ("tips", "Tips"),
)

_VISIBLE_SECTIONS = {
    Verbosity.ESSENTIAL: (),
    Verbosity.RICH: ("root_causes", "warnings"),
    Verbosity.DETAILED: tuple(name for name, _ in SECTIONS),
}


def visible_sections(verbosity: Verbosity) -> tuple[str, ...]:
    return _VISIBLE_SECTIONS[verbosity]


def _result_rows(report: Report) -> Iterable[dict]:
    shown = visible_sections(report.settings.verbosity)
    language = report.settings.language
    for result in report.results:
        row = {
            "category": result.category.name,
            "description": result.category.description,
            "risk_value": result.risk_value,
            "exposure": result.exposure,
            "impact": result.impact,
        }
        for name, _ in SECTIONS:
            if name not in shown:
                continue
            row[name] = [
                {**entry.as_dict(), "text": render_explanation(entry, language=language)}
                for entry in getattr(result, name)
            ]
        yield row


def _format_score(value: float) -> str:
    return f"{value:.4f}"


def render_json(report: Report) -> str:
    payload = {
        "generated_at": report.generated_at.isoformat(),
        "project": {"full_name": report.project.full_name, **project_to_dict(report.project)},
        "settings": report.settings.as_dict(),
        "risk_breakdown": report.risk_breakdown,
        "results": list(_result_rows(report)),
    }
    return json.dumps(payload, indent=2)


def render_markdown(report: Report) -> str:
    lines = [
        "# License Risk Report",
        "",
        f"Generated at: {report.generated_at.isoformat()}",
        f"Project: {report.project.full_name}",
        f"Verbosity: {report.settings.verbosity.value}",
    ]

    lines.append("\n## Risks\n")
    lines.append("| Risk | Risk value | Exposure | Impact |")
    lines.append("| --- | --- | --- | --- |")
    for row in _result_rows(report):
        lines.append(
            f"| {row['description']} | {_format_score(row['risk_value'])} | "
            f"{_format_score(row['exposure'])} | {_format_score(row['impact'])} |"
        )

    for row in _result_rows(report):
        details = [(title, row[name]) for name, title in SECTIONS if row.get(name)]
        if not details:
            continue
        lines.append(f"\n## {row['description']}\n")
        for title, entries in details:
            lines.append(f"### {title}\n")
            lines.extend(f"- {entry['text']}" for entry in entries)
            lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def render_text(report: Report) -> str:
    lines = [
        f"License risk report for {report.project.full_name}",
        f"Generated at {report.generated_at.isoformat()}",
    ]
    for row in _result_rows(report):
        lines.append("")
        lines.append(
            f"{row['description']}: risk={_format_score(row['risk_value'])} "
            f"exposure={_format_score(row['exposure'])} impact={_format_score(row['impact'])}"
        )
        for name, title in SECTIONS:
            entries = row.get(name)
            if not entries:
                continue
            lines.append(f"  {title}:")
            lines.extend(f"    * {entry['text']}" for entry in entries)
    return "\n".join(lines) + "\n"


def _badge_class(result: RiskResult) -> str:
    if result.risk_value == 0:
        return "good"
    return "warn" if result.risk_value < 0.5 else "bad"


def render_html(report: Report) -> str:
    template = env.from_string(
        """
<!doctype html>
<html lang=\"en\">
<head>
  <meta charset=\"utf-8\" />
  <title>License Risk Report</title>
  <style>
    body { font-family: Arial, sans-serif; margin: 2rem; }
    h1, h2 { color: #1f2937; }
    table { border-collapse: collapse; width: 100%; margin-bottom: 1.5rem; }
    th, td { border: 1px solid #d1d5db; padding: 0.5rem; }
    th { background: #f3f4f6; text-align: left; }
    .risk { font-weight: bold; }
    .badge { display: inline-block; padding: 0.35rem 0.6rem; border-radius: 0.4rem; font-weight: 600; color: #111827; }
    .badge.good { background: #d1fae5; color: #065f46; }
    .badge.warn { background: #fef3c7; color: #92400e; }
    .badge.bad { background: #fee2e2; color: #991b1b; }
  </style>
</head>
<body>
  <h1>License Risk Report</h1>
  <p>Generated at: {{ generated_at }}</p>
  <p>Project: {{ project }}</p>
  <section>
    <h2>Risks</h2>
    <table>
      <thead><tr><th>Risk</th><th>Risk value</th><th>Exposure</th><th>Impact</th></tr></thead>
      <tbody>
        {% for row in results %}
        <tr>
          <td>{{ row.description }}</td>
          <td class=\"risk\"><span class=\"badge {{ badges[row.category] }}\">{{ "%.4f"|format(row.risk_value) }}</span></td>
          <td>{{ "%.4f"|format(row.exposure) }}</td>
          <td>{{ "%.4f"|format(row.impact) }}</td>
        </tr>
        {% endfor %}
      </tbody>
    </table>
  </section>
  {% for row in results %}
    {% set ns = namespace(has_details=false) %}
    {% for name, title in sections %}{% if row.get(name) %}{% set ns.has_details = true %}{% endif %}{% endfor %}
    {% if ns.has_details %}
  <section>
    <h2>{{ row.description }}</h2>
    {% for name, title in sections %}
      {% if row.get(name) %}
    <h3>{{ title }}</h3>
    <ul>
      {% for entry in row[name] %}
      <li>{{ entry.text }}</li>
      {% endfor %}
    </ul>
      {% endif %}
    {% endfor %}
  </section>
    {% endif %}
  {% endfor %}
</body>
</html>
"""
    )

    return template.render(
        generated_at=report.generated_at.isoformat(),
        project=report.project.full_name,
        results=list(_result_rows(report)),
        sections=SECTIONS,
        badges={result.category.name: _badge_class(result) for result in report.results},
    )


def render_report(report: Report, fmt: str) -> str:
    fmt = fmt.lower()
    if fmt == "json":
        return render_json(report)
    if fmt in {"md", "markdown"}:
        return render_markdown(report)
    if fmt == "text":
        return render_text(report)
    if fmt == "html":
        return render_html(report)
    raise ValueError(f"Unknown report format: {fmt}")


def write_report(report: Report, fmt: str, destination: Path | None) -> str:
    output = render_report(report, fmt)
    if destination:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(output)
    return output
