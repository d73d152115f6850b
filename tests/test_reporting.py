import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from license_risk_inspector.engine import RiskAnalysisEngine
from license_risk_inspector.reporting import (
    render_html,
    render_json,
    render_markdown,
    render_report,
    render_text,
    write_report,
)
from license_risk_inspector.types import AnalysisSettings, Report, RiskCategory, Verbosity


def _report(project, verbosity=Verbosity.DETAILED, categories=None):
    settings = AnalysisSettings(verbosity=verbosity)
    if categories is not None:
        settings.categories = list(categories)
    results = RiskAnalysisEngine.for_project(project, settings.categories).analyse()
    return Report(
        project=project,
        results=list(results),
        generated_at=datetime(2026, 1, 2, tzinfo=timezone.utc),
        settings=settings,
    )


def test_render_json_contains_scores_keys_and_text(make_project):
    project = make_project(licenses=("APACHE_2_0",), bindings=(("GPL_2_0_ONLY", "STATIC", "HIGH"),))
    payload = json.loads(render_json(_report(project)))

    assert payload["project"]["full_name"].startswith("demo-1.0 (Apache-2.0)")
    assert len(payload["results"]) == len(RiskCategory)
    incompatible = payload["results"][0]
    assert incompatible["category"] == "HAVING_COMPONENTS_LICENSES_INCOMPATIBLE_WITH_PROJECT_LICENSES"
    assert incompatible["risk_value"] == 1.0
    cause = incompatible["root_causes"][0]
    assert cause["key"] == "incompatible.incompatible_root_cause"
    assert "cannot be included" in cause["text"]
    assert payload["risk_breakdown"]["HAVING_COMPONENTS_LICENSES_INCOMPATIBLE_WITH_PROJECT_LICENSES"] == 1.0


@pytest.mark.parametrize(
    "verbosity,expected",
    [
        (Verbosity.ESSENTIAL, set()),
        (Verbosity.RICH, {"root_causes", "warnings"}),
        (Verbosity.DETAILED, {"root_causes", "warnings", "good_things", "tips"}),
    ],
)
def test_verbosity_controls_explanation_lists(make_project, verbosity, expected):
    payload = json.loads(render_json(_report(make_project(), verbosity)))
    row = payload["results"][0]
    present = {name for name in ("root_causes", "warnings", "good_things", "tips") if name in row}
    assert present == expected
    assert payload["settings"]["verbosity"] == verbosity.value


def test_markdown_lists_risks_and_details(make_project):
    project = make_project(licenses=("APACHE_2_0",), bindings=(("GPL_2_0_ONLY", "STATIC", "HIGH"),))
    markdown = render_markdown(_report(project, categories=[RiskCategory.HAVING_COMPONENTS_LICENSES_INCOMPATIBLE_WITH_PROJECT_LICENSES]))

    assert markdown.startswith("# License Risk Report")
    assert "| Having components licenses incompatible with project licenses | 1.0000 | 1.0000 | 1.0000 |" in markdown
    assert "### Root causes" in markdown


def test_essential_markdown_has_no_detail_sections(make_project):
    markdown = render_markdown(_report(make_project(), Verbosity.ESSENTIAL))
    assert "### " not in markdown


def test_text_report(make_project):
    text = render_text(_report(make_project(), categories=[RiskCategory.HAVING_OBSOLETE_PROJECT_LICENSES]))
    assert "Having obsolete project licenses: risk=0.0000" in text
    assert "Good things:" in text


def test_html_is_escaped(make_project):
    project = make_project()
    project.name = "<script>"
    html = render_html(_report(project))
    assert "<script>-1.0" not in html
    assert "&lt;script&gt;" in html


def test_render_report_rejects_unknown_format(make_project):
    with pytest.raises(ValueError):
        render_report(_report(make_project()), "pdf")


def test_write_report_creates_parent_directories(tmp_path: Path, make_project):
    destination = tmp_path / "out" / "report.md"
    output = write_report(_report(make_project()), "md", destination)
    assert destination.read_text() == output


def test_highest_risk_and_lookup(make_project):
    project = make_project(licenses=("APACHE_2_0",), bindings=(("GPL_2_0_ONLY", "STATIC", "HIGH"),))
    report = _report(project)
    assert report.highest_risk.category is RiskCategory.HAVING_COMPONENTS_LICENSES_INCOMPATIBLE_WITH_PROJECT_LICENSES
    assert report.result_for(RiskCategory.HAVING_OBSOLETE_PROJECT_LICENSES).risk_value == 0.0
