from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import click

from .compatibility import get_compatibility_table
from .engine import RiskAnalysisEngine
from .policy import diff_reports, evaluate_policy, load_policy, write_github_check
from .project_loader import ProjectDefinitionError, load_project
from .reporting import write_report
from .types import (
    AnalysisSettings,
    Compatibility,
    Language,
    LinkType,
    Redistribution,
    Report,
    RiskCategory,
    SupportedLicense,
    Verbosity,
    licenses_for_components,
    licenses_for_projects,
)


def _parse_categories(ctx, param, value: tuple[str, ...]) -> list[RiskCategory]:
    if not value:
        return list(RiskCategory)
    categories: list[RiskCategory] = []
    for text in value:
        try:
            category = RiskCategory.parse(text)
        except ValueError as exc:
            raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc
        if category not in categories:
            categories.append(category)
    return categories


def _parse_with(parser):
    def callback(ctx, param, value):
        try:
            return parser(value)
        except ValueError as exc:
            raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc

    return callback


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level for diagnostic output on stderr.",
)
def main(log_level: str) -> None:
    """License Risk Inspector CLI."""

    logging.basicConfig(level=getattr(logging, log_level.upper()), format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False, path_type=str))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["json", "markdown", "md", "text", "html"], case_sensitive=False),
    default="markdown",
    show_default=True,
    help="Output format for the report.",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=str),
    help="Write the report to a file instead of stdout.",
)
@click.option(
    "--analyser",
    "categories",
    multiple=True,
    callback=_parse_categories,
    help="Risk category to analyse (repeatable, e.g. HETEROGENEOUS_COMPONENTS_LICENSES). All by default.",
)
@click.option(
    "--verbosity",
    type=click.Choice([level.value for level in Verbosity], case_sensitive=False),
    default=Verbosity.DETAILED.value,
    show_default=True,
    envvar="LICENSE_RISK_VERBOSITY",
    help="How much explanation the report carries.",
)
@click.option(
    "--language",
    type=click.Choice([language.value for language in Language], case_sensitive=False),
    default=Language.ENGLISH.value,
    show_default=True,
    envvar="LICENSE_RISK_LANGUAGE",
    help="Language of the explanations in the report.",
)
@click.option(
    "--policy",
    type=click.Path(exists=True, dir_okay=False, path_type=str),
    help="Path to a policy-as-code YAML file for CI gating.",
)
@click.option(
    "--github-check-output",
    type=click.Path(dir_okay=False, writable=True, path_type=str),
    help="Write a GitHub Check-style JSON summary for PR gating.",
)
@click.option(
    "--fail-on-risk",
    type=click.FloatRange(0.0, 1.0),
    help="Exit non-zero when any risk value exceeds the threshold (0-1, lower = healthier).",
)
def analyse(
    project_file: str,
    fmt: str,
    output: Optional[str],
    categories: list[RiskCategory],
    verbosity: str,
    language: str,
    policy: Optional[str],
    github_check_output: Optional[str],
    fail_on_risk: Optional[float],
) -> None:
    """Analyse the licensing risks of a project definition."""

    try:
        project = load_project(Path(project_file))
    except ProjectDefinitionError as exc:
        click.echo(f"Unable to load {project_file}:", err=True)
        for message in exc.errors:
            click.echo(f"  {message}", err=True)
        raise SystemExit(1)

    settings = AnalysisSettings(
        categories=categories,
        verbosity=Verbosity(verbosity.lower()),
        language=Language(language.lower()),
    )
    engine = RiskAnalysisEngine.for_project(project, settings.categories)
    report = Report(
        project=project,
        results=list(engine.analyse()),
        generated_at=datetime.now(timezone.utc),
        settings=settings,
    )

    destination = Path(output) if output else None
    rendered = write_report(report, fmt, destination)
    if not destination:
        click.echo(rendered)

    if policy:
        try:
            policy_data = load_policy(Path(policy))
        except ValueError as exc:
            click.echo(f"Invalid policy {policy}: {exc}", err=True)
            raise SystemExit(1)
        evaluation = evaluate_policy(report, policy_data)
        if github_check_output:
            write_github_check(Path(github_check_output), evaluation, report)
        for warning in evaluation.warnings:
            click.echo(f"Policy warning: {warning}", err=True)
        if not evaluation.passed:
            for failure in evaluation.failures:
                click.echo(f"Policy failure: {failure}", err=True)
            raise SystemExit(1)

    if fail_on_risk is not None:
        if any(result.risk_value > fail_on_risk for result in report.results):
            raise SystemExit(1)


@main.command()
@click.option("--json", "json_output", is_flag=True, help="Emit JSON instead of human text.")
def info(json_output: bool) -> None:
    """List the risks, licenses and compatibilities the inspector knows about."""

    table = get_compatibility_table()
    payload = {
        "risks": [category.name for category in RiskCategory],
        "licenses_for_components": [license.name for license in licenses_for_components()],
        "licenses_for_projects": [license.name for license in licenses_for_projects()],
        "links": [link.name for link in LinkType],
        "redistributions": [redistribution.name for redistribution in Redistribution],
        "compatibilities": [compatibility.name for compatibility in Compatibility],
        "supported_combinations": table.number_of_supported_combinations(),
        "licenses_coverage": table.licenses_coverage(),
    }

    if json_output:
        click.echo(json.dumps(payload, indent=2))
        return

    click.echo("Risks:")
    for category in RiskCategory:
        click.echo(f"  {category.name}: {category.description}")
    click.echo("Licenses for components:")
    for license in licenses_for_components():
        click.echo(f"  {license.name} ({license.spdx_id}): {license.full_name}")
    click.echo(f"Licenses for projects: {', '.join(payload['licenses_for_projects'])}")
    click.echo(f"Links: {', '.join(payload['links'])}")
    click.echo(f"Redistributions: {', '.join(payload['redistributions'])}")
    click.echo(f"Compatibilities: {', '.join(payload['compatibilities'])}")
    click.echo(
        f"Supported combinations: {payload['supported_combinations']} "
        f"(coverage {payload['licenses_coverage']:.2%})"
    )


@main.command()
@click.argument("component_license", callback=_parse_with(SupportedLicense.parse))
@click.argument("project_license", callback=_parse_with(SupportedLicense.parse))
@click.option(
    "--link",
    default=LinkType.DYNAMIC.name,
    show_default=True,
    callback=_parse_with(LinkType.parse),
    help="How the component is linked (STATIC or DYNAMIC).",
)
@click.option(
    "--redistribution",
    default=Redistribution.SOFTWARE_PACKAGE_OR_SAAS.name,
    show_default=True,
    callback=_parse_with(Redistribution.parse),
    help="How the project is redistributed (NONE or SOFTWARE_PACKAGE_OR_SAAS).",
)
def compatibility(
    component_license: SupportedLicense,
    project_license: SupportedLicense,
    link: LinkType,
    redistribution: Redistribution,
) -> None:
    """Look up how a component license relates to a project license."""

    table = get_compatibility_table()
    result = table.compatibility_of(component_license, project_license, link, redistribution)
    click.echo(
        f"{component_license.spdx_id} via {link.description} in a {project_license.spdx_id} project "
        f"{redistribution.description}: {result.name}"
    )
    warning = table.specific_warning(component_license, project_license, link, redistribution)
    if warning:
        click.echo(f"Specific warning: {warning}")


@main.command()
@click.argument("base", type=click.Path(exists=True, dir_okay=False, path_type=str))
@click.argument("target", type=click.Path(exists=True, dir_okay=False, path_type=str))
def diff(base: str, target: str) -> None:
    """Compare two JSON license risk reports and surface drift."""

    base_data = json.loads(Path(base).read_text())
    target_data = json.loads(Path(target).read_text())

    summary = diff_reports(base_data, target_data)

    click.echo("Component changes:")
    click.echo(f"  Added: {', '.join(summary['added_components']) if summary['added_components'] else 'none'}")
    click.echo(f"  Removed: {', '.join(summary['removed_components']) if summary['removed_components'] else 'none'}")
    click.echo(f"  Changed: {', '.join(summary['changed_components']) if summary['changed_components'] else 'none'}")
    click.echo("Risk deltas:")
    for category, delta in summary["risk_deltas"].items():
        click.echo(f"  {category}: {delta:+.4f}")


if __name__ == "__main__":
    main()
