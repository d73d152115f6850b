import json
from pathlib import Path

from click.testing import CliRunner

from license_risk_inspector.cli import main


def test_policy_gate_blocks_and_allows_exceptions(sample_definition):
    runner = CliRunner()
    with runner.isolated_filesystem():
        project_file = Path("project.json")
        project_file.write_text(json.dumps(sample_definition))

        strict_policy = Path("policy-strict.yml")
        strict_policy.write_text("""
categories:
  COMPONENTS_LICENSES_INCOMPATIBLE_WITH_PROJECT_LICENSES:
    max_risk_value: 0.5
disallow_root_causes:
  - incompatible.incompatible_root_cause
""")

        exception_policy = Path("policy.yml")
        exception_policy.write_text("""
categories:
  COMPONENTS_LICENSES_INCOMPATIBLE_WITH_PROJECT_LICENSES:
    max_risk_value: 0.5
disallow_root_causes:
  - incompatible.incompatible_root_cause
exceptions:
  - category: HAVING_COMPONENTS_LICENSES_INCOMPATIBLE_WITH_PROJECT_LICENSES
    key: incompatible.incompatible_root_cause
    reason: written permission from the libbar authors
""")

        failing = runner.invoke(
            main,
            ["analyse", str(project_file), "--format", "json", "--policy", str(strict_policy)],
        )
        assert failing.exit_code == 1
        assert "blocked by policy" in failing.output

        passing = runner.invoke(
            main,
            [
                "analyse",
                str(project_file),
                "--format",
                "json",
                "--policy",
                str(exception_policy),
                "--github-check-output",
                "checks/policy.json",
            ],
        )
        assert passing.exit_code == 0
        check = json.loads(Path("checks/policy.json").read_text())

    assert check["conclusion"] == "success"
    assert check["details"]["used_exceptions"][0]["key"] == "incompatible.incompatible_root_cause"


def test_invalid_policy_exits_non_zero(sample_definition):
    runner = CliRunner()
    with runner.isolated_filesystem():
        project_file = Path("project.json")
        project_file.write_text(json.dumps(sample_definition))
        policy_file = Path("policy.yml")
        policy_file.write_text("max_exposure: 7\n")

        result = runner.invoke(main, ["analyse", str(project_file), "--policy", str(policy_file)])

    assert result.exit_code == 1
    assert "Invalid policy" in result.output
