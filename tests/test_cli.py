import json

import pytest
from typer.testing import CliRunner

from guidelint_cli.main import app

runner = CliRunner()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    # Keep config discovery away from the repository's own files
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def sample(workdir):
    path = workdir / "sample.c"
    path.write_text("  var x = 1; \n")
    return path


SELECT = ["--select", "layout.trailing-whitespace", "--select", "naming.variable-casing"]


def test_cli_lint_help():
    result = runner.invoke(app, ["lint", "--help"])
    assert result.exit_code == 0
    assert "Run linter on source files" in result.stdout


def test_cli_lint_text(sample):
    result = runner.invoke(app, ["lint", str(sample), *SELECT])

    assert result.exit_code == 0
    assert f"WARNING: {sample}:1:13 [layout.trailing-whitespace] Trailing whitespace" in result.stdout
    assert f"WARNING: {sample}:1:7 [naming.variable-casing]" in result.stdout
    assert "Total issues found: 2 in 1 file(s)" in result.stdout


def test_cli_lint_json(sample):
    result = runner.invoke(app, ["lint", str(sample), *SELECT, "--format", "json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["filesChecked"] == 1
    assert data["filesFailed"] == []
    assert [(i["line"], i["column"], i["ruleId"]) for i in data["issues"]] == [
        (1, 7, "naming.variable-casing"),
        (1, 13, "layout.trailing-whitespace"),
    ]
    assert data["issues"][0]["severity"] == "WARNING"


def test_cli_ignore_and_severity(sample):
    result = runner.invoke(app, ["lint", str(sample), *SELECT, "--ignore", "layout"])
    assert "Total issues found: 1 in 1 file(s)" in result.stdout

    result = runner.invoke(app, ["lint", str(sample), *SELECT, "--severity", "error"])
    assert "Total issues found: 0 in 1 file(s)" in result.stdout


def test_cli_missing_file_fails(workdir):
    result = runner.invoke(app, ["lint", str(workdir / "missing.vim")])

    assert result.exit_code == 1
    assert "Cannot read file" in result.output


@pytest.mark.parametrize(
    "args",
    [
        ["--language", "cobol"],
        ["--format", "xml"],
        ["--config", "does-not-exist.toml"],
    ],
)
def test_cli_usage_errors(sample, args):
    result = runner.invoke(app, ["lint", str(sample), *args])

    assert result.exit_code == 2
    assert "Error:" in result.output


def test_cli_discovers_config_file(sample, workdir):
    (workdir / ".guidelint.toml").write_text('[guidelint]\ndisabled-rules = ["layout"]\n')

    result = runner.invoke(app, ["lint", str(sample), *SELECT])

    assert "layout.trailing-whitespace" not in result.stdout
    assert "Total issues found: 1 in 1 file(s)" in result.stdout


def test_cli_rules(workdir):
    config = workdir / "custom.toml"
    config.write_text('[guidelint]\ndisabled-rules = ["naming.function-casing"]\n')

    result = runner.invoke(app, ["rules", "--config", str(config)])

    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert len(lines) == 16
    assert any(line.startswith("off naming.function-casing") for line in lines)
    assert any(line.startswith("on  layout.line-length") for line in lines)
