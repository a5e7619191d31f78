import logging
from pathlib import Path
from typing import List, Optional

import typer
from guidelint.engine import LinterEngine
from guidelint.exceptions import ConfigError
from guidelint.models import Severity
from guidelint.registry import build_registry

from .config import resolve_config
from .converters import finding_to_lint_issue
from .models import LintReport

app = typer.Typer(help="guidelint - check Vim script and Objective-C sources against their style guides")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine activity to stderr")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def lint(
    files: List[Path] = typer.Argument(..., help="Files to lint"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="Path to .guidelint.toml or pyproject.toml"),
    language: Optional[str] = typer.Option(None, help="Force a language profile: vim, objc or generic"),
    max_line_length: Optional[int] = typer.Option(None, help="Column budget (default per language)"),
    select: Optional[List[str]] = typer.Option(None, help="Only run these rules or rule groups"),
    ignore: Optional[List[str]] = typer.Option(None, help="Skip these rules or rule groups"),
    severity: Optional[str] = typer.Option(None, help="Minimum severity to show: ERROR, WARNING or INFO"),
    output_format: str = typer.Option("text", "--format", help="Output format: text or json"),
    workers: Optional[int] = typer.Option(None, help="Number of files linted in parallel"),
    timeout: Optional[float] = typer.Option(None, help="Per-file time limit in seconds"),
):
    """Run linter on source files"""
    try:
        config = resolve_config(
            config_file,
            language=language,
            max_line_length=max_line_length,
            enabled_rules=select or None,
            disabled_rules=ignore or None,
            min_severity=severity,
            workers=workers,
        )
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    if output_format not in ("text", "json"):
        typer.echo(f"Error: unknown format '{output_format}'", err=True)
        raise typer.Exit(code=2)

    engine = LinterEngine(build_registry(config), config)
    reports = engine.check_files(files, timeout=timeout)

    report = LintReport(files_checked=len(reports))
    for file_report in reports:
        if file_report.error:
            report.files_failed.append(file_report.path)
            typer.echo(f"Warning: {file_report.path}: {file_report.error}", err=True)
        report.issues.extend(finding_to_lint_issue(f, file_report.path) for f in file_report.findings)

    if output_format == "json":
        typer.echo(report.model_dump_json(by_alias=True, indent=2))
    else:
        for issue in report.issues:
            typer.echo(
                f"{issue.severity.value}: {issue.path}:{issue.line}:{issue.column} [{issue.rule_id}] {issue.message}"
            )
        typer.echo(f"\nTotal issues found: {len(report.issues)} in {report.files_checked} file(s)")

    if any(issue.severity is Severity.ERROR for issue in report.issues) or report.files_failed:
        raise typer.Exit(code=1)


@app.command()
def rules(
    config_file: Optional[Path] = typer.Option(None, "--config", help="Path to .guidelint.toml or pyproject.toml"),
):
    """List the registered rules and whether they are enabled"""
    try:
        config = resolve_config(config_file)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    registry = build_registry(config)
    active = {rule.rule_id for rule in registry.active_rules(config)}
    for rule in registry.get_all_rules():
        state = "on " if rule.rule_id in active else "off"
        typer.echo(f"{state} {rule.rule_id:<30} {rule.severity.value:<8} {getattr(rule, 'description', '')}")


if __name__ == "__main__":
    app()
