"""Command-line interface for the leak checker."""

import json
import sys
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from pydantic_settings import SettingsError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from leak_checker import __version__
from leak_checker.anonymizers import MarkerFormat, RedactionStyle, redact
from leak_checker.detectors import apply_allowlist, describe_finding, quick_check, scan
from leak_checker.models import (
    DETECTOR_LABELS,
    DETECTOR_RISK_LEVEL,
    DetectionResult,
    DetectionSummary,
    DetectorType,
    RiskLevel,
    ScanOptions,
    Settings,
    get_settings,
)
from leak_checker.utils import get_logger, setup_logging

app = typer.Typer(
    name="leak-checker",
    help="Detect secrets and personal data in text before it is shared",
    rich_markup_mode=None,
)
console = Console()
logger = get_logger(__name__)

# Exit code for --fail when something was found
FINDINGS_EXIT_CODE = 2


def _read_input(path: str) -> str:
    """Read a file, or stdin for "-"."""
    if path == "-":
        return sys.stdin.read()

    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[bold red]Error:[/bold red] Cannot read {escape(path)}: {escape(str(e))}")
        raise typer.Exit(1)


def _load_settings() -> Settings:
    """Load settings, exiting with an error for malformed environment values."""
    try:
        return get_settings()
    except (ValidationError, SettingsError) as e:
        console.print(f"[bold red]Error:[/bold red] Invalid settings: {escape(str(e))}")
        raise typer.Exit(1)


def _get_risk_color(risk: str) -> str:
    """Get color for risk level."""
    colors = {
        RiskLevel.CRITICAL: "red bold",
        RiskLevel.HIGH: "red",
        RiskLevel.MEDIUM: "yellow",
        RiskLevel.LOW: "blue",
    }
    return colors.get(risk, "white")


def _display_results(result: DetectionResult) -> None:
    """Display scan results in formatted tables, values masked."""
    console.print("\n[bold]Scan Results[/bold]")
    console.print(f"Characters: {result.text_length}")
    console.print(f"Duration: {result.scan_time:.2f}ms")
    console.print(f"Total Findings: {result.summary.total}\n")

    if not result.has_sensitive_data:
        console.print("[green]No sensitive data detected![/green]")
        return

    type_table = Table()
    type_table.add_column("Type", style="bold")
    type_table.add_column("Count", justify="right")

    for detector_type, count in sorted(result.summary.by_type.items(), key=lambda x: x[1], reverse=True):
        type_table.add_row(DETECTOR_LABELS[DetectorType(detector_type)], str(count))

    console.print(type_table)

    findings_table = Table(show_lines=True)
    findings_table.add_column("Span", style="cyan")
    findings_table.add_column("Type", style="yellow")
    findings_table.add_column("Risk")
    findings_table.add_column("Confidence", justify="right")
    findings_table.add_column("Value", max_width=40)

    for finding in result.findings:
        risk = DETECTOR_RISK_LEVEL[DetectorType(finding.type)]
        color = _get_risk_color(risk)
        safe = finding.to_safe_dict()
        findings_table.add_row(
            f"{finding.start}-{finding.end}",
            describe_finding(finding),
            f"[{color}]{risk.value.upper()}[/{color}]",
            f"{finding.confidence:.2f}",
            escape(safe["value"]),
        )

    console.print(findings_table)


def _save_results(result: DetectionResult, output_path: str) -> None:
    """Save scan results to a JSON file with every value masked."""
    output_data = result.model_dump(by_alias=True, exclude={"findings"})
    output_data["findings"] = [finding.to_safe_dict() for finding in result.findings]

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(output_data, f, indent=2, default=str)


@app.command("scan")
def scan_command(
    path: str = typer.Argument("-", help="File to scan, or - for stdin"),
    sensitivity: Optional[str] = typer.Option(None, "--sensitivity", "-s", help="low, medium or high"),
    min_confidence: Optional[float] = typer.Option(None, "--min-confidence", help="Override the sensitivity threshold"),
    max_results: Optional[int] = typer.Option(None, "--max-results", help="Maximum findings to report"),
    no_context: bool = typer.Option(False, "--no-context", help="Drop context snippets"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output file for results (JSON)"),
    fail: bool = typer.Option(False, "--fail", help="Exit with code 2 when findings exist"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """
    Scan a file or stdin for secrets and personal data.

    Example:
        leak-checker scan notes.txt
        cat prompt.txt | leak-checker scan - --sensitivity high -o results.json
    """
    if verbose:
        setup_logging(log_level="DEBUG")

    settings = _load_settings()
    text = _read_input(path)

    overrides = {}
    if sensitivity is not None:
        overrides["sensitivity_level"] = sensitivity
    if min_confidence is not None:
        overrides["min_confidence"] = min_confidence
    if max_results is not None:
        overrides["max_results"] = max_results
    if no_context:
        overrides["include_context"] = False

    options = ScanOptions.from_any(settings.scan_options(), **overrides)
    result = scan(text, options)

    findings = apply_allowlist(result.findings, options.allowlist)
    if len(findings) != len(result.findings):
        logger.info(f"Allowlist suppressed {len(result.findings) - len(findings)} finding(s)")
        result = result.model_copy(
            update={
                "findings": findings,
                "has_sensitive_data": bool(findings),
                "summary": DetectionSummary.from_findings(findings),
            }
        )

    _display_results(result)

    if output:
        try:
            _save_results(result, output)
        except OSError as e:
            console.print(f"[bold red]Error:[/bold red] Cannot write {escape(output)}: {escape(str(e))}")
            raise typer.Exit(1)
        console.print(f"\n[green]Results saved to:[/green] {escape(output)}")

    if fail and result.has_sensitive_data:
        raise typer.Exit(FINDINGS_EXIT_CODE)


@app.command()
def check(
    path: str = typer.Argument("-", help="File to check, or - for stdin"),
) -> None:
    """
    Run the quick pre-filter only.

    Example:
        leak-checker check notes.txt
    """
    text = _read_input(path)

    if quick_check(text):
        console.print("[yellow]Possible sensitive data[/yellow] - run a full scan")
    else:
        console.print("[green]Looks clean[/green]")


@app.command("redact")
def redact_command(
    path: str = typer.Argument("-", help="File to redact, or - for stdin"),
    style: Optional[str] = typer.Option(None, "--style", help="marker, mask, remove or hash"),
) -> None:
    """
    Print the text with every finding replaced.

    Example:
        leak-checker redact notes.txt --style mask > notes.redacted.txt
    """
    settings = _load_settings()
    style_name = (style or settings.redaction_style).lower()

    try:
        redaction_style = RedactionStyle(style_name)
        marker_format = MarkerFormat(settings.marker_format.lower()) if settings.marker_format else None
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        console.print("Valid styles: marker, mask, remove, hash")
        raise typer.Exit(1)

    text = _read_input(path)
    options = settings.scan_options()
    findings = apply_allowlist(scan(text, options).findings, options.allowlist)

    # Plain echo so markers are not read as console markup
    typer.echo(redact(text, findings, redaction_style, marker_format), nl=False)


@app.command()
def detectors() -> None:
    """List every detector type with its label and risk level."""
    table = Table(title="Detectors")
    table.add_column("Type", style="cyan")
    table.add_column("Label")
    table.add_column("Risk")

    for detector_type in DetectorType:
        risk = DETECTOR_RISK_LEVEL[detector_type]
        color = _get_risk_color(risk)
        table.add_row(detector_type.value, DETECTOR_LABELS[detector_type], f"[{color}]{risk.value.upper()}[/{color}]")

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]AI Leak Checker[/bold] v{__version__}")
    console.print("Secret and PII detection for outgoing text")


if __name__ == "__main__":
    app()
