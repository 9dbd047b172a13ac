"""
packet-validate CLI -- run the validation engine on report files.

Commands:
    packet-validate validate REPORT        Validate one Decision Packet
    packet-validate merge V1 V2 [V3...]    Merge generated report variants
    packet-validate lenses                 List the lens catalog
    packet-validate config                 Show the effective configuration

Configuration comes from PACKET_VALIDATION_* environment variables; command
options override it for that invocation only.
"""

import asyncio
import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .badge import validation_badge
from .config import EnsembleConfig, EnsembleMode, config_from_env
from .ensemble import PassResult, merge_pass_results
from .errors import PacketValidationError
from .lenses import GenerationLensId, generation_lenses, validation_lenses
from .report import DiagnosticReport, dump_report, load_report
from .validation import run_validation

app = typer.Typer(help="Multi-pass validation for diagnostic Decision Packets")
console = Console()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _resolve_config(
    mode: str | None, threshold: float | None = None, no_fallback: bool = False
) -> EnsembleConfig:
    config = config_from_env()
    updates = {}
    if mode is not None:
        updates["mode"] = mode
    if threshold is not None:
        updates["consensus_threshold"] = threshold
    if no_fallback:
        updates["fallback_on_error"] = False
    try:
        return config.with_updates(**updates)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


def _load(path: Path) -> DiagnosticReport:
    try:
        return load_report(path)
    except PacketValidationError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


def _print_verdict(title: str, validation) -> None:
    data = validation.to_dict()
    table = Table(title=title)
    table.add_column("Metric", style="bold")
    table.add_column("Value")

    disagreement = data["material_disagreement"]
    table.add_row("Mode", data["ensemble_mode"])
    table.add_row("Consensus", f"{data['consensus_score']:.0%}")
    table.add_row("Evidence", f"{data['evidence_score']:.0%}")
    table.add_row(
        "Material disagreement",
        "[red]YES[/red]" if disagreement else "[green]NO[/green]",
    )
    if "passes_completed" in data:
        table.add_row("Passes", f"{data['passes_completed']}/{data['pass_count']}")
    for note in data["disagreement_notes"]:
        table.add_row("Note", escape(note))
    for question in data.get("follow_up_questions", []):
        table.add_row("Follow-up", question)
    for diff in data.get("field_diffs", []):
        table.add_row(diff["field"], diff["issue"])
    console.print(table)

    badge = validation_badge(validation)
    if badge.show:
        style = "yellow" if badge.variant == "warning" else "green"
        console.print(f"[{style}]{badge.label}[/{style}] {badge.tooltip}")


# =============================================================================
# VALIDATE
# =============================================================================


@app.command()
def validate(
    report_path: Path = typer.Argument(..., help="Decision Packet JSON file"),
    mode: str = typer.Option(None, help="off | 3pass | 5pass (default: environment)"),
    threshold: float = typer.Option(None, help="Consensus threshold (default 0.7)"),
    no_fallback: bool = typer.Option(False, "--no-fallback", help="Raise instead of degrading"),
    json_output: bool = typer.Option(False, "--json", help="Print the validated report as JSON"),
    strict: bool = typer.Option(False, "--strict", help="Exit 1 on material disagreement"),
):
    """Validate one Decision Packet and print the verdict."""
    config = _resolve_config(mode, threshold, no_fallback)
    report = _load(report_path)
    validated = asyncio.run(run_validation(report, config))

    if json_output:
        typer.echo(json.dumps(dump_report(validated), indent=2))
    else:
        _print_verdict(f"Validation: {report.id or report_path.name}", validated.validation)

    if strict and validated.validation.material_disagreement:
        raise typer.Exit(1)


# =============================================================================
# MERGE
# =============================================================================


def _pass_ids(count: int, mode: EnsembleMode) -> list[GenerationLensId]:
    """Tag variants with catalog lens ids; the last variant is always synthesis."""
    catalog = [lens.id for lens in generation_lenses(mode)]
    if len(catalog) == count:
        return catalog
    return [GenerationLensId.CORE_DIAGNOSTIC] * (count - 1) + [GenerationLensId.SYNTHESIS]


@app.command()
def merge(
    variant_paths: list[Path] = typer.Argument(..., help="Report variants in pass order"),
    mode: str = typer.Option(None, help="3pass | 5pass (default: from variant count)"),
    json_output: bool = typer.Option(False, "--json", help="Print the merged report as JSON"),
    strict: bool = typer.Option(False, "--strict", help="Exit 1 on material disagreement"),
):
    """Merge independently generated variants of one report."""
    if mode is None:
        mode = EnsembleMode.FIVE_PASS.value if len(variant_paths) == 5 else EnsembleMode.THREE_PASS.value
    config = _resolve_config(mode)

    reports = [_load(p) for p in variant_paths]
    pass_results = [
        PassResult(pass_id=pass_id, success=True, report=report)
        for pass_id, report in zip(_pass_ids(len(reports), config.mode), reports)
    ]
    result = merge_pass_results(pass_results, config)

    if json_output:
        data = dump_report(result.final_report)
        data["fieldComparisons"] = [c.to_dict() for c in result.field_comparisons]
        typer.echo(json.dumps(data, indent=2))
    else:
        comparisons = Table(title="Field Comparisons")
        comparisons.add_column("Field", style="bold")
        comparisons.add_column("Values")
        comparisons.add_column("Agreement")
        comparisons.add_column("Selected")
        for c in result.field_comparisons:
            comparisons.add_row(
                c.field,
                ", ".join(map(str, c.values)),
                f"{c.agreement_score:.0%}",
                f"{c.selected_value} ({c.selection_reason})",
            )
        console.print(comparisons)
        _print_verdict(f"Merge: {len(reports)} variants", result.validation)

    if strict and result.validation.material_disagreement:
        raise typer.Exit(1)


# =============================================================================
# LENSES / CONFIG
# =============================================================================


@app.command()
def lenses(
    mode: str = typer.Option("5pass", help="3pass | 5pass"),
    generation: bool = typer.Option(False, "--generation", help="Show generation lenses"),
):
    """List the lens catalog for a mode."""
    config = _resolve_config(mode)
    catalog = generation_lenses(config.mode) if generation else validation_lenses(config.mode)

    table = Table(title=f"{'Generation' if generation else 'Validation'} lenses ({config.mode.value})")
    table.add_column("#")
    table.add_column("Lens", style="bold", no_wrap=True)
    table.add_column("Name")
    table.add_column("Description")
    for i, lens in enumerate(catalog, 1):
        table.add_row(str(i), lens.id.value, lens.name, lens.description)
    console.print(table)


@app.command()
def config():
    """Show the effective configuration from the environment."""
    effective = _resolve_config(None)
    table = Table(title="Effective configuration")
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    for key, value in effective.to_dict().items():
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                table.add_row(f"{key}.{sub_key}", str(sub_value))
        else:
            table.add_row(key, str(value))
    console.print(table)


if __name__ == "__main__":
    app()
