"""CLI interface for posture-eval."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from posture.catalog import default_catalog
from posture.evaluators.registry import EvaluatorRegistry
from posture.models.model_result import CheckResult, DetailLevel, ResultKind
from posture.pipeline import evaluate_file, load_config

app = typer.Typer(
    name="posture",
    help="posture-eval - Score repository security posture from probe findings",
)

console = Console()

_DETAIL_STYLES = {
    DetailLevel.INFO: "green",
    DetailLevel.WARN: "yellow",
    DetailLevel.DEBUG: "dim",
}


def _get_score_color(score: int) -> str:
    """Get color for score display."""
    if score >= 8:
        return "green"
    elif score >= 5:
        return "yellow"
    else:
        return "red"


def _format_score(result: CheckResult) -> str:
    if result.kind == ResultKind.ERROR:
        return "[red]error[/red]"
    if result.kind == ResultKind.INCONCLUSIVE:
        return "[dim]?[/dim]"
    color = _get_score_color(result.score)
    return f"[{color}]{result.score}[/{color}]"


@app.command()
def evaluate(
    findings_file: Path = typer.Argument(..., help="JSON file mapping check names to findings"),
    check: list[str] = typer.Option(None, "--check", "-c", help="Only evaluate this check (repeatable)"),
    config_file: Path = typer.Option(None, "--config", help="JSON scoring configuration"),
    details: bool = typer.Option(False, "--details", "-d", help="Show detail messages"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Evaluate checks from a findings file."""
    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = load_config(config_file)
        results = evaluate_file(findings_file, checks=check or None, config=config)
    except OSError as e:
        console.print(f"[red]Error:[/red] Cannot read file: {e}")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error:[/red] Invalid input: {e}")
        raise typer.Exit(1)
    except KeyError as e:
        console.print(f"[red]Error:[/red] {e.args[0]}")
        raise typer.Exit(1)

    table = Table(title=f"Check Results ({len(results)} checks)")
    table.add_column("Check", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Reason")

    for name in sorted(results):
        result, _ = results[name]
        table.add_row(name, _format_score(result), escape(result.reason))

    console.print(table)

    if details:
        for name in sorted(results):
            _, check_details = results[name]
            if not check_details:
                continue
            console.print(f"\n[bold]{name}[/bold]")
            for detail in check_details:
                style = _DETAIL_STYLES[detail.level]
                location = f" ({detail.message.location.path})" if detail.message.location else ""
                console.print(f"  [{style}]{detail.level.value}[/{style}] {escape(detail.message.text + location)}")

    errors = [name for name, (result, _) in results.items() if result.is_error]
    if errors:
        console.print(f"\n[red]Error:[/red] {len(errors)} check(s) failed: {', '.join(sorted(errors))}")
        raise typer.Exit(1)


@app.command()
def checks() -> None:
    """List registered checks and the probes they consume."""
    registry = EvaluatorRegistry()
    catalog = default_catalog()

    table = Table(title=f"Registered Checks ({len(registry.names())})")
    table.add_column("Check", style="cyan")
    table.add_column("Probes", style="dim")

    for name in registry.names():
        evaluator = registry.evaluators[name]
        probes = [p.value for p in evaluator.expected_probes]
        extra = [p for p in catalog.probes_for(name) if p not in probes]
        table.add_row(name, ", ".join(probes + extra))

    console.print(table)


if __name__ == "__main__":
    app()
