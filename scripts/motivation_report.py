# ABOUTME: Provides a CLI that builds motivation inference reports from stored attempt records.
# ABOUTME: Prints metric, hypothesis, drift, and transition tables and writes JSON/parquet artifacts.

import json
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from src.motivation.classifier import infer_state
from src.motivation.config import DEFAULT_CONFIG, EngineConfig, load_engine_config
from src.motivation.drift import analyze_attempts
from src.motivation.report import build_report, report_to_dict, summarize_metrics
from src.motivation.repository import JsonAttemptStore
from src.motivation.schemas import MalformedObservationError, Observation, STATE_ORDER
from src.motivation.sequence import expand_attempts, observations_frame

console = Console()
app = typer.Typer(help="Infer motivation states from attempt telemetry and evaluate them against self-reports.")


def _load_config(config: Optional[Path], seed: Optional[int]) -> EngineConfig:
    cfg = DEFAULT_CONFIG
    if config is not None:
        if not config.exists():
            console.print(f"[red]Missing config at {config}[/red]")
            raise typer.Exit(code=1)
        try:
            cfg = load_engine_config(config)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--config") from exc
    if seed is not None:
        try:
            cfg = replace(cfg, seed=seed)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--seed") from exc
    return cfg


def _load_attempts(attempts_path: Path):
    if not attempts_path.exists():
        console.print(f"[red]Missing attempts file at {attempts_path}[/red]")
        raise typer.Exit(code=1)
    try:
        return JsonAttemptStore(attempts_path).snapshot()
    except ValueError as exc:
        # MalformedObservationError is a ValueError too.
        raise typer.BadParameter(str(exc), param_hint="--attempts") from exc


@app.command()
def report(
    attempts_path: Path = typer.Option(..., "--attempts", help="JSON file with attempt records."),
    config: Optional[Path] = typer.Option(None, "--config", help="Engine config YAML."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for the derived-score noise."),
    output: Optional[Path] = typer.Option(None, "--output", help="Where to write the JSON report."),
    observations_out: Optional[Path] = typer.Option(
        None, "--observations-out", help="Optional parquet with every labeled observation."
    ),
) -> None:
    """
    Build the full evaluation report for every attempt in the file.
    """
    cfg = _load_config(config, seed)
    attempts = _load_attempts(attempts_path)
    typer.echo(f"[report] Loaded {len(attempts)} attempts from {attempts_path}")

    result = build_report(attempts, config=cfg)
    typer.echo(f"[report] Expanded {result.observation_count} observations")

    console.rule("[bold blue]Motivation Model Performance[/bold blue]")
    metrics_table = Table(show_header=True, header_style="bold magenta")
    metrics_table.add_column("Metric")
    metrics_table.add_column("Value")
    for name, value in summarize_metrics(result):
        metrics_table.add_row(name, value)
    console.print(metrics_table)

    console.print()
    console.print("[bold yellow]Hypotheses[/bold yellow]")
    hyp_table = Table(show_header=True, header_style="bold magenta")
    hyp_table.add_column("Hypothesis")
    hyp_table.add_column("Status")
    hyp_table.add_column("Detail")
    colors = {"met": "green", "not-met": "red", "pending": "yellow"}
    for verdict in result.hypotheses:
        color = colors[verdict.status.value]
        hyp_table.add_row(verdict.name, f"[{color}]{verdict.status.value}[/{color}]", verdict.detail)
    console.print(hyp_table)

    console.print()
    console.print("[bold green]Drift Frequencies[/bold green]")
    drift_table = Table(show_header=True, header_style="bold magenta")
    drift_table.add_column("Drift Category")
    drift_table.add_column("Count", justify="right")
    drift_table.add_column("Share", justify="right")
    for label, count in result.drift_frequencies.items():
        drift_table.add_row(label, str(count), f"{result.drift_percentages[label]:.1f}%")
    console.print(drift_table)

    console.print()
    console.print("[bold green]State Transitions[/bold green]")
    transition_table = Table(show_header=True, header_style="bold magenta")
    transition_table.add_column("From -> To")
    for state in STATE_ORDER:
        transition_table.add_column(state.value, justify="right")
    for from_state in STATE_ORDER:
        transition_table.add_row(
            from_state.value,
            *[f"{result.transition_matrix.probability(from_state, s) * 100:.1f}%" for s in STATE_ORDER],
        )
    console.print(transition_table)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(report_to_dict(result, cfg), indent=2), encoding="utf-8")
        typer.echo(f"[report] Wrote report to {output}")

    if observations_out is not None:
        frame = observations_frame(expand_attempts(attempts, cfg.classifier), attempts)
        observations_out.parent.mkdir(parents=True, exist_ok=True)
        frame.to_parquet(observations_out, index=False)
        typer.echo(f"[report] Wrote {len(frame)} observations to {observations_out}")


@app.command()
def drift(
    attempts_path: Path = typer.Option(..., "--attempts", help="JSON file with attempt records."),
    attempt_id: Optional[str] = typer.Option(None, "--attempt-id", help="Only show this attempt."),
    config: Optional[Path] = typer.Option(None, "--config", help="Engine config YAML."),
) -> None:
    """
    Classify early-vs-late motivation drift for each attempt.
    """
    cfg = _load_config(config, None)
    attempts = _load_attempts(attempts_path)
    if attempt_id:
        attempts = tuple(a for a in attempts if a.attempt_id == attempt_id)
        if not attempts:
            console.print(f"[yellow]No attempt with id {attempt_id}[/yellow]")
            raise typer.Exit(code=1)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Attempt")
    table.add_column("Learner")
    table.add_column("Drift")
    table.add_column("Insight")
    for item in analyze_attempts(attempts, cfg.drift, cfg.classifier):
        table.add_row(item.attempt_id, item.learner_id, item.result.label.value, item.result.insight)
    console.print(table)


@app.command()
def infer(
    correct: bool = typer.Option(..., "--correct/--incorrect", help="Whether the answer was correct."),
    time_on_task: float = typer.Option(..., "--time", help="Seconds spent on the question."),
    hints: int = typer.Option(0, "--hints", help="Hints requested."),
) -> None:
    """
    Classify a single answered question.
    """
    observation = Observation(position=1, correct=correct, time_on_task=time_on_task, hints_requested=hints)
    try:
        state = infer_state(observation)
    except MalformedObservationError as exc:
        raise typer.BadParameter(str(exc)) from exc
    console.print(f"[bold]Inferred state:[/] {state.value} ({state.label})")


if __name__ == "__main__":
    app()
