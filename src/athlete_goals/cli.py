from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from athlete_goals.config import load_config
from athlete_goals.core.age_ranges import age_range as bucket_age
from athlete_goals.core.paths import export_csv
from athlete_goals.core.validate_catalog import validate_catalog_file
from athlete_goals.goals.models import CatalogNotFoundError, GoalDataError, Player
from athlete_goals.goals.players import normalize_gender
from athlete_goals.goals.resolver import (
    evaluate_goal,
    find_goal,
    format_goal_text,
    goal_status_text,
    is_blank_result,
)
from athlete_goals.logging import configure_logging, get_logger
from athlete_goals.services.goal_report_service import (
    assessment_types_from_catalog,
    build_export_frame,
    get_goal_catalog,
    load_players,
    load_results,
    summarize_by_category,
    team_overview,
)

app = typer.Typer(add_completion=False, help="Evaluate athlete assessment results against goals.")


def _fail(exc: Exception) -> None:
    typer.echo(f"[error] {exc}", err=True)
    raise typer.Exit(1)


@app.callback()
def main() -> None:
    try:
        configure_logging(load_config())
    except ValueError as exc:
        _fail(exc)


def _load_inputs(players_path: Path, results_path: Path, catalog_path: Optional[Path]):
    catalog = get_goal_catalog(catalog_path)
    players = load_players(players_path)
    results = load_results(results_path)
    return players, results, catalog


@app.command()
def evaluate(
    assessment: str = typer.Option(..., "--assessment", "-a", help="Assessment type, e.g. '60 Yard Dash'."),
    gender: str = typer.Option(..., "--gender", "-g", help="M, F, Male or Female."),
    age: Optional[int] = typer.Option(None, "--age", help="Player age in whole years."),
    age_range: Optional[str] = typer.Option(None, "--age-range", help="Age range bucket, e.g. '15-16'."),
    result: str = typer.Option("", "--result", "-r", help="Recorded result (blank = not entered)."),
    catalog: Optional[Path] = typer.Option(None, "--catalog", "-c", help="Goal catalog JSON (defaults to config)."),
) -> None:
    """Evaluate a single result for one player profile."""
    try:
        if age_range is None:
            if age is None:
                raise GoalDataError("Provide --age or --age-range.")
            age_range = bucket_age(age)
        player = Player(id="cli", gender=normalize_gender(gender), age_range=age_range, age=age)
        goal_catalog = get_goal_catalog(catalog)
    except (CatalogNotFoundError, ValueError) as exc:
        _fail(exc)

    goal_info = find_goal(player, assessment, goal_catalog)
    status = evaluate_goal(player, assessment, result, goal_catalog)
    if is_blank_result(result) and goal_info is not None:
        status_text = "Not Entered"
    else:
        status_text = goal_status_text(status)

    unit = f" {goal_info.unit}" if goal_info is not None and goal_info.unit else ""
    get_logger().debug(f"[evaluate] {assessment} {player.gender.value} {player.age_range} -> {status.value}")
    typer.echo(
        f"[evaluate] {assessment} | {player.gender.value} {player.age_range} | "
        f"goal {format_goal_text(goal_info)}{unit} | result {result or '-'} -> {status_text}"
    )


@app.command()
def report(
    players: Path = typer.Option(..., "--players", "-p", help="Players JSON."),
    results: Path = typer.Option(..., "--results", "-r", help="Assessment results JSON."),
    catalog: Optional[Path] = typer.Option(None, "--catalog", "-c", help="Goal catalog JSON (defaults to config)."),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="CSV destination (defaults to data/exports)."),
) -> None:
    """Write one goal-annotated row per player x assessment type."""
    try:
        player_list, result_map, goal_catalog = _load_inputs(players, results, catalog)
    except (CatalogNotFoundError, GoalDataError) as exc:
        _fail(exc)

    frame = build_export_frame(
        player_list,
        assessment_types_from_catalog(goal_catalog),
        result_map,
        goal_catalog,
    )
    dest = out or export_csv("all_players_results.csv")
    dest.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(dest, index=False)
    get_logger().info(f"[report] {len(frame)} rows -> {dest}")
    typer.echo(f"[report] Wrote {len(frame)} rows -> {dest}")


@app.command()
def summary(
    players: Path = typer.Option(..., "--players", "-p", help="Players JSON."),
    results: Path = typer.Option(..., "--results", "-r", help="Assessment results JSON."),
    catalog: Optional[Path] = typer.Option(None, "--catalog", "-c", help="Goal catalog JSON (defaults to config)."),
    as_json: bool = typer.Option(False, "--json", help="Print team overview and categories as JSON."),
) -> None:
    """Goal achievement rates per category and for the whole team."""
    try:
        player_list, result_map, goal_catalog = _load_inputs(players, results, catalog)
    except (CatalogNotFoundError, GoalDataError) as exc:
        _fail(exc)

    assessment_types = assessment_types_from_catalog(goal_catalog)
    overview = team_overview(player_list, assessment_types, result_map, goal_catalog)
    categories = summarize_by_category(player_list, assessment_types, result_map, goal_catalog)

    if as_json:
        payload = {**overview, "categories": categories.to_dict(orient="records")}
        typer.echo(json.dumps(payload, indent=2))
        return

    typer.echo(categories.to_string(index=False))
    typer.echo(
        f"[summary] {overview['total_goals_met']}/{overview['total_entered']} entered results met goal "
        f"({overview['achievement_rate']}%), {overview['total_assessments']} possible"
    )


@app.command()
def validate(
    catalog: Optional[Path] = typer.Option(None, "--catalog", "-c", help="Goal catalog JSON (defaults to config)."),
) -> None:
    """Validate a goal catalog document."""
    path = catalog or load_config().catalog_path
    try:
        ok = validate_catalog_file(path)
    except (CatalogNotFoundError, GoalDataError) as exc:
        _fail(exc)
    if not ok:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
