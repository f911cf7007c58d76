# ABOUTME: Provides a CLI that records study interactions and prints personalized recommendations.
# ABOUTME: Wires the catalog, YAML config, and per-user profile store into the preference engine.

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from src.common.catalog import load_catalog
from src.common.config import load_recommender_config
from src.common.schemas import INTERACTION_KINDS
from src.preference_engine import JsonFileProfileStore, PreferenceRecommender

console = Console()
app = typer.Typer(help="Personalized past-paper recommendations from study history.")


def _default_catalog_path() -> Path:
    return Path("data/sample_catalog.csv")


def _default_config_path() -> Path:
    return Path("configs/recommender.yaml")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _build_recommender(
    user_id: str,
    catalog_path: Path,
    config_path: Path,
    profile_dir: Optional[Path],
) -> PreferenceRecommender:
    if not catalog_path.exists():
        console.print(f"[red]Missing catalog at {catalog_path}[/red]")
        raise typer.Exit(code=1)
    config = load_recommender_config(config_path)
    store = JsonFileProfileStore.for_user(profile_dir or config.profile_dir, user_id, key=config.profile_key)
    return PreferenceRecommender(load_catalog(catalog_path), store, config=config)


@app.command()
def record(
    user_id: str = typer.Option(..., "--user-id", help="Student identifier owning the profile."),
    item_id: str = typer.Option(..., "--item-id", help="Catalog item the student interacted with."),
    kind: str = typer.Option(..., "--kind", help=f"Interaction kind: {', '.join(INTERACTION_KINDS)}."),
    catalog_path: Path = typer.Option(_default_catalog_path(), "--catalog-path", help="Catalog csv/json/parquet."),
    config_path: Path = typer.Option(_default_config_path(), "--config", help="Recommender config YAML."),
    profile_dir: Optional[Path] = typer.Option(None, "--profile-dir", help="Directory holding per-user profiles."),
) -> None:
    """
    Record one interaction and persist the updated profile.
    """
    if kind not in INTERACTION_KINDS:
        raise typer.BadParameter(f"Expected one of: {', '.join(INTERACTION_KINDS)}", param_hint="--kind")
    recommender = _build_recommender(user_id, catalog_path, config_path, profile_dir)
    before = len(recommender.profile.history)
    recommender.record_interaction(item_id, kind)
    if len(recommender.profile.history) == before:
        console.print(f"[yellow]Item {item_id} is not in the catalog; nothing recorded[/yellow]")
        return
    console.print(f"[green]Recorded {kind} on {item_id} for {user_id}[/green]")


@app.command()
def recommend(
    user_id: str = typer.Option(..., "--user-id", help="Student identifier owning the profile."),
    count: int = typer.Option(5, "--count", min=0, help="Number of papers to surface."),
    catalog_path: Path = typer.Option(_default_catalog_path(), "--catalog-path", help="Catalog csv/json/parquet."),
    config_path: Path = typer.Option(_default_config_path(), "--config", help="Recommender config YAML."),
    profile_dir: Optional[Path] = typer.Option(None, "--profile-dir", help="Directory holding per-user profiles."),
) -> None:
    """
    Print the ranked recommendation list with score and reason.
    """
    recommender = _build_recommender(user_id, catalog_path, config_path, profile_dir)
    recs = recommender.get_scored_recommendations(count)

    console.rule(f"[bold blue]Recommended for {user_id}[/bold blue]")
    if not recs:
        console.print("[yellow]Start studying to get personalized recommendations![/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Item ID")
    table.add_column("Title")
    table.add_column("Subject")
    table.add_column("Difficulty")
    table.add_column("Score")
    table.add_column("Reason")
    for rec in recs:
        table.add_row(
            rec.item.item_id,
            rec.item.title,
            rec.item.subject,
            rec.item.difficulty,
            f"{rec.score:.2f}",
            rec.reason,
        )
    console.print(table)


@app.command()
def insights(
    user_id: str = typer.Option(..., "--user-id", help="Student identifier owning the profile."),
    catalog_path: Path = typer.Option(_default_catalog_path(), "--catalog-path", help="Catalog csv/json/parquet."),
    config_path: Path = typer.Option(_default_config_path(), "--config", help="Recommender config YAML."),
    profile_dir: Optional[Path] = typer.Option(None, "--profile-dir", help="Directory holding per-user profiles."),
) -> None:
    """
    Summarize favorite subject, strongest topic, level, and streak.
    """
    recommender = _build_recommender(user_id, catalog_path, config_path, profile_dir)
    summary = recommender.get_insights()

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Favorite Subject")
    table.add_column("Your Level")
    table.add_column("Day Streak")
    table.add_column("Strong Topic")
    table.add_row(
        summary.favorite_subject,
        summary.recommended_difficulty,
        str(summary.learning_streak),
        summary.strongest_topic.replace("-", " ", 1),
    )
    console.print(table)


if __name__ == "__main__":
    app()
