"""Typer CLI entrypoint for series-watch."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import typer
import yaml
from rich import box
from rich.console import Console
from rich.table import Table

from .config import ConfigLocator, ConfigRepository, WatchConfig
from .engine import Entity, EntityExtractor, ExtractionRule
from .errors import ConfigError, SnapshotNotFoundError, WatchError
from .infra import build_store
from .logging_conf import configure_logging
from .orchestrator import CycleResult, build_orchestrator
from .scheduler import APSchedulerAdapter

app = typer.Typer(
    help="Watch a partitioned listing for added and removed series.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
snapshot_app = typer.Typer(
    name="snapshot",
    help="Inspect the stored snapshot.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
config_app = typer.Typer(
    name="config",
    help="Create or inspect the configuration file.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
app.add_typer(snapshot_app)
app.add_typer(config_app)

console = Console()


@dataclass
class AppState:
    repository: ConfigRepository
    verbose: bool = False

    @property
    def project_root(self) -> Path:
        return self.repository.locator.project_root

    def load_config(self) -> WatchConfig:
        return self.repository.load_config()


def build_state(verbose: bool, home: Optional[Path] = None, config_file: Optional[Path] = None) -> AppState:
    locator = ConfigLocator(project_root=home, config_file=config_file)
    configure_logging(verbose=verbose, log_dir=locator.logs_dir)
    return AppState(repository=ConfigRepository(locator), verbose=verbose)


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _load_config_or_exit(state: AppState) -> WatchConfig:
    try:
        return state.load_config()
    except ConfigError as exc:
        console.print(f"Configuration error: {exc}", style="red")
        raise typer.Exit(code=1) from exc


def _render_entities_table(title: str, entities: Iterable[Entity]) -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAD, show_lines=False)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("URL", style="dim")
    for entity in entities:
        table.add_row(entity.id, entity.title, entity.url)
    return table


def _render_result(result: CycleResult) -> Table:
    table = Table(title="Cycle result", box=box.SIMPLE_HEAD)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Total", str(result.total))
    table.add_row("Added", str(len(result.added)))
    table.add_row("Removed", str(len(result.removed)))
    table.add_row("Notified", "yes" if result.notified else "no")
    table.add_row("Saved", "yes" if result.saved else "no")
    return table


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    home: Optional[Path] = typer.Option(
        None, "--home", help="Project root holding data/ and logs/ (default: $SERIES_WATCH_HOME or cwd)."
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Explicit configuration file (.yaml/.yml/.json)."
    ),
) -> None:
    ctx.obj = build_state(verbose=verbose, home=home, config_file=config_file)


@app.command("run", help="Run one reconciliation cycle now.")
def run(
    ctx: typer.Context,
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print reports instead of sending them and do not save the snapshot."
    ),
    quiet: bool = typer.Option(False, "--quiet", help="Only print a one-line summary."),
) -> None:
    state = _get_state(ctx)
    config = _load_config_or_exit(state)
    try:
        with build_orchestrator(config, state.project_root, dry_run=dry_run) as orchestrator:
            result = orchestrator.run_cycle()
    except WatchError as exc:
        console.print(f"Cycle failed: {exc}", style="red")
        raise typer.Exit(code=1) from exc

    if quiet:
        console.print(
            f"total {result.total}, added {len(result.added)}, removed {len(result.removed)}"
        )
        return
    console.print(_render_result(result))
    if result.added:
        console.print(_render_entities_table("Added", result.added))
    if result.removed:
        console.print(_render_entities_table("Removed", result.removed))


@app.command("serve", help="Run cycles on the configured schedule until interrupted.")
def serve(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    config = _load_config_or_exit(state)
    logger = configure_logging().bind(component="serve")
    adapter = APSchedulerAdapter()

    def _scheduled_cycle() -> None:
        try:
            with build_orchestrator(config, state.project_root) as orchestrator:
                orchestrator.run_cycle()
        except WatchError as exc:
            # Already alerted by the orchestrator; keep the scheduler alive.
            logger.error("scheduled_cycle_failed", error=str(exc))

    adapter.schedule_cycle(config.schedule, _scheduled_cycle)
    console.print(f"Scheduled with {config.schedule.type.value} `{config.schedule.value}`.")
    try:
        adapter.start()
    except (KeyboardInterrupt, SystemExit):
        adapter.shutdown()


@app.command("extract", help="Run the extractor on a local HTML file.")
def extract_file(
    ctx: typer.Context,
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="HTML file to scan."),
    prefix: Optional[str] = typer.Option(None, "--prefix", help="Override the entity URL prefix."),
) -> None:
    state = _get_state(ctx)
    config = _load_config_or_exit(state)
    rule = ExtractionRule.from_source(config.source)
    if prefix:
        rule = ExtractionRule(
            entity_prefix=prefix,
            marker_tag=rule.marker_tag,
            marker_attribute=rule.marker_attribute,
            marker_value=rule.marker_value,
        )
    try:
        entities = EntityExtractor(rule).extract(path.read_bytes())
    except WatchError as exc:
        console.print(f"Extraction failed: {exc}", style="red")
        raise typer.Exit(code=1) from exc
    ordered = [entities[key] for key in sorted(entities)]
    console.print(_render_entities_table(f"{len(ordered)} entities in {path.name}", ordered))


@snapshot_app.command("show", help="Print the stored snapshot.")
def snapshot_show(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    config = _load_config_or_exit(state)
    store = build_store(config.storage, state.project_root)
    try:
        snapshot = store.load()
    except SnapshotNotFoundError:
        console.print(f"No snapshot stored at {store.location}.", style="yellow")
        return
    except WatchError as exc:
        console.print(f"Cannot read snapshot: {exc}", style="red")
        raise typer.Exit(code=1) from exc
    console.print(_render_entities_table(f"{store.location} ({len(snapshot)})", snapshot))


@config_app.command("init", help="Write the default configuration file.")
def config_init(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    state = _get_state(ctx)
    path = state.repository.locator.config_path()
    if path.exists() and not force:
        console.print(f"{path} already exists; use --force to overwrite.", style="yellow")
        raise typer.Exit(code=1)
    written = state.repository.save_config(WatchConfig())
    console.print(f"Wrote {written}.", style="green")


@config_app.command("show", help="Print the effective configuration.")
def config_show(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    config = _load_config_or_exit(state)
    payload = config.model_dump(mode="json")
    if payload["slack"]["bot_token"]:
        payload["slack"]["bot_token"] = "***"
    console.print(yaml.safe_dump(payload, allow_unicode=True, sort_keys=False), markup=False)


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
