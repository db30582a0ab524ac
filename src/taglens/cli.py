# TagLens — CLI (Typer)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import asyncio
import logging
import typer
from typing import List, Optional
from rich import print
from rich.markup import escape
from rich.progress import Progress

from .config import Settings
from .core.errors import FetchError, RequestValidationError
from .core.fetch import filter_by_path, summarize
from .core.pipeline import analyze
from .core.tree import PathTreeNode, flatten_tree, root_selection_state
from .logging_config import configure_logging
from .storage.writers import ExportWriters

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _setup_logging(cfg: Settings, log_level: Optional[str]) -> None:
	log_path = configure_logging(level=log_level or cfg.log_level, log_dir=cfg.log_dir)
	logger.debug("Logging to %s", log_path)


def _all_paths(node: PathTreeNode) -> List[str]:
	paths: List[str] = []
	for child in node.children.values():
		paths.append(child.full_path)
		paths.extend(_all_paths(child))
	return paths


def _run(coro):
	try:
		return asyncio.run(coro)
	except RequestValidationError as e:
		print(f"[red]Invalid request:[/red] {escape(str(e))}")
		raise typer.Exit(code=2)
	except FetchError as e:
		print(f"[red]Failed to parse sitemap:[/red] {escape(str(e))}")
		raise typer.Exit(code=1)


@app.command()
def tree(
	sitemap_url: str = typer.Argument(..., help="Sitemap or sitemap index URL"),
	limit: Optional[int] = typer.Option(None, help="Max children with URLs kept per parent"),
	expand_all: bool = typer.Option(False, "--expand-all", help="Show every level of the tree"),
	log_level: Optional[str] = typer.Option(None, help="Log level"),
):
	"""Resolve a sitemap and print its path tree."""
	cfg = Settings()
	_setup_logging(cfg, log_level)
	res = _run(analyze(sitemap_url, cfg, max_children_per_parent=limit, fetch=False))
	stats = res.stats
	print(f"[bold]{stats.total_original_urls}[/bold] URLs -> [bold]{stats.total_limited_urls}[/bold] (max {limit if limit is not None else cfg.max_children_per_parent}/path)")
	if res.tree.urls:
		selected, _ = root_selection_state(res.tree, res.selection)
		print(escape(f"{'[x]' if selected else '[ ]'} / ({len(res.tree.urls)})"))
	expanded = set(_all_paths(res.tree)) if expand_all else set()
	for row in flatten_tree(res.tree, expanded, res.selection):
		box = "[x]" if row.is_selected else ("[-]" if row.is_partially_selected else "[ ]")
		count = f"{row.limited_url_count}/{row.total_url_count}" if row.is_limited else str(row.total_url_count)
		name = escape(row.name)
		label = name if row.is_included else f"[dim]{name} (excluded)[/dim]"
		print(f"{'  ' * row.depth}{escape(box)} {label} ({count})")


@app.command()
def fetch(
	sitemap_url: str = typer.Argument(..., help="Sitemap or sitemap index URL"),
	limit: Optional[int] = typer.Option(None, help="Max children with URLs kept per parent"),
	path: Optional[str] = typer.Option(None, help="Only report pages under this path"),
	json_out: Optional[str] = typer.Option(None, "--json", help="Write results as JSON"),
	csv_out: Optional[str] = typer.Option(None, "--csv", help="Write results as CSV"),
	data_dir: Optional[str] = typer.Option(None, help="Default export directory"),
	log_level: Optional[str] = typer.Option(None, help="Log level"),
):
	"""Resolve a sitemap, fetch page metadata for the limited selection, and export it."""
	cfg = Settings()
	_setup_logging(cfg, log_level)
	with Progress() as progress:
		task = progress.add_task("Fetching meta tags", total=100)
		res = _run(
			analyze(
				sitemap_url,
				cfg,
				max_children_per_parent=limit,
				on_progress=lambda pct: progress.update(task, completed=pct),
			)
		)
		progress.update(task, completed=100)
	results = filter_by_path(res.results, path)
	counts = summarize(results)
	print({
		"urls": res.stats.total_original_urls,
		"selected": len(res.selection),
		"shown": len(results),
		"success": counts["success"],
		"errors": counts["error"],
	})
	writers = ExportWriters(data_dir=data_dir or cfg.data_dir)
	if json_out is not None:
		print(f"JSON written to {writers.export_json(results, json_out or None)}")
	if csv_out is not None:
		print(f"CSV written to {writers.export_csv(results, csv_out or None)}")


@app.command("print-config")
def print_config():
	"""Print effective configuration from environment."""
	cfg = Settings()
	print(cfg.model_dump())


def main():
	app()


if __name__ == "__main__":
	main()
