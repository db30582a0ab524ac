# TagLens — End-to-end analysis: sitemap -> path tree -> selection -> metadata
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import logging
from typing import Callable, List, Optional

import httpx

from ..config import Settings
from ..schemas import PageMetaRecord, SitemapEntry
from .fetch import MetaFetchOrchestrator
from .handlers import validate_sitemap_request
from .selection import SelectionTracker
from .session import make_page_client, make_sitemap_client
from .sitemap import SitemapResolver
from .tree import PathTreeNode, TreeStats, all_included_urls, all_urls_unrestricted, build_path_tree


logger = logging.getLogger(__name__)


class AnalysisResult:
	def __init__(self, entries: List[SitemapEntry], tree: PathTreeNode, stats: TreeStats, selection: SelectionTracker) -> None:
		self.entries = entries
		self.tree = tree
		self.stats = stats
		self.selection = selection
		self.results: List[PageMetaRecord] = []


def rebuild(entries: List[SitemapEntry], max_children_per_parent: int, selection: SelectionTracker) -> AnalysisResult:
	"""Recompute the tree from scratch and re-select its limited set."""
	tree, stats = build_path_tree(entries, max_children_per_parent)
	selection.sync_limited(all_included_urls(tree))
	return AnalysisResult(entries, tree, stats, selection)


def selected_in_tree_order(tree: PathTreeNode, selection: SelectionTracker) -> List[str]:
	return list(dict.fromkeys(e.loc for e in all_urls_unrestricted(tree) if e.loc in selection))


async def resolve_sitemap(url: str, cfg: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> List[SitemapEntry]:
	async with make_sitemap_client(cfg, transport=transport) as client:
		resolver = SitemapResolver(client, max_nested=cfg.max_nested_sitemaps, max_depth=cfg.max_sitemap_depth, timeout=cfg.sitemap_timeout)
		return await resolver.resolve(url)


async def fetch_selection(
	urls: List[str],
	cfg: Settings,
	on_progress: Optional[Callable[[int], None]] = None,
	stop_flag: Optional[Callable[[], bool]] = None,
	transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[PageMetaRecord]:
	async with make_page_client(cfg, transport=transport) as client:
		orchestrator = MetaFetchOrchestrator.from_settings(client, cfg)
		return await orchestrator.fetch_all(urls, on_progress=on_progress, stop_flag=stop_flag)


async def analyze(
	sitemap_url: str,
	cfg: Settings,
	max_children_per_parent: Optional[int] = None,
	fetch: bool = True,
	on_progress: Optional[Callable[[int], None]] = None,
	stop_flag: Optional[Callable[[], bool]] = None,
	transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AnalysisResult:
	"""Resolve the sitemap, build the tree, select its limited set, and optionally fetch metadata.

	Raises RequestValidationError for a malformed sitemap URL, before any
	request is made, and FetchError when the sitemap itself cannot be resolved.
	"""
	sitemap_url = validate_sitemap_request({"url": sitemap_url})
	limit = cfg.max_children_per_parent if max_children_per_parent is None else max_children_per_parent
	entries = await resolve_sitemap(sitemap_url, cfg, transport=transport)
	result = rebuild(entries, limit, SelectionTracker())
	logger.info(
		"Sitemap %s: %d URLs, %d within limit %d",
		sitemap_url,
		result.stats.total_original_urls,
		result.stats.total_limited_urls,
		limit,
	)
	if fetch and len(result.selection):
		result.results = await fetch_selection(
			selected_in_tree_order(result.tree, result.selection), cfg, on_progress=on_progress, stop_flag=stop_flag, transport=transport
		)
	return result
