# TagLens — Path tree: hierarchy over sitemap URLs with per-parent limiting
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import logging
from dataclasses import dataclass
from typing import Container, Dict, Iterable, List, Optional, Set, Tuple

from ..schemas import SitemapEntry
from ..utils.urls import join_path, path_segments


logger = logging.getLogger(__name__)

DEFAULT_MAX_CHILDREN = 20


class PathTreeNode:
	"""One path segment. Owned by its parent's ``children`` mapping; no back-references."""

	def __init__(self, name: str, full_path: str) -> None:
		self.name = name
		self.full_path = full_path
		self.urls: List[SitemapEntry] = []
		self.children: Dict[str, "PathTreeNode"] = {}
		self.is_included = True
		self.total_url_count = 0
		self.limited_url_count = 0

	@property
	def is_root(self) -> bool:
		return self.full_path == ""

	def __repr__(self) -> str:
		return f"PathTreeNode({self.full_path or '/'!r}, urls={len(self.urls)}, children={len(self.children)})"


class TreeStats:
	def __init__(self) -> None:
		self.total_original_urls = 0
		self.total_limited_urls = 0

	def as_dict(self) -> Dict[str, int]:
		return {"totalOriginalUrls": self.total_original_urls, "totalLimitedUrls": self.total_limited_urls}


@dataclass(frozen=True)
class FlatTreeNode:
	"""A visible row of the flattened tree."""

	id: str
	name: str
	full_path: str
	depth: int
	urls: Tuple[SitemapEntry, ...]
	url_count: int
	limited_url_count: int
	total_url_count: int
	has_children: bool
	is_expanded: bool
	is_selected: bool
	is_partially_selected: bool
	is_limited: bool
	is_included: bool


def empty_tree() -> PathTreeNode:
	return PathTreeNode("root", "")


def build_path_tree(urls: Iterable[SitemapEntry], max_children_per_parent: int = DEFAULT_MAX_CHILDREN) -> Tuple[PathTreeNode, TreeStats]:
	"""Build a fresh tree from urls and mark which branches survive the limit.

	Pass 1 creates one node per path segment and attaches each URL to the node
	where its path ends; URLs that are not absolute are dropped. Pass 2 keeps,
	under every non-root node, only the first ``max_children_per_parent``
	children (in insertion order) that carry URLs. Exclusion propagates down.
	"""
	root = empty_tree()
	for entry in urls:
		parts = path_segments(entry.loc)
		if parts is None:
			continue
		node = root
		for i, segment in enumerate(parts):
			child = node.children.get(segment)
			if child is None:
				child = PathTreeNode(segment, join_path(parts[: i + 1]))
				node.children[segment] = child
			node = child
		node.urls.append(entry)

	stats = TreeStats()
	_mark_included(root, stats, True, max(0, int(max_children_per_parent)))
	logger.debug(
		"Built path tree: %d URLs, %d within limit %d",
		stats.total_original_urls,
		stats.total_limited_urls,
		max_children_per_parent,
	)
	return root, stats


def _has_any_urls(node: PathTreeNode) -> bool:
	if node.urls:
		return True
	return any(_has_any_urls(c) for c in node.children.values())


def _mark_included(node: PathTreeNode, stats: TreeStats, parent_included: bool, limit: int) -> None:
	with_urls = [key for key, child in node.children.items() if _has_any_urls(child)]
	# root is never limited
	included: Set[str] = set(with_urls) if node.is_root else set(with_urls[:limit])

	for key, child in node.children.items():
		child.is_included = parent_included and key in included
		_mark_included(child, stats, child.is_included, limit)

	node.total_url_count = len(node.urls) + sum(c.total_url_count for c in node.children.values())
	if node.is_included:
		node.limited_url_count = len(node.urls) + sum(c.limited_url_count for c in node.children.values())
	else:
		node.limited_url_count = 0

	# own URLs only, subtree totals would double count
	stats.total_original_urls += len(node.urls)
	if node.is_included:
		stats.total_limited_urls += len(node.urls)


def all_included_urls(node: PathTreeNode) -> List[SitemapEntry]:
	"""URLs of node's subtree that fall inside the limit. Excluded branches are not visited."""
	if not node.is_included:
		return []
	urls = list(node.urls)
	for child in node.children.values():
		urls.extend(all_included_urls(child))
	return urls


def all_urls_unrestricted(node: PathTreeNode) -> List[SitemapEntry]:
	"""Every URL of node's subtree, ignoring inclusion."""
	urls = list(node.urls)
	for child in node.children.values():
		urls.extend(all_urls_unrestricted(child))
	return urls


def _selection_state(urls: List[SitemapEntry], selected: Container[str]) -> Tuple[bool, bool]:
	count = sum(1 for u in urls if u.loc in selected)
	return (count == len(urls) and count > 0), (0 < count < len(urls))


def flatten_tree(
	node: PathTreeNode,
	expanded_paths: Container[str],
	selected: Container[str],
	depth: int = 0,
) -> List[FlatTreeNode]:
	"""Depth-first visible rows, children sorted by name; expanded nodes show their children."""
	rows: List[FlatTreeNode] = []
	for name, child in sorted(node.children.items(), key=lambda kv: (kv[0].casefold(), kv[0])):
		is_selected, is_partial = _selection_state(all_urls_unrestricted(child), selected)
		is_expanded = child.full_path in expanded_paths
		rows.append(
			FlatTreeNode(
				id=child.full_path,
				name=name,
				full_path=child.full_path,
				depth=depth,
				urls=tuple(child.urls),
				url_count=len(child.urls),
				limited_url_count=child.limited_url_count,
				total_url_count=child.total_url_count,
				has_children=bool(child.children),
				is_expanded=is_expanded,
				is_selected=is_selected,
				is_partially_selected=is_partial,
				is_limited=child.total_url_count > child.limited_url_count,
				is_included=child.is_included,
			)
		)
		if is_expanded and child.children:
			rows.extend(flatten_tree(child, expanded_paths, selected, depth + 1))
	return rows


def root_selection_state(root: PathTreeNode, selected: Container[str]) -> Tuple[bool, bool]:
	"""(is_selected, is_partially_selected) for URLs attached to the root itself."""
	return _selection_state(root.urls, selected)


def find_node(root: PathTreeNode, path: str) -> Optional[PathTreeNode]:
	node = root
	for part in (p for p in path.split("/") if p):
		node = node.children.get(part)
		if node is None:
			return None
	return node


def paths_to_expand(path: str) -> List[str]:
	"""Every ancestor prefix of path, itself included: /a/b -> ['/a', '/a/b']."""
	parts = [p for p in path.split("/") if p]
	return [join_path(parts[:i]) for i in range(1, len(parts) + 1)]
