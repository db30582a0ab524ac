# TagLens — Sitemap fetching, parsing, and index resolution
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import asyncio
import logging
import xml.etree.ElementTree as ET
from typing import List, NamedTuple, Optional

import httpx

from ..schemas import SitemapEntry
from .errors import FetchError, ParseError
from .session import fetch_text


logger = logging.getLogger(__name__)

URLSET = "urlset"
SITEMAPINDEX = "sitemapindex"


class ParsedSitemap(NamedTuple):
	kind: str
	entries: List[SitemapEntry]


def _child_text(el: ET.Element, tag: str) -> Optional[str]:
	node = el.find(f"{{*}}{tag}")
	if node is None:
		return None
	return (node.text or "").strip() or None


def parse_sitemap_xml(text: str) -> ParsedSitemap:
	"""Parse a urlset or sitemapindex document, namespace-agnostic.

	Entries without a <loc> are dropped.
	"""
	try:
		root = ET.fromstring(text)
	except ET.ParseError as e:
		raise ParseError(f"Malformed sitemap XML: {e}") from e
	local = root.tag.rsplit("}", 1)[-1]
	if local == URLSET:
		item = "url"
	elif local == SITEMAPINDEX:
		item = "sitemap"
	else:
		raise ParseError(f"Unexpected sitemap root element <{local}>")
	entries: List[SitemapEntry] = []
	for el in root.findall(f"{{*}}{item}"):
		loc = _child_text(el, "loc")
		if not loc:
			continue
		entries.append(
			SitemapEntry(
				loc=loc,
				lastmod=_child_text(el, "lastmod"),
				changefreq=_child_text(el, "changefreq"),
				priority=_child_text(el, "priority"),
			)
		)
	return ParsedSitemap(local, entries)


class SitemapResolver:
	"""Turns a sitemap URL into a flat list of page entries.

	A sitemap index is detected structurally (its root element) and up to
	``max_nested`` of its children are fetched concurrently. A failed child
	contributes nothing; if no child yields entries the index's own
	references are returned instead.
	"""

	def __init__(self, client: httpx.AsyncClient, max_nested: int = 10, max_depth: int = 3, timeout: float = 30.0) -> None:
		self.client = client
		self.max_nested = max(1, int(max_nested))
		self.max_depth = max(0, int(max_depth))
		self.timeout = timeout

	async def load(self, url: str) -> ParsedSitemap:
		text = await fetch_text(self.client, url, self.timeout)
		try:
			return parse_sitemap_xml(text)
		except ParseError as e:
			e.url = url
			raise

	async def resolve(self, url: str) -> List[SitemapEntry]:
		"""Resolve url; raises FetchError if the top-level sitemap cannot be used."""
		doc = await self.load(url)
		entries = await self._expand(url, doc, depth=0)
		logger.info("Resolved %s into %d entries", url, len(entries))
		return entries

	async def _expand(self, url: str, doc: ParsedSitemap, depth: int) -> List[SitemapEntry]:
		if doc.kind == URLSET:
			return list(doc.entries)
		if depth >= self.max_depth:
			logger.warning("Sitemap index %s exceeds nesting depth %d; returning references", url, self.max_depth)
			return list(doc.entries)
		nested = doc.entries[: self.max_nested]
		if len(doc.entries) > len(nested):
			logger.info("Sitemap index %s lists %d sitemaps; fetching the first %d", url, len(doc.entries), len(nested))
		groups = await asyncio.gather(*(self._resolve_nested(e.loc, depth + 1) for e in nested))
		resolved = [entry for group in groups for entry in group]
		if not resolved:
			logger.warning("No nested sitemap of %s resolved; keeping its %d references", url, len(doc.entries))
			return list(doc.entries)
		return resolved

	async def _resolve_nested(self, url: str, depth: int) -> List[SitemapEntry]:
		try:
			doc = await self.load(url)
		except FetchError as e:
			logger.warning("Skipping nested sitemap %s: %s", url, e)
			return []
		return await self._expand(url, doc, depth)
