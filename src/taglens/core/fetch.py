# TagLens — Batched, fault-tolerant metadata fetching
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import asyncio
import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import httpx

from ..config import Settings
from ..schemas import FetchMetaResponse, PageMetaRecord
from ..utils.urls import is_http_url, path_matches
from .errors import RequestValidationError, TransportError
from .extract import error_record, extract_meta
from .session import fetch_text


logger = logging.getLogger(__name__)

BATCH_SIZE = 10
SUB_BATCH_SIZE = 5
MAX_URLS_PER_REQUEST = 50
PAGE_TIMEOUT = 10.0


async def process_url(client: httpx.AsyncClient, url: str, timeout: float = PAGE_TIMEOUT) -> PageMetaRecord:
	"""Fetch one page and extract its metadata. Never raises; failures become error records."""
	if not is_http_url(url):
		logger.warning("Skipping invalid URL %r", url)
		return error_record(url, "Invalid URL")
	try:
		html = await fetch_text(client, url, timeout)
	except TransportError as e:
		logger.warning("Fetch failed for %s: %s", url, e)
		return error_record(url, str(e))
	try:
		return extract_meta(html, url)
	except Exception as e:
		logger.warning("Skipping %s due to parse error: %s", url, e)
		return error_record(url, f"Parse error: {e}")


async def fetch_meta(
	client: httpx.AsyncClient,
	urls: Sequence[str],
	timeout: float = PAGE_TIMEOUT,
	sub_batch_size: int = SUB_BATCH_SIZE,
	max_urls: int = MAX_URLS_PER_REQUEST,
) -> FetchMetaResponse:
	"""Fetch metadata for one request's worth of URLs.

	Input beyond ``max_urls`` is dropped. A bad entry becomes an error record
	rather than failing the request. Pages are fetched ``sub_batch_size``
	at a time; each sub-batch settles before the next starts. Results keep
	the input order.
	"""
	if not isinstance(urls, list) or not urls:
		raise RequestValidationError("URLs array is required")
	to_process = [str(u) for u in urls[:max_urls]]
	if len(urls) > len(to_process):
		logger.info("Request truncated from %d to %d URLs", len(urls), len(to_process))
	step = max(1, int(sub_batch_size))
	results: List[PageMetaRecord] = []
	for i in range(0, len(to_process), step):
		batch = to_process[i : i + step]
		results.extend(await asyncio.gather(*(process_url(client, u, timeout) for u in batch)))
	return FetchMetaResponse(
		results=results,
		processed_count=len(results),
		error_count=sum(1 for r in results if not r.ok),
	)


class MetaFetchOrchestrator:
	"""Runs a whole selection through fetch_meta in fixed-size batches.

	Progress (an integer percent) is reported after each batch. ``stop_flag``
	is checked between batches for cooperative cancellation.
	"""

	def __init__(
		self,
		client: httpx.AsyncClient,
		batch_size: int = BATCH_SIZE,
		sub_batch_size: int = SUB_BATCH_SIZE,
		max_urls_per_request: int = MAX_URLS_PER_REQUEST,
		timeout: float = PAGE_TIMEOUT,
	) -> None:
		self.client = client
		self.max_urls_per_request = max(1, int(max_urls_per_request))
		self.batch_size = min(max(1, int(batch_size)), self.max_urls_per_request)
		self.sub_batch_size = sub_batch_size
		self.timeout = timeout

	@classmethod
	def from_settings(cls, client: httpx.AsyncClient, cfg: Settings) -> "MetaFetchOrchestrator":
		return cls(
			client,
			batch_size=cfg.batch_size,
			sub_batch_size=cfg.sub_batch_size,
			max_urls_per_request=cfg.max_urls_per_request,
			timeout=cfg.page_timeout,
		)

	async def fetch_all(
		self,
		urls: Iterable[str],
		on_progress: Optional[Callable[[int], None]] = None,
		stop_flag: Optional[Callable[[], bool]] = None,
	) -> List[PageMetaRecord]:
		pending = list(urls)
		total = len(pending)
		results: List[PageMetaRecord] = []
		for start in range(0, total, self.batch_size):
			if stop_flag and stop_flag():
				logger.info("Fetch stopped after %d of %d URLs", len(results), total)
				break
			batch = pending[start : start + self.batch_size]
			resp = await fetch_meta(
				self.client,
				batch,
				timeout=self.timeout,
				sub_batch_size=self.sub_batch_size,
				max_urls=self.max_urls_per_request,
			)
			results.extend(resp.results)
			progress = int(len(results) * 100 / total + 0.5)
			logger.info("Fetched %d/%d pages (%d errors in batch)", len(results), total, resp.error_count)
			if on_progress:
				on_progress(progress)
		return results


def summarize(results: Iterable[PageMetaRecord]) -> Dict[str, int]:
	counts = {"success": 0, "error": 0}
	for r in results:
		counts[r.status] += 1
	return counts


def filter_by_path(results: Iterable[PageMetaRecord], path: Optional[str]) -> List[PageMetaRecord]:
	"""Results whose URL path starts with path; everything when path is empty."""
	if not path:
		return list(results)
	return [r for r in results if path_matches(r.url, path)]


def social_tag_counts(record: PageMetaRecord) -> Tuple[int, int]:
	"""Populated (Open Graph, Twitter) fields of a record."""
	og = [record.og_title, record.og_description, record.og_image, record.og_url, record.og_type]
	twitter = [record.twitter_card, record.twitter_title, record.twitter_description, record.twitter_image]
	return sum(1 for v in og if v), sum(1 for v in twitter if v)
