# TagLens — Transport-agnostic request handlers for sitemap parsing and meta fetching
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import logging
from typing import Any, List, Tuple

import httpx

from ..config import Settings
from ..schemas import FetchMetaResponse, ParseSitemapResponse
from ..utils.urls import is_http_url
from .errors import FetchError, RequestValidationError
from .fetch import fetch_meta
from .sitemap import SitemapResolver


logger = logging.getLogger(__name__)


def validate_sitemap_request(payload: Any) -> str:
	url = payload.get("url") if isinstance(payload, dict) else None
	if not url:
		raise RequestValidationError("Sitemap URL is required")
	if not isinstance(url, str) or not is_http_url(url.strip()):
		raise RequestValidationError("Invalid URL format")
	return url.strip()


def validate_fetch_request(payload: Any) -> List[str]:
	urls = payload.get("urls") if isinstance(payload, dict) else None
	if not isinstance(urls, list) or not urls:
		raise RequestValidationError("URLs array is required")
	return urls


async def handle_parse_sitemap(payload: Any, resolver: SitemapResolver) -> Tuple[int, ParseSitemapResponse]:
	"""{url} -> (status code, {urls, totalUrls} or {error, urls: [], totalUrls: 0})."""
	try:
		url = validate_sitemap_request(payload)
	except RequestValidationError as e:
		return 400, ParseSitemapResponse(error=str(e))
	try:
		entries = await resolver.resolve(url)
	except FetchError as e:
		logger.error("Error parsing sitemap %s: %s", url, e)
		return 500, ParseSitemapResponse(error=str(e) or "Failed to parse sitemap")
	return 200, ParseSitemapResponse(urls=entries, total_urls=len(entries))


async def handle_fetch_meta(payload: Any, client: httpx.AsyncClient, cfg: Settings) -> Tuple[int, FetchMetaResponse]:
	"""{urls} -> (status code, {results, processedCount, errorCount})."""
	try:
		urls = validate_fetch_request(payload)
		resp = await fetch_meta(
			client,
			urls,
			timeout=cfg.page_timeout,
			sub_batch_size=cfg.sub_batch_size,
			max_urls=cfg.max_urls_per_request,
		)
	except RequestValidationError as e:
		return 400, FetchMetaResponse(error=str(e))
	return 200, resp

