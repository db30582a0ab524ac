# TagLens — HTTP clients for sitemap and page fetches
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import asyncio
from typing import Optional

import httpx

from ..config import Settings
from .errors import TransportError


def make_sitemap_client(cfg: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
	"""Client for sitemap documents. No retries: a failed fetch is terminal."""
	return httpx.AsyncClient(
		headers={"User-Agent": cfg.sitemap_user_agent},
		timeout=httpx.Timeout(cfg.sitemap_timeout),
		follow_redirects=True,
		transport=transport,
	)


def make_page_client(cfg: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
	"""Client for HTML pages, sending browser-like Accept headers and following redirects."""
	return httpx.AsyncClient(
		headers={
			"User-Agent": cfg.page_user_agent,
			"Accept": cfg.accept,
			"Accept-Language": cfg.accept_language,
		},
		timeout=httpx.Timeout(cfg.page_timeout),
		follow_redirects=True,
		transport=transport,
	)


async def fetch_text(client: httpx.AsyncClient, url: str, timeout: float) -> str:
	"""GET url and return the body text.

	The whole request is bounded by ``timeout`` and cancelled when it expires.
	Every failure surfaces as TransportError.
	"""
	try:
		r = await asyncio.wait_for(client.get(url), timeout=timeout)
	except asyncio.TimeoutError:
		raise TransportError(f"Request timed out after {timeout:g}s", url=url) from None
	except (httpx.HTTPError, httpx.InvalidURL, ValueError, TypeError) as e:
		raise TransportError(str(e) or e.__class__.__name__, url=url) from e
	if not r.is_success:
		raise TransportError(f"HTTP {r.status_code}: {r.reason_phrase}", url=url, status_code=r.status_code)
	return r.text
