# TagLens — URL utilities: validation and path segments
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

from typing import List, Optional
from urllib.parse import urlparse, urljoin


def is_absolute_url(url: str) -> bool:
	"""True for URLs with both a scheme and a host."""
	try:
		p = urlparse(url)
	except (TypeError, ValueError):
		return False
	return bool(p.scheme) and bool(p.netloc)


def is_http_url(url: str) -> bool:
	try:
		p = urlparse(url)
	except (TypeError, ValueError):
		return False
	return p.scheme in ("http", "https") and bool(p.netloc)


def path_segments(url: str) -> Optional[List[str]]:
	"""Non-empty '/'-separated path components, or None when url is not absolute."""
	if not is_absolute_url(url):
		return None
	return [s for s in urlparse(url).path.split("/") if s]


def join_path(segments: List[str]) -> str:
	return "/" + "/".join(segments)


def path_matches(url: str, path: str) -> bool:
	"""Does url live under path? '/' matches only the site root."""
	try:
		p = urlparse(url).path
	except ValueError:
		return False
	if path == "/":
		return p in ("", "/")
	return p.startswith(path)


__all__ = [
	"is_absolute_url",
	"is_http_url",
	"path_segments",
	"join_path",
	"path_matches",
	"urljoin",
]
