# TagLens — Extraction: social-sharing metadata from page HTML
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

from typing import List, Optional, Sequence, Tuple, Union
from urllib.parse import urljoin
from bs4 import BeautifulSoup

from ..schemas import MetaTag, PageMetaRecord


PARSER_CANDIDATES = ["lxml", "html.parser"]

# tried in order before /favicon.ico
FAVICON_RELS = ("icon", "shortcut icon", "apple-touch-icon")

# (attribute, value) pairs; the first non-empty content wins
DESCRIPTION = (("name", "description"), ("property", "og:description"))


def parse_html(content: Union[bytes, str]) -> BeautifulSoup:
	"""Parse HTML using lxml if available, else builtin parser."""
	for parser in PARSER_CANDIDATES:
		try:
			return BeautifulSoup(content, parser)
		except Exception:
			continue
	return BeautifulSoup(content, "html.parser")


def get_meta(soup: BeautifulSoup, selectors: Sequence[Tuple[str, str]]) -> str:
	for attr, value in selectors:
		el = soup.find("meta", attrs={attr: value})
		content = el.get("content", "") if el else ""
		if content:
			return content
	return ""


def _rel(el) -> str:
	rel = el.get("rel") or []
	if isinstance(rel, str):
		rel = rel.split()
	return " ".join(rel).lower()


def find_favicon(soup: BeautifulSoup, url: str) -> str:
	links = soup.find_all("link", href=True)
	for wanted in FAVICON_RELS:
		for link in links:
			if _rel(link) == wanted and link["href"].strip():
				return urljoin(url, link["href"].strip())
	try:
		return urljoin(url, "/favicon.ico")
	except ValueError:
		return ""


def find_canonical(soup: BeautifulSoup) -> Optional[str]:
	link = soup.find("link", rel=lambda v: v and "canonical" in v)
	if link:
		href = (link.get("href") or "").strip()
		return href or None
	return None


def collect_meta_tags(soup: BeautifulSoup) -> List[MetaTag]:
	"""Every <meta> with a name, property, or http-equiv and non-empty content, in document order."""
	tags: List[MetaTag] = []
	for el in soup.find_all("meta"):
		name = el.get("name") or el.get("property") or el.get("http-equiv")
		content = el.get("content") or ""
		if name and content:
			tags.append(MetaTag(name=name, content=content, property=el.get("property")))
	return tags


def extract_meta(html: Union[bytes, str], url: str) -> PageMetaRecord:
	soup = parse_html(html)
	title_el = soup.find("title")
	return PageMetaRecord(
		url=url,
		title=title_el.get_text(strip=True) if title_el else "",
		description=get_meta(soup, DESCRIPTION),
		canonical=find_canonical(soup) or url,
		og_title=get_meta(soup, [("property", "og:title")]),
		og_description=get_meta(soup, [("property", "og:description")]),
		og_image=get_meta(soup, [("property", "og:image")]),
		og_url=get_meta(soup, [("property", "og:url")]),
		og_type=get_meta(soup, [("property", "og:type")]),
		og_site_name=get_meta(soup, [("property", "og:site_name")]),
		twitter_card=get_meta(soup, [("name", "twitter:card")]),
		twitter_title=get_meta(soup, [("name", "twitter:title")]),
		twitter_description=get_meta(soup, [("name", "twitter:description")]),
		twitter_image=get_meta(soup, [("name", "twitter:image")]),
		twitter_site=get_meta(soup, [("name", "twitter:site")]),
		favicon=find_favicon(soup, url),
		all_meta_tags=collect_meta_tags(soup),
		status="success",
	)


def error_record(url: str, message: str) -> PageMetaRecord:
	return PageMetaRecord(url=url, status="error", error=message or "Unknown error")
