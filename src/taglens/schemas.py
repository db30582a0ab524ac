# TagLens — Records exchanged between resolver, fetcher, and exporters
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Record(BaseModel):
	"""Immutable record; serialized with camelCase keys."""

	model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

	def to_dict(self) -> dict:
		return self.model_dump(by_alias=True, exclude_none=True)


class SitemapEntry(_Record):
	loc: str
	lastmod: Optional[str] = None
	changefreq: Optional[str] = None
	priority: Optional[str] = None


class MetaTag(_Record):
	name: str
	content: str
	property: Optional[str] = None


class PageMetaRecord(_Record):
	"""Social-sharing metadata of one page. Failed fetches keep every field empty."""

	url: str
	title: str = ""
	description: str = ""
	canonical: str = ""
	og_title: str = ""
	og_description: str = ""
	og_image: str = ""
	og_url: str = ""
	og_type: str = ""
	og_site_name: str = ""
	twitter_card: str = ""
	twitter_title: str = ""
	twitter_description: str = ""
	twitter_image: str = ""
	twitter_site: str = ""
	favicon: str = ""
	all_meta_tags: List[MetaTag] = Field(default_factory=list)
	status: Literal["success", "error"] = "success"
	error: Optional[str] = None

	@property
	def ok(self) -> bool:
		return self.status == "success"


class ParseSitemapResponse(_Record):
	urls: List[SitemapEntry] = Field(default_factory=list)
	total_urls: int = 0
	error: Optional[str] = None


class FetchMetaResponse(_Record):
	results: List[PageMetaRecord] = Field(default_factory=list)
	processed_count: int = 0
	error_count: int = 0
	error: Optional[str] = None
