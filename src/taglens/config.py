# TagLens — Configuration via Pydantic BaseSettings
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
	"""Application settings with sane defaults.

	Environment variables are prefixed with TAGLENS_. CLI flags can override.
	"""

	model_config = SettingsConfigDict(env_prefix="TAGLENS_", env_file=".env", extra="ignore")

	sitemap_user_agent: str = Field(default="MetaTagsUtility/1.0")
	page_user_agent: str = Field(default="Mozilla/5.0 (compatible; MetaTagsUtility/1.0; +https://metatags.io)")
	accept: str = Field(default="text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8")
	accept_language: str = Field(default="en-US,en;q=0.5")
	sitemap_timeout: float = Field(default=30.0)
	page_timeout: float = Field(default=10.0)
	max_nested_sitemaps: int = Field(default=10)
	max_sitemap_depth: int = Field(default=3)
	max_children_per_parent: int = Field(default=3)
	batch_size: int = Field(default=10)
	sub_batch_size: int = Field(default=5)
	max_urls_per_request: int = Field(default=50)
	data_dir: str = Field(default="data")
	log_dir: str = Field(default="logs")
	log_level: str = Field(default="INFO")
