# TagLens — Error taxonomy
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

from typing import Optional


class TagLensError(Exception):
	"""Base class for every error raised by TagLens."""


class RequestValidationError(TagLensError):
	"""Missing or malformed input to a resolution or fetch request."""


class FetchError(TagLensError):
	"""A single sitemap or page could not be fetched or understood."""

	def __init__(self, message: str, url: str = "") -> None:
		super().__init__(message)
		self.url = url


class TransportError(FetchError):
	"""Network failure, timeout, or non-2xx response."""

	def __init__(self, message: str, url: str = "", status_code: Optional[int] = None) -> None:
		super().__init__(message, url=url)
		self.status_code = status_code


class ParseError(FetchError):
	"""Malformed XML or a document of unexpected shape."""
