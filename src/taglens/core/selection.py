# TagLens — Selection of URLs slated for metadata fetching
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import logging
from typing import Iterable, List, Optional, Set

from ..schemas import SitemapEntry


logger = logging.getLogger(__name__)


def _locs(urls: Iterable[SitemapEntry]) -> List[str]:
	return [u.loc for u in urls]


class SelectionTracker:
	"""Set of selected URL strings, kept in step with the tree's limited set.

	Group toggles are all-or-nothing. Whenever the limited set changes, the
	selection is replaced by it and earlier manual toggles are discarded.
	"""

	def __init__(self) -> None:
		self._selected: Set[str] = set()
		self._limited_key: Optional[str] = None

	def __contains__(self, loc: object) -> bool:
		return loc in self._selected

	def __len__(self) -> int:
		return len(self._selected)

	def urls(self) -> List[str]:
		return sorted(self._selected)

	def reset(self) -> None:
		"""Forget everything; used when a new sitemap is resolved."""
		self._selected = set()
		self._limited_key = None

	def toggle_set(self, urls: Iterable[SitemapEntry]) -> None:
		"""Deselect the group if all of it is selected, otherwise select all of it."""
		locs = _locs(urls)
		if all(loc in self._selected for loc in locs):
			self._selected.difference_update(locs)
		else:
			self._selected.update(locs)

	def select_all(self, urls: Iterable[SitemapEntry]) -> None:
		missing = [u for u in urls if u.loc not in self._selected]
		if missing:
			self.toggle_set(missing)

	def deselect_all(self, urls: Iterable[SitemapEntry]) -> None:
		present = [u for u in urls if u.loc in self._selected]
		if present:
			self.toggle_set(present)

	def reset_to_limited(self, limited_urls: Iterable[SitemapEntry]) -> None:
		locs = _locs(limited_urls)
		self._selected = set(locs)
		self._limited_key = ",".join(sorted(locs))

	def sync_limited(self, limited_urls: Iterable[SitemapEntry]) -> bool:
		"""Reset to limited_urls if its membership differs from the last sync. Returns True on reset."""
		limited = list(limited_urls)
		key = ",".join(sorted(_locs(limited)))
		if not limited or key == self._limited_key:
			return False
		self.reset_to_limited(limited)
		logger.debug("Selection reset to %d limited URLs", len(self._selected))
		return True

	def toggle_all(self, limited_urls: Iterable[SitemapEntry]) -> None:
		"""Clear when everything limited is selected, otherwise select exactly the limited set."""
		limited = _locs(limited_urls)
		if len(self._selected) == len(limited):
			self._selected = set()
		else:
			self._selected = set(limited)
