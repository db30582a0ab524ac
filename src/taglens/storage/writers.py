# TagLens — Export writers (JSON, CSV)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import csv
import io
import json
import os
from typing import Iterable, List, Optional

from ..schemas import PageMetaRecord
from ..utils.io import write_text


CSV_COLUMNS = [
	("URL", "url"),
	("Title", "title"),
	("Description", "description"),
	("Canonical", "canonical"),
	("OG Title", "og_title"),
	("OG Description", "og_description"),
	("OG Image", "og_image"),
	("OG URL", "og_url"),
	("OG Type", "og_type"),
	("OG Site Name", "og_site_name"),
	("Twitter Card", "twitter_card"),
	("Twitter Title", "twitter_title"),
	("Twitter Description", "twitter_description"),
	("Twitter Image", "twitter_image"),
	("Twitter Site", "twitter_site"),
	("Status", "status"),
	("Error", "error"),
]

JSON_FILENAME = "meta-tags-export.json"
CSV_FILENAME = "meta-tags-export.csv"


def records_to_json(records: Iterable[PageMetaRecord]) -> str:
	return json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False)


def records_to_csv(records: Iterable[PageMetaRecord]) -> str:
	"""One row per record; values with a comma, quote, or newline are quoted."""
	buf = io.StringIO()
	writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
	writer.writerow([header for header, _ in CSV_COLUMNS])
	for r in records:
		writer.writerow([getattr(r, field) or "" for _, field in CSV_COLUMNS])
	return buf.getvalue()


class ExportWriters:
	"""Write exports under data_dir with fixed default file names."""

	def __init__(self, data_dir: str = "data") -> None:
		self.data_dir = data_dir

	def _path(self, path: Optional[str], default: str) -> str:
		return path or os.path.join(self.data_dir, default)

	def export_json(self, records: List[PageMetaRecord], path: Optional[str] = None) -> str:
		return write_text(self._path(path, JSON_FILENAME), records_to_json(records))

	def export_csv(self, records: List[PageMetaRecord], path: Optional[str] = None) -> str:
		return write_text(self._path(path, CSV_FILENAME), records_to_csv(records))
