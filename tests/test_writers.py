import csv
import io
import json

from taglens.core.extract import error_record
from taglens.schemas import MetaTag, PageMetaRecord
from taglens.storage.writers import CSV_COLUMNS, ExportWriters, records_to_csv, records_to_json


RECORDS = [
	PageMetaRecord(
		url="https://example.com/a",
		title='Say "hi", friend',
		description="line one\nline two",
		og_title="OG",
		all_meta_tags=[MetaTag(name="og:title", content="OG", property="og:title")],
	),
	error_record("https://example.com/b", "HTTP 404: Not Found"),
]


def test_csv_header_and_escaping():
	text = records_to_csv(RECORDS)
	lines = text.split("\n")
	assert lines[0] == ",".join(h for h, _ in CSV_COLUMNS)
	assert '"Say ""hi"", friend"' in text
	assert '"line one\nline two"' in text
	rows = list(csv.reader(io.StringIO(text)))
	assert len(rows) == 3
	assert rows[1][0] == "https://example.com/a"
	assert rows[1][1] == 'Say "hi", friend'
	assert rows[1][-2:] == ["success", ""]
	assert rows[2][-2:] == ["error", "HTTP 404: Not Found"]


def test_json_is_verbatim_records():
	data = json.loads(records_to_json(RECORDS))
	assert data[0]["ogTitle"] == "OG"
	assert data[0]["allMetaTags"] == [{"name": "og:title", "content": "OG", "property": "og:title"}]
	assert "error" not in data[0]
	assert data[1]["error"] == "HTTP 404: Not Found"
	assert PageMetaRecord.model_validate(data[0]) == RECORDS[0]


def test_export_writers(tmp_path):
	writers = ExportWriters(data_dir=str(tmp_path / "out"))
	json_path = writers.export_json(RECORDS)
	assert json_path.endswith("meta-tags-export.json")
	assert len(json.loads(open(json_path, encoding="utf-8").read())) == 2
	csv_path = writers.export_csv(RECORDS, str(tmp_path / "custom.csv"))
	assert csv_path == str(tmp_path / "custom.csv")
	assert open(csv_path, encoding="utf-8").read().startswith("URL,Title")
