import asyncio

import httpx
import pytest

from taglens.config import Settings
from taglens.core.errors import RequestValidationError
from taglens.core.fetch import (
	MetaFetchOrchestrator,
	fetch_meta,
	filter_by_path,
	process_url,
	social_tag_counts,
	summarize,
)
from taglens.core.extract import error_record
from taglens.core.session import make_page_client
from taglens.schemas import PageMetaRecord


def page(title):
	return f'<html><head><title>{title}</title><meta property="og:title" content="{title}"></head></html>'


class MockPages:
	"""Serves /page/<n>; paths in ``missing`` return 404, paths in ``slow`` hang."""

	def __init__(self, missing=(), slow=()):
		self.missing = set(missing)
		self.slow = set(slow)
		self.in_flight = 0
		self.max_in_flight = 0
		self.headers = []

	async def __call__(self, request):
		self.headers.append(request.headers)
		self.in_flight += 1
		self.max_in_flight = max(self.max_in_flight, self.in_flight)
		try:
			await asyncio.sleep(0.01)
			path = request.url.path
			if path in self.slow:
				await asyncio.sleep(5)
			if path in self.missing:
				return httpx.Response(404)
			return httpx.Response(200, text=page(path))
		finally:
			self.in_flight -= 1


def run(pages, fn):
	async def go():
		async with httpx.AsyncClient(transport=httpx.MockTransport(pages)) as client:
			return await fn(client)

	return asyncio.run(go())


def urls(n):
	return [f"https://example.com/page/{i}" for i in range(n)]


def test_process_url_success():
	rec = run(MockPages(), lambda c: process_url(c, "https://example.com/page/1"))
	assert rec.status == "success"
	assert rec.title == "/page/1"


def test_process_url_404_becomes_error_record():
	rec = run(MockPages(missing={"/gone"}), lambda c: process_url(c, "https://example.com/gone"))
	assert rec.status == "error"
	assert "404" in rec.error
	assert rec.title == rec.description == rec.og_image == rec.favicon == ""


def test_process_url_timeout_becomes_error_record():
	rec = run(MockPages(slow={"/slow"}), lambda c: process_url(c, "https://example.com/slow", timeout=0.05))
	assert rec.status == "error"
	assert "timed out" in rec.error
	assert rec.canonical == ""


def test_process_url_network_error():
	def refuse(request):
		raise httpx.ConnectError("connection refused", request=request)

	async def go():
		async with httpx.AsyncClient(transport=httpx.MockTransport(refuse)) as client:
			return await process_url(client, "https://example.com/x")

	rec = asyncio.run(go())
	assert rec.status == "error"
	assert "connection refused" in rec.error


def test_fetch_meta_truncates_and_bounds_concurrency():
	pages = MockPages(missing={"/page/3"})
	resp = run(pages, lambda c: fetch_meta(c, urls(60)))
	assert resp.processed_count == 50
	assert resp.error_count == 1
	assert [r.url for r in resp.results] == urls(50)
	assert pages.max_in_flight <= 5
	body = resp.to_dict()
	assert body["processedCount"] == 50
	assert body["errorCount"] == 1


def test_fetch_meta_rejects_bad_input():
	for bad in ([], None, "https://example.com"):
		with pytest.raises(RequestValidationError):
			run(MockPages(), lambda c, bad=bad: fetch_meta(c, bad))


def test_fetch_meta_bad_entries_become_error_records():
	pages = MockPages()
	resp = run(pages, lambda c: fetch_meta(c, ["https://example.com/page/1", "", "not a url", 42]))
	assert resp.processed_count == 4
	assert resp.error_count == 3
	assert [r.url for r in resp.results] == ["https://example.com/page/1", "", "not a url", "42"]
	assert [r.status for r in resp.results] == ["success", "error", "error", "error"]
	assert all(r.error for r in resp.results[1:])
	assert len(pages.headers) == 1


def test_orchestrator_keeps_going_past_empty_entry():
	results = run(MockPages(), lambda c: MetaFetchOrchestrator(c).fetch_all(["https://example.com/page/1", ""]))
	assert len(results) == 2
	assert results[0].status == "success"
	assert results[1].status == "error"
	assert results[1].url == ""


def test_orchestrator_batches_and_reports_progress():
	pages = MockPages(missing={"/page/11"})
	progress = []
	orch = lambda c: MetaFetchOrchestrator(c).fetch_all(urls(12), on_progress=progress.append)
	results = run(pages, orch)
	assert progress == [83, 100]
	assert progress == sorted(progress)
	assert [r.url for r in results] == urls(12)
	assert results[11].status == "error"
	assert pages.max_in_flight <= 5


def test_orchestrator_stops_between_batches():
	progress = []
	orch = lambda c: MetaFetchOrchestrator(c).fetch_all(urls(25), on_progress=progress.append, stop_flag=lambda: len(progress) >= 1)
	results = run(MockPages(), orch)
	assert len(results) == 10
	assert progress == [40]


def test_orchestrator_sends_page_headers():
	pages = MockPages()
	cfg = Settings()

	async def go():
		async with make_page_client(cfg, transport=httpx.MockTransport(pages)) as client:
			return await MetaFetchOrchestrator.from_settings(client, cfg).fetch_all(urls(1))

	asyncio.run(go())
	assert pages.headers[0]["user-agent"] == cfg.page_user_agent
	assert pages.headers[0]["accept-language"] == cfg.accept_language
	assert pages.headers[0]["accept"] == cfg.accept


def test_summaries_and_filters():
	records = [
		PageMetaRecord(url="https://example.com/", og_title="t", twitter_card="c", og_image="i"),
		PageMetaRecord(url="https://example.com/blog/a"),
		error_record("https://example.com/blog/b", "boom"),
	]
	assert summarize(records) == {"success": 2, "error": 1}
	assert [r.url for r in filter_by_path(records, "/blog")] == ["https://example.com/blog/a", "https://example.com/blog/b"]
	assert [r.url for r in filter_by_path(records, "/")] == ["https://example.com/"]
	assert len(filter_by_path(records, None)) == 3
	assert social_tag_counts(records[0]) == (2, 1)


def test_orchestrator_progress_rounds_half_up():
	progress = []
	run(MockPages(), lambda c: MetaFetchOrchestrator(c).fetch_all(urls(80), on_progress=progress.append))
	assert progress[0] == 13
	assert progress[1] == 25
	assert progress[-1] == 100
	assert len(progress) == 8


def test_page_client_follows_redirects():
	def serve(request):
		if request.url.path == "/old":
			return httpx.Response(301, headers={"Location": "https://example.com/page/new"})
		return httpx.Response(200, text=page(request.url.path))

	async def go():
		async with make_page_client(Settings(), transport=httpx.MockTransport(serve)) as client:
			return await process_url(client, "https://example.com/old")

	rec = asyncio.run(go())
	assert rec.status == "success"
	assert rec.title == "/page/new"
	assert rec.url == "https://example.com/old"
