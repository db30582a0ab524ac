import asyncio

import httpx
import pytest

from taglens.config import Settings
from taglens.core.errors import FetchError, RequestValidationError
from taglens.core.pipeline import analyze


SITEMAP = """<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
	<url><loc>https://example.com/a</loc></url>
	<url><loc>https://example.com/a/b</loc></url>
	<url><loc>https://example.com/c</loc></url>
</urlset>"""


def serve(request):
	if request.url.path == "/sitemap.xml":
		return httpx.Response(200, text=SITEMAP)
	if request.url.path == "/c":
		return httpx.Response(404)
	return httpx.Response(200, text=f"<html><head><title>{request.url.path}</title></head></html>")


def run(**kwargs):
	return asyncio.run(
		analyze("https://example.com/sitemap.xml", Settings(), transport=httpx.MockTransport(serve), **kwargs)
	)


def test_analyze_builds_tree_and_selects_limited_set():
	res = run(max_children_per_parent=20, fetch=False)
	assert list(res.tree.children) == ["a", "c"]
	assert list(res.tree.children["a"].children) == ["b"]
	assert res.stats.total_original_urls == 3
	assert res.selection.urls() == ["https://example.com/a", "https://example.com/a/b", "https://example.com/c"]
	assert res.results == []


def test_analyze_fetches_selection():
	progress = []
	res = run(on_progress=progress.append)
	assert [r.url for r in res.results] == ["https://example.com/a", "https://example.com/a/b", "https://example.com/c"]
	assert [r.status for r in res.results] == ["success", "success", "error"]
	assert res.results[0].title == "/a"
	assert progress == [100]


def test_analyze_respects_limit():
	res = run(max_children_per_parent=0, fetch=False)
	a = res.tree.children["a"]
	assert not a.children["b"].is_included
	assert "https://example.com/a/b" not in res.selection
	assert res.stats.total_limited_urls == 2


def test_analyze_raises_when_sitemap_unavailable():
	with pytest.raises(FetchError):
		asyncio.run(analyze("https://example.com/nope.xml", Settings(), transport=httpx.MockTransport(lambda r: httpx.Response(503))))


def test_analyze_rejects_invalid_sitemap_url_before_fetching():
	requested = []

	def record(request):
		requested.append(request)
		return httpx.Response(200, text=SITEMAP)

	for bad in ("not a url", "", "ftp://example.com/sitemap.xml"):
		with pytest.raises(RequestValidationError):
			asyncio.run(analyze(bad, Settings(), transport=httpx.MockTransport(record)))
	assert requested == []
