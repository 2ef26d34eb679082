"""Tests for the project search client and its pagination."""

import json

import httpx
import pytest

from services.errors import UpstreamFetchError
from services.project_search import ProjectSearchClient


def _hits(start: int, count: int, total: int) -> dict:
    return {
        "hits": {
            "total": {"value": total},
            "hits": [
                {"_source": {"uuid": f"p-{i}", "name": f"Project {i}", "tagline": None, "members": None}}
                for i in range(start, start + count)
            ],
        }
    }


def _paging_handler(total: int, fail_at: int | None = None, seen=None):
    def handle(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if seen is not None:
            seen.append(body)
        offset, size = body["from"], body["size"]
        if fail_at is not None and offset >= fail_at:
            return httpx.Response(500, json={"error": "down"})
        return httpx.Response(200, json=_hits(offset, max(0, min(size, total - offset)), total))
    return handle


def _client(handler, **kwargs) -> ProjectSearchClient:
    return ProjectSearchClient(transport=httpx.MockTransport(handler), **kwargs)


@pytest.mark.asyncio
async def test_search_single_page():
    seen = []
    client = _client(_paging_handler(total=42, seen=seen), hackathon_slug="demo-hack")

    projects, total = await client.search_projects(offset=20, size=10)

    assert total == 42
    assert [p.uuid for p in projects][:2] == ["p-20", "p-21"]
    assert projects[0].tagline == ""
    assert projects[0].members == []
    assert seen[0]["hackathon_slugs"] == ["demo-hack"]
    assert seen[0]["from"] == 20
    await client.aclose()


@pytest.mark.asyncio
async def test_fetch_all_pages_until_exhausted():
    seen = []
    client = _client(_paging_handler(total=230, seen=seen))

    projects = await client.fetch_all_projects(page_size=100)

    assert len(projects) == 230
    assert [body["from"] for body in seen] == [0, 100, 200]


@pytest.mark.asyncio
async def test_fetch_all_stops_on_exact_total():
    seen = []
    client = _client(_paging_handler(total=200, seen=seen))
    projects = await client.fetch_all_projects(page_size=100)
    assert len(projects) == 200
    assert len(seen) == 2


@pytest.mark.asyncio
async def test_fetch_all_caps_at_max_projects():
    client = _client(_paging_handler(total=1000))
    projects = await client.fetch_all_projects(page_size=100, max_projects=250)
    assert len(projects) == 250
    assert projects[-1].uuid == "p-249"


@pytest.mark.asyncio
async def test_failing_page_keeps_partial_results():
    client = _client(_paging_handler(total=300, fail_at=200))
    with pytest.raises(UpstreamFetchError, match="500") as exc_info:
        await client.fetch_all_projects(page_size=100)
    assert len(exc_info.value.partial) == 200


@pytest.mark.asyncio
async def test_unexpected_payload():
    client = _client(lambda request: httpx.Response(200, json={"results": []}))
    with pytest.raises(UpstreamFetchError, match="Unexpected"):
        await client.search_projects()


@pytest.mark.asyncio
async def test_network_failure():
    def boom(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client = _client(boom)
    with pytest.raises(UpstreamFetchError):
        await client.search_projects()


@pytest.mark.asyncio
async def test_null_nested_fields_accepted():
    page = _hits(0, 2, 2)
    page["hits"]["hits"][1]["_source"].update({
        "description": [{"title": "Problem", "subtitle": None, "content": "Gas fees", "hint": None}],
        "hashtags": [{"name": "defi", "verified": None}],
        "members": [{"username": "ana", "first_name": None}],
        "has_github_link": None,
    })
    client = _client(lambda request: httpx.Response(200, json=page))

    projects, total = await client.search_projects()

    assert [p.uuid for p in projects] == ["p-0", "p-1"]
    section = projects[1].description[0]
    assert section.subtitle == ""
    assert section.hint == ""
    assert projects[1].hashtags[0].verified is False
    assert projects[1].members[0].first_name == ""
    assert projects[1].has_github_link is False


@pytest.mark.asyncio
async def test_malformed_hit_skipped_not_page():
    page = _hits(0, 3, 3)
    del page["hits"]["hits"][1]["_source"]["uuid"]
    client = _client(lambda request: httpx.Response(200, json=page))

    projects, total = await client.search_projects()

    assert [p.uuid for p in projects] == ["p-0", "p-2"]
    assert total == 3


@pytest.mark.asyncio
async def test_short_page_from_skipped_hit_keeps_paging():
    def handle(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        page = _hits(body["from"], min(body["size"], 150 - body["from"]), 150)
        if body["from"] == 0:
            del page["hits"]["hits"][0]["_source"]["uuid"]
        return httpx.Response(200, json=page)

    projects = await _client(handle).fetch_all_projects(page_size=100)

    assert len(projects) == 149
    assert projects[-1].uuid == "p-149"
