"""Tests for the MeiliSearch index client."""

from __future__ import annotations

import httpx
import pytest
from records import FakeMeili

from searchable.adapters.meilisearch.index import MeiliSearchIndex
from searchable.config.settings import MeiliSearchSettings
from searchable.exceptions import SearchIndexError


def make_index(meili: FakeMeili, **kwargs: object) -> MeiliSearchIndex:
    client = httpx.Client(base_url="http://meili.test", transport=httpx.MockTransport(meili.handler))
    return MeiliSearchIndex("docs", client=client, **kwargs)  # type: ignore[arg-type]


# ── Properties ───────────────────────────────────────────────────────────────


class TestMeiliSearchProperties:
    def test_name(self, meili_index: MeiliSearchIndex) -> None:
        assert meili_index.name == "meilisearch"

    def test_defaults(self) -> None:
        index = MeiliSearchIndex("docs")
        assert index.uid == "docs"
        assert index._base_url == "http://localhost:7700"
        assert index._max_hits == 1000
        index.close()

    def test_api_key_header(self) -> None:
        index = MeiliSearchIndex("docs", base_url="http://meili.test/", api_key="secret")
        assert index._client.headers["Authorization"] == "Bearer secret"
        assert index._base_url == "http://meili.test"
        index.close()

    def test_from_settings(self) -> None:
        settings = MeiliSearchSettings(base_url="http://meili.test", max_hits=50, wait_for_tasks=False)
        index = MeiliSearchIndex.from_settings("docs", settings)
        assert index._max_hits == 50
        assert index._wait_for_tasks is False
        index.close()


# ── Payload ──────────────────────────────────────────────────────────────────


class TestMeiliSearchPayload:
    def test_minimal(self, meili_index: MeiliSearchIndex) -> None:
        assert meili_index.build_payload("lamp", {"limit": None}) == {"q": "lamp", "limit": 1000}

    def test_filters_and_sort(self, meili_index: MeiliSearchIndex) -> None:
        payload = meili_index.build_payload(
            "lamp",
            {
                "where": [("color", 'red "ish"'), ("in_stock", False), ("price", 9.5)],
                "where_in": [("size", [1, 2])],
                "sort": [("price", "desc")],
                "limit": 3,
                "showRankingScore": True,
            },
        )
        assert payload == {
            "q": "lamp",
            "limit": 3,
            "showRankingScore": True,
            "filter": ['color = "red \\"ish\\""', "in_stock = false", "price = 9.5", "size IN [1, 2]"],
            "sort": ["price:desc"],
        }


# ── Search ───────────────────────────────────────────────────────────────────


class TestMeiliSearchSearch:
    def test_search_returns_results(self, meili_index: MeiliSearchIndex, meili: FakeMeili) -> None:
        results = meili_index.search("lamp", {"limit": 10})
        assert [d["id"] for d in results.documents] == [3, 1]
        assert meili.last_search == {"q": "lamp", "limit": 10}

    def test_search_http_error(self, meili: FakeMeili) -> None:
        meili.search_status_code = 400
        with pytest.raises(SearchIndexError, match="MeiliSearch query failed"):
            make_index(meili).search("lamp", {})

    def test_transport_error(self) -> None:
        def fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = httpx.Client(base_url="http://meili.test", transport=httpx.MockTransport(fail))
        index = MeiliSearchIndex("docs", client=client)
        with pytest.raises(SearchIndexError, match="refused"):
            index.search("lamp", {})


# ── Settings tasks ───────────────────────────────────────────────────────────


class TestMeiliSearchSettings:
    def test_update_waits_for_task(self, meili: FakeMeili) -> None:
        make_index(meili).update_searchable_attributes(["title"])
        assert [(m, p) for m, p, _ in meili.requests] == [
            ("PUT", "/indexes/docs/settings/searchable-attributes"),
            ("GET", "/tasks/1"),
        ]
        assert meili.searchable_attributes == ["title"]

    def test_reset(self, meili: FakeMeili) -> None:
        meili.searchable_attributes = ["title"]
        make_index(meili).reset_searchable_attributes()
        assert meili.requests[0][0] == "DELETE"
        assert meili.searchable_attributes == ["*"]

    def test_no_wait(self, meili: FakeMeili) -> None:
        make_index(meili, wait_for_tasks=False).update_searchable_attributes(["title"])
        assert len(meili.requests) == 1

    def test_failed_task_raises(self, meili: FakeMeili) -> None:
        meili.task_status = "failed"
        with pytest.raises(SearchIndexError, match="failed"):
            make_index(meili).update_searchable_attributes(["title"])

    def test_task_timeout(self, meili: FakeMeili) -> None:
        meili.task_status = "processing"
        with pytest.raises(SearchIndexError, match="Timed out"):
            make_index(meili, task_timeout=0.0).update_searchable_attributes(["title"])
