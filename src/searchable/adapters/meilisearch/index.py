"""MeiliSearch index: Search index client for delegated searches.

Communicates with MeiliSearch via its REST API using ``httpx``.

Usage::

    index = MeiliSearchIndex(
        "articles",
        base_url="http://localhost:7700",
        api_key="your-master-key",
    )
    Article.search_index = index
"""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING, Any

import httpx

from searchable.adapters.base.index import RawResults, SearchIndex
from searchable.exceptions import SearchIndexError

if TYPE_CHECKING:
    from searchable.config.settings import MeiliSearchSettings

logger = logging.getLogger(__name__)

_FINISHED_TASK_STATUSES = ("succeeded", "failed", "canceled")


class MeiliSearchIndex(SearchIndex):
    """Search index backed by one MeiliSearch index.

    Settings updates are asynchronous tasks in MeiliSearch; with
    ``wait_for_tasks`` enabled the client polls ``/tasks/{uid}`` until the
    task finishes so that the following search sees the new settings.

    Args:
        uid: MeiliSearch index UID.
        base_url: MeiliSearch instance URL, e.g. ``"http://localhost:7700"``.
        api_key: Master key or API key for authentication.
        timeout: HTTP request timeout in seconds.
        max_hits: Hit limit used when a search does not set one.
        wait_for_tasks: Block until settings tasks finish.
        task_poll_interval: Seconds between task status polls.
        task_timeout: Seconds to wait for a task before giving up.
        client: Preconfigured ``httpx.Client`` (its base URL must point at
            the instance). Mostly useful for tests.
    """

    def __init__(
        self,
        uid: str,
        base_url: str = "http://localhost:7700",
        api_key: str | None = None,
        timeout: float = 30.0,
        max_hits: int = 1000,
        wait_for_tasks: bool = True,
        task_poll_interval: float = 0.05,
        task_timeout: float = 5.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.uid = uid
        self._base_url = base_url.rstrip("/")
        self._max_hits = max_hits
        self._wait_for_tasks = wait_for_tasks
        self._task_poll_interval = task_poll_interval
        self._task_timeout = task_timeout

        if client is None:
            headers: dict[str, str] = {"Content-Type": "application/json"}
            if api_key:
                headers["Authorization"] = f"Bearer {api_key}"
            client = httpx.Client(
                base_url=self._base_url,
                timeout=httpx.Timeout(timeout),
                headers=headers,
            )
        self._client = client

    @classmethod
    def from_settings(cls, uid: str, settings: MeiliSearchSettings) -> MeiliSearchIndex:
        return cls(
            uid,
            base_url=settings.base_url,
            api_key=settings.api_key,
            timeout=settings.timeout,
            max_hits=settings.max_hits,
            wait_for_tasks=settings.wait_for_tasks,
            task_poll_interval=settings.task_poll_interval,
            task_timeout=settings.task_timeout,
        )

    @property
    def name(self) -> str:
        return "meilisearch"

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    # ── Settings ─────────────────────────────────────────────────────────

    def reset_searchable_attributes(self) -> None:
        self._update_setting("DELETE", "searchable-attributes")

    def update_searchable_attributes(self, attributes: list[str]) -> None:
        self._update_setting("PUT", "searchable-attributes", list(attributes))

    def _update_setting(self, method: str, setting: str, payload: Any = None) -> None:
        path = f"/indexes/{self.uid}/settings/{setting}"
        try:
            resp = self._client.request(method, path, json=payload)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise SearchIndexError(f"MeiliSearch settings update failed: {e}") from e

        task = resp.json()
        logger.debug("MeiliSearch %s %s enqueued task %s", method, path, task.get("taskUid"))
        if self._wait_for_tasks and "taskUid" in task:
            self._wait_for_task(task["taskUid"])

    def _wait_for_task(self, task_uid: int) -> None:
        deadline = time.monotonic() + self._task_timeout
        while True:
            try:
                resp = self._client.get(f"/tasks/{task_uid}")
                resp.raise_for_status()
            except httpx.HTTPError as e:
                raise SearchIndexError(f"Failed to fetch MeiliSearch task {task_uid}: {e}") from e

            task = resp.json()
            status = task.get("status")
            if status == "succeeded":
                return
            if status in _FINISHED_TASK_STATUSES:
                raise SearchIndexError(f"MeiliSearch task {task_uid} {status}: {task.get('error')}")
            if time.monotonic() >= deadline:
                raise SearchIndexError(f"Timed out waiting for MeiliSearch task {task_uid} (status: {status})")
            time.sleep(self._task_poll_interval)

    # ── Search ───────────────────────────────────────────────────────────

    def search(self, query: str, options: dict[str, Any]) -> RawResults:
        """Execute a search query against MeiliSearch.

        Uses the ``/indexes/{uid}/search`` endpoint.
        """
        payload = self.build_payload(query, options)

        try:
            resp = self._client.post(f"/indexes/{self.uid}/search", json=payload)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise SearchIndexError(f"MeiliSearch query failed: {e}") from e

        return RawResults(documents=resp.json().get("hits", []))

    def build_payload(self, query: str, options: dict[str, Any]) -> dict[str, Any]:
        """Translate backend-neutral options into a MeiliSearch search body."""
        options = dict(options)
        wheres = options.pop("where", None) or []
        where_ins = options.pop("where_in", None) or []
        sort = options.pop("sort", None) or []
        limit = options.pop("limit", None)

        payload: dict[str, Any] = {"q": query, "limit": limit or self._max_hits, **options}

        filters = [f"{field} = {_filter_value(value)}" for field, value in wheres]
        filters += [
            f"{field} IN [{', '.join(_filter_value(value) for value in values)}]"
            for field, values in where_ins
        ]
        if filters:
            payload["filter"] = filters
        if sort:
            payload["sort"] = [f"{field}:{direction}" for field, direction in sort]
        return payload


def _filter_value(value: Any) -> str:
    """Render a value as a MeiliSearch filter literal."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    return json.dumps(str(value))
