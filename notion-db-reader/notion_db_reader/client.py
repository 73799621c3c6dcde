"""REST client handling and NotionStream base class.

This module defines the NotionStream class, a small specialization of the
Singer SDK's RESTStream tailored to the Notion API. It centralizes the
common behaviors for every stream of this package:

- Base URL and HTTP headers (including Notion-Version and optional User-Agent).
- Authentication using a Notion integration token (Bearer auth).
- Default pagination and record extraction using the standard Notion envelope
  shape: `{ "results": [...], "next_cursor": "..." }`.
- Query parameter handling for GET endpoints, with page_size and start_cursor.
- A single attempt per request: failures are never retried.

It also provides HasMorePaginator, the cursor paginator used by endpoints
that report an explicit `has_more` flag (database queries).

Downstream stream classes in `streams.py` inherit from NotionStream and only
provide endpoint-specific details like `path`, `http_method`, schema, and any
special payload or traversal logic.
"""

from __future__ import annotations

import decimal
import sys
import typing as t

from singer_sdk import metrics
from singer_sdk.authenticators import BearerTokenAuthenticator
from singer_sdk.exceptions import FatalAPIError
from singer_sdk.helpers.jsonpath import extract_jsonpath
from singer_sdk.pagination import BaseAPIPaginator
from singer_sdk.streams import RESTStream

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

if t.TYPE_CHECKING:
    import requests
    from singer_sdk.helpers.types import Context


NOTION_API_URL = "https://api.notion.com/v1"
DEFAULT_NOTION_VERSION = "2022-06-28"
# Largest page size accepted by Notion list and query endpoints.
PAGE_SIZE = 100


class HasMorePaginator(BaseAPIPaginator[t.Optional[str]]):
    """Cursor paginator driven by Notion's `has_more` flag.

    Pagination ends as soon as a response reports `has_more: false`, even
    when that response still carries a `next_cursor` value.
    """

    def __init__(self) -> None:
        super().__init__(None)

    @override
    def has_more(self, response: requests.Response) -> bool:
        """Return the `has_more` flag of the response.

        A response without the flag is malformed and raises ``KeyError``.
        """
        return bool(response.json()["has_more"])

    @override
    def get_next(self, response: requests.Response) -> str | None:
        """Return the cursor to send as `start_cursor` on the next request."""
        return response.json().get("next_cursor")


class NotionStream(RESTStream):
    """Base stream for the Notion API.

    Implements Notion-specific defaults for base URL, pagination, and headers.
    """

    # Most list endpoints return an envelope with `results` and `next_cursor`.
    records_jsonpath = "$.results[*]"
    next_page_token_jsonpath = "$.next_cursor"  # noqa: S105

    @override
    @property
    def url_base(self) -> str:
        """Return the Notion API base URL."""
        return NOTION_API_URL

    @override
    @property
    def authenticator(self) -> BearerTokenAuthenticator:
        """Return a new authenticator object using the Notion integration token."""
        return BearerTokenAuthenticator(token=self.config.get("integration_token", ""))

    @property
    @override
    def http_headers(self) -> dict:
        """Return the HTTP headers including Notion-Version and optional UA."""
        headers: dict[str, str] = {}
        headers["Notion-Version"] = self.config.get("notion_version") or DEFAULT_NOTION_VERSION
        user_agent = self.config.get("user_agent")
        if user_agent:
            headers["User-Agent"] = user_agent
        return headers

    @override
    def backoff_max_tries(self) -> int:
        """Attempt every request exactly once.

        Transport errors and retriable status codes (429, 5xx) surface to the
        caller on the first failure.
        """
        return 1

    @override
    def get_url_params(
        self,
        context: Context | None,
        next_page_token: t.Any | None,
    ) -> dict[str, t.Any]:
        """Return URL parameters for Notion list endpoints.

        For GET requests the cursor and page size travel in the query string:
           - First request: ?page_size=100
           - Subsequent requests: ?page_size=100&start_cursor=abc123
        POST endpoints (database queries) expect both in the JSON body
        instead, so no URL parameters are returned for them.

        Args:
            context: The stream context.
            next_page_token: The next cursor value from the previous response, or None
                for the first request.

        Returns:
            A dictionary of URL query parameters.
        """
        params: dict[str, t.Any] = {}
        if self.http_method.upper() != "POST":
            if next_page_token:
                params["start_cursor"] = next_page_token
            params["page_size"] = PAGE_SIZE
        return params

    @override
    def request_records(self, context: Context | None) -> t.Iterable[dict]:
        """Request records from the endpoint until the paginator is finished.

        Unlike the SDK default, a response without results does not end
        pagination: Notion may return an empty page while a cursor is still
        pending, and only the paginator decides when the listing is complete.

        Args:
            context: Stream partition or context dictionary.

        Yields:
            Each record from every page of the listing.
        """
        paginator = self.get_new_paginator()
        decorated_request = self.request_decorator(self._request)

        with metrics.http_request_counter(self.name, self.path) as request_counter:
            request_counter.context = context

            while not paginator.finished:
                prepared_request = self.prepare_request(
                    context,
                    next_page_token=paginator.current_value,
                )
                response = decorated_request(prepared_request, context)
                request_counter.increment()
                self.update_sync_costs(prepared_request, response, context)
                yield from self.parse_response(response)

                paginator.advance(response)

    @override
    def parse_response(self, response: requests.Response) -> t.Iterable[dict]:
        """Parse the response and return an iterator of result records.

        Example:
            API response: {"results": [{"id": "1"}, {"id": "2"}], "next_cursor": "abc"}
            This method yields: {"id": "1"}, then {"id": "2"}

        Args:
            response: The HTTP ``requests.Response`` object.

        Yields:
            Each record from the source.

        Raises:
            FatalAPIError: If the body has no `results` array.
        """
        body = response.json(parse_float=decimal.Decimal)
        if not isinstance(body, dict) or "results" not in body:
            msg = f"Malformed Notion response from {response.url}: missing 'results'"
            raise FatalAPIError(msg)
        yield from extract_jsonpath(self.records_jsonpath, input=body)
