"""Stream classes implementing the Notion endpoints used by this package.

All streams inherit from `NotionStream` (see client.py) which handles base
URL, headers, authentication, and default pagination on Notion's standard
envelope.

Use this file to understand:
- How a database is enumerated (DatabasePagesStream) and how the caller's
  filter reaches the query body.
- How `page_id` context propagates from database pages to page text.
- How a page's block tree is walked and flattened into indented text lines
  (PageTextStream).
"""

from __future__ import annotations

import sys
import typing as t

from singer_sdk import typing as th  # JSON Schema typing helpers

from .client import PAGE_SIZE, HasMorePaginator, NotionStream

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

if t.TYPE_CHECKING:
    from singer_sdk.helpers.types import Context


INDENT = "\t"


def extract_rich_text(rich_text: t.Iterable[dict]) -> str:
    """Concatenate the text content of a block's rich-text spans.

    Spans without a `text` object (mentions, equations) contribute nothing.
    """
    return "".join(span["text"]["content"] for span in rich_text if "text" in span)


class DatabasePagesStream(NotionStream):
    """Pages of one Notion database (POST /v1/databases/{database_id}/query).

    - Endpoint: POST /v1/databases/{database_id}/query
    - Pagination: `start_cursor` in the JSON body, stopping on `has_more: false`.
    - Filtering: the configured `filter_object` is sent verbatim as `filter`,
      and omitted entirely when empty.
    - Keys: Primary key is `id`.

    Each page record emits `{"page_id": ...}` to child streams.
    """

    name = "database_pages"
    path = "/databases/{database_id}/query"
    http_method = "POST"
    primary_keys: t.ClassVar[list[str]] = ["id"]
    replication_key = None

    schema = th.PropertiesList(
        th.Property("object", th.StringType),
        th.Property("id", th.StringType, description="Page ID"),
        th.Property("url", th.StringType),
        th.Property("created_time", th.DateTimeType),
        th.Property("last_edited_time", th.DateTimeType),
        th.Property("archived", th.BooleanType),
        # Database columns; structure depends on the database schema
        th.Property("properties", th.ObjectType()),
        th.Property("parent", th.ObjectType()),
    ).to_dict()

    @override
    def get_new_paginator(self) -> HasMorePaginator:
        """Return a paginator that honours the query endpoint's `has_more` flag."""
        return HasMorePaginator()

    @override
    def prepare_request_payload(
            self,
            context: Context | None,
            next_page_token: t.Any | None,
    ) -> dict | None:
        """Compose the POST body for a database query.

        Notion expects cursor and page_size in the JSON body for POST endpoints.
        """
        payload: dict[str, t.Any] = {"page_size": PAGE_SIZE}

        if next_page_token:
            payload["start_cursor"] = next_page_token

        filter_object = self.config.get("filter_object")
        if filter_object:
            payload["filter"] = filter_object

        return payload

    @override
    def get_child_context(self, record: dict, context: Context | None) -> dict | None:
        """Propagate the page id to PageTextStream."""
        return {"page_id": record["id"]}


class PageTextStream(NotionStream):
    """Flattened text of each database page.

    Walks the page's block tree depth-first through
    GET /v1/blocks/{block_id}/children and emits one record per page holding
    the page's text.

    Every block whose type payload carries `rich_text` becomes one line,
    indented with one tab per nesting level. Blocks without `rich_text` are
    skipped together with their children.

    Unlike the database query, child listings are paginated for as long as
    `next_cursor` is set; `has_more` is not consulted.

    Parent stream: DatabasePagesStream (receives page_id through context)
    """

    name = "page_text"
    path = "/blocks/{block_id}/children"
    parent_stream_type = DatabasePagesStream
    primary_keys: t.ClassVar[list[str]] = ["page_id"]

    schema = th.PropertiesList(
        th.Property("page_id", th.StringType),
        th.Property("text", th.StringType, description="Flattened page content"),
    ).to_dict()

    @override
    def get_records(self, context: Context | None) -> t.Iterable[dict]:
        """Emit the flattened text for the page named by the parent context."""
        if not context or "page_id" not in context:
            return

        page_id = context["page_id"]
        self.logger.info("Flattening page %s", page_id)
        yield {"page_id": page_id, "text": self.flatten(page_id)}

    def flatten(self, block_id: str, depth: int = 0) -> str:
        """Return the text of a page or block and everything beneath it.

        Args:
            block_id: A page id for the top level, or a block id for nested levels.
            depth: Indentation level of the container's direct children.

        Returns:
            Newline-terminated lines in depth-first, pre-order block order.
        """
        return "".join(self.iter_lines(block_id, depth))

    def iter_lines(self, block_id: str, depth: int = 0) -> t.Iterator[str]:
        """Yield the indented text lines under `block_id`, recursing into children."""
        self.logger.debug("Listing children of %s at depth %d", block_id, depth)

        for block in self.request_records({"block_id": block_id}):
            block_content = block[block["type"]]
            if "rich_text" not in block_content:
                continue

            yield INDENT * depth + extract_rich_text(block_content["rich_text"]) + "\n"

            if block.get("has_children"):
                yield from self.iter_lines(block["id"], depth + 1)
