"""Readable byte-stream view of a Notion database.

NotionResource drives the tap's streams directly instead of running a Singer
sync. It queries every page of the database, flattens each page's block tree
into indented text, and keeps the result in memory as a single byte stream:

    resource = NotionResource(integration_token="secret_...", database_id="...")
    data = resource.get_input_stream().read()

Everything is fetched during construction. Any failure aborts the load and is
raised as NotionResourceError; no partial content is kept.
"""

from __future__ import annotations

import io
import locale
import typing as t

from .exceptions import NotionResourceError
from .tap import TapNotionDatabase


class NotionResource:
    """The flattened text of a Notion database, exposed as a byte stream."""

    def __init__(
        self,
        integration_token: str | None,
        database_id: str | None,
        filter_object: t.Mapping[str, t.Any] | None = None,
        *,
        encoding: str | None = None,
    ) -> None:
        """Fetch and flatten the database.

        Args:
            integration_token: Notion integration token used for Bearer auth.
            database_id: ID of the database to read.
            filter_object: Optional query filter, sent verbatim when non-empty.
            encoding: Text encoding of the byte stream. Defaults to the
                platform's preferred encoding.

        Raises:
            ValueError: If the token or database id is missing. Raised before
                any request is made.
            NotionResourceError: If any request or response fails.
        """
        if not integration_token:
            raise ValueError("Integration token must not be empty")
        if not database_id:
            raise ValueError("Database ID must not be empty")

        self.database_id = database_id
        self.encoding = encoding or locale.getpreferredencoding(False)
        self._tap = TapNotionDatabase(
            config={
                "integration_token": integration_token,
                "database_id": database_id,
                "filter_object": dict(filter_object or {}),
            },
            parse_env_config=False,
            validate_config=True,
        )

        self._content = self._load_content()
        # Characters the encoding cannot represent become replacement marks.
        self._input_stream = io.BytesIO(self._content.encode(self.encoding, errors="replace"))

    @classmethod
    def from_config(cls, config: t.Mapping[str, t.Any]) -> NotionResource:
        """Build a resource from a mapping with the tap's config keys.

        Recognized keys are `integration_token`, `database_id` and
        `filter_object`; the first two are required.
        """
        return cls(
            config.get("integration_token"),
            config.get("database_id"),
            config.get("filter_object"),
        )

    @staticmethod
    def builder() -> NotionResourceBuilder:
        """Return an empty NotionResourceBuilder."""
        return NotionResourceBuilder()

    @property
    def content(self) -> str:
        """The flattened text, before encoding."""
        return self._content

    def get_input_stream(self) -> io.BytesIO:
        """Return the single-pass byte stream of the flattened text."""
        return self._input_stream

    def _load_content(self) -> str:
        pages_stream = self._tap.streams["database_pages"]
        text_stream = self._tap.streams["page_text"]

        try:
            pages = list(pages_stream.get_records(None))
        except Exception as ex:
            msg = f"Failed to retrieve pages of Notion database {self.database_id}"
            raise NotionResourceError(msg) from ex

        self._tap.logger.info(
            "Notion database %s returned %d pages", self.database_id, len(pages)
        )

        parts = []
        for index, page in enumerate(pages):
            page_id = None
            try:
                page_id = page["id"]
                self._tap.logger.info("Flattening page %s", page_id)
                parts.append(text_stream.flatten(page_id))
            except Exception as ex:
                page_ref = page_id or f"#{index}"
                msg = f"Failed to load blocks of Notion page {page_ref}"
                raise NotionResourceError(msg) from ex
            parts.append("\n")

        return "".join(parts)


class NotionResourceBuilder:
    """Fluent configuration for NotionResource."""

    def __init__(self) -> None:
        self._integration_token: str | None = None
        self._database_id: str | None = None
        self._filter_object: dict[str, t.Any] = {}
        self._encoding: str | None = None

    def integration_token(self, token: str) -> NotionResourceBuilder:
        """Set the Notion integration token (required)."""
        self._integration_token = token
        return self

    def database_id(self, database_id: str) -> NotionResourceBuilder:
        """Set the ID of the database to read (required)."""
        self._database_id = database_id
        return self

    def filter_object(self, filter_object: t.Mapping[str, t.Any]) -> NotionResourceBuilder:
        """Set the query filter; an empty mapping sends no filter."""
        self._filter_object = dict(filter_object)
        return self

    def encoding(self, encoding: str) -> NotionResourceBuilder:
        """Set the text encoding of the byte stream."""
        self._encoding = encoding
        return self

    def build(self) -> NotionResource:
        """Validate the configuration and load the database."""
        return NotionResource(
            self._integration_token,
            self._database_id,
            self._filter_object,
            encoding=self._encoding,
        )
