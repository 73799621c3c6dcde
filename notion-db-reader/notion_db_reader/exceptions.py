"""Exceptions raised by notion_db_reader."""

from __future__ import annotations


class NotionResourceError(RuntimeError):
    """Loading a Notion database failed.

    The underlying transport, HTTP or decoding error is chained as
    ``__cause__``.
    """
