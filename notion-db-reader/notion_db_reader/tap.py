"""Singer Tap entrypoint for a Notion database.

This module defines the TapNotionDatabase class, the entrypoint the Singer SDK
uses to run the tap and the object NotionResource builds to fetch content. It
declares:

- The tap name and configuration schema (settings users can provide).
- The list of streams which implement the Notion API endpoints.

Newcomers: Start here to see what configuration is supported and which streams
are exposed. See ARCHITECTURE.md in the repository for a walkthrough of how the
pieces fit together.
"""

from __future__ import annotations

import sys

from singer_sdk import Tap
from singer_sdk import typing as th  # JSON schema typing helpers

from . import streams

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override


class TapNotionDatabase(Tap):
    """Singer Tap for one Notion database.

    Configuration is defined in `config_jsonschema` and includes:
    - integration_token (required): Notion integration token used for Bearer auth.
    - database_id (required): The database whose pages are read.
    - filter_object (optional): Query filter passed verbatim to the database query.
    - notion_version, user_agent (optional): Header tweaks.

    Stream relationships:
    - DatabasePagesStream emits page contexts consumed by PageTextStream.
    """

    name = "notion-db-reader"

    config_jsonschema = th.PropertiesList(
        th.Property(
            "integration_token",
            th.StringType(nullable=False),
            required=True,
            secret=True,  # Integration token from Notion
            title="Integration Token",
            description="The Notion integration token (starts with 'secret_' or 'ntn_').",
        ),
        th.Property(
            "database_id",
            th.StringType(nullable=False),
            required=True,
            title="Database ID",
            description="ID of the Notion database to read.",
        ),
        th.Property(
            "filter_object",
            th.ObjectType(),
            description=(
                "Optional database query filter, sent verbatim as the 'filter' "
                "field of the query body. Omitted when empty."
            ),
        ),
        th.Property(
            "notion_version",
            th.StringType(nullable=True),
            title="Notion API Version",
            description="Override the Notion-Version header (default '2022-06-28').",
        ),
        th.Property(
            "user_agent",
            th.StringType(nullable=True),
            description=(
                "A custom User-Agent header to send with each request. Default is "
                "'<tap_name>/<tap_version>'"
            ),
        ),
    ).to_dict()

    @override
    def discover_streams(self) -> list[streams.NotionStream]:
        """Instantiate and return the list of available streams.

        - DatabasePagesStream: Pages of the configured database
          (POST /v1/databases/{database_id}/query).
        - PageTextStream: Child of DatabasePagesStream, one flattened text
          record per page (GET /v1/blocks/{block_id}/children, recursively).
        """
        return [
            streams.DatabasePagesStream(self),
            streams.PageTextStream(self),
        ]


if __name__ == "__main__":
    TapNotionDatabase.cli()
