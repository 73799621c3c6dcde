"""Tests for tap configuration and stream discovery."""

from __future__ import annotations

import pytest
from singer_sdk.exceptions import ConfigValidationError

from notion_db_reader.streams import DatabasePagesStream, PageTextStream
from notion_db_reader.tap import TapNotionDatabase


def test_discovers_database_and_text_streams(tap):
    assert isinstance(tap.streams["database_pages"], DatabasePagesStream)
    assert isinstance(tap.streams["page_text"], PageTextStream)
    assert set(tap.streams) == {"database_pages", "page_text"}


@pytest.mark.parametrize("missing", ["integration_token", "database_id"])
def test_required_settings(config, missing):
    del config[missing]

    with pytest.raises(ConfigValidationError):
        TapNotionDatabase(config=config, parse_env_config=False)


def test_notion_version_and_user_agent_override(config):
    config["notion_version"] = "2025-09-03"
    config["user_agent"] = "ingest-bot/1.0"
    tap = TapNotionDatabase(config=config, parse_env_config=False)

    headers = tap.streams["database_pages"].http_headers

    assert headers == {"Notion-Version": "2025-09-03", "User-Agent": "ingest-bot/1.0"}


def test_default_headers(tap):
    assert tap.streams["page_text"].http_headers == {"Notion-Version": "2022-06-28"}


def test_single_attempt_per_request(tap):
    assert tap.streams["database_pages"].backoff_max_tries() == 1
    assert tap.streams["page_text"].backoff_max_tries() == 1


def test_query_url_uses_database_id(tap):
    assert tap.streams["database_pages"].get_url(None) == "https://api.notion.com/v1/databases/db-1/query"


def test_http_methods(tap):
    assert tap.streams["database_pages"].http_method == "POST"
    assert tap.streams["page_text"].http_method == "GET"
