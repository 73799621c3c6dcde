"""Shared fixtures for the test suite."""

from __future__ import annotations

import typing as t

import pytest

from notion_db_reader.tap import TapNotionDatabase
from payloads import DATABASE_ID

SAMPLE_CONFIG = {
    "integration_token": "secret_test",
    "database_id": DATABASE_ID,
}


@pytest.fixture
def config() -> dict[str, t.Any]:
    return dict(SAMPLE_CONFIG)


@pytest.fixture
def tap(config) -> TapNotionDatabase:
    return TapNotionDatabase(config=config, parse_env_config=False)
