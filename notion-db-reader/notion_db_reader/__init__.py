"""notion_db_reader package: a Notion database flattened into plain text.

Contents:
- tap.py: Tap entrypoint (configuration and stream discovery).
- client.py: NotionStream base class (auth, headers, pagination, parsing).
- streams.py: Database query and block-tree text streams.
- resource.py: NotionResource, the byte-stream view of a whole database.
- exceptions.py: NotionResourceError.

Read ARCHITECTURE.md in the repo root for a step-by-step explanation of how
these pieces fit together.
"""
