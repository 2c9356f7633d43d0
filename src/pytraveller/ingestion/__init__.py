"""Ingestion layer.

Adapters that turn raw stream payloads into normalized domain objects.
"""

__all__: list[str] = []
