"""Pre-computed paginated schema pages.

list_tools is answered many times from one immutable catalog, so every page
is serialized once and then served by reference.

Usage:
    pages = SchemaPagesHolder(build_schema)

    def handle_list_tools(cursor: int) -> bytes:
        return pages.get().get_page(cursor)
"""

import threading
from typing import Callable, Optional

from loguru import logger

from ..schema.models import Schema
from .compact import encode_compact_bytes
from .paginated import encode_page_bytes

_EMPTY_PAGE = b""


class CachedSchemaPages:
    """
    Serialized pages for every cursor of a catalog.

    Holds max(tool_count, 1) pages, so an empty catalog still has its single
    empty-tools page at cursor 0. Each page is byte-identical to
    encode_page_bytes(schema, cursor). The compact document is serialized
    alongside for programs that serve the whole catalog at once.
    """

    def __init__(self, schema: Schema, pages: tuple[bytes, ...], compact: bytes):
        self._schema = schema
        self._pages = pages
        self._compact = compact

    @classmethod
    def from_schema(cls, schema: Schema) -> "CachedSchemaPages":
        num_pages = max(len(schema.tools), 1)
        pages = tuple(encode_page_bytes(schema, cursor) for cursor in range(num_pages))
        compact = encode_compact_bytes(schema)
        logger.debug(
            f"Cached {num_pages} schema pages for '{schema.name}' "
            f"({sum(len(page) for page in pages)} bytes total, compact {len(compact)} bytes)"
        )
        return cls(schema, pages, compact)

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def compact(self) -> bytes:
        """The whole catalog in the compact format."""
        return self._compact

    def get_page(self, cursor: int) -> bytes:
        """
        Return the cached page for a cursor.

        Out-of-range cursors return an empty buffer; callers cannot tell this
        apart from a page with no tool (see encoding.paginated).
        """
        if 0 <= cursor < len(self._pages):
            return self._pages[cursor]
        return _EMPTY_PAGE

    @property
    def num_pages(self) -> int:
        return len(self._pages)

    def __len__(self) -> int:
        return len(self._pages)


class SchemaPagesHolder:
    """
    Single-assignment, lazily initialized page cache.

    The factory runs at most once. Concurrent first callers block on the lock
    until construction finishes; readers after that take no lock. If the
    factory raises, the holder stays empty and the next get() retries.
    """

    def __init__(self, schema_factory: Callable[[], Schema]):
        self._schema_factory = schema_factory
        self._pages: Optional[CachedSchemaPages] = None
        self._lock = threading.Lock()

    def get(self) -> CachedSchemaPages:
        pages = self._pages
        if pages is None:
            with self._lock:
                if self._pages is None:
                    self._pages = CachedSchemaPages.from_schema(self._schema_factory())
                pages = self._pages
        return pages

    @property
    def is_initialized(self) -> bool:
        return self._pages is not None
