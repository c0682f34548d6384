"""Tool discovery over a transport.

Discovery calls the program's list_tools entry point, which answers with a
schema document as its return data. Paginated programs return one tool per
call and announce the next cursor; list_tools_full walks that chain.

The network side is a collaborator: anything implementing Transport.send
(simulate a call and capture its return data) can be plugged in.
"""

from typing import Optional, Protocol, Sequence

from loguru import logger

from ..config import Config
from ..discriminator import LIST_TOOLS_DISCRIMINATOR
from ..errors import McpSolError, NoReturnDataError, SchemaParseError, TransportError
from .call import CallAccount
from .decoder import ParsedSchema, parse_schema


class Transport(Protocol):
    """Synchronous simulate-and-capture-return-data boundary."""

    def send(self, target_id: str, payload: bytes, accounts: Sequence[CallAccount]) -> bytes:
        """Send a call payload and return the raw return data bytes."""


def list_tools_request(cursor: int = 0) -> bytes:
    """
    Build the list_tools payload for a page.

    Cursor 0 is the bare discriminator; later pages append the cursor as a
    single byte.

    Raises:
        ValueError: If cursor is outside 0..255
    """
    if not 0 <= cursor <= Config.MAX_CURSOR:
        raise ValueError(f"cursor must be 0-{Config.MAX_CURSOR}, got {cursor}")
    if cursor == 0:
        return LIST_TOOLS_DISCRIMINATOR
    return LIST_TOOLS_DISCRIMINATOR + bytes([cursor])


def _send(transport: Transport, target_id: str, payload: bytes) -> bytes:
    try:
        return transport.send(target_id, payload, [])
    except McpSolError:
        raise
    except Exception as e:
        raise TransportError(f"Transport failed for {target_id}: {e}") from e


def list_tools_page(transport: Transport, target_id: str, cursor: int = 0) -> ParsedSchema:
    """
    Fetch and decode one page of a program's schema.

    Raises:
        TransportError: The transport failed
        NoReturnDataError: The program returned nothing
        SchemaParseError: The return data is not a valid schema
    """
    logger.debug(f"Fetching list_tools page {cursor} from {target_id}")
    data = _send(transport, target_id, list_tools_request(cursor))
    if not data:
        raise NoReturnDataError()
    return parse_schema(data)


def list_tools(transport: Transport, target_id: str) -> ParsedSchema:
    """Fetch the first page (the whole catalog for compact programs)."""
    return list_tools_page(transport, target_id, 0)


def _parse_cursor(value: str) -> int:
    try:
        cursor = int(value)
    except ValueError as e:
        raise SchemaParseError(f"Invalid nextCursor: {value!r}") from e
    if not 0 <= cursor <= Config.MAX_CURSOR:
        raise SchemaParseError(f"nextCursor out of range: {value!r}")
    return cursor


def list_tools_full(
    transport: Transport,
    target_id: str,
    max_pages: Optional[int] = None,
) -> ParsedSchema:
    """
    Fetch every page of a paginated schema and merge the tools.

    Compact programs answer with everything on page 0 and no nextCursor, so
    this makes a single call for them. For an N-tool paginated program it
    makes exactly N calls. Fetching stops after max_pages calls even if the
    program keeps announcing cursors.

    Args:
        transport: Transport collaborator
        target_id: Program address
        max_pages: Safety cap on page fetches (default: Config.MAX_DISCOVERY_PAGES)

    Returns:
        ParsedSchema holding the tools of all fetched pages
    """
    if max_pages is None:
        max_pages = Config.MAX_DISCOVERY_PAGES

    schema = list_tools_page(transport, target_id, 0)
    pages_fetched = 1

    while schema.next_cursor is not None:
        if pages_fetched >= max_pages:
            logger.warning(
                f"Stopped list_tools pagination for {target_id} after {pages_fetched} pages "
                f"(nextCursor={schema.next_cursor})"
            )
            break
        cursor = _parse_cursor(schema.next_cursor)
        schema.extend(list_tools_page(transport, target_id, cursor))
        pages_fetched += 1

    logger.debug(f"Discovered {len(schema.tools)} tools from {target_id} in {pages_fetched} pages")
    return schema
