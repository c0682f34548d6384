"""Paginated (verbose) schema encoding.

One tool per page with full key names and per-parameter descriptions, for
callers that need to understand a tool without any other documentation:

    {"v":"2024-11-05","name":"counter","tools":[
        {"name":"increment","description":"Add to counter",
         "discriminator":"0b12680968ae3b21",
         "parameters":{
            "counter":{"type":"pubkey","writable":true,"description":"..."},
            "amount":{"type":"u64","description":"Value to add"}}}],
     "nextCursor":"2"}

The cursor is the zero-based tool index. nextCursor is present only when a
following tool exists. An out-of-range cursor yields an empty tools array and
no nextCursor, which is indistinguishable from an empty catalog's only page.
"""

from ..config import Config
from ..schema.models import Schema, Tool
from .compact import escape_json


def _string(text: str) -> str:
    return f'"{escape_json(text)}"'


def _encode_verbose_tool(tool: Tool) -> str:
    parts = [f'"name":{_string(tool.name)}']
    if tool.description is not None:
        parts.append(f'"description":{_string(tool.description)}')
    parts.append(f'"discriminator":"{tool.discriminator_hex}"')

    if tool.has_params:
        params = []
        for acc in tool.accounts:
            fields = ['"type":"pubkey"']
            if acc.is_signer:
                fields.append('"signer":true')
            if acc.is_writable:
                fields.append('"writable":true')
            if acc.description is not None:
                fields.append(f'"description":{_string(acc.description)}')
            params.append(f'{_string(acc.name)}:{{{",".join(fields)}}}')
        for arg in tool.args:
            fields = [f'"type":"{arg.arg_type.compact_name}"']
            if arg.description is not None:
                fields.append(f'"description":{_string(arg.description)}')
            params.append(f'{_string(arg.name)}:{{{",".join(fields)}}}')
        parts.append(f'"parameters":{{{",".join(params)}}}')

    return "{" + ",".join(parts) + "}"


def encode_page(schema: Schema, cursor: int) -> str:
    """
    Encode one page of the paginated schema.

    Args:
        schema: Built catalog
        cursor: Zero-based tool index

    Returns:
        Page JSON with 0 or 1 tools and an optional nextCursor
    """
    in_range = 0 <= cursor < len(schema.tools)
    tool = _encode_verbose_tool(schema.tools[cursor]) if in_range else ""

    page = (
        f'{{"v":"{Config.PROTOCOL_VERSION}","name":{_string(schema.name)},'
        f'"tools":[{tool}]'
    )
    if in_range and cursor + 1 < len(schema.tools):
        page += f',"nextCursor":"{cursor + 1}"'
    return page + "}"


def encode_page_bytes(schema: Schema, cursor: int) -> bytes:
    """Page JSON as UTF-8 bytes, ready for return_data."""
    return encode_page(schema, cursor).encode("utf-8")
