"""Size-budgeted schema encodings for tool discovery.

Modules:
- compact: whole catalog in one abbreviated-key document
- paginated: one verbose tool per page, addressed by cursor
- pages: precomputed page cache and its lazily initialized holder
- estimator: authoring-time size estimates and budget checks
"""

from .compact import encode_compact, encode_compact_bytes, escape_json
from .estimator import SizeReport, check_size_budget, estimate_schema_size, estimate_tool_size
from .paginated import encode_page, encode_page_bytes
from .pages import CachedSchemaPages, SchemaPagesHolder

__all__ = [
    "CachedSchemaPages",
    "SchemaPagesHolder",
    "SizeReport",
    "check_size_budget",
    "encode_compact",
    "encode_compact_bytes",
    "encode_page",
    "encode_page_bytes",
    "escape_json",
    "estimate_schema_size",
    "estimate_tool_size",
]
