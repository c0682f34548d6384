"""Schema size estimation and authoring-time budget checks.

Estimates are conservative approximations for flagging likely overages while
a catalog is being written. Runtime behaviour never depends on them; the
exact encoders are the source of truth.
"""

from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from ..config import Config
from ..schema.models import Schema, Tool
from .compact import encode_compact_bytes
from .paginated import encode_page_bytes

_SCHEMA_OVERHEAD = 50  # {"v":"2024-11-05","name":"","tools":[]}
_TOOL_OVERHEAD = 30  # {"n":"","d":""} plus separators
_DISCRIMINATOR_HEX = 16
_DESCRIPTION_OVERHEAD = 8  # ,"i":""
_PARAM_OVERHEAD = 8  # "":"" in p, "" in r, commas
_ACCOUNT_VALUE = 9  # "pubkey" plus longest suffix
_ARG_VALUE = 8  # longest quoted type token


def estimate_tool_size(tool: Optional[Tool]) -> int:
    """
    Estimate the compact size of one tool in bytes.

    Every parameter name is counted twice since it appears in both p and r.
    Returns 0 for None.
    """
    if tool is None:
        return 0

    size = _TOOL_OVERHEAD + len(tool.name) + _DISCRIMINATOR_HEX
    if tool.description is not None:
        size += len(tool.description) + _DESCRIPTION_OVERHEAD
    if tool.has_params:
        size += 12  # ,"p":{},"r":[]
    for acc in tool.accounts:
        size += 2 * (len(acc.name) + 3) + _ACCOUNT_VALUE + _PARAM_OVERHEAD
    for arg in tool.args:
        size += 2 * len(arg.name) + _ARG_VALUE + _PARAM_OVERHEAD
    return size


def estimate_schema_size(schema: Schema) -> int:
    """Estimate the compact size of a whole catalog in bytes."""
    size = _SCHEMA_OVERHEAD + len(schema.name)
    for tool in schema.tools:
        size += estimate_tool_size(tool)
    return size


@dataclass
class SizeReport:
    """Exact serialized sizes of a catalog against the return_data limit."""

    limit: int
    compact_size: int
    estimated_size: int
    page_sizes: list[int] = field(default_factory=list)

    @property
    def compact_fits(self) -> bool:
        return self.compact_size <= self.limit

    @property
    def oversized_pages(self) -> list[int]:
        return [cursor for cursor, size in enumerate(self.page_sizes) if size > self.limit]

    @property
    def fits(self) -> bool:
        return self.compact_fits and not self.oversized_pages


def check_size_budget(schema: Schema, limit: Optional[int] = None) -> SizeReport:
    """
    Measure the compact document and every page against the size limit.

    Overages are logged; the report is returned either way so authoring tools
    can decide whether to switch to paginated delivery or trim descriptions.

    Args:
        schema: Built catalog
        limit: Byte ceiling (default: Config.MAX_RETURN_DATA_SIZE)

    Returns:
        SizeReport with exact sizes
    """
    if limit is None:
        limit = Config.MAX_RETURN_DATA_SIZE

    report = SizeReport(
        limit=limit,
        compact_size=len(encode_compact_bytes(schema)),
        estimated_size=estimate_schema_size(schema),
        page_sizes=[
            len(encode_page_bytes(schema, cursor)) for cursor in range(max(len(schema.tools), 1))
        ],
    )

    if not report.compact_fits:
        logger.warning(
            f"Compact schema '{schema.name}' is {report.compact_size} bytes, "
            f"over the {limit} byte limit"
        )
    for cursor in report.oversized_pages:
        logger.warning(
            f"Schema page {cursor} of '{schema.name}' is {report.page_sizes[cursor]} bytes, "
            f"over the {limit} byte limit"
        )
    return report
