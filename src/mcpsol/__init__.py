"""mcpsol - self-describing tool catalogs for on-chain programs."""

__version__ = "0.1.0"

from .client import Call, CallAccount, ParsedSchema, ParsedTool, build_call, list_tools_full, parse_schema
from .discriminator import LIST_TOOLS_DISCRIMINATOR, instruction_discriminator
from .encoding import encode_compact, encode_page
from .schema import Schema, SchemaBuilder, Tool, ToolBuilder, load_schema

__all__ = [
    "Call",
    "CallAccount",
    "LIST_TOOLS_DISCRIMINATOR",
    "ParsedSchema",
    "ParsedTool",
    "Schema",
    "SchemaBuilder",
    "Tool",
    "ToolBuilder",
    "__version__",
    "build_call",
    "encode_compact",
    "encode_page",
    "instruction_discriminator",
    "list_tools_full",
    "load_schema",
    "parse_schema",
]
