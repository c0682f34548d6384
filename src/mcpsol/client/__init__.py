"""Client side: decode schemas, discover tools, build calls."""
from .call import Call, CallAccount, build_call, decode_pubkey, encode_arg
from .decoder import ParsedSchema, ParsedTool, parse_schema
from .discovery import Transport, list_tools, list_tools_full, list_tools_page, list_tools_request
from .pda import PdaSeed, PdaSeeds, derive_pda, parse_pda_seeds

__all__ = [
    "Call",
    "CallAccount",
    "ParsedSchema",
    "ParsedTool",
    "PdaSeed",
    "PdaSeeds",
    "Transport",
    "build_call",
    "decode_pubkey",
    "derive_pda",
    "encode_arg",
    "list_tools",
    "list_tools_full",
    "list_tools_page",
    "list_tools_request",
    "parse_pda_seeds",
    "parse_schema",
]
