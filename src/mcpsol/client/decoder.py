"""Tolerant schema decoder for compact and paginated documents.

Both wire shapes decode into the same ParsedSchema / ParsedTool types. Each
tool keeps its raw parameter map, and the accessors evaluate it according to
whichever shape a given value has:

- compact: value is a type string, signer/writable come from the key suffix
- verbose: value is an object with type / signer / writable / description

Parameter maps keep wire order (JSON objects decode to insertion-ordered
dicts), which is what positional call encoding relies on.
"""

import binascii
import json
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from ..discriminator import DISCRIMINATOR_SIZE
from ..errors import SchemaParseError

ACCOUNT_TYPE = "pubkey"
SUFFIX_SIGNER_WRITABLE = "_sw"
SUFFIX_SIGNER = "_s"
SUFFIX_WRITABLE = "_w"


def _first_present(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


@dataclass
class ParsedTool:
    """
    A tool decoded from either schema format.

    Compact keys (n, i, d, p, r) and verbose keys (name, description,
    discriminator, parameters) are both accepted, per tool.
    """

    name: str
    discriminator: str
    description: Optional[str] = None
    params: dict[str, Any] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any, index: int = 0) -> "ParsedTool":
        if not isinstance(data, dict):
            raise SchemaParseError(f"tools[{index}] must be an object")

        name = _first_present(data, "name", "n")
        if not isinstance(name, str):
            raise SchemaParseError(f"tools[{index}] has no name")

        discriminator = _first_present(data, "discriminator", "d")
        if not isinstance(discriminator, str):
            raise SchemaParseError(f"Tool '{name}' has no discriminator")

        description = _first_present(data, "description", "i")
        if description is not None and not isinstance(description, str):
            raise SchemaParseError(f"Tool '{name}' has a non-string description")

        params = _first_present(data, "parameters", "p", "params")
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise SchemaParseError(f"Tool '{name}' parameters must be an object")

        required = _first_present(data, "r", "required")
        if required is None:
            required = []
        if not isinstance(required, list) or not all(isinstance(r, str) for r in required):
            raise SchemaParseError(f"Tool '{name}' required must be a list of strings")

        return cls(
            name=name,
            discriminator=discriminator,
            description=description,
            params=params,
            required=required,
        )

    def discriminator_bytes(self) -> bytes:
        """
        Decode the discriminator hex.

        Returns:
            The first 8 decoded bytes

        Raises:
            SchemaParseError: If the hex is invalid or decodes to fewer than 8 bytes
        """
        try:
            decoded = binascii.unhexlify(self.discriminator)
        except (binascii.Error, ValueError) as e:
            raise SchemaParseError(f"Invalid discriminator hex: {self.discriminator}") from e

        if len(decoded) < DISCRIMINATOR_SIZE:
            raise SchemaParseError(f"Discriminator too short: {len(decoded)} bytes")

        return decoded[:DISCRIMINATOR_SIZE]

    def is_account(self, name: str) -> bool:
        """True if the parameter is an account ("pubkey" or {"type": "pubkey"})."""
        value = self.params.get(name)
        if isinstance(value, str):
            return value == ACCOUNT_TYPE
        if isinstance(value, dict):
            return value.get("type") == ACCOUNT_TYPE
        return False

    def is_signer(self, name: str) -> bool:
        value = self.params.get(name)
        if isinstance(value, dict):
            return value.get("signer") is True
        return name.endswith(SUFFIX_SIGNER) or name.endswith(SUFFIX_SIGNER_WRITABLE)

    def is_writable(self, name: str) -> bool:
        value = self.params.get(name)
        if isinstance(value, dict):
            return value.get("writable") is True
        return name.endswith(SUFFIX_WRITABLE) or name.endswith(SUFFIX_SIGNER_WRITABLE)

    def get_param_type(self, name: str) -> Optional[str]:
        value = self.params.get(name)
        if isinstance(value, str):
            return value
        if isinstance(value, dict) and isinstance(value.get("type"), str):
            return value["type"]
        return None

    def get_param_description(self, name: str) -> Optional[str]:
        """Parameter description (verbose format only)."""
        value = self.params.get(name)
        if isinstance(value, dict) and isinstance(value.get("description"), str):
            return value["description"]
        return None

    @staticmethod
    def base_name(name: str) -> str:
        """
        Strip one signer/writable suffix.

        "_sw" is checked before "_s" and "_w" so "payer_sw" becomes "payer"
        rather than "payer_s". Names that merely end in "s" or "w" (e.g.
        "status") are left alone.
        """
        for suffix in (SUFFIX_SIGNER_WRITABLE, SUFFIX_SIGNER, SUFFIX_WRITABLE):
            if name.endswith(suffix) and len(name) > len(suffix):
                return name[: -len(suffix)]
        return name

    def param_names(self) -> list[str]:
        return list(self.params.keys())

    def required_params(self) -> list[str]:
        """
        Parameters in positional order.

        Compact tools carry an explicit required list; for verbose tools every
        parameter is required, in the order the server wrote them.
        """
        if self.required:
            return list(self.required)
        return list(self.params.keys())


@dataclass
class ParsedSchema:
    """A decoded catalog, or one page of a paginated catalog."""

    version: str
    name: str
    tools: list[ParsedTool] = field(default_factory=list)
    next_cursor: Optional[str] = None

    def find_tool(self, name: str) -> Optional[ParsedTool]:
        for tool in self.tools:
            if tool.name == name:
                return tool
        return None

    @property
    def tool_names(self) -> list[str]:
        return [tool.name for tool in self.tools]

    def extend(self, page: "ParsedSchema") -> None:
        """Append a following page's tools and take over its cursor."""
        self.tools.extend(page.tools)
        self.next_cursor = page.next_cursor


def parse_schema(data: Union[bytes, bytearray, str]) -> ParsedSchema:
    """
    Parse a compact document or a paginated page.

    Args:
        data: Raw return data (UTF-8 bytes) or an already decoded string

    Returns:
        ParsedSchema

    Raises:
        SchemaParseError: On malformed JSON or an invalid schema shape
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise SchemaParseError(f"Schema is not valid UTF-8: {e}") from e
    else:
        text = data

    try:
        # strict=False: the encoders only escape quote, backslash, \n, \r, \t
        document = json.loads(text, strict=False)
    except json.JSONDecodeError as e:
        raise SchemaParseError(f"Failed to parse schema: {e}") from e
    except RecursionError as e:
        raise SchemaParseError("Failed to parse schema: nesting too deep") from e

    if not isinstance(document, dict):
        raise SchemaParseError(
            f"Invalid schema structure: expected object, got {type(document).__name__}"
        )

    name = document.get("name")
    if not isinstance(name, str):
        raise SchemaParseError("Schema 'name' must be a string")

    tools = document.get("tools")
    if not isinstance(tools, list):
        raise SchemaParseError("Schema 'tools' must be a list")

    version = document.get("v", "")
    next_cursor = document.get("nextCursor")
    if next_cursor is not None and not isinstance(next_cursor, str):
        next_cursor = str(next_cursor)

    return ParsedSchema(
        version=str(version),
        name=name,
        tools=[ParsedTool.from_dict(tool, index) for index, tool in enumerate(tools)],
        next_cursor=next_cursor,
    )
