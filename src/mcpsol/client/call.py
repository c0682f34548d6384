"""Binary call construction from a decoded schema.

Payload layout: [8-byte discriminator][args in required-param order], with
account parameters skipped in the data and emitted as an ordered account
list instead.

Argument encoding:
- integers: fixed-width little-endian (u8..u128, i8..i128)
- bool: one byte, 0 or 1
- pubkey: 32 raw bytes decoded from base58
- str / unknown types: u32 little-endian length prefix + UTF-8 bytes
- bytes: base64 text, decoded, then length-prefixed
"""

import base64
import binascii
import re
import struct
from dataclasses import dataclass, field
from typing import Mapping, Union

import base58
from loguru import logger

from ..config import Config
from ..errors import (
    InvalidArgError,
    InvalidPubkeyError,
    MissingParamError,
    ToolNotFoundError,
)
from ..schema.models import ArgType, integer_range
from .decoder import ParsedSchema, ParsedTool

ScalarValue = Union[str, int, bool]

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

# Legacy compact token emitted by older generators for "some integer"
_LEGACY_INT = "int"

# Sign plus the 39 digits of the widest 128-bit value
_MAX_INTEGER_TEXT = 40


@dataclass(frozen=True)
class CallAccount:
    """One positional account of a call."""

    address: str
    is_signer: bool
    is_writable: bool


@dataclass(frozen=True)
class Call:
    """A fully built invocation, ready to hand to a transport."""

    target_id: str
    accounts: list[CallAccount] = field(default_factory=list)
    data: bytes = b""

    @property
    def data_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


def decode_pubkey(value: str, param: str) -> bytes:
    """
    Decode a base58 address to its 32 raw bytes.

    Raises:
        InvalidPubkeyError: If the text is not base58 or not 32 bytes long
    """
    if not isinstance(value, str) or not value:
        raise InvalidPubkeyError(param, str(value))
    try:
        raw = base58.b58decode(value)
    except ValueError as e:
        raise InvalidPubkeyError(param, value) from e
    if len(raw) != Config.PUBKEY_SIZE:
        raise InvalidPubkeyError(param, value)
    return raw


def _length_prefixed(raw: bytes) -> bytes:
    return struct.pack("<I", len(raw)) + raw


def _encode_integer(arg_type: ArgType, text: str, param: str) -> bytes:
    if len(text) > _MAX_INTEGER_TEXT:
        raise InvalidArgError(param, f"expected {arg_type.value}, got {len(text)} characters")
    if not _INTEGER_PATTERN.fullmatch(text):
        raise InvalidArgError(param, f"expected {arg_type.value}, got '{text}'")
    number = int(text)
    low, high = integer_range(arg_type)
    if not low <= number <= high:
        raise InvalidArgError(param, f"{number} out of range for {arg_type.value}")
    return number.to_bytes(arg_type.width, "little", signed=arg_type.is_signed)


def _encode_bool(text: str, param: str) -> bytes:
    lowered = text.lower()
    if lowered == "true":
        return b"\x01"
    if lowered == "false":
        return b"\x00"
    raise InvalidArgError(param, f"expected true or false, got '{text}'")


def _as_text(value: ScalarValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_arg(type_name: str, value: ScalarValue, param: str = "") -> bytes:
    """
    Encode one scalar argument for its declared wire type.

    Unknown type names fall back to string encoding rather than failing.

    Args:
        type_name: Wire type token ("u64", "bool", "str", ...)
        value: Caller-supplied value, normally text
        param: Parameter name, used in error messages

    Returns:
        Encoded bytes

    Raises:
        InvalidArgError: Unparsable or out-of-range integer, bad bool, bad base64
        InvalidPubkeyError: Invalid base58 address
    """
    text = _as_text(value)

    if type_name == _LEGACY_INT:
        return _encode_integer(ArgType.U64, text, param)

    try:
        arg_type = ArgType(type_name) if type_name != "str" else ArgType.STRING
    except ValueError:
        logger.debug(f"Unknown argument type '{type_name}' for '{param}', encoding as string")
        return _length_prefixed(text.encode("utf-8"))

    if arg_type.is_integer:
        return _encode_integer(arg_type, text, param)
    if arg_type is ArgType.BOOL:
        return _encode_bool(text, param)
    if arg_type is ArgType.PUBKEY:
        return decode_pubkey(text, param)
    if arg_type is ArgType.BYTES:
        try:
            raw = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidArgError(param, "expected base64") from e
        return _length_prefixed(raw)
    return _length_prefixed(text.encode("utf-8"))


def _lookup_account(
    param: str,
    accounts: Mapping[str, str],
    args: Mapping[str, ScalarValue],
) -> str:
    base = ParsedTool.base_name(param)
    for key in (param, base):
        if key in accounts:
            return accounts[key]
    # pubkey-typed arguments travel as accounts but callers may list them as args
    if isinstance(args.get(param), str):
        return args[param]
    raise MissingParamError(param)


def build_call(
    schema: ParsedSchema,
    target_id: str,
    tool_name: str,
    accounts: Mapping[str, str],
    args: Mapping[str, ScalarValue],
) -> Call:
    """
    Build a binary call for a tool.

    Args:
        schema: Decoded catalog (compact, one page, or aggregated pages)
        target_id: Program address the call is addressed to
        tool_name: Tool to invoke
        accounts: Account name -> base58 address; names may be given with or
            without the compact signer/writable suffix
        args: Argument name -> value (exact names); addresses for
            pubkey-typed arguments may be given here or in accounts

    Returns:
        Call with ordered accounts and the encoded payload

    Raises:
        ToolNotFoundError: Unknown tool
        MissingParamError: A required account or argument was not supplied
        InvalidPubkeyError: An address is not valid base58 / 32 bytes
        InvalidArgError: A scalar value cannot be encoded
        SchemaParseError: The tool's discriminator hex is invalid
    """
    tool = schema.find_tool(tool_name)
    if tool is None:
        raise ToolNotFoundError(tool_name)

    required = tool.required_params()

    call_accounts = []
    for param in required:
        if not tool.is_account(param):
            continue
        address = _lookup_account(param, accounts, args)
        decode_pubkey(address, param)
        call_accounts.append(
            CallAccount(
                address=address,
                is_signer=tool.is_signer(param),
                is_writable=tool.is_writable(param),
            )
        )

    data = bytearray(tool.discriminator_bytes())
    for param in required:
        if tool.is_account(param):
            continue
        if param not in args:
            raise MissingParamError(param)
        type_name = tool.get_param_type(param) or "str"
        data += encode_arg(type_name, args[param], param)

    return Call(target_id=target_id, accounts=call_accounts, data=bytes(data))
