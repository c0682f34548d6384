"""
Tool catalog data models.

Defines Schema, Tool, AccountMeta, Arg and ArgType for an on-chain program's
tool catalog.

Invariants:
- Tool.discriminator is always exactly 8 bytes and derived from Tool.name
- Accounts precede args, and declared order is the positional binary order
- Everything is frozen once built; catalogs are shared read-only
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..discriminator import instruction_discriminator


class ArgType(str, Enum):
    """Supported argument types for tool parameters."""

    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    I128 = "i128"
    BOOL = "bool"
    PUBKEY = "pubkey"
    STRING = "string"
    BYTES = "bytes"

    @property
    def compact_name(self) -> str:
        """Type token used on the wire ("str" for strings, otherwise the value)."""
        if self is ArgType.STRING:
            return "str"
        return self.value

    @property
    def width(self) -> Optional[int]:
        """Fixed encoded width in bytes, or None for length-prefixed types."""
        return _FIXED_WIDTHS.get(self)

    @property
    def is_integer(self) -> bool:
        return self in _INTEGER_RANGES

    @property
    def is_signed(self) -> bool:
        return self.value.startswith("i")

    @classmethod
    def from_type_name(cls, type_name: str) -> "ArgType":
        """
        Parse a host-language or wire type name.

        Accepts wire tokens ("u64", "str", "pubkey"), Rust-style names
        ("String", "Pubkey", "Vec<u8>", "[u8; 32]") and anything else falls
        back to STRING, matching how unknown types are encoded.
        """
        text = type_name.strip()
        lowered = text.lower()
        if lowered in _WIRE_NAMES:
            return _WIRE_NAMES[lowered]
        if "pubkey" in lowered or lowered == "publickey":
            return cls.PUBKEY
        compact = lowered.replace(" ", "")
        if compact.startswith("vec<u8>") or compact.startswith("[u8;"):
            return cls.BYTES
        return cls.STRING


_FIXED_WIDTHS = {
    ArgType.U8: 1,
    ArgType.U16: 2,
    ArgType.U32: 4,
    ArgType.U64: 8,
    ArgType.U128: 16,
    ArgType.I8: 1,
    ArgType.I16: 2,
    ArgType.I32: 4,
    ArgType.I64: 8,
    ArgType.I128: 16,
    ArgType.BOOL: 1,
    ArgType.PUBKEY: 32,
}

_INTEGER_RANGES = {
    ArgType.U8: (0, 2**8 - 1),
    ArgType.U16: (0, 2**16 - 1),
    ArgType.U32: (0, 2**32 - 1),
    ArgType.U64: (0, 2**64 - 1),
    ArgType.U128: (0, 2**128 - 1),
    ArgType.I8: (-(2**7), 2**7 - 1),
    ArgType.I16: (-(2**15), 2**15 - 1),
    ArgType.I32: (-(2**31), 2**31 - 1),
    ArgType.I64: (-(2**63), 2**63 - 1),
    ArgType.I128: (-(2**127), 2**127 - 1),
}

_WIRE_NAMES = {member.value: member for member in ArgType}
_WIRE_NAMES["str"] = ArgType.STRING


def integer_range(arg_type: ArgType) -> tuple[int, int]:
    """Inclusive (min, max) for an integer ArgType."""
    return _INTEGER_RANGES[arg_type]


@dataclass(frozen=True)
class AccountMeta:
    """
    Account parameter of a tool.

    The (is_signer, is_writable) pair is rendered in the compact schema as a
    name suffix: "" / "_s" / "_w" / "_sw".
    """

    name: str
    description: Optional[str] = None
    is_signer: bool = False
    is_writable: bool = False

    @property
    def suffix(self) -> str:
        if self.is_signer and self.is_writable:
            return "_sw"
        if self.is_signer:
            return "_s"
        if self.is_writable:
            return "_w"
        return ""

    @property
    def compact_key(self) -> str:
        return f"{self.name}{self.suffix}"


@dataclass(frozen=True)
class Arg:
    """Scalar argument of a tool, serialized after the discriminator."""

    name: str
    arg_type: ArgType
    description: Optional[str] = None


@dataclass(frozen=True)
class Tool:
    """
    A remotely invokable operation.

    The discriminator is computed from the name and cannot be passed in.
    """

    name: str
    description: Optional[str] = None
    accounts: tuple[AccountMeta, ...] = ()
    args: tuple[Arg, ...] = ()
    discriminator: bytes = field(init=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "accounts", tuple(self.accounts))
        object.__setattr__(self, "args", tuple(self.args))
        object.__setattr__(self, "discriminator", instruction_discriminator(self.name))

    @property
    def has_params(self) -> bool:
        return bool(self.accounts or self.args)

    @property
    def discriminator_hex(self) -> str:
        return self.discriminator.hex()


@dataclass(frozen=True)
class Schema:
    """Complete tool catalog for one program."""

    name: str
    tools: tuple[Tool, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "tools", tuple(self.tools))

    def get_tool(self, name: str) -> Optional[Tool]:
        """Return the first tool with the given name, or None."""
        for tool in self.tools:
            if tool.name == name:
                return tool
        return None

    def tool_by_discriminator(self, discriminator: bytes) -> Optional[Tool]:
        for tool in self.tools:
            if tool.discriminator == discriminator:
                return tool
        return None

    def __len__(self) -> int:
        return len(self.tools)
