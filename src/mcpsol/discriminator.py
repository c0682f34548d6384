"""Discriminator calculation using the SHA256 sighash convention.

Format: sha256("<namespace>:<name>")[0..8], compatible with Anchor so that
programs built with either toolchain route the same calls.
"""

import hashlib

DISCRIMINATOR_SIZE = 8

INSTRUCTION_NAMESPACE = "global"
ACCOUNT_NAMESPACE = "account"


def _hash_to_discriminator(preimage: str) -> bytes:
    return hashlib.sha256(preimage.encode("utf-8")).digest()[:DISCRIMINATOR_SIZE]


def instruction_discriminator(name: str) -> bytes:
    """
    Calculate the instruction discriminator for a tool name.

    Args:
        name: Tool / instruction name (e.g. "list_tools")

    Returns:
        First 8 bytes of sha256("global:<name>")

    Example:
        >>> instruction_discriminator("list_tools").hex()
        '42195e6a55fd41c0'
    """
    return _hash_to_discriminator(f"{INSTRUCTION_NAMESPACE}:{name}")


def account_discriminator(name: str) -> bytes:
    """
    Calculate the account discriminator for an account type name.

    Args:
        name: Account type name (e.g. "Counter")

    Returns:
        First 8 bytes of sha256("account:<name>")
    """
    return _hash_to_discriminator(f"{ACCOUNT_NAMESPACE}:{name}")


def discriminator_to_hex(discriminator: bytes) -> str:
    """Render a discriminator as lowercase hex (16 characters)."""
    return bytes(discriminator).hex()


# Universal list_tools discriminator: sha256("global:list_tools")[0..8]
LIST_TOOLS_DISCRIMINATOR = bytes([0x42, 0x19, 0x5E, 0x6A, 0x55, 0xFD, 0x41, 0xC0])
LIST_TOOLS = "list_tools"
