"""Compact schema encoding.

One JSON document for the whole catalog, using abbreviated keys so that a
realistic program fits in the 1024-byte return_data limit:

    {"v":"2024-11-05","name":"counter","tools":[
        {"n":"increment","i":"Add to counter","d":"0b12680968ae3b21",
         "p":{"counter_w":"pubkey","authority_s":"pubkey","amount":"u64"},
         "r":["counter_w","authority_s","amount"]}]}

Keys: n=name, i=info (description), d=discriminator hex, p=parameters,
r=required. Accounts are merged into p with a signer/writable suffix.
p and r are omitted when a tool has no parameters.
"""

from ..config import Config
from ..schema.models import Schema, Tool

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def escape_json(text: str) -> str:
    """
    Escape a string for embedding in a JSON string literal.

    Only quote, backslash, newline, carriage return and tab are escaped; all
    other characters are emitted as-is.
    """
    if not any(c in _ESCAPES for c in text):
        return text
    return "".join(_ESCAPES.get(c, c) for c in text)


def _string(text: str) -> str:
    return f'"{escape_json(text)}"'


def _encode_tool(tool: Tool) -> str:
    parts = [f'"n":{_string(tool.name)}']
    if tool.description is not None:
        parts.append(f'"i":{_string(tool.description)}')
    parts.append(f'"d":"{tool.discriminator_hex}"')

    if tool.has_params:
        keys = [acc.compact_key for acc in tool.accounts] + [arg.name for arg in tool.args]
        types = ["pubkey"] * len(tool.accounts) + [arg.arg_type.compact_name for arg in tool.args]
        params = ",".join(f'{_string(key)}:"{type_name}"' for key, type_name in zip(keys, types))
        required = ",".join(_string(key) for key in keys)
        parts.append(f'"p":{{{params}}}')
        parts.append(f'"r":[{required}]')

    return "{" + ",".join(parts) + "}"


def encode_compact(schema: Schema) -> str:
    """
    Encode a full catalog in the compact format.

    The encoder does not enforce the return_data ceiling; see
    encoding.estimator.check_size_budget for authoring-time checks.

    Args:
        schema: Built catalog

    Returns:
        Compact JSON document
    """
    tools = ",".join(_encode_tool(tool) for tool in schema.tools)
    return (
        f'{{"v":"{Config.PROTOCOL_VERSION}","name":{_string(schema.name)},'
        f'"tools":[{tools}]}}'
    )


def encode_compact_bytes(schema: Schema) -> bytes:
    """Compact document as UTF-8 bytes, ready for return_data."""
    return encode_compact(schema).encode("utf-8")
