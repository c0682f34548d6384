"""Program-side dispatch for a tool catalog.

ProgramInterface is what an on-chain program built with mcpsol does on entry:
answer list_tools from the cached schema, otherwise route the payload to a
tool by discriminator and decode its arguments. No tool is executed here.

LoopbackTransport plugs a ProgramInterface into the client's Transport
boundary, so discovery and call building can be exercised in-process against
exactly the bytes a deployed program would return.
"""

import struct
from typing import Any, Callable, Optional, Sequence

from loguru import logger

from .client.call import CallAccount
from .discriminator import DISCRIMINATOR_SIZE, LIST_TOOLS_DISCRIMINATOR
from .encoding.pages import SchemaPagesHolder
from .errors import InvalidInstructionDataError, UnknownDiscriminatorError
from .schema.models import ArgType, Schema, Tool


class _Reader:
    """Sequential reader over an instruction's argument section."""

    def __init__(self, data: bytes, offset: int = 0):
        self._data = data
        self._offset = offset

    def take(self, size: int, param: str) -> bytes:
        end = self._offset + size
        if end > len(self._data):
            raise InvalidInstructionDataError(
                f"Truncated argument '{param}': need {size} bytes at offset {self._offset}, "
                f"have {len(self._data) - self._offset}"
            )
        chunk = self._data[self._offset:end]
        self._offset = end
        return chunk

    def take_prefixed(self, param: str) -> bytes:
        (length,) = struct.unpack("<I", self.take(4, param))
        return self.take(length, param)

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset


def _decode_value(arg_type: ArgType, reader: _Reader, param: str) -> Any:
    if arg_type.is_integer:
        raw = reader.take(arg_type.width, param)
        return int.from_bytes(raw, "little", signed=arg_type.is_signed)
    if arg_type is ArgType.BOOL:
        raw = reader.take(1, param)[0]
        if raw > 1:
            raise InvalidInstructionDataError(f"Invalid bool for '{param}': {raw}")
        return raw == 1
    if arg_type is ArgType.BYTES:
        return reader.take_prefixed(param)
    raw = reader.take_prefixed(param)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidInstructionDataError(f"Invalid UTF-8 for '{param}'") from e


class ProgramInterface:
    """
    Entry-point logic of a program exposing a tool catalog.

    Args:
        schema_factory: Builds the catalog; called once, on first use
        paginated: Serve one tool per list_tools call (True) or the whole
            compact catalog at once (False)
    """

    def __init__(self, schema_factory: Callable[[], Schema], paginated: bool = True):
        self._pages = SchemaPagesHolder(schema_factory)
        self._paginated = paginated

    @property
    def schema(self) -> Schema:
        return self._pages.get().schema

    @property
    def paginated(self) -> bool:
        return self._paginated

    @staticmethod
    def is_list_tools(data: bytes) -> bool:
        return data[:DISCRIMINATOR_SIZE] == LIST_TOOLS_DISCRIMINATOR

    def handle_list_tools(self, data: bytes) -> bytes:
        """
        Answer a list_tools payload.

        The cursor is the optional byte after the discriminator; a missing
        byte means cursor 0. Compact programs ignore it.
        """
        if not self._paginated:
            return self._pages.get().compact
        cursor = data[DISCRIMINATOR_SIZE] if len(data) > DISCRIMINATOR_SIZE else 0
        return self._pages.get().get_page(cursor)

    def identify(self, data: bytes) -> Tool:
        """
        Map a payload to its tool by the leading discriminator.

        Raises:
            InvalidInstructionDataError: Payload shorter than a discriminator
            UnknownDiscriminatorError: No tool has this discriminator
        """
        if len(data) < DISCRIMINATOR_SIZE:
            raise InvalidInstructionDataError(
                f"Instruction data too short: {len(data)} bytes"
            )
        discriminator = bytes(data[:DISCRIMINATOR_SIZE])
        tool = self.schema.tool_by_discriminator(discriminator)
        if tool is None:
            raise UnknownDiscriminatorError(discriminator)
        return tool

    def decode_args(
        self,
        tool: Tool,
        data: bytes,
        accounts: Optional[Sequence[CallAccount]] = None,
    ) -> dict[str, Any]:
        """
        Decode a call's arguments for a tool.

        Scalar values come back as int, bool, str or bytes, keyed by argument
        name in declared order. pubkey-typed arguments are not in the data:
        on the wire they are read-only accounts placed after the tool's
        declared accounts, so they are resolved from the account list when
        one is given and left out otherwise.

        Raises:
            InvalidInstructionDataError: Truncated data, trailing bytes or a
                missing account for a pubkey argument
        """
        reader = _Reader(bytes(data), DISCRIMINATOR_SIZE)
        account_index = len(tool.accounts)
        values = {}
        for arg in tool.args:
            if arg.arg_type is ArgType.PUBKEY:
                if accounts is not None:
                    if account_index >= len(accounts):
                        raise InvalidInstructionDataError(
                            f"Missing account for pubkey argument '{arg.name}'"
                        )
                    values[arg.name] = accounts[account_index].address
                account_index += 1
                continue
            values[arg.name] = _decode_value(arg.arg_type, reader, arg.name)
        if reader.remaining:
            raise InvalidInstructionDataError(
                f"{reader.remaining} trailing bytes after arguments of '{tool.name}'"
            )
        return values

    def dispatch(
        self,
        data: bytes,
        accounts: Optional[Sequence[CallAccount]] = None,
    ) -> tuple[Tool, dict[str, Any]]:
        """Identify a non-discovery payload and decode its arguments."""
        tool = self.identify(data)
        return tool, self.decode_args(tool, data, accounts)


class LoopbackTransport:
    """
    In-process Transport backed by a ProgramInterface.

    list_tools payloads return the program's response; any other payload is
    identified and decoded (raising on bad data) and returns no data.
    """

    def __init__(self, program: ProgramInterface):
        self.program = program
        self.calls: list[bytes] = []

    def send(self, target_id: str, payload: bytes, accounts: Sequence[CallAccount]) -> bytes:
        self.calls.append(bytes(payload))
        if ProgramInterface.is_list_tools(payload):
            return self.program.handle_list_tools(payload)
        tool, args = self.program.dispatch(payload, accounts)
        logger.debug(
            f"Loopback call to {target_id} routed to '{tool.name}' "
            f"({len(accounts)} accounts, {len(args)} args)"
        )
        return b""
