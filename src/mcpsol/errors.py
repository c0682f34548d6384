"""Exception types raised by mcpsol.

Every failure on malformed external input is reported through one of these
types; callers never have to infer failure from partial output.
"""


class McpSolError(Exception):
    """Base class for all mcpsol errors."""

    pass


class SchemaParseError(McpSolError):
    """Raised when a schema document cannot be parsed or has an invalid shape."""

    pass


class SchemaDefinitionError(McpSolError, ValueError):
    """Raised when a catalog definition (builder input or YAML) is invalid."""

    pass


class ToolNotFoundError(McpSolError):
    """Raised when a requested tool is not present in the schema."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Tool not found: {tool_name}")


class MissingParamError(McpSolError):
    """Raised when a required parameter has no caller-supplied value."""

    def __init__(self, param: str):
        self.param = param
        super().__init__(f"Missing required parameter: {param}")


class InvalidArgError(McpSolError):
    """Raised when a scalar argument value cannot be encoded for its type."""

    def __init__(self, param: str, reason: str = ""):
        self.param = param
        self.reason = reason
        message = f"Invalid argument value: {param}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidPubkeyError(McpSolError):
    """Raised when an address is not a valid base58-encoded 32-byte key."""

    def __init__(self, param: str, value: str = ""):
        self.param = param
        self.value = value
        super().__init__(f"Invalid pubkey: {param}")


class NoReturnDataError(McpSolError):
    """Raised when a discovery call returns no data."""

    def __init__(self, message: str = "No return data from program"):
        super().__init__(message)


class TransportError(McpSolError):
    """Raised when the transport collaborator fails; the original error is the cause."""

    pass


class InvalidInstructionDataError(McpSolError):
    """Raised when an incoming call payload is truncated or malformed."""

    pass


class UnknownDiscriminatorError(McpSolError):
    """Raised when a call payload's discriminator matches no tool."""

    def __init__(self, discriminator: bytes):
        self.discriminator = bytes(discriminator)
        super().__init__(f"Unknown discriminator: {self.discriminator.hex()}")
