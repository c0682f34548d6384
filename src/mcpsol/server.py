"""FastMCP bridge exposing a program's tool catalog to agents.

The catalog is loaded from Config.SCHEMA_PATH, served by an in-process
ProgramInterface and discovered back through the client, so the agent sees
exactly what a remote caller would decode from return data.

Tools:
- list_program_tools: Every tool with its accounts and arguments
- describe_tool: One tool's parameters and PDA seed hints
- build_tool_call: Encode a call into ordered accounts and a payload
"""

import json
import sys
from typing import Any, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from loguru import logger

from .client.call import build_call
from .client.decoder import ParsedSchema, ParsedTool
from .client.discovery import list_tools_full
from .client.pda import PdaSeeds, derive_pda, parse_pda_seeds
from .config import Config
from .errors import McpSolError
from .program import LoopbackTransport, ProgramInterface
from .schema.builder import load_schema

program_server = FastMCP(Config.SERVER_NAME)

_transport: Optional[LoopbackTransport] = None


def _load_configured_schema():
    return load_schema(Config.SCHEMA_PATH)


def set_program(program: Optional[ProgramInterface]) -> None:
    """Replace the served program (None reloads from Config.SCHEMA_PATH on next use)."""
    global _transport
    _transport = LoopbackTransport(program) if program is not None else None


def _get_transport() -> LoopbackTransport:
    global _transport
    if _transport is None:
        program = ProgramInterface(_load_configured_schema, paginated=Config.PAGINATED)
        _transport = LoopbackTransport(program)
    return _transport


def _discover() -> ParsedSchema:
    try:
        return list_tools_full(_get_transport(), Config.TARGET_ID)
    except McpSolError as e:
        raise ToolError(f"Tool discovery failed: {e}")


def _find(schema: ParsedSchema, name: str) -> ParsedTool:
    tool = schema.find_tool(name)
    if tool is None:
        available = ", ".join(schema.tool_names)
        raise ToolError(f"Tool '{name}' not found. Available tools: {available}")
    return tool


def _describe_seeds(seeds: PdaSeeds, seed_values: Optional[dict[str, str]]) -> dict[str, Any]:
    report: dict[str, Any] = {
        "pda_seeds": [{"kind": s.kind, "value": s.value} for s in seeds.seeds],
    }
    if seed_values is not None and all(ref in seed_values for ref in seeds.refs):
        address, bump = derive_pda(Config.TARGET_ID, seeds, seed_values)
        report["pda_address"] = address
        report["pda_bump"] = bump
    return report


def _describe_param(
    tool: ParsedTool, param: str, seed_values: Optional[dict[str, str]] = None
) -> dict[str, Any]:
    is_account = tool.is_account(param)
    entry: dict[str, Any] = {
        "name": tool.base_name(param) if is_account else param,
        "kind": "account" if is_account else "arg",
        "type": tool.get_param_type(param),
    }
    if is_account:
        entry["signer"] = tool.is_signer(param)
        entry["writable"] = tool.is_writable(param)

    description = tool.get_param_description(param)
    if description is not None:
        entry["description"] = description
        seeds = parse_pda_seeds(description)
        if seeds is not None:
            entry.update(_describe_seeds(seeds, seed_values))
    return entry


def _summarize(tool: ParsedTool) -> dict[str, Any]:
    params = tool.required_params()
    return {
        "name": tool.name,
        "description": tool.description,
        "discriminator": tool.discriminator,
        "accounts": [tool.base_name(p) for p in params if tool.is_account(p)],
        "args": [p for p in params if not tool.is_account(p)],
    }


@program_server.tool()
async def list_program_tools() -> str:
    """
    List every tool the program exposes.

    Returns:
        JSON object with the program name and one summary per tool
    """
    schema = _discover()
    result = {
        "program": schema.name,
        "target": Config.TARGET_ID,
        "version": schema.version,
        "tools": [_summarize(tool) for tool in schema.tools],
    }
    return json.dumps(result, indent=2)


@program_server.tool()
async def describe_tool(name: str, seed_values: Optional[dict[str, str]] = None) -> str:
    """
    Describe one tool's parameters in positional order.

    Accounts report signer/writable flags; descriptions containing
    seeds=[...] also report the PDA seed list. When seed_values supplies an
    address for every referenced seed, the derived address and bump are
    reported too.

    Args:
        name: Tool name
        seed_values: Seed name -> base58 address, for PDA derivation

    Returns:
        JSON object describing the tool

    Raises:
        ToolError: If the tool does not exist or a seed address is invalid
    """
    tool = _find(_discover(), name)
    try:
        result: dict[str, Any] = {
            "name": tool.name,
            "description": tool.description,
            "discriminator": tool.discriminator,
            "parameters": [
                _describe_param(tool, p, seed_values) for p in tool.required_params()
            ],
        }
        seeds = parse_pda_seeds(tool.description)
        if seeds is not None:
            result.update(_describe_seeds(seeds, seed_values))
    except McpSolError as e:
        raise ToolError(f"Failed to derive PDA for '{name}': {e}")
    return json.dumps(result, indent=2)


@program_server.tool()
async def build_tool_call(
    name: str,
    accounts: Optional[dict[str, str]] = None,
    args: Optional[dict[str, Any]] = None,
) -> str:
    """
    Build a call for a tool and check it against the program.

    Args:
        name: Tool name
        accounts: Account name -> base58 address
        args: Argument name -> value

    Returns:
        JSON object with ordered accounts and the payload as hex and base64

    Raises:
        ToolError: Unknown tool, missing parameter or unencodable value
    """
    schema = _discover()
    transport = _get_transport()
    try:
        call = build_call(schema, Config.TARGET_ID, name, accounts or {}, args or {})
        transport.send(call.target_id, call.data, call.accounts)
    except McpSolError as e:
        raise ToolError(f"Failed to build call for '{name}': {e}")

    logger.info(f"Built call for '{name}' ({len(call.data)} bytes, {len(call.accounts)} accounts)")
    result = {
        "target": call.target_id,
        "tool": name,
        "accounts": [
            {"address": a.address, "signer": a.is_signer, "writable": a.is_writable}
            for a in call.accounts
        ],
        "data_hex": call.data.hex(),
        "data_base64": call.data_base64,
    }
    return json.dumps(result, indent=2)


def main():
    """
    Main entry point for the program tools server.

    Configures loguru on stderr (stdout carries the stdio transport) and runs
    the FastMCP server.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> | <level>{message}</level>",
        level="INFO",
    )

    try:
        Config.validate()
    except ValueError as e:
        logger.error(f"{e}")
        sys.exit(1)

    logger.info(f"Starting {Config.SERVER_NAME} (catalog: {Config.SCHEMA_PATH})")

    try:
        program_server.run()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
