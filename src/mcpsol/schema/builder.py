"""Schema builders and the YAML catalog loader."""

from pathlib import Path
from typing import Any, Optional, Union

import yaml
from loguru import logger

from ..errors import SchemaDefinitionError
from .models import AccountMeta, Arg, ArgType, Schema, Tool


class ToolBuilder:
    """
    Fluent builder for a single Tool.

    Example:
        tool = (
            ToolBuilder("transfer")
            .description("Transfer tokens")
            .signer_writable("from")
            .writable("to")
            .arg("amount", ArgType.U64)
            .build()
        )
    """

    def __init__(self, name: str):
        if not name or not name.strip():
            raise SchemaDefinitionError("tool name must not be empty")
        self._name = name
        self._description: Optional[str] = None
        self._accounts: list[AccountMeta] = []
        self._args: list[Arg] = []

    def description(self, text: str) -> "ToolBuilder":
        self._description = text
        return self

    def account(
        self,
        name: str,
        is_signer: bool = False,
        is_writable: bool = False,
        description: Optional[str] = None,
    ) -> "ToolBuilder":
        if not name:
            raise SchemaDefinitionError(f"account name must not be empty (tool '{self._name}')")
        self._accounts.append(
            AccountMeta(
                name=name,
                description=description,
                is_signer=is_signer,
                is_writable=is_writable,
            )
        )
        return self

    def signer(self, name: str, description: Optional[str] = None) -> "ToolBuilder":
        return self.account(name, is_signer=True, description=description)

    def writable(self, name: str, description: Optional[str] = None) -> "ToolBuilder":
        return self.account(name, is_writable=True, description=description)

    def signer_writable(self, name: str, description: Optional[str] = None) -> "ToolBuilder":
        return self.account(name, is_signer=True, is_writable=True, description=description)

    def arg(
        self,
        name: str,
        arg_type: Union[ArgType, str],
        description: Optional[str] = None,
    ) -> "ToolBuilder":
        if not name:
            raise SchemaDefinitionError(f"arg name must not be empty (tool '{self._name}')")
        if not isinstance(arg_type, ArgType):
            arg_type = ArgType.from_type_name(str(arg_type))
        self._args.append(Arg(name=name, arg_type=arg_type, description=description))
        return self

    def build(self) -> Tool:
        return Tool(
            name=self._name,
            description=self._description,
            accounts=tuple(self._accounts),
            args=tuple(self._args),
        )


class SchemaBuilder:
    """
    Builder for a program's tool catalog.

    Features:
    - Programmatic construction via add_tool()
    - Construction from a plain dict (from_dict) or YAML file (from_yaml)
    - Duplicate tool names are reported, first declaration wins lookups
    """

    def __init__(self, name: str):
        if not name or not name.strip():
            raise SchemaDefinitionError("schema name must not be empty")
        self._name = name
        self._tools: list[Tool] = []

    def add_tool(self, tool: Union[Tool, ToolBuilder]) -> "SchemaBuilder":
        if isinstance(tool, ToolBuilder):
            tool = tool.build()
        if any(existing.name == tool.name for existing in self._tools):
            logger.warning(
                f"Duplicate tool name '{tool.name}' in schema '{self._name}'; "
                "first declaration wins lookups"
            )
        self._tools.append(tool)
        return self

    def build(self) -> Schema:
        return Schema(name=self._name, tools=tuple(self._tools))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SchemaBuilder":
        """
        Populate a builder from a catalog definition.

        Expected structure:
            name: <program name>
            tools:
              - name: <tool>
                description: <optional>
                accounts: [{name, signer?, writable?, description?}, ...]
                args: [{name, type, description?}, ...]

        Raises:
            SchemaDefinitionError: If the structure is invalid
        """
        if not isinstance(data, dict):
            raise SchemaDefinitionError(
                f"Invalid catalog structure: expected dict, got {type(data).__name__}"
            )

        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise SchemaDefinitionError("Catalog 'name' must be a non-empty string")

        tools = data.get("tools", [])
        if not isinstance(tools, list):
            raise SchemaDefinitionError("'tools' must be a list")

        builder = cls(name)
        for index, tool_data in enumerate(tools):
            builder.add_tool(_tool_from_dict(tool_data, index))
        return builder

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "SchemaBuilder":
        """
        Load a catalog definition from a YAML file.

        Raises:
            FileNotFoundError: If the YAML file doesn't exist
            SchemaDefinitionError: If the YAML is malformed or has an invalid structure
        """
        yaml_file = Path(yaml_path)
        if not yaml_file.exists():
            raise FileNotFoundError(f"Catalog YAML not found: {yaml_path}")

        with open(yaml_file, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise SchemaDefinitionError(f"Malformed catalog YAML {yaml_path}: {e}") from e

        return cls.from_dict(data)


def _tool_from_dict(tool_data: Any, index: int) -> Tool:
    if not isinstance(tool_data, dict):
        raise SchemaDefinitionError(f"tools[{index}] must be a mapping")

    name = tool_data.get("name")
    if not isinstance(name, str) or not name:
        raise SchemaDefinitionError(f"tools[{index}].name must be a non-empty string")

    builder = ToolBuilder(name)
    if tool_data.get("description"):
        builder.description(str(tool_data["description"]))

    accounts = tool_data.get("accounts", [])
    if not isinstance(accounts, list):
        raise SchemaDefinitionError(f"tools[{index}].accounts must be a list")
    for account in accounts:
        if not isinstance(account, dict) or not account.get("name"):
            raise SchemaDefinitionError(f"tools[{index}] has an account without a name")
        builder.account(
            str(account["name"]),
            is_signer=bool(account.get("signer", False)),
            is_writable=bool(account.get("writable", False)),
            description=account.get("description"),
        )

    args = tool_data.get("args", [])
    if not isinstance(args, list):
        raise SchemaDefinitionError(f"tools[{index}].args must be a list")
    for arg in args:
        if not isinstance(arg, dict) or not arg.get("name"):
            raise SchemaDefinitionError(f"tools[{index}] has an arg without a name")
        if "type" not in arg:
            raise SchemaDefinitionError(f"tools[{index}].args['{arg['name']}'] has no type")
        builder.arg(str(arg["name"]), str(arg["type"]), description=arg.get("description"))

    return builder.build()


def load_schema(yaml_path: Union[str, Path]) -> Schema:
    """Load and build a Schema from a catalog YAML file."""
    schema = SchemaBuilder.from_yaml(yaml_path).build()
    logger.info(f"Loaded catalog '{schema.name}' with {len(schema.tools)} tools from {yaml_path}")
    return schema
