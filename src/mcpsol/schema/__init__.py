"""Tool catalog model and builders."""
from .builder import SchemaBuilder, ToolBuilder, load_schema
from .models import AccountMeta, Arg, ArgType, Schema, Tool

__all__ = [
    "AccountMeta",
    "Arg",
    "ArgType",
    "Schema",
    "SchemaBuilder",
    "Tool",
    "ToolBuilder",
    "load_schema",
]
