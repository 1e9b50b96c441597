"""Schema translation — provider input schemas to function declarations."""

from mcpbridge.core.schema.models import (
    FUNCTION_NAME_PATTERN,
    MAX_FUNCTION_NAME_LENGTH,
    FunctionDeclaration,
    ParamSchema,
    SchemaType,
)
from mcpbridge.core.schema.translator import resolve_type, translate_properties, translate_schema

__all__ = [
    "FUNCTION_NAME_PATTERN",
    "MAX_FUNCTION_NAME_LENGTH",
    "FunctionDeclaration",
    "ParamSchema",
    "SchemaType",
    "resolve_type",
    "translate_properties",
    "translate_schema",
]
