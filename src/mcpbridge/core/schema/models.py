"""Function-calling schema dialect — the strict form the LLM accepts.

Types are upper-case tags (``OBJECT``, ``STRING``, ...) and only a small
subset of JSON Schema keywords survives: ``description``, ``enum`` (strings
only), ``items``, ``properties`` and ``required``.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

FUNCTION_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")
MAX_FUNCTION_NAME_LENGTH = 63


class SchemaType(str, Enum):
    """Parameter types understood by the function-calling interface."""

    STRING = "STRING"
    NUMBER = "NUMBER"
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    ARRAY = "ARRAY"
    OBJECT = "OBJECT"


class ParamSchema(BaseModel):
    """One node of a function parameter schema."""

    model_config = ConfigDict(frozen=True)

    type: SchemaType
    description: str | None = None
    enum: list[str] | None = None
    items: ParamSchema | None = None
    properties: dict[str, ParamSchema] | None = None
    required: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Dump in the function-calling dialect, omitting unset keywords."""
        return self.model_dump(mode="json", exclude_none=True)

    def to_json_schema(self) -> dict[str, Any]:
        """Render as plain JSON Schema (lower-case type names).

        Used for OpenAI-style ``tools`` payloads, which expect JSON Schema
        rather than the upper-case dialect.
        """
        result: dict[str, Any] = {"type": self.type.value.lower()}
        if self.description is not None:
            result["description"] = self.description
        if self.enum is not None:
            result["enum"] = list(self.enum)
        if self.items is not None:
            result["items"] = self.items.to_json_schema()
        if self.properties is not None:
            result["properties"] = {
                key: prop.to_json_schema() for key, prop in self.properties.items()
            }
        if self.required is not None:
            result["required"] = list(self.required)
        return result


class FunctionDeclaration(BaseModel):
    """The LLM-facing description of one callable capability.

    ``parameters`` is always an ``OBJECT`` schema carrying a ``properties``
    map, possibly empty.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: ParamSchema

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not FUNCTION_NAME_PATTERN.match(value):
            msg = f"invalid function name {value!r}"
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def _check_parameters(self) -> FunctionDeclaration:
        if self.parameters.type is not SchemaType.OBJECT or self.parameters.properties is None:
            msg = "function parameters must be an OBJECT schema with properties"
            raise ValueError(msg)
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters.to_dict(),
        }

    def to_openai_tool(self) -> dict[str, Any]:
        """Render as an OpenAI-compatible ``tools`` entry."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters.to_json_schema(),
            },
        }
