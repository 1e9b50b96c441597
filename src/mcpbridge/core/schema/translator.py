"""Schema translation — provider JSON Schema to the function-calling dialect.

Tool providers describe their inputs with (roughly) JSON Schema draft
syntax.  The LLM accepts a much narrower dialect, so translation is lossy
by nature.  Every function here is total: anything that cannot be expressed
is dropped and logged, never raised.

Rules:

- A boolean schema, or one whose only type is ``"null"``, maps to nothing.
- ``type: [..]`` resolves to the first non-null alternative.
- Object properties are translated independently; untranslatable ones are
  omitted.  ``required`` keeps its string entries as given, even when they name a
  dropped property.
- Array ``items`` is translated only when it is a single schema object;
  tuple-style or missing ``items`` leave the array unconstrained.
- String ``enum`` values are stringified.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from mcpbridge.core.schema.models import ParamSchema, SchemaType

logger = logging.getLogger(__name__)

_TYPE_MAP: dict[str, SchemaType] = {
    "string": SchemaType.STRING,
    "number": SchemaType.NUMBER,
    "integer": SchemaType.INTEGER,
    "boolean": SchemaType.BOOLEAN,
    "array": SchemaType.ARRAY,
    "object": SchemaType.OBJECT,
}

JsonSchemaNode = bool | Mapping[str, Any]


def resolve_type(raw: Any) -> SchemaType | None:
    """Map a JSON Schema ``type`` value to a :class:`SchemaType`.

    Returns ``None`` for ``"null"``, unknown names, or a list with no
    non-null alternative.
    """
    if isinstance(raw, list):
        alternative = next((t for t in raw if t is not None and t != "null"), None)
        return resolve_type(alternative) if alternative is not None else None
    if raw is None or raw == "null":
        return None
    if isinstance(raw, str) and raw in _TYPE_MAP:
        return _TYPE_MAP[raw]
    logger.warning("[Schema Xlate] Unsupported schema type %r; skipping", raw)
    return None


def translate_schema(node: Any, *, root: bool = False) -> ParamSchema | None:
    """Translate one schema node.

    With ``root=True`` the node is a tool's whole input schema: the result
    is always an ``OBJECT``.  A non-object root degrades to an empty object
    schema (callers that need a real object reject such tools first).
    """
    if isinstance(node, bool) or not isinstance(node, Mapping):
        logger.debug("[Schema Xlate] Non-object schema %r has no parameter form", node)
        return None

    if root and node.get("type") != "object":
        logger.warning(
            "[Schema Xlate] Input schema has type %r, not 'object'; using an empty object",
            node.get("type"),
        )
        return ParamSchema(type=SchemaType.OBJECT, properties={}, required=[])

    schema_type = resolve_type(node.get("type"))
    if schema_type is None:
        return None

    fields: dict[str, Any] = {"type": schema_type}
    description = node.get("description")
    if isinstance(description, str) and description:
        fields["description"] = description

    if schema_type is SchemaType.OBJECT:
        fields["properties"] = translate_properties(node.get("properties"))
        required = node.get("required")
        if isinstance(required, list):
            names = [name for name in required if isinstance(name, str)]
            if len(names) != len(required):
                logger.warning(
                    "[Schema Xlate] Dropping non-string entries from required: %r",
                    [name for name in required if not isinstance(name, str)],
                )
            fields["required"] = names
    elif schema_type is SchemaType.ARRAY:
        items = _translate_items(node.get("items"))
        if items is not None:
            fields["items"] = items
    elif schema_type is SchemaType.STRING:
        enum = node.get("enum")
        if isinstance(enum, list):
            fields["enum"] = [_stringify(value) for value in enum]

    return ParamSchema(**fields)


def translate_properties(properties: Any) -> dict[str, ParamSchema]:
    """Translate an object's ``properties`` map, omitting what cannot map."""
    if not isinstance(properties, Mapping):
        return {}
    result: dict[str, ParamSchema] = {}
    for key, prop in properties.items():
        if isinstance(prop, bool):
            # e.g. ``"extra": true``, which is not a parameter
            continue
        translated = translate_schema(prop)
        if translated is None:
            logger.warning(
                "[Schema Xlate] Could not map type %s for property %r; skipping property",
                json.dumps(prop.get("type") if isinstance(prop, Mapping) else prop),
                key,
            )
            continue
        result[str(key)] = translated
    return result


def _translate_items(items: Any) -> ParamSchema | None:
    if items is None:
        return None
    if isinstance(items, Sequence) and not isinstance(items, str):
        logger.warning(
            "[Schema Xlate] Tuple-style 'items' is not supported; items will be generic"
        )
        return None
    if not isinstance(items, Mapping):
        logger.warning("[Schema Xlate] Unsupported 'items' schema; items will be generic")
        return None
    translated = translate_schema(items)
    if translated is None:
        logger.warning("[Schema Xlate] 'items' has an unmappable type; items will be generic")
    return translated


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)
