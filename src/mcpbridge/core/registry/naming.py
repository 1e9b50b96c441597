"""Function-name derivation for discovered tools."""

from __future__ import annotations

import re

from mcpbridge.core.schema.models import MAX_FUNCTION_NAME_LENGTH

_INVALID_CHARS = re.compile(r"[^A-Za-z0-9_]")
_VALID_START = re.compile(r"^[A-Za-z_]")


def sanitize(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_]`` with ``_``."""
    return _INVALID_CHARS.sub("_", name)


def derive_function_name(server_name: str, tool_name: str) -> str:
    """Build ``<server>_<tool>`` as a valid identifier of at most 63 chars.

    >>> derive_function_name("docs-1", "search")
    'docs_1_search'
    >>> derive_function_name("1st", "x")
    '_1st_x'
    """
    name = f"{sanitize(server_name)}_{sanitize(tool_name)}"[:MAX_FUNCTION_NAME_LENGTH]
    if not _VALID_START.match(name):
        name = f"_{name}"[:MAX_FUNCTION_NAME_LENGTH]
    return name
