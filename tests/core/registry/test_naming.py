"""Tests for function-name derivation."""

from __future__ import annotations

from mcpbridge.core.registry.naming import derive_function_name, sanitize
from mcpbridge.core.schema.models import FUNCTION_NAME_PATTERN


class TestSanitize:
    def test_replaces_invalid_characters(self) -> None:
        assert sanitize("my server.v2/beta") == "my_server_v2_beta"

    def test_keeps_valid_characters(self) -> None:
        assert sanitize("Abc_123") == "Abc_123"

    def test_non_ascii(self) -> None:
        assert sanitize("café") == "caf_"


class TestDeriveFunctionName:
    def test_server_prefix(self) -> None:
        assert derive_function_name("docs-1", "search") == "docs_1_search"

    def test_leading_digit_prefixed(self) -> None:
        assert derive_function_name("1st", "x") == "_1st_x"

    def test_truncated_to_63(self) -> None:
        name = derive_function_name("s" * 40, "t" * 40)
        assert len(name) == 63
        assert name == ("s" * 40 + "_" + "t" * 40)[:63]

    def test_prefix_then_truncate(self) -> None:
        name = derive_function_name("9" * 70, "tool")
        assert len(name) == 63
        assert name.startswith("_9")

    def test_always_valid(self) -> None:
        for server, tool in [("", ""), ("-", "-"), ("a b", "c/d"), ("∑", "é")]:
            assert FUNCTION_NAME_PATTERN.match(derive_function_name(server, tool))

    def test_deterministic(self) -> None:
        assert derive_function_name("docs", "read") == derive_function_name("docs", "read")
