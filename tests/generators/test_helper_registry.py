"""Tests for helper function registry"""

import pytest
from blocks2rego.core.generation_logger import GenerationKind, GenerationLogger
from blocks2rego.generators.helper_registry import (
    FUNCTION_NAME_PLACEHOLDER, HELPER_KEY_PREFIX, HelperRegistry,
)
from blocks2rego.generators.naming import NameDatabase, NameType


TEMPLATE = [
    f"function {FUNCTION_NAME_PLACEHOLDER}(text) {{",
    "  if (text) {",
    "    return text;",
    "  }",
    "}",
]


class TestHelperRegistry:
    """Test suite for HelperRegistry"""

    @pytest.fixture
    def definitions(self):
        return {}

    @pytest.fixture
    def names(self):
        return NameDatabase()

    @pytest.fixture
    def registry(self, definitions, names):
        return HelperRegistry(definitions, names)

    def test_initial_state(self, registry, definitions):
        """Test initial empty state"""
        assert not registry.contains("textEcho")
        assert definitions == {}

    def test_provide_function_substitutes_name(self, registry, definitions):
        """Test the placeholder is replaced by the allocated name"""
        name = registry.provide_function("textEcho", TEMPLATE)
        assert name == "textEcho"
        text = definitions[HELPER_KEY_PREFIX + "textEcho"]
        assert text.startswith("function textEcho(text) {\n")
        assert FUNCTION_NAME_PLACEHOLDER not in text

    def test_provide_function_deduplicates(self, registry, definitions):
        """Test repeated requests reuse the first definition"""
        first = registry.provide_function("textEcho", TEMPLATE)
        second = registry.provide_function("textEcho", ["ignored"])
        assert first == second
        assert len(definitions) == 1

    def test_name_avoids_user_names(self, registry, names, definitions):
        """Test helpers never take a name already in use"""
        assert names.get_name("textEcho", NameType.PROCEDURE) == "textEcho"
        assert registry.provide_function("textEcho", TEMPLATE) == "textEcho2"
        assert "function textEcho2(text) {" in definitions[HELPER_KEY_PREFIX + "textEcho"]

    def test_user_name_avoids_helper(self, registry, names):
        """Test names allocated after a helper avoid it"""
        registry.provide_function("textEcho", TEMPLATE)
        assert names.get_name("textEcho", NameType.PROCEDURE) == "textEcho2"

    def test_key_is_namespaced(self, registry, definitions):
        """Test helper keys cannot collide with procedure keys"""
        definitions["%textEcho"] = "user procedure"
        registry.provide_function("textEcho", TEMPLATE)
        assert definitions["%textEcho"] == "user procedure"
        assert HELPER_KEY_PREFIX + "textEcho" in definitions

    def test_reindent(self, definitions, names):
        """Test two-space template indents follow the configured indent"""
        registry = HelperRegistry(definitions, names, indent="\t")
        registry.provide_function("textEcho", TEMPLATE)
        text = definitions[HELPER_KEY_PREFIX + "textEcho"]
        assert text.split("\n") == [
            "function textEcho(text) {",
            "\tif (text) {",
            "\t\treturn text;",
            "\t}",
            "}",
        ]

    def test_contains(self, registry):
        """Test contains reflects provided helpers"""
        assert registry.contains("textEcho") is False
        registry.provide_function("textEcho", TEMPLATE)
        assert registry.contains("textEcho") is True

    def test_clear(self, registry, definitions):
        """Test clearing drops helper definitions only"""
        definitions["%proc"] = "user procedure"
        registry.provide_function("textEcho", TEMPLATE)
        registry.clear()
        assert not registry.contains("textEcho")
        assert definitions == {"%proc": "user procedure"}

    def test_helper_logged(self, definitions, names):
        """Test each emitted helper is logged once"""
        logger = GenerationLogger()
        registry = HelperRegistry(definitions, names, logger=logger)
        registry.provide_function("textEcho", TEMPLATE)
        registry.provide_function("textEcho", TEMPLATE)
        assert len(logger.get_records(GenerationKind.HELPER)) == 1
