"""Tests for block tree model"""

import json

import pytest
from blocks2rego.core.block import Block, BlockType, Workspace, load_workspace
from blocks2rego.core.errors import GenerationError, MalformedBlockError


SAMPLE = {
    "type": "controls_if",
    "id": "if1",
    "values": {
        "IF0": {
            "type": "logic_compare",
            "id": "cmp",
            "fields": {"OP": "LT"},
            "values": {
                "A": {"type": "variables_get", "id": "a", "fields": {"VAR": "a"}},
                "B": None,
            },
        },
    },
    "statements": {
        "DO0": {
            "type": "text_print",
            "id": "p1",
            "next": {"type": "text_print", "id": "p2", "comment": "second"},
        },
    },
    "next": {"type": "text_print", "id": "after"},
}


class TestBlock:
    """Test suite for Block"""

    @pytest.fixture
    def tree(self):
        return Block.from_dict(SAMPLE)

    def test_from_dict(self, tree):
        """Test the tree is built with kinds, ids and fields"""
        assert tree.type == BlockType.CONTROLS_IF
        assert tree.id == "if1"
        compare = tree.get_value("IF0")
        assert compare.type == BlockType.LOGIC_COMPARE
        assert compare.get_field("OP") == "LT"
        assert tree.get_statement("DO0").next.comment == "second"
        assert tree.next.id == "after"

    def test_parents_linked(self, tree):
        compare = tree.get_value("IF0")
        assert compare.parent is tree
        assert compare.get_value("A").parent is compare
        assert tree.next.parent is tree

    def test_has_input_for_empty_slot(self, tree):
        """Test empty slots still count as inputs"""
        compare = tree.get_value("IF0")
        assert compare.has_input("B")
        assert compare.get_value("B") is None
        assert not compare.has_input("C")
        assert tree.has_input("DO0")

    def test_output_defaults_from_kind(self):
        assert Block(BlockType.TEXT).output is True
        assert Block(BlockType.TEXT_PRINT).output is False
        assert Block(BlockType.TEXT, output=False).output is False

    def test_is_inline(self, tree):
        """Test only value blocks plugged into a parent are inline"""
        assert tree.get_value("IF0").is_inline
        assert not tree.is_inline
        assert not tree.get_statement("DO0").is_inline
        assert not Block(BlockType.MATH_NUMBER).is_inline

    def test_descendants(self, tree):
        """Test nested blocks are walked but the own next chain is not"""
        ids = [block.id for block in tree.descendants()]
        assert ids == ["if1", "cmp", "a", "p1", "p2"]

    def test_type_from_string(self):
        assert Block("text_isEmpty").type == BlockType.TEXT_IS_EMPTY

    def test_unknown_type(self):
        with pytest.raises(MalformedBlockError) as exc_info:
            Block.from_dict({"type": "math_arithmetic"})
        assert 'does not know how to generate code for block type "math_arithmetic"' in str(
            exc_info.value
        )

    def test_missing_type(self):
        with pytest.raises(GenerationError):
            Block.from_dict({"id": "x"})

    def test_generated_ids_unique(self):
        assert Block(BlockType.TEXT).id != Block(BlockType.TEXT).id

    def test_get_vars(self):
        block = Block(BlockType.PROCEDURES_DEFRETURN, mutation={"params": ["x", "y"]})
        assert block.get_vars() == ["x", "y"]
        assert Block(BlockType.PROCEDURES_CALLRETURN).get_vars() == []


class TestWorkspace:
    """Test suite for Workspace loading"""

    def test_variables_as_list(self):
        workspace = Workspace.from_dict({
            "variables": [{"id": "v1", "name": "score"}, {"name": "total"}],
        })
        assert workspace.variables == {"v1": "score", "total": "total"}

    def test_variables_as_mapping(self):
        workspace = Workspace.from_dict({"variables": {"v1": "score"}})
        assert workspace.variables == {"v1": "score"}

    def test_options_and_blocks(self):
        workspace = Workspace.from_dict({
            "blocks": [{"type": "math_number", "fields": {"NUM": 1}}],
            "options": {"oneBasedIndex": False},
        })
        assert len(workspace.top_blocks) == 1
        assert workspace.options.one_based_index is False

    def test_not_an_object(self):
        with pytest.raises(MalformedBlockError):
            Workspace.from_dict([])

    def test_variable_without_name(self):
        with pytest.raises(MalformedBlockError, match="Variable must be an object"):
            Workspace.from_dict({"variables": [{"id": "v1"}]})

    def test_unknown_option(self):
        """Test bad options surface as a block error, not a bare ValueError"""
        with pytest.raises(MalformedBlockError, match="Unknown generator option"):
            Workspace.from_dict({"options": {"colour": "red"}})

    def test_load_workspace(self, tmp_path):
        path = tmp_path / "workspace.json"
        path.write_text(json.dumps({"blocks": [SAMPLE]}))
        workspace = load_workspace(path)
        assert workspace.top_blocks[0].id == "if1"

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_workspace(tmp_path / "missing.json")

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(MalformedBlockError):
            load_workspace(path)
