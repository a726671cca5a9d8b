"""
tests/test_world_model.py

Unit tests for the world model: literals, formulas, positions and world
definitions.
"""

import pytest

from blockarm_exceptions import InvalidLiteralError, WorldDefinitionError
from component_29_world_model import (
    Literal,
    ObjectDefinition,
    Position,
    WorldState,
    find_position,
    formula_objects,
    load_world,
    parse_formula,
    parse_literal,
    stringify_formula,
    stringify_literal,
    world_from_dict,
)


def minimal_world(**overrides):
    data = {
        "arm": 0,
        "holding": None,
        "stacks": [["a"], []],
        "objects": {"a": {"form": "brick", "size": "small", "color": "red"}},
    }
    data.update(overrides)
    return data


# ==================== Literal Tests ====================


class TestLiterals:
    """Test literal construction and the textual syntax."""

    def test_args_normalised_to_tuple(self):
        literal = Literal("ontop", ["a", "b"])

        assert literal.args == ("a", "b")
        assert literal == Literal("ontop", ("a", "b"))

    def test_unknown_relation(self):
        with pytest.raises(InvalidLiteralError):
            Literal("near", ("a", "b"))

    def test_wrong_arity(self):
        with pytest.raises(InvalidLiteralError):
            Literal("holding", ("a", "b"))
        with pytest.raises(InvalidLiteralError):
            Literal("ontop", ("a",))

    def test_polarity(self):
        literal = Literal("ontop", ("a", "b"), polarity=False)

        assert literal.polarity is False
        assert literal != Literal("ontop", ("a", "b"))

    def test_stringify(self):
        assert stringify_literal(Literal("ontop", ("a", "floor"))) == "ontop(a,floor)"
        assert str(Literal("holding", ("a",), polarity=False)) == "-holding(a)"

    def test_parse_literal(self):
        assert parse_literal(" - ontop( a , b ) ") == Literal(
            "ontop", ("a", "b"), polarity=False
        )

    def test_parse_rejects_garbage(self):
        with pytest.raises(InvalidLiteralError):
            parse_literal("ontop a b")

    def test_parse_formula(self):
        formula = parse_formula("ontop(a,b) & holding(c) | leftof(a,b)")

        assert formula == [
            [Literal("ontop", ("a", "b")), Literal("holding", ("c",))],
            [Literal("leftof", ("a", "b"))],
        ]
        assert stringify_formula(formula) == "ontop(a,b) & holding(c) | leftof(a,b)"

    def test_parse_empty_formula(self):
        with pytest.raises(InvalidLiteralError):
            parse_formula("  ")

    def test_formula_objects(self):
        formula = parse_formula("ontop(a,floor) & inside(b,a) | holding(c)")

        assert formula_objects(formula) == ["a", "b", "c"]


# ==================== Position Tests ====================


class TestPositions:
    def test_find_position(self):
        stacks = [["a", "b"], [], ["c"]]

        assert find_position("b", stacks) == Position(0, 1)
        assert find_position("c", stacks) == Position(2, 0)
        assert find_position("z", stacks) is None
        assert find_position("floor", stacks) is None


# ==================== World Definition Tests ====================


class TestWorldDefinitions:
    """Test building and validating worlds."""

    def test_world_from_dict(self):
        world = world_from_dict(minimal_world(holding=None, arm=1))

        assert world.stacks == [["a"], []]
        assert world.arm == 1
        assert world.columns == 2
        assert world.objects["a"] == ObjectDefinition("brick", "small", "red")

    def test_object_ids_include_held_object(self):
        world = WorldState(stacks=[["a"], ["b"]], holding="c")

        assert world.object_ids() == ["a", "b", "c"]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"arm": 2},
            {"arm": "left"},
            {"stacks": []},
            {"stacks": [["a"], ["a"]]},
            {"stacks": [["a", "z"]]},
            {"holding": "a"},
            {"objects": {"a": {"form": "brick"}}},
        ],
    )
    def test_invalid_definitions(self, overrides):
        with pytest.raises(WorldDefinitionError):
            world_from_dict(minimal_world(**overrides), source="test")

    def test_floor_is_reserved(self):
        data = minimal_world()
        data["objects"]["floor"] = {"form": "brick", "size": "small"}

        with pytest.raises(WorldDefinitionError):
            world_from_dict(data)

    def test_missing_key(self):
        with pytest.raises(WorldDefinitionError) as exc_info:
            world_from_dict({"stacks": [[]]}, source="inline")

        assert exc_info.value.context["source"] == "inline"

    def test_not_a_mapping(self):
        with pytest.raises(WorldDefinitionError):
            world_from_dict([["a"]])


class TestLoadWorld:
    """Test loading worlds from YAML files."""

    def test_bundled_small_world(self):
        world = load_world("small")

        assert world.columns == 5
        assert world.stacks[1] == ["g", "l"]
        assert world.holding is None
        assert len(world.objects) == 13
        assert world.objects["k"] == ObjectDefinition("box", "large", "yellow")

    def test_load_from_path(self, tmp_path):
        path = tmp_path / "tiny.yaml"
        path.write_text(
            "arm: 0\nstacks:\n  - [a]\n  - []\nobjects:\n"
            "  a: {form: ball, size: small, color: black}\n",
            encoding="utf-8",
        )

        world = load_world(path)

        assert world.stacks == [["a"], []]

    def test_missing_file(self, tmp_path):
        with pytest.raises(WorldDefinitionError):
            load_world(tmp_path / "nowhere.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("stacks: [[a\n", encoding="utf-8")

        with pytest.raises(WorldDefinitionError) as exc_info:
            load_world(path)

        assert exc_info.value.original_exception is not None
