"""Tests for pattern stamping."""

import pytest

from gridmenu.display.grid import Color, GridSurface, Item
from gridmenu.errors import InvalidArgument
from gridmenu.menu.pattern import Pattern, clone_item


def surface(size=27, width=9):
    return GridSurface(owner=None, size=size, width=width)


class TestPatternSet:
    def test_set_returns_pattern(self):
        pattern = Pattern("X")
        assert pattern.set("X", Item("A")) is pattern

    def test_set_string_becomes_item(self):
        pattern = Pattern("X").set("X", "#")
        assert pattern.glyphs["X"] == Item("#")

    def test_set_rejects_multi_char_symbol(self):
        with pytest.raises(InvalidArgument):
            Pattern("XX").set("XX", Item("A"))


class TestPatternApply:
    def test_fills_first_row(self, item_a):
        grid = surface()
        Pattern("XXXXXXXXX").set("X", item_a).apply(grid)

        assert all(grid[i] == item_a for i in range(9))
        assert all(grid[i] is None for i in range(9, 27))

    def test_row_col_maps_to_linear_index(self, item_a):
        grid = surface()
        Pattern("", "  X").set("X", item_a).apply(grid)

        assert grid[9 + 2] == item_a
        assert sum(1 for c in grid.cells if c is not None) == 1

    def test_unmapped_characters_are_skipped(self, item_a):
        grid = surface()
        grid.set_cell(1, Item("keep"))
        Pattern("X?X").set("X", item_a).apply(grid)

        assert grid[0] == item_a
        assert grid[1] == Item("keep")
        assert grid[2] == item_a

    def test_stamps_are_fresh_clones(self, item_a):
        grid = surface()
        Pattern("XX").set("X", item_a).apply(grid)

        assert grid[0] is not item_a
        assert grid[0] is not grid[1]
        grid[0].symbol = "changed"
        assert item_a.symbol == "A"

    def test_rows_past_surface_are_ignored(self, item_a):
        grid = surface(size=9)
        Pattern("X", "X", "X").set("X", item_a).apply(grid)

        assert grid[0] == item_a
        assert len(grid.cells) == 9

    def test_columns_past_width_are_ignored(self, item_a):
        grid = surface(size=27)
        Pattern("XXXXXXXXXXXX").set("X", item_a).apply(grid)

        assert all(grid[i] == item_a for i in range(9))
        assert grid[9] is None

    def test_later_pattern_overwrites_earlier(self, item_a, item_b):
        grid = surface()
        Pattern("XXX").set("X", item_a).apply(grid)
        Pattern(" Y").set("Y", item_b).apply(grid)

        assert [grid[0], grid[1], grid[2]] == [item_a, item_b, item_a]

    def test_uses_surface_width(self, item_a):
        grid = surface(size=9, width=3)
        Pattern("", "X").set("X", item_a).apply(grid)

        assert grid[3] == item_a


class TestCloneItem:
    def test_uses_clone_method(self):
        item = Item("A", Color.RED)
        copy = clone_item(item)
        assert copy == item and copy is not item

    def test_falls_back_to_deepcopy(self):
        original = {"name": "sword", "tags": ["sharp"]}
        copy = clone_item(original)
        copy["tags"].append("blunt")
        assert original["tags"] == ["sharp"]
