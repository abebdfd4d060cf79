"""Tests for grid sectioning."""

from py_castlerun.core.models import Position
from py_castlerun.core.sections import (
    create_sections,
    is_in_section,
    is_on_grid_border,
    is_on_section_boundary,
    single_section,
)


class TestSections:
    """Test section layout and targets."""

    def test_layout_and_remainder(self):
        """Last row and column absorb the remainder tiles."""
        sections = create_sections(25, 20, 2, 2, 30)

        assert [s.id for s in sections] == ["0,0", "1,0", "0,1", "1,1"]

        first, second, third, fourth = sections
        assert (first.min_x, first.max_x, first.min_y, first.max_y) == (0, 11, 0, 9)
        assert (second.min_x, second.max_x) == (12, 24)
        assert (third.min_y, third.max_y) == (10, 19)
        assert second.width == 13
        assert fourth.area == 130

    def test_areas_cover_grid(self):
        sections = create_sections(25, 20, 2, 2, 30)
        assert sum(s.area for s in sections) == 25 * 20

    def test_targets_are_floored(self):
        sections = create_sections(25, 20, 2, 2, 30)

        assert sections[0].target_floor_count == 36
        assert sections[1].target_floor_count == 39

    def test_single_section(self):
        section = single_section(10, 10, 30)

        assert section.id == "0,0"
        assert section.area == 100
        assert section.target_floor_count == 30

    def test_membership(self):
        section = create_sections(20, 20, 2, 1, 30)[1]

        assert is_in_section(Position(10, 0), section)
        assert not is_in_section(Position(9, 5), section)
        assert is_on_section_boundary(Position(10, 5), section)
        assert not is_on_section_boundary(Position(15, 5), section)

    def test_grid_border(self):
        assert is_on_grid_border(Position(0, 5), 20, 20)
        assert is_on_grid_border(Position(5, 19), 20, 20)
        assert not is_on_grid_border(Position(10, 5), 20, 20)
