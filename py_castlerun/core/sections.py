"""
Section management for multi-section carving.

Sections divide a grid into independent rectangular areas, each carved
separately with its own target floor count. Miners cannot cross section
boundaries but may break walls lying on them; only the grid border is hard.
"""

import math
from dataclasses import dataclass
from typing import List

from .models import Position


@dataclass
class Section:
    """Rectangular section of the grid (inclusive bounds)."""

    id: str  # "sx,sy", "0,0" is top-left
    min_x: int
    max_x: int
    min_y: int
    max_y: int
    target_floor_count: int

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1

    @property
    def area(self) -> int:
        return self.width * self.height


def create_sections(
    width: int,
    height: int,
    sections_x: int,
    sections_y: int,
    target_percentage: float,
) -> List[Section]:
    """
    Divide a grid into sections_x columns by sections_y rows of sections.

    The last section in each dimension absorbs the remainder tiles.

    Args:
        width: Total grid width
        height: Total grid height
        sections_x: Number of sections horizontally
        sections_y: Number of sections vertically
        target_percentage: Target floor percentage applied to each section

    Returns:
        Sections ordered left-to-right, top-to-bottom
    """
    sections = []

    section_width = width // sections_x
    section_height = height // sections_y

    for sy in range(sections_y):
        for sx in range(sections_x):
            min_x = sx * section_width
            min_y = sy * section_height
            max_x = width - 1 if sx == sections_x - 1 else (sx + 1) * section_width - 1
            max_y = height - 1 if sy == sections_y - 1 else (sy + 1) * section_height - 1

            section_tiles = (max_x - min_x + 1) * (max_y - min_y + 1)
            target_floor_count = math.floor(section_tiles * (target_percentage / 100))

            sections.append(
                Section(
                    id=f"{sx},{sy}",
                    min_x=min_x,
                    max_x=max_x,
                    min_y=min_y,
                    max_y=max_y,
                    target_floor_count=target_floor_count,
                )
            )

    return sections


def single_section(width: int, height: int, target_percentage: float) -> Section:
    """The whole grid as one section (the unsectioned case)."""
    return Section(
        id="0,0",
        min_x=0,
        max_x=width - 1,
        min_y=0,
        max_y=height - 1,
        target_floor_count=math.floor(width * height * (target_percentage / 100)),
    )


def is_in_section(pos: Position, section: Section) -> bool:
    return section.min_x <= pos.x <= section.max_x and section.min_y <= pos.y <= section.max_y


def is_on_grid_border(pos: Position, width: int, height: int) -> bool:
    """Hard border: never breakable."""
    return pos.x == 0 or pos.x == width - 1 or pos.y == 0 or pos.y == height - 1


def is_on_section_boundary(pos: Position, section: Section) -> bool:
    """Soft border: miners stop here but may break walls on it."""
    return (
        pos.x == section.min_x
        or pos.x == section.max_x
        or pos.y == section.min_y
        or pos.y == section.max_y
    )
