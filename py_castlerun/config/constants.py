"""Hard limits and recommendations enforced by the stage validators."""

GRID_CONSTRAINTS = {
    "MATHEMATICAL_MIN_SIZE": 7,  # Hard minimum, prevents degenerate grids
    "RECOMMENDED_MIN_SIZE": 50,
    "MATHEMATICAL_MAX_PERCENT": 75,  # Geometric ceiling of the no-2x2 rule
    "ALLOWED_MAX_PERCENT": 70,  # Hard limit
    "RECOMMENDED_MAX_PERCENT": 50,
}

SECTION_CONSTRAINTS = {
    "MIN_SECTION_SIZE": 10,
    "RECOMMENDED_SECTION_SIZE": 50,
}

BIOME_CONSTRAINTS = {
    "MAX_RECOMMENDED_CENTERS": 100,
    "MAX_LISTED_UNASSIGNED": 10,  # Validation lists this many offenders individually
}
