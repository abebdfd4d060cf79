"""Exceptions raised by the generation stages."""


class MapGenerationError(Exception):
    """Base class for all generation failures."""


class ConfigurationError(MapGenerationError, ValueError):
    """Stage configuration violates a hard constraint. Raised before any mutation."""


class ResourceExhaustionError(MapGenerationError):
    """The grid does not hold enough suitable tiles for the requested placements."""


class NoValidMovesError(MapGenerationError):
    """The single-section miner ran out of moves before reaching its target."""
