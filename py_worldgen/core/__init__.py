"""
Core world generation functionality.
"""

from .errors import ConfigurationError, InvariantViolation, WorldGenError
from .pipeline import WorldGenOptions, generate_world, generate_world_dict
from .region import Region
from .terrain import LAND, OCEAN
from .world_map import WorldMap

__all__ = ['ConfigurationError', 'InvariantViolation', 'WorldGenError',
           'WorldGenOptions', 'generate_world', 'generate_world_dict',
           'Region', 'WorldMap', 'LAND', 'OCEAN']
