"""
Error types raised by the world generation pipeline.

ConfigurationError signals bad caller input and is expected in production
(the caller retries with adjusted parameters). InvariantViolation signals a
bug in the generator itself and should never be seen in a correct run.
"""


class WorldGenError(Exception):
    """Base class for all world generation failures."""


class ConfigurationError(WorldGenError, ValueError):
    """Invalid dimensions, region count or option ranges."""


class InvariantViolation(WorldGenError, AssertionError):
    """A structural guarantee of the generated world does not hold."""
