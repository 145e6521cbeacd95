"""
Random number generation utilities.

All randomness in mapgen comes from the Alea PRNG. Instead of one global
generator, each pipeline stage derives its own stream from the world seed
and a stage tag. Python's random and NumPy's random are not used, so the
same seed yields the same world on every platform.
"""

from ..core.alea_prng import AleaPRNG
from ..core.errors import ConfigurationError

MAX_SEED = 2**64 - 1


def stage_prng(seed: int, stage: str) -> AleaPRNG:
    """
    Create the PRNG for one generation stage.

    Args:
        seed: World seed (unsigned 64-bit)
        stage: Stage tag, e.g. "heightmap" or "provinces"

    Returns:
        Fresh AleaPRNG instance
    """
    if seed < 0 or seed > MAX_SEED:
        raise ConfigurationError(f"Seed must be an unsigned 64-bit integer, got {seed}")
    return AleaPRNG([str(seed), stage])
