"""
Name generation system using Markov chains.

Region names are generated from cultural name bases. Land regions use the
base name directly or with a country-style suffix, sea regions are wrapped
in a maritime pattern such as "Sea of X" or "X Bay".
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .alea_prng import AleaPRNG
from .markov_name_generator import MarkovChain, MarkovNameGenerator

SEA_PATTERNS = ["Sea of {}", "{} Sea", "{} Bay", "Gulf of {}", "{} Sound", "{} Deep"]

LAND_SUFFIXES = ["ia", "land", "mark", "or"]

ROMAN_NUMERALS = [
    (1000, "M"),
    (900, "CM"),
    (500, "D"),
    (400, "CD"),
    (100, "C"),
    (90, "XC"),
    (50, "L"),
    (40, "XL"),
    (10, "X"),
    (9, "IX"),
    (5, "V"),
    (4, "IV"),
    (1, "I"),
]


def to_roman(number: int) -> str:
    """Roman numeral for a positive integer."""
    result = []
    for value, numeral in ROMAN_NUMERALS:
        while number >= value:
            result.append(numeral)
            number -= value
    return "".join(result)


class NameBase(BaseModel):
    """Configuration for a cultural naming pattern."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Name of the name base")
    i: int = Field(description="Index identifier")
    min: int = Field(description="Minimum name length")
    max: int = Field(description="Maximum name length")
    d: str = Field(default="", description="Allowed duplicate letters")
    b: str = Field(description="Base names (comma-separated)")

    def get_names_list(self) -> List[str]:
        """Extract names as a list."""
        return [name.strip() for name in self.b.split(",") if name.strip()]


class NameGenerator:
    """Main name generator using Markov chains."""

    def __init__(self, prng: Optional[AleaPRNG] = None):
        """Initialize name generator with optional PRNG for deterministic generation."""
        self.prng = prng or AleaPRNG(seed="default")
        self.markov = MarkovNameGenerator(self.prng)
        self.name_bases: Dict[int, NameBase] = {}
        self.chains: Dict[int, Optional[MarkovChain]] = {}
        self._load_default_name_bases()

    def _load_default_name_bases(self) -> None:
        from .name_bases import load_default_name_bases

        load_default_name_bases(self)

    def reseed(self, prng: AleaPRNG) -> None:
        """Switch to another PRNG, keeping the built chains."""
        self.prng = prng
        self.markov.prng = prng

    def add_name_base(self, name_base: NameBase) -> None:
        """Add a new name base configuration."""
        self.name_bases[name_base.i] = name_base
        self.chains[name_base.i] = None  # Clear cached chain

    def _get_chain(self, base_id: int) -> Optional[MarkovChain]:
        """Get or build the Markov chain for a base."""
        if self.chains.get(base_id) is None:
            names = self.name_bases[base_id].get_names_list()
            self.chains[base_id] = self.markov.build_chain(names) if names else None
        return self.chains[base_id]

    def base_for(self, key: int) -> int:
        """Name base id for an arbitrary non-negative key."""
        ids = sorted(self.name_bases)
        return ids[key % len(ids)]

    def generate_base_name(
        self,
        base_id: int,
        min_length: Optional[int] = None,
        max_length: Optional[int] = None,
    ) -> str:
        """Generate a name using a specific name base.

        Args:
            base_id: ID of the name base to use
            min_length: Minimum name length (overrides base default)
            max_length: Maximum name length (overrides base default)

        Returns:
            Generated name string
        """
        if base_id not in self.name_bases:
            base_id = self.base_for(base_id)

        name_base = self.name_bases[base_id]
        chain = self._get_chain(base_id)
        if chain is None:
            return "Unnamed"

        return self.markov.generate(
            chain, min_length or name_base.min, max_length or name_base.max, name_base.d
        )

    def generate_region_name(self, base_id: int, is_land: bool) -> str:
        """Generate a name for a land or sea region."""
        if not is_land:
            base_name = self.generate_base_name(base_id, max_length=9)
            return self.prng.choice(SEA_PATTERNS).format(base_name)

        base_name = self.generate_base_name(base_id)
        if self.prng.random() < 0.3:
            suffix = self.prng.choice(LAND_SUFFIXES)
            if len(base_name) > 7:
                base_name = base_name[:5]
            base_name = self._add_suffix(base_name, suffix)
        return base_name

    def _add_suffix(self, name: str, suffix: str) -> str:
        """Add a suffix to a name, handling vowel conflicts."""
        if not name or not suffix:
            return name + suffix

        # If both end and start with vowels, remove final vowel
        if name[-1].lower() in "aeiou" and suffix[0].lower() in "aeiou":
            name = name[:-1]

        return name + suffix
