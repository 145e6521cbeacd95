"""Markov chain-based name generator.

Names are built syllable by syllable: a chain maps every syllable to the
syllables that followed it in the source names, with "" as the start and
end token.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from .alea_prng import AleaPRNG

# Leading consonants, a vowel group and one consonant when another follows
_SYLLABLE = re.compile(r"[^aeiouy]*[aeiouy]+(?:[^aeiouy](?=[^aeiouy]))?")


@dataclass
class MarkovChain:
    """Markov chain for name generation."""

    data: Dict[str, List[str]]

    @classmethod
    def from_names(cls, names: List[str]) -> MarkovChain:
        """Build a Markov chain from a list of names."""
        chain: Dict[str, List[str]] = {}

        for name in names:
            if not name:
                continue

            syllables = cls._split_into_syllables(name.lower())

            prev = ""  # Start token
            for syllable in syllables:
                chain.setdefault(prev, []).append(syllable)
                prev = syllable

            chain.setdefault(prev, []).append("")  # End token

        return cls(data=chain)

    @staticmethod
    def _split_into_syllables(name: str) -> List[str]:
        """Split a name into syllables; trailing consonants join the last one."""
        if not name:
            return []

        syllables = _SYLLABLE.findall(name)
        if not syllables:
            return [name]

        consumed = sum(len(s) for s in syllables)
        syllables[-1] += name[consumed:]
        return syllables


class MarkovNameGenerator:
    """Name generator using Markov chains."""

    def __init__(self, prng: Optional[AleaPRNG] = None):
        """Initialize the generator with optional PRNG."""
        self.prng = prng or AleaPRNG(seed="default")

    def build_chain(self, names: List[str]) -> MarkovChain:
        """Build a Markov chain from a list of names."""
        return MarkovChain.from_names(names)

    def generate(
        self,
        chain: MarkovChain,
        min_length: int = 5,
        max_length: int = 12,
        duplicates: str = "",
        max_attempts: int = 20,
    ) -> str:
        """Generate a name using the Markov chain.

        Args:
            chain: The Markov chain to use
            min_length: Minimum name length
            max_length: Maximum name length
            duplicates: Letters allowed to duplicate
            max_attempts: Maximum generation attempts

        Returns:
            Generated name string
        """
        for _ in range(max_attempts):
            name = self._generate_attempt(chain, min_length, max_length)

            if name and min_length <= len(name) <= max_length:
                processed = self._process_name(name, duplicates)
                if len(processed) >= 2:
                    return processed

        return self._get_fallback_name(chain)

    def _generate_attempt(self, chain: MarkovChain, min_length: int, max_length: int) -> str:
        """Generate a single name attempt."""
        if not chain.data or "" not in chain.data:
            return ""

        result = ""
        current = ""  # Start token

        for _ in range(20):
            options = chain.data.get(current)
            if not options:
                break

            next_syllable = self.prng.choice(options)

            if next_syllable == "":  # End token
                if len(result) >= min_length:
                    break
                # Too short, restart
                current = ""
                result = ""
                continue

            if len(result) + len(next_syllable) > max_length:
                if len(result) < min_length:
                    result += next_syllable
                break

            result += next_syllable
            current = next_syllable

        return result

    def _process_name(self, name: str, duplicates: str) -> str:
        """Capitalize and drop unwanted repeated letters."""
        name = name.rstrip("' -")
        if not name:
            return ""

        result = []
        prev_char = ""

        for i, char in enumerate(name):
            if i == 0:
                result.append(char.upper())
                prev_char = char
                continue

            # Remove duplicates unless allowed
            if char == prev_char and char not in duplicates:
                continue

            # Remove three same letters in a row
            if i >= 2 and char == name[i - 1] == name[i - 2]:
                continue

            # Capitalize after space or hyphen
            if prev_char in (" ", "-"):
                result.append(char.upper())
            else:
                result.append(char)
            prev_char = char

        return "".join(result)

    def _get_fallback_name(self, chain: MarkovChain) -> str:
        """Get a fallback name from the chain data."""
        all_syllables = sorted({s for syllables in chain.data.values() for s in syllables if s})

        if all_syllables:
            return self.prng.choice(all_syllables).capitalize()

        return "Unnamed"
