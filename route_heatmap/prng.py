"""
Mulberry32 pseudo-random generator.

A tiny 32-bit generator with a single word of state. It is used where the
synthetic output has to look random but stay identical across runs: the
same seed always yields the same sequence. Not suitable for anything
security related.
"""

from typing import List, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    """32-bit integer multiply, low word only."""
    return (a * b) & _MASK32


class Mulberry32:
    """Seedable generator exposing the subset of random.Random used here."""

    def __init__(self, seed: int):
        self.state = int(seed) & _MASK32
        self.call_count = 0

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        self.state = (self.state + 0x6D2B79F5) & _MASK32
        s = self.state
        t = _imul(s ^ (s >> 15), 1 | s)
        t ^= (t + _imul(t ^ (t >> 7), 61 | t)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296.0

    def shuffle(self, items: List[T]) -> None:
        """Shuffle a list in place (Fisher-Yates, last element first)."""
        for i in range(len(items) - 1, 0, -1):
            j = int(self.random() * (i + 1))
            items[i], items[j] = items[j], items[i]


def combine_seed(base: int, *parts: int) -> int:
    """Fold integer parts into a base seed with 32-bit XOR."""
    seed = base & _MASK32
    for part in parts:
        seed ^= int(part) & _MASK32
    return seed
