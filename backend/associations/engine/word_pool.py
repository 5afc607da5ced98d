import random
from typing import Iterable, List, Optional

# Two refills give three passes through the word list
MAX_REFILLS = 2


class WordPool:
    """Words still available in the current pass.

    ``draw`` picks uniformly at random without consuming anything, so a
    skipped word may come up again. Only ``remove`` shrinks the pool. The
    random source is anything with ``randrange(n)``; pass a seeded
    ``random.Random`` for a repeatable draw order.
    """

    def __init__(self, words: Iterable[str], rng=None):
        self._full: List[str] = list(words)
        self._remaining: List[str] = list(self._full)
        self.passes_completed = 0
        self._rng = rng if rng is not None else random.Random()

    def __len__(self) -> int:
        return len(self._remaining)

    @property
    def remaining(self) -> List[str]:
        return list(self._remaining)

    def draw(self) -> Optional[str]:
        """Return a random remaining word, or None when the pool is exhausted."""
        if not self._remaining:
            return None
        return self._remaining[self._rng.randrange(len(self._remaining))]

    def remove(self, word: str) -> None:
        """Remove exactly one occurrence of ``word``."""
        self._remaining.remove(word)

    def is_exhausted(self) -> bool:
        return not self._remaining

    def can_refill(self) -> bool:
        return self.passes_completed < MAX_REFILLS

    def refill(self) -> None:
        self._remaining = list(self._full)
        self.passes_completed += 1
