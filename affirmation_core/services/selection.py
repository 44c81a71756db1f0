"""
Random selection with immediate-repetition avoidance.

Pure functions over an in-memory candidate list; no I/O. The caller
decides what "the last shown id" is and passes it as ``exclude_id``.
"""

import random
from operator import attrgetter
from typing import Callable, Optional, Sequence, TypeVar

T = TypeVar("T")

_get_id = attrgetter("id")


def select_affirmation(
    candidates: Sequence[T],
    exclude_id: Optional[str] = None,
    rng: Optional[random.Random] = None,
    get_id: Callable[[T], str] = _get_id,
) -> Optional[T]:
    """Pick one candidate uniformly at random.

    - no candidates: ``None``
    - a single candidate: that candidate, even when it is ``exclude_id``
    - otherwise uniform over the candidates whose id is not ``exclude_id``
      (over all of them when ``exclude_id`` is not present)
    """
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]

    chooser = rng if rng is not None else random
    pool = candidates
    if exclude_id is not None:
        pool = [c for c in candidates if get_id(c) != exclude_id] or candidates
    return chooser.choice(pool)


class RandomSelector:
    """``select_affirmation`` bound to one random source.

    Pass a seeded ``random.Random`` for reproducible sequences.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    def select(
        self,
        candidates: Sequence[T],
        exclude_id: Optional[str] = None,
        get_id: Callable[[T], str] = _get_id,
    ) -> Optional[T]:
        return select_affirmation(candidates, exclude_id=exclude_id, rng=self._rng, get_id=get_id)
