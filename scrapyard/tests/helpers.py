"""
Shared test helpers: a scripted random source and a tile search.
"""

import random
from typing import Callable

from ..engine_core.state import Position


class ScriptedRandom(random.Random):
    """
    Random source whose random() always returns the same value.

    Integer draws (randint, choice, randrange) still come from the seeded
    generator. Copies share the instance, so a cloned state keeps the script.
    """

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value

    def getrandbits(self, k):
        return super().getrandbits(k)

    def __deepcopy__(self, memo):
        return self


def find_tile(
    predicate: Callable[[Position], bool],
    xs: range = range(10, 90),
    ys: range = range(-90, -10),
) -> Position:
    """First tile in a search window (well away from spawn and pod) matching predicate."""
    for y in ys:
        for x in xs:
            pos = Position(x, y)
            if predicate(pos):
                return pos
    raise LookupError("No matching tile in search window")
