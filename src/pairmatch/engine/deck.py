from __future__ import annotations

import random
from typing import Sequence

from .types import Card, Symbol


def _fisher_yates(rng: random.Random, items: list[Symbol]) -> None:
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]


def create_deck(symbols: Sequence[Symbol], rng: random.Random) -> tuple[Card, ...]:
    """Build a shuffled deck holding two copies of every symbol.

    Every card starts face-up for the memorize window. Ids are assigned after
    the shuffle (``position + 1``) and stay fixed for the rest of the game.
    """
    if not symbols:
        raise ValueError("At least one symbol is required.")
    if len(set(symbols)) != len(symbols):
        raise ValueError("Symbols must be distinct.")

    working: list[Symbol] = []
    for sym in symbols:
        working.extend((sym, sym))
    _fisher_yates(rng, working)

    return tuple(Card(id=i + 1, symbol=sym, face_up=True, matched=False) for i, sym in enumerate(working))
