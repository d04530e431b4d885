from __future__ import annotations

import random
from dataclasses import dataclass, field

from .types import GameState, Symbol


@dataclass(frozen=True)
class BotSpec:
    """Simple autoplay tuning parameters.

    difficulty:
      0 = easy (forgets half of what it sees)
      1 = normal
      2 = hard (perfect recall)
    """

    difficulty: int = 1

    @property
    def forget_chance(self) -> float:
        return {0: 0.5, 1: 0.2}.get(self.difficulty, 0.0)


@dataclass
class BotMemory:
    seen: dict[int, Symbol] = field(default_factory=dict)

    def observe(self, state: GameState, spec: BotSpec, rng: random.Random) -> None:
        for c in state.cards:
            if c.matched:
                self.seen.pop(c.id, None)
                continue
            if not c.face_up or c.id in self.seen:
                continue
            if rng.random() < spec.forget_chance:
                continue
            self.seen[c.id] = c.symbol


def _known_pair(memory: BotMemory, candidates: set[int]) -> tuple[int, int] | None:
    by_symbol: dict[Symbol, list[int]] = {}
    for card_id, sym in sorted(memory.seen.items()):
        if card_id not in candidates:
            continue
        by_symbol.setdefault(sym, []).append(card_id)
        if len(by_symbol[sym]) == 2:
            return by_symbol[sym][0], by_symbol[sym][1]
    return None


def choose_card(state: GameState, memory: BotMemory, spec: BotSpec, rng: random.Random) -> int | None:
    """Pick the next card to select, or None when the board is locked or done."""
    if state.phase != "ready":
        return None
    candidates = sorted(c.id for c in state.cards if not c.matched and not c.face_up)
    if not candidates:
        return None
    unknown = [cid for cid in candidates if cid not in memory.seen]

    if state.selection:
        first = state.find(state.selection[0])
        if first is not None:
            for cid in candidates:
                if memory.seen.get(cid) == first.symbol:
                    return cid
        return rng.choice(unknown or candidates)

    pair = _known_pair(memory, set(candidates))
    if pair is not None:
        return pair[0]
    return rng.choice(unknown or candidates)
