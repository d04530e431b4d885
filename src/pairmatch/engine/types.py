from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, replace
from typing import Literal

Phase = Literal["idle", "revealing", "ready", "evaluating", "won"]

Symbol = Hashable

DEFAULT_SYMBOLS: tuple[str, ...] = ("🐶", "🐱", "🐼", "🦊", "🐸", "🐵", "🦁", "🐰")


@dataclass(frozen=True)
class GameConfig:
    symbols: tuple[Symbol, ...] = DEFAULT_SYMBOLS
    reveal_duration_ms: int = 1000
    mismatch_duration_ms: int = 800


@dataclass(frozen=True)
class Card:
    id: int
    symbol: Symbol
    face_up: bool = True
    matched: bool = False

    def flipped(self, face_up: bool) -> "Card":
        return replace(self, face_up=face_up)


@dataclass(frozen=True)
class GameState:
    """Immutable view of one game. Transitions return a new instance."""

    cards: tuple[Card, ...] = ()
    selection: tuple[int, ...] = ()
    phase: Phase = "idle"
    matched_pair_count: int = 0

    @property
    def pair_count(self) -> int:
        return len(self.cards) // 2

    @property
    def remaining_pairs(self) -> int:
        return self.pair_count - self.matched_pair_count

    @property
    def remaining_cards(self) -> int:
        return 2 * self.remaining_pairs

    @property
    def locked(self) -> bool:
        return self.phase in ("revealing", "evaluating")

    def find(self, card_id: int) -> Card | None:
        for c in self.cards:
            if c.id == card_id:
                return c
        return None
