from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .types import Card

# Outbound notifications are plain dicts keyed by "type" so sinks can log or
# serialize them directly.
Event = dict[str, object]

NotificationSink = Callable[[Event], None]


def flip_event(card_id: int) -> Event:
    return {"type": "flip", "card_id": card_id}


def match_event(first: int, second: int) -> Event:
    return {"type": "match", "card_ids": [first, second]}


def mismatch_event(first: int, second: int) -> Event:
    return {"type": "mismatch", "card_ids": [first, second]}


def win_event() -> Event:
    return {"type": "win"}


# Inbound events consumed by the transition function.


@dataclass(frozen=True)
class StartGame:
    cards: tuple[Card, ...]


@dataclass(frozen=True)
class SelectCard:
    card_id: int


@dataclass(frozen=True)
class RevealElapsed:
    pass


@dataclass(frozen=True)
class MismatchElapsed:
    card_ids: tuple[int, int]


Input = StartGame | SelectCard | RevealElapsed | MismatchElapsed
