"""Deterministic, headless rules engine for pairmatch.

IMPORTANT: This package must never import UI or audio code.
"""

from .deck import create_deck
from .events import Event, NotificationSink
from .game import GameStateMachine, Transition, transition
from .scheduler import ManualScheduler, Scheduler, ThreadingScheduler, TimerHandle
from .types import Card, GameConfig, GameState, Phase

__all__ = [
    "Card",
    "Event",
    "GameConfig",
    "GameState",
    "GameStateMachine",
    "ManualScheduler",
    "NotificationSink",
    "Phase",
    "Scheduler",
    "ThreadingScheduler",
    "TimerHandle",
    "Transition",
    "create_deck",
    "transition",
]
