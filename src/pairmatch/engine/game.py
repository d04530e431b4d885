from __future__ import annotations

import inspect
import random
import threading
from dataclasses import dataclass, field, replace
from typing import Iterable

from .deck import create_deck
from .events import (
    Event,
    Input,
    MismatchElapsed,
    NotificationSink,
    RevealElapsed,
    SelectCard,
    StartGame,
    flip_event,
    match_event,
    mismatch_event,
    win_event,
)
from .scheduler import Scheduler, ThreadingScheduler, TimerHandle
from .types import Card, GameConfig, GameState


@dataclass(frozen=True)
class TimerRequest:
    duration_ms: int
    fire: Input


@dataclass(frozen=True)
class Transition:
    state: GameState
    events: tuple[Event, ...] = ()
    timer: TimerRequest | None = None


def _update_cards(cards: tuple[Card, ...], ids: Iterable[int], **changes: bool) -> tuple[Card, ...]:
    targets = set(ids)
    return tuple(replace(c, **changes) if c.id in targets else c for c in cards)


def _evaluate(state: GameState, events: list[Event], config: GameConfig) -> Transition:
    first_id, second_id = state.selection
    first = state.find(first_id)
    second = state.find(second_id)

    if first is None or second is None:
        # Selected id no longer resolves against the deck: drop the turn.
        return Transition(replace(state, selection=(), phase="ready"), tuple(events))

    if first.symbol == second.symbol:
        matched = state.matched_pair_count + 1
        won = matched == state.pair_count
        new_state = replace(
            state,
            cards=_update_cards(state.cards, state.selection, matched=True),
            selection=(),
            matched_pair_count=matched,
            phase="won" if won else "ready",
        )
        events.append(match_event(first_id, second_id))
        if won:
            events.append(win_event())
        return Transition(new_state, tuple(events))

    events.append(mismatch_event(first_id, second_id))
    return Transition(
        state,
        tuple(events),
        timer=TimerRequest(config.mismatch_duration_ms, MismatchElapsed((first_id, second_id))),
    )


def _select(state: GameState, card_id: int, config: GameConfig) -> Transition:
    if state.phase != "ready":
        return Transition(state)
    card = state.find(card_id)
    if card is None or card.matched or card.face_up:
        return Transition(state)

    selection = state.selection + (card_id,)
    new_state = replace(state, cards=_update_cards(state.cards, [card_id], face_up=True), selection=selection)
    events: list[Event] = [flip_event(card_id)]
    if len(selection) < 2:
        return Transition(new_state, tuple(events))

    return _evaluate(replace(new_state, phase="evaluating"), events, config)


def transition(state: GameState, inp: Input, config: GameConfig) -> Transition:
    """Pure game step: ``(state, input) -> new state + notifications``.

    Never raises for out-of-phase or unknown input; those return the state
    unchanged with no events. A returned ``timer`` asks the caller to feed
    ``timer.fire`` back in after ``timer.duration_ms``.
    """
    if isinstance(inp, StartGame):
        cards = tuple(replace(c, face_up=True, matched=False) for c in inp.cards)
        return Transition(
            GameState(cards=cards, phase="revealing"),
            timer=TimerRequest(config.reveal_duration_ms, RevealElapsed()),
        )

    if isinstance(inp, SelectCard):
        return _select(state, inp.card_id, config)

    if isinstance(inp, RevealElapsed):
        if state.phase != "revealing":
            return Transition(state)
        cards = tuple(c.flipped(False) for c in state.cards)
        return Transition(replace(state, cards=cards, phase="ready"))

    if isinstance(inp, MismatchElapsed):
        if state.phase != "evaluating" or state.selection != inp.card_ids:
            return Transition(state)
        cards = _update_cards(state.cards, inp.card_ids, face_up=False)
        return Transition(replace(state, cards=cards, selection=(), phase="ready"))

    return Transition(state)


def _validate_config(config: GameConfig) -> None:
    if not config.symbols:
        raise ValueError("At least one symbol is required.")
    if len(set(config.symbols)) != len(config.symbols):
        raise ValueError("Symbols must be distinct.")
    if config.reveal_duration_ms < 0 or config.mismatch_duration_ms < 0:
        raise ValueError("Durations must be non-negative.")


@dataclass
class GameStateMachine:
    """Owns the current game and drives it through the scheduler.

    Public operations never raise for bad input; rejected selections are
    silently ignored. Every ``start``/``restart`` cancels all outstanding
    timers before the new deck is dealt.
    """

    config: GameConfig = field(default_factory=GameConfig)
    scheduler: Scheduler = field(default_factory=ThreadingScheduler)
    seed: int | None = None
    rng: random.Random | None = None
    event_log: list[Event] = field(default_factory=list, init=False, compare=False)
    _state: GameState = field(default_factory=GameState, init=False, repr=False, compare=False)
    _sinks: list[NotificationSink] = field(default_factory=list, init=False, repr=False, compare=False)
    _timer: TimerHandle | None = field(default=None, init=False, repr=False, compare=False)
    _timer_token: object | None = field(default=None, init=False, repr=False, compare=False)
    _generation: object = field(default_factory=object, init=False, repr=False, compare=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        _validate_config(self.config)
        if self.rng is None:
            self.rng = random.Random(self.seed)

    @property
    def state(self) -> GameState:
        return self._state

    def _subscribed(self, sink: NotificationSink) -> int | None:
        # identity, not ==: equal-looking collaborators are still distinct sinks
        for i, s in enumerate(self._sinks):
            if s is sink:
                return i
            # bound methods are rebuilt on every attribute access
            if inspect.ismethod(s) and inspect.ismethod(sink):
                if s.__self__ is sink.__self__ and s.__func__ is sink.__func__:
                    return i
        return None

    def subscribe(self, sink: NotificationSink) -> None:
        with self._lock:
            if self._subscribed(sink) is None:
                self._sinks.append(sink)

    def unsubscribe(self, sink: NotificationSink) -> None:
        with self._lock:
            i = self._subscribed(sink)
            if i is not None:
                del self._sinks[i]

    def start(self) -> None:
        with self._lock:
            self._cancel_timers()
            self._generation = object()
            self.event_log = []
            assert self.rng is not None
            deck = create_deck(self.config.symbols, self.rng)
            self._apply(transition(self._state, StartGame(deck), self.config))

    def restart(self) -> None:
        self.start()

    def select(self, card_id: int) -> None:
        with self._lock:
            self._apply(transition(self._state, SelectCard(card_id), self.config))

    def close(self) -> None:
        with self._lock:
            self._cancel_timers()

    def _cancel_timers(self) -> None:
        self.scheduler.cancel_all()
        self._timer = None
        self._timer_token = None

    def _apply(self, tr: Transition) -> None:
        generation = self._generation
        self._state = tr.state
        if tr.timer is not None:
            self._schedule(tr.timer)
        for ev in tr.events:
            # a sink restarted the game; the rest belongs to the old one
            if self._generation is not generation:
                return
            self._emit(ev, generation)

    def _schedule(self, req: TimerRequest) -> None:
        self.scheduler.cancel(self._timer)
        token = object()
        self._timer_token = token
        self._timer = self.scheduler.after(req.duration_ms, lambda: self._on_timer(token, req.fire))

    def _on_timer(self, token: object, fire: Input) -> None:
        with self._lock:
            # superseded by a start/restart since this timer was scheduled
            if token is not self._timer_token:
                return
            self._timer = None
            self._timer_token = None
            self._apply(transition(self._state, fire, self.config))

    def _emit(self, event: Event, generation: object) -> None:
        self.event_log.append(event)
        for sink in list(self._sinks):
            if self._generation is not generation:
                return
            sink(event)
