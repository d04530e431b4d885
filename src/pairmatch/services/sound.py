from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from pairmatch.engine.events import Event


@dataclass(frozen=True)
class ToneCue:
    frequency: float  # Hz
    duration: float  # seconds
    volume: float


TONE_CUES: dict[str, ToneCue] = {
    "flip": ToneCue(frequency=520, duration=0.08, volume=0.08),
    "match": ToneCue(frequency=720, duration=0.16, volume=0.1),
    "mismatch": ToneCue(frequency=220, duration=0.2, volume=0.1),
    "win": ToneCue(frequency=860, duration=0.3, volume=0.12),
}


class ToneBackend(Protocol):
    def unlock(self) -> None: ...

    def play(self, cue: ToneCue) -> None: ...


class NullToneBackend:
    """Default backend: accepts every cue and plays nothing.

    Real output (a sound device, a browser bridge) can replace this later.
    """

    def unlock(self) -> None:
        return None

    def play(self, cue: ToneCue) -> None:
        return None


@dataclass
class SoundService:
    """Turns engine events into tone cues.

    The backend is unlocked lazily on the first interaction, since most audio
    outputs refuse to start before the player has done something.
    """

    backend: ToneBackend = field(default_factory=NullToneBackend)
    enabled: bool = True
    interacted: bool = False
    _unlocked: bool = False

    def _unlock(self) -> None:
        if not self.enabled or self._unlocked:
            return
        self.backend.unlock()
        self._unlocked = True

    def interact(self) -> None:
        self.interacted = True
        self._unlock()

    def toggle(self) -> bool:
        self.enabled = not self.enabled
        self.interacted = True
        if self.enabled:
            self._unlock()
        return self.enabled

    def __call__(self, event: Event) -> None:
        if not self.interacted:
            self.interact()
        if not self.enabled or not self._unlocked:
            return
        cue = TONE_CUES.get(str(event.get("type")))
        if cue is None:
            return
        self.backend.play(cue)
