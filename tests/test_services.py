from __future__ import annotations

import json

from pairmatch.engine.game import GameStateMachine
from pairmatch.engine.scheduler import ManualScheduler
from pairmatch.services.sound import TONE_CUES, SoundService, ToneCue
from pairmatch.services.telemetry import TelemetryService


class RecordingBackend:
    def __init__(self) -> None:
        self.unlocks = 0
        self.played: list[ToneCue] = []

    def unlock(self) -> None:
        self.unlocks += 1

    def play(self, cue: ToneCue) -> None:
        self.played.append(cue)


def test_telemetry_appends_jsonl(tmp_path) -> None:
    path = tmp_path / "nested" / "telemetry.jsonl"
    svc = TelemetryService(path)
    svc.log("custom", {"x": 1})
    svc.record({"type": "match", "card_ids": [3, 9]})

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first, second = (json.loads(line) for line in lines)
    assert first["type"] == "custom" and first["payload"] == {"x": 1}
    assert second["type"] == "match" and second["payload"] == {"card_ids": [3, 9]}
    assert "ts" in second


def test_sound_unlocks_on_first_event_and_plays_cues() -> None:
    backend = RecordingBackend()
    sound = SoundService(backend=backend)
    assert backend.unlocks == 0

    sound({"type": "flip", "card_id": 1})
    sound({"type": "win"})
    assert backend.unlocks == 1
    assert backend.played == [TONE_CUES["flip"], TONE_CUES["win"]]


def test_sound_toggle_silences_output() -> None:
    backend = RecordingBackend()
    sound = SoundService(backend=backend)
    assert sound.toggle() is False
    sound({"type": "mismatch", "card_ids": [1, 2]})
    assert backend.played == []
    assert backend.unlocks == 0

    assert sound.toggle() is True
    assert backend.unlocks == 1
    sound({"type": "mismatch", "card_ids": [1, 2]})
    assert backend.played == [TONE_CUES["mismatch"]]


def test_sound_ignores_unknown_events() -> None:
    backend = RecordingBackend()
    sound = SoundService(backend=backend)
    sound({"type": "shuffle"})
    assert backend.played == []


def test_sinks_receive_engine_events() -> None:
    sched = ManualScheduler()
    machine = GameStateMachine(scheduler=sched, seed=11)
    backend = RecordingBackend()
    sound = SoundService(backend=backend)
    machine.subscribe(sound)
    machine.subscribe(sound)
    machine.start()
    sched.advance(1000)

    machine.select(machine.state.cards[0].id)
    assert backend.played == [TONE_CUES["flip"]]

    machine.unsubscribe(sound)
    machine.select(machine.state.cards[1].id)
    assert len(backend.played) == 1
