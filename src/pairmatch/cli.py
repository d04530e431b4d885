from __future__ import annotations

import argparse
import json
import random
from pathlib import Path

from pairmatch.engine.ai import BotMemory, BotSpec, choose_card
from pairmatch.engine.game import GameStateMachine
from pairmatch.engine.scheduler import ManualScheduler
from pairmatch.engine.serialize import snapshot
from pairmatch.paths import get_paths
from pairmatch.services.content import ContentService
from pairmatch.services.telemetry import TelemetryService


def play_game(
    machine: GameStateMachine,
    scheduler: ManualScheduler,
    spec: BotSpec,
    rng: random.Random,
    max_turns: int = 500,
) -> dict[str, object]:
    """Let the bot play one full game, advancing virtual time whenever the board is locked."""
    memory = BotMemory()
    machine.start()
    memory.observe(machine.state, spec, rng)
    scheduler.advance(machine.config.reveal_duration_ms)

    selections = 0
    mismatches = 0
    while machine.state.phase != "won" and selections < max_turns * 2:
        state = machine.state
        if state.locked:
            if state.phase == "evaluating":
                mismatches += 1
            scheduler.advance(machine.config.mismatch_duration_ms)
            continue
        card_id = choose_card(state, memory, spec, rng)
        if card_id is None:
            break
        machine.select(card_id)
        selections += 1
        memory.observe(machine.state, spec, rng)

    return {
        "won": machine.state.phase == "won",
        "turns": selections // 2,
        "mismatches": mismatches,
        "elapsed_ms": scheduler.now_ms,
        "state": snapshot(machine.state),
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="pairmatch", description="Play one headless pairmatch game with the autoplay bot.")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--difficulty", type=int, choices=(0, 1, 2), default=1)
    parser.add_argument("--config", type=Path, default=None, help="game config JSON (defaults to the bundled one)")
    paths = get_paths()
    parser.add_argument(
        "--telemetry",
        type=Path,
        nargs="?",
        const=paths.userdata_dir / "telemetry.jsonl",
        default=None,
        help="append engine events to this JSONL file (default: userdata/telemetry.jsonl)",
    )
    parser.add_argument("--full", action="store_true", help="include the final card list in the output")
    args = parser.parse_args(argv)

    content = ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir)
    config = content.load_game_config(args.config)

    scheduler = ManualScheduler()
    machine = GameStateMachine(config=config, scheduler=scheduler, seed=args.seed)
    if args.telemetry is not None:
        machine.subscribe(TelemetryService(args.telemetry).record)

    result = play_game(machine, scheduler, BotSpec(difficulty=args.difficulty), random.Random(args.seed))
    machine.close()

    result["seed"] = args.seed
    if not args.full:
        state = result["state"]
        assert isinstance(state, dict)
        state.pop("cards", None)
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0 if result["won"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
