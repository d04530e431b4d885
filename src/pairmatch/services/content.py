from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from pairmatch.engine.types import GameConfig


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _optional_int(obj: Mapping[str, object], key: str, default: int) -> int:
    v = obj.get(key, default)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ContentError(f"Expected int for {key}")
    return v


def parse_game_config(raw: object) -> GameConfig:
    if not isinstance(raw, dict):
        raise ContentError("game config must be an object")
    symbols = raw.get("symbols")
    if not isinstance(symbols, list):
        raise ContentError("game config symbols must be a list")
    defaults = GameConfig()
    return GameConfig(
        symbols=tuple(symbols),
        reveal_duration_ms=_optional_int(raw, "reveal_duration_ms", defaults.reveal_duration_ms),
        mismatch_duration_ms=_optional_int(raw, "mismatch_duration_ms", defaults.mismatch_duration_ms),
    )


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_game_config(self, path: Path | None = None) -> GameConfig:
        config_path = path or self._data_dir / "game.json"
        raw = _load_json(config_path)
        schema = _load_json(self._schema_dir / "game.schema.json")
        validate_json(raw, schema, context=str(config_path))
        return parse_game_config(raw)

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_game_config()
