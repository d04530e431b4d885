from __future__ import annotations


from .types import Card, GameState


def _card_to_dict(c: Card) -> dict[str, object]:
    return {
        "id": c.id,
        "symbol": c.symbol,
        "face_up": c.face_up,
        "matched": c.matched,
    }


def snapshot(state: GameState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current game state."""
    return {
        "phase": state.phase,
        "matched_pair_count": state.matched_pair_count,
        "remaining_pairs": state.remaining_pairs,
        "remaining_cards": state.remaining_cards,
        "selection": list(state.selection),
        "cards": [_card_to_dict(c) for c in state.cards],
    }
