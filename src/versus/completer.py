"""
Result completion - repairs a parsed model answer into a ComparisonResult
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .schemas import ComparisonResult, NoteTable, ScoreTable, TIE

logger = logging.getLogger(__name__)

DEFAULT_ATTRIBUTES = ["Overall"]
TIE_REASON = "Both items have nearly identical average scores across all attributes."


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _str_list(value: Any) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [s for s in (_as_str(v) for v in value) if s]


def coerce_score(value: Any) -> int:
    """Integer in [0, 100]; anything non-numeric counts as 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, str):
        try:
            value = float(value.strip().rstrip("%"))
        except ValueError:
            return 0
    if not isinstance(value, (int, float)) or value != value:  # NaN
        return 0
    return int(min(max(round(value), 0), 100))


def resolve_names(names: Sequence[str], caller: Tuple[str, str],
                  presented: Tuple[str, str],
                  known: Optional[Dict[str, str]] = None,
                  positional: bool = True) -> Dict[str, str]:
    """Map names used by the model onto the caller's item names.

    Known aliases win, then case-insensitive matches. With ``positional``
    set, whatever is left is paired with the still-unclaimed items in
    presented order; otherwise it stays unmapped.
    """
    known = known or {}
    by_fold = {c.casefold(): c for c in caller}
    mapping: Dict[str, str] = {}
    claimed = set()

    for name in names:
        target = known.get(name) or by_fold.get(name.casefold())
        if target and target not in claimed:
            mapping[name] = target
            claimed.add(target)

    if not positional:
        return mapping
    leftovers = [n for n in names if n not in mapping]
    remaining = [p for p in presented if p not in claimed]
    for name, target in zip(leftovers, remaining):
        mapping[name] = target
    return mapping


def _rekey(table: Dict[str, Any], caller: Tuple[str, str], presented: Tuple[str, str],
           aliases: Dict[str, str]) -> Dict[str, Any]:
    # only the model's own items list is paired by position
    mapping = resolve_names(list(table), caller, presented, aliases, positional=False)
    rekeyed: Dict[str, Any] = {}
    for key, value in table.items():
        target = mapping.get(key)
        if target is None:
            logger.debug(f"Dropping entry for unknown item {key!r}")
            continue
        rekeyed.setdefault(target, value)
    return rekeyed


def _clean_scores(value: Any) -> ScoreTable:
    if not isinstance(value, dict):
        return {}
    return {
        str(item): {str(attr): coerce_score(score) for attr, score in per_attr.items()}
        for item, per_attr in value.items()
        if isinstance(per_attr, dict)
    }


def _clean_notes(value: Any) -> Optional[NoteTable]:
    if not isinstance(value, dict):
        return None
    return {
        str(item): {str(attr): _str_list(notes) for attr, notes in per_attr.items()}
        for item, per_attr in value.items()
        if isinstance(per_attr, dict)
    }


def _total_score(scores: ScoreTable, item: str, attributes: Sequence[str]) -> int:
    """Sum over the attributes; a missing score counts as 0."""
    per_attr = scores.get(item, {})
    return sum(per_attr.get(attr, 0) for attr in attributes)


def derive_winner(scores: ScoreTable, items: Tuple[str, str], attributes: Sequence[str],
                  tie_threshold: float = 3.0) -> Tuple[str, str]:
    """Winner and reason computed from mean scores."""
    first, second = items
    # compare integer totals so a gap of exactly the threshold is not lost to rounding
    total_first = _total_score(scores, first, attributes)
    total_second = _total_score(scores, second, attributes)

    if abs(total_first - total_second) <= tie_threshold * len(attributes):
        return TIE, TIE_REASON

    winner = first if total_first > total_second else second
    return winner, f"{winner} has a higher average score across all attributes."


def _canonical_winner(value: Any, caller: Tuple[str, str], aliases: Dict[str, str]) -> Optional[str]:
    name = _as_str(value)
    if name is None:
        return None
    if name.casefold() == TIE.casefold():
        return TIE
    if name in aliases:
        return aliases[name]
    for item in caller:
        if item.casefold() == name.casefold():
            return item
    return None


def complete_result(parsed: Dict[str, Any], items: Sequence[str],
                    presented: Optional[Sequence[str]] = None,
                    tie_threshold: float = 3.0) -> ComparisonResult:
    """Fill in missing fields and restore the caller's item order.

    Fields that are already present and valid are kept as they are, so
    completing a completed result changes nothing.
    """
    caller = (items[0], items[1])
    shown = (presented[0], presented[1]) if presented else caller

    model_items = _str_list(parsed.get("items"))
    if len(model_items) != 2:
        if model_items:
            logger.warning(f"Model returned {len(model_items)} items, using the requested pair")
        model_items = []
    aliases = resolve_names(model_items, caller, shown) if model_items else {}
    if model_items and tuple(model_items) != caller:
        logger.info(f"Restoring caller item order from model order {model_items}")

    scores = _rekey(_clean_scores(parsed.get("scores")), caller, shown, aliases)
    pros = _clean_notes(parsed.get("pros"))
    cons = _clean_notes(parsed.get("cons"))
    if pros is not None:
        pros = _rekey(pros, caller, shown, aliases)
    if cons is not None:
        cons = _rekey(cons, caller, shown, aliases)

    attributes = _str_list(parsed.get("attributes")) or list(DEFAULT_ATTRIBUTES)

    winner = _canonical_winner(parsed.get("winner"), caller, aliases)
    winner_reason = _as_str(parsed.get("winnerReason"))
    if winner is None:
        if parsed.get("winner"):
            logger.warning(f"Ignoring winner {parsed.get('winner')!r}, it names neither item")
        winner, winner_reason = derive_winner(scores, caller, attributes, tie_threshold)
        logger.info(f"Derived winner from scores: {winner}")

    confidence = parsed.get("confidence")
    sources = parsed.get("sources")

    return ComparisonResult(
        items=list(caller),
        attributes=attributes,
        scores=scores,
        pros=pros,
        cons=cons,
        winner=winner,
        winner_reason=winner_reason,
        summary=_as_str(parsed.get("summary")),
        confidence=None if confidence is None else coerce_score(confidence),
        sources=_str_list(sources) if sources is not None else None,
    )
