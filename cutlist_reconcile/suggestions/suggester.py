"""Propose default operations from a part's free-text label."""

import copy
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from ..config import Config, default_config
from ..contracts import OperationSuggestion
from ..models import Part
from ..models.operations import EDGE_SIDES, Edgebanding, OperationSet
from .rules import NAME_RULES, NameRule

logger = logging.getLogger(__name__)


def get_name_suggestions(
    label: Optional[str],
    rules: Optional[Sequence[NameRule]] = None,
    config: Config = default_config,
) -> Optional[OperationSuggestion]:
    """
    Match a part label against the rule table.

    Args:
        label: Free-text part name
        rules: Rule table (built-in NAME_RULES when omitted)
        config: Confidence and minimum label length

    Returns:
        The first matching rule as an OperationSuggestion, or None for short
        or unmatched labels.
    """
    if not label or len(label.strip()) < config.min_label_length:
        return None

    normalized = label.strip().lower()
    for rule in (NAME_RULES if rules is None else rules):
        for pattern in rule.patterns:
            if pattern.search(normalized):
                return OperationSuggestion(
                    name=rule.name,
                    description=rule.description,
                    ops=copy.deepcopy(rule.ops),
                    confidence=config.suggestion_confidence,
                )
    return None


def operations_match_suggestion(current: OperationSet, suggested: OperationSet) -> bool:
    """
    True when the suggestion's effect is already present.

    Only what the suggestion specifies is compared: each suggested edge flag
    must equal the current flag exactly (a side missing from the current
    edgebanding matches nothing), and the part needs at least as many
    grooves as suggested.
    """
    if suggested.edgebanding is not None:
        current_sides = current.edgebanding.sides if current.edgebanding else {}
        for side, value in suggested.edgebanding.sides.items():
            if current_sides.get(side) != value:
                return False

    if suggested.grooves and len(current.grooves) < len(suggested.grooves):
        return False

    return True


def apply_suggestion_to_ops(
    current: OperationSet,
    suggested: OperationSet,
    default_edgeband_id: Optional[str] = None,
) -> OperationSet:
    """
    Merge a suggestion into an operation set, returning a new set.

    Edge flags are merged over the current ones (suggested values win);
    grooves, holes and CNC entries are appended after existing entries
    without deduplication.
    """
    result = copy.deepcopy(current)

    if suggested.edgebanding is not None:
        if current.edgebanding is not None:
            base = dict(current.edgebanding.sides)
            edgeband_id = default_edgeband_id or current.edgebanding.edgeband_id
        else:
            base = {side: False for side in EDGE_SIDES}
            edgeband_id = default_edgeband_id
        base.update(suggested.edgebanding.sides)
        result.edgebanding = Edgebanding(sides=base, edgeband_id=edgeband_id)

    result.grooves.extend(copy.deepcopy(suggested.grooves))
    result.holes.extend(copy.deepcopy(suggested.holes))
    result.cnc.extend(copy.deepcopy(suggested.cnc))
    return result


def format_suggestion_as_shortcode(ops: OperationSet) -> str:
    """
    Short chip text for a suggestion.

    Example:
        all four edges            -> "EB:4"
        L1 + dado on W1 and W2    -> "EB:L1 GR:W1+W2"
    """
    tokens: List[str] = []

    if ops.edgebanding is not None:
        sides = [side for side, applied in ops.edgebanding.sides.items() if applied]
        if len(sides) == 4:
            tokens.append("EB:4")
        elif sides:
            tokens.append("EB:" + "+".join(sides))

    if ops.grooves:
        tokens.append("GR:" + "+".join(g.side for g in ops.grooves))

    return " ".join(tokens)


def suggest_for_parts(
    parts: Iterable[Part],
    rules: Optional[Sequence[NameRule]] = None,
    config: Config = default_config,
) -> Dict[str, OperationSuggestion]:
    """
    Suggestions to show, keyed by part_id.

    Rejected parts are skipped, as are parts whose operations already
    contain the suggestion's effect.
    """
    results: Dict[str, OperationSuggestion] = {}
    for part in parts:
        if part.is_rejected:
            continue
        suggestion = get_name_suggestions(part.label, rules, config)
        if suggestion is None or operations_match_suggestion(part.ops, suggestion.ops):
            continue
        results[part.part_id] = suggestion
    logger.debug("Suggestions for %d parts", len(results))
    return results
