"""Part-name rule table for operation suggestions.

Each rule maps free-text part names ("Fixed shelf", "gable", "DF2") to the
operations that part usually carries. The table is scanned top to bottom
and, inside a rule, patterns in listed order: the first regex that matches
wins. ORDER IS PART OF THE CONTRACT - specific rules sit above generic ones
("fixed shelf" before "shelf", "drawer back" before "back").

Extra rules can be loaded from YAML and are consulted before these::

    - name: Pantry Shelf
      description: Front edge + shelf pin holes
      patterns: ['pantry\\s*shelf']
      ops:
        edgebanding: {sides: {L1: true}}
        holes: [{type_code: SYS32, face: F}]
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Pattern, Sequence, Union

import yaml

from ..models.operations import Edgebanding, GrooveEntry, OperationSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NameRule:
    """One entry of the name rule table."""
    name: str
    description: str
    patterns: Sequence[Pattern]
    ops: OperationSet


def _rule(name: str, description: str, patterns: List[str], ops: OperationSet) -> NameRule:
    return NameRule(
        name=name,
        description=description,
        patterns=tuple(re.compile(p, re.IGNORECASE) for p in patterns),
        ops=ops,
    )


def _edges(L1: bool = False, L2: bool = False, W1: bool = False, W2: bool = False) -> Edgebanding:
    return Edgebanding(sides={"L1": L1, "L2": L2, "W1": W1, "W2": W2})


_ALL_EDGES = dict(L1=True, L2=True, W1=True, W2=True)


def _back_groove() -> List[GrooveEntry]:
    return [GrooveEntry(type_code="BPG", side="W2", width_mm=4, depth_mm=8)]


# ===========================================================================
# Built-in rules, priority ordered
# ===========================================================================

NAME_RULES: List[NameRule] = [
    # Doors - all edges banded
    _rule("Door", "All 4 edges banded",
          [r'^door$', r'\bdoor\b', r'\bdoors\b', r'cabinet\s*door', r'^dr\b'],
          OperationSet(edgebanding=_edges(**_ALL_EDGES))),

    # Drawer fronts - all edges banded
    _rule("Drawer Front", "All 4 edges banded",
          [r'drawer\s*front', r'drawer\s*face', r'df\d*', r'^df$'],
          OperationSet(edgebanding=_edges(**_ALL_EDGES))),

    # Drawer box parts, above "side" and "back"
    _rule("Drawer Side", "No edging",
          [r'drawer\s*side', r'drawer\s*box\s*side', r'db\s*side'],
          OperationSet(edgebanding=_edges())),

    _rule("Drawer Box F/B", "No edging",
          [r'drawer\s*box\s*front', r'drawer\s*box\s*back', r'drawer\s*back',
           r'db\s*front', r'db\s*back'],
          OperationSet(edgebanding=_edges())),

    _rule("Drawer Bottom", "No edging",
          [r'drawer\s*bottom', r'drawer\s*base', r'db\s*bottom'],
          OperationSet(edgebanding=_edges())),

    # Fixed shelf - front edge + dado grooves, above "shelf"
    _rule("Fixed Shelf", "Front edge + dado grooves",
          [r'fixed\s*shelf', r'permanent\s*shelf'],
          OperationSet(
              edgebanding=_edges(L1=True),
              grooves=[
                  GrooveEntry(type_code="DADO", side="W1", width_mm=4, depth_mm=8),
                  GrooveEntry(type_code="DADO", side="W2", width_mm=4, depth_mm=8),
              ],
          )),

    # Shelves - front edge only
    _rule("Shelf", "Front edge banded",
          [r'^shelf$', r'\bshelf\b', r'\bshelves\b', r'^shlf', r'^sh\d', r'adjustable\s*shelf'],
          OperationSet(edgebanding=_edges(L1=True))),

    # Side panels - front edge + back groove
    _rule("Side Panel", "Front edge + back groove",
          [r'^side$', r'\bside\b.*panel', r'side\s*panel', r'gable', r'^sp\d*',
           r'end\s*panel', r'left\s*side', r'right\s*side'],
          OperationSet(edgebanding=_edges(L1=True), grooves=_back_groove())),

    # Top/Bottom panels - front edge + back groove
    _rule("Top/Bottom", "Front edge + back groove",
          [r'^top$', r'^bottom$', r'top\s*panel', r'bottom\s*panel',
           r'horizontal\s*panel', r'cabinet\s*top', r'cabinet\s*bottom'],
          OperationSet(edgebanding=_edges(L1=True), grooves=_back_groove())),

    # Back panels - sit in the groove, no edging
    _rule("Back Panel", "No edging (fits in groove)",
          [r'^back$', r'back\s*panel', r'\bback\b', r'^bp\d*'],
          OperationSet(edgebanding=_edges())),

    # Kick board / plinth - front edge
    _rule("Kick Board", "Front edge banded",
          [r'kick', r'plinth', r'toe\s*kick', r'toe\s*board', r'base\s*board', r'skirting'],
          OperationSet(edgebanding=_edges(L1=True))),

    # Partition / divider - both long edges
    _rule("Divider", "Both long edges",
          [r'partition', r'divider', r'vertical\s*divider'],
          OperationSet(edgebanding=_edges(L1=True, L2=True))),

    # Countertop - visible edges
    _rule("Countertop", "Visible edges banded",
          [r'counter', r'worktop', r'benchtop', r'work\s*surface'],
          OperationSet(edgebanding=_edges(L1=True, W1=True, W2=True))),

    # Rail / stretcher - front edge
    _rule("Rail", "Front edge banded",
          [r'\brail\b', r'stretcher', r'cross\s*member'],
          OperationSet(edgebanding=_edges(L1=True))),
]


def load_name_rules(path: Union[str, Path]) -> List[NameRule]:
    """
    Load extra name rules from a YAML file.

    The file holds a list of rules, or a mapping with a ``rules`` list.

    Raises:
        ValueError: if the file is not a rule list, a rule has no name or
            patterns, or a pattern is not a valid regex
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or []

    if isinstance(data, dict):
        data = data.get("rules") or []
    if not isinstance(data, list):
        raise ValueError(f"Rule file {path} must contain a list of rules")

    rules: List[NameRule] = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict) or not entry.get("name") or not entry.get("patterns"):
            raise ValueError(f"Rule {i} in {path} needs 'name' and 'patterns'")
        patterns = entry["patterns"]
        if isinstance(patterns, str):
            patterns = [patterns]
        try:
            rule = _rule(
                name=str(entry["name"]),
                description=str(entry.get("description") or ""),
                patterns=[str(p) for p in patterns],
                ops=OperationSet.from_dict(entry.get("ops")),
            )
        except re.error as e:
            raise ValueError(f"Rule '{entry['name']}' has an invalid pattern: {e}") from e
        rules.append(rule)

    logger.debug("Loaded %d name rules from %s", len(rules), path)
    return rules
