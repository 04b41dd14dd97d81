"""Part-name operation suggestions."""

from .rules import NAME_RULES, NameRule, load_name_rules
from .suggester import (
    apply_suggestion_to_ops,
    format_suggestion_as_shortcode,
    get_name_suggestions,
    operations_match_suggestion,
    suggest_for_parts,
)

__all__ = [
    "NAME_RULES",
    "NameRule",
    "load_name_rules",
    "apply_suggestion_to_ops",
    "format_suggestion_as_shortcode",
    "get_name_suggestions",
    "operations_match_suggestion",
    "suggest_for_parts",
]
