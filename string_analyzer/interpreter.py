"""
Natural-language query interpreter.

Pattern matching over a small fixed vocabulary, not language understanding.
Each ``Rule`` contributes at most one filter; rules are checked
independently, and within a rule the first matching pattern wins. New
phrasings are added as table entries.

Examples:
- "all single word palindromic strings" -> {word_count: 1, is_palindrome: true}
- "strings longer than 10 characters" -> {min_length: 11}
- "strings containing the letter z" -> {contains_character: "z"}
"""
import re
import logging
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from string_analyzer.errors import QueryParseError
from string_analyzer.filters import check_conflicts

logger = logging.getLogger(__name__)


class Rule(NamedTuple):
    filter_name: str
    patterns: List[re.Pattern]
    build: Callable[[re.Match], Any]


RULES: List[Rule] = [
    Rule(
        "word_count",
        [re.compile(r"\b(?:single word|one word|1 word)\b")],
        lambda m: 1,
    ),
    Rule(
        "is_palindrome",
        [re.compile(r"palindromic|palindromes?")],
        lambda m: True,
    ),
    Rule(
        "min_length",
        [re.compile(r"longer than (\d+) characters?")],
        lambda m: int(m.group(1)) + 1,
    ),
    Rule(
        "max_length",
        [re.compile(r"shorter than (\d+) characters?")],
        lambda m: max(int(m.group(1)) - 1, 0),
    ),
    Rule(
        "contains_character",
        [
            # strict form takes priority over the loose one
            re.compile(r"contain(?:s|ing)? the letter ([a-z])\b"),
            re.compile(r"containing (?:the )?([a-z])\b"),
        ],
        lambda m: m.group(1),
    ),
]


def interpret(query: str) -> Optional[Dict[str, Any]]:
    """
    Translate a free-text query into a predicate set.

    Returns None when no rule fires. Filters come back in rule-table order.
    """
    text = query.lower().strip()
    parsed: Dict[str, Any] = {}

    for rule in RULES:
        for pattern in rule.patterns:
            match = pattern.search(text)
            if match:
                parsed[rule.filter_name] = rule.build(match)
                break

    if not parsed:
        logger.info(f"No rule matched query '{query}'")
        return None

    logger.info(f"Interpreted '{query}' as {parsed}")
    return parsed


def interpret_or_raise(query: str) -> Dict[str, Any]:
    """interpret(), raising QueryParseError or ConflictingFilters instead of returning bad results"""
    parsed = interpret(query)
    if parsed is None:
        raise QueryParseError()
    check_conflicts(parsed)
    return parsed
