"""Collapse near-identical phrases into one representative each."""

import re
from enum import Enum
from typing import Dict, Iterable, List

from .classifier import STRICT_MAX_LENGTH

_WHITESPACE = re.compile(r'\s+')
_KEY_PUNCTUATION = re.compile(r'[。，；：“”‘’（）、《》]')
_TERMINAL_PUNCTUATION = ('。', '？', '！')
_PAUSE_PUNCTUATION = ('，', '、')


class DedupPolicy(Enum):
    """How repeated variants of a phrase are resolved."""
    SCORED = 'scored'          # best-scoring variant replaces earlier ones in place
    FIRST_WINS = 'first_wins'  # first-seen variant is kept


def normalize_key(phrase: str) -> str:
    """Equivalence key used by the scored policy."""
    key = _WHITESPACE.sub(' ', phrase.strip())
    key = _KEY_PUNCTUATION.sub('', key)
    return key.lower()


def quality_score(phrase: str) -> int:
    """
    Score a phrase variant; higher means more complete.

    Complete sentences (terminal punctuation) and phrases that carry internal
    pauses score higher; fragments that start or end mid-clause score lower.
    """
    score = min(len(phrase), STRICT_MAX_LENGTH)
    if phrase.endswith(_TERMINAL_PUNCTUATION):
        score += 5
    if any(mark in phrase for mark in _PAUSE_PUNCTUATION):
        score += 2
    if phrase.startswith(_PAUSE_PUNCTUATION):
        score -= 3
    if phrase.endswith(_PAUSE_PUNCTUATION):
        score -= 1
    return score


def dedupe(phrases: Iterable[str]) -> List[str]:
    """
    Scored deduplication.

    The first occurrence of each key fixes the output position; a later
    variant replaces the stored one when it is longer or scores higher.
    """
    result: List[str] = []
    positions: Dict[str, int] = {}

    for phrase in phrases:
        key = normalize_key(phrase)
        index = positions.get(key)
        if index is None:
            positions[key] = len(result)
            result.append(phrase)
            continue

        current = result[index]
        if len(phrase) > len(current) or quality_score(phrase) > quality_score(current):
            result[index] = phrase

    return result


def dedupe_first_wins(phrases: Iterable[str]) -> List[str]:
    """Keep the first variant of each whitespace-insensitive, case-folded key."""
    seen = set()
    result = []
    for phrase in phrases:
        key = _WHITESPACE.sub('', phrase).lower()
        if key not in seen:
            seen.add(key)
            result.append(phrase)
    return result


def dedupe_with(policy: DedupPolicy, phrases: Iterable[str]) -> List[str]:
    if policy is DedupPolicy.FIRST_WINS:
        return dedupe_first_wins(phrases)
    return dedupe(phrases)
