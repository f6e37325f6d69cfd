"""Decide whether a piece of text is a translatable Chinese phrase.

All functions here are pure and total over ``str``: they never raise and
never consult global mutable state.
"""

import re
import unicodedata

# Hard cap for a cleaned phrase (segmented mode).
STRICT_MAX_LENGTH = 20
# Cap for whole literals kept intact (whole-literal mode).
LENIENT_MAX_LENGTH = 50

CJK_PATTERN = re.compile(r'[\u4e00-\u9fff]')
LATIN_PATTERN = re.compile(r'[A-Za-z]')

# Structural code fragments. Keyword and identifier checks are ASCII-only so
# that adjacent CJK characters do not count as word characters.
CODE_PATTERNS = (
    re.compile(r'[{}\[\]();]'),
    re.compile(r'\\n|\\t'),
    re.compile(r'^\s*//'),
    re.compile(
        r'(?<![A-Za-z0-9_$])(?:interface|class|function|const|let|var|export|import)(?![A-Za-z0-9_$])',
        re.IGNORECASE,
    ),
    re.compile(r'[A-Za-z0-9_]+\s*:\s*[A-Za-z0-9_]+'),
)

NUMERIC_ONLY_PATTERN = re.compile(r'^[\d\s.,，。]+$', re.ASCII)


def contains_chinese(text: str) -> bool:
    """Return True if text holds at least one CJK unified ideograph."""
    return bool(text) and CJK_PATTERN.search(text) is not None


def count_chinese(text: str) -> int:
    return len(CJK_PATTERN.findall(text or ''))


def count_latin(text: str) -> int:
    return len(LATIN_PATTERN.findall(text or ''))


def is_code_like(text: str) -> bool:
    """Return True if text carries structural code tokens."""
    return any(pattern.search(text) for pattern in CODE_PATTERNS)


def _is_punctuation_only(text: str) -> bool:
    return all(ch.isspace() or unicodedata.category(ch).startswith('P') for ch in text)


def is_translatable(text: str, max_length: int = STRICT_MAX_LENGTH) -> bool:
    """
    Check whether text is a genuine human-readable Chinese phrase.

    Args:
        text: Candidate text
        max_length: Length cap; ``STRICT_MAX_LENGTH`` for cleaned phrases,
            ``LENIENT_MAX_LENGTH`` for whole literals

    Returns:
        True if the text should be kept
    """
    if not text or not text.strip():
        return False

    if not contains_chinese(text):
        return False

    if len(text) > max_length:
        return False

    if is_code_like(text):
        return False

    if NUMERIC_ONLY_PATTERN.match(text) or _is_punctuation_only(text):
        return False

    # Majority script must be CJK; ties are rejected.
    return count_chinese(text) > count_latin(text)
