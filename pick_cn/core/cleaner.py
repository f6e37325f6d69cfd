"""Turn raw candidate text into clean Chinese phrases.

A candidate such as ``'✅ 操作成功！请刷新页面'`` is stripped of decorative
symbols and split on Chinese punctuation, yielding ``['操作成功', '请刷新页面']``.
"""

import re
from typing import List, Optional

from .classifier import (
    CJK_PATTERN,
    LENIENT_MAX_LENGTH,
    STRICT_MAX_LENGTH,
    is_translatable,
)

# Punctuation that separates phrases inside a literal.
INTERIOR_PUNCTUATION = '，。？！；：、·“”‘’（）【】《》〈〉「」『』…—－〔〕〖〗｛｝［］'

_PICTOGRAPHS = (
    '\U0001F300-\U0001F5FF'   # Misc symbols & pictographs
    '\U0001F600-\U0001F64F'   # Emoticons
    '\U0001F680-\U0001F6FF'   # Transport & map
    '\U0001F1E0-\U0001F1FF'   # Regional indicators (flags)
    '\U0001F900-\U0001F9FF'   # Supplemental symbols & pictographs
    '\U0001FA70-\U0001FAFF'   # Symbols & pictographs extended-A
    '\u2600-\u26ff'           # Misc symbols
    '\u2700-\u27bf'           # Dingbats
    '\u2300-\u23ff'           # Misc technical (watch, media buttons)
    '\u2b00-\u2bff'           # Arrows & stars
    '\ufe00-\ufe0f'           # Variation selectors
    '\u200d'                  # Zero-width joiner
    '\u20e3'                  # Combining keycap
)

# Icons that show up in UI strings but live outside the ranges above.
_ICON_GLYPHS = '►▶✅❌⏭🔍📂📁📄🌐📡📝✨🚀⚠💡🎯📊🛠⭐🎉🔧📈📉💻🖥📱⌚'

_ASCII_PUNCTUATION = r"""!@#$%^&*()_+\-=\[\]{}|;':",./<>?`~"""

SYMBOL_PATTERN = re.compile(f'[{_PICTOGRAPHS}{re.escape(_ICON_GLYPHS)}{_ASCII_PUNCTUATION}]')
PICTOGRAPH_PATTERN = re.compile(f'[{_PICTOGRAPHS}{re.escape(_ICON_GLYPHS)}]')

_PUNCT_CLASS = f'[{re.escape(INTERIOR_PUNCTUATION)}]'
LEADING_PUNCT_PATTERN = re.compile(f'^{_PUNCT_CLASS}+')
TRAILING_PUNCT_PATTERN = re.compile(f'{_PUNCT_CLASS}+$')
SPLIT_PATTERN = re.compile(f'{_PUNCT_CLASS}+')

LATIN_DIGIT_SPACE_PATTERN = re.compile(r'[a-zA-Z0-9\s]+')
ASCII_PATTERN = re.compile(r'[\x00-\x7f]+')
WHITESPACE_PATTERN = re.compile(r'\s+')


def _trim_punctuation(text: str) -> str:
    text = LEADING_PUNCT_PATTERN.sub('', text)
    return TRAILING_PUNCT_PATTERN.sub('', text)


def _clean_segment(segment: str) -> str:
    segment = segment.strip()
    if not CJK_PATTERN.search(segment):
        return ''
    segment = LATIN_DIGIT_SPACE_PATTERN.sub('', segment)
    segment = ASCII_PATTERN.sub('', segment)
    return _trim_punctuation(segment).strip()


def _is_phrase(segment: str) -> bool:
    return (
        bool(segment)
        and len(segment) <= STRICT_MAX_LENGTH
        and segment[0] not in INTERIOR_PUNCTUATION
        and segment[-1] not in INTERIOR_PUNCTUATION
        and is_translatable(segment, STRICT_MAX_LENGTH)
    )


def clean_text(text: Optional[str]) -> List[str]:
    """
    Split a raw candidate into zero or more clean phrases.

    Args:
        text: Raw candidate text (literal value, template segment, JSX text...)

    Returns:
        Phrases in their order of appearance; empty for unusable input
    """
    if not text:
        return []

    text = SYMBOL_PATTERN.sub(' ', text)
    text = _trim_punctuation(text)

    if not CJK_PATTERN.search(text):
        return []

    phrases = []
    for segment in SPLIT_PATTERN.split(text):
        segment = _clean_segment(segment)
        if _is_phrase(segment):
            phrases.append(segment)
    return phrases


def normalize_literal(text: Optional[str]) -> Optional[str]:
    """
    Normalize a whole literal without segmenting it.

    Pictographs are removed and whitespace collapsed; punctuation and Latin
    text are kept so the result still matches the source literal closely.

    Returns:
        The normalized literal, or None if it is not translatable
    """
    if not text:
        return None

    text = PICTOGRAPH_PATTERN.sub(' ', text)
    text = WHITESPACE_PATTERN.sub(' ', text).strip()

    if is_translatable(text, LENIENT_MAX_LENGTH):
        return text
    return None
