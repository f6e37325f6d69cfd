"""Core phrase handling: classification, cleaning, dedup and the pipeline."""

from .classifier import (
    LENIENT_MAX_LENGTH,
    STRICT_MAX_LENGTH,
    contains_chinese,
    is_translatable,
)
from .cleaner import clean_text, normalize_literal
from .dedup import DedupPolicy, dedupe, dedupe_first_wins, dedupe_with, quality_score

__all__ = [
    'LENIENT_MAX_LENGTH',
    'STRICT_MAX_LENGTH',
    'contains_chinese',
    'is_translatable',
    'clean_text',
    'normalize_literal',
    'DedupPolicy',
    'dedupe',
    'dedupe_first_wins',
    'dedupe_with',
    'quality_score',
]
