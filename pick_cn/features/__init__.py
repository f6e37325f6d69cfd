"""Translation, mapping and comparison features."""

from .compare import ComparisonSummary, FileComparison, agreement, compare_files
from .mapping import (
    BUILTIN_DICTIONARY,
    PENDING_TRANSLATION,
    MappingGenerator,
    generate_mapping,
    generate_placeholder,
)
from .translators import (
    TRANSLATORS,
    TranslationError,
    TranslationService,
    create_translator,
)

__all__ = [
    'ComparisonSummary',
    'FileComparison',
    'agreement',
    'compare_files',
    'BUILTIN_DICTIONARY',
    'PENDING_TRANSLATION',
    'MappingGenerator',
    'generate_mapping',
    'generate_placeholder',
    'TRANSLATORS',
    'TranslationError',
    'TranslationService',
    'create_translator',
]
