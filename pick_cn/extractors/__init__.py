"""Extraction strategies: syntax tree (``ast``) and line patterns (``regex``)."""

from typing import Dict, Optional, Type

from .base import (
    BaseExtractor,
    ExtractionError,
    ExtractionOptions,
    SourceUnit,
)
from .pattern import PatternExtractor
from .tree import TreeExtractor

EXTRACTORS: Dict[str, Type[BaseExtractor]] = {
    TreeExtractor.name: TreeExtractor,
    PatternExtractor.name: PatternExtractor,
}


def create_extractor(method: str, options: Optional[ExtractionOptions] = None) -> BaseExtractor:
    """
    Instantiate the extractor registered under ``method``.

    Raises:
        ValueError: If the method is unknown
    """
    try:
        extractor_class = EXTRACTORS[method]
    except KeyError:
        raise ValueError(
            f"Unknown extraction method '{method}'. Valid options: {', '.join(EXTRACTORS)}"
        ) from None
    return extractor_class(options)


__all__ = [
    'BaseExtractor',
    'ExtractionError',
    'ExtractionOptions',
    'SourceUnit',
    'PatternExtractor',
    'TreeExtractor',
    'EXTRACTORS',
    'create_extractor',
]
