"""
pick-cn
=======

Extract Chinese UI text from JavaScript/TypeScript code and build a
phrase-to-translation mapping for later text replacement.

Usage:
    from pick_cn import ExtractionPipeline, TreeExtractor

    pipeline = ExtractionPipeline('./src', TreeExtractor())
    result = pipeline.run(output_path='Chinese-To-English.json', should_translate=False)
    print(f"{len(result.phrases)} phrases")

CLI:
    pick-cn init
    pick-cn extract --source ./src --translator baidu
    pick-cn compare --details
"""

from .__version__ import __version__, __author__, __description__

# Core exports
from .core.cleaner import clean_text
from .core.classifier import is_translatable
from .core.dedup import DedupPolicy, dedupe
from .core.pipeline import ExtractionPipeline, PipelineError, PipelineResult

# Extractors
from .extractors import (
    ExtractionOptions,
    PatternExtractor,
    SourceUnit,
    TreeExtractor,
    create_extractor,
)

# Features
from .features.mapping import MappingGenerator
from .features.translators import TranslationService, create_translator

__all__ = [
    '__version__',
    '__author__',
    '__description__',
    'clean_text',
    'is_translatable',
    'DedupPolicy',
    'dedupe',
    'ExtractionPipeline',
    'PipelineError',
    'PipelineResult',
    'ExtractionOptions',
    'PatternExtractor',
    'SourceUnit',
    'TreeExtractor',
    'create_extractor',
    'MappingGenerator',
    'TranslationService',
    'create_translator',
]
