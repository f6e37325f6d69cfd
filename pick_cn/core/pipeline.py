"""Extraction pipeline: discovery, extraction, dedup, mapping, output."""

import logging
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from tqdm import tqdm

from ..extractors import BaseExtractor, ExtractionError, SourceUnit
from ..features.mapping import PENDING_TRANSLATION, PLACEHOLDER_PREFIX, MappingGenerator
from ..features.translators import TranslationService
from ..reports.json_reporter import JSONReporter
from ..utils.config import DEFAULT_EXCLUDE, DEFAULT_EXTENSIONS
from .dedup import dedupe_with

logger = logging.getLogger(__name__)


class PipelineError(Exception):
    """Unrecoverable pipeline failure (missing source root, unwritable output)."""


@dataclass
class PipelineResult:
    """Outcome of one pipeline run."""
    source_dir: Path
    method: str
    dedup_policy: str
    files_scanned: int = 0
    skipped_files: Dict[str, str] = field(default_factory=dict)
    raw_phrase_count: int = 0
    phrases: List[str] = field(default_factory=list)
    mapping: Dict[str, str] = field(default_factory=dict)
    output_path: Optional[Path] = None

    @property
    def placeholder_count(self) -> int:
        return sum(
            1 for value in self.mapping.values()
            if value == PENDING_TRANSLATION or value.startswith(PLACEHOLDER_PREFIX)
        )

    @property
    def translated_count(self) -> int:
        return len(self.mapping) - self.placeholder_count


class ExtractionPipeline:
    """
    Run one extractor over a source tree and produce the phrase mapping.

    Files are processed one at a time in discovery order; a file that cannot
    be read or parsed is logged, recorded in ``skipped_files`` and skipped.
    """

    def __init__(
        self,
        source_dir: Path,
        extractor: BaseExtractor,
        extensions: Optional[Sequence[str]] = None,
        exclude: Optional[Sequence[str]] = None,
        show_progress: bool = False,
    ):
        self.source_dir = Path(source_dir)
        self.extractor = extractor
        self.extensions = list(extensions) if extensions is not None else list(DEFAULT_EXTENSIONS)
        self.exclude = list(exclude) if exclude is not None else list(DEFAULT_EXCLUDE)
        self.show_progress = show_progress

    def should_exclude(self, path: Path) -> bool:
        """Match a file against directory patterns (``dir/``) and globs."""
        try:
            relative = path.relative_to(self.source_dir)
        except ValueError:
            relative = path
        directories = relative.parts[:-1]

        for pattern in self.exclude:
            if pattern.endswith('/'):
                if pattern.rstrip('/') in directories:
                    return True
            elif fnmatch(relative.as_posix(), pattern) or fnmatch(path.name, pattern):
                return True
        return False

    def find_source_files(self) -> List[Path]:
        """
        List source files, ``src/`` first, then the rest of the tree.

        Raises:
            PipelineError: If the source directory does not exist
        """
        if not self.source_dir.is_dir():
            raise PipelineError(f"Source directory not found: {self.source_dir}")

        found = set()
        for ext in self.extensions:
            for file_path in self.source_dir.rglob(f'*{ext}'):
                if file_path.is_file() and not self.should_exclude(file_path):
                    found.add(file_path)

        src_dir = self.source_dir / 'src'
        preferred = sorted(p for p in found if src_dir in p.parents)
        rest = sorted(p for p in found if src_dir not in p.parents)
        files = preferred + rest

        logger.info("Found %d source file(s) in %s", len(files), self.source_dir)
        return files

    def extract(self, files: Sequence[Path], result: PipelineResult) -> List[str]:
        """Extract from every file; returns the ordered exact-merge across files."""
        merged: Dict[str, None] = {}

        progress = tqdm(files, desc='Extracting', unit='file', disable=not self.show_progress)
        for path in progress:
            try:
                phrases = self.extractor.extract(SourceUnit.read(path))
            except ExtractionError as e:
                logger.warning("Skipping %s", e)
                result.skipped_files[str(path)] = e.reason
                continue

            result.files_scanned += 1
            result.raw_phrase_count += len(phrases)
            for phrase in phrases:
                merged.setdefault(phrase, None)

        return list(merged)

    def run(
        self,
        output_path: Optional[Path] = None,
        translator: Optional[TranslationService] = None,
        should_translate: bool = True,
    ) -> PipelineResult:
        """
        Run the full pipeline.

        Args:
            output_path: Mapping file to write; None skips writing
            translator: Translation provider (None uses dictionary/placeholders)
            should_translate: False fills the mapping with the pending marker

        Raises:
            PipelineError: On a missing source root or an unwritable output
        """
        policy = self.extractor.dedup_policy
        result = PipelineResult(
            source_dir=self.source_dir,
            method=self.extractor.name,
            dedup_policy=policy.value,
        )

        files = self.find_source_files()
        phrases = self.extract(files, result)
        result.phrases = dedupe_with(policy, phrases)
        logger.info(
            "Extracted %d phrase(s), %d after dedup (%s)",
            len(phrases), len(result.phrases), policy.value,
        )

        result.mapping = MappingGenerator(translator).generate(result.phrases, should_translate)

        if output_path is not None:
            try:
                result.output_path = JSONReporter.write_mapping(result.mapping, Path(output_path))
            except (OSError, UnicodeError) as e:
                raise PipelineError(f"Cannot write {output_path}: {e}") from e

        return result
