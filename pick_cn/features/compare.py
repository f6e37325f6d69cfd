"""Run both extraction strategies on the same files and measure agreement."""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Sequence

from ..extractors import BaseExtractor, ExtractionError, SourceUnit

logger = logging.getLogger(__name__)


def agreement(first: Iterable[str], second: Iterable[str]) -> float:
    """Jaccard index of two phrase collections; 1.0 when both are empty."""
    a, b = set(first), set(second)
    union = a | b
    if not union:
        return 1.0
    return len(a & b) / len(union)


@dataclass
class FileComparison:
    """Per-file outcome of running two extractors."""
    path: str
    tree_phrases: List[str] = field(default_factory=list)
    pattern_phrases: List[str] = field(default_factory=list)
    tree_seconds: float = 0.0
    pattern_seconds: float = 0.0
    error: str = ""

    @property
    def common(self) -> List[str]:
        other = set(self.pattern_phrases)
        return [p for p in self.tree_phrases if p in other]

    @property
    def tree_only(self) -> List[str]:
        other = set(self.pattern_phrases)
        return [p for p in self.tree_phrases if p not in other]

    @property
    def pattern_only(self) -> List[str]:
        other = set(self.tree_phrases)
        return [p for p in self.pattern_phrases if p not in other]

    @property
    def agreement(self) -> float:
        return agreement(self.tree_phrases, self.pattern_phrases)


@dataclass
class ComparisonSummary:
    """Aggregate over all compared files."""
    files: List[FileComparison] = field(default_factory=list)

    @property
    def tree_total(self) -> int:
        return len({p for f in self.files for p in f.tree_phrases})

    @property
    def pattern_total(self) -> int:
        return len({p for f in self.files for p in f.pattern_phrases})

    @property
    def agreement(self) -> float:
        tree = [p for f in self.files for p in f.tree_phrases]
        pattern = [p for f in self.files for p in f.pattern_phrases]
        return agreement(tree, pattern)

    @property
    def tree_seconds(self) -> float:
        return sum(f.tree_seconds for f in self.files)

    @property
    def pattern_seconds(self) -> float:
        return sum(f.pattern_seconds for f in self.files)


def compare_unit(unit: SourceUnit, tree_extractor: BaseExtractor, pattern_extractor: BaseExtractor) -> FileComparison:
    """Extract one unit with both strategies, timing each."""
    started = time.perf_counter()
    tree_phrases = tree_extractor.extract(unit)
    tree_seconds = time.perf_counter() - started

    started = time.perf_counter()
    pattern_phrases = pattern_extractor.extract(unit)
    pattern_seconds = time.perf_counter() - started

    return FileComparison(
        path=unit.path,
        tree_phrases=tree_phrases,
        pattern_phrases=pattern_phrases,
        tree_seconds=tree_seconds,
        pattern_seconds=pattern_seconds,
    )


def compare_files(
    files: Sequence[Path],
    tree_extractor: BaseExtractor,
    pattern_extractor: BaseExtractor,
) -> ComparisonSummary:
    """Compare both strategies over files; unreadable or unparsable files are recorded, not raised."""
    summary = ComparisonSummary()
    for path in files:
        try:
            item = compare_unit(SourceUnit.read(path), tree_extractor, pattern_extractor)
        except ExtractionError as e:
            logger.warning("Skipping %s", e)
            item = FileComparison(path=str(path), error=e.reason)
        summary.files.append(item)
    return summary
