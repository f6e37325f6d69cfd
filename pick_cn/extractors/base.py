"""Base types shared by the extraction strategies."""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..core.cleaner import clean_text, normalize_literal
from ..core.dedup import DedupPolicy

# Console methods whose arguments are developer output, not UI text.
LOGGING_METHODS = frozenset({
    'log', 'warn', 'error', 'info', 'debug', 'trace',
    'table', 'dir', 'group', 'groupEnd',
})


_ESCAPE_PATTERN = re.compile(r'\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])')
_SURROGATE_PATTERN = re.compile('[\ud800-\udfff]')
_SIMPLE_ESCAPES = {
    'n': '\n', 't': '\t', 'r': '\r', 'b': '\b',
    'f': '\f', 'v': '\v', '0': '\0',
    '\n': '', '\r\n': '', '\r': '', '\u2028': '', '\u2029': '',
}


def _replace_escape(match: 're.Match') -> str:
    body = match.group(1)
    if body.startswith('u{'):
        code = int(body[2:-1], 16)
        return chr(code) if code <= 0x10FFFF else ''
    if body[0] in 'ux' and len(body) > 1:
        return chr(int(body[1:], 16))
    return _SIMPLE_ESCAPES.get(body, body)


def decode_escapes(raw: str) -> str:
    """Decode JavaScript string escapes (``\\n``, ``\\u4e2d``, ``\\u{1F600}``...)."""
    if '\\' not in raw:
        return raw
    decoded = _ESCAPE_PATTERN.sub(_replace_escape, raw)
    if not _SURROGATE_PATTERN.search(decoded):
        return decoded
    # Re-join surrogate pairs written as two \\uXXXX escapes; unpaired halves
    # cannot be written as UTF-8 and are dropped.
    joined = decoded.encode('utf-16-le', 'surrogatepass').decode('utf-16-le', 'ignore')
    return _SURROGATE_PATTERN.sub('', joined)


class ExtractionError(Exception):
    """Raised when a source file cannot be read or parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


@dataclass(frozen=True)
class SourceUnit:
    """One source file's path and text."""
    path: str
    content: str

    @classmethod
    def read(cls, path: Union[str, Path]) -> 'SourceUnit':
        """
        Read a UTF-8 source file.

        Raises:
            ExtractionError: If the file cannot be read or decoded
        """
        try:
            content = Path(path).read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise ExtractionError(str(path), f"cannot read file ({e.__class__.__name__}: {e})") from e
        return cls(path=str(path), content=content)

    @property
    def suffix(self) -> str:
        return Path(self.path).suffix.lower()


@dataclass(frozen=True)
class ExtractionOptions:
    """Which syntactic constructs contribute candidates."""
    extract_from_console: bool = False
    extract_from_comments: bool = False
    extract_from_jsx: bool = True
    extract_from_enum_values: bool = True
    extract_from_enum_keys: bool = False
    extract_from_identifiers: bool = False
    extract_from_property_names: bool = False
    # False keeps each literal whole instead of splitting it on punctuation.
    segment_phrases: bool = True
    skip_on_syntax_error: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ExtractionOptions':
        """
        Build options from a config mapping.

        Raises:
            ValueError: On unknown option names
        """
        data = data or {}
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown extraction option(s): {', '.join(unknown)}")
        return cls(**{name: bool(value) for name, value in data.items()})

    def with_overrides(self, **overrides) -> 'ExtractionOptions':
        """Return a copy with the given fields replaced; None values are ignored."""
        changes = {name: value for name, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self

    def to_dict(self) -> Dict[str, bool]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class PhraseCollector:
    """
    Ordered, exact-match phrase set for a single file.

    Every candidate goes through the same shaping step: punctuation-driven
    segmentation, or whole-literal normalization when segmentation is off.
    """

    def __init__(self, segment: bool = True):
        self.segment = segment
        self._phrases: Dict[str, None] = {}

    def add(self, candidate: Optional[str]) -> None:
        if not candidate:
            return
        if self.segment:
            for phrase in clean_text(candidate):
                self._phrases.setdefault(phrase, None)
        else:
            phrase = normalize_literal(candidate)
            if phrase:
                self._phrases.setdefault(phrase, None)

    def __len__(self) -> int:
        return len(self._phrases)

    def phrases(self) -> List[str]:
        return list(self._phrases)


class BaseExtractor(ABC):
    """Strategy interface: one source unit in, ordered phrases out."""

    #: Short name used by the CLI (``--method``).
    name: str = ''
    #: Dedup policy the pipeline applies to this strategy's output.
    dedup_policy: DedupPolicy = DedupPolicy.SCORED

    def __init__(self, options: Optional[ExtractionOptions] = None):
        self.options = options or ExtractionOptions()

    @abstractmethod
    def extract(self, unit: SourceUnit) -> List[str]:
        """
        Extract phrases from one source unit.

        Raises:
            ExtractionError: If the unit has to be skipped as a whole; callers
                record the file and continue with the next one
        """
        pass

    def extract_source(self, content: str, path: str = 'source.ts') -> List[str]:
        """Convenience wrapper for in-memory source text."""
        return self.extract(SourceUnit(path=path, content=content))

    def _collector(self) -> PhraseCollector:
        return PhraseCollector(segment=self.options.segment_phrases)


def comment_lines(comment: str) -> List[str]:
    """Return the text lines of a ``//`` or ``/* */`` comment without its markers."""
    if comment.startswith('//'):
        return [comment[2:].strip()]
    if comment.startswith('/*'):
        comment = comment[2:]
        if comment.endswith('*/'):
            comment = comment[:-2]
    return [line.strip().lstrip('*').strip() for line in comment.splitlines()]
