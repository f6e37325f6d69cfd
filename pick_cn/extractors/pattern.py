"""Line-oriented extraction with regular expressions.

Fast and dependency-free, at the price of precision: literals spanning
several lines are only partly seen, the console skip only fires when the
call starts the line, and the enum-usage skip is a heuristic that can
drop a whole line.
"""

import logging
import re
from typing import Iterator, List

from ..core.classifier import CJK_PATTERN
from ..core.dedup import DedupPolicy
from .base import (
    LOGGING_METHODS,
    BaseExtractor,
    PhraseCollector,
    SourceUnit,
    comment_lines,
    decode_escapes,
)

logger = logging.getLogger(__name__)

# IDENTIFIER = 'value' with any of the three quote styles.
ENUM_VALUE_PATTERN = re.compile(
    r"""[\w$]+\s*=\s*(?:'((?:[^'\\\n]|\\.)*)'|"((?:[^"\\\n]|\\.)*)"|`((?:[^`\\]|\\.)*)`)"""
)

# Status.待处理 or status: Status.待处理
ENUM_USAGE_PATTERN = re.compile(r'(?:[\w$]+\s*:\s*)?[A-Za-z_$][\w$]*\.[\u4e00-\u9fff]')

LOGGING_CALL_PATTERN = re.compile(
    r'^console\.(?:' + '|'.join(sorted(LOGGING_METHODS)) + r')\s*\('
)

SINGLE_QUOTED_PATTERN = re.compile(r"'((?:[^'\\\n]|\\.)*)'")
DOUBLE_QUOTED_PATTERN = re.compile(r'"((?:[^"\\\n]|\\.)*)"')
BACKTICK_PATTERN = re.compile(r'`((?:[^`\\]|\\.)*)`')

INTERPOLATION_PATTERN = re.compile(r'\$\{[^}]*\}')

# Line comments not preceded by a URL scheme colon or a quote, and block comments.
COMMENT_PATTERN = re.compile(r"(?<![:'\"\w])//[^\n]*|/\*[\s\S]*?\*/")

_COMMENT_PREFIXES = ('//', '/*', '*')


def split_template(content: str) -> List[str]:
    """Return the literal segments of a template body, without ``${...}`` parts."""
    return INTERPOLATION_PATTERN.split(content)


class PatternExtractor(BaseExtractor):
    """Regex-based strategy (``--method regex``)."""

    name = 'regex'
    dedup_policy = DedupPolicy.FIRST_WINS

    def extract(self, unit: SourceUnit) -> List[str]:
        collector = self._collector()

        for span in self._enum_values(unit.content):
            self._add_span(collector, span, template=False)

        for line in self._candidate_lines(unit.content):
            for pattern, is_template in (
                (SINGLE_QUOTED_PATTERN, False),
                (DOUBLE_QUOTED_PATTERN, False),
                (BACKTICK_PATTERN, True),
            ):
                for match in pattern.finditer(line):
                    span = match.group(1)
                    if CJK_PATTERN.search(span):
                        self._add_span(collector, span, template=is_template)

        if self.options.extract_from_comments:
            for match in COMMENT_PATTERN.finditer(unit.content):
                for text in comment_lines(match.group(0)):
                    collector.add(text)

        logger.debug("%s: %d phrase(s) (regex)", unit.path, len(collector))
        return collector.phrases()

    def _enum_values(self, content: str) -> Iterator[str]:
        for match in ENUM_VALUE_PATTERN.finditer(content):
            single, double, backtick = match.groups()
            if backtick is not None:
                for segment in split_template(backtick):
                    if CJK_PATTERN.search(segment):
                        yield segment
                continue
            value = single if single is not None else double
            if CJK_PATTERN.search(value):
                yield value

    def _candidate_lines(self, content: str) -> Iterator[str]:
        """Yield the lines that survive the enum-usage, console and comment skips."""
        in_block_comment = False

        for line in content.splitlines():
            stripped = line.strip()

            if not self.options.extract_from_comments:
                if in_block_comment:
                    if '*/' in stripped:
                        in_block_comment = False
                    continue
                if stripped.startswith(_COMMENT_PREFIXES):
                    if stripped.startswith('/*') and '*/' not in stripped:
                        in_block_comment = True
                    continue

            if not CJK_PATTERN.search(stripped):
                continue

            if ENUM_USAGE_PATTERN.search(stripped):
                continue

            if not self.options.extract_from_console and LOGGING_CALL_PATTERN.match(stripped):
                continue

            yield stripped

    @staticmethod
    def _add_span(collector: PhraseCollector, span: str, template: bool) -> None:
        segments = split_template(span) if template else [span]
        for segment in segments:
            collector.add(decode_escapes(segment))
