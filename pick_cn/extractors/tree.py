"""Syntax-tree extraction backed by tree-sitter.

Each file is parsed with the grammar matching its extension and walked once,
depth-first in source order. Per node kind, ``ExtractionOptions`` decides
whether the node's text becomes a candidate:

- string literals and template literals (each fixed segment of an
  interpolated template on its own), except in property-key positions
- JSX text
- enum member values (plain strings only) and, optionally, enum member names
- optionally comments, identifiers and property names

Arguments of ``console.<method>(...)`` calls are skipped unless
``extract_from_console`` is set.
"""

import logging
from typing import Dict, Iterator, List, Optional, Tuple

import tree_sitter_javascript as ts_javascript
import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Node, Parser, Tree

from ..core.dedup import DedupPolicy
from .base import (
    LOGGING_METHODS,
    BaseExtractor,
    ExtractionError,
    PhraseCollector,
    SourceUnit,
    comment_lines,
    decode_escapes,
)

logger = logging.getLogger(__name__)

# A node this many levels (or fewer) below a console call is developer output.
LOGGING_ANCESTOR_DEPTH = 3

_LANGUAGE_LOADERS = {
    'javascript': ts_javascript.language,
    'typescript': ts_typescript.language_typescript,
    'tsx': ts_typescript.language_tsx,
}

DIALECTS = {
    '.js': 'javascript',
    '.jsx': 'javascript',
    '.mjs': 'javascript',
    '.cjs': 'javascript',
    '.ts': 'typescript',
    '.mts': 'typescript',
    '.cts': 'typescript',
    '.tsx': 'tsx',
}

# Parent node type -> field holding a property-name slot.
KEY_FIELDS = {
    'pair': 'key',
    'pair_pattern': 'key',
    'enum_assignment': 'name',
    'property_signature': 'name',
    'public_field_definition': 'name',
    'field_definition': 'property',
    'method_definition': 'name',
}

IDENTIFIER_TYPES = frozenset({
    'identifier',
    'shorthand_property_identifier',
    'shorthand_property_identifier_pattern',
    'type_identifier',
})

_languages: Dict[str, Language] = {}


def get_language(dialect: str) -> Language:
    """Return the (cached, immutable) tree-sitter language for a dialect."""
    language = _languages.get(dialect)
    if language is None:
        language = Language(_LANGUAGE_LOADERS[dialect]())
        _languages[dialect] = language
    return language


def dialect_for(path: str) -> str:
    """Map a file path to a grammar; unknown extensions parse as JavaScript."""
    for suffix, dialect in DIALECTS.items():
        if path.lower().endswith(suffix):
            return dialect
    return 'javascript'


def _same_node(a: Optional[Node], b: Node) -> bool:
    return (
        a is not None
        and a.start_byte == b.start_byte
        and a.end_byte == b.end_byte
        and a.type == b.type
    )


def _field_is(node: Node, field: str) -> bool:
    parent = node.parent
    return parent is not None and _same_node(parent.child_by_field_name(field), node)


class TreeExtractor(BaseExtractor):
    """Syntax-tree strategy (``--method ast``)."""

    name = 'ast'
    dedup_policy = DedupPolicy.SCORED

    def parse(self, unit: SourceUnit) -> Tuple[Tree, bytes]:
        """Parse a unit with a fresh parser; returns the tree and the source bytes."""
        source = unit.content.encode('utf-8')
        parser = Parser(get_language(dialect_for(unit.path)))
        return parser.parse(source), source

    def extract(self, unit: SourceUnit) -> List[str]:
        """
        Raises:
            ExtractionError: If the file cannot be parsed, or has syntax errors
                and ``skip_on_syntax_error`` is set
        """
        try:
            tree, source = self.parse(unit)
        except Exception as e:
            raise ExtractionError(unit.path, f"parse failed ({e.__class__.__name__}: {e})") from e

        if tree.root_node.has_error:
            if self.options.skip_on_syntax_error:
                raise ExtractionError(unit.path, "syntax errors")
            logger.debug("%s: syntax errors, extracting from the recovered tree", unit.path)

        collector = self._collector()
        for node, excluded in self._walk(tree.root_node, source):
            if not excluded:
                self._visit(node, source, collector)

        logger.debug("%s: %d phrase(s) (ast)", unit.path, len(collector))
        return collector.phrases()

    def _walk(self, root: Node, source: bytes) -> Iterator[Tuple[Node, bool]]:
        """
        Pre-order traversal yielding ``(node, excluded)``.

        The distance to the nearest enclosing console call is carried down
        the stack, so exclusion needs no upward walks.
        """
        check_console = not self.options.extract_from_console
        stack: List[Tuple[Node, Optional[int]]] = [(root, None)]

        while stack:
            node, distance = stack.pop()
            if check_console and self._is_logging_call(node, source):
                distance = 0

            yield node, distance is not None and distance <= LOGGING_ANCESTOR_DEPTH

            child_distance = distance + 1 if distance is not None else None
            for child in reversed(node.children):
                stack.append((child, child_distance))

    @classmethod
    def _is_logging_call(cls, node: Node, source: bytes) -> bool:
        if node.type != 'call_expression':
            return False
        callee = node.child_by_field_name('function')
        if callee is None or callee.type != 'member_expression':
            return False
        obj = callee.child_by_field_name('object')
        prop = callee.child_by_field_name('property')
        return (
            obj is not None and obj.type == 'identifier' and cls._text(obj, source) == 'console'
            and prop is not None and cls._text(prop, source) in LOGGING_METHODS
        )

    def _visit(self, node: Node, source: bytes, collector: PhraseCollector) -> None:
        kind = node.type
        options = self.options

        if kind == 'string':
            if self._is_bare_enum_member(node):
                if options.extract_from_enum_keys:
                    collector.add(self._string_value(node, source))
            elif not self._is_key_position(node) and not self._is_enum_value(node):
                collector.add(self._string_value(node, source))

        elif kind == 'template_string':
            if not self._is_enum_value(node):
                for segment in self._template_segments(node, source):
                    collector.add(segment)

        elif kind == 'jsx_text':
            if options.extract_from_jsx:
                collector.add(self._text(node, source))

        elif kind == 'enum_assignment':
            self._visit_enum_member(node, source, collector)

        elif kind == 'property_identifier':
            if self._is_bare_enum_member(node):
                if options.extract_from_enum_keys:
                    collector.add(self._text(node, source))
            elif node.parent.type != 'enum_assignment' and options.extract_from_property_names:
                collector.add(self._text(node, source))

        elif kind == 'comment':
            if options.extract_from_comments:
                for line in comment_lines(self._text(node, source)):
                    collector.add(line)

        elif kind in IDENTIFIER_TYPES:
            if options.extract_from_identifiers:
                collector.add(self._text(node, source))

    def _visit_enum_member(self, node: Node, source: bytes, collector: PhraseCollector) -> None:
        name = node.child_by_field_name('name')
        value = node.child_by_field_name('value')

        if self.options.extract_from_enum_keys and name is not None:
            if name.type == 'string':
                collector.add(self._string_value(name, source))
            else:
                collector.add(self._text(name, source))

        if self.options.extract_from_enum_values and value is not None and value.type == 'string':
            collector.add(self._string_value(value, source))

    @staticmethod
    def _is_key_position(node: Node) -> bool:
        parent = node.parent
        if parent is None:
            return False
        field = KEY_FIELDS.get(parent.type)
        return field is not None and _field_is(node, field)

    @staticmethod
    def _is_enum_value(node: Node) -> bool:
        parent = node.parent
        return parent is not None and parent.type == 'enum_assignment' and _field_is(node, 'value')

    @staticmethod
    def _is_bare_enum_member(node: Node) -> bool:
        """Enum member written without an initializer."""
        return node.parent is not None and node.parent.type == 'enum_body'

    @staticmethod
    def _text(node: Node, source: bytes) -> str:
        return source[node.start_byte:node.end_byte].decode('utf-8', errors='replace')

    @staticmethod
    def _string_value(node: Node, source: bytes) -> str:
        raw = source[node.start_byte + 1:node.end_byte - 1].decode('utf-8', errors='replace')
        return decode_escapes(raw)

    @staticmethod
    def _template_segments(node: Node, source: bytes) -> List[str]:
        """Fixed text segments of a template literal (head, middles, tail)."""
        segments = []
        position = node.start_byte + 1
        for child in node.named_children:
            if child.type == 'template_substitution':
                segments.append(source[position:child.start_byte])
                position = child.end_byte
        segments.append(source[position:node.end_byte - 1])
        return [decode_escapes(segment.decode('utf-8', errors='replace')) for segment in segments]
