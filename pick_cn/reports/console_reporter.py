"""Console output for extraction runs and strategy comparisons."""

from typing import TYPE_CHECKING, Dict

from ..utils.colors import Colors

if TYPE_CHECKING:
    from ..core.pipeline import PipelineResult
    from ..features.compare import ComparisonSummary

METHODS_HELP = """\
ast (default)
  Parses every file into a syntax tree (tree-sitter) and visits string
  literals, template literals, JSX text and enum members.
  + understands code structure: skips console.* arguments, object keys
    and enum keys; splits templates around ${...}
  + per-construct switches (--extract-comments, --extract-enum-keys, ...)
  - slower; files with severe syntax errors may yield fewer phrases

regex
  Scans the file line by line with regular expressions for quoted and
  backtick strings, plus IDENTIFIER = '...' assignments.
  + fast, no parsing
  - a literal spanning several lines is only partly seen
  - console.* calls are only skipped when the call starts the line
  - a line containing Enum.成员 is skipped entirely

Both methods clean every candidate the same way: emoji and symbols are
removed, text is split on Chinese punctuation and each piece must be a
short, mostly-Chinese phrase (at most 20 characters).

Use `pick-cn compare` to see how the two methods differ on your code.
"""


class ConsoleReporter:
    """Print run summaries and comparisons."""

    @staticmethod
    def print_summary(result: 'PipelineResult', show_phrases: bool = False, limit: int = 20):
        """
        Print the outcome of an extraction run.

        Args:
            result: Pipeline result
            show_phrases: Also list the first ``limit`` mapping entries
            limit: Maximum entries to list
        """
        print("\n" + "=" * 70)
        print(Colors.bold('CHINESE TEXT EXTRACTION'))
        print("=" * 70)
        print(f"Method:          {result.method} ({result.dedup_policy} dedup)")
        print(f"Files scanned:   {result.files_scanned:,}")
        if result.skipped_files:
            print(f"Files skipped:   {Colors.warning(str(len(result.skipped_files)))}")
        print(f"Raw phrases:     {result.raw_phrase_count:,}")
        print(f"Unique phrases:  {Colors.success(f'{len(result.phrases):,}')}")
        print(f"Translated:      {result.translated_count:,}")
        if result.placeholder_count:
            print(f"Placeholders:    {Colors.warning(f'{result.placeholder_count:,}')}")
        if result.output_path:
            print(f"\n{Colors.success('✓')} Mapping written to {result.output_path}")

        if show_phrases and result.mapping:
            ConsoleReporter._print_mapping(result.mapping, limit)

    @staticmethod
    def _print_mapping(mapping: Dict[str, str], limit: int):
        print(f"\n{Colors.bold('Mapping')} (first {min(limit, len(mapping))} of {len(mapping)})")
        print("-" * 70)
        for phrase, translation in list(mapping.items())[:limit]:
            print(f"  {phrase} → {translation}")

    @staticmethod
    def print_comparison(summary: 'ComparisonSummary', show_details: bool = False):
        """Print per-file and overall agreement between the two strategies."""
        print("\n" + "=" * 70)
        print(Colors.bold('EXTRACTION METHOD COMPARISON'))
        print("=" * 70)

        for item in summary.files:
            print(f"\n{Colors.bold(item.path)}")
            if item.error:
                print(f"  {Colors.error('✗')} {item.error}")
                continue

            print(
                f"  ast: {len(item.tree_phrases)}  regex: {len(item.pattern_phrases)}  "
                f"common: {len(item.common)}  agreement: {item.agreement:.0%}"
            )
            print(Colors.dim(
                f"  time: ast {item.tree_seconds * 1000:.1f}ms, regex {item.pattern_seconds * 1000:.1f}ms"
            ))

            if show_details:
                if item.tree_only:
                    print(f"  {Colors.info('ast only:')}   {', '.join(item.tree_only)}")
                if item.pattern_only:
                    print(f"  {Colors.warning('regex only:')} {', '.join(item.pattern_only)}")

        print("\n" + "-" * 70)
        print(f"Total unique phrases: ast {summary.tree_total}, regex {summary.pattern_total}")
        print(f"Overall agreement:    {summary.agreement:.0%}")
        print(Colors.dim(
            f"Total time:           ast {summary.tree_seconds:.2f}s, regex {summary.pattern_seconds:.2f}s"
        ))

    @staticmethod
    def print_methods():
        """Explain the two extraction methods."""
        print(Colors.bold('Extraction methods'))
        print("=" * 70)
        print(METHODS_HELP)
