"""Command-line interface for pick-cn."""

import sys
import argparse
from pathlib import Path

from .__version__ import __version__
from .utils.colors import Colors
from .utils.config import (
    CONFIG_FILE_NAME,
    TRANSLATION_PROVIDERS,
    Config,
    ConfigValidationError,
    CredentialsConfig,
    create_default_config,
)
from .utils.logging import configure_logging
from .core.pipeline import ExtractionPipeline, PipelineError
from .extractors import EXTRACTORS, ExtractionOptions, create_extractor
from .features.compare import compare_files
from .features.translators import create_translator
from .reports.json_reporter import JSONReporter
from .reports.console_reporter import ConsoleReporter

OPTION_NAMES = tuple(ExtractionOptions().to_dict())


def load_and_validate_config(validate: bool = True, verbose: bool = False) -> Config:
    """
    Load configuration and optionally validate it.

    Args:
        validate: Whether to validate the config
        verbose: Whether to print warnings

    Returns:
        Loaded Config object

    Raises:
        ConfigValidationError: If validation fails with errors
    """
    config = Config.from_file()

    if validate:
        errors, warnings = config.validate()

        if verbose and warnings:
            for warning in warnings:
                print(f"{Colors.warning('⚠️')}  Config warning: {warning}")

        if errors:
            print(f"{Colors.error('❌')} Configuration errors:")
            for error in errors:
                print(f"   • {error}")
            raise ConfigValidationError(errors)

    return config


def build_extraction_options(args, config: Config) -> ExtractionOptions:
    """
    Config options with command-line switches applied on top.

    Raises:
        ValueError: On unknown option names in the config
    """
    overrides = {name: getattr(args, name, None) for name in OPTION_NAMES}
    return config.extraction.build_options().with_overrides(**overrides)


def resolve_output_path(args, config: Config, source_dir: Path) -> Path:
    """``--output`` wins; otherwise the mapping file goes to the target or source directory."""
    if getattr(args, 'output', None):
        return Path(args.output)
    target = getattr(args, 'target', None) or config.paths.target
    directory = Path(target) if target else source_dir
    return directory / config.paths.output


def build_translator(args, config: Config, source_dir: Path):
    """
    Create the configured translation provider, or None.

    Missing or broken credentials are reported and the run continues with the
    built-in dictionary and placeholders.
    """
    provider = getattr(args, 'translator', None) or config.translation.provider
    api_config = getattr(args, 'api_config', None)

    try:
        credentials = CredentialsConfig.resolve(
            config,
            api_config_path=Path(api_config) if api_config else None,
            source_dir=source_dir,
        )
        translator = create_translator(provider, credentials)
    except (ConfigValidationError, ValueError) as e:
        print(f"{Colors.warning('⚠️')}  Translator unavailable: {e}")
        return None

    if not translator.is_configured:
        print(f"{Colors.warning('⚠️')}  No credentials for '{provider}'")
        print(f"   Using the built-in dictionary and placeholders")
        return None

    return translator


def cmd_init(args):
    """Initialize configuration file."""
    config_path = Path.cwd() / CONFIG_FILE_NAME

    if config_path.exists() and not args.force:
        print(f"{Colors.error('❌')} Config already exists: {config_path}")
        print(f"   Use --force to overwrite")
        return 1

    config = create_default_config(args.provider)
    config.save(config_path)

    print(f"{Colors.success('✅')} Created: {config_path}")
    print(f"\n{Colors.bold('Next steps:')}")
    print(f"1. Edit {CONFIG_FILE_NAME} to set paths and {args.provider} credentials")
    print(f"2. Run: pick-cn extract")

    return 0


def cmd_extract(args):
    """Extract Chinese phrases and write the translation mapping."""
    configure_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    try:
        config = load_and_validate_config(validate=True, verbose=args.verbose)
    except ConfigValidationError:
        return 1

    method = args.method or config.extraction.method
    source_dir = Path(args.source or config.paths.source)

    try:
        options = build_extraction_options(args, config)
        extractor = create_extractor(method, options)
    except ValueError as e:
        print(f"{Colors.error('❌')} {e}")
        return 1

    should_translate = config.translation.enabled and not args.untranslated
    translator = build_translator(args, config, source_dir) if should_translate else None

    pipeline = ExtractionPipeline(
        source_dir=source_dir,
        extractor=extractor,
        extensions=config.paths.extensions,
        exclude=config.paths.exclude,
        show_progress=args.progress,
    )

    try:
        result = pipeline.run(
            output_path=resolve_output_path(args, config, source_dir),
            translator=translator,
            should_translate=should_translate,
        )
        if args.report:
            report_path = JSONReporter.generate(result, Path(args.report))
            print(f"{Colors.success('✅')} Report: {report_path}")
    except PipelineError as e:
        print(f"{Colors.error('❌')} {e}")
        return 1
    except OSError as e:
        print(f"{Colors.error('❌')} Cannot write report: {e}")
        return 1

    if not args.quiet:
        ConsoleReporter.print_summary(result, show_phrases=args.verbose)

    return 0


def cmd_compare(args):
    """Run both extraction methods and show where they disagree."""
    configure_logging(verbose=args.verbose, quiet=False)

    try:
        config = load_and_validate_config(validate=True, verbose=args.verbose)
    except ConfigValidationError:
        return 1

    source_dir = Path(args.source or config.paths.source)

    try:
        options = build_extraction_options(args, config)
    except ValueError as e:
        print(f"{Colors.error('❌')} {e}")
        return 1

    tree_extractor = create_extractor('ast', options)
    pattern_extractor = create_extractor('regex', options)

    pipeline = ExtractionPipeline(
        source_dir=source_dir,
        extractor=tree_extractor,
        extensions=config.paths.extensions,
        exclude=config.paths.exclude,
    )

    try:
        files = pipeline.find_source_files()
    except PipelineError as e:
        print(f"{Colors.error('❌')} {e}")
        return 1

    if args.limit:
        files = files[:args.limit]

    summary = compare_files(files, tree_extractor, pattern_extractor)
    ConsoleReporter.print_comparison(summary, show_details=args.details)

    return 0


def cmd_methods(args):
    """Describe the extraction methods."""
    ConsoleReporter.print_methods()
    return 0


def add_option_flags(parser):
    """Per-construct switches shared by ``extract`` and ``compare``."""
    group = parser.add_argument_group('extraction options')
    group.add_argument('--extract-console', dest='extract_from_console', action='store_true', default=None,
                       help='Also extract arguments of console.* calls')
    group.add_argument('--extract-comments', dest='extract_from_comments', action='store_true', default=None,
                       help='Also extract comment text')
    group.add_argument('--no-extract-jsx', dest='extract_from_jsx', action='store_false', default=None,
                       help='Skip JSX text nodes')
    group.add_argument('--no-extract-enum-values', dest='extract_from_enum_values', action='store_false',
                       default=None, help='Skip enum member values')
    group.add_argument('--extract-enum-keys', dest='extract_from_enum_keys', action='store_true', default=None,
                       help='Also extract enum member names')
    group.add_argument('--extract-identifiers', dest='extract_from_identifiers', action='store_true',
                       default=None, help='Also extract Chinese identifiers')
    group.add_argument('--extract-property-names', dest='extract_from_property_names', action='store_true',
                       default=None, help='Also extract object keys and property names')
    group.add_argument('--whole-literals', dest='segment_phrases', action='store_false', default=None,
                       help='Keep each literal whole instead of splitting on punctuation')
    group.add_argument('--skip-syntax-errors', dest='skip_on_syntax_error', action='store_true', default=None,
                       help='Skip files that do not parse cleanly (ast only)')


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Extract Chinese UI text from JS/TS code into a translation mapping',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # init command
    init_parser = subparsers.add_parser('init', help='Initialize configuration file')
    init_parser.add_argument('--provider', default='baidu', choices=TRANSLATION_PROVIDERS,
                             help='Translation provider (default: baidu)')
    init_parser.add_argument('--force', action='store_true', help='Overwrite existing config')

    # extract command
    extract_parser = subparsers.add_parser('extract', aliases=['exec'],
                                           help='Extract phrases and write the mapping file')
    extract_parser.add_argument('--method', '-m', choices=list(EXTRACTORS),
                                help='Extraction method (default: from config, else ast)')
    extract_parser.add_argument('--source', '-s', metavar='DIR', help='Directory to scan')
    extract_parser.add_argument('--target', '-t', metavar='DIR',
                                help='Directory for the mapping file (default: source directory)')
    extract_parser.add_argument('--output', '-o', metavar='PATH', help='Mapping file path')
    extract_parser.add_argument('--translator', choices=TRANSLATION_PROVIDERS, help='Translation provider')
    extract_parser.add_argument('--api-config', metavar='PATH', help='JSON file with provider credentials')
    extract_parser.add_argument('--untranslated', '--no-translate', dest='untranslated', action='store_true',
                                help='Skip translation, fill values with a pending marker')
    extract_parser.add_argument('--report', metavar='PATH', help='Also write a JSON extraction report')
    extract_parser.add_argument('--progress', action='store_true', help='Show a progress bar')
    extract_parser.add_argument('--verbose', '-v', action='store_true', help='Show detailed output')
    extract_parser.add_argument('--quiet', '-q', action='store_true', help='Only show warnings and errors')
    extract_parser.add_argument('--log-file', metavar='PATH', help='Also write logs to a file')
    add_option_flags(extract_parser)

    # compare command
    compare_parser = subparsers.add_parser('compare', help='Compare the ast and regex methods')
    compare_parser.add_argument('--source', '-s', metavar='DIR', help='Directory to scan')
    compare_parser.add_argument('--details', '-d', action='store_true', help='List phrases found by one method only')
    compare_parser.add_argument('--limit', type=int, default=0, help='Compare only the first N files')
    compare_parser.add_argument('--verbose', '-v', action='store_true', help='Show detailed output')
    add_option_flags(compare_parser)

    # methods command
    subparsers.add_parser('methods', help='Describe the extraction methods')

    args = parser.parse_args()

    # Execute command
    if args.command == 'init':
        return cmd_init(args)
    elif args.command in ('extract', 'exec'):
        return cmd_extract(args)
    elif args.command == 'compare':
        return cmd_compare(args)
    elif args.command == 'methods':
        return cmd_methods(args)
    else:
        parser.print_help()
        return 0


if __name__ == '__main__':
    sys.exit(main())
