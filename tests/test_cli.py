"""Tests for CLI commands."""

import json
import os
import sys
import tempfile
from argparse import Namespace
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from pick_cn.cli import (
    OPTION_NAMES,
    build_extraction_options,
    cmd_compare,
    cmd_extract,
    cmd_init,
    cmd_methods,
    load_and_validate_config,
    main,
    resolve_output_path,
)
from pick_cn.features.mapping import PENDING_TRANSLATION
from pick_cn.utils.config import Config, ConfigValidationError
from pick_cn.utils.logging import reset_logger


def extract_args(**overrides):
    """Namespace as produced by ``pick-cn extract`` with no flags."""
    values = dict(
        method=None,
        source=None,
        target=None,
        output=None,
        translator=None,
        api_config=None,
        untranslated=False,
        report=None,
        progress=False,
        verbose=False,
        quiet=True,
        log_file=None,
    )
    values.update({name: None for name in OPTION_NAMES})
    values.update(overrides)
    return Namespace(**values)


def compare_args(**overrides):
    values = dict(source=None, details=False, limit=0, verbose=False)
    values.update({name: None for name in OPTION_NAMES})
    values.update(overrides)
    return Namespace(**values)


@pytest.fixture(autouse=True)
def clean_logger():
    yield
    reset_logger()


@pytest.fixture
def workspace():
    """Temporary working directory with a small source tree."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        src = root / 'src'
        src.mkdir()
        (src / 'toolbar.ts').write_text(
            "export const labels = { on: '启用', off: '禁用' };\n"
            "console.log('调试');\n",
            encoding='utf-8',
        )
        with patch('pick_cn.cli.Path.cwd', return_value=root):
            yield root


class TestCmdInit:
    """Test cases for cmd_init command."""

    def test_init_creates_config_file(self):
        """init should create .pick-cn.yml in the working directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            with patch('pick_cn.cli.Path.cwd', return_value=Path(tmpdir)):
                result = cmd_init(Namespace(provider='baidu', force=False))

                assert result == 0
                config_path = Path(tmpdir) / '.pick-cn.yml'
                assert config_path.exists()

                with open(config_path, 'r', encoding='utf-8') as f:
                    config_data = yaml.safe_load(f)
                assert config_data['extraction']['method'] == 'ast'
                assert config_data['paths']['output'] == 'Chinese-To-English.json'

    def test_init_fails_without_force_if_exists(self):
        """An existing config is not overwritten without --force."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / '.pick-cn.yml'
            config_path.write_text('existing: config')

            with patch('pick_cn.cli.Path.cwd', return_value=Path(tmpdir)):
                result = cmd_init(Namespace(provider='baidu', force=False))

                assert result == 1
                assert config_path.read_text() == 'existing: config'

    def test_init_overwrites_with_force(self):
        """--force replaces the existing config."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / '.pick-cn.yml'
            config_path.write_text('old: config')

            with patch('pick_cn.cli.Path.cwd', return_value=Path(tmpdir)):
                result = cmd_init(Namespace(provider='baidu', force=True))

                assert result == 0
                with open(config_path, 'r', encoding='utf-8') as f:
                    config_data = yaml.safe_load(f)
                assert 'old' not in config_data

    @pytest.mark.parametrize('provider', ['baidu', 'youdao', 'google', 'doubao'])
    def test_init_records_provider(self, provider):
        """The chosen provider is written to the config."""
        with tempfile.TemporaryDirectory() as tmpdir:
            with patch('pick_cn.cli.Path.cwd', return_value=Path(tmpdir)):
                assert cmd_init(Namespace(provider=provider, force=False)) == 0

                config = Config.from_file(Path(tmpdir) / '.pick-cn.yml')
                assert config.translation.provider == provider


class TestLoadAndValidateConfig:
    """Test cases for load_and_validate_config."""

    def test_defaults_without_file(self, workspace):
        """Missing config file yields defaults."""
        config = load_and_validate_config()
        assert config.extraction.method == 'ast'

    def test_invalid_config_raises(self, workspace, capsys):
        """Errors are printed and raised."""
        (workspace / '.pick-cn.yml').write_text('extraction:\n  method: babel\n', encoding='utf-8')

        with pytest.raises(ConfigValidationError):
            load_and_validate_config()

        assert 'babel' in capsys.readouterr().out


class TestHelpers:
    """Test cases for option and output resolution."""

    def test_option_flags_override_config(self):
        """Flags left at None keep the config value."""
        config = Config.from_dict({'extraction': {'options': {'extract_from_comments': True}}})
        options = build_extraction_options(extract_args(extract_from_console=True), config)
        assert options.extract_from_console is True
        assert options.extract_from_comments is True
        assert options.extract_from_jsx is True

    def test_output_flag_wins(self):
        """--output is used as-is."""
        path = resolve_output_path(extract_args(output='out/map.json'), Config(), Path('src'))
        assert path == Path('out/map.json')

    def test_target_directory(self):
        """--target joins the configured file name."""
        path = resolve_output_path(extract_args(target='locales'), Config(), Path('src'))
        assert path == Path('locales') / 'Chinese-To-English.json'

    def test_source_directory_default(self):
        """Without target the mapping lands next to the sources."""
        path = resolve_output_path(extract_args(), Config(), Path('src'))
        assert path == Path('src') / 'Chinese-To-English.json'


class TestCmdExtract:
    """Test cases for cmd_extract command."""

    def test_untranslated_writes_mapping(self, workspace):
        """--untranslated writes every phrase with the pending marker."""
        source = workspace / 'src'
        result = cmd_extract(extract_args(source=str(source), untranslated=True))

        assert result == 0
        mapping = json.loads((source / 'Chinese-To-English.json').read_text(encoding='utf-8'))
        assert mapping == {'启用': PENDING_TRANSLATION, '禁用': PENDING_TRANSLATION}

    def test_regex_method_and_output(self, workspace):
        """--method regex and --output are honoured."""
        output = workspace / 'locales' / 'zh-en.json'
        result = cmd_extract(extract_args(
            source=str(workspace / 'src'), method='regex', output=str(output), untranslated=True,
        ))

        assert result == 0
        assert list(json.loads(output.read_text(encoding='utf-8'))) == ['启用', '禁用']

    def test_invalid_config(self, workspace):
        """An invalid config file stops the command."""
        (workspace / '.pick-cn.yml').write_text('extraction:\n  method: babel\n', encoding='utf-8')
        assert cmd_extract(extract_args(source=str(workspace / 'src'))) == 1

    def test_missing_source(self, workspace):
        """A missing source directory is an error."""
        assert cmd_extract(extract_args(source=str(workspace / 'missing'), untranslated=True)) == 1

    def test_no_credentials_uses_dictionary(self, workspace, capsys):
        """Without credentials the built-in dictionary fills the mapping."""
        source = workspace / 'src'
        with patch.dict(os.environ, {}, clear=True):
            result = cmd_extract(extract_args(source=str(source)))

        assert result == 0
        assert "No credentials for 'baidu'" in capsys.readouterr().out
        mapping = json.loads((source / 'Chinese-To-English.json').read_text(encoding='utf-8'))
        assert mapping == {'启用': 'Enable', '禁用': 'Disable'}

    def test_broken_api_config_warns(self, workspace, capsys):
        """An unreadable --api-config file disables the provider, not the run."""
        source = workspace / 'src'
        broken = workspace / 'api-config.json'
        broken.write_text('{not json', encoding='utf-8')

        with patch.dict(os.environ, {}, clear=True):
            result = cmd_extract(extract_args(source=str(source), api_config=str(broken)))

        assert result == 0
        assert 'Translator unavailable' in capsys.readouterr().out

    def test_report(self, workspace):
        """--report writes the extraction report next to the mapping."""
        report = workspace / 'report.json'
        result = cmd_extract(extract_args(
            source=str(workspace / 'src'), untranslated=True, report=str(report),
        ))

        assert result == 0
        data = json.loads(report.read_text(encoding='utf-8'))
        assert data['metadata']['method'] == 'ast'
        assert data['summary']['unique_phrases'] == 2
        assert data['phrases'] == ['启用', '禁用']

    def test_console_flag(self, workspace):
        """--extract-console includes console arguments."""
        source = workspace / 'src'
        result = cmd_extract(extract_args(source=str(source), untranslated=True, extract_from_console=True))

        assert result == 0
        mapping = json.loads((source / 'Chinese-To-English.json').read_text(encoding='utf-8'))
        assert '调试' in mapping

    def test_summary_printed(self, workspace, capsys):
        """The summary is printed unless --quiet."""
        result = cmd_extract(extract_args(source=str(workspace / 'src'), untranslated=True, quiet=False))

        assert result == 0
        assert 'CHINESE TEXT EXTRACTION' in capsys.readouterr().out


class TestCmdCompare:
    """Test cases for cmd_compare and cmd_methods."""

    def test_compare(self, workspace, capsys):
        """compare prints per-file agreement."""
        result = cmd_compare(compare_args(source=str(workspace / 'src'), details=True))

        assert result == 0
        output = capsys.readouterr().out
        assert 'EXTRACTION METHOD COMPARISON' in output
        assert 'toolbar.ts' in output

    def test_compare_missing_source(self, workspace):
        """A missing source directory is an error."""
        assert cmd_compare(compare_args(source=str(workspace / 'missing'))) == 1

    def test_methods(self, capsys):
        """methods describes both strategies."""
        assert cmd_methods(Namespace()) == 0
        output = capsys.readouterr().out
        assert 'ast (default)' in output
        assert 'regex' in output


class TestMain:
    """Test cases for main entry point."""

    def test_no_command_prints_help(self, capsys):
        """No command shows help and exits cleanly."""
        with patch.object(sys, 'argv', ['pick-cn']):
            assert main() == 0
        assert 'usage' in capsys.readouterr().out

    def test_exec_alias(self):
        """exec is an alias of extract."""
        with patch.object(sys, 'argv', ['pick-cn', 'exec', '--untranslated', '--whole-literals']):
            with patch('pick_cn.cli.cmd_extract', return_value=0) as cmd:
                assert main() == 0

        args = cmd.call_args[0][0]
        assert args.untranslated is True
        assert args.segment_phrases is False
        assert args.extract_from_console is None

    def test_compare_dispatch(self):
        """compare arguments are parsed."""
        with patch.object(sys, 'argv', ['pick-cn', 'compare', '--limit', '5', '-d']):
            with patch('pick_cn.cli.cmd_compare', return_value=0) as cmd:
                assert main() == 0

        args = cmd.call_args[0][0]
        assert args.limit == 5
        assert args.details is True

    def test_version(self, capsys):
        """--version prints the package version."""
        with patch.object(sys, 'argv', ['pick-cn', '--version']):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 0
