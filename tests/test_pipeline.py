"""Tests for the extraction pipeline."""

import json
import tempfile
from pathlib import Path

import pytest

from pick_cn.core.pipeline import ExtractionPipeline, PipelineError
from pick_cn.extractors import ExtractionOptions, PatternExtractor, TreeExtractor
from pick_cn.features.mapping import PENDING_TRANSLATION
from pick_cn.features.translators import TranslationService


class StaticTranslator(TranslationService):
    """Provider that knows a fixed table."""

    name = 'static'

    def __init__(self, table):
        self.table = table

    def translate(self, text):
        return self.table[text]

    def batch_translate(self, texts):
        return {text: self.table.get(text) for text in texts}


def write(root: Path, relative: str, content: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')
    return path


@pytest.fixture
def project():
    """A small project tree with sources, vendored code and build output."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        write(root, 'lib/format.js', "export const empty = '暂无数据';\n")
        write(root, 'src/pages/Order.tsx', "export const Order = () => <h1>订单列表</h1>;\n")
        write(root, 'src/api.ts', "message.error('网络异常');\nconsole.log('调试');\n")
        write(root, 'node_modules/antd/index.js', "const a = '第三方';\n")
        write(root, 'dist/app.js', "const a = '构建产物';\n")
        write(root, 'vendor.min.js', "const a = '压缩文件';\n")
        write(root, 'README.md', "# 说明\n")
        write(root, 'src/App.vue', "<template><p>单文件组件</p></template>\n")
        yield root


class TestFindSourceFiles:
    """Test cases for file discovery."""

    def test_src_first_and_exclusions(self, project):
        """src/ comes first; vendored, built and minified files are excluded."""
        pipeline = ExtractionPipeline(project, TreeExtractor())
        files = [p.relative_to(project).as_posix() for p in pipeline.find_source_files()]
        assert files == ['src/api.ts', 'src/pages/Order.tsx', 'lib/format.js']

    def test_custom_extensions_and_exclude(self, project):
        """Extensions and exclude patterns can be overridden."""
        pipeline = ExtractionPipeline(project, TreeExtractor(), extensions=['.ts'], exclude=['api.ts'])
        assert pipeline.find_source_files() == []

    def test_missing_source(self):
        """A missing source directory raises PipelineError."""
        pipeline = ExtractionPipeline(Path('/non/existent/source'), TreeExtractor())
        with pytest.raises(PipelineError):
            pipeline.find_source_files()


class TestRun:
    """Test cases for ExtractionPipeline.run."""

    def test_untranslated_mapping(self, project):
        """The mapping file lists phrases in discovery order with the pending marker."""
        output = project / 'out' / 'Chinese-To-English.json'
        result = ExtractionPipeline(project, TreeExtractor()).run(output, should_translate=False)

        assert result.output_path == output
        assert result.files_scanned == 3
        assert result.phrases == ['网络异常', '订单列表', '暂无数据']
        data = json.loads(output.read_text(encoding='utf-8'))
        assert list(data) == ['网络异常', '订单列表', '暂无数据']
        assert set(data.values()) == {PENDING_TRANSLATION}
        assert result.placeholder_count == 3
        assert result.translated_count == 0

    def test_translated_mapping(self, project):
        """Provider results and placeholders fill the mapping."""
        translator = StaticTranslator({'网络异常': 'Network error'})
        result = ExtractionPipeline(project, TreeExtractor()).run(translator=translator)

        assert result.output_path is None
        assert result.mapping['网络异常'] == 'Network error'
        assert result.mapping['订单列表'] == 'translate_xxxx'
        assert result.translated_count == 1

    def test_unreadable_file_skipped(self, project):
        """Files that cannot be decoded are recorded and skipped."""
        broken = project / 'src' / 'broken.ts'
        broken.write_bytes(b"const a = '\xff\xfe';\n")

        result = ExtractionPipeline(project, TreeExtractor()).run(should_translate=False)

        assert str(broken) in result.skipped_files
        assert result.files_scanned == 3
        assert '网络异常' in result.phrases

    def test_syntax_error_file_skipped(self, project):
        """Files the extractor refuses are recorded and the batch continues."""
        broken = write(project, 'src/broken.ts', "const a = '保存成功';\nlet = = ;\n")
        extractor = TreeExtractor(ExtractionOptions(skip_on_syntax_error=True))

        result = ExtractionPipeline(project, extractor).run(should_translate=False)

        assert result.skipped_files == {str(broken): 'syntax errors'}
        assert result.files_scanned == 3
        assert '保存成功' not in result.phrases
        assert result.phrases == ['网络异常', '订单列表', '暂无数据']

    def test_surrogate_escape_written(self):
        """A lone surrogate escape does not break writing the mapping."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            write(root, 'a.ts', "const s = '\\uD83D保存';\n")
            output = root / 'out.json'

            for extractor in (TreeExtractor(), PatternExtractor()):
                result = ExtractionPipeline(root, extractor).run(output, should_translate=False)

                assert result.phrases == ['保存']
                assert json.loads(output.read_text(encoding='utf-8')) == {'保存': PENDING_TRANSLATION}

    def test_non_string_translation_counted_as_placeholder(self, project):
        """Non-string provider values become placeholders and are counted."""
        translator = StaticTranslator({'网络异常': 123, '订单列表': 'Order List'})
        result = ExtractionPipeline(project, TreeExtractor()).run(translator=translator)

        assert result.mapping['网络异常'] == 'translate_xxxx'
        assert result.translated_count == 1
        assert result.placeholder_count == 2

    def test_unencodable_translation(self, project):
        """A translation that cannot be written as UTF-8 raises PipelineError."""
        translator = StaticTranslator({'网络异常': 'Network \ud83d'})
        output = project / 'Chinese-To-English.json'

        with pytest.raises(PipelineError, match='Cannot write'):
            ExtractionPipeline(project, TreeExtractor()).run(output, translator=translator)

    def test_scored_dedup_for_tree(self):
        """The tree strategy keeps the more complete variant across files."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            write(root, 'a.ts', "x('保存成功');\n")
            write(root, 'b.ts', "y('保存成功。');\n")
            extractor = TreeExtractor(ExtractionOptions(segment_phrases=False))

            result = ExtractionPipeline(root, extractor).run(should_translate=False)

            assert result.dedup_policy == 'scored'
            assert result.raw_phrase_count == 2
            assert result.phrases == ['保存成功。']
            assert list(result.mapping) == ['保存成功。']

    def test_first_wins_dedup_for_pattern(self):
        """The pattern strategy keeps the first-seen variant."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            write(root, 'a.ts', "x('保存 成功');\n")
            write(root, 'b.ts', "y('保存成功');\n")
            extractor = PatternExtractor(ExtractionOptions(segment_phrases=False))

            result = ExtractionPipeline(root, extractor).run(should_translate=False)

            assert result.dedup_policy == 'first_wins'
            assert result.method == 'regex'
            assert result.phrases == ['保存 成功']

    def test_unwritable_output(self, project):
        """A mapping path that cannot be written raises PipelineError."""
        output = project / 'src'
        with pytest.raises(PipelineError):
            ExtractionPipeline(project, TreeExtractor()).run(output, should_translate=False)

    def test_empty_project(self):
        """A project without Chinese text yields an empty mapping file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            write(root, 'index.js', "export default 42;\n")
            output = root / 'Chinese-To-English.json'

            result = ExtractionPipeline(root, TreeExtractor()).run(output)

            assert result.mapping == {}
            assert json.loads(output.read_text(encoding='utf-8')) == {}
