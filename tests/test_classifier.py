"""Tests for the text classifier."""

import pytest

from pick_cn.core.classifier import (
    LENIENT_MAX_LENGTH,
    STRICT_MAX_LENGTH,
    contains_chinese,
    count_chinese,
    count_latin,
    is_code_like,
    is_translatable,
)


class TestContainsChinese:
    """Test cases for CJK detection."""

    def test_detects_ideographs(self):
        """Strings with CJK ideographs should be detected."""
        assert contains_chinese('用户名')
        assert contains_chinese('Hello 世界')

    def test_rejects_non_cjk(self):
        """Latin text, digits and Chinese punctuation alone are not Chinese."""
        assert not contains_chinese('hello')
        assert not contains_chinese('12345')
        assert not contains_chinese('，。！')
        assert not contains_chinese('')
        assert not contains_chinese(None)

    def test_counts(self):
        """Script counts should ignore other characters."""
        assert count_chinese('共3条 item') == 2
        assert count_latin('共3条 item') == 4


class TestIsCodeLike:
    """Test cases for structural code detection."""

    def test_brackets_and_semicolons(self):
        """Brackets and semicolons mark code."""
        assert is_code_like('保存(草稿)')
        assert is_code_like('列表[0]')
        assert is_code_like('完成;')

    def test_escaped_newline(self):
        """Literal backslash sequences mark code."""
        assert is_code_like('第一行\\n第二行')

    def test_line_comment(self):
        """Leading // marks a comment line."""
        assert is_code_like('  // 注释')

    def test_keywords_adjacent_to_cjk(self):
        """Keywords next to CJK characters still count as keywords."""
        assert is_code_like('用户名称列表class')
        assert is_code_like('导出 export')

    def test_keyword_inside_word_is_not_code(self):
        """Keyword fragments inside Latin words are not keywords."""
        assert not is_code_like('classic 经典')

    def test_identifier_pair(self):
        """ASCII key: value pairs mark code."""
        assert is_code_like('status: active 状态')

    def test_plain_phrase(self):
        """Ordinary phrases are not code."""
        assert not is_code_like('请输入用户名')
        assert not is_code_like('名称：值')


class TestIsTranslatable:
    """Test cases for is_translatable."""

    def test_accepts_phrases(self):
        """Short Chinese phrases should be accepted."""
        assert is_translatable('用户名')
        assert is_translatable('保存成功')
        assert is_translatable('请输入 ID 号码')

    def test_rejects_empty(self):
        """Empty and whitespace-only text should be rejected."""
        assert not is_translatable('')
        assert not is_translatable('   ')
        assert not is_translatable(None)

    def test_rejects_latin_majority(self):
        """Latin-majority text should be rejected."""
        assert not is_translatable('the 的')
        assert not is_translatable('Loading 中')

    def test_rejects_tie(self):
        """Equal CJK and Latin counts should be rejected."""
        assert not is_translatable('ab中文')

    def test_length_cap(self):
        """Text longer than the cap should be rejected."""
        assert is_translatable('测' * STRICT_MAX_LENGTH)
        assert not is_translatable('测' * (STRICT_MAX_LENGTH + 1))

    def test_lenient_cap(self):
        """The lenient cap should allow whole literals up to its limit."""
        text = '测' * 30
        assert not is_translatable(text)
        assert is_translatable(text, LENIENT_MAX_LENGTH)
        assert not is_translatable('测' * (LENIENT_MAX_LENGTH + 1), LENIENT_MAX_LENGTH)

    def test_rejects_code(self):
        """Code-like text should be rejected even when mostly Chinese."""
        assert not is_translatable('获取数据();')
        assert not is_translatable('用户名称列表class')

    @pytest.mark.parametrize('text', ['123', '1,000.00', '，。', '...'])
    def test_rejects_non_text(self, text):
        """Numbers and punctuation alone should be rejected."""
        assert not is_translatable(text)
