"""Build the phrase -> English mapping that replacement loaders consume."""

import logging
import re
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional

from ..core.classifier import CJK_PATTERN
from .translators import TranslationService

logger = logging.getLogger(__name__)

# Value written when translation is switched off.
PENDING_TRANSLATION = 'to do translate'

PLACEHOLDER_PREFIX = 'translate_'

_WHITESPACE = re.compile(r'\s+')

# Common UI vocabulary, used when a provider returns nothing for a phrase.
BUILTIN_DICTIONARY: Mapping[str, str] = MappingProxyType({
    # Aggregations
    '总次数': 'Total Count',
    '总和': 'Sum',
    '平均值': 'Average',
    '最大值': 'Maximum',
    '最小值': 'Minimum',

    # Orders and products
    '订单数量': 'Order Count',
    '订单总商品数量': 'Total Product Count',
    '订单实付金额': 'Order Paid Amount',
    '订单总商品价格': 'Total Product Price',
    '订单商品数量': 'Order Product Count',
    '提交订单': 'Submit Order',
    '订单详情': 'Order Details',
    '优惠金额': 'Discount Amount',
    '商品价格': 'Product Price',
    '商品数量': 'Product Count',
    '实付金额': 'Paid Amount',

    # Comparison operators
    '等于': 'Equal',
    '不等于': 'Not Equal',
    '包含': 'Contains',
    '不包含': 'Not Contains',
    '有值': 'Has Value',
    '没值': 'No Value',
    '小于': 'Less Than',
    '大于': 'Greater Than',
    '小于等于': 'Less Than or Equal',
    '大于等于': 'Greater Than or Equal',
    '区间': 'Range',
    '为真': 'True',
    '为假': 'False',

    # Users and channels
    '性别': 'Gender',
    '男性': 'Male',
    '女性': 'Female',
    '有赞': 'Youzan',
    '淘宝': 'Taobao',
    '注册渠道': 'Registration Channel',
    '好友类别': 'Friend Category',
    '用户行为事件': 'User Behavior Event',
    '做过': 'Done',
    '未做过': 'Not Done',
    '已做过': 'Already Done',
    '上传失败': 'Upload Failed',

    # Actions
    '删除': 'Delete',
    '编辑': 'Edit',
    '保存': 'Save',
    '取消': 'Cancel',
    '确认': 'Confirm',
    '提交': 'Submit',
    '重置': 'Reset',
    '搜索': 'Search',
    '查询': 'Query',
    '添加': 'Add',
    '新增': 'Add',
    '修改': 'Modify',
    '更新': 'Update',
    '刷新': 'Refresh',
    '加载': 'Load',
    '导入': 'Import',
    '导出': 'Export',
    '下载': 'Download',
    '上传': 'Upload',
    '复制': 'Copy',
    '粘贴': 'Paste',
    '剪切': 'Cut',
    '全选': 'Select All',
    '清空': 'Clear',
    '返回': 'Back',
    '下一步': 'Next',
    '上一步': 'Previous',
    '完成': 'Complete',
    '开始': 'Start',
    '结束': 'End',
    '暂停': 'Pause',
    '继续': 'Continue',
    '停止': 'Stop',
    '重新开始': 'Restart',
    '重试': 'Retry',
    '跳过': 'Skip',
    '忽略': 'Ignore',
    '关闭': 'Close',
    '打开': 'Open',
    '展开': 'Expand',
    '收起': 'Collapse',
    '显示': 'Show',
    '隐藏': 'Hide',
    '启用': 'Enable',
    '禁用': 'Disable',
    '激活': 'Activate',
    '停用': 'Deactivate',
})


def generate_placeholder(phrase: str) -> str:
    """
    Deterministic stand-in for an untranslated phrase.

    Every CJK character becomes ``x`` and whitespace runs become ``_``,
    e.g. ``'保存 草稿'`` -> ``'translate_xx_xx'``.
    """
    masked = CJK_PATTERN.sub('X', phrase)
    masked = _WHITESPACE.sub('_', masked)
    return f"{PLACEHOLDER_PREFIX}{masked.lower()}"


def _usable(result) -> Optional[str]:
    """Provider result if it is a non-blank string, else None."""
    if isinstance(result, str) and result.strip():
        return result
    return None


class MappingGenerator:
    """
    Map each phrase to a translation.

    Resolution order per phrase: provider batch result, built-in dictionary,
    a second single-phrase provider attempt, placeholder. If the batch call
    itself fails the provider is not asked again.
    """

    def __init__(
        self,
        translator: Optional[TranslationService] = None,
        dictionary: Mapping[str, str] = BUILTIN_DICTIONARY,
    ):
        self.translator = translator
        self.dictionary = dictionary

    def generate(self, phrases: Iterable[str], should_translate: bool = True) -> Dict[str, str]:
        """
        Args:
            phrases: Deduplicated phrases, in output order
            should_translate: False writes ``PENDING_TRANSLATION`` everywhere

        Returns:
            Insertion-ordered mapping with exactly one entry per unique phrase
        """
        phrases = list(dict.fromkeys(phrases))

        if not should_translate:
            return {phrase: PENDING_TRANSLATION for phrase in phrases}

        if not phrases:
            return {}

        translated, provider_available = self._batch(phrases)

        mapping: Dict[str, str] = {}
        fallbacks = 0
        for phrase in phrases:
            result = _usable(translated.get(phrase))
            if not result:
                fallbacks += 1
                result = self._fallback(phrase, retry=provider_available)
            mapping[phrase] = result

        if fallbacks:
            logger.info("%d of %d phrase(s) resolved without a provider result", fallbacks, len(phrases))
        return mapping

    def _batch(self, phrases):
        if self.translator is None:
            logger.warning("No translator configured, using dictionary and placeholders")
            return {}, False
        try:
            translated = self.translator.batch_translate(phrases)
        except Exception as e:
            logger.warning("Batch translation failed (%s), using dictionary and placeholders", e)
            return {}, False
        if not isinstance(translated, Mapping):
            logger.warning("Translator returned %s instead of a mapping", type(translated).__name__)
            return {}, True
        return translated, True

    def _fallback(self, phrase: str, retry: bool) -> str:
        known = self.dictionary.get(phrase)
        if known:
            return known

        if retry:
            try:
                result = _usable(self.translator.batch_translate([phrase]).get(phrase))
            except Exception as e:
                logger.debug("Second attempt for '%s' failed: %s", phrase, e)
                result = None
            if result:
                return result

        return generate_placeholder(phrase)


def generate_mapping(
    phrases: Iterable[str],
    translation_service: Optional[TranslationService],
    should_translate: bool = True,
) -> Dict[str, str]:
    """Functional shortcut for :meth:`MappingGenerator.generate`."""
    return MappingGenerator(translation_service).generate(phrases, should_translate)
