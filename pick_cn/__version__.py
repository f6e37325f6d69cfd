"""Version information for pick-cn."""

__version__ = "1.0.0"
__author__ = "pick-cn contributors"
__description__ = "Extract Chinese UI text from JavaScript/TypeScript sources into a translation mapping"

# Changelog:
# 1.0.0 - Initial release
#       - Syntax-tree extraction (tree-sitter) and line-pattern extraction
#       - Punctuation-driven phrase segmentation with emoji/icon stripping
#       - Quality-scored and first-wins deduplication
#       - Baidu, Youdao, Google and Doubao translation providers
#       - Built-in UI dictionary and deterministic placeholders
#       - compare / methods commands
