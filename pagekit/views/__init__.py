"""页面展示辅助: 行条纹、通知横幅与表单控件渲染."""

from .markup import ChoiceOptions, FormMarkup, TextareaOptions, TextFieldOptions, blank_value
from .notice import NoticeBanner
from .striper import Striper

__all__ = [
    "ChoiceOptions",
    "FormMarkup",
    "NoticeBanner",
    "Striper",
    "TextFieldOptions",
    "TextareaOptions",
    "blank_value",
]
