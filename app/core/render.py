from typing import Callable, Optional

import markdown

from app.core.config import settings

# 渲染器：原始 markdown -> html，纯函数，无副作用
MarkdownRenderer = Callable[[Optional[str]], str]


def render_markdown(text: Optional[str]) -> str:
    """
    将文章原文渲染为 html
    - 空白内容直接返回空字符串
    - 每次调用新建 Markdown 实例，避免 toc 等扩展在调用之间残留状态
    """
    if text is None or not text.strip():
        return ""
    return markdown.markdown(text, extensions=settings.MARKDOWN_EXTENSIONS, output_format="html")
