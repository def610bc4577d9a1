# models/content_models.py

from __future__ import annotations

from typing import Any

from models.base import LLMShapedModel


class GeneratedContent(LLMShapedModel):
    """
    生成された記事本体。

    Attributes:
        sections:
            {heading, content, subheadings: [{title, content}]} の配列（H2 / H3）。
        word_count / seo_score / reading_time:
            LLM の自己申告値。システム側では計算も検証もしない。
    """

    title: Any = None
    meta_description: Any = None
    intro: Any = None
    sections: Any = None
    conclusion: Any = None
    word_count: Any = None
    seo_score: Any = None
    reading_time: Any = None
