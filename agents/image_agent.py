# agents/image_agent.py

from __future__ import annotations

import logging
import re
from typing import Any, List, Optional

from models.base import json_get, json_list
from models.image_models import GeneratedImage
from services.image_client import ImageClient

logger = logging.getLogger(__name__)

# ASCII の英数字・アンダースコア・空白以外を落とす
_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)


def _section_topic(section: Any, keyword: str) -> str:
    heading = json_get(section, "heading")
    if not isinstance(heading, str):
        return keyword
    return _NON_WORD.sub("", heading.lower()) or keyword


def build_image_prompts(
    keyword: str,
    title: Optional[str],
    sections: Any,
) -> List[str]:
    """
    記事用の画像プロンプトを必ず 2 件作る。

    1. キーワードを使ったヒーロー画像
    2. 先頭セクションの見出し（無ければキーワード）を使ったインフォグラフィック

    sections は LLM が返した JSON のまま受け取る。title は現状プロンプトには使っていない。
    """
    items = json_list(sections)
    topic = _section_topic(items[0], keyword) if items else keyword

    return [
        (
            f"Professional hero image for blog post about {keyword}, modern design, high quality, "
            "clean composition, suitable for article header, photorealistic style"
        ),
        (
            f"Infographic style illustration about {topic}, clean modern design, informative, "
            "professional, suitable for blog content"
        ),
    ]


def generate_article_images(
    keyword: str,
    title: Optional[str],
    sections: Any,
    *,
    image_client: ImageClient,
) -> List[GeneratedImage]:
    prompts = build_image_prompts(keyword, title, sections)
    logger.info("[image_agent] keyword=%s prompts=%d", keyword, len(prompts))
    return image_client.generate_images(prompts)
