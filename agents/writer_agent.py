# agents/writer_agent.py

from __future__ import annotations

import json
import logging
from typing import Dict, List, Optional

from agents.planner_agent import format_keywords
from app.config import settings
from models.base import json_list
from models.content_models import GeneratedContent
from models.plan_models import SeoPlan
from services.llm_client import LLMGateway, parse_json_object

logger = logging.getLogger(__name__)

# ============================================================
# 文字数ラベル → 目標語数
# ============================================================

LENGTH_GUIDE: Dict[str, str] = {
    "Short (800-1,500 words)": "1200 words",
    "Medium (1,500-2,500 words)": "2000 words",
    "Long (2,500-4,000 words)": "3200 words",
    "Extra Long (4,000+ words)": "4500 words",
}
DEFAULT_TARGET_WORDS = "2000 words"

SYSTEM_PROMPT = (
    "You are an expert content writer specializing in SEO-optimized blog posts. Create engaging, "
    "informative content that ranks well and provides genuine value to readers."
)


def resolve_target_words(content_length: Optional[str]) -> str:
    """未知のラベル（空文字・None 含む）は Medium 相当にフォールバック。"""
    return LENGTH_GUIDE.get(content_length or "", DEFAULT_TARGET_WORDS)


def build_content_prompt(
    keyword: Optional[str],
    secondary_keywords: Optional[List[str]],
    seoplan: Optional[SeoPlan],
    notes: Optional[str],
    target_audience: Optional[str],
    content_length: Optional[str],
) -> str:
    plan_json = json.dumps(
        seoplan.to_payload() if seoplan is not None else None,
        ensure_ascii=False,
        indent=2,
    )

    return f"""
Write a comprehensive, SEO-optimized blog post about "{keyword}".

Requirements:
- Target length: {resolve_target_words(content_length)}
- Primary keyword: {keyword}
- Secondary keywords: {format_keywords(secondary_keywords)}
- Target audience: {target_audience or 'General'}
- Additional context: {notes or 'None'}

SEO Plan to follow:
{plan_json}

Create engaging, high-quality content that:
1. Uses the suggested title from the SEO plan
2. Naturally incorporates keywords as specified in the distribution plan
3. Follows the recommended structure
4. Includes the competitive advantages
5. Provides genuine value to readers
6. Maintains professional, authoritative tone
7. Uses current information and 2025 context where relevant

Return in this JSON format:
{{
  "title": "The exact title from SEO plan",
  "metaDescription": "SEO-optimized meta description (150-160 chars)",
  "intro": "Engaging introduction paragraph",
  "sections": [
    {{
      "heading": "H2 section heading",
      "content": "Detailed section content",
      "subheadings": [
        {{
          "title": "H3 subheading",
          "content": "Subheading content"
        }}
      ]
    }}
  ],
  "conclusion": "Strong conclusion paragraph",
  "wordCount": 2456,
  "seoScore": 87,
  "readingTime": 10
}}
""".strip()


def generate_blog_content(
    keyword: Optional[str],
    secondary_keywords: Optional[List[str]],
    seoplan: Optional[SeoPlan],
    notes: Optional[str],
    target_audience: Optional[str],
    content_length: Optional[str],
    model_id: Optional[str],
    *,
    llm: LLMGateway,
) -> GeneratedContent:
    """
    SEO プランに沿って記事本体を生成する。
    word_count / seo_score / reading_time は LLM の自己申告値をそのまま返す。
    """
    model_id = model_id or settings.default_model

    logger.info(
        "[writer] content start keyword=%s target=%s has_plan=%s model=%s",
        keyword,
        resolve_target_words(content_length),
        seoplan is not None,
        model_id,
    )

    response = llm.generate(
        build_content_prompt(keyword, secondary_keywords, seoplan, notes, target_audience, content_length),
        model_id,
        system_prompt=SYSTEM_PROMPT,
        json_mode=True,
    )
    content = GeneratedContent.model_validate(parse_json_object(response.content))

    logger.info(
        "[writer] content done keyword=%s sections=%d word_count=%s",
        keyword,
        len(json_list(content.sections)),
        content.word_count,
    )
    return content
