# agents/planner_agent.py

from __future__ import annotations

import json
import logging
from typing import List, Optional

from app.config import settings
from models.plan_models import SeoPlan
from models.serp_models import SerpAnalysis
from services.llm_client import LLMGateway, parse_json_object

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert SEO strategist. Create detailed optimization plans based on SERP "
    "analysis and keyword research."
)


def format_keywords(keywords: Optional[List[str]]) -> str:
    """セカンダリキーワードをカンマ区切りに。空なら "None"。"""
    return ", ".join(keywords) if keywords else "None"


def build_plan_prompt(
    keyword: Optional[str],
    secondary_keywords: Optional[List[str]],
    serp_analysis: Optional[SerpAnalysis],
    target_audience: Optional[str],
    content_length: Optional[str],
) -> str:
    # SERP 分析は LLM が返した形のまま埋め込む（欠けたフィールドは補完しない）
    analysis_json = json.dumps(
        serp_analysis.to_payload() if serp_analysis is not None else None,
        ensure_ascii=False,
        indent=2,
    )

    return f"""
Create a comprehensive SEO optimization plan for the keyword "{keyword}".

Context:
- Primary Keyword: {keyword}
- Secondary Keywords: {format_keywords(secondary_keywords)}
- Target Audience: {target_audience or 'General'}
- Content Length: {content_length or 'Medium'}
- SERP Analysis: {analysis_json}

Generate a detailed SEO plan in this JSON format:
{{
  "suggestedTitle": "SEO-optimized title with primary keyword",
  "titleLength": 58,
  "structure": {{
    "intro": "Introduction section description",
    "methodology": "How we tested/research methodology section",
    "mainContent": "Main content sections breakdown",
    "comparison": "Comparison/table section",
    "conclusion": "Conclusion section"
  }},
  "keywordDistribution": {{
    "primary": {{
      "target": 10,
      "placement": ["Title", "H1", "2x H2s", "naturally in content"]
    }},
    "secondary": {{
      "target": 5,
      "placement": ["H2s", "H3s", "body content"]
    }},
    "lsi": {{
      "target": 18,
      "placement": ["throughout content", "subheadings"]
    }}
  }},
  "competitiveAdvantages": ["2025-specific updates", "pricing comparison", "expert testing"]
}}
""".strip()


def generate_seo_plan(
    keyword: Optional[str],
    secondary_keywords: Optional[List[str]],
    serp_analysis: Optional[SerpAnalysis],
    target_audience: Optional[str],
    content_length: Optional[str],
    model_id: Optional[str],
    *,
    llm: LLMGateway,
) -> SeoPlan:
    """
    SERP 分析 + ユーザー入力から SEO プランを生成する。

    - キーワード配分の数値は LLM の提案をそのまま使う（丸め・検証なし）
    - serp_analysis が None でもそのままプロンプトに入れる（呼び出し側の責任）
    """
    model_id = model_id or settings.default_model

    logger.info(
        "[planner] plan start keyword=%s secondary=%d has_analysis=%s model=%s",
        keyword,
        len(secondary_keywords or []),
        serp_analysis is not None,
        model_id,
    )

    response = llm.generate(
        build_plan_prompt(keyword, secondary_keywords, serp_analysis, target_audience, content_length),
        model_id,
        system_prompt=SYSTEM_PROMPT,
        json_mode=True,
    )
    plan = SeoPlan.model_validate(parse_json_object(response.content))

    logger.info("[planner] plan done keyword=%s title=%r", keyword, plan.suggested_title)
    return plan
