# agents/serp_agent.py

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from app.config import settings
from models.base import json_list
from models.serp_models import SerpAnalysis, SerpResult
from services.llm_client import LLMGateway, parse_json_object
from services.serp_client import SerperClient
from services.storage import ProjectStore

logger = logging.getLogger(__name__)

# LLM に渡す organic 結果の上限
MAX_ORGANIC_RESULTS = 10

SYSTEM_PROMPT = (
    "You are an expert SEO analyst. Analyze search results and provide detailed insights "
    "for content optimization."
)


def is_fresh(record: SerpResult, now: Optional[datetime] = None) -> bool:
    """キャッシュ行が TTL（既定 24 時間）以内かどうか。"""
    now = now or datetime.now(timezone.utc)
    return now - record.created_at < timedelta(hours=settings.serp_cache_ttl_hours)


def build_analysis_prompt(keyword: str, organic: List[Dict[str, Any]]) -> str:
    return f"""
Analyze these Google search results for the keyword "{keyword}" and provide a comprehensive SEO analysis.

Search Results:
{json.dumps(organic, ensure_ascii=False, indent=2)}

Please analyze and return a JSON object with the following structure:
{{
  "contentType": "Most common content type (e.g., 'Listicle (78%)', 'Guide', 'Comparison')",
  "avgWordCount": "Average word count as a number",
  "tone": "Dominant tone (e.g., 'Professional', 'Casual', 'Technical')",
  "topRankingPages": [
    {{
      "position": 1,
      "title": "Page title",
      "url": "URL",
      "wordCount": 2847,
      "lastUpdated": "Jan 2025",
      "keyElements": ["Comprehensive Lists", "Expert Reviews", "Screenshots"],
      "description": "Key elements and unique aspects of this page"
    }}
  ],
  "competitiveAdvantages": ["Include 2025-specific features", "Add pricing comparison table"],
  "recommendedStructure": ["Introduction (150-200 words)", "Main content sections"]
}}
""".strip()


def analyze_serp(
    keyword: str,
    model_id: Optional[str],
    *,
    store: ProjectStore,
    llm: LLMGateway,
    serp_client: SerperClient,
    now: Optional[datetime] = None,
) -> SerpResult:
    """
    SERP 取得 + LLM 分析のステージ。

    1) キーワードで 24 時間以内のキャッシュがあれば、それをそのまま返す（外部呼び出しなし）
    2) 無ければ Serper で organic 結果を取得
    3) 上位 10 件を LLM に渡して SerpAnalysis を生成（欠けたフィールドは欠けたまま、型も補正しない）
    4) 新しい行として保存して返す

    どこかで失敗した場合は例外をそのまま上げる。途中結果は保存しない。
    """
    model_id = model_id or settings.default_model

    cached = store.get_serp_result(keyword)
    if cached is not None and is_fresh(cached, now):
        logger.info("[serp_agent] cache hit keyword=%s id=%s", keyword, cached.id)
        return cached

    logger.info(
        "[serp_agent] cache %s keyword=%s model=%s",
        "stale" if cached is not None else "miss",
        keyword,
        model_id,
    )

    serp_data = serp_client.search(keyword, num=settings.serp_result_limit)
    organic = (serp_data.get("organic") or [])[:MAX_ORGANIC_RESULTS]

    response = llm.generate(
        build_analysis_prompt(keyword, organic),
        model_id,
        system_prompt=SYSTEM_PROMPT,
        json_mode=True,
    )
    # 型のチェックはせず、JSON オブジェクトであればそのまま受け入れる
    analysis = SerpAnalysis.model_validate(parse_json_object(response.content))

    record = store.create_serp_result(
        keyword=keyword,
        results=serp_data,
        analysis=analysis,
        created_at=now,
    )
    logger.info(
        "[serp_agent] analysis stored keyword=%s id=%s organic=%d pages=%s",
        keyword,
        record.id,
        len(organic),
        len(json_list(analysis.top_ranking_pages)),
    )
    return record
