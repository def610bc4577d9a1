# models/serp_models.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from models.base import CamelModel, LLMShapedModel


class SerpAnalysis(LLMShapedModel):
    """
    SERP 分析結果（LLM が生成した JSON そのもの）。
    どのフィールドも LLM が省略しうるし、型もプロンプトの例どおりとは限らない。
    既定値での補完は表示側の責務で、ここでは行わない。

    Attributes:
        top_ranking_pages:
            通常は position / title / url / wordCount / lastUpdated /
            keyElements / description を持つオブジェクトの配列。
    """

    content_type: Any = None
    avg_word_count: Any = None
    tone: Any = None
    top_ranking_pages: Any = None
    competitive_advantages: Any = None
    recommended_structure: Any = None


class SerpResult(CamelModel):
    """
    キャッシュされる SERP 取得＋分析結果。
    keyword は大文字小文字を区別せずに検索される。
    """

    id: str
    keyword: str
    # Serper.dev の生レスポンス
    results: Dict[str, Any] = Field(default_factory=dict)
    analysis: Optional[SerpAnalysis] = None
    created_at: datetime
