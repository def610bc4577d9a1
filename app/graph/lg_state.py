# app/graph/lg_state.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from services.image_client import ImageClient
from services.llm_client import LLMGateway
from services.serp_client import SerperClient
from services.storage import ProjectStore

# ワークフローの名目上のステップ（画面のサイドバーと同じ並び）
WORKFLOW_STEPS: Dict[int, str] = {
    1: "Keyword Input",
    2: "SERP Analysis",
    3: "SEO Planning",
    4: "Content Generation",
    5: "Review & Export",
}


class GraphState(Dict[str, Any]):
    """
    LangGraph 風の「状態」コンテナ。
    実体はただの dict だが、型ヒントとして分かりやすくするためのラッパ。
    """
    pass


@dataclass
class PipelineContext:
    """各ノードが使う外部依存（ストア・LLM・SERP・画像）。"""

    store: ProjectStore
    llm: LLMGateway
    serp_client: SerperClient
    image_client: ImageClient


def create_initial_state(
    keyword: str,
    secondary_keywords: Optional[List[str]] = None,
    target_audience: Optional[str] = None,
    content_length: Optional[str] = None,
    notes: Optional[str] = None,
    model_id: Optional[str] = None,
) -> GraphState:
    """
    ワークフロー開始時の初期 state を作成。
    """
    state: GraphState = GraphState()
    state["keyword"] = keyword
    state["secondary_keywords"] = secondary_keywords or []
    state["target_audience"] = target_audience
    state["content_length"] = content_length
    state["notes"] = notes
    state["model_id"] = model_id
    state["current_step"] = 1
    state["progress_messages"] = []  # 各ノードからのログ的メッセージ
    state["current_node"] = None
    return state
