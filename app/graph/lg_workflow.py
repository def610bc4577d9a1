# app/graph/lg_workflow.py
from __future__ import annotations

import logging
from typing import List, Optional

from app.graph import nodes
from app.graph.lg_state import GraphState, PipelineContext, create_initial_state

logger = logging.getLogger(__name__)


def run_workflow(
    keyword: str,
    ctx: PipelineContext,
    secondary_keywords: Optional[List[str]] = None,
    target_audience: Optional[str] = None,
    content_length: Optional[str] = None,
    notes: Optional[str] = None,
    model_id: Optional[str] = None,
) -> GraphState:
    """
    /api/auto-generate 用のシンプルな直列ワークフロー。

    serp → planner → writer → image

    各ステージを個別 API で順番に呼んだ場合と同じ結果になる。
    途中で例外が出たらそこで止まり、そのまま呼び出し側に伝わる。
    """
    logger.info(
        "[lg_workflow] run_workflow start keyword=%s model=%s",
        keyword,
        model_id,
    )

    state = create_initial_state(
        keyword=keyword,
        secondary_keywords=secondary_keywords,
        target_audience=target_audience,
        content_length=content_length,
        notes=notes,
        model_id=model_id,
    )

    # 1) SERP 取得 + 分析 (LLM)
    state = nodes.serp_node(state, ctx)

    # 2) SEO プラン (LLM)
    state = nodes.planner_node(state, ctx)

    # 3) 記事本文 (LLM)
    state = nodes.writer_node(state, ctx)

    # 4) 画像プロンプト生成 + 画像生成
    state = nodes.image_node(state, ctx)

    logger.info(
        "[lg_workflow] run_workflow done keyword=%s current_node=%s",
        keyword,
        state.get("current_node"),
    )
    return state
