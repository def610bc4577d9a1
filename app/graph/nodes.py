# app/graph/nodes.py
from __future__ import annotations

import logging
from typing import List

from agents.image_agent import generate_article_images
from agents.planner_agent import generate_seo_plan
from agents.serp_agent import analyze_serp
from agents.writer_agent import generate_blog_content
from app.graph.lg_state import WORKFLOW_STEPS, GraphState, PipelineContext
from models.base import json_list
from models.content_models import GeneratedContent
from models.plan_models import SeoPlan
from models.serp_models import SerpResult

logger = logging.getLogger(__name__)


def _log_progress(state: GraphState, node: str, message: str) -> GraphState:
    """
    LangGraph 用の進捗ログを state に積むユーティリティ。
    state は dict (GraphState) として扱う。
    """
    line = f"[{node}] {message}"

    messages: List[str] = list(state.get("progress_messages", []))
    messages.append(line)

    state["progress_messages"] = messages
    state["current_node"] = node

    logger.info(line)
    return state


def _advance(state: GraphState, step: int) -> GraphState:
    state["current_step"] = step
    logger.info("[nodes] step=%s (%s)", step, WORKFLOW_STEPS[step])
    return state


# ---------- SERP ノード ----------


def serp_node(state: GraphState, ctx: PipelineContext) -> GraphState:
    """
    SERP ノード:
    keyword の SERP を取得（24 時間キャッシュあり）して分析結果を state に詰める。
    """
    state = _log_progress(state, "serp", "start: fetch and analyze SERP")

    record: SerpResult = analyze_serp(
        state["keyword"],
        state.get("model_id"),
        store=ctx.store,
        llm=ctx.llm,
        serp_client=ctx.serp_client,
    )
    state["serp_result"] = record
    state["serp_analysis"] = record.analysis

    state = _advance(state, 2)
    state = _log_progress(state, "serp", f"done: analysis ready (serp_id={record.id})")
    return state


# ---------- Planner ノード ----------


def planner_node(state: GraphState, ctx: PipelineContext) -> GraphState:
    """
    Planner ノード:
    SERP 分析 + 入力条件から SEO プランを生成する。
    分析結果が欠けていてもそのまま渡す。
    """
    state = _log_progress(state, "planner", "start: generating SEO plan")

    plan: SeoPlan = generate_seo_plan(
        state["keyword"],
        state.get("secondary_keywords"),
        state.get("serp_analysis"),
        state.get("target_audience"),
        state.get("content_length"),
        state.get("model_id"),
        llm=ctx.llm,
    )
    state["seoplan"] = plan

    state = _advance(state, 3)
    state = _log_progress(state, "planner", "done: SEO plan generated")
    return state


# ---------- Writer ノード ----------


def writer_node(state: GraphState, ctx: PipelineContext) -> GraphState:
    state = _log_progress(state, "writer", "start: generating content")

    content: GeneratedContent = generate_blog_content(
        state["keyword"],
        state.get("secondary_keywords"),
        state.get("seoplan"),
        state.get("notes"),
        state.get("target_audience"),
        state.get("content_length"),
        state.get("model_id"),
        llm=ctx.llm,
    )
    state["content"] = content

    state = _advance(state, 4)
    state = _log_progress(
        state,
        "writer",
        f"done: content generated (sections={len(json_list(content.sections))})",
    )
    return state


# ---------- Image ノード ----------


def image_node(state: GraphState, ctx: PipelineContext) -> GraphState:
    """
    Image ノード:
    記事から 2 件のプロンプトを作って画像を生成する。
    個別の失敗は代替 URL になるので、このノード自体は止まらない。
    """
    state = _log_progress(state, "image", "start: generating images")

    content: GeneratedContent = state["content"]
    images = generate_article_images(
        state["keyword"],
        content.title,
        content.sections,
        image_client=ctx.image_client,
    )
    state["images"] = images

    state = _advance(state, 5)
    state = _log_progress(state, "image", f"done: {len(images)} images")
    return state
