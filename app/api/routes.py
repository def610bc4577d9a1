# app/api/routes.py
from __future__ import annotations

import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response

from agents.image_agent import generate_article_images
from agents.planner_agent import generate_seo_plan
from agents.serp_agent import analyze_serp
from agents.writer_agent import generate_blog_content
from app.dependencies import get_images, get_llm, get_pipeline_context, get_serp, get_store
from app.graph.lg_state import PipelineContext
from app.graph.lg_workflow import run_workflow
from models.ai_models import AIModelConfig
from models.base import CamelModel
from models.content_models import GeneratedContent
from models.image_models import GeneratedImage
from models.plan_models import SeoPlan
from models.serp_models import SerpAnalysis, SerpResult
from services.exporter import export_content
from services.image_client import ImageClient
from services.llm_client import AI_MODELS, LLMGateway
from services.serp_client import SerperClient
from services.storage import ProjectStore

logger = logging.getLogger(__name__)

router = APIRouter()


# --------- Request / Response モデル ---------


class SerpAnalyzeRequest(CamelModel):
    keyword: Optional[str] = None
    model: Optional[str] = None


class SeoPlanRequest(CamelModel):
    keyword: Optional[str] = None
    secondary_keywords: Optional[List[str]] = None
    serp_analysis: Optional[SerpAnalysis] = None
    target_audience: Optional[str] = None
    content_length: Optional[str] = None
    model: Optional[str] = None


class ContentGenerateRequest(CamelModel):
    keyword: Optional[str] = None
    secondary_keywords: Optional[List[str]] = None
    seoplan: Optional[SeoPlan] = None
    notes: Optional[str] = None
    target_audience: Optional[str] = None
    content_length: Optional[str] = None
    model: Optional[str] = None


class ImageGenerateRequest(CamelModel):
    keyword: Optional[str] = None
    title: Optional[str] = None
    # 記事の sections をそのまま受け取る（型は問わない）
    sections: Any = None


class ImageGenerateResponse(CamelModel):
    images: List[GeneratedImage]


class AutoGenerateRequest(CamelModel):
    keyword: Optional[str] = None
    secondary_keywords: Optional[List[str]] = None
    target_audience: Optional[str] = None
    content_length: Optional[str] = None
    notes: Optional[str] = None
    model: Optional[str] = None


class AutoGenerateResponse(CamelModel):
    serp_analysis: Optional[SerpAnalysis] = None
    seoplan: Optional[SeoPlan] = None
    content: Optional[GeneratedContent] = None
    images: List[GeneratedImage] = []
    progress_messages: List[str] = []


class ExportRequest(CamelModel):
    content: Optional[GeneratedContent] = None
    format: Optional[str] = None


# --------- エラーレスポンス ---------


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": message})


def _server_error(message: str, error: Exception, **extra) -> JSONResponse:
    """上流エラーのメッセージはそのまま返す。"""
    return JSONResponse(
        status_code=500,
        content={"message": message, "error": str(error) or error.__class__.__name__, **extra},
    )


# --------- エンドポイント ---------


@router.get("/health")
def api_health() -> dict:
    return {"status": "ok"}


@router.get("/ai/models", response_model=List[AIModelConfig])
def api_list_models() -> List[AIModelConfig]:
    """選択可能なモデルの固定リスト。"""
    return AI_MODELS


@router.post("/serp/analyze", response_model=SerpResult, response_model_exclude_unset=True)
def api_serp_analyze(
    payload: SerpAnalyzeRequest,
    store: ProjectStore = Depends(get_store),
    llm: LLMGateway = Depends(get_llm),
    serp_client: SerperClient = Depends(get_serp),
):
    """
    キーワードの SERP を取得して LLM で分析する。
    24 時間以内に同じキーワードで分析済みならキャッシュを返す。
    """
    if not payload.keyword:
        return _bad_request("Keyword is required")

    logger.info("[api.serp] keyword=%s model=%s", payload.keyword, payload.model)
    try:
        return analyze_serp(
            payload.keyword,
            payload.model,
            store=store,
            llm=llm,
            serp_client=serp_client,
        )
    except Exception as e:  # noqa: BLE001
        logger.exception("[api.serp] SERP analysis error keyword=%s", payload.keyword)
        return _server_error("Failed to analyze SERP results", e, keyword=payload.keyword)


@router.get("/serp/results", response_model=List[SerpResult], response_model_exclude_unset=True)
def api_serp_results(keyword: str = "", store: ProjectStore = Depends(get_store)):
    """キャッシュ済みの SERP 分析を部分一致で新しい順に返す。"""
    return store.find_serp_results(keyword)


@router.post("/seo/plan", response_model=SeoPlan, response_model_exclude_unset=True)
def api_seo_plan(payload: SeoPlanRequest, llm: LLMGateway = Depends(get_llm)):
    logger.info(
        "[api.seo-plan] keyword=%s has_analysis=%s model=%s",
        payload.keyword,
        payload.serp_analysis is not None,
        payload.model,
    )
    try:
        return generate_seo_plan(
            payload.keyword,
            payload.secondary_keywords,
            payload.serp_analysis,
            payload.target_audience,
            payload.content_length,
            payload.model,
            llm=llm,
        )
    except Exception as e:  # noqa: BLE001
        logger.exception("[api.seo-plan] SEO plan generation error keyword=%s", payload.keyword)
        return _server_error("Failed to generate SEO plan", e)


@router.post("/content/generate", response_model=GeneratedContent, response_model_exclude_unset=True)
def api_content_generate(payload: ContentGenerateRequest, llm: LLMGateway = Depends(get_llm)):
    logger.info(
        "[api.content] keyword=%s has_plan=%s length=%s model=%s",
        payload.keyword,
        payload.seoplan is not None,
        payload.content_length,
        payload.model,
    )
    try:
        return generate_blog_content(
            payload.keyword,
            payload.secondary_keywords,
            payload.seoplan,
            payload.notes,
            payload.target_audience,
            payload.content_length,
            payload.model,
            llm=llm,
        )
    except Exception as e:  # noqa: BLE001
        logger.exception("[api.content] content generation error keyword=%s", payload.keyword)
        return _server_error("Failed to generate content", e)


@router.post("/images/generate", response_model=ImageGenerateResponse)
def api_images_generate(
    payload: ImageGenerateRequest,
    image_client: ImageClient = Depends(get_images),
):
    if not payload.keyword:
        return _bad_request("Keyword is required")

    try:
        images = generate_article_images(
            payload.keyword,
            payload.title,
            payload.sections,
            image_client=image_client,
        )
    except Exception as e:  # noqa: BLE001
        logger.exception("[api.images] image generation error keyword=%s", payload.keyword)
        return _server_error("Failed to generate images", e)

    return ImageGenerateResponse(images=images)


@router.post("/auto-generate", response_model=AutoGenerateResponse, response_model_exclude_unset=True)
def api_auto_generate(
    payload: AutoGenerateRequest,
    ctx: PipelineContext = Depends(get_pipeline_context),
):
    """
    SERP 分析 → SEO プラン → 本文 → 画像 をまとめて実行するメインAPI。
    最初に失敗したステージで止まり、そのエラーを返す。
    """
    if not payload.keyword:
        return _bad_request("Keyword is required")

    logger.info("[api.auto-generate] start keyword=%s model=%s", payload.keyword, payload.model)
    try:
        state = run_workflow(
            payload.keyword,
            ctx,
            secondary_keywords=payload.secondary_keywords,
            target_audience=payload.target_audience,
            content_length=payload.content_length,
            notes=payload.notes,
            model_id=payload.model,
        )
    except Exception as e:  # noqa: BLE001
        logger.exception("[api.auto-generate] pipeline error keyword=%s", payload.keyword)
        return _server_error("Failed to auto-generate blog post", e, keyword=payload.keyword)

    logger.info(
        "[api.auto-generate] done keyword=%s step=%s",
        payload.keyword,
        state.get("current_step"),
    )
    return AutoGenerateResponse(
        serp_analysis=state.get("serp_analysis"),
        seoplan=state.get("seoplan"),
        content=state.get("content"),
        images=state.get("images", []),
        progress_messages=state.get("progress_messages", []),
    )


@router.post("/content/export")
def api_content_export(payload: ExportRequest):
    """記事を html / markdown / wordpress / テキスト のいずれかでダウンロードさせる。"""
    if payload.content is None:
        return _bad_request("Content is required")

    try:
        result = export_content(payload.content, payload.format)
    except Exception as e:  # noqa: BLE001
        logger.exception("[api.export] export error format=%s", payload.format)
        return _server_error("Failed to export content", e)

    logger.info("[api.export] format=%s filename=%s bytes=%d", payload.format, result.filename, len(result.body))
    return Response(
        content=result.body,
        media_type=result.media_type,
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )
