# app/dependencies.py
from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from app.graph.lg_state import PipelineContext
from services.image_client import ImageClient, get_image_client
from services.llm_client import LLMGateway, get_llm_gateway
from services.serp_client import SerperClient, get_serp_client
from services.storage import MemoryStore, ProjectStore


@lru_cache
def get_store() -> ProjectStore:
    """プロセス全体で共有するストア。DB 実装に替える場合はここを差し替える。"""
    return MemoryStore()


def get_llm() -> LLMGateway:
    return get_llm_gateway()


def get_serp() -> SerperClient:
    return get_serp_client()


def get_images() -> ImageClient:
    return get_image_client()


def get_pipeline_context(
    store: ProjectStore = Depends(get_store),
    llm: LLMGateway = Depends(get_llm),
    serp_client: SerperClient = Depends(get_serp),
    image_client: ImageClient = Depends(get_images),
) -> PipelineContext:
    return PipelineContext(
        store=store,
        llm=llm,
        serp_client=serp_client,
        image_client=image_client,
    )
