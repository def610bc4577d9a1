# services/llm_client.py
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types
from openai import OpenAI, OpenAIError

from app.config import settings
from app.errors import ResponseParseError, UnsupportedModelError, UpstreamError
from models.ai_models import AIModelConfig, LLMRequest, LLMResponse, TokenUsage

logger = logging.getLogger(__name__)

# ============================================================
# モデルレジストリ
# ============================================================

AI_MODELS: List[AIModelConfig] = [
    AIModelConfig(
        id="gemini-2.5-flash",
        name="Gemini 2.5 Flash",
        description="Fast and cost-effective Google AI model",
        cost_level="low",
        provider="google",
    ),
    AIModelConfig(
        id="gpt-4o-mini",
        name="GPT-4o Mini",
        description="Lightweight OpenAI model for basic tasks",
        cost_level="low",
        provider="openai",
    ),
    AIModelConfig(
        id="gpt-4o",
        name="GPT-4o",
        description="Balanced performance and cost OpenAI model",
        cost_level="medium",
        provider="openai",
    ),
    AIModelConfig(
        id="gpt-5",
        name="GPT-5",
        description="Most advanced OpenAI model with superior quality",
        cost_level="high",
        provider="openai",
    ),
]


def find_model(model_id: str) -> AIModelConfig:
    """model_id に対応するレジストリエントリを返す。無ければ UnsupportedModelError。"""
    for config in AI_MODELS:
        if config.id == model_id:
            return config
    raise UnsupportedModelError(model_id)


# ============================================================
# プロバイダ実装
# ============================================================


class LLMProvider(ABC):
    """テキスト生成プロバイダの共通インターフェイス。"""

    @abstractmethod
    def generate(self, request: LLMRequest) -> LLMResponse: ...


class OpenAIProvider(LLMProvider):
    """OpenAI Chat Completions 経由の呼び出し。"""

    def __init__(self, api_key: Optional[str] = None):
        self._api_key = api_key
        self._client: OpenAI | None = None

    def _get_client(self) -> OpenAI:
        if self._client is None:
            if not self._api_key:
                raise UpstreamError("OPENAI_API_KEY is not configured")
            self._client = OpenAI(api_key=self._api_key)
        return self._client

    def generate(self, request: LLMRequest) -> LLMResponse:
        messages: List[Dict[str, str]] = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.append({"role": "user", "content": request.prompt})

        kwargs: Dict[str, Any] = {"model": request.model_id, "messages": messages}
        if request.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = self._get_client().chat.completions.create(**kwargs)
        except OpenAIError as e:
            raise UpstreamError(str(e)) from e

        usage = getattr(response, "usage", None)
        return LLMResponse(
            content=response.choices[0].message.content or "",
            usage=TokenUsage(
                prompt_tokens=usage.prompt_tokens,
                completion_tokens=usage.completion_tokens,
                total_tokens=usage.total_tokens,
            )
            if usage
            else None,
        )


class GeminiProvider(LLMProvider):
    """Google Gemini (google-genai SDK) 経由の呼び出し。"""

    def __init__(self, api_key: Optional[str] = None):
        self._api_key = api_key
        self._client: genai.Client | None = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self._api_key:
                raise UpstreamError("GEMINI_API_KEY is not configured")
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    def generate(self, request: LLMRequest) -> LLMResponse:
        config = genai_types.GenerateContentConfig(
            system_instruction=request.system_prompt,
            response_mime_type="application/json" if request.json_mode else None,
        )

        try:
            response = self._get_client().models.generate_content(
                model=request.model_id,
                contents=request.prompt,
                config=config,
            )
        except genai_errors.APIError as e:
            raise UpstreamError(str(e)) from e

        meta = getattr(response, "usage_metadata", None)
        return LLMResponse(
            content=response.text or "",
            usage=TokenUsage(
                prompt_tokens=meta.prompt_token_count or 0,
                completion_tokens=meta.candidates_token_count or 0,
                total_tokens=meta.total_token_count or 0,
            )
            if meta
            else None,
        )


# ============================================================
# ゲートウェイ（レジストリ → プロバイダの振り分け）
# ============================================================


class LLMGateway:
    """
    model_id からレジストリを引いて、対応するプロバイダに処理を渡す。

    - 未知の model_id はネットワーク呼び出し前に UnsupportedModelError
    - キャッシュはここでは持たない
    """

    def __init__(self, providers: Dict[str, LLMProvider]):
        self._providers = providers

    def generate(
        self,
        prompt: str,
        model_id: str,
        system_prompt: Optional[str] = None,
        json_mode: bool = False,
    ) -> LLMResponse:
        config = find_model(model_id)
        provider = self._providers[config.provider]

        logger.info(
            "[llm_client] generate start model=%s provider=%s json_mode=%s prompt_len=%d",
            model_id,
            config.provider,
            json_mode,
            len(prompt),
        )
        response = provider.generate(
            LLMRequest(
                prompt=prompt,
                model_id=model_id,
                system_prompt=system_prompt,
                json_mode=json_mode,
            )
        )
        logger.info(
            "[llm_client] generate done model=%s content_len=%d total_tokens=%s",
            model_id,
            len(response.content),
            response.usage.total_tokens if response.usage else None,
        )
        return response


def parse_json_object(content: str) -> Dict[str, Any]:
    """
    JSON モードのレスポンス本文を dict に変換する。
    空文字は {} 扱い。修復やリトライはしない。
    """
    try:
        data = json.loads(content or "{}")
    except json.JSONDecodeError as e:
        logger.error("[llm_client] JSON parse error error=%s content=%r", e, content[:2000])
        raise ResponseParseError(f"Failed to parse JSON response from model: {e}") from e

    if not isinstance(data, dict):
        raise ResponseParseError("Model response is not a JSON object")
    return data


@lru_cache
def get_llm_gateway() -> LLMGateway:
    """設定の API キーでプロバイダを組み立てたゲートウェイ（シングルトン）。"""
    return LLMGateway(
        providers={
            "openai": OpenAIProvider(api_key=settings.openai_api_key),
            "google": GeminiProvider(api_key=settings.gemini_api_key),
        }
    )
