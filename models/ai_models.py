# models/ai_models.py

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field

from models.base import CamelModel

ProviderType = Literal["openai", "google"]
CostLevel = Literal["low", "medium", "high"]


class AIModelConfig(CamelModel):
    """
    モデルレジストリの1エントリ。
    provider の値で LLM クライアントの呼び出し経路が決まる。
    """

    id: str
    name: str
    description: str
    cost_level: CostLevel
    provider: ProviderType


class TokenUsage(CamelModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class LLMRequest(CamelModel):
    """プロバイダ共通のリクエスト形。"""

    prompt: str
    model_id: str
    system_prompt: Optional[str] = None
    # True の場合、プロバイダに JSON オブジェクト1個だけを返すよう指示する
    json_mode: bool = False


class LLMResponse(CamelModel):
    """プロバイダ共通のレスポンス形。"""

    content: str = ""
    usage: Optional[TokenUsage] = Field(None, description="トークン使用量（取得できた場合のみ）")
