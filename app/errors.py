# app/errors.py
from __future__ import annotations


class PipelineError(RuntimeError):
    """パイプライン内で発生するエラーの基底クラス。"""


class UnsupportedModelError(PipelineError):
    """モデルレジストリに存在しない model_id が指定された。"""

    def __init__(self, model_id: str):
        super().__init__(f"Unsupported AI model: {model_id}")
        self.model_id = model_id


class UpstreamError(PipelineError):
    """SERP / LLM / 画像プロバイダ側の失敗（APIキー未設定も含む）。"""


class ResponseParseError(UpstreamError):
    """LLM の JSON レスポンスがパースできなかった。"""
