# app/config.py

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    アプリ全体で使う設定クラス。
    .env から環境変数を読み込み、属性として参照できるようにする。
    """

    # ---------- LLM プロバイダ ----------
    # OPENAI_API_KEY=sk-xxxx... / GEMINI_API_KEY=... を .env に書く想定
    openai_api_key: str | None = None
    gemini_api_key: str | None = None

    # モデル未指定時に使う ID（低コストの Gemini）
    default_model: str = "gemini-2.5-flash"

    # ---------- SERP (Serper.dev) ----------
    serper_api_key: str | None = None
    serper_url: str = "https://google.serper.dev/search"
    # None の場合は requests のデフォルト（タイムアウトなし）
    serper_timeout: float | None = None
    serp_result_limit: int = 10
    serp_cache_ttl_hours: int = 24

    # ---------- 画像生成 ----------
    image_base_url: str = "https://image.pollinations.ai/prompt/"
    image_model: str = "flux"
    image_width: int = 1024
    image_height: int = 1024
    image_timeout: float = 30.0
    image_max_workers: int = 4

    # ---------- サーバ ----------
    host: str = "0.0.0.0"
    port: int = 8000

    # ---------- ログ ----------
    log_level: str = "INFO"

    # ---------- Pydantic Settings 設定 ----------
    model_config = SettingsConfigDict(
        env_file=".env",            # .env を読む
        env_file_encoding="utf-8",
        extra="ignore",             # 定義外の環境変数があっても無視（エラーにしない）
    )


@lru_cache
def get_settings() -> Settings:
    """Settings をシングルトン的に使うためのヘルパ。"""
    return Settings()


# 他のモジュールからは `from app.config import settings` で利用
settings = get_settings()
