# services/image_client.py
from __future__ import annotations

import base64
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from typing import List, Optional
from urllib.parse import quote, urlencode

import requests

from app.config import settings
from models.image_models import GeneratedImage

logger = logging.getLogger(__name__)


class ImageClient:
    """
    Pollinations 形式の画像生成エンドポイントのクライアント。

    プロンプトごとに独立してリクエストし、失敗しても一括処理は止めない。
    失敗したプロンプトには同じパラメータで組み立てた URL を代わりに返す
    （クライアント側で遅延ロードできる、読み込み確認はしていないリンク）。
    """

    def __init__(
        self,
        base_url: str,
        model: str = "flux",
        width: int = 1024,
        height: int = 1024,
        timeout: float = 30.0,
        max_workers: int = 4,
    ):
        self.base_url = base_url
        self.model = model
        self.width = width
        self.height = height
        self.timeout = timeout
        self.max_workers = max_workers

    def _prompt_url(self, prompt: str) -> str:
        return self.base_url + quote(prompt, safe="!'()*")

    def fallback_url(self, prompt: str, width: int, height: int, model: str) -> str:
        query = urlencode({"width": width, "height": height, "model": model, "nologo": "true"})
        return f"{self._prompt_url(prompt)}?{query}"

    def fetch_image(self, prompt: str, width: int, height: int, model: str) -> GeneratedImage:
        """1枚生成して data URI に変換する。失敗時は requests の例外をそのまま投げる。"""
        resp = requests.post(
            self._prompt_url(prompt),
            params={
                "width": width,
                "height": height,
                "model": model,
                "nologo": "true",
                "private": "true",
            },
            timeout=self.timeout,
        )
        resp.raise_for_status()

        content_type = resp.headers.get("Content-Type", "").split(";")[0].strip()
        if not content_type.startswith("image/"):
            content_type = "image/png"

        encoded = base64.b64encode(resp.content).decode("ascii")
        return GeneratedImage(
            url=f"data:{content_type};base64,{encoded}",
            prompt=prompt,
            width=width,
            height=height,
        )

    def _generate_one(self, prompt: str, width: int, height: int, model: str) -> GeneratedImage:
        try:
            return self.fetch_image(prompt, width, height, model)
        except requests.RequestException as e:
            logger.error("[image_client] generation failed prompt=%r error=%s", prompt[:80], e)
            return GeneratedImage(
                url=self.fallback_url(prompt, width, height, model),
                prompt=prompt,
                width=width,
                height=height,
            )

    def generate_images(
        self,
        prompts: List[str],
        width: Optional[int] = None,
        height: Optional[int] = None,
        model: Optional[str] = None,
    ) -> List[GeneratedImage]:
        """
        プロンプトのリストから画像を生成する。
        並列に投げるが、戻り値の順序は必ず prompts の順序と一致する。
        """
        if not prompts:
            return []

        width = width or self.width
        height = height or self.height
        model = model or self.model

        logger.info(
            "[image_client] batch start count=%d size=%dx%d model=%s",
            len(prompts),
            width,
            height,
            model,
        )

        workers = max(1, min(self.max_workers, len(prompts)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map は入力順で結果を返す
            images = list(
                executor.map(lambda p: self._generate_one(p, width, height, model), prompts)
            )

        logger.info(
            "[image_client] batch done count=%d data_uri=%d",
            len(images),
            sum(1 for img in images if img.url.startswith("data:")),
        )
        return images


@lru_cache
def get_image_client() -> ImageClient:
    return ImageClient(
        base_url=settings.image_base_url,
        model=settings.image_model,
        width=settings.image_width,
        height=settings.image_height,
        timeout=settings.image_timeout,
        max_workers=settings.image_max_workers,
    )
