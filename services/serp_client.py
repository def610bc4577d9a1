# services/serp_client.py
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

import requests

from app.config import settings
from app.errors import UpstreamError

logger = logging.getLogger(__name__)


class SerperClient:
    """
    Serper.dev の検索 API クライアント。

    - レスポンス JSON はそのまま返す（organic 等の解釈は呼び出し側）
    - リトライはしない。失敗時は UpstreamError
    """

    def __init__(
        self,
        api_key: Optional[str],
        url: str,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key
        self.url = url
        self.timeout = timeout

    def search(self, keyword: str, num: int = 10) -> Dict[str, Any]:
        if not self.api_key:
            logger.warning("[serper] api_key is not set")
            raise UpstreamError("SERPER_API_KEY is not configured")

        payload = {"q": keyword, "num": num}
        headers = {
            "X-API-KEY": self.api_key,
            "Content-Type": "application/json",
        }

        logger.info("[serper] Request start: keyword=%s num=%s", keyword, num)

        try:
            resp = requests.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.exception("[serper] Request failed: %s", e)
            raise UpstreamError(f"SERP request failed: {e}") from e

        if not resp.ok:
            logger.error(
                "[serper] Non-2xx status: %s body=%s",
                resp.status_code,
                resp.text[:2000],
            )
            raise UpstreamError(f"SERP request failed with status {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError("SERP response is not valid JSON") from e

        logger.info(
            "[serper] Response: status=%s organic_count=%s",
            resp.status_code,
            len(data.get("organic") or []),
        )
        return data


@lru_cache
def get_serp_client() -> SerperClient:
    return SerperClient(
        api_key=settings.serper_api_key,
        url=settings.serper_url,
        timeout=settings.serper_timeout,
    )
