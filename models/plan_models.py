# models/plan_models.py

from __future__ import annotations

from typing import Any

from models.base import LLMShapedModel


class SeoPlan(LLMShapedModel):
    """
    SEO 最適化プラン。
    キーワード配分の数値は丸め・上限チェックなどの後処理をしない。

    Attributes:
        structure:
            intro / methodology / mainContent / comparison / conclusion の5スロット。
        keyword_distribution:
            primary / secondary / lsi ごとの {target, placement}。
    """

    suggested_title: Any = None
    title_length: Any = None
    structure: Any = None
    keyword_distribution: Any = None
    competitive_advantages: Any = None
