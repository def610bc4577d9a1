# models/project_models.py

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from models.base import CamelModel

# -----------------------------------------
# プロジェクトのステータス
# -----------------------------------------
ProjectStatus = Literal["draft", "published", "archived"]


class ProjectFields(CamelModel):
    """作成・更新で共通に受け付けるフィールド群。

    Attributes:
        serp_analysis / seoplan / generated_content:
            ストアにとっては中身を解釈しない JSON（dict）として保持する。
    """

    secondary_keywords: Optional[List[str]] = None
    target_audience: Optional[str] = None
    content_length: Optional[str] = None
    notes: Optional[str] = None
    serp_analysis: Optional[Dict[str, Any]] = None
    seoplan: Optional[Dict[str, Any]] = None
    generated_content: Optional[Dict[str, Any]] = None
    word_count: Optional[int] = None
    seo_score: Optional[int] = None
    reading_time: Optional[int] = None


class ProjectCreate(ProjectFields):
    """POST /api/projects のペイロード。primary_keyword は必須。"""

    primary_keyword: str = Field(..., min_length=1)
    status: ProjectStatus = "draft"


class ProjectUpdate(ProjectFields):
    """PATCH /api/projects/:id のペイロード。送られたフィールドだけを反映する。"""

    primary_keyword: Optional[str] = None
    status: Optional[ProjectStatus] = None


class Project(ProjectFields):
    """ストアが保持するブログプロジェクト。"""

    id: str
    primary_keyword: str
    status: ProjectStatus = "draft"
    created_at: datetime
    updated_at: datetime
