# services/storage.py
from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from models.project_models import Project, ProjectCreate
from models.serp_models import SerpAnalysis, SerpResult

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ProjectStore(ABC):
    """
    プロジェクトと SERP キャッシュの保存先インターフェイス。
    パイプライン側はこのインターフェイスだけに依存するので、
    DB 実装に差し替える場合はこのクラスを継承すればよい。
    """

    # ---------- Blog Projects ----------

    @abstractmethod
    def create_project(self, data: ProjectCreate) -> Project: ...

    @abstractmethod
    def get_project(self, project_id: str) -> Optional[Project]: ...

    @abstractmethod
    def update_project(self, project_id: str, updates: Dict[str, Any]) -> Optional[Project]: ...

    @abstractmethod
    def list_projects(self) -> List[Project]: ...

    @abstractmethod
    def delete_project(self, project_id: str) -> bool: ...

    # ---------- SERP Results ----------

    @abstractmethod
    def create_serp_result(
        self,
        keyword: str,
        results: Dict[str, Any],
        analysis: Optional[SerpAnalysis],
        created_at: Optional[datetime] = None,
    ) -> SerpResult: ...

    @abstractmethod
    def get_serp_result(self, keyword: str) -> Optional[SerpResult]: ...

    @abstractmethod
    def find_serp_results(self, keyword: str) -> List[SerpResult]: ...


class MemoryStore(ProjectStore):
    """
    プロセス内 dict だけで持つシンプルな実装。
    ロックは取らない（同じ id への同時更新は後勝ち）。
    """

    def __init__(self) -> None:
        self._projects: Dict[str, Project] = {}
        self._serp_results: Dict[str, SerpResult] = {}

    # ---------- Blog Projects ----------

    def create_project(self, data: ProjectCreate) -> Project:
        now = _now()
        project = Project(
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        self._projects[project.id] = project
        logger.info("[storage] project created id=%s keyword=%s", project.id, project.primary_keyword)
        return project

    def get_project(self, project_id: str) -> Optional[Project]:
        return self._projects.get(project_id)

    def update_project(self, project_id: str, updates: Dict[str, Any]) -> Optional[Project]:
        """
        既存プロジェクトに updates をマージする。
        id が存在しなければ None を返し、新規作成はしない。
        updated_at は必ず現在時刻に更新される。
        """
        existing = self._projects.get(project_id)
        if existing is None:
            return None

        # id / created_at は上書きさせない
        safe_updates = {
            k: v for k, v in updates.items() if k not in ("id", "created_at", "updated_at")
        }
        updated = existing.model_copy(update={**safe_updates, "updated_at": _now()})
        self._projects[project_id] = updated
        logger.info("[storage] project updated id=%s fields=%s", project_id, sorted(safe_updates))
        return updated

    def list_projects(self) -> List[Project]:
        """updated_at の新しい順で全件を返す。"""
        return sorted(self._projects.values(), key=lambda p: p.updated_at, reverse=True)

    def delete_project(self, project_id: str) -> bool:
        removed = self._projects.pop(project_id, None)
        if removed is not None:
            logger.info("[storage] project deleted id=%s", project_id)
        return removed is not None

    # ---------- SERP Results ----------

    def create_serp_result(
        self,
        keyword: str,
        results: Dict[str, Any],
        analysis: Optional[SerpAnalysis],
        created_at: Optional[datetime] = None,
    ) -> SerpResult:
        """
        SERP 結果を新しい行として追加する。
        同じキーワードの既存行は上書きしない。
        """
        record = SerpResult(
            id=str(uuid.uuid4()),
            keyword=keyword,
            results=results,
            analysis=analysis,
            created_at=created_at or _now(),
        )
        self._serp_results[record.id] = record
        return record

    def get_serp_result(self, keyword: str) -> Optional[SerpResult]:
        """キーワード完全一致（大文字小文字は無視）で最新の1件を返す。"""
        needle = keyword.lower()
        matches = [r for r in self._serp_results.values() if r.keyword.lower() == needle]
        if not matches:
            return None
        return max(matches, key=lambda r: r.created_at)

    def find_serp_results(self, keyword: str) -> List[SerpResult]:
        """キーワード部分一致（大文字小文字は無視）で新しい順に返す。"""
        needle = keyword.lower()
        matches = [r for r in self._serp_results.values() if needle in r.keyword.lower()]
        return sorted(matches, key=lambda r: r.created_at, reverse=True)
