# models/base.py
from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    API の JSON は camelCase、Python 側は snake_case で扱うための共通ベース。
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LLMShapedModel(CamelModel):
    """
    LLM が生成する JSON 用のベース。
    全フィールド任意・型は Any・未知のキーも保持する（スキーマの検証や補正はしない）。
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_payload(self) -> dict:
        """LLM が返さなかったフィールドを含めずに camelCase の dict に戻す。"""
        return self.model_dump(by_alias=True, exclude_unset=True)


def json_get(obj: Any, key: str) -> Any:
    """obj が JSON オブジェクト (dict) なら key の値、それ以外は None。"""
    return obj.get(key) if isinstance(obj, dict) else None


def json_list(value: Any) -> List[Any]:
    """JSON 配列ならそのまま、それ以外は空リスト。"""
    return value if isinstance(value, list) else []
