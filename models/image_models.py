# models/image_models.py
from pydantic import BaseModel


class GeneratedImage(BaseModel):
    """生成画像1件。url は data URI かリモート URL のどちらか。永続化はしない。"""

    url: str
    prompt: str
    width: int
    height: int
