from pydantic import BaseModel
from typing import Literal, Optional


class RenderRequest(BaseModel):
    text: Optional[str] = ""
    format: Literal["blocks", "html", "text"] = "blocks"
    normalize: bool = True


class NormalizeRequest(BaseModel):
    text: Optional[str] = ""
    mode: Literal["text", "code"] = "text"


class ClearCacheRequest(BaseModel):
    confirm: bool = False
