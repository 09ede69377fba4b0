from typing import Dict, Optional

from pydantic import BaseModel

from app.schemas.assets import AspectRatio, Language


class AssetOut(BaseModel):
    mime_type: str
    width: int
    height: int


class SessionOut(BaseModel):
    id: str
    language: Language
    state: str
    status: str
    error: Optional[str] = None
    assets: Dict[str, AssetOut]
    prompt: str
    can_analyze: bool
    can_generate: bool
    has_result: bool


class SessionCreate(BaseModel):
    language: Optional[Language] = None


class LanguageIn(BaseModel):
    language: Language


class PromptIn(BaseModel):
    prompt: str


class AnalyzeOut(BaseModel):
    prompt: str
    status: str


class GenerateIn(BaseModel):
    # derived from the style (or face) image when omitted
    aspect_ratio: Optional[AspectRatio] = None
