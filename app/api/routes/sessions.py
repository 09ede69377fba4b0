from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response

from app.core.config import get_settings
from app.schemas.assets import AssetRole, Language
from app.schemas.session import (
    AnalyzeOut,
    AssetOut,
    GenerateIn,
    LanguageIn,
    PromptIn,
    SessionCreate,
    SessionOut,
)
from app.services.session import SessionStore, StudioSession

router = APIRouter(prefix="/sessions", tags=["sessions"])


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    settings = get_settings()
    return SessionStore(
        settings.max_upload_bytes,
        Language(settings.default_language),
        ttl_seconds=settings.session_ttl_minutes * 60,
        max_sessions=settings.max_sessions,
    )


def get_session(session_id: str, store: SessionStore = Depends(get_session_store)) -> StudioSession:
    return store.get(session_id)


def session_out(session: StudioSession) -> SessionOut:
    return SessionOut(
        id=session.id,
        language=session.language,
        state=session.state.value,
        status=session.status,
        error=session.error,
        assets={
            role.value: AssetOut(mime_type=rec.mime_type, width=rec.width, height=rec.height)
            for role, rec in session.assets.items()
        },
        prompt=session.prompt,
        can_analyze=session.can_analyze(),
        can_generate=session.can_generate(),
        has_result=session.result is not None,
    )


@router.post("", response_model=SessionOut, status_code=201)
async def create_session(body: Optional[SessionCreate] = None, store: SessionStore = Depends(get_session_store)):
    session = store.create(body.language if body else None)
    return session_out(session)


@router.get("/{session_id}", response_model=SessionOut)
async def read_session(session: StudioSession = Depends(get_session)):
    return session_out(session)


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    store.delete(session_id)
    return Response(status_code=204)


@router.put("/{session_id}/language", response_model=SessionOut)
async def set_language(body: LanguageIn, session: StudioSession = Depends(get_session)):
    session.set_language(body.language)
    return session_out(session)


@router.put("/{session_id}/assets/{role}", response_model=SessionOut)
async def upload_asset(role: AssetRole, file: UploadFile = File(...), session: StudioSession = Depends(get_session)):
    raw = await file.read()
    session.upload_asset(role, raw)
    return session_out(session)


@router.delete("/{session_id}/assets/{role}", response_model=SessionOut)
async def remove_asset(role: AssetRole, session: StudioSession = Depends(get_session)):
    session.remove_asset(role)
    return session_out(session)


@router.post("/{session_id}/analyze", response_model=AnalyzeOut)
async def analyze(session: StudioSession = Depends(get_session)):
    prompt = await session.analyze()
    return AnalyzeOut(prompt=prompt, status=session.status)


@router.put("/{session_id}/prompt", response_model=SessionOut)
async def edit_prompt(body: PromptIn, session: StudioSession = Depends(get_session)):
    session.edit_prompt(body.prompt)
    return session_out(session)


@router.post("/{session_id}/generate")
async def generate(body: Optional[GenerateIn] = None, session: StudioSession = Depends(get_session)):
    data, mime = await session.generate(body.aspect_ratio if body else None)
    return Response(content=data, media_type=mime)


@router.get("/{session_id}/result")
async def download(session: StudioSession = Depends(get_session)):
    data, mime, filename = session.download()
    return Response(
        content=data,
        media_type=mime,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
