"""Session controller: the sequence upload -> analyze -> edit -> generate -> download.

One session holds the asset map, the scene description and the last result.
Only one remote operation runs per session at a time. The busy check and the
state switch both happen before the first ``await``, which is enough on a
single event loop.
"""
from __future__ import annotations

import logging
import mimetypes
import secrets
import time
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from app.core.translations import t
from app.schemas.assets import AspectRatio, AssetMap, AssetRole, Language
from app.services.composite import generate_composite, resolve_aspect_ratio
from app.services.errors import (
    NoResultAvailable,
    RequirementsNotMet,
    SessionBusy,
    SessionNotFound,
    StudioError,
    TooManySessions,
)
from app.services.image_utils import ingest_image
from app.services.prompt_synth import analyze_assets

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    idle = "idle"
    analyzing = "analyzing"
    rendering = "rendering"


class StudioSession:
    def __init__(self, session_id: str, language: Language, max_upload_bytes: int) -> None:
        self.id = session_id
        self.language = language
        self.max_upload_bytes = max_upload_bytes
        self.assets = AssetMap()
        self.prompt = ""
        self.state = SessionState.idle
        self.status = t(language, "status_idle")
        self.error: Optional[str] = None
        self.result: Optional[Tuple[bytes, str]] = None
        self.result_ratio: Optional[AspectRatio] = None

    # --- guards ---

    def _ensure_idle(self) -> None:
        if self.state != SessionState.idle:
            raise SessionBusy(f"Session is busy ({self.state.value})")

    def can_analyze(self) -> bool:
        return self.assets.can_analyze()

    def can_generate(self) -> bool:
        return self.assets.has_face() and bool(self.prompt.strip()) and self.state == SessionState.idle

    def _fail(self, prefix_key: str, exc: StudioError) -> None:
        self.error = f"{t(self.language, prefix_key)}: {exc.message}"

    # --- operations ---

    def set_language(self, language: Language) -> None:
        self.language = language

    def upload_asset(self, role: AssetRole, raw: bytes) -> None:
        self._ensure_idle()
        try:
            record = ingest_image(raw, self.max_upload_bytes)
        except StudioError as e:
            self._fail("error_upload", e)
            raise
        self.assets.put(role, record)
        self.result = None
        self.result_ratio = None
        self.error = None
        self.status = t(self.language, "status_ready_to_analyze")
        logger.info("session=%s uploaded role=%s %dx%d %s", self.id, role.value, record.width, record.height, record.mime_type)

    def remove_asset(self, role: AssetRole) -> None:
        self._ensure_idle()
        self.assets.remove(role)
        self.error = None

    def edit_prompt(self, text: str) -> None:
        self._ensure_idle()
        self.prompt = text

    async def analyze(self) -> str:
        self._ensure_idle()
        if not self.can_analyze():
            e = RequirementsNotMet(t(self.language, "error_requirements_analyze"))
            self.error = e.message
            raise e

        self.state = SessionState.analyzing
        self.status = t(self.language, "status_analyzing")
        self.error = None
        try:
            prompt = await analyze_assets(self.assets, self.language)
        except StudioError as e:
            self._fail("error_analyze", e)
            self.status = t(self.language, "status_idle")
            raise
        finally:
            self.state = SessionState.idle

        self.prompt = prompt
        self.status = t(self.language, "status_analyzed")
        return prompt

    async def generate(self, aspect_ratio: Optional[AspectRatio] = None) -> Tuple[bytes, str]:
        self._ensure_idle()
        if not self.assets.has_face() or not self.prompt.strip():
            e = RequirementsNotMet(t(self.language, "error_requirements_render"))
            self.error = e.message
            raise e

        ratio = resolve_aspect_ratio(self.assets, aspect_ratio)
        self.state = SessionState.rendering
        self.status = t(self.language, "status_rendering")
        self.error = None
        self.result = None
        self.result_ratio = None
        try:
            result = await generate_composite(self.assets, self.prompt, ratio)
        except StudioError as e:
            self._fail("error_render", e)
            self.status = t(self.language, "status_ready_to_render")
            raise
        finally:
            self.state = SessionState.idle

        self.result = result
        self.result_ratio = ratio
        self.status = t(self.language, "status_success")
        return result

    def download(self) -> Tuple[bytes, str, str]:
        if self.result is None:
            raise NoResultAvailable("No generated image yet")
        data, mime = self.result
        ext = mimetypes.guess_extension(mime) or ".png"
        ratio = (self.result_ratio.value if self.result_ratio else "image").replace(":", "x")
        return data, mime, f"fusion-{ratio}{ext}"


class SessionStore:
    """In-memory sessions; nothing outlives the process.

    Idle sessions unused for ``ttl_seconds`` are dropped. When ``max_sessions``
    is reached the least recently used idle session is evicted; busy sessions
    are never dropped.
    """

    def __init__(
        self,
        max_upload_bytes: int,
        default_language: Language,
        ttl_seconds: float = 3600.0,
        max_sessions: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_upload_bytes = max_upload_bytes
        self.default_language = default_language
        self.ttl_seconds = ttl_seconds
        self.max_sessions = max_sessions
        self._clock = clock
        self._sessions: Dict[str, StudioSession] = {}
        self._last_used: Dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def _drop(self, session_id: str, reason: str) -> None:
        self._sessions.pop(session_id, None)
        self._last_used.pop(session_id, None)
        logger.info("session=%s dropped (%s)", session_id, reason)

    def prune(self) -> None:
        now = self._clock()
        for session_id, session in list(self._sessions.items()):
            if session.state == SessionState.idle and now - self._last_used[session_id] > self.ttl_seconds:
                self._drop(session_id, "expired")

    def create(self, language: Optional[Language] = None) -> StudioSession:
        self.prune()
        if len(self._sessions) >= self.max_sessions:
            idle = [sid for sid, s in self._sessions.items() if s.state == SessionState.idle]
            if not idle:
                raise TooManySessions(f"Session limit reached ({self.max_sessions})")
            self._drop(min(idle, key=self._last_used.__getitem__), "evicted")

        session_id = secrets.token_urlsafe(12)
        session = StudioSession(session_id, language or self.default_language, self.max_upload_bytes)
        self._sessions[session_id] = session
        self._last_used[session_id] = self._clock()
        logger.info("session=%s created", session_id)
        return session

    def get(self, session_id: str) -> StudioSession:
        self.prune()
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(f"Unknown session: {session_id}")
        self._last_used[session_id] = self._clock()
        return session

    def delete(self, session_id: str) -> None:
        if session_id not in self._sessions:
            raise SessionNotFound(f"Unknown session: {session_id}")
        self._drop(session_id, "deleted")
