"""Typed failures raised by the studio services.

Services raise these; only the HTTP layer turns them into responses.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional


class StudioError(Exception):
    status_code = 500
    code = "studio_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class IngestionFailed(StudioError):
    status_code = 400
    code = "ingestion_failed"


class RequirementsNotMet(StudioError):
    status_code = 400
    code = "requirements_not_met"


class SessionBusy(StudioError):
    status_code = 409
    code = "session_busy"


class SessionNotFound(StudioError):
    status_code = 404
    code = "session_not_found"


class TooManySessions(StudioError):
    status_code = 503
    code = "too_many_sessions"


class NoResultAvailable(StudioError):
    status_code = 404
    code = "no_result"


class AnalysisFailed(StudioError):
    status_code = 502
    code = "analysis_failed"


class GenerationError(StudioError):
    status_code = 502
    code = "generation_failed"


class GenerationFailed(GenerationError):
    """Transport or service failure while requesting the composite."""


class BlockKind(str, Enum):
    safety = "safety"
    copyright_recitation = "copyright_recitation"
    unreconcilable_combination = "unreconcilable_combination"
    other_refusal = "other_refusal"


BLOCK_MESSAGES = {
    BlockKind.safety: (
        "Blocked by Safety Filters. The model detected content it considers sensitive "
        "(likely the face or skin exposure). Try a different face photo (neutral expression, "
        "good lighting) or simpler clothing."
    ),
    BlockKind.copyright_recitation: (
        "Copyright check triggered. One of your clothing items or logos is too recognizable. "
        "Try a different outfit image."
    ),
    BlockKind.unreconcilable_combination: (
        "Model refused the combination ({reason}). This usually happens when the model cannot "
        "reconcile the face with the target body/clothing realistically.\n\n"
        "Tip: Try a 'Style' image that matches the lighting of your 'Face' photo better."
    ),
    BlockKind.other_refusal: "Generation failed. Reason: {reason}.",
}


class GenerationBlocked(GenerationError):
    status_code = 422
    code = "generation_blocked"

    def __init__(self, kind: BlockKind, finish_reason: str) -> None:
        super().__init__(BLOCK_MESSAGES[kind].format(reason=finish_reason))
        self.kind = kind
        self.finish_reason = finish_reason


class GenerationRefusalText(GenerationError):
    status_code = 422
    code = "generation_refusal"

    def __init__(self, text: str, limit: int = 300) -> None:
        excerpt = text if len(text) <= limit else text[:limit] + "..."
        super().__init__(f"Model Refusal: {excerpt}")
        self.text = text
        self.excerpt = excerpt


class GenerationEmpty(GenerationError):
    code = "generation_empty"

    def __init__(self, finish_reason: Optional[str] = None) -> None:
        super().__init__(
            f"No image generated. Finish Reason: {finish_reason or 'Unknown'}. "
            "Try again or change input images."
        )
        self.finish_reason = finish_reason
