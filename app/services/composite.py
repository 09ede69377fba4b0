"""Composite image request: aspect ratio, request assembly and response classification."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from app.core.config import get_settings
from app.core.prompts import COMPOSITE_LABELS, COMPOSITE_PROMPT, FACE_LABEL, SAFETY_SETTINGS
from app.schemas.assets import AspectRatio, AssetMap, AssetRole
from app.services.errors import (
    BlockKind,
    GenerationBlocked,
    GenerationEmpty,
    GenerationFailed,
    GenerationRefusalText,
    RequirementsNotMet,
)
from app.services.gemini import GeminiError, decode_inline, gemini_generate_content, text_part

logger = logging.getLogger(__name__)

NORMAL_FINISH = "STOP"

FINISH_REASON_KINDS = {
    "SAFETY": BlockKind.safety,
    "IMAGE_SAFETY": BlockKind.safety,
    "PROHIBITED_CONTENT": BlockKind.safety,
    "BLOCKLIST": BlockKind.safety,
    "SPII": BlockKind.safety,
    "RECITATION": BlockKind.copyright_recitation,
    "IMAGE_RECITATION": BlockKind.copyright_recitation,
    "OTHER": BlockKind.unreconcilable_combination,
    "IMAGE_OTHER": BlockKind.unreconcilable_combination,
}


@dataclass(frozen=True)
class ImageOutcome:
    data: bytes
    mime_type: str


@dataclass(frozen=True)
class RefusalOutcome:
    text: str


@dataclass(frozen=True)
class BlockedOutcome:
    kind: BlockKind
    finish_reason: str


@dataclass(frozen=True)
class EmptyOutcome:
    finish_reason: Optional[str] = None


GenerationOutcome = Union[ImageOutcome, RefusalOutcome, BlockedOutcome, EmptyOutcome]


def block_kind(finish_reason: str) -> BlockKind:
    return FINISH_REASON_KINDS.get(finish_reason.upper(), BlockKind.other_refusal)


def resolve_aspect_ratio(assets: AssetMap, explicit: Optional[AspectRatio] = None) -> AspectRatio:
    if explicit is not None:
        return explicit
    reference = assets.get(AssetRole.style) or assets.face
    if reference is None:
        return AspectRatio(get_settings().default_aspect_ratio)
    return AspectRatio.nearest(reference.width, reference.height)


def build_composite_parts(assets: AssetMap, prompt: str) -> List[Dict[str, Any]]:
    parts: List[Dict[str, Any]] = [text_part(COMPOSITE_PROMPT.format(scene=prompt))]

    face = assets.face
    if face is not None:
        parts.append(text_part(FACE_LABEL))
        parts.append(face.inline_part())

    for role, record in assets.non_face():
        label, instruction = COMPOSITE_LABELS[role]
        parts.append(text_part(f"Reference: [{label}] - {instruction}"))
        parts.append(record.inline_part())
    return parts


def classify_response(data: Dict[str, Any]) -> GenerationOutcome:
    """Map a generateContent body to an outcome.

    Order matters: a non-normal finish reason wins over any content, an
    image wins over text, text wins over nothing.
    """
    candidates = data.get("candidates") or []
    candidate = (candidates[0] or {}) if candidates else {}

    block_reason = (data.get("promptFeedback") or {}).get("blockReason")
    if not candidates and block_reason:
        return BlockedOutcome(block_kind(block_reason), block_reason)

    finish_reason = candidate.get("finishReason")
    if finish_reason and finish_reason != NORMAL_FINISH:
        return BlockedOutcome(block_kind(finish_reason), finish_reason)

    texts = []
    for part in ((candidate.get("content") or {}).get("parts") or []):
        part = part or {}
        inline = part.get("inlineData")
        if inline and inline.get("data"):
            return ImageOutcome(decode_inline(inline), inline.get("mimeType") or "image/png")
        if part.get("text") and not part.get("thought"):
            texts.append(part["text"])

    if texts:
        return RefusalOutcome("".join(texts))
    return EmptyOutcome(finish_reason)


async def generate_composite(
    assets: AssetMap,
    prompt: str,
    aspect_ratio: Optional[AspectRatio] = None,
) -> Tuple[bytes, str]:
    settings = get_settings()
    if not assets.has_face():
        raise RequirementsNotMet("A face image is required to generate a composite")

    ratio = resolve_aspect_ratio(assets, aspect_ratio)
    parts = build_composite_parts(assets, prompt)
    generation_config = {
        "responseModalities": ["TEXT", "IMAGE"],
        "imageConfig": {"aspectRatio": ratio.value},
    }

    try:
        data = await gemini_generate_content(
            settings.image_model,
            parts,
            generation_config=generation_config,
            safety_settings=SAFETY_SETTINGS,
        )
    except GeminiError as e:
        logger.warning("composite request failed: %s", e)
        raise GenerationFailed(str(e)) from e

    try:
        outcome = classify_response(data)
    except (AttributeError, TypeError, ValueError) as e:
        raise GenerationFailed(f"malformed generation response: {str(data)[:500]}") from e

    if isinstance(outcome, ImageOutcome):
        logger.info("composite generated ratio=%s mime=%s bytes=%d", ratio.value, outcome.mime_type, len(outcome.data))
        return outcome.data, outcome.mime_type
    if isinstance(outcome, BlockedOutcome):
        logger.warning("composite blocked finish_reason=%s kind=%s", outcome.finish_reason, outcome.kind.value)
        raise GenerationBlocked(outcome.kind, outcome.finish_reason)
    if isinstance(outcome, RefusalOutcome):
        logger.warning("composite refused with text (%d chars)", len(outcome.text))
        raise GenerationRefusalText(outcome.text, settings.refusal_excerpt_chars)
    logger.warning("composite response had no image and no text")
    raise GenerationEmpty(outcome.finish_reason)
